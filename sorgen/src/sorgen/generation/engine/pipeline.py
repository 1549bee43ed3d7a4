"""Main pipeline for SOR definition -> CSV generation."""

import time
from pathlib import Path
from typing import Dict, List, Optional
from pydantic import BaseModel, Field
from sorgen.errors import GenerationError
from sorgen.ir.schema import SORDefinition
from sorgen.ir.counts import CountConfiguration, build_row_counts
from sorgen.ir.lookup import AttributeLookup
from sorgen.ir.validators import ensure_valid_definition
from sorgen.generation.constants import DEFAULT_ROW_COUNT
from sorgen.generation.graph import build_dependency_graph
from sorgen.generation.sequencer import generation_levels, sequence_entities
from sorgen.generation.cardinality import (
    CardinalityWarning,
    cardinality_warnings,
    plan_links,
)
from sorgen.generation.error_logging import log_error
from sorgen.evaluation.integrity import validate_row_sets
from sorgen.evaluation.models import ValidationSummary
from sorgen.monitoring.statistics import compute_statistics, log_statistics
from sorgen.diagrams.er import try_render_er_diagram
from .generator import RowGenerator
from .writer import write_row_sets
from sorgen.config.logging import get_logger

logger = get_logger(__name__)


class GenerationOptions(BaseModel):
    """Everything a generation run needs besides the schema and output directory."""

    default_row_count: int = DEFAULT_ROW_COUNT
    count_config: Optional[CountConfiguration] = None
    auto_cardinality: bool = False
    prevent_cycles: bool = True
    validate_output: bool = True
    generate_diagram: bool = False
    seed: Optional[int] = None


class GenerationResult(BaseModel):
    """Summary of a generation run."""

    entities_processed: int = 0
    rows_per_entity: Dict[str, int] = Field(default_factory=dict)
    total_rows: int = 0
    files_written: List[Path] = Field(default_factory=list)
    generation_order: List[str] = Field(default_factory=list)
    generation_levels: List[List[str]] = Field(default_factory=list)
    graph_warnings: List[str] = Field(default_factory=list)
    cardinality_warnings: List[CardinalityWarning] = Field(default_factory=list)
    diagram_path: Optional[Path] = None
    validation: Optional[ValidationSummary] = None


def run_generation(
    defn: SORDefinition,
    out_dir: Path,
    options: Optional[GenerationOptions] = None,
) -> GenerationResult:
    """
    Generate one CSV per entity.

    Args:
        defn: SOR definition
        out_dir: Output directory for CSV files
        options: Run options (defaults when omitted)

    Returns:
        GenerationResult

    Raises:
        SchemaError: If the definition is invalid (nothing is written)
        CountConfigError: If the count configuration names unknown entities or bad counts
        GenerationError: On invalid counts or a broken generation invariant
        DataLoadError: If output cannot be written
    """
    options = options or GenerationOptions()
    pipeline_start = time.time()
    out_dir = Path(out_dir)
    logger.info(
        f"Starting data generation (seed={options.seed}, auto_cardinality={options.auto_cardinality}, "
        f"output_dir={out_dir})"
    )

    ensure_valid_definition(defn)
    log_statistics(compute_statistics(defn))

    if options.count_config is not None:
        options.count_config.validate_entities(e.external_id for e in defn.entities.values())
    row_counts = build_row_counts(defn, options.count_config, options.default_row_count)
    bad = {eid: n for eid, n in row_counts.items() if n <= 0}
    if bad:
        raise GenerationError(f"row counts must be positive: {bad}")

    lookup = AttributeLookup.from_definition(defn)
    graph_result = build_dependency_graph(defn, prevent_cycles=options.prevent_cycles, lookup=lookup)
    order = sequence_entities(graph_result.graph)
    logger.info(f"Generation order: {' -> '.join(order)}")
    levels = generation_levels(graph_result.graph)
    logger.debug(f"Generation levels (no dependencies within a level): {levels}")

    plans = plan_links(graph_result.links, row_counts, options.auto_cardinality)
    for plan in plans:
        plan.deferred = graph_result.is_dropped(plan.relationship_id)
    warnings: List[CardinalityWarning] = cardinality_warnings(
        plans,
        configured_counts=options.count_config is not None,
        auto_cardinality=options.auto_cardinality,
    )

    generator = RowGenerator(defn, row_counts, plans, seed=options.seed)
    gen_start = time.time()
    try:
        row_sets = generator.generate_all(order)
    except GenerationError as e:
        log_error(
            error=e,
            context={"entities": len(order), "generated": len(generator.row_sets)},
            operation="row generation",
        )
        raise
    logger.info(f"Row generation completed in {time.time() - gen_start:.3f}s")

    files = write_row_sets(defn, row_sets, out_dir)

    result = GenerationResult(
        entities_processed=len(row_sets),
        rows_per_entity={eid: len(rs) for eid, rs in row_sets.items()},
        total_rows=sum(len(rs) for rs in row_sets.values()),
        files_written=files,
        generation_order=order,
        generation_levels=levels,
        graph_warnings=graph_result.warnings + generator.warnings,
        cardinality_warnings=warnings,
    )

    if options.validate_output:
        result.validation = validate_row_sets(defn, row_sets)

    if options.generate_diagram:
        result.diagram_path = try_render_er_diagram(defn, out_dir / "er_diagram.dot")

    logger.info(
        f"Data generation completed: {result.entities_processed} entities, "
        f"{result.total_rows:,} rows, {len(files)} files "
        f"(total time: {time.time() - pipeline_start:.3f}s)"
    )
    return result
