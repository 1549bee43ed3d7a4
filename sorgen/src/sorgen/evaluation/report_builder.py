"""Validation-only runs against existing CSV files."""

import time
from pathlib import Path
from typing import Optional
from sorgen.ir.schema import SORDefinition
from sorgen.ir.validators import ensure_valid_definition
from sorgen.utils.data_loader import load_entity_row_sets
from sorgen.monitoring.statistics import compute_statistics, log_statistics
from sorgen.diagrams.er import try_render_er_diagram
from .integrity import validate_row_sets
from .models import ValidationResult
from sorgen.config.logging import get_logger

logger = get_logger(__name__)


def run_validation(
    defn: SORDefinition,
    data_dir: Path,
    generate_diagram: bool = False,
    diagram_out: Optional[Path] = None,
) -> ValidationResult:
    """
    Validate a directory of entity CSV files without modifying it.

    Args:
        defn: SOR definition describing the expected files
        data_dir: Directory containing one CSV per entity
        generate_diagram: Also write an ER diagram
        diagram_out: Diagram path (default ``er_diagram.dot`` in the working
            directory; ``data_dir`` itself is never written to)

    Returns:
        ValidationResult; data problems are reported, never raised

    Raises:
        SchemaError: If the definition is invalid
        DataLoadError: If the directory is missing or a CSV cannot be parsed
    """
    start = time.time()
    data_dir = Path(data_dir)
    logger.info(f"Validating CSV files in {data_dir}")

    ensure_valid_definition(defn)
    log_statistics(compute_statistics(defn))

    row_sets, missing = load_entity_row_sets(defn, data_dir)
    summary = validate_row_sets(defn, row_sets, missing, data_dir=str(data_dir))

    result = ValidationResult(
        data_dir=str(data_dir),
        files_validated=len(row_sets),
        records_validated=sum(len(rs) for rs in row_sets.values()),
        summary=summary,
    )

    if generate_diagram:
        path = try_render_er_diagram(defn, diagram_out or Path("er_diagram.dot"))
        result.diagram_path = str(path) if path else None

    logger.info(
        f"Validated {result.files_validated} files, {result.records_validated:,} records "
        f"in {time.time() - start:.3f}s: {len(summary.violations)} violation(s)"
    )
    return result
