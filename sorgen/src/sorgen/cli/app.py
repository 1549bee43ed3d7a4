"""Typer CLI application."""

from pathlib import Path
from typing import Optional
import typer

from sorgen.config.settings import get_settings
from sorgen.config.logging import setup_logging
from sorgen.errors import CountConfigError, DataLoadError, GenerationError, SchemaError, SequencingError
from sorgen.utils.schema_io import load_sor_definition
from sorgen.ir.counts import load_count_configuration, render_count_template
from sorgen.generation.engine.pipeline import GenerationOptions, run_generation
from sorgen.evaluation.report_builder import run_validation
from sorgen.monitoring.statistics import compute_statistics

app = typer.Typer(help="sorgen: referentially consistent CSV test data from SOR definitions")

_FAILURES = (SchemaError, CountConfigError, GenerationError, SequencingError, DataLoadError)


def _fail(error: Exception) -> None:
    typer.echo(f"Error: {error}", err=True)
    raise typer.Exit(1)


@app.command()
def generate(
    schema: Path = typer.Argument(..., help="SOR definition YAML file"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Output directory"),
    rows: Optional[int] = typer.Option(None, "--rows", "-n", help="Rows per entity"),
    count_config: Optional[Path] = typer.Option(
        None, "--count-config", "-c", help="YAML file of per-entity row counts"
    ),
    auto_cardinality: bool = typer.Option(
        False, "--auto-cardinality", "-a", help="Infer fan-out from row counts"
    ),
    validate: bool = typer.Option(True, "--validate/--no-validate", help="Validate the generated data"),
    diagram: bool = typer.Option(False, "--diagram", "-d", help="Write an ER diagram"),
    seed: Optional[int] = typer.Option(None, "--seed", help="Random seed"),
):
    """
    Generate one CSV per entity of a SOR definition.

    Options not given on the command line fall back to SORGEN_* settings.
    """
    setup_logging()
    settings = get_settings()
    options = GenerationOptions(
        default_row_count=rows if rows is not None else settings.default_row_count,
        auto_cardinality=auto_cardinality or settings.auto_cardinality,
        validate_output=validate and settings.validate_output,
        generate_diagram=diagram or settings.generate_diagram,
        seed=seed if seed is not None else settings.seed,
    )
    out_dir = output or settings.output_dir

    try:
        defn = load_sor_definition(schema)
        if count_config is not None:
            options.count_config = load_count_configuration(count_config)
        typer.echo(f"Generating data for '{defn.display_name or schema.stem}' into {out_dir}")
        result = run_generation(defn, out_dir, options)
    except _FAILURES as e:
        _fail(e)

    for message in result.graph_warnings:
        typer.echo(f"Warning: {message}", err=True)
    for card_warning in result.cardinality_warnings:
        typer.echo(str(card_warning), err=True)

    typer.echo(
        f"✓ Generated {result.total_rows:,} rows for {result.entities_processed} entities "
        f"({len(result.files_written)} files)"
    )
    for entity_id in result.generation_order:
        typer.echo(f"  {entity_id}: {result.rows_per_entity.get(entity_id, 0):,} rows")
    if result.diagram_path:
        typer.echo(f"  ER diagram: {result.diagram_path}")

    if result.validation is not None:
        if result.validation.passed:
            typer.echo("✓ Validation passed")
        else:
            typer.echo(f"Validation found {len(result.validation.violations)} violation(s):", err=True)
            for message in result.validation.messages:
                typer.echo(f"  - {message}", err=True)
            raise typer.Exit(1)


@app.command()
def validate(
    schema: Path = typer.Argument(..., help="SOR definition YAML file"),
    data_dir: Path = typer.Argument(..., help="Directory of existing entity CSV files"),
    diagram: bool = typer.Option(False, "--diagram", "-d", help="Write an ER diagram to the working directory"),
):
    """
    Validate existing CSV files against a SOR definition (files are not modified).
    """
    setup_logging()
    try:
        defn = load_sor_definition(schema)
        result = run_validation(defn, data_dir, generate_diagram=diagram)
    except _FAILURES as e:
        _fail(e)

    typer.echo(f"Validated {result.files_validated} files, {result.records_validated:,} records")
    if result.diagram_path:
        typer.echo(f"  ER diagram: {result.diagram_path}")
    if result.passed:
        typer.echo("✓ Validation passed")
        return
    typer.echo(f"Validation found {len(result.violations)} violation(s):", err=True)
    for message in result.violations:
        typer.echo(f"  - {message}", err=True)
    raise typer.Exit(1)


@app.command("init-count-config")
def init_count_config(
    schema: Path = typer.Argument(..., help="SOR definition YAML file"),
    default: int = typer.Option(100, "--default", "-n", help="Row count written for each entity"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write to a file instead of stdout"),
):
    """Write a row-count configuration template for every entity."""
    # stdout carries the template; only errors are logged, to stderr
    setup_logging(level="ERROR")
    try:
        defn = load_sor_definition(schema)
    except _FAILURES as e:
        _fail(e)

    text = render_count_template(defn, default_count=default, source_file=str(schema))
    if output is None:
        typer.echo(text)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text, encoding="utf-8")
    typer.echo(f"✓ Count configuration template written to {output}")


@app.command()
def stats(schema: Path = typer.Argument(..., help="SOR definition YAML file")):
    """Print entity, attribute and relationship statistics."""
    setup_logging(level="WARNING")
    try:
        defn = load_sor_definition(schema)
    except _FAILURES as e:
        _fail(e)

    for line in compute_statistics(defn).summary_lines():
        typer.echo(line)


def main():
    app()


if __name__ == "__main__":
    main()
