"""CSV writers for generated row sets."""

import time
from pathlib import Path
from typing import Dict, List
import pandas as pd
from sorgen.errors import DataLoadError
from sorgen.ir.schema import SORDefinition
from sorgen.generation.row_set import RowSet
from sorgen.generation.error_logging import log_error
from sorgen.config.logging import get_logger

logger = get_logger(__name__)


def write_csv(df: pd.DataFrame, path: Path) -> None:
    """
    Write a single DataFrame to CSV.

    Args:
        df: DataFrame to write
        path: Output file path

    Raises:
        DataLoadError: If the file cannot be written
    """
    write_start = time.time()
    rows = len(df)
    cols = len(df.columns)

    logger.debug(f"Writing DataFrame to {path}: {rows} rows, {cols} columns")

    try:
        df.to_csv(path, index=False)
    except OSError as e:
        log_error(
            error=e,
            context={
                "rows": rows,
                "columns": cols,
                "file_path": str(path),
                "parent_dir_exists": path.parent.exists(),
            },
            operation="writing CSV file",
        )
        raise DataLoadError(f"Failed to write CSV file {path}: {e}") from e

    write_time = time.time() - write_start
    file_size_mb = path.stat().st_size / (1024 * 1024) if path.exists() else 0
    logger.info(
        f"Wrote {rows:,} rows, {cols} columns to {path}: "
        f"{file_size_mb:.2f} MB in {write_time:.3f}s"
    )


def write_row_sets(
    defn: SORDefinition,
    row_sets: Dict[str, RowSet],
    out_dir: Path,
) -> List[Path]:
    """
    Write one CSV per entity, in entity-id order.

    Returns:
        Paths of the written files

    Raises:
        DataLoadError: If the output directory or a file cannot be written
    """
    out_dir = Path(out_dir)
    try:
        out_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise DataLoadError(f"Failed to create output directory {out_dir}: {e}") from e

    written: List[Path] = []
    for entity_id in sorted(row_sets):
        entity = defn.entities[entity_id]
        path = out_dir / entity.file_name
        write_csv(row_sets[entity_id].to_frame(), path)
        written.append(path)
    return written
