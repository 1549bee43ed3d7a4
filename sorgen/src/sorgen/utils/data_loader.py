"""Utilities for loading entity CSV files."""

from pathlib import Path
from typing import Dict, List, Tuple
import pandas as pd
from sorgen.errors import DataLoadError
from sorgen.ir.schema import SORDefinition
from sorgen.generation.row_set import RowSet
from sorgen.config.logging import get_logger

logger = get_logger(__name__)


def read_entity_csv(path: Path) -> pd.DataFrame:
    """
    Read a CSV with every cell as a string (empty cells stay empty strings).

    Raises:
        DataLoadError: If the file cannot be read or parsed
    """
    try:
        return pd.read_csv(path, dtype=str, keep_default_na=False)
    except pd.errors.EmptyDataError as e:
        raise DataLoadError(f"CSV file is empty (no header row): {path}") from e
    except pd.errors.ParserError as e:
        raise DataLoadError(f"Failed to parse CSV file {path}: {e}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise DataLoadError(f"Failed to read CSV file {path}: {e}") from e


def load_entity_row_sets(
    defn: SORDefinition, data_dir: Path
) -> Tuple[Dict[str, RowSet], List[str]]:
    """
    Load one RowSet per entity from ``data_dir``.

    Args:
        defn: SOR definition naming the expected files
        data_dir: Directory containing the CSV files

    Returns:
        (row sets keyed by entity id, sorted ids of entities whose file is missing)

    Raises:
        DataLoadError: If the directory is missing or a present file is unreadable
    """
    data_dir = Path(data_dir)
    if not data_dir.is_dir():
        raise DataLoadError(f"Data directory not found or not a directory: {data_dir}")

    row_sets: Dict[str, RowSet] = {}
    missing: List[str] = []
    for entity_id in sorted(defn.entities):
        entity = defn.entities[entity_id]
        path = data_dir / entity.file_name
        if not path.is_file():
            missing.append(entity_id)
            continue
        df = read_entity_csv(path)
        key = entity.unique_attribute
        row_sets[entity_id] = RowSet.from_frame(
            entity_id, df, key.name if key else None, source=entity.file_name
        )
        logger.debug(f"Loaded {len(df):,} rows for {entity_id} from {path}")
    return row_sets, missing
