"""Utilities for loading and saving SOR definitions from/to YAML files."""

from pathlib import Path
import yaml
from pydantic import ValidationError
from sorgen.errors import DataLoadError, SchemaError
from sorgen.ir.schema import SORDefinition
from sorgen.ir.validators import SchemaIssue, ensure_valid_definition
from sorgen.config.logging import get_logger

logger = get_logger(__name__)


def load_sor_definition(path: Path, validate: bool = True) -> SORDefinition:
    """
    Load a SOR definition from a YAML file.

    Args:
        path: Path to the YAML file
        validate: Run business validation after structural parsing

    Returns:
        Loaded SORDefinition

    Raises:
        DataLoadError: If the file cannot be read or is not valid YAML
        SchemaError: If the document does not describe a valid SOR
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise DataLoadError(f"Failed to read SOR definition {path}: {e}") from e

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise DataLoadError(f"Failed to parse YAML in {path}: {e}") from e

    if not isinstance(data, dict):
        raise SchemaError(
            [
                SchemaIssue(
                    code="INVALID_DOCUMENT",
                    location=str(path),
                    message=f"{path}: top level must be a mapping, got {type(data).__name__}",
                )
            ]
        )

    try:
        defn = SORDefinition.model_validate(data)
    except ValidationError as e:
        issues = [
            SchemaIssue(
                code="INVALID_STRUCTURE",
                location=".".join(str(p) for p in err["loc"]),
                message=err["msg"],
                details={"type": err["type"]},
            )
            for err in e.errors()
        ]
        raise SchemaError(issues) from e

    logger.info(
        f"Loaded SOR '{defn.display_name}' from {path}: "
        f"{len(defn.entities)} entities, {len(defn.relationships)} relationships"
    )
    if validate:
        ensure_valid_definition(defn)
    return defn


def save_sor_definition(defn: SORDefinition, path: Path) -> None:
    """
    Save a SOR definition as YAML using its camelCase field names.

    Note:
        Creates parent directories if they don't exist.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    data = defn.model_dump(by_alias=True, exclude_defaults=True)
    path.write_text(yaml.safe_dump(data, sort_keys=False), encoding="utf-8")
