"""Per-entity row-count configuration."""

from datetime import datetime
from pathlib import Path
from typing import Dict, Iterable, Optional
import yaml
from pydantic import BaseModel, Field
from .schema import SORDefinition
from sorgen.errors import CountConfigError
from sorgen.config.logging import get_logger

logger = get_logger(__name__)


class CountConfiguration(BaseModel):
    """Row counts keyed by entity external id."""

    entity_counts: Dict[str, int] = Field(default_factory=dict)
    source_file: str = ""
    loaded_at: datetime = Field(default_factory=datetime.now)

    def get_count(self, external_id: str, default: int) -> int:
        """Configured count for an entity, or ``default`` when absent or zero."""
        count = self.entity_counts.get(external_id, 0)
        return count if count != 0 else default

    def has_entity(self, external_id: str) -> bool:
        return external_id in self.entity_counts

    def validate_entities(self, entity_ids: Iterable[str]) -> None:
        """
        Check every configured entity exists and has a positive count.

        Raises:
            CountConfigError: On the first unknown entity or non-positive count
        """
        available = sorted(entity_ids)
        valid = set(available)
        for entity_id in sorted(self.entity_counts):
            count = self.entity_counts[entity_id]
            if entity_id not in valid:
                raise CountConfigError(
                    f"Entity '{entity_id}' in count configuration not found in SOR YAML\n"
                    f"Available entities: {available}",
                    entity_id=entity_id,
                    field="entity",
                    value=entity_id,
                    suggestion=f"Remove '{entity_id}' or check entity externalId spelling",
                )
            if count <= 0:
                raise CountConfigError(
                    f"Invalid count for entity '{entity_id}': {count} (expected positive integer)",
                    entity_id=entity_id,
                    field="count",
                    value=count,
                    suggestion="Use a number like 100, 1000, etc.",
                )


def load_count_configuration(path: Path) -> CountConfiguration:
    """
    Load a flat ``externalId: count`` YAML mapping.

    Args:
        path: Path to the YAML file

    Returns:
        Loaded CountConfiguration

    Raises:
        CountConfigError: If the file is missing, malformed, or not a mapping of integers
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise CountConfigError(
            f"Count configuration file not found: {path}",
            suggestion=f"Generate a template with 'sorgen init-count-config <sor.yaml> -o {path}'",
        ) from e

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise CountConfigError(
            f"Invalid YAML syntax in {path}: {e}",
            suggestion="Validate the YAML syntax with a YAML linter",
        ) from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise CountConfigError(
            f"Count configuration in {path} must be a mapping of entity externalId to count",
            value=type(data).__name__,
            suggestion="Use lines like 'Namespace/User: 100'",
        )

    counts: Dict[str, int] = {}
    for key, value in data.items():
        if isinstance(value, bool) or not isinstance(value, int):
            raise CountConfigError(
                f"Count for entity '{key}' must be an integer",
                entity_id=str(key),
                field="count",
                value=value,
                suggestion="Use a number like 100, 1000, etc.",
            )
        counts[str(key)] = value

    logger.info(f"Loaded row counts for {len(counts)} entities from {path}")
    return CountConfiguration(entity_counts=counts, source_file=str(path))


def build_row_counts(
    defn: SORDefinition,
    count_config: Optional[CountConfiguration],
    default: int,
) -> Dict[str, int]:
    """Map each entity id to its row count (uniform ``default`` without a config)."""
    counts: Dict[str, int] = {}
    for entity_id, entity in defn.entities.items():
        if count_config is None:
            counts[entity_id] = default
        else:
            counts[entity_id] = count_config.get_count(entity.external_id, default)
    return counts


def render_count_template(
    defn: SORDefinition,
    default_count: int = 100,
    source_file: str = "",
) -> str:
    """Render a commented count-configuration template for every entity."""
    lines = [
        "# Row count configuration for sorgen",
        f"# Generated from: {source_file}",
        f"# Last updated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}",
        "#",
        "# Edit the numbers below to specify how many rows to generate for each entity.",
        f"# Entities not listed here will use the default count ({default_count}).",
        "",
    ]
    entities = sorted(defn.entities.values(), key=lambda e: e.external_id)
    for entity in entities:
        lines.append(f"# Entity: {entity.external_id}")
        if entity.display_name and entity.display_name != entity.external_id:
            lines.append(f"# Name: {entity.display_name}")
        if entity.description:
            lines.append(f"# Description: {' '.join(entity.description.split())}")
        lines.append(f"{entity.external_id}: {default_count}")
        lines.append("")
    return "\n".join(lines)
