"""Summary statistics for a SOR definition."""

from collections import Counter
from typing import Dict, List
from pydantic import BaseModel, Field
from sorgen.ir.schema import SORDefinition
from sorgen.config.logging import get_logger

logger = get_logger(__name__)

NO_NAMESPACE = "(no namespace)"


class GraphStatistics(BaseModel):
    """Counts of entities, attributes and relationships."""

    name: str = ""
    description: str = ""
    entity_count: int = 0
    attribute_count: int = 0
    unique_attribute_count: int = 0
    indexed_attribute_count: int = 0
    list_attribute_count: int = 0
    relationship_count: int = 0
    direct_relationship_count: int = 0
    path_relationship_count: int = 0
    namespaces: Dict[str, int] = Field(default_factory=dict)

    def summary_lines(self) -> List[str]:
        lines = [
            f"SOR: {self.name or '(unnamed)'}",
            f"Entities: {self.entity_count}",
            (
                f"Attributes: {self.attribute_count} "
                f"(unique: {self.unique_attribute_count}, indexed: {self.indexed_attribute_count}, "
                f"list: {self.list_attribute_count})"
            ),
            (
                f"Relationships: {self.relationship_count} "
                f"(direct: {self.direct_relationship_count}, path: {self.path_relationship_count})"
            ),
        ]
        if self.namespaces:
            lines.append("Namespaces:")
            for prefix in sorted(self.namespaces):
                lines.append(f"  {prefix}: {self.namespaces[prefix]}")
        return lines


def namespace_of(external_id: str) -> str:
    """Prefix before the first '/', or the no-namespace bucket."""
    if "/" in external_id:
        prefix = external_id.split("/", 1)[0]
        if prefix:
            return prefix
    return NO_NAMESPACE


def compute_statistics(defn: SORDefinition) -> GraphStatistics:
    """Compute statistics for a SOR definition."""
    stats = GraphStatistics(
        name=defn.display_name,
        description=defn.description,
        entity_count=len(defn.entities),
    )
    namespaces: Counter = Counter()
    for entity in defn.entities.values():
        namespaces[namespace_of(entity.external_id)] += 1
        for attr in entity.attributes:
            stats.attribute_count += 1
            stats.unique_attribute_count += int(attr.unique_id)
            stats.indexed_attribute_count += int(attr.indexed)
            stats.list_attribute_count += int(attr.list)

    for rel in defn.relationships.values():
        stats.relationship_count += 1
        if rel.is_path:
            stats.path_relationship_count += 1
        else:
            stats.direct_relationship_count += 1

    stats.namespaces = dict(namespaces)
    return stats


def log_statistics(stats: GraphStatistics) -> None:
    for line in stats.summary_lines():
        logger.info(line)
