"""Attribute reference tables built once per SOR definition."""

from dataclasses import dataclass
from typing import Dict, List, Optional
from .schema import SORDefinition


@dataclass(frozen=True)
class AttributeRef:
    """A resolved attribute: owning entity, attribute name, and uniqueness."""

    entity_id: str
    attribute_name: str
    is_unique: bool


@dataclass(frozen=True)
class RelationshipLink:
    """A direct relationship with both endpoints resolved."""

    relationship_id: str
    name: str
    from_ref: AttributeRef
    to_ref: AttributeRef

    @property
    def is_self_referential(self) -> bool:
        return self.from_ref.entity_id == self.to_ref.entity_id

    @property
    def cardinality(self) -> str:
        """Label from the child's perspective: 1:1, N:1, or N:N."""
        if self.from_ref.is_unique and self.to_ref.is_unique:
            return "1:1"
        if self.from_ref.is_unique or self.to_ref.is_unique:
            return "N:1"
        return "N:N"


class AttributeLookup:
    """Alias and dotted-name tables for resolving relationship endpoints."""

    def __init__(
        self,
        by_alias: Dict[str, AttributeRef],
        by_dotted: Dict[str, AttributeRef],
        alias_collisions: Optional[Dict[str, List[AttributeRef]]] = None,
    ):
        self.by_alias = by_alias
        self.by_dotted = by_dotted
        self.alias_collisions = alias_collisions or {}

    @classmethod
    def from_definition(cls, defn: SORDefinition) -> "AttributeLookup":
        """Build the tables in entity-id order; a reused alias keeps its first owner."""
        by_alias: Dict[str, AttributeRef] = {}
        by_dotted: Dict[str, AttributeRef] = {}
        collisions: Dict[str, List[AttributeRef]] = {}
        for entity_id in sorted(defn.entities):
            entity = defn.entities[entity_id]
            for attr in entity.attributes:
                ref = AttributeRef(entity_id, attr.name, attr.unique_id)
                alias = attr.attribute_alias
                if alias:
                    first = by_alias.setdefault(alias, ref)
                    if first != ref:
                        collisions.setdefault(alias, [first]).append(ref)
                attr_key = attr.external_id or attr.name
                by_dotted[f"{entity.external_id}.{attr_key}"] = ref
        return cls(by_alias, by_dotted, collisions)

    def resolve(self, reference: str) -> Optional[AttributeRef]:
        """Resolve an alias, falling back to the ``Entity.Attribute`` form."""
        if not reference:
            return None
        ref = self.by_alias.get(reference)
        if ref is None and "." in reference:
            ref = self.by_dotted.get(reference)
        return ref

    def suggestions(self, limit: int = 5) -> List[str]:
        """A few known references, used in error messages."""
        aliases = sorted(self.by_alias)[:limit]
        dotted = sorted(self.by_dotted)[:limit]
        return aliases + dotted

    def resolve_links(self, defn: SORDefinition) -> List[RelationshipLink]:
        """Resolved direct relationships in relationship-id order.

        Path relationships and relationships with an unresolvable endpoint
        are skipped.
        """
        links: List[RelationshipLink] = []
        for rel_id in sorted(defn.relationships):
            rel = defn.relationships[rel_id]
            if rel.is_path:
                continue
            from_ref = self.resolve(rel.from_attribute)
            to_ref = self.resolve(rel.to_attribute)
            if from_ref is None or to_ref is None:
                continue
            links.append(RelationshipLink(rel_id, rel.name or rel.display_name or rel_id, from_ref, to_ref))
        return links
