"""Entity dependency graph built from relationship uniqueness."""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple
import networkx as nx
from sorgen.ir.schema import SORDefinition
from sorgen.ir.lookup import AttributeLookup, AttributeRef, RelationshipLink
from sorgen.generation.constants import ID_REFERENCE_MARKERS
from sorgen.config.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class DroppedEdge:
    """An edge left out of the graph to keep it acyclic."""

    relationship_id: str
    parent: str
    child: str
    reason: str


@dataclass
class GraphBuildResult:
    """
    Outcome of building the dependency graph.

    ``degraded`` is True when some relationship did not make it into the
    graph (unresolved endpoint or cycle prevention); ``warnings`` says why.
    """

    graph: nx.DiGraph
    links: List[RelationshipLink] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    dropped_edges: List[DroppedEdge] = field(default_factory=list)

    @property
    def degraded(self) -> bool:
        return bool(self.warnings)

    def is_dropped(self, relationship_id: str) -> bool:
        return any(d.relationship_id == relationship_id for d in self.dropped_edges)


def _looks_like_reference(attribute_name: str) -> bool:
    return any(marker in attribute_name for marker in ID_REFERENCE_MARKERS)


def orient_link(link: RelationshipLink) -> Tuple[AttributeRef, AttributeRef]:
    """
    Decide which end of a relationship is the parent.

    Returns:
        (parent, child): the parent entity's rows must be generated first

    Exactly one unique end makes that end the parent. With both ends unique,
    a from-attribute named like a reference (``accountId``) points at the
    parent on the to side; when neither name carries the marker the to side
    is still used, which is a known limitation for PK-to-PK links. With no
    unique end the from side is taken as the child.
    """
    from_ref, to_ref = link.from_ref, link.to_ref
    if from_ref.is_unique and not to_ref.is_unique:
        return from_ref, to_ref
    if to_ref.is_unique and not from_ref.is_unique:
        return to_ref, from_ref
    if from_ref.is_unique and not _looks_like_reference(from_ref.attribute_name):
        logger.debug(
            f"Relationship {link.relationship_id}: PK-to-PK link without an identifier marker, "
            f"defaulting parent to {to_ref.entity_id}"
        )
    return to_ref, from_ref


def build_dependency_graph(
    defn: SORDefinition,
    prevent_cycles: bool = True,
    lookup: Optional[AttributeLookup] = None,
) -> GraphBuildResult:
    """
    Build the entity dependency graph.

    Args:
        defn: SOR definition
        prevent_cycles: Drop (and report) edges that would close a cycle.
            With False the graph may be cyclic; only suitable for layout.
        lookup: Prebuilt attribute lookup (built from ``defn`` when omitted)

    Returns:
        GraphBuildResult with an edge parent -> child per ordering constraint
    """
    lookup = lookup or AttributeLookup.from_definition(defn)
    graph = nx.DiGraph()
    graph.add_nodes_from(sorted(defn.entities))
    result = GraphBuildResult(graph=graph)

    for rel_id in sorted(defn.relationships):
        rel = defn.relationships[rel_id]
        if rel.is_path:
            continue
        from_ref = lookup.resolve(rel.from_attribute)
        to_ref = lookup.resolve(rel.to_attribute)
        if from_ref is None or to_ref is None:
            msg = f"Relationship {rel_id} skipped: endpoint could not be resolved"
            logger.debug(msg)
            result.warnings.append(msg)
            continue

        link = RelationshipLink(rel_id, rel.name or rel.display_name or rel_id, from_ref, to_ref)
        result.links.append(link)
        if link.is_self_referential:
            continue

        parent, child = orient_link(link)
        p, c = parent.entity_id, child.entity_id
        if graph.has_edge(p, c):
            graph.edges[p, c]["relationships"].append(rel_id)
            continue

        if prevent_cycles:
            reason = None
            if graph.has_edge(c, p):
                reason = "reverse edge already exists"
            elif nx.has_path(graph, c, p):
                reason = "edge would create a cycle"
            if reason is not None:
                result.dropped_edges.append(DroppedEdge(rel_id, p, c, reason))
                msg = f"Relationship {rel_id} ({p} -> {c}) dropped from dependency graph: {reason}"
                logger.warning(msg)
                result.warnings.append(msg)
                continue

        graph.add_edge(p, c, relationships=[rel_id])

    logger.debug(
        f"Dependency graph: {graph.number_of_nodes()} entities, {graph.number_of_edges()} edges, "
        f"{len(result.dropped_edges)} dropped"
    )
    return result
