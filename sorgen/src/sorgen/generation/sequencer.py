"""Deterministic generation order over the dependency graph."""

from typing import List
import networkx as nx
from sorgen.errors import SequencingError


def sequence_entities(graph: nx.DiGraph) -> List[str]:
    """
    Topologically order entities, breaking ties by ascending id.

    Raises:
        SequencingError: If the graph contains a cycle
    """
    try:
        return list(nx.lexicographical_topological_sort(graph))
    except nx.NetworkXUnfeasible as e:
        cycle = nx.find_cycle(graph)
        path = " -> ".join(str(u) for u, _ in cycle)
        raise SequencingError(f"Dependency graph contains a cycle: {path}") from e


def generation_levels(graph: nx.DiGraph) -> List[List[str]]:
    """Groups of entities with no dependency between them, in order."""
    try:
        return [sorted(level) for level in nx.topological_generations(graph)]
    except nx.NetworkXUnfeasible as e:
        raise SequencingError("Dependency graph contains a cycle") from e
