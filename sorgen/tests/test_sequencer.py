"""Tests for topological sequencing."""

import networkx as nx
import pytest
from sorgen.errors import SequencingError
from sorgen.generation.graph import build_dependency_graph
from sorgen.generation.sequencer import generation_levels, sequence_entities


def test_parents_before_children(org_definition):
    order = sequence_entities(build_dependency_graph(org_definition).graph)
    assert order == ["Org", "Team", "Employee"]


def test_ties_broken_alphabetically():
    graph = nx.DiGraph()
    graph.add_nodes_from(["zeta", "alpha", "mid"])
    graph.add_edge("zeta", "beta")
    assert sequence_entities(graph) == ["alpha", "mid", "zeta", "beta"]


def test_deterministic(user_role_definition):
    first = sequence_entities(build_dependency_graph(user_role_definition).graph)
    second = sequence_entities(build_dependency_graph(user_role_definition).graph)
    assert first == second == ["User", "Role"]


def test_cycle_raises():
    graph = nx.DiGraph([("A", "B"), ("B", "A")])
    with pytest.raises(SequencingError):
        sequence_entities(graph)


def test_generation_levels(org_definition):
    graph = build_dependency_graph(org_definition).graph
    graph.add_node("Audit")
    assert generation_levels(graph) == [["Audit", "Org"], ["Team"], ["Employee"]]
