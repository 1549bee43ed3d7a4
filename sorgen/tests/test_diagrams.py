"""Tests for ER diagram generation."""

from sorgen.diagrams.er import build_digraph, diagram_model, render_er_diagram


def test_diagram_model(org_definition):
    entities, relationships = diagram_model(org_definition)
    assert [e.id for e in entities] == ["Employee", "Org", "Team"]
    employee = entities[0]
    assert employee.display_name == "Employee"
    assert employee.attributes[0] == "id (PK)"

    by_name = {r.name: r for r in relationships}
    assert set(by_name) == {"employee_groups", "employee_manager", "employee_team", "team_org"}
    team_org = by_name["team_org"]
    assert (team_org.from_entity, team_org.to_entity) == ("Team", "Org")
    assert (team_org.from_attribute, team_org.to_attribute) == ("orgId", "id")


def test_digraph_source(user_role_definition):
    source = build_digraph(user_role_definition).source
    assert "Role -> User" in source
    assert 'label="roleId -> id"' in source
    assert "id (PK)" in source


def test_render_without_graphviz(tmp_path, monkeypatch, user_role_definition):
    monkeypatch.setattr("sorgen.diagrams.er.shutil.which", lambda name: None)
    path = render_er_diagram(user_role_definition, tmp_path / "diagram.svg")
    assert path == tmp_path / "diagram.dot"
    assert "digraph" in path.read_text(encoding="utf-8")
