"""End-to-end tests for the generation pipeline."""

from collections import Counter
import pandas as pd
import pytest
from sorgen.errors import CountConfigError, GenerationError, SchemaError
from sorgen.ir.counts import CountConfiguration
from sorgen.ir.schema import SORDefinition
from sorgen.generation.cardinality import CardinalityWarning
from sorgen.generation.engine import GenerationOptions, run_generation
from sorgen.evaluation.report_builder import run_validation


def _read(path):
    return pd.read_csv(path, dtype=str, keep_default_na=False)


def test_generate_user_role(tmp_path, user_role_definition):
    out = tmp_path / "out"
    result = run_generation(
        user_role_definition, out, GenerationOptions(default_row_count=5, auto_cardinality=True, seed=1)
    )
    assert result.entities_processed == 2
    assert result.total_rows == 10
    assert result.generation_order == ["User", "Role"]
    assert [p.name for p in result.files_written] == ["Role.csv", "User.csv"]
    assert result.validation is not None and result.validation.passed

    users = _read(out / "User.csv")
    roles = _read(out / "Role.csv")
    assert list(users.columns) == ["id", "name", "email"]
    assert list(roles.columns) == ["id", "roleId", "name"]
    assert Counter(roles["roleId"]) == Counter({uid: 1 for uid in users["id"]})


def test_count_configuration_fan_out(tmp_path, user_role_definition):
    config = CountConfiguration(entity_counts={"Test/User": 2, "Test/Role": 10})
    result = run_generation(
        user_role_definition,
        tmp_path,
        GenerationOptions(count_config=config, auto_cardinality=True, seed=3),
    )
    assert result.rows_per_entity == {"User": 2, "Role": 10}
    roles = _read(tmp_path / "Role.csv")
    assert set(Counter(roles["roleId"]).values()) == {5}
    assert result.cardinality_warnings == []


def test_uneven_counts_warn(tmp_path, user_role_definition):
    config = CountConfiguration(entity_counts={"Test/User": 3, "Test/Role": 10})
    result = run_generation(
        user_role_definition,
        tmp_path,
        GenerationOptions(count_config=config, auto_cardinality=True, seed=3),
    )
    assert len(result.cardinality_warnings) == 1
    warning = result.cardinality_warnings[0]
    assert isinstance(warning, CardinalityWarning)
    assert (warning.relationship_name, warning.source_entity, warning.target_entity) == (
        "role_to_user",
        "Role",
        "User",
    )
    assert (warning.source_count, warning.target_count) == (10, 3)
    assert str(warning).startswith("Cardinality warning: Relationship 'role_to_user'")
    assert result.validation.passed


def test_unknown_entity_in_count_config(tmp_path, user_role_definition):
    config = CountConfiguration(entity_counts={"Test/Ghost": 2})
    with pytest.raises(CountConfigError):
        run_generation(user_role_definition, tmp_path / "out", GenerationOptions(count_config=config))
    assert not (tmp_path / "out").exists()


def test_same_seed_same_files(tmp_path, org_definition):
    options = GenerationOptions(default_row_count=8, auto_cardinality=True, seed=99)
    run_generation(org_definition, tmp_path / "a", options)
    run_generation(org_definition, tmp_path / "b", options)
    for name in ("Org.csv", "Team.csv", "Employee.csv"):
        assert (tmp_path / "a" / name).read_bytes() == (tmp_path / "b" / name).read_bytes()


def test_non_positive_rows_rejected(tmp_path, user_role_definition):
    with pytest.raises(GenerationError):
        run_generation(user_role_definition, tmp_path / "out", GenerationOptions(default_row_count=0))
    assert not (tmp_path / "out").exists()


def test_unresolved_reference_writes_nothing(tmp_path, user_role_doc):
    user_role_doc["relationships"]["role_to_user"]["fromAttribute"] = "no_such_alias"
    defn = SORDefinition.model_validate(user_role_doc)
    out = tmp_path / "out"
    with pytest.raises(SchemaError) as exc_info:
        run_generation(defn, out, GenerationOptions(default_row_count=5))
    assert any(i.code == "UNRESOLVED_FROM_ATTRIBUTE" for i in exc_info.value.issues)
    assert not out.exists()


def test_generate_then_validate(tmp_path, org_definition):
    run_generation(
        org_definition,
        tmp_path,
        GenerationOptions(default_row_count=20, auto_cardinality=True, validate_output=False, seed=5),
    )
    report = run_validation(org_definition, tmp_path)
    assert report.passed
    assert report.files_validated == 3
    assert report.records_validated == 60


def test_scalar_child_of_list_parent_round_trips(tmp_path):
    defn = SORDefinition.model_validate(
        {
            "entities": {
                "Team": {
                    "externalId": "NS/Team",
                    "attributes": [
                        {"name": "id", "uniqueId": True},
                        {"name": "tags", "list": True, "attributeAlias": "team_tags"},
                    ],
                },
                "Emp": {
                    "externalId": "NS/Emp",
                    "attributes": [
                        {"name": "id", "uniqueId": True},
                        {"name": "tag", "attributeAlias": "emp_tag"},
                    ],
                },
            },
            "relationships": {"emp_tag": {"fromAttribute": "emp_tag", "toAttribute": "team_tags"}},
        }
    )
    result = run_generation(defn, tmp_path, GenerationOptions(default_row_count=10, seed=3))
    assert result.validation.passed, result.validation.messages
    assert not any("|" in tag for tag in _read(tmp_path / "Emp.csv")["tag"])

    report = run_validation(defn, tmp_path)
    assert report.passed


def test_uniform_mode_org(tmp_path, org_definition):
    result = run_generation(org_definition, tmp_path, GenerationOptions(default_row_count=7, seed=2))
    assert result.generation_order == ["Org", "Team", "Employee"]
    assert result.generation_levels == [["Org"], ["Team"], ["Employee"]]
    assert result.validation.passed
    assert result.graph_warnings == []


def test_cycle_is_broken_and_linked_later(tmp_path):
    defn = SORDefinition.model_validate(
        {
            "entities": {
                "A": {
                    "externalId": "NS/A",
                    "attributes": [
                        {"name": "id", "uniqueId": True, "attributeAlias": "a_id"},
                        {"name": "bId", "attributeAlias": "a_b"},
                    ],
                },
                "B": {
                    "externalId": "NS/B",
                    "attributes": [
                        {"name": "id", "uniqueId": True, "attributeAlias": "b_id"},
                        {"name": "aId", "attributeAlias": "b_a"},
                    ],
                },
            },
            "relationships": {
                "r1": {"fromAttribute": "b_a", "toAttribute": "a_id"},
                "r2": {"fromAttribute": "a_b", "toAttribute": "b_id"},
            },
        }
    )
    result = run_generation(defn, tmp_path, GenerationOptions(default_row_count=6, seed=4))
    assert result.generation_order == ["A", "B"]
    assert any("r2" in w for w in result.graph_warnings)
    assert result.validation.passed


def test_diagram_written_next_to_output(tmp_path, monkeypatch, user_role_definition):
    monkeypatch.setattr("sorgen.diagrams.er.shutil.which", lambda name: None)
    result = run_generation(
        user_role_definition, tmp_path, GenerationOptions(default_row_count=3, generate_diagram=True)
    )
    assert result.diagram_path == tmp_path / "er_diagram.dot"
    assert result.diagram_path.exists()
