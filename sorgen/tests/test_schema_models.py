"""Tests for SOR definition models."""

from sorgen.ir.schema import Attribute, Entity, Relationship, RelationshipPathStep, SORDefinition


def test_definition_from_camel_case(user_role_definition):
    """Test camelCase YAML keys map onto snake_case fields."""
    user = user_role_definition.entities["User"]
    assert user.external_id == "Test/User"
    assert user.attributes[0].unique_id is True
    assert user.attributes[0].attribute_alias == "user_id"
    rel = user_role_definition.relationships["role_to_user"]
    assert rel.from_attribute == "role_user_ref"
    assert rel.to_attribute == "user_id"
    assert not rel.is_path


def test_populate_by_name():
    """Test models accept Python field names too."""
    attr = Attribute(name="id", unique_id=True, attribute_alias="x")
    assert attr.unique_id
    assert attr.type == "String"
    assert not attr.list


def test_unique_attribute_and_headers():
    entity = Entity(
        external_id="NS/Thing",
        attributes=[Attribute(name="label"), Attribute(name="key", unique_id=True)],
    )
    assert entity.unique_attribute.name == "key"
    assert entity.headers == ["label", "key"]


def test_file_name_uses_last_path_segment():
    assert Entity(external_id="A/B/Widget").file_name == "Widget.csv"
    assert Entity(external_id="Widget").file_name == "Widget.csv"
    assert Entity(external_id="").file_name == "unknown.csv"


def test_path_relationship():
    rel = Relationship(path=[RelationshipPathStep(relationship="a"), RelationshipPathStep(relationship="b")])
    assert rel.is_path


def test_unknown_keys_ignored():
    defn = SORDefinition.model_validate(
        {"displayName": "X", "defaultSyncFrequency": "DAILY", "entities": {}, "auth": [{"username": "u"}]}
    )
    assert defn.display_name == "X"
    assert defn.entities == {}


def test_numeric_attribute_types():
    assert Attribute(name="n", type="Int64").is_numeric
    assert Attribute(name="n", type="Double").is_numeric
    assert not Attribute(name="n", type="String").is_numeric
