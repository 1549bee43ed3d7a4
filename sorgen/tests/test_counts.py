"""Tests for row-count configuration."""

import pytest
import yaml
from sorgen.errors import CountConfigError
from sorgen.ir.counts import (
    CountConfiguration,
    build_row_counts,
    load_count_configuration,
    render_count_template,
)


def test_load_and_get_count(tmp_path):
    path = tmp_path / "counts.yaml"
    path.write_text("Test/User: 2\nTest/Role: 10\n", encoding="utf-8")
    config = load_count_configuration(path)
    assert config.get_count("Test/User", 100) == 2
    assert config.get_count("Test/Role", 100) == 10
    assert config.get_count("Test/Other", 100) == 100
    assert config.has_entity("Test/User")
    assert not config.has_entity("Test/Other")
    assert config.source_file == str(path)


def test_zero_count_uses_default():
    config = CountConfiguration(entity_counts={"A": 0})
    assert config.get_count("A", 7) == 7


def test_missing_file(tmp_path):
    with pytest.raises(CountConfigError) as exc_info:
        load_count_configuration(tmp_path / "nope.yaml")
    assert "init-count-config" in exc_info.value.suggestion


def test_invalid_yaml(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("A: [1,\n", encoding="utf-8")
    with pytest.raises(CountConfigError):
        load_count_configuration(path)


def test_non_integer_count(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("A: many\n", encoding="utf-8")
    with pytest.raises(CountConfigError) as exc_info:
        load_count_configuration(path)
    assert exc_info.value.field == "count"


def test_validate_unknown_entity():
    config = CountConfiguration(entity_counts={"Test/Ghost": 5})
    with pytest.raises(CountConfigError) as exc_info:
        config.validate_entities(["Test/User", "Test/Role"])
    assert exc_info.value.entity_id == "Test/Ghost"
    assert "Available entities" in str(exc_info.value)


def test_validate_negative_count():
    config = CountConfiguration(entity_counts={"Test/User": -1})
    with pytest.raises(CountConfigError) as exc_info:
        config.validate_entities(["Test/User"])
    assert exc_info.value.value == -1


def test_build_row_counts(user_role_definition):
    assert build_row_counts(user_role_definition, None, 5) == {"User": 5, "Role": 5}
    config = CountConfiguration(entity_counts={"Test/Role": 10})
    assert build_row_counts(user_role_definition, config, 2) == {"User": 2, "Role": 10}


def test_render_template_parses_back(user_role_definition):
    text = render_count_template(user_role_definition, default_count=42, source_file="sor.yaml")
    assert text.startswith("# Row count configuration")
    assert "# Generated from: sor.yaml" in text
    assert yaml.safe_load(text) == {"Test/Role": 42, "Test/User": 42}
    assert text.index("Test/Role:") < text.index("Test/User:")
