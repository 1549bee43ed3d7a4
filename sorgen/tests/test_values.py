"""Tests for synthetic value generation."""

import datetime as dt
import pytest
from sorgen.ir.schema import Attribute
from sorgen.generation.values import FieldType, ValueSynthesizer, detect_field_type, sanitize


@pytest.mark.parametrize(
    "header,expected",
    [
        ("firstName", FieldType.NAME),
        ("description", FieldType.DESCRIPTION),
        ("shortDesc", FieldType.DESCRIPTION),
        ("isActive", FieldType.BOOLEAN),
        ("archived", FieldType.BOOLEAN),
        ("createdDate", FieldType.DATE),
        ("lastUpdated", FieldType.DATE),
        ("accountStatus", FieldType.STATUS),
        ("email", FieldType.GENERIC),
    ],
)
def test_detect_field_type(header, expected):
    assert detect_field_type(header) == expected


def test_sanitize():
    assert sanitize('a,b\n"c"') == "a-b- 'c'"
    assert sanitize("1, Main St") == "1- Main St"
    assert sanitize("plain") == "plain"


def test_list_attribute_values():
    synth = ValueSynthesizer(seed=1)
    attr = Attribute(name="tags", list=True)
    for i in range(20):
        parts = synth.value_for(attr, "Item", i).split("|")
        assert 1 <= len(parts) <= 3
        assert all(parts)


def test_declared_types():
    synth = ValueSynthesizer(seed=3)
    assert 1 <= int(synth.value_for(Attribute(name="x", type="Int"), "E", 0)) <= 1000
    price = float(synth.value_for(Attribute(name="x", type="Double"), "E", 0))
    assert 1.0 <= price <= 1000.0
    assert synth.value_for(Attribute(name="x", type="Boolean"), "E", 0) == "true"
    assert synth.value_for(Attribute(name="x", type="Boolean"), "E", 1) == "false"
    dt.date.fromisoformat(synth.value_for(Attribute(name="x", type="DateTime"), "E", 0))


def test_boolean_by_header_alternates():
    synth = ValueSynthesizer(seed=0)
    attr = Attribute(name="active")
    assert [synth.value_for(attr, "E", i) for i in range(4)] == ["true", "false", "true", "false"]


def test_status_cycles():
    synth = ValueSynthesizer(seed=0)
    attr = Attribute(name="status")
    assert synth.value_for(attr, "E", 0) == "Active"
    assert synth.value_for(attr, "E", 1) == "Inactive"


def test_generic_values_have_no_commas():
    synth = ValueSynthesizer(seed=5)
    for header in ("address", "city", "code", "misc"):
        assert "," not in synth.value_for(Attribute(name=header), "E", 3)


def test_team_names_use_departments():
    synth = ValueSynthesizer(seed=0)
    assert synth.name_value("Team", 0) == "Engineering"


def test_same_seed_same_values():
    attrs = [Attribute(name="name"), Attribute(name="email"), Attribute(name="count", type="Int")]
    first = ValueSynthesizer(seed=42)
    second = ValueSynthesizer(seed=42)
    a = [first.value_for(attr, "User", i) for i in range(5) for attr in attrs]
    b = [second.value_for(attr, "User", i) for i in range(5) for attr in attrs]
    assert a == b
