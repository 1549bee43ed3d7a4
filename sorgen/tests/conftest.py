"""Shared fixtures for sorgen tests."""

import pytest
import yaml
from sorgen.ir.schema import SORDefinition

USER_ROLE_DOC = {
    "displayName": "Test SOR",
    "description": "Users and roles",
    "entities": {
        "User": {
            "displayName": "User",
            "externalId": "Test/User",
            "attributes": [
                {"name": "id", "externalId": "id", "uniqueId": True, "attributeAlias": "user_id"},
                {"name": "name", "externalId": "name", "attributeAlias": "user_name"},
                {"name": "email", "externalId": "email", "attributeAlias": "user_email"},
            ],
        },
        "Role": {
            "displayName": "Role",
            "externalId": "Test/Role",
            "attributes": [
                {"name": "id", "externalId": "id", "uniqueId": True, "attributeAlias": "role_id"},
                {"name": "roleId", "externalId": "roleId", "attributeAlias": "role_user_ref"},
                {"name": "name", "externalId": "name", "attributeAlias": "role_name"},
            ],
        },
    },
    "relationships": {
        "role_to_user": {
            "displayName": "Role user",
            "name": "role_to_user",
            "fromAttribute": "role_user_ref",
            "toAttribute": "user_id",
        },
    },
}


ORG_DOC = {
    "displayName": "Org SOR",
    "entities": {
        "Org": {
            "displayName": "Organization",
            "externalId": "Corp/Org",
            "attributes": [
                {"name": "id", "uniqueId": True, "attributeAlias": "org_id"},
                {"name": "name"},
            ],
        },
        "Team": {
            "displayName": "Team",
            "externalId": "Corp/Team",
            "attributes": [
                {"name": "id", "uniqueId": True, "attributeAlias": "team_id"},
                {"name": "orgId", "attributeAlias": "team_org"},
                {"name": "name"},
            ],
        },
        "Employee": {
            "displayName": "Employee",
            "externalId": "Corp/Employee",
            "attributes": [
                {"name": "id", "uniqueId": True, "attributeAlias": "emp_id"},
                {"name": "teamId", "attributeAlias": "emp_team"},
                {"name": "managerId", "attributeAlias": "emp_manager"},
                {"name": "groupIds", "attributeAlias": "emp_groups", "list": True},
                {"name": "active"},
                {"name": "createdDate"},
            ],
        },
    },
    "relationships": {
        "employee_manager": {"name": "employee_manager", "fromAttribute": "emp_manager", "toAttribute": "emp_id"},
        "employee_team": {"name": "employee_team", "fromAttribute": "emp_team", "toAttribute": "team_id"},
        "team_org": {"name": "team_org", "fromAttribute": "Corp/Team.orgId", "toAttribute": "Corp/Org.id"},
        "employee_groups": {"name": "employee_groups", "fromAttribute": "emp_groups", "toAttribute": "team_id"},
        "employee_org": {
            "name": "employee_org",
            "path": [
                {"relationship": "employee_team", "direction": "Direct"},
                {"relationship": "team_org", "direction": "Direct"},
            ],
        },
    },
}


@pytest.fixture
def user_role_doc():
    return yaml.safe_load(yaml.safe_dump(USER_ROLE_DOC))


@pytest.fixture
def user_role_definition(user_role_doc):
    return SORDefinition.model_validate(user_role_doc)


@pytest.fixture
def org_definition():
    return SORDefinition.model_validate(yaml.safe_load(yaml.safe_dump(ORG_DOC)))


@pytest.fixture
def user_role_yaml(tmp_path, user_role_doc):
    path = tmp_path / "sor.yaml"
    path.write_text(yaml.safe_dump(user_role_doc, sort_keys=False), encoding="utf-8")
    return path
