"""Business validation for SOR definitions."""

from dataclasses import dataclass, field
from typing import List
from .schema import SORDefinition
from .lookup import AttributeLookup
from sorgen.errors import SchemaError
from sorgen.config.logging import get_logger

logger = get_logger(__name__)


@dataclass
class SchemaIssue:
    """Issue found while validating a SOR definition."""

    code: str  # e.g., "MISSING_UNIQUE_ID", "UNRESOLVED_FROM_ATTRIBUTE"
    location: str  # e.g., "entity_id" or "relationship_id"
    message: str
    details: dict = field(default_factory=dict)


def _validate_entities(defn: SORDefinition) -> List[SchemaIssue]:
    issues: List[SchemaIssue] = []

    if not defn.entities:
        issues.append(
            SchemaIssue(
                code="NO_ENTITIES",
                location="entities",
                message="SOR definition declares no entities",
            )
        )
        return issues

    for entity_id in sorted(defn.entities):
        entity = defn.entities[entity_id]

        if not entity.external_id:
            issues.append(
                SchemaIssue(
                    code="MISSING_EXTERNAL_ID",
                    location=entity_id,
                    message=f"entity {entity_id}: missing externalId",
                )
            )

        if not entity.attributes:
            issues.append(
                SchemaIssue(
                    code="NO_ATTRIBUTES",
                    location=entity_id,
                    message=f"entity {entity_id}: must declare at least one attribute",
                )
            )
            continue

        unique = [a.name for a in entity.attributes if a.unique_id]
        if not unique:
            issues.append(
                SchemaIssue(
                    code="MISSING_UNIQUE_ID",
                    location=entity_id,
                    message=f"entity {entity_id}: no attribute is marked uniqueId",
                    details={"attributes": entity.headers},
                )
            )
        elif len(unique) > 1:
            issues.append(
                SchemaIssue(
                    code="MULTIPLE_UNIQUE_IDS",
                    location=entity_id,
                    message=f"entity {entity_id}: exactly one uniqueId attribute allowed, found {unique}",
                    details={"unique_attributes": unique},
                )
            )

        seen = set()
        for attr in entity.attributes:
            if attr.name in seen:
                issues.append(
                    SchemaIssue(
                        code="DUPLICATE_ATTRIBUTE",
                        location=f"{entity_id}.{attr.name}",
                        message=f"entity {entity_id}: attribute '{attr.name}' declared more than once",
                    )
                )
            seen.add(attr.name)

    return issues


def _validate_aliases(lookup: AttributeLookup) -> List[SchemaIssue]:
    issues: List[SchemaIssue] = []
    for alias in sorted(lookup.alias_collisions):
        owners = [f"{r.entity_id}.{r.attribute_name}" for r in lookup.alias_collisions[alias]]
        issues.append(
            SchemaIssue(
                code="DUPLICATE_ALIAS",
                location=alias,
                message=f"attribute alias '{alias}' is used by more than one attribute: {', '.join(owners)}",
                details={"attributes": owners},
            )
        )
    return issues


def _validate_relationships(defn: SORDefinition, lookup: AttributeLookup) -> List[SchemaIssue]:
    issues: List[SchemaIssue] = []
    hint = ", ".join(lookup.suggestions())

    for rel_id in sorted(defn.relationships):
        rel = defn.relationships[rel_id]

        if rel.is_path:
            for step in rel.path:
                target = defn.relationships.get(step.relationship)
                if target is None:
                    issues.append(
                        SchemaIssue(
                            code="PATH_STEP_MISSING",
                            location=rel_id,
                            message=f"relationship {rel_id}: path references non-existent relationship '{step.relationship}'",
                        )
                    )
                elif target.is_path:
                    issues.append(
                        SchemaIssue(
                            code="NESTED_PATH",
                            location=rel_id,
                            message=f"relationship {rel_id}: path step '{step.relationship}' is itself a path relationship",
                        )
                    )
            continue

        for side, ref_text in (("FROM", rel.from_attribute), ("TO", rel.to_attribute)):
            if not ref_text:
                issues.append(
                    SchemaIssue(
                        code=f"MISSING_{side}_ATTRIBUTE",
                        location=rel_id,
                        message=f"relationship {rel_id}: {side.lower()}Attribute is empty",
                    )
                )
            elif lookup.resolve(ref_text) is None:
                issues.append(
                    SchemaIssue(
                        code=f"UNRESOLVED_{side}_ATTRIBUTE",
                        location=rel_id,
                        message=(
                            f"relationship {rel_id}: {side.lower()}Attribute '{ref_text}' does not match any "
                            f"attribute alias or Entity.Attribute name (known references include: {hint})"
                        ),
                        details={"reference": ref_text},
                    )
                )

        from_ref = lookup.resolve(rel.from_attribute)
        to_ref = lookup.resolve(rel.to_attribute)
        if from_ref is not None and from_ref == to_ref and from_ref.is_unique:
            issues.append(
                SchemaIssue(
                    code="SELF_REFERENTIAL_UNIQUE",
                    location=rel_id,
                    message=f"relationship {rel_id}: links the unique id of {from_ref.entity_id} to itself",
                )
            )

    return issues


def _log_observations(defn: SORDefinition, lookup: AttributeLookup) -> None:
    """Warn about relationship shapes that generate fine but may surprise."""
    pairs = set()
    for link in lookup.resolve_links(defn):
        if link.is_self_referential:
            continue
        if not link.from_ref.is_unique and not link.to_ref.is_unique:
            logger.warning(
                f"Relationship {link.relationship_id} links two non-unique attributes "
                f"({link.from_ref.entity_id}.{link.from_ref.attribute_name} -> "
                f"{link.to_ref.entity_id}.{link.to_ref.attribute_name}); treating the 'to' side as parent"
            )
        pair = (link.from_ref.entity_id, link.to_ref.entity_id)
        if (pair[1], pair[0]) in pairs:
            logger.warning(
                f"Bidirectional relationships between {pair[0]} and {pair[1]}; "
                f"one direction will be dropped from the dependency graph"
            )
        pairs.add(pair)


def validate_definition(defn: SORDefinition) -> List[SchemaIssue]:
    """
    Validate a SOR definition.

    Args:
        defn: SORDefinition to validate

    Returns:
        List of SchemaIssue objects (empty if validation passes)
    """
    lookup = AttributeLookup.from_definition(defn)
    issues = _validate_entities(defn)
    issues.extend(_validate_aliases(lookup))
    issues.extend(_validate_relationships(defn, lookup))
    if not issues:
        _log_observations(defn, lookup)
    return issues


def ensure_valid_definition(defn: SORDefinition) -> None:
    """Raise SchemaError listing every issue when the definition is invalid."""
    issues = validate_definition(defn)
    if issues:
        for issue in issues:
            logger.error(f"[{issue.code}] {issue.message}")
        raise SchemaError(issues)
