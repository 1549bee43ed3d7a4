"""Uniqueness and referential integrity checks over entity row sets."""

from collections import defaultdict
from typing import Dict, Iterable, List, Optional
from sorgen.ir.schema import SORDefinition
from sorgen.ir.lookup import AttributeLookup, AttributeRef
from sorgen.generation.row_set import RowSet
from sorgen.generation.graph import orient_link
from sorgen.generation.constants import LIST_DELIMITER
from .models import ValidationSummary, Violation
from sorgen.config.logging import get_logger

logger = get_logger(__name__)


def check_uniqueness(entity_id: str, row_set: RowSet) -> List[Violation]:
    """
    Report duplicate and empty values in the entity's unique-id column.

    One violation per duplicated value, listing the 1-based data rows it
    appears in.
    """
    violations: List[Violation] = []
    attr = row_set.key_attribute
    source = row_set.source or entity_id
    if attr is None:
        return violations
    if row_set.headers and attr not in row_set.headers:
        violations.append(
            Violation(
                kind="uniqueness",
                entity_id=entity_id,
                message=f"entity {entity_id} ({source}): unique attribute column '{attr}' not found",
            )
        )
        return violations

    seen: Dict[str, List[int]] = defaultdict(list)
    for row in row_set:
        value = row.values.get(attr, "")
        if not value:
            violations.append(
                Violation(
                    kind="uniqueness",
                    entity_id=entity_id,
                    value="",
                    rows=[row.index + 1],
                    message=f"entity {entity_id} ({source}): empty value for unique attribute '{attr}' in row {row.index + 1}",
                )
            )
            continue
        seen[value].append(row.index + 1)

    for value, rows in seen.items():
        if len(rows) < 2:
            continue
        violations.append(
            Violation(
                kind="uniqueness",
                entity_id=entity_id,
                value=value,
                rows=rows,
                message=(
                    f"entity {entity_id} ({source}): duplicate value '{value}' for unique attribute "
                    f"'{attr}' in rows {', '.join(str(r) for r in rows)}"
                ),
            )
        )
    return violations


def _split(value: str, is_list: bool) -> Iterable[str]:
    if is_list:
        return [v for v in value.split(LIST_DELIMITER) if v]
    return [value] if value else []


def _is_list(defn: SORDefinition, ref: AttributeRef) -> bool:
    return any(a.name == ref.attribute_name and a.list for a in defn.entities[ref.entity_id].attributes)


def check_referential_integrity(
    defn: SORDefinition,
    row_sets: Dict[str, RowSet],
    lookup: Optional[AttributeLookup] = None,
) -> List[Violation]:
    """
    Check every child value of every direct relationship against the parent column.

    Relationships are checked in relationship-id order. Links whose child or
    parent data is absent are skipped; the missing file is reported elsewhere.
    """
    lookup = lookup or AttributeLookup.from_definition(defn)
    violations: List[Violation] = []

    for link in lookup.resolve_links(defn):
        parent, child = orient_link(link)
        child_rs = row_sets.get(child.entity_id)
        parent_rs = row_sets.get(parent.entity_id)
        if child_rs is None or parent_rs is None:
            continue
        child_src = child_rs.source or child.entity_id
        parent_src = parent_rs.source or parent.entity_id

        missing_col = None
        if child.attribute_name not in child_rs.headers:
            missing_col = (child.attribute_name, child_src, child.entity_id)
        elif parent.attribute_name not in parent_rs.headers:
            missing_col = (parent.attribute_name, parent_src, parent.entity_id)
        if missing_col is not None:
            violations.append(
                Violation(
                    kind="referential",
                    entity_id=missing_col[2],
                    relationship_id=link.relationship_id,
                    message=f"relationship {link.relationship_id}: column '{missing_col[0]}' not found in {missing_col[1]}",
                )
            )
            continue

        parent_values = set()
        parent_is_list = _is_list(defn, parent)
        for value in parent_rs.column(parent.attribute_name):
            parent_values.update(_split(value, parent_is_list))

        child_is_list = _is_list(defn, child)
        for row in child_rs:
            for value in _split(row.values.get(child.attribute_name, ""), child_is_list):
                if value in parent_values:
                    continue
                violations.append(
                    Violation(
                        kind="referential",
                        entity_id=child.entity_id,
                        relationship_id=link.relationship_id,
                        value=value,
                        rows=[row.index + 1],
                        message=(
                            f"relationship {link.relationship_id}: foreign key '{value}' in {child_src} "
                            f"(row {row.index + 1}) does not exist in {parent_src} column '{parent.attribute_name}'"
                        ),
                    )
                )
    return violations


def validate_row_sets(
    defn: SORDefinition,
    row_sets: Dict[str, RowSet],
    missing_entities: Iterable[str] = (),
    data_dir: str = "",
) -> ValidationSummary:
    """
    Run every check and return the ordered violations.

    Order: per entity (sorted) the missing-file and uniqueness findings,
    then referential findings per relationship.
    """
    missing = set(missing_entities)
    violations: List[Violation] = []
    for entity_id in sorted(defn.entities):
        entity = defn.entities[entity_id]
        if entity_id in missing:
            path = f"{data_dir}/{entity.file_name}" if data_dir else entity.file_name
            violations.append(
                Violation(
                    kind="missing_file",
                    entity_id=entity_id,
                    message=f"CSV file not found for entity {entity_id}: {path}",
                )
            )
            continue
        if entity_id in row_sets:
            violations.extend(check_uniqueness(entity_id, row_sets[entity_id]))

    violations.extend(check_referential_integrity(defn, row_sets))

    summary = ValidationSummary(violations=violations)
    if summary.passed:
        logger.info(f"Validation passed for {len(row_sets)} entities")
    else:
        logger.warning(
            f"Validation found {len(violations)} violation(s): "
            f"{summary.uniqueness_issues} uniqueness, {summary.relationship_issues} referential, "
            f"{summary.missing_files} missing file(s)"
        )
    return summary
