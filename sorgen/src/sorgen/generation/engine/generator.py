"""Row generation for entities in dependency order."""

import time
import uuid
from collections import defaultdict
from typing import Dict, List, Optional
import numpy as np
from sorgen.errors import GenerationError
from sorgen.ir.schema import Attribute, Entity, SORDefinition
from sorgen.generation.row_set import RowSet
from sorgen.generation.values import ValueSynthesizer
from sorgen.generation.cardinality import AssignmentStrategy, LinkPlan, assign_parent_indices
from sorgen.generation.constants import (
    LARGE_ENTITY_THRESHOLD,
    LIST_DELIMITER,
    LIST_MAX_VALUES,
    MAX_KEY_ATTEMPTS,
    NUMERIC_KEY_START,
    PROGRESS_LOG_INTERVAL_ROWS,
)
from sorgen.config.logging import get_logger

logger = get_logger(__name__)


class RowGenerator:
    """
    Generates one RowSet per entity.

    Entities must be generated in dependency order: every non-deferred link
    reads its parent's finished RowSet. Each entity is filled in three
    passes: keys, relationship columns, then remaining attributes.
    Self-referential links are filled last within the entity and deferred
    links (edges dropped to break a cycle) after all entities exist.
    """

    def __init__(
        self,
        defn: SORDefinition,
        row_counts: Dict[str, int],
        plans: List[LinkPlan],
        seed: Optional[int] = None,
    ):
        self.defn = defn
        self.row_counts = row_counts
        self.rng = np.random.default_rng(seed)
        self.values = ValueSynthesizer(seed)
        self.row_sets: Dict[str, RowSet] = {}
        self.warnings: List[str] = []
        self._plans_by_child: Dict[str, List[LinkPlan]] = defaultdict(list)
        for plan in plans:
            self._plans_by_child[plan.child.entity_id].append(plan)

    def generate_all(self, order: List[str]) -> Dict[str, RowSet]:
        """Generate every entity in ``order``, then fill deferred links."""
        for entity_id in order:
            self.generate_entity(entity_id)
        self.link_deferred()
        return self.row_sets

    def generate_entity(self, entity_id: str) -> RowSet:
        """
        Generate all rows of one entity.

        Raises:
            GenerationError: If the row count is not positive or the entity has no key
        """
        entity = self.defn.entities[entity_id]
        count = self.row_counts.get(entity_id, 0)
        if count <= 0:
            raise GenerationError(f"row count for {entity_id} must be positive, got {count}")
        key_attr = entity.unique_attribute
        if key_attr is None:
            raise GenerationError(f"entity {entity_id} has no uniqueId attribute")

        start = time.time()
        logger.info(f"Generating {count:,} rows for {entity_id}")

        plans = self._plans_by_child.get(entity_id, [])
        self_refs = [p for p in plans if p.link.is_self_referential]
        deferred = [p for p in plans if p.deferred and not p.link.is_self_referential]
        immediate = [p for p in plans if not p.deferred and not p.link.is_self_referential]

        for plan in immediate:
            if plan.parent.entity_id not in self.row_sets:
                raise GenerationError(
                    f"relationship {plan.relationship_id}: parent {plan.parent.entity_id} "
                    f"not generated before {entity_id}"
                )

        row_set = RowSet(entity_id, entity.headers, key_attr.name, source=entity.file_name)

        identity = self._identity_plan(immediate, deferred, key_attr)
        self._fill_keys(row_set, key_attr, count, identity)

        filled = {key_attr.name}
        for plan in immediate:
            if plan.strategy == AssignmentStrategy.IDENTITY:
                continue
            self._link(plan, row_set, self.row_sets[plan.parent.entity_id])
            filled.add(plan.child.attribute_name)

        filled.update(p.child.attribute_name for p in self_refs + deferred)
        display = entity.display_name or entity_id
        for attr in entity.attributes:
            if attr.name in filled:
                continue
            for i in range(count):
                row_set.set_value(i, attr.name, self.values.value_for(attr, display, i))

        for plan in self_refs:
            self._link(plan, row_set, row_set)

        self.row_sets[entity_id] = row_set
        elapsed = time.time() - start
        logger.info(
            f"Generated {entity_id}: {count:,} rows, {len(entity.attributes)} attributes "
            f"in {elapsed:.3f}s"
        )
        return row_set

    def link_deferred(self) -> None:
        """Fill links whose parent could not be ordered before the child."""
        for child_id in sorted(self._plans_by_child):
            for plan in self._plans_by_child[child_id]:
                if not plan.deferred or plan.link.is_self_referential:
                    continue
                child_rs = self.row_sets.get(child_id)
                parent_rs = self.row_sets.get(plan.parent.entity_id)
                if child_rs is None or parent_rs is None:
                    continue
                if plan.child.attribute_name == child_rs.key_attribute:
                    continue
                self._link(plan, child_rs, parent_rs)
                msg = (
                    f"Relationship {plan.relationship_id} linked after generation "
                    f"({plan.parent.entity_id} -> {child_id}); its edge was dropped to avoid a cycle"
                )
                logger.warning(msg)
                self.warnings.append(msg)

    def _identity_plan(
        self,
        immediate: List[LinkPlan],
        deferred: List[LinkPlan],
        key_attr: Attribute,
    ) -> Optional[LinkPlan]:
        identities = [
            p for p in immediate
            if p.strategy == AssignmentStrategy.IDENTITY and p.child.attribute_name == key_attr.name
        ]
        for plan in deferred:
            if plan.child.attribute_name == key_attr.name:
                msg = (
                    f"Relationship {plan.relationship_id}: key {plan.child.entity_id}.{key_attr.name} "
                    f"cannot copy {plan.parent.entity_id} keys because the link was deferred; fresh keys used"
                )
                logger.warning(msg)
                self.warnings.append(msg)
        for plan in identities[1:]:
            msg = (
                f"Relationship {plan.relationship_id}: {plan.child.entity_id}.{key_attr.name} already "
                f"copies keys from {identities[0].parent.entity_id}; ignoring {plan.parent.entity_id}"
            )
            logger.warning(msg)
            self.warnings.append(msg)
        return identities[0] if identities else None

    def _fill_keys(
        self,
        row_set: RowSet,
        key_attr: Attribute,
        count: int,
        identity: Optional[LinkPlan],
    ) -> None:
        parent_keys: List[str] = []
        if identity is not None:
            parent_keys = self.row_sets[identity.parent.entity_id].column(identity.parent.attribute_name)
            logger.debug(
                f"{row_set.entity_id}.{key_attr.name} copies {min(count, len(parent_keys))} keys "
                f"from {identity.parent.entity_id}"
            )

        report_progress = count > LARGE_ENTITY_THRESHOLD
        for i in range(count):
            if i < len(parent_keys):
                key = parent_keys[i]
            else:
                key = self._new_key(row_set, key_attr, i)
            row_set.add_row({key_attr.name: key})
            if report_progress and (i + 1) % PROGRESS_LOG_INTERVAL_ROWS == 0:
                logger.info(f"  {row_set.entity_id}: {i + 1:,}/{count:,} keys generated")

    def _new_key(self, row_set: RowSet, key_attr: Attribute, row_index: int) -> str:
        """
        A key not yet used in ``row_set``.

        Raises:
            GenerationError: After MAX_KEY_ATTEMPTS collisions
        """
        for attempt in range(MAX_KEY_ATTEMPTS):
            if key_attr.is_numeric:
                candidate = str(NUMERIC_KEY_START + row_index + attempt)
            else:
                candidate = str(uuid.UUID(bytes=self.rng.bytes(16), version=4))
            if not row_set.has_key(candidate):
                return candidate
        raise GenerationError(
            f"could not generate a unique value for {row_set.entity_id}.{key_attr.name} "
            f"after {MAX_KEY_ATTEMPTS} attempts"
        )

    def _link(self, plan: LinkPlan, child_rs: RowSet, parent_rs: RowSet) -> None:
        """Set the child attribute of every row to a value from the parent attribute."""
        parent_values = parent_rs.column(plan.parent.attribute_name)
        if len(parent_values) != plan.parent_count or len(child_rs) != plan.child_count:
            raise GenerationError(
                f"relationship {plan.relationship_id}: planned for {plan.parent_count} -> {plan.child_count} "
                f"rows but found {len(parent_values)} -> {len(child_rs)}"
            )
        child_attr = self._attribute(plan.child.entity_id, plan.child.attribute_name)
        parent_attr = self._attribute(plan.parent.entity_id, plan.parent.attribute_name)
        child_is_list = child_attr is not None and child_attr.list
        parent_is_list = parent_attr is not None and parent_attr.list

        indices = assign_parent_indices(plan, self.rng)
        for i, j in enumerate(indices):
            value = parent_values[int(j)]
            if child_is_list:
                value = self._list_reference(value, parent_values)
            elif parent_is_list:
                value = self._list_element(value)
            child_rs.set_value(i, plan.child.attribute_name, value)

    def _list_element(self, cell: str) -> str:
        """One element of a list-valued parent cell, for a scalar child."""
        parts = [p for p in cell.split(LIST_DELIMITER) if p]
        if not parts:
            return cell
        return parts[int(self.rng.integers(0, len(parts)))]

    def _list_reference(self, first: str, parent_values: List[str]) -> str:
        extra = int(self.rng.integers(0, LIST_MAX_VALUES))
        picks = [first]
        for j in self.rng.integers(0, len(parent_values), size=extra):
            value = parent_values[int(j)]
            if value not in picks:
                picks.append(value)
        return LIST_DELIMITER.join(picks)

    def _attribute(self, entity_id: str, name: str) -> Optional[Attribute]:
        entity: Entity = self.defn.entities[entity_id]
        for attr in entity.attributes:
            if attr.name == name:
                return attr
        return None
