"""Parent-key allocation for relationships and cardinality warnings."""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple
import numpy as np
from sorgen.ir.lookup import AttributeRef, RelationshipLink
from sorgen.generation.graph import orient_link
from sorgen.generation.constants import IMBALANCE_RATIO_THRESHOLD
from sorgen.config.logging import get_logger

logger = get_logger(__name__)


class AssignmentStrategy(str, Enum):
    """How child rows are mapped onto parent rows."""

    ROUND_ROBIN = "round_robin"  # child i -> parent i % P
    BLOCK = "block"  # child i -> parent i // k, with C == P * k
    RANDOM = "random"  # uniform random parent per child
    IDENTITY = "identity"  # child key i copies parent key i


@dataclass
class CardinalityWarning:
    """A relationship whose row counts cannot be allocated exactly."""

    relationship_name: str
    source_entity: str
    source_count: int
    target_entity: str
    target_count: int
    cardinality: str
    shortfall: str

    def __str__(self) -> str:
        return (
            f"Cardinality warning: Relationship '{self.relationship_name}' ({self.cardinality}) - "
            f"{self.source_entity} has {self.source_count} rows but "
            f"{self.target_entity} has {self.target_count} rows. {self.shortfall}"
        )


@dataclass
class LinkPlan:
    """Resolved allocation for one relationship."""

    link: RelationshipLink
    parent: AttributeRef
    child: AttributeRef
    parent_count: int
    child_count: int
    strategy: AssignmentStrategy
    fan_out: Optional[int] = None
    imbalanced: bool = False
    deferred: bool = False

    @property
    def relationship_id(self) -> str:
        return self.link.relationship_id


def choose_strategy(
    link: RelationshipLink,
    parent_count: int,
    child_count: int,
    auto_cardinality: bool,
) -> Tuple[AssignmentStrategy, Optional[int], bool]:
    """
    Pick the allocation strategy for a link.

    Returns:
        (strategy, fan_out, imbalanced)
    """
    _, child = orient_link(link)
    if link.is_self_referential:
        return AssignmentStrategy.RANDOM, None, False
    if child.is_unique:
        return AssignmentStrategy.IDENTITY, 1, child_count > parent_count
    if not auto_cardinality:
        return AssignmentStrategy.ROUND_ROBIN, None, child_count % parent_count != 0
    if child_count % parent_count == 0:
        return AssignmentStrategy.BLOCK, child_count // parent_count, False
    return AssignmentStrategy.RANDOM, None, True


def plan_links(
    links: List[RelationshipLink],
    row_counts: Dict[str, int],
    auto_cardinality: bool,
) -> List[LinkPlan]:
    """Build a LinkPlan per resolved relationship, in the order given."""
    plans = []
    for link in links:
        parent, child = orient_link(link)
        p_count = row_counts[parent.entity_id]
        c_count = row_counts[child.entity_id]
        strategy, fan_out, imbalanced = choose_strategy(link, p_count, c_count, auto_cardinality)
        plans.append(
            LinkPlan(
                link=link,
                parent=parent,
                child=child,
                parent_count=p_count,
                child_count=c_count,
                strategy=strategy,
                fan_out=fan_out,
                imbalanced=imbalanced,
            )
        )
        logger.debug(
            f"Relationship {link.relationship_id} ({link.cardinality}): {parent.entity_id}[{p_count}] -> "
            f"{child.entity_id}[{c_count}] using {strategy.value}"
            + (f" x{fan_out}" if fan_out and strategy == AssignmentStrategy.BLOCK else "")
        )
    return plans


def assign_parent_indices(plan: LinkPlan, rng: np.random.Generator) -> np.ndarray:
    """
    Parent row index for every child row.

    IDENTITY plans return -1 for child rows beyond the parent count.
    """
    c, p = plan.child_count, plan.parent_count
    idx = np.arange(c)
    if plan.strategy == AssignmentStrategy.ROUND_ROBIN:
        return idx % p
    if plan.strategy == AssignmentStrategy.BLOCK:
        return idx // plan.fan_out
    if plan.strategy == AssignmentStrategy.IDENTITY:
        return np.where(idx < p, idx, -1)
    return rng.integers(0, p, size=c)


def cardinality_warnings(
    plans: List[LinkPlan],
    configured_counts: bool,
    auto_cardinality: bool,
) -> List[CardinalityWarning]:
    """
    Warnings for links whose counts do not divide evenly.

    Args:
        plans: Link plans from ``plan_links``
        configured_counts: Counts come from a per-entity configuration
        auto_cardinality: Auto mode is on
    """
    warnings: List[CardinalityWarning] = []
    pairs = set()

    for plan in plans:
        if plan.link.is_self_referential:
            continue
        name = plan.link.name
        card = plan.link.cardinality
        child_e, parent_e = plan.child.entity_id, plan.parent.entity_id
        c, p = plan.child_count, plan.parent_count

        def warn(shortfall: str) -> None:
            warnings.append(CardinalityWarning(name, child_e, c, parent_e, p, card, shortfall))

        if plan.strategy == AssignmentStrategy.IDENTITY:
            if c > p:
                warn(f"{c - p} {child_e} rows have no matching {parent_e} key and receive fresh keys")
            elif c < p and configured_counts:
                warn(f"{p - c} {parent_e} rows will not be referenced")
            continue

        if plan.imbalanced and (auto_cardinality or configured_counts):
            if c >= p:
                warn(
                    f"{c} is not a multiple of {p}; {parent_e} keys will be referenced unevenly"
                )
            else:
                warn(f"{p - c} {parent_e} rows will not be referenced")

        pair = tuple(sorted((child_e, parent_e)))
        if configured_counts and pair not in pairs:
            pairs.add(pair)
            big, small = (c, p) if c >= p else (p, c)
            if small > 0 and big > small * IMBALANCE_RATIO_THRESHOLD:
                a, a_count, b, b_count = (
                    (child_e, c, parent_e, p) if c >= p else (parent_e, p, child_e, c)
                )
                warnings.append(
                    CardinalityWarning(
                        relationship_name=f"{a}-{b}",
                        source_entity=a,
                        source_count=a_count,
                        target_entity=b,
                        target_count=b_count,
                        cardinality=card,
                        shortfall=(
                            f"Significant imbalance: {a_count} {a} rows vs {b_count} {b} rows "
                            f"(ratio >{IMBALANCE_RATIO_THRESHOLD}x) may affect relationship quality"
                        ),
                    )
                )

    for w in warnings:
        logger.warning(str(w))
    return warnings
