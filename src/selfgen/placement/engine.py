"""
Placement Engine
Splices fragments into a tree according to a placement rule.
"""

from collections.abc import Sequence
from typing import Literal, NamedTuple

from pydantic import BaseModel, ConfigDict

from ..core.logging_config import get_logger
from ..monitoring import metrics_collector
from ..tree import (
    Node,
    Tree,
    append_child,
    as_nodes,
    collect_ids,
    insert_after,
    insert_before,
    reassign_duplicate_ids,
    replace,
)

logger = get_logger(__name__)

PlacementKind = Literal["replace", "after", "before", "appendChild", "modal"]


class PlacementRule(BaseModel):
    """Where a fragment goes relative to a target."""

    model_config = ConfigDict(frozen=True)

    kind: PlacementKind
    target_id: str | None = None


class PlacementResult(NamedTuple):
    """New tree plus anything destined for the modal overlay."""

    tree: Tree
    applied: bool
    modal: list[Node]


def place(
    tree: Sequence[Node],
    fragment: Node | Sequence[Node],
    rule: PlacementRule,
) -> PlacementResult:
    """
    Place a fragment as one tree replacement.

    Fragment ids that collide with ids already in the tree are renamed
    first; a replace target counts as free since it leaves the tree. Modal
    placements leave the tree untouched and return the fragment in
    ``modal``. A missing target appends at the root with ``applied=False``.
    """
    nodes = as_nodes(fragment)

    if rule.kind == "modal":
        logger.debug("placed_modal", count=len(nodes))
        metrics_collector.record_placement(rule.kind, True)
        return PlacementResult(list(tree), True, nodes)

    taken = collect_ids(tree)
    target = rule.target_id or ""
    if rule.kind == "replace":
        taken.discard(target)
    nodes = reassign_duplicate_ids(nodes, taken)

    match rule.kind:
        case "replace":
            mutation = replace(tree, target, nodes)
        case "after":
            mutation = insert_after(tree, target, nodes)
        case "before":
            mutation = insert_before(tree, target, nodes)
        case "appendChild":
            mutation = append_child(tree, target, nodes)

    if not mutation.applied:
        logger.warning("placement_target_missing", kind=rule.kind, target_id=target, count=len(nodes))
    else:
        logger.debug("placed", kind=rule.kind, target_id=target, count=len(nodes))
    metrics_collector.record_placement(rule.kind, mutation.applied)
    return PlacementResult(mutation.tree, mutation.applied, [])


__all__ = ["PlacementKind", "PlacementRule", "PlacementResult", "place"]
