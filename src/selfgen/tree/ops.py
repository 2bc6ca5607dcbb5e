"""
Tree Traversal and Mutation
Pure, id-addressed operations over a component tree.

Mutations never modify their input: only the nodes on the path to the
target are rebuilt, everything else is shared with the previous tree. A
missing target never raises; the new nodes are appended at the root and the
returned Mutation reports ``applied=False``.
"""

from collections.abc import Callable, Iterator, Sequence
from typing import NamedTuple

from pydantic import BaseModel

from ..core.errors import TargetNotFoundError
from ..core.id import short_suffix
from .nodes import ComponentNode, Node, Placeholder, TextNode, Tree, node_id


class Mutation(NamedTuple):
    """Result of a tree mutation."""

    tree: Tree
    applied: bool  # False when the target was absent and the root fallback was used


def as_nodes(nodes: Node | Sequence[Node]) -> list[Node]:
    """Normalize a single node or a sequence of nodes to a list."""
    if isinstance(nodes, BaseModel):
        return [nodes]
    return list(nodes)


# ============================================================================
# Traversal
# ============================================================================

def walk(tree: Sequence[Node]) -> Iterator[tuple[Node, int, ComponentNode | None]]:
    """
    Depth-first, document-order traversal.

    Yields:
        (node, depth, parent) with depth 0 for root nodes
    """
    stack: list[tuple[Node, int, ComponentNode | None]] = [(n, 0, None) for n in reversed(tree)]
    while stack:
        node, depth, parent = stack.pop()
        yield node, depth, parent
        match node:
            case ComponentNode(children=children):
                stack.extend((child, depth + 1, node) for child in reversed(children))
            case Placeholder() | TextNode():
                pass


def find_by_id(tree: Sequence[Node], target_id: str) -> ComponentNode | Placeholder | None:
    """Find the node carrying ``target_id``."""
    for node, _, _ in walk(tree):
        match node:
            case ComponentNode(id=id_) | Placeholder(id=id_) if id_ == target_id:
                return node
            case _:
                continue
    return None


def get_by_id(tree: Sequence[Node], target_id: str) -> ComponentNode | Placeholder:
    """
    Find a node that must exist.

    Raises:
        TargetNotFoundError: If no node carries the id
    """
    node = find_by_id(tree, target_id)
    if node is None:
        raise TargetNotFoundError(target_id)
    return node


def collect_ids(tree: Sequence[Node]) -> set[str]:
    """All ids present in the tree."""
    return {id_ for node, _, _ in walk(tree) if (id_ := node_id(node)) is not None}


def count_nodes(tree: Sequence[Node]) -> int:
    """Number of addressable (component and placeholder) nodes."""
    return sum(1 for node, _, _ in walk(tree) if not isinstance(node, TextNode))


def find_parent(tree: Sequence[Node], target_id: str) -> ComponentNode | None:
    """Parent component of a node, None for root nodes or missing ids."""
    for node, _, parent in walk(tree):
        if node_id(node) == target_id:
            return parent
    return None


def ancestor_path(tree: Sequence[Node], target_id: str) -> list[ComponentNode]:
    """Ancestors of a node ordered root first, empty for root or missing nodes."""
    path: list[ComponentNode] = []

    def descend(nodes: Sequence[Node]) -> bool:
        for node in nodes:
            match node:
                case ComponentNode(id=id_) if id_ == target_id:
                    return True
                case Placeholder(id=id_) if id_ == target_id:
                    return True
                case ComponentNode(children=children):
                    path.append(node)
                    if descend(children):
                        return True
                    path.pop()
                case Placeholder() | TextNode():
                    pass
        return False

    return path if descend(tree) else []


def siblings_of(tree: Sequence[Node], target_id: str) -> list[ComponentNode]:
    """Component siblings of a node within its container, in document order."""
    parent = find_parent(tree, target_id)
    container = parent.children if parent is not None else tree
    if parent is None and not any(node_id(n) == target_id for n in tree):
        return []
    return [n for n in container if isinstance(n, ComponentNode) and n.id != target_id]


def position_of(tree: Sequence[Node], target_id: str) -> tuple[int, int] | None:
    """(index within container, depth) of a node."""
    for node, depth, parent in walk(tree):
        if node_id(node) == target_id:
            container = parent.children if parent is not None else tree
            index = next(i for i, n in enumerate(container) if n is node)
            return index, depth
    return None


# ============================================================================
# Mutation
# ============================================================================

def _splice(
    nodes: Sequence[Node],
    target_id: str,
    edit: Callable[[Node], list[Node]],
) -> tuple[list[Node], bool]:
    for index, node in enumerate(nodes):
        if node_id(node) == target_id:
            return [*nodes[:index], *edit(node), *nodes[index + 1:]], True
        match node:
            case ComponentNode(children=children) if children:
                new_children, found = _splice(children, target_id, edit)
                if found:
                    updated = node.model_copy(update={"children": new_children})
                    return [*nodes[:index], updated, *nodes[index + 1:]], True
            case _:
                pass
    return list(nodes), False


def _apply(tree: Sequence[Node], target_id: str, new_nodes: list[Node], edit: Callable[[Node], list[Node]]) -> Mutation:
    result, found = _splice(tree, target_id, edit)
    if found:
        return Mutation(result, True)
    return Mutation([*tree, *new_nodes], False)


def replace(tree: Sequence[Node], target_id: str, replacement: Node | Sequence[Node]) -> Mutation:
    """Replace the node carrying ``target_id`` with zero or more nodes, in place."""
    new_nodes = as_nodes(replacement)
    return _apply(tree, target_id, new_nodes, lambda _: new_nodes)


def insert_after(tree: Sequence[Node], target_id: str, nodes: Node | Sequence[Node]) -> Mutation:
    """Insert nodes immediately after the target, as its siblings."""
    new_nodes = as_nodes(nodes)
    return _apply(tree, target_id, new_nodes, lambda target: [target, *new_nodes])


def insert_before(tree: Sequence[Node], target_id: str, nodes: Node | Sequence[Node]) -> Mutation:
    """Insert nodes immediately before the target, as its siblings."""
    new_nodes = as_nodes(nodes)
    return _apply(tree, target_id, new_nodes, lambda target: [*new_nodes, target])


def append_child(tree: Sequence[Node], target_id: str, nodes: Node | Sequence[Node]) -> Mutation:
    """Append nodes as the last children of the target component."""
    new_nodes = as_nodes(nodes)

    # Placeholders have no children to append to
    if not isinstance(find_by_id(tree, target_id), ComponentNode):
        return Mutation([*tree, *new_nodes], False)

    def extend(target: Node) -> list[Node]:
        if not isinstance(target, ComponentNode):
            return [target]
        return [target.model_copy(update={"children": [*target.children, *new_nodes]})]

    return _apply(tree, target_id, new_nodes, extend)


def reassign_duplicate_ids(nodes: Sequence[Node], taken: set[str]) -> list[Node]:
    """
    Rename ids in a fragment that collide with ``taken`` or repeat within it.

    Colliding ids get a short random suffix. ``taken`` is not modified.
    """
    seen = set(taken)

    def fresh(id_: str) -> str:
        new_id = id_
        while new_id in seen:
            new_id = f"{id_}-{short_suffix()}"
        seen.add(new_id)
        return new_id

    def rename(node: Node) -> Node:
        match node:
            case TextNode():
                return node
            case Placeholder(id=id_):
                new_id = fresh(id_)
                return node if new_id == id_ else node.model_copy(update={"id": new_id})
            case ComponentNode(id=id_, children=children):
                new_id = fresh(id_)
                new_children = [rename(child) for child in children]
                if new_id == id_ and all(a is b for a, b in zip(new_children, children)):
                    return node
                return node.model_copy(update={"id": new_id, "children": new_children})

    return [rename(node) for node in nodes]


__all__ = [
    "Mutation",
    "as_nodes",
    "walk",
    "find_by_id",
    "get_by_id",
    "collect_ids",
    "count_nodes",
    "find_parent",
    "ancestor_path",
    "siblings_of",
    "position_of",
    "replace",
    "insert_after",
    "insert_before",
    "append_child",
    "reassign_duplicate_ids",
]
