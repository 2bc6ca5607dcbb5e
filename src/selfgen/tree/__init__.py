"""Component tree model."""

from .nodes import (
    TriggerKind,
    NodeMetadata,
    ComponentNode,
    TextNode,
    Placeholder,
    Node,
    Tree,
    node_id,
    parse_node,
    parse_tree,
    dump_node,
    dump_tree,
)
from .ops import (
    Mutation,
    as_nodes,
    walk,
    find_by_id,
    get_by_id,
    collect_ids,
    count_nodes,
    find_parent,
    ancestor_path,
    siblings_of,
    position_of,
    replace,
    insert_after,
    insert_before,
    append_child,
    reassign_duplicate_ids,
)
from .kinds import KNOWN_KINDS, check_kind, is_known_kind, unknown_kind_nodes

__all__ = [
    "TriggerKind",
    "NodeMetadata",
    "ComponentNode",
    "TextNode",
    "Placeholder",
    "Node",
    "Tree",
    "node_id",
    "parse_node",
    "parse_tree",
    "dump_node",
    "dump_tree",
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
    "KNOWN_KINDS",
    "check_kind",
    "is_known_kind",
    "unknown_kind_nodes",
]
