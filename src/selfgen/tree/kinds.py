"""Known component kinds and passthrough element validation."""

from collections.abc import Sequence

from ..core.errors import UnknownComponentKindError
from .nodes import ComponentNode, Node
from .ops import walk

# Structured kinds with first-class renderers
KNOWN_KINDS: frozenset[str] = frozenset({
    "search-bar",
    "button",
    "input",
    "card",
    "list",
    "modal",
    "form",
    "navigation",
})

# HTML elements rendered as-is
PASSTHROUGH_ELEMENTS: frozenset[str] = frozenset({
    "a", "abbr", "article", "aside", "b", "blockquote", "br", "caption", "code",
    "dd", "details", "div", "dl", "dt", "em", "fieldset", "figcaption", "figure",
    "footer", "h1", "h2", "h3", "h4", "h5", "h6", "header", "hr", "i", "iframe",
    "img", "label", "legend", "li", "main", "mark", "nav", "ol", "option", "p",
    "pre", "progress", "section", "select", "small", "span", "strong", "sub",
    "summary", "sup", "table", "tbody", "td", "textarea", "tfoot", "th", "thead",
    "tr", "u", "ul", "video", "audio", "canvas", "svg",
})


def is_custom_element(kind: str) -> bool:
    """Custom elements are lowercase and hyphenated."""
    return "-" in kind and kind.lower() == kind


def is_known_kind(kind: str) -> bool:
    """Whether a kind can be rendered."""
    return kind in KNOWN_KINDS or kind in PASSTHROUGH_ELEMENTS or is_custom_element(kind)


def check_kind(node: ComponentNode) -> None:
    """
    Raises:
        UnknownComponentKindError: If the node's kind cannot be rendered
    """
    if not is_known_kind(node.kind):
        raise UnknownComponentKindError(node.id, node.kind)


def unknown_kind_nodes(tree: Sequence[Node]) -> list[ComponentNode]:
    """Components whose kind cannot be rendered, in document order."""
    return [
        node for node, _, _ in walk(tree)
        if isinstance(node, ComponentNode) and not is_known_kind(node.kind)
    ]


__all__ = [
    "KNOWN_KINDS",
    "PASSTHROUGH_ELEMENTS",
    "is_custom_element",
    "is_known_kind",
    "check_kind",
    "unknown_kind_nodes",
]
