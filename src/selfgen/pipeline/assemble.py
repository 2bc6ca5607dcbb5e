"""Assembly of synthesized text into component nodes."""

from typing import Any

from returns.result import Failure

from ..core.id import new_fallback_id
from ..core.json import JSONParseError, extract_json
from ..core.logging_config import get_logger
from ..core.validate import validate_fragment
from ..tree import ComponentNode, Node, NodeMetadata, parse_node

logger = get_logger(__name__)

FALLBACK_KIND = "card"
FALLBACK_TITLE = "Assembly Error"


def _component_list(payload: Any) -> list[Any]:
    match payload:
        case list():
            return payload
        case {"components": list() as components}:
            return components
        case dict():
            return [payload]
        case _:
            raise ValueError(f"Expected component list, got {type(payload).__name__}")


def parse_components(raw: str) -> list[Node]:
    """
    Parse synthesizer output into nodes.

    Accepts a JSON array, an object with a ``components`` array or a single
    component object, optionally inside a markdown fence. No repair is
    attempted.

    Raises:
        JSONParseError: If no JSON can be decoded
        ValueError: If the JSON is not shaped like components
    """
    payload = extract_json(raw, repair=False)
    result = validate_fragment(payload, raw)
    if isinstance(result, Failure):
        raise ValueError(result.failure().message)
    return [parse_node(item) for item in _component_list(payload)]


def fallback_card(raw: str, request: str | None = None) -> ComponentNode:
    """Diagnostic card carrying unparseable output."""
    return ComponentNode(
        id=new_fallback_id(),
        kind=FALLBACK_KIND,
        attributes={
            "title": FALLBACK_TITLE,
            "content": f"Failed to assemble UI components. Raw output was: {raw}",
            "className": "border-red-500 bg-red-50 text-red-900",
            "diagnostic": True,
        },
        metadata=NodeMetadata(prompt=request),
    )


def assemble(raw: str, request: str | None = None) -> list[Node]:
    """Parse synthesizer output, degrading to a single diagnostic card."""
    try:
        nodes = parse_components(raw)
    except (JSONParseError, ValueError) as e:
        logger.error("assembly_failed", error=str(e), raw_length=len(raw))
        return [fallback_card(raw, request)]

    logger.info("components_assembled", count=len(nodes))
    return nodes


__all__ = ["assemble", "parse_components", "fallback_card", "FALLBACK_KIND", "FALLBACK_TITLE"]
