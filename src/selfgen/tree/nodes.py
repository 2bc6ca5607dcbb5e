"""Component Tree Data Models.

A tree is an ordered root list of nodes. Each node is one of three variants
tagged by ``node``: a component, a literal text child, or a placeholder that
stands in for deferred generation.
"""

from datetime import datetime, timezone
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from ..core.id import new_node_id

TriggerKind = Literal["click", "submit", "change"]

# Wire names used by generated JSON for placeholder triggers
_TRIGGER_TO_WIRE: dict[str, str] = {
    "click": "onClick",
    "submit": "onSubmit",
    "change": "onChange",
}
_WIRE_TO_TRIGGER = {v: k for k, v in _TRIGGER_TO_WIRE.items()}


class NodeMetadata(BaseModel):
    """Provenance of a generated node."""

    model_config = ConfigDict(frozen=True)

    generated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    prompt: str | None = Field(default=None, description="Request or trigger that produced the node")
    version: int = Field(default=1, ge=1)
    generation_depth: int = Field(default=0, ge=0, description="Generative hops that led to this node")


class ComponentNode(BaseModel):
    """A renderable component."""

    model_config = ConfigDict(frozen=True)

    node: Literal["component"] = "component"
    id: str = Field(..., min_length=1)
    kind: str = Field(..., min_length=1, description="Structured kind or passthrough element")
    attributes: dict[str, Any] = Field(default_factory=dict)
    children: list["Node"] = Field(default_factory=list)
    metadata: NodeMetadata | None = None


class TextNode(BaseModel):
    """Literal text child."""

    model_config = ConfigDict(frozen=True)

    node: Literal["text"] = "text"
    text: str


class Placeholder(BaseModel):
    """Deferred-generation contract, rendered as its trigger until replaced."""

    model_config = ConfigDict(frozen=True)

    node: Literal["placeholder"] = "placeholder"
    id: str = Field(..., min_length=1)
    generation_template: str = Field(..., description="Request text with {{var}} slots")
    trigger_rendering: ComponentNode
    trigger_kind: TriggerKind = "click"


Node = Annotated[Union[ComponentNode, TextNode, Placeholder], Field(discriminator="node")]
Tree = list[Node]

ComponentNode.model_rebuild()
Placeholder.model_rebuild()


def node_id(node: Node) -> str | None:
    """Id of a node, None for text."""
    match node:
        case ComponentNode(id=id_) | Placeholder(id=id_):
            return id_
        case TextNode():
            return None


def parse_node(raw: Any) -> Node:
    """
    Convert a wire-shaped child into a node.

    Accepts strings (text), ``{"type": "placeholder", ...}`` and
    ``{id, type, props, children, metadata}`` component objects. Components
    without an id get a generated one.

    Raises:
        ValueError: If the value has no recognizable shape
    """
    if isinstance(raw, str):
        return TextNode(text=raw)
    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        return TextNode(text=str(raw))
    if not isinstance(raw, dict):
        raise ValueError(f"Cannot build node from {type(raw).__name__}")

    kind = raw.get("type") or raw.get("kind")
    if not isinstance(kind, str) or not kind:
        raise ValueError("Component is missing a 'type'")

    props = raw.get("props") or raw.get("attributes") or {}
    if not isinstance(props, dict):
        raise ValueError(f"Component props must be an object, got {type(props).__name__}")

    if kind == "placeholder":
        trigger = props.get("triggerComponent")
        trigger_node = parse_node(trigger) if isinstance(trigger, dict) else ComponentNode(
            id=new_node_id(), kind="button", children=[TextNode(text="Generate")]
        )
        if not isinstance(trigger_node, ComponentNode):
            raise ValueError("Placeholder trigger must be a component")
        return Placeholder(
            id=str(raw.get("id") or new_node_id()),
            generation_template=str(props.get("generationPrompt", "")),
            trigger_rendering=trigger_node,
            trigger_kind=_WIRE_TO_TRIGGER.get(props.get("triggerType", "onClick"), "click"),
        )

    children_raw = raw.get("children") or []
    if not isinstance(children_raw, list):
        children_raw = [children_raw]

    metadata = raw.get("metadata")
    return ComponentNode(
        id=str(raw.get("id") or new_node_id()),
        kind=kind,
        attributes=dict(props),
        children=[parse_node(child) for child in children_raw],
        metadata=NodeMetadata.model_validate(metadata) if isinstance(metadata, dict) else None,
    )


def parse_tree(raw: list[Any]) -> Tree:
    """Convert a wire-shaped component list into a tree."""
    return [parse_node(item) for item in raw]


def dump_node(node: Node) -> Any:
    """Convert a node back to its wire shape."""
    match node:
        case TextNode(text=text):
            return text
        case Placeholder():
            return {
                "id": node.id,
                "type": "placeholder",
                "props": {
                    "generationPrompt": node.generation_template,
                    "triggerComponent": dump_node(node.trigger_rendering),
                    "triggerType": _TRIGGER_TO_WIRE[node.trigger_kind],
                },
            }
        case ComponentNode():
            data: dict[str, Any] = {
                "id": node.id,
                "type": node.kind,
                "props": dict(node.attributes),
                "children": [dump_node(child) for child in node.children],
            }
            if node.metadata is not None:
                data["metadata"] = node.metadata.model_dump(mode="json", exclude_none=True)
            return data


def dump_tree(tree: Tree) -> list[Any]:
    """Convert a tree back to its wire shape."""
    return [dump_node(node) for node in tree]


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
]
