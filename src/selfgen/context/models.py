"""Generation Context Models.

Four immutable tiers, each disclosing strictly more surrounding state than
the previous one. ``tier`` is the discriminator.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from ..tree import ComponentNode, Node, Placeholder, TextNode


def _now() -> datetime:
    return datetime.now(timezone.utc)


class TriggerCategory(str, Enum):
    """What caused a generation; fixes the context tier."""

    ERROR_FIX = "error-fix"
    SIMPLE_INTERACTION = "simple-interaction"
    COMPLEX_INTERACTION = "complex-interaction"
    RECURSIVE_GENERATION = "recursive-generation"


class ElementDescriptor(BaseModel):
    """The element a trigger fired on."""

    model_config = ConfigDict(frozen=True)

    id: str
    kind: str
    attributes: dict[str, Any] = Field(default_factory=dict)
    text_content: str | None = None

    @classmethod
    def from_node(cls, node: ComponentNode | Placeholder) -> "ElementDescriptor":
        """Describe a tree node; placeholders are described by their trigger."""
        match node:
            case Placeholder(id=id_, trigger_rendering=trigger):
                return cls(
                    id=id_,
                    kind=trigger.kind,
                    attributes=dict(trigger.attributes),
                    text_content=_text_of(trigger),
                )
            case ComponentNode(id=id_, kind=kind, attributes=attributes):
                return cls(id=id_, kind=kind, attributes=dict(attributes), text_content=_text_of(node))


def _text_of(node: ComponentNode) -> str | None:
    parts = [child.text for child in node.children if isinstance(child, TextNode)]
    return " ".join(parts) if parts else None


class TreeSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    count: int
    has_errors: bool
    last_action: str


class Position(BaseModel):
    model_config = ConfigDict(frozen=True)

    index: int
    depth: int


class Environment(BaseModel):
    """Host environment reported with full-tier contexts."""

    model_config = ConfigDict(frozen=True)

    viewport_size: tuple[int, int] | None = None
    client_signature: str = "selfgen-python"
    timestamp: datetime = Field(default_factory=_now)


class _ContextBase(BaseModel):
    model_config = ConfigDict(frozen=True)

    trigger_id: str
    captured_at: datetime = Field(default_factory=_now)
    metadata: dict[str, Any] = Field(default_factory=dict)


class MinimalContext(_ContextBase):
    """Just enough to repair a broken component."""

    tier: Literal["minimal"] = "minimal"
    trigger_kind: Literal["error"] = "error"
    element_kind: str
    error_message: str | None = None


class StandardContext(_ContextBase):
    """The triggering element and optional user input."""

    tier: Literal["standard"] = "standard"
    trigger_kind: Literal["interaction"] = "interaction"
    trigger_element: ElementDescriptor
    user_input: str | None = None


class RichContext(StandardContext):
    """Standard plus bounded neighbourhood of the trigger."""

    tier: Literal["rich"] = "rich"
    sibling_fragments: tuple[ComponentNode, ...] = ()
    parent_fragment: ComponentNode | None = None
    tree_summary: TreeSummary


class FullContext(RichContext):
    """Rich plus ancestry, tree snapshot and environment."""

    tier: Literal["full"] = "full"
    trigger_kind: Literal["recursive-generation"] = "recursive-generation"
    ancestor_path: tuple[ComponentNode, ...] = ()
    full_tree_snapshot: tuple[Node, ...] = ()
    position: Position | None = None
    environment: Environment = Field(default_factory=Environment)


GenerationContext = Annotated[
    Union[MinimalContext, StandardContext, RichContext, FullContext],
    Field(discriminator="tier"),
]


__all__ = [
    "TriggerCategory",
    "ElementDescriptor",
    "TreeSummary",
    "Position",
    "Environment",
    "MinimalContext",
    "StandardContext",
    "RichContext",
    "FullContext",
    "GenerationContext",
]
