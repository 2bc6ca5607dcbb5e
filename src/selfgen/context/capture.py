"""
Context Capture
Builds a generation context at the tier fixed by the trigger category.
"""

from collections.abc import Sequence
from typing import Any

from ..core.logging_config import get_logger
from ..tree import (
    ComponentNode,
    Node,
    ancestor_path,
    count_nodes,
    find_parent,
    position_of,
    siblings_of,
    walk,
)
from .models import (
    ElementDescriptor,
    Environment,
    FullContext,
    GenerationContext,
    MinimalContext,
    Position,
    RichContext,
    StandardContext,
    TreeSummary,
    TriggerCategory,
)

logger = get_logger(__name__)

DIAGNOSTIC_ATTRIBUTE = "diagnostic"


def has_diagnostics(tree: Sequence[Node]) -> bool:
    """Whether any component in the tree is a diagnostic (error) fragment."""
    return any(
        isinstance(node, ComponentNode) and bool(node.attributes.get(DIAGNOSTIC_ATTRIBUTE))
        for node, _, _ in walk(tree)
    )


class ContextCapture:
    """
    Context builder with bounded neighbourhood sizes.

    The tier is never chosen by the caller: error fixes get Minimal, simple
    interactions Standard, complex interactions Rich and recursive
    generation Full. Capture only reads the tree.
    """

    def __init__(
        self,
        sibling_limit: int = 3,
        ancestor_limit: int = 5,
        client_signature: str = "selfgen-python",
    ) -> None:
        self.sibling_limit = sibling_limit
        self.ancestor_limit = ancestor_limit
        self.client_signature = client_signature

    def capture(
        self,
        category: TriggerCategory | str,
        element: ElementDescriptor,
        tree: Sequence[Node],
        *,
        user_input: str | None = None,
        error_message: str | None = None,
        environment: Environment | None = None,
        metadata: dict[str, Any] | None = None,
        event_name: str | None = None,
    ) -> GenerationContext:
        """
        Capture context for a trigger.

        Args:
            category: Trigger category (selects the tier)
            element: Descriptor of the triggering element; it need not be in the tree
            tree: Current tree (read only)
            user_input: Text the user supplied with the trigger
            error_message: Error being repaired (minimal tier)
            environment: Host environment (full tier)
            metadata: Extra caller fields carried verbatim
            event_name: Event that fired, used to describe the last action

        Raises:
            ValueError: If the category is not a known trigger category
        """
        category = TriggerCategory(category)
        extra = dict(metadata or {})

        match category:
            case TriggerCategory.ERROR_FIX:
                context: GenerationContext = MinimalContext(
                    trigger_id=element.id,
                    element_kind=element.kind,
                    error_message=error_message,
                    metadata=extra,
                )
            case TriggerCategory.SIMPLE_INTERACTION:
                context = StandardContext(
                    trigger_id=element.id,
                    trigger_element=element,
                    user_input=user_input,
                    metadata=extra,
                )
            case TriggerCategory.COMPLEX_INTERACTION:
                context = RichContext(
                    trigger_id=element.id,
                    trigger_element=element,
                    user_input=user_input,
                    metadata=extra,
                    **self._neighbourhood(element, tree, user_input, event_name),
                )
            case TriggerCategory.RECURSIVE_GENERATION:
                position = position_of(tree, element.id)
                context = FullContext(
                    trigger_id=element.id,
                    trigger_element=element,
                    user_input=user_input,
                    metadata=extra,
                    **self._neighbourhood(element, tree, user_input, event_name),
                    ancestor_path=tuple(self._ancestors(tree, element.id)),
                    full_tree_snapshot=tuple(tree),
                    position=Position(index=position[0], depth=position[1]) if position else None,
                    environment=environment or Environment(client_signature=self.client_signature),
                )

        logger.debug(
            "context_captured",
            tier=context.tier,
            trigger_id=element.id,
            category=category.value,
        )
        return context

    def _neighbourhood(
        self,
        element: ElementDescriptor,
        tree: Sequence[Node],
        user_input: str | None,
        event_name: str | None,
    ) -> dict[str, Any]:
        siblings = siblings_of(tree, element.id)[: self.sibling_limit]
        last_action = user_input or f"{event_name or 'interaction'} {element.kind}"
        return {
            "sibling_fragments": tuple(siblings),
            "parent_fragment": find_parent(tree, element.id),
            "tree_summary": TreeSummary(
                count=count_nodes(tree),
                has_errors=has_diagnostics(tree),
                last_action=last_action,
            ),
        }

    def _ancestors(self, tree: Sequence[Node], target_id: str) -> list[ComponentNode]:
        if self.ancestor_limit == 0:
            return []
        # Keep the nearest ancestors
        return ancestor_path(tree, target_id)[-self.ancestor_limit:]


_default_capture = ContextCapture()


def capture_context(
    category: TriggerCategory | str,
    element: ElementDescriptor,
    tree: Sequence[Node],
    **options: Any,
) -> GenerationContext:
    """Capture context with default neighbourhood limits."""
    return _default_capture.capture(category, element, tree, **options)


__all__ = ["ContextCapture", "capture_context", "has_diagnostics", "DIAGNOSTIC_ATTRIBUTE"]
