"""
UI Orchestrator
Application-shell facade over the generation core: runs the pipeline,
places its output, activates placeholders, resolves events and feeds render
errors to the repair queue.
"""

import re
from collections.abc import Sequence
from typing import Any

from .agents.prompts import describe_context
from .context import ContextCapture, ElementDescriptor, TriggerCategory
from .core.logging_config import LogContext, get_logger
from .core.validate import MAX_REQUEST_LENGTH, GenerationRequest
from .events import EventResolver, Handler, UIEvent, dispatch
from .monitoring import metrics_collector
from .pipeline import GenerationPipeline, PipelineResult
from .placement import GrowthLimits, PlacementRule, place
from .repair import RepairQueue
from .state import TreeStore
from .tree import ComponentNode, Node, Placeholder, Tree, find_by_id, unknown_kind_nodes

logger = get_logger(__name__)

_SLOT = re.compile(r"\{\{\s*(\w+)\s*\}\}")
_CONTEXT_HEADER = "\n\nContext:\n"


def fill_template(template: str, values: dict[str, Any]) -> str:
    """Fill ``{{name}}`` slots; slots without a value become empty."""
    return _SLOT.sub(lambda m: "" if values.get(m.group(1)) is None else str(values[m.group(1)]), template)


class Orchestrator:
    """Ties the pipeline, placement, events and repair to one live tree."""

    def __init__(
        self,
        store: TreeStore,
        pipeline: GenerationPipeline,
        resolver: EventResolver,
        repairs: RepairQueue,
        capture: ContextCapture | None = None,
        limits: GrowthLimits | None = None,
    ) -> None:
        self.store = store
        self.pipeline = pipeline
        self.resolver = resolver
        self.repairs = repairs
        self.capture = capture or ContextCapture()
        self.limits = limits or GrowthLimits()
        self._pending_placeholders: set[str] = set()

    @property
    def tree(self) -> Tree:
        return self.store.snapshot()

    async def run_pipeline(self, request: str | GenerationRequest) -> PipelineResult:
        """Run the generation pipeline without touching the tree."""
        return await self.pipeline.run(request)

    def _commit_fragments(self, fragments: Sequence[Node], rule: PlacementRule | None) -> bool:
        def mutate(current: Tree) -> tuple[Tree, bool]:
            if rule is None:
                self.limits.check_size([], fragments)
                return list(fragments), True
            removed = 1 if rule.kind == "replace" and find_by_id(current, rule.target_id or "") else 0
            self.limits.check_size(current, fragments, removed=removed)
            result = place(current, fragments, rule)
            if result.modal:
                self.store.present_modal(result.modal)
            return result.tree, result.applied

        return self.store.commit(mutate)

    async def generate_from_request(
        self,
        request: str,
        rule: PlacementRule | None = None,
    ) -> PipelineResult:
        """
        Generate from a free-form request and place the result.

        Without a rule the generated fragments become the whole tree. A failed
        run leaves the tree unchanged.
        """
        result = await self.pipeline.run(request)
        if not result.success:
            logger.warning("generation_not_placed", failed_step=getattr(result.failed_step, "index", None))
            return result

        try:
            self._commit_fragments(result.fragments, rule)
        except Exception as e:
            logger.error("placement_failed", error=str(e))
            metrics_collector.record_error(type(e).__name__, "orchestrator")
            return result.model_copy(update={"success": False})

        self.audit_kinds()
        return result

    async def activate_placeholder(self, placeholder_id: str, user_input: Any = None) -> bool:
        """
        Replace a placeholder with content generated from its template.

        Returns:
            True if the placeholder was replaced. Unknown, already replaced and
            already pending placeholders are ignored.
        """
        node = find_by_id(self.store.snapshot(), placeholder_id)
        if not isinstance(node, Placeholder):
            logger.info("placeholder_not_found", placeholder_id=placeholder_id)
            return False
        if placeholder_id in self._pending_placeholders:
            logger.info("placeholder_pending", placeholder_id=placeholder_id)
            return False

        self._pending_placeholders.add(placeholder_id)
        try:
            with LogContext(placeholder_id=placeholder_id):
                request = fill_template(
                    node.generation_template,
                    {"userInput": user_input, "value": user_input},
                )
                result = await self.generate_from_request(
                    request,
                    PlacementRule(kind="replace", target_id=placeholder_id),
                )
                return result.success
        finally:
            self._pending_placeholders.discard(placeholder_id)

    def placeholder_handler(self, placeholder_id: str) -> Handler:
        """Handler the renderer binds to a placeholder's trigger."""

        async def handle(event: UIEvent) -> None:
            event.prevent_default()
            await self.activate_placeholder(placeholder_id, event.value)

        return handle

    def generation_trigger(
        self,
        template: str,
        category: TriggerCategory | str = TriggerCategory.SIMPLE_INTERACTION,
        rule_kind: str = "after",
    ) -> Handler:
        """
        Handler that generates from ``template`` with context at the
        category's tier, placed relative to the event target.
        """

        async def handle(event: UIEvent) -> None:
            event.prevent_default()
            tree = self.store.snapshot()
            target = event.target_id or ""
            node = find_by_id(tree, target)
            element = ElementDescriptor.from_node(node) if node else ElementDescriptor(id=target, kind="unknown")
            value = None if event.value is None else str(event.value)
            context = self.capture.capture(category, element, tree, user_input=value, event_name=event.name)
            instruction = fill_template(template, {"value": value, "userInput": value})
            budget = max(MAX_REQUEST_LENGTH - len(instruction) - len(_CONTEXT_HEADER), 0)
            request = instruction + _CONTEXT_HEADER + describe_context(context, max_chars=budget)
            await self.generate_from_request(request, PlacementRule(kind=rule_kind, target_id=target))

        return handle

    def resolve(self, event_name: str, declared_value: Any, component_id: str, element_id: str) -> Handler:
        """Resolve the handler for an event on an element."""
        return self.resolver.resolve(event_name, declared_value, component_id, element_id)

    async def handle_event(
        self,
        event: UIEvent,
        declared_value: Any,
        component_id: str,
        element_id: str | None = None,
    ) -> None:
        """Resolve and run the handler for an event."""
        handler = self.resolve(event.name, declared_value, component_id, element_id or event.target_id or component_id)
        await dispatch(handler, event)

    def report_render_error(self, component_id: str, error_message: str) -> None:
        """Queue a repair for a component that failed to render."""
        self.repairs.submit(component_id, error_message)

    def audit_kinds(self) -> list[ComponentNode]:
        """Queue repairs for components whose kind cannot be rendered. Needs a running loop."""
        offenders = unknown_kind_nodes(self.store.snapshot())
        for node in offenders:
            logger.error("unknown_component_kind", component_id=node.id, kind=node.kind)
            self.repairs.submit(node.id, f"Unknown component kind '{node.kind}'")
        return offenders


__all__ = ["Orchestrator", "fill_template"]
