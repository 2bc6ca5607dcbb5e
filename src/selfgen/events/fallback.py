"""
Generative Fallback
Handles events that have no explicit or registered handler by generating a
fragment and placing it after the triggering component.
"""

import time
from enum import Enum
from typing import cast

from ..agents.models import FragmentBackend, FragmentResult
from ..caching import GenerationCache, InflightRequests, derive_key
from ..context import ContextCapture, ElementDescriptor, FullContext, TriggerCategory
from ..core.errors import TreeLimitError
from ..core.logging_config import LogContext, get_logger
from ..core.tracing import trace_operation_async
from ..monitoring import metrics_collector
from ..placement import GrowthLimits, PlacementRule, place
from ..state import TreeStore
from ..tree import ComponentNode, Node, NodeMetadata, Tree, find_by_id
from .registry import Handler, UIEvent

logger = get_logger(__name__)

UNKNOWN_KIND = "unknown"


class FallbackOutcome(str, Enum):
    """How a fallback trigger ended."""

    CACHE_HIT = "cache_hit"
    GENERATED = "generated"
    COALESCED = "coalesced"  # joined another trigger's generation; nothing placed
    REJECTED = "rejected"  # growth limit
    FAILED = "failed"


def stamp_generated(node: ComponentNode, depth: int, prompt: str | None = None) -> ComponentNode:
    """Mark a fragment and its components with their generation depth."""
    metadata = NodeMetadata(prompt=prompt, generation_depth=depth)
    children: list[Node] = [
        stamp_generated(child, depth, prompt) if isinstance(child, ComponentNode) else child
        for child in node.children
    ]
    return node.model_copy(update={"metadata": metadata, "children": children})


class GenerativeFallback:
    """
    Fallback trigger: capture, check cache, generate, place, cache.

    Each step runs only after the previous one finished. Any failure is
    logged and leaves the tree exactly as it was.
    """

    def __init__(
        self,
        store: TreeStore,
        cache: GenerationCache,
        backend: FragmentBackend,
        capture: ContextCapture | None = None,
        limits: GrowthLimits | None = None,
        inflight: InflightRequests[FragmentResult] | None = None,
    ) -> None:
        """
        Initialize fallback.

        Args:
            store: Owner of the live tree
            cache: Fragment cache
            backend: Single-fragment generation backend
            capture: Context builder
            limits: Growth limits for recursive generation
            inflight: Shared in-flight generations; None disables coalescing
        """
        self.store = store
        self.cache = cache
        self.backend = backend
        self.capture = capture or ContextCapture()
        self.limits = limits or GrowthLimits()
        self.inflight = inflight

    def handler(self, component_id: str, element_id: str, event_name: str) -> Handler:
        """Bind a fallback handler to a trigger site."""

        async def handle(event: UIEvent) -> None:
            await self.trigger(component_id, element_id, event_name, event)

        handle.__name__ = f"generative_{event_name}"
        return handle

    def _describe(self, tree: Tree, element_id: str) -> ElementDescriptor:
        node = find_by_id(tree, element_id)
        if node is None:
            return ElementDescriptor(id=element_id, kind=UNKNOWN_KIND)
        return ElementDescriptor.from_node(node)

    async def _generate(self, key: str, context: FullContext) -> tuple[FragmentResult, bool]:
        if self.inflight is None:
            return await self.backend.generate_fragment(context), False
        return await self.inflight.run(key, lambda: self.backend.generate_fragment(context))

    def _placer(self, fragment: ComponentNode, component_id: str):
        def mutate(current: Tree) -> tuple[Tree, bool]:
            self.limits.check_size(current, [fragment])
            result = place(current, fragment, PlacementRule(kind="after", target_id=component_id))
            return result.tree, result.applied

        return mutate

    async def trigger(
        self,
        component_id: str,
        element_id: str,
        event_name: str,
        event: UIEvent | None = None,
    ) -> FallbackOutcome:
        """Run the fallback for one event."""
        if event is not None:
            event.prevent_default()
            event.stop_propagation()

        start = time.time()
        with LogContext(component_id=component_id, trigger_id=element_id, event=event_name):
            async with trace_operation_async("fallback_trigger", component_id=component_id):
                outcome = await self._run(component_id, element_id, event_name, event)

            duration = time.time() - start
            logger.info("fallback_finished", outcome=outcome.value, duration=duration)
            metrics_collector.record_generation("fallback", outcome.value, duration)
            return outcome

    async def _run(
        self,
        component_id: str,
        element_id: str,
        event_name: str,
        event: UIEvent | None,
    ) -> FallbackOutcome:
        tree = self.store.snapshot()
        user_input = None if event is None or event.value is None else str(event.value)
        context = cast(FullContext, self.capture.capture(
            TriggerCategory.RECURSIVE_GENERATION,
            self._describe(tree, element_id),
            tree,
            user_input=user_input,
            event_name=event_name,
        ))

        try:
            depth = self.limits.check_depth(find_by_id(tree, component_id))
        except TreeLimitError as e:
            logger.warning("fallback_rejected", reason=str(e))
            return FallbackOutcome.REJECTED

        key = derive_key(context)
        generated: FragmentResult | None = None
        try:
            entry = await self.cache.get(key)
            if entry is not None:
                fragment = entry.fragment
                outcome = FallbackOutcome.CACHE_HIT
            else:
                generated, joined = await self._generate(key, context)
                if joined:
                    metrics_collector.record_coalesced()
                    return FallbackOutcome.COALESCED
                fragment = generated.fragment
                outcome = FallbackOutcome.GENERATED

            stamped = stamp_generated(fragment, depth, prompt=f"{event_name} {element_id}")
            applied = self.store.commit(self._placer(stamped, component_id))
            if not applied:
                logger.warning("fallback_placed_at_root", component_id=component_id)
        except TreeLimitError as e:
            logger.warning("fallback_rejected", reason=str(e))
            return FallbackOutcome.REJECTED
        except Exception as e:
            logger.error("fallback_failed", error=str(e), error_type=type(e).__name__)
            metrics_collector.record_error(type(e).__name__, "fallback")
            return FallbackOutcome.FAILED

        if generated is not None:
            await self.cache.put(key, generated.fragment, generated.reasoning)
        return outcome


__all__ = ["FallbackOutcome", "GenerativeFallback", "stamp_generated", "UNKNOWN_KIND"]
