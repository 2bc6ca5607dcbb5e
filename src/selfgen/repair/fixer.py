"""
Component Repair
Fixes a broken component by the cheapest strategy that works: attribute
name fixes from a lookup table, a previously successful fix for the same
error, then the repair model.
"""

from enum import Enum
from typing import cast

from ..agents.catalog import normalize_name
from ..agents.models import Repairer
from ..context import ContextCapture, ElementDescriptor, MinimalContext, TriggerCategory
from ..core.cache import LRUCache
from ..core.hash import hash_fields
from ..core.json import safe_json_dumps
from ..core.logging_config import get_logger
from ..monitoring import metrics_collector
from ..tree import KNOWN_KINDS, ComponentNode

logger = get_logger(__name__)

# HTML attribute spellings that React-style renderers reject
ATTRIBUTE_FIXES: dict[str, str] = {
    "ariaLabel": "aria-label",
    "class": "className",
    "for": "htmlFor",
    "tabindex": "tabIndex",
    "readonly": "readOnly",
    "maxlength": "maxLength",
    "minlength": "minLength",
    "contenteditable": "contentEditable",
    "spellcheck": "spellCheck",
    "autocomplete": "autoComplete",
    "autofocus": "autoFocus",
    "autoplay": "autoPlay",
    "crossorigin": "crossOrigin",
    "formaction": "formAction",
    "formenctype": "formEncType",
    "formmethod": "formMethod",
    "formnovalidate": "formNoValidate",
    "formtarget": "formTarget",
    "novalidate": "noValidate",
    "usemap": "useMap",
}


class RepairStrategy(str, Enum):
    QUICK_FIX = "quick_fix"
    CACHED = "cached"
    MODEL = "model"


def quick_fix(component: ComponentNode) -> ComponentNode | None:
    """Apply lookup-table fixes. Returns None when nothing changed."""
    attributes = dict(component.attributes)
    changed = False
    for wrong, right in ATTRIBUTE_FIXES.items():
        if wrong in attributes:
            attributes[right] = attributes.pop(wrong)
            changed = True
            logger.info("quick_fix_applied", component_id=component.id, wrong=wrong, right=right)

    kind = component.kind
    if kind not in KNOWN_KINDS and normalize_name(kind) in KNOWN_KINDS:
        kind = normalize_name(kind)
        changed = True
        logger.info("quick_fix_applied", component_id=component.id, wrong=component.kind, right=kind)

    if not changed:
        return None
    return component.model_copy(update={"attributes": attributes, "kind": kind})


def fix_key(component: ComponentNode, error_message: str) -> str:
    """Cache key for a fix: the error plus everything about the component but its id."""
    content = safe_json_dumps(component.model_dump(mode="json", exclude={"id"}))
    return hash_fields(error_message, content)


class RepairWorker:
    """Produces a fixed replacement for a broken component."""

    def __init__(
        self,
        repairer: Repairer | None = None,
        capture: ContextCapture | None = None,
        fix_cache_size: int = 100,
    ) -> None:
        """
        Initialize worker.

        Args:
            repairer: Model-backed repairer; None limits repairs to table fixes
            capture: Context builder for the repair model
            fix_cache_size: Remembered fixes, keyed by error and component content
        """
        self.repairer = repairer
        self.capture = capture or ContextCapture()
        self._fixes: LRUCache[ComponentNode] = LRUCache(max_size=fix_cache_size)

    async def fix(self, component: ComponentNode, error_message: str) -> tuple[ComponentNode, RepairStrategy] | None:
        """
        Fix a component.

        Returns:
            (fixed component keeping the original id, strategy), or None if
            every strategy failed
        """
        fixed = quick_fix(component)
        if fixed is not None:
            metrics_collector.record_repair(RepairStrategy.QUICK_FIX.value, "success")
            return fixed, RepairStrategy.QUICK_FIX

        key = fix_key(component, error_message)
        cached = self._fixes.get(key)
        if cached is not None:
            logger.info("cached_fix_applied", component_id=component.id)
            metrics_collector.record_repair(RepairStrategy.CACHED.value, "success")
            return cached.model_copy(update={"id": component.id}), RepairStrategy.CACHED

        if self.repairer is None:
            metrics_collector.record_repair(RepairStrategy.MODEL.value, "skipped")
            return None

        context = cast(MinimalContext, self.capture.capture(
            TriggerCategory.ERROR_FIX,
            ElementDescriptor.from_node(component),
            [],
            error_message=error_message,
        ))

        try:
            repaired = await self.repairer.repair(context, component)
        except Exception as e:
            logger.error("model_fix_failed", component_id=component.id, error=str(e))
            metrics_collector.record_repair(RepairStrategy.MODEL.value, "failed")
            metrics_collector.record_error(type(e).__name__, "repair")
            return None

        repaired = repaired.model_copy(update={"id": component.id})
        self._fixes.set(key, repaired)
        logger.info("model_fix_applied", component_id=component.id)
        metrics_collector.record_repair(RepairStrategy.MODEL.value, "success")
        return repaired, RepairStrategy.MODEL


__all__ = ["ATTRIBUTE_FIXES", "RepairStrategy", "RepairWorker", "fix_key", "quick_fix"]
