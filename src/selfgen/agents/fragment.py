"""
Fragment Generator
Single-fragment generation for fallback triggers, and model-backed repair.
"""

from ..context import GenerationContext, MinimalContext
from ..core.errors import MalformedResultError
from ..core.json import JSONParseError, extract_json, safe_json_dumps
from ..core.logging_config import get_logger
from ..tree import KNOWN_KINDS, ComponentNode, dump_node, parse_node
from .llm import invoke_text
from .models import FragmentResult, TextModel
from .prompts import FRAGMENT_PROMPT, REPAIR_PROMPT, describe_context

logger = get_logger(__name__)


def _component_from(data: object, raw: str) -> ComponentNode:
    try:
        node = parse_node(data)
    except ValueError as e:
        raise MalformedResultError(f"Response is not a component: {e}", raw, e) from e
    if not isinstance(node, ComponentNode):
        raise MalformedResultError("Response must be a single component", raw)
    return node


class FragmentGenerator:
    """Generates one component from a context; also repairs broken ones."""

    def __init__(self, llm: TextModel) -> None:
        self.llm = llm

    async def generate_fragment(self, context: GenerationContext) -> FragmentResult:
        """
        Raises:
            TransportError: Model call failed
            MalformedResultError: Response does not hold a component
        """
        prompt = FRAGMENT_PROMPT.format(context=describe_context(context))
        text = await invoke_text(self.llm, prompt, "fragment")

        try:
            data = extract_json(text)
        except JSONParseError as e:
            raise MalformedResultError(f"Fragment is not JSON: {e}", text, e) from e

        reasoning = ""
        if isinstance(data, dict) and isinstance(data.get("ui"), dict):
            meta = data.get("metadata")
            reasoning = str(data.get("reasoning") or (meta.get("reasoning") if isinstance(meta, dict) else "") or "")
            data = data["ui"]
        elif isinstance(data, list) and len(data) == 1:
            data = data[0]

        fragment = _component_from(data, text)
        logger.info("fragment_generated", fragment_id=fragment.id, kind=fragment.kind)
        return FragmentResult(fragment=fragment, reasoning=reasoning)

    async def repair(self, context: MinimalContext, component: ComponentNode) -> ComponentNode:
        """
        Raises:
            TransportError: Model call failed
            MalformedResultError: Response does not hold a component
        """
        prompt = REPAIR_PROMPT.format(
            error=context.error_message or "unknown",
            component=safe_json_dumps(dump_node(component)),
            context=describe_context(context),
            kinds=", ".join(sorted(KNOWN_KINDS)),
        )
        text = await invoke_text(self.llm, prompt, "repair")

        try:
            data = extract_json(text)
        except JSONParseError as e:
            raise MalformedResultError(f"Repair is not JSON: {e}", text, e) from e

        fixed = _component_from(data, text)
        logger.info("component_repaired", component_id=component.id, kind=fixed.kind)
        return fixed
