"""
Prompt Templates
Prompts for the analyzer, synthesizer, fragment and repair agents.
"""

from langchain_core.prompts import PromptTemplate

from ..context import FullContext, GenerationContext, MinimalContext, RichContext, StandardContext
from ..core.json import safe_json_dumps
from ..tree import dump_node, dump_tree

ANALYZER_PROMPT = PromptTemplate.from_template(
    """You break a UI request down into the primitives needed to build it.

REQUEST: {request}
AVAILABLE PRIMITIVES: {available}

Respond with one JSON object:
{{
  "requiredComponents": ["primitive-name"],
  "customComponents": [{{"name": "custom-name", "description": "..."}}],
  "compositeComponents": [{{"name": "composite-name", "components": ["a", "b"], "description": "..."}}],
  "reasoning": "why these primitives"
}}

Only list required primitives that appear in AVAILABLE PRIMITIVES.
"""
)

SYNTHESIZER_PROMPT = PromptTemplate.from_template(
    """You generate component trees for a dynamic renderer.

REQUEST: {request}
ANALYSIS: {analysis}
AVAILABLE PRIMITIVES: {available}

Respond with a JSON array of components:
[
  {{
    "id": "unique-id",
    "type": "component-type",
    "props": {{"key": "value"}},
    "children": []
  }}
]

Children may be components, plain strings, or placeholders of the form
{{"id": "...", "type": "placeholder", "props": {{"generationPrompt": "...", "triggerComponent": {{...}}, "triggerType": "onClick"}}}}.
Use structured kinds ({kinds}), available primitives or standard HTML elements.
"""
)

FRAGMENT_PROMPT = PromptTemplate.from_template(
    """An event fired on a component that has no handler. Generate ONE new component
that continues the user's interaction. It will be inserted after the trigger.

{context}

Respond with one JSON object:
{{
  "ui": {{"id": "unique-id", "type": "component-type", "props": {{}}, "children": []}},
  "reasoning": "why this component"
}}
"""
)

REPAIR_PROMPT = PromptTemplate.from_template(
    """A component failed to render. Return ONLY the corrected JSON object for it.

ERROR: {error}
COMPONENT: {component}
CONTEXT: {context}

Keep the same "id". If you change "type", use a structured kind ({kinds}) or an HTML tag.
"""
)


def _clip(text: str, limit: int) -> str:
    if len(text) <= limit:
        return text
    if limit < 3:
        return text[:limit]
    return text[: limit - 3] + "..."


def describe_context(context: GenerationContext, max_chars: int | None = None) -> str:
    """
    Render a context as prompt text; richer tiers add more lines.

    The full tree snapshot is written last, so clipping to ``max_chars``
    shortens it before anything else.
    """
    match context:
        case MinimalContext():
            lines = [
                f"- Component {context.trigger_id} of kind '{context.element_kind}'",
                f"- Error: {context.error_message or 'unknown'}",
            ]
        case StandardContext():
            element = context.trigger_element
            lines = [
                f"- Trigger: '{element.kind}' element (id: {element.id})",
                f"- Attributes: {safe_json_dumps(element.attributes)}",
                f"- User input: {context.user_input or '(none)'}",
            ]

    if isinstance(context, RichContext):
        siblings = [dump_node(s) for s in context.sibling_fragments]
        parent = dump_node(context.parent_fragment) if context.parent_fragment else None
        summary = context.tree_summary
        lines += [
            f"- Siblings: {safe_json_dumps(siblings)}",
            f"- Parent: {safe_json_dumps(parent)}",
            f"- App state: {summary.count} components, errors: {summary.has_errors}, last action: {summary.last_action}",
        ]

    if isinstance(context, FullContext):
        if context.position is not None:
            lines.append(f"- Position: index {context.position.index}, depth {context.position.depth}")
        lines += [
            f"- Ancestors: {', '.join(f'{a.kind}#{a.id}' for a in context.ancestor_path) or '(root)'}",
            f"- Client: {context.environment.client_signature}",
        ]
        if context.environment.viewport_size:
            width, height = context.environment.viewport_size
            lines.append(f"- Viewport: {width}x{height}")
        lines.append(f"- Full tree: {safe_json_dumps(dump_tree(list(context.full_tree_snapshot)))}")

    text = "\n".join(lines)
    return text if max_chars is None else _clip(text, max_chars)


__all__ = [
    "ANALYZER_PROMPT",
    "SYNTHESIZER_PROMPT",
    "FRAGMENT_PROMPT",
    "REPAIR_PROMPT",
    "describe_context",
]
