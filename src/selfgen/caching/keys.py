"""Deterministic cache keys derived from generation contexts."""

import re

from ..context import GenerationContext, MinimalContext, RichContext, StandardContext
from ..core.hash import hash_fields

KEY_PREFIX = "fragment:"

_WHITESPACE = re.compile(r"\s+")


def normalize_input(user_input: str | None) -> str:
    """Strip and collapse internal whitespace; absent input is empty."""
    if not user_input:
        return ""
    return _WHITESPACE.sub(" ", user_input).strip()


def derive_key(context: GenerationContext) -> str:
    """
    Derive the cache key for a context.

    Only trigger id, trigger kind, normalized user input, parent id and the
    sibling id set contribute, so contexts that differ in timestamps,
    environment or tree snapshot still share a key.
    """
    match context:
        case RichContext():  # includes FullContext
            user_input = context.user_input
            parent_id = context.parent_fragment.id if context.parent_fragment else ""
            sibling_ids = sorted({s.id for s in context.sibling_fragments})
        case StandardContext():
            user_input = context.user_input
            parent_id = ""
            sibling_ids = []
        case MinimalContext():
            user_input = None
            parent_id = ""
            sibling_ids = []

    digest = hash_fields(
        context.trigger_id,
        context.trigger_kind,
        normalize_input(user_input),
        parent_id,
        ",".join(sibling_ids),
    )
    return f"{KEY_PREFIX}{digest}"


__all__ = ["derive_key", "normalize_input", "KEY_PREFIX"]
