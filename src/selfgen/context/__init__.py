"""Tiered generation context."""

from .models import (
    TriggerCategory,
    ElementDescriptor,
    TreeSummary,
    Position,
    Environment,
    MinimalContext,
    StandardContext,
    RichContext,
    FullContext,
    GenerationContext,
)
from .capture import ContextCapture, capture_context, has_diagnostics, DIAGNOSTIC_ATTRIBUTE

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
    "ContextCapture",
    "capture_context",
    "has_diagnostics",
    "DIAGNOSTIC_ATTRIBUTE",
]
