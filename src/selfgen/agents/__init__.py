"""Generation collaborators and their model-backed implementations."""

from .models import (
    CustomPrimitive,
    CompositePrimitive,
    ComponentAnalysis,
    FragmentResult,
    AcquireResult,
    TextModel,
    Analyzer,
    Synthesizer,
    FragmentBackend,
    Repairer,
    PrimitiveCatalog,
)
from .analyzer import ComponentAnalyzer
from .synthesizer import CodeSynthesizer
from .fragment import FragmentGenerator
from .catalog import StaticCatalog, SHADCN_PRIMITIVES, normalize_name
from .prompts import describe_context

__all__ = [
    "CustomPrimitive",
    "CompositePrimitive",
    "ComponentAnalysis",
    "FragmentResult",
    "AcquireResult",
    "TextModel",
    "Analyzer",
    "Synthesizer",
    "FragmentBackend",
    "Repairer",
    "PrimitiveCatalog",
    "ComponentAnalyzer",
    "CodeSynthesizer",
    "FragmentGenerator",
    "StaticCatalog",
    "SHADCN_PRIMITIVES",
    "normalize_name",
    "describe_context",
]
