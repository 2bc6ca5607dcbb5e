"""
selfgen - a self-extending component tree.

Events without handlers trigger generation; the generated fragments are
cached by context and spliced into the live tree.
"""

from .core import Settings, configure_logging, create_container, get_settings
from .tree import ComponentNode, TextNode, Placeholder, Node, Tree, parse_tree, dump_tree
from .context import TriggerCategory, ElementDescriptor, GenerationContext, capture_context
from .caching import GenerationCache, derive_key
from .pipeline import GenerationPipeline, PipelineResult, PipelineStep, RetryPolicy
from .events import EventResolver, HandlerRegistry, UIEvent
from .placement import PlacementRule, PlacementResult, place
from .state import Renderer, TreeStore
from .orchestrator import Orchestrator

__version__ = "0.1.0"

__all__ = [
    "Settings",
    "configure_logging",
    "create_container",
    "get_settings",
    "ComponentNode",
    "TextNode",
    "Placeholder",
    "Node",
    "Tree",
    "parse_tree",
    "dump_tree",
    "TriggerCategory",
    "ElementDescriptor",
    "GenerationContext",
    "capture_context",
    "GenerationCache",
    "derive_key",
    "GenerationPipeline",
    "PipelineResult",
    "PipelineStep",
    "RetryPolicy",
    "EventResolver",
    "HandlerRegistry",
    "UIEvent",
    "PlacementRule",
    "PlacementResult",
    "place",
    "Renderer",
    "TreeStore",
    "Orchestrator",
]
