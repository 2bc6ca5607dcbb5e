"""Event-to-handler resolution with generative fallback."""

from .registry import UIEvent, Handler, dispatch, BuiltinHandler, HandlerRegistry
from .fallback import FallbackOutcome, GenerativeFallback, stamp_generated
from .resolver import EventResolver, is_handler_attribute

__all__ = [
    "UIEvent",
    "Handler",
    "dispatch",
    "BuiltinHandler",
    "HandlerRegistry",
    "FallbackOutcome",
    "GenerativeFallback",
    "stamp_generated",
    "EventResolver",
    "is_handler_attribute",
]
