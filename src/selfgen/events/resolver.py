"""Event handler resolution: explicit, registered, then generative."""

import re
from typing import Any

from ..core.logging_config import get_logger
from ..tree import ComponentNode
from .fallback import GenerativeFallback
from .registry import Handler, HandlerRegistry

logger = get_logger(__name__)

# Attribute names that carry event handlers
_HANDLER_ATTRIBUTE = re.compile(r"^on[A-Z]")


def is_handler_attribute(name: str) -> bool:
    return bool(_HANDLER_ATTRIBUTE.match(name))


class EventResolver:
    """
    Decides what handles an event.

    Precedence: a callable declared value is used as is, a string naming a
    registered handler resolves through the registry, anything else gets a
    generative fallback bound to the trigger site.
    """

    def __init__(self, registry: HandlerRegistry, fallback: GenerativeFallback) -> None:
        self.registry = registry
        self.fallback = fallback

    def resolve(
        self,
        event_name: str,
        declared_value: Any,
        component_id: str,
        element_id: str,
    ) -> Handler:
        """Resolve a handler for ``event_name`` on an element."""
        if callable(declared_value):
            logger.debug("handler_explicit", event_name=event_name, component_id=component_id)
            return declared_value

        if isinstance(declared_value, str):
            if declared_value in self.registry:
                logger.debug("handler_registered", event_name=event_name, name=declared_value)
                return self.registry.lookup(declared_value)
            logger.warning(
                "handler_unregistered",
                event_name=event_name,
                name=declared_value,
                component_id=component_id,
            )

        logger.info("handler_generative", event_name=event_name, component_id=component_id, element_id=element_id)
        return self.fallback.handler(component_id, element_id, event_name)

    def bind(self, component: ComponentNode, element_id: str | None = None) -> dict[str, Handler]:
        """Resolve every handler attribute declared on a component."""
        return {
            name: self.resolve(name, value, component.id, element_id or component.id)
            for name, value in component.attributes.items()
            if is_handler_attribute(name)
        }


__all__ = ["EventResolver", "is_handler_attribute"]
