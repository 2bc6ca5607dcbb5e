"""
Handler Registry
Closed set of named handlers that generated components may reference by
string. Unknown names are an explicit error; there is no fuzzy matching.
"""

import inspect
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from ..core.errors import UnregisteredHandlerError
from ..core.logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class UIEvent:
    """An event delivered by the rendering layer."""

    name: str
    target_id: str | None = None
    value: Any = None
    data: dict[str, Any] = field(default_factory=dict)
    default_prevented: bool = False
    propagation_stopped: bool = False

    def prevent_default(self) -> None:
        self.default_prevented = True

    def stop_propagation(self) -> None:
        self.propagation_stopped = True


Handler = Callable[[UIEvent], Awaitable[None] | None]


async def dispatch(handler: Handler, event: UIEvent) -> None:
    """Invoke a handler, awaiting it when it is a coroutine function."""
    result = handler(event)
    if inspect.isawaitable(result):
        await result


class BuiltinHandler(str, Enum):
    """Names every registry knows."""

    NOOP = "noop"
    PREVENT_DEFAULT = "preventDefault"
    STOP_PROPAGATION = "stopPropagation"
    LOG_CLICK = "logClick"
    SUBMIT_FORM = "submitForm"
    LOG_CHANGE = "logChange"
    PERFORM_SEARCH = "performSearch"
    CLOSE_MODAL = "closeModal"
    OPEN_MODAL = "openModal"
    LOG_INTERACTION = "logInteraction"


def _builtin(kind: BuiltinHandler) -> Handler:
    def handle(event: UIEvent) -> None:
        match kind:
            case BuiltinHandler.NOOP:
                pass
            case BuiltinHandler.PREVENT_DEFAULT:
                event.prevent_default()
            case BuiltinHandler.STOP_PROPAGATION:
                event.stop_propagation()
            case BuiltinHandler.LOG_CLICK:
                logger.info("button_clicked", target=event.target_id)
            case BuiltinHandler.SUBMIT_FORM:
                event.prevent_default()
                logger.info("form_submitted", target=event.target_id, data=event.data)
            case BuiltinHandler.LOG_CHANGE:
                logger.info("input_changed", target=event.target_id, value=event.value)
            case BuiltinHandler.PERFORM_SEARCH:
                logger.info("search_performed", target=event.target_id, query=event.value)
            case BuiltinHandler.CLOSE_MODAL:
                logger.info("modal_close_requested", target=event.target_id)
            case BuiltinHandler.OPEN_MODAL:
                logger.info("modal_open_requested", target=event.target_id)
            case BuiltinHandler.LOG_INTERACTION:
                logger.info("component_interaction", action=event.name, target=event.target_id, data=event.data)

    handle.__name__ = kind.value
    return handle


class HandlerRegistry:
    """
    Name to handler mapping seeded with the builtin handlers.

    Extra handlers must be registered explicitly under an exact name.
    """

    def __init__(self) -> None:
        self._handlers: dict[str, Handler] = {kind.value: _builtin(kind) for kind in BuiltinHandler}

    def register(self, name: str, handler: Handler) -> None:
        """
        Register a handler under an exact name.

        Raises:
            ValueError: If the name is empty or the handler is not callable
        """
        if not name or not callable(handler):
            raise ValueError(f"Invalid handler registration for '{name}'")
        self._handlers[name] = handler
        logger.info("handler_registered", name=name)

    def lookup(self, name: str) -> Handler:
        """
        Raises:
            UnregisteredHandlerError: If nothing is registered under the name
        """
        try:
            return self._handlers[name]
        except KeyError:
            raise UnregisteredHandlerError(name) from None

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name in self._handlers

    def names(self) -> list[str]:
        return sorted(self._handlers)


__all__ = ["UIEvent", "Handler", "dispatch", "BuiltinHandler", "HandlerRegistry"]
