"""Error taxonomy for generation, placement and resolution failures."""


class SelfGenError(Exception):
    """Base class for all selfgen errors."""

    def __init__(self, message: str, original: Exception | None = None) -> None:
        super().__init__(message)
        self.original = original


class TransportError(SelfGenError):
    """A collaborator call failed at the network/process boundary."""


class MalformedResultError(SelfGenError):
    """A collaborator returned text that could not be parsed into the expected shape."""

    def __init__(self, message: str, raw: str = "", original: Exception | None = None) -> None:
        super().__init__(message, original)
        self.raw = raw


class TargetNotFoundError(SelfGenError):
    """An id referenced by a lookup is not present in the current tree."""

    def __init__(self, target_id: str) -> None:
        super().__init__(f"No node with id '{target_id}' in tree")
        self.target_id = target_id


class UnknownComponentKindError(SelfGenError):
    """A node kind is neither a structured kind nor a passthrough primitive."""

    def __init__(self, node_id: str, kind: str) -> None:
        super().__init__(f"Unknown component kind '{kind}' on node '{node_id}'")
        self.node_id = node_id
        self.kind = kind


class UnregisteredHandlerError(SelfGenError):
    """A handler name is not present in the handler registry."""

    def __init__(self, name: str) -> None:
        super().__init__(f"No handler registered under '{name}'")
        self.name = name


class TreeLimitError(SelfGenError):
    """A placement would push the tree past a configured growth limit."""


class ValidationError(SelfGenError):
    """Validation failed."""


__all__ = [
    "SelfGenError",
    "TransportError",
    "MalformedResultError",
    "TargetNotFoundError",
    "UnknownComponentKindError",
    "UnregisteredHandlerError",
    "TreeLimitError",
    "ValidationError",
]
