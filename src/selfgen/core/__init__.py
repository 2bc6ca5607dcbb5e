"""Core utilities and infrastructure."""

from .config import Settings, get_settings
from .errors import (
    SelfGenError,
    TransportError,
    MalformedResultError,
    TargetNotFoundError,
    UnknownComponentKindError,
    UnregisteredHandlerError,
    TreeLimitError,
    ValidationError,
)
from .validate import GenerationRequest, ValidationResult, validate_fragment
from .logging_config import configure_logging, get_logger, LogContext
from .json import extract_json, safe_json_dumps, JSONParseError
from .hash import Algorithm, hash_string, hash_fields
from .cache import LRUCache, Stats
from .tracing import init_tracer, trace_operation_async


def create_container(settings: Settings | None = None, **overrides):
    """Create dependency injection container (lazy import to avoid circular deps)."""
    from .container import create_container as _create_container

    return _create_container(settings, **overrides)


__all__ = [
    # Config
    "Settings",
    "get_settings",
    # Errors
    "SelfGenError",
    "TransportError",
    "MalformedResultError",
    "TargetNotFoundError",
    "UnknownComponentKindError",
    "UnregisteredHandlerError",
    "TreeLimitError",
    "ValidationError",
    # Validation
    "GenerationRequest",
    "ValidationResult",
    "validate_fragment",
    # Logging
    "configure_logging",
    "get_logger",
    "LogContext",
    # JSON
    "extract_json",
    "safe_json_dumps",
    "JSONParseError",
    # Hashing
    "Algorithm",
    "hash_string",
    "hash_fields",
    # Caching
    "LRUCache",
    "Stats",
    # Tracing
    "init_tracer",
    "trace_operation_async",
    # DI
    "create_container",
]
