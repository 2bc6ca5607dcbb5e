"""Input and payload validation with strong typing."""

import sys
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from returns.result import Failure, Result, Success

from .errors import ValidationError
from .json import JSONParseError, validate_json_depth

# Validation limits
MAX_REQUEST_LENGTH = 10_000
MAX_FRAGMENT_SIZE = 512 * 1024  # 512KB
MAX_FRAGMENT_DEPTH = 40


@dataclass(frozen=True)
class ValidationResult:
    """Validation error with details (for Result pattern)."""

    message: str
    field: str | None = None


class RequestValidator(BaseModel):
    """Base validator with strict configuration."""

    model_config = ConfigDict(strict=True, extra="forbid", frozen=True)


class GenerationRequest(RequestValidator):
    """Validated free-form generation request."""

    message: str = Field(min_length=1, max_length=MAX_REQUEST_LENGTH)

    @field_validator("message")
    @classmethod
    def validate_message(cls, v: str) -> str:
        """Ensure message is non-empty after stripping."""
        stripped = v.strip()
        if not stripped:
            raise ValueError("Message cannot be empty")
        return stripped


def validate_payload_size(data: str, max_size: int = MAX_FRAGMENT_SIZE, name: str = "fragment") -> None:
    """
    Validate raw payload size.

    Raises:
        ValidationError: If size exceeds limit
    """
    size = sys.getsizeof(data)
    if size > max_size:
        raise ValidationError(f"{name} size {size} bytes exceeds maximum {max_size} bytes")


def validate_fragment(payload: Any, raw: str) -> Result[None, ValidationResult]:
    """
    Validate a parsed generation payload before it is turned into nodes.

    Args:
        payload: Parsed JSON (list of components or an object holding them)
        raw: The text it was parsed from

    Returns:
        Result indicating success or validation error
    """
    try:
        validate_payload_size(raw)
        validate_json_depth(payload, MAX_FRAGMENT_DEPTH)
    except (ValidationError, JSONParseError) as e:
        return Failure(ValidationResult(str(e)))

    if not isinstance(payload, (list, dict)):
        return Failure(ValidationResult(f"Expected list or object, got {type(payload).__name__}"))
    return Success(None)
