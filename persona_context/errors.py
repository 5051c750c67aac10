"""
Persona Context - Core Error Types

Defines the exception hierarchy for the persona-aware compression and
evaluation core. All exceptions inherit from PersonaContextError so callers
can handle every failure of this package in one place.

Taxonomy:
- InvalidPersonaError: persona id is not registered
- InvalidCompressionLevelError: level string is not none/balanced/aggressive
- InputTooLargeError: text exceeds the configured size cap
- InternalInconsistencyError: a computed invariant was violated (a bug)
"""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """
    Standard error codes for MCP tool responses.

    Used for structured error handling and client-side error recovery.
    """

    # Input validation errors
    INVALID_INPUT = "INVALID_INPUT"
    INVALID_PERSONA = "INVALID_PERSONA"
    INVALID_COMPRESSION_LEVEL = "INVALID_COMPRESSION_LEVEL"
    INPUT_TOO_LARGE = "INPUT_TOO_LARGE"

    # Configuration errors
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"

    # Internal errors
    INTERNAL_INCONSISTENCY = "INTERNAL_INCONSISTENCY"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class PersonaContextError(Exception):
    """Base exception for all persona-context errors."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        status_code: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.status_code = status_code

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


class ConfigurationError(PersonaContextError):
    """Raised when configuration is invalid or missing."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message, details, status_code=500)


class ValidationError(PersonaContextError):
    """Raised when input validation fails."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message, details, status_code=400)


class InvalidPersonaError(ValidationError):
    """Raised when a persona id is not one of the registered profiles."""

    def __init__(self, persona_id: Any, known: list[str] | None = None):
        message = f"Unknown persona: {persona_id!r}"
        details: dict[str, Any] = {"persona": persona_id}
        if known:
            details["known_personas"] = known
        super().__init__(message, details)
        self.persona_id = persona_id


class InvalidCompressionLevelError(ValidationError):
    """Raised when a compression level string is not recognized."""

    def __init__(self, level: Any, known: list[str] | None = None):
        message = f"Unknown compression level: {level!r}"
        details: dict[str, Any] = {"level": level}
        if known:
            details["known_levels"] = known
        super().__init__(message, details)
        self.level = level


class InputTooLargeError(PersonaContextError):
    """Raised when input text exceeds the configured maximum size."""

    def __init__(self, size: int, limit: int):
        message = f"Input of {size} characters exceeds the limit of {limit}"
        super().__init__(message, {"size": size, "limit": limit}, status_code=413)
        self.size = size
        self.limit = limit


class InternalInconsistencyError(PersonaContextError):
    """Raised when a computed invariant does not hold. Indicates a bug, not a caller error."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message, details, status_code=500)


def make_error_response(
    error_code: ErrorCode,
    message: str,
    context: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """
    Create a standardized error response for MCP tools.

    Args:
        error_code: Standard error code
        message: Human-readable error message
        context: Additional context/details

    Returns:
        Standardized error response dictionary

    Example:
        >>> make_error_response(
        ...     ErrorCode.INVALID_PERSONA,
        ...     "Unknown persona: 'designer'",
        ...     {"persona": "designer"}
        ... )
        {
            "success": False,
            "error_code": "INVALID_PERSONA",
            "message": "Unknown persona: 'designer'",
            "details": {"persona": "designer"}
        }
    """
    return {
        "success": False,
        "error_code": error_code.value,
        "message": message,
        "details": context or {},
    }


def extract_error_code(error: Exception) -> ErrorCode:
    """
    Extract appropriate ErrorCode from an exception.

    Args:
        error: Exception to categorize

    Returns:
        Appropriate ErrorCode for the exception
    """
    if isinstance(error, InvalidPersonaError):
        return ErrorCode.INVALID_PERSONA

    if isinstance(error, InvalidCompressionLevelError):
        return ErrorCode.INVALID_COMPRESSION_LEVEL

    if isinstance(error, InputTooLargeError):
        return ErrorCode.INPUT_TOO_LARGE

    if isinstance(error, InternalInconsistencyError):
        return ErrorCode.INTERNAL_INCONSISTENCY

    if isinstance(error, ValidationError):
        return ErrorCode.INVALID_INPUT

    if isinstance(error, ConfigurationError):
        return ErrorCode.CONFIGURATION_ERROR

    return ErrorCode.INTERNAL_ERROR


def error_response_from_exception(error: PersonaContextError) -> dict[str, Any]:
    """Build the tool error envelope for a raised PersonaContextError."""
    return make_error_response(extract_error_code(error), error.message, error.details)
