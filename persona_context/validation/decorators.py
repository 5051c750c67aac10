"""
Persona Context - Validation Decorators

Applies Pydantic input schemas to MCP tools. A tool receives only validated
keyword arguments; invalid input never reaches the core and is answered with
the structured error envelope instead.
"""

import functools
import inspect
import logging
from collections.abc import Callable
from typing import Any

from pydantic import BaseModel, ValidationError

from ..errors import ErrorCode, make_error_response
from ..observability.monitoring import get_observability

logger = logging.getLogger(__name__)


def _validation_failure(func_name: str, error: ValidationError, kwargs: dict[str, Any]) -> dict[str, Any]:
    validation_errors = []
    for err in error.errors():
        field_path = " -> ".join(str(loc) for loc in err["loc"])
        validation_errors.append(
            {
                "field": field_path,
                "message": err["msg"],
                "type": err["type"],
            }
        )

    # Input text can be up to the size cap; log field names only
    logger.warning(
        f"Input validation failed for {func_name}",
        extra={
            "function": func_name,
            "validation_errors": validation_errors,
            "input_fields": sorted(kwargs),
        },
    )

    get_observability().increment(
        "validation.failed",
        tags={
            "function": func_name,
            "error_count": str(len(validation_errors)),
        },
    )

    return make_error_response(
        error_code=ErrorCode.INVALID_INPUT,
        message="Input validation failed",
        context={
            "validation_errors": validation_errors,
            "function": func_name,
        },
    )


def validate_input(schema: type[BaseModel]) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """
    Decorator to validate tool inputs using a Pydantic schema.

    Args:
        schema: Pydantic model class for input validation

    Returns:
        Decorated function with automatic validation

    Example:
        >>> @validate_input(CompressContextInput)
        ... async def compress_context(text: str, level: str | None = None, persona: str | None = None):
        ...     pass

    Error Response:
        {
            "success": False,
            "error_code": "INVALID_INPUT",
            "message": "Input validation failed",
            "details": {
                "validation_errors": [
                    {
                        "field": "text",
                        "message": "Input should be a valid string",
                        "type": "string_type"
                    }
                ],
                "function": "compress_context"
            }
        }
    """

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        @functools.wraps(func)
        async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                validated = schema(**kwargs)
            except ValidationError as e:
                return _validation_failure(func.__name__, e, kwargs)

            return await func(*args, **validated.model_dump(exclude_unset=False))

        @functools.wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                validated = schema(**kwargs)
            except ValidationError as e:
                return _validation_failure(func.__name__, e, kwargs)

            return func(*args, **validated.model_dump(exclude_unset=False))

        if inspect.iscoroutinefunction(func):
            return async_wrapper
        return sync_wrapper

    return decorator
