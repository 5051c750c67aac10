"""
Persona Context — Server

FastMCP server using stdio transport (Model Context Protocol).

A thin layer over the core: every tool validates its input with a Pydantic
schema, calls the compression engine, evaluator or registry, and turns
PersonaContextError into the structured error envelope. The server keeps no
state besides in-memory metrics.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any

from fastmcp import FastMCP

from . import __version__
from .compression import get_compression_engine, token_breakdown
from .compression.tokens import estimate_tokens as estimate_token_count
from .config import get_config, load_config
from .errors import ErrorCode, PersonaContextError, error_response_from_exception, make_error_response
from .evaluation import get_quality_evaluator
from .observability import configure_logging, get_observability, initialize_observability
from .personas import get_persona_registry
from .validation import validate_input
from .validation.tool_schemas import (
    CheckStatusInput,
    CompressContextInput,
    EstimateTokensInput,
    EvaluateResponseInput,
    GetMetricsInput,
    GetPersonaInput,
    ListPersonasInput,
)

logger = logging.getLogger(__name__)

SERVICE_NAME = "persona-context"


@asynccontextmanager
async def server_lifespan(server: Any) -> Any:
    """Server lifespan manager (startup/shutdown)."""
    await initialize_server()
    yield
    await cleanup_server()


mcp = FastMCP("Persona Context - Persona-Aware Compression", lifespan=server_lifespan)

_initialized = False


def _tool_error(tool: str, error: Exception) -> dict[str, Any]:
    """Map an exception raised by the core to the tool error envelope."""
    obs = get_observability()

    if isinstance(error, PersonaContextError):
        response = error_response_from_exception(error)
        logger.warning(
            f"{tool} rejected request: {error.message}",
            extra={"tool": tool, "error_code": response["error_code"], "details": error.details},
        )
        obs.increment("tools.errors", tags={"tool": tool, "error_code": response["error_code"]})
        return response

    logger.error(f"Unexpected error in {tool}: {error}", extra={"tool": tool}, exc_info=True)
    obs.increment("tools.errors", tags={"tool": tool, "error_code": ErrorCode.INTERNAL_ERROR.value})
    return make_error_response(
        error_code=ErrorCode.INTERNAL_ERROR,
        message=f"Internal error: {error}",
        context={"tool": tool, "error_type": type(error).__name__},
    )


# ============================================================================
# Tools
# ============================================================================


@validate_input(CheckStatusInput)
async def check_status(include_details: bool = False) -> dict[str, Any]:
    """
    Check server health and status.

    Args:
        include_details: Include configuration and observability details

    Returns:
        System status information
    """
    obs = get_observability()
    obs.increment("tools.check_status")

    config = get_config()
    registry = get_persona_registry()

    status: dict[str, Any] = {
        "status": "healthy",
        "service": SERVICE_NAME,
        "version": __version__,
        "personas": registry.ids(),
        "default_level": config.compression.default_level,
    }

    if include_details:
        status["config"] = {
            "environment": config.environment,
            "log_level": config.log_level,
            "max_input_chars": config.compression.max_input_chars,
        }
        status["observability"] = {
            "metrics_enabled": obs.enable_metrics,
        }

    return status


@validate_input(ListPersonasInput)
async def list_personas() -> dict[str, Any]:
    """
    List the built-in personas with their preserve keywords.

    Returns:
        Persona profiles in registration order
    """
    get_observability().increment("tools.list_personas")

    profiles = [profile.to_dict() for profile in get_persona_registry()]
    return {"success": True, "count": len(profiles), "personas": profiles}


@validate_input(GetPersonaInput)
async def get_persona(persona: str) -> dict[str, Any]:
    """
    Describe one persona.

    Args:
        persona: Persona id

    Returns:
        The persona profile, or INVALID_PERSONA for an unknown id
    """
    get_observability().increment("tools.get_persona")

    try:
        profile = get_persona_registry().lookup(persona)
    except PersonaContextError as e:
        return _tool_error("get_persona", e)

    return {"success": True, "persona": profile.to_dict()}


@validate_input(CompressContextInput)
async def compress_context(
    text: str,
    level: str | None = None,
    persona: str | None = None,
    include_original: bool = False,
) -> dict[str, Any]:
    """
    Compress text while keeping every preserve keyword of the persona.

    Args:
        text: Text to compress
        level: none, balanced or aggressive (None = configured default)
        persona: Persona whose keywords must survive
        include_original: Echo the original text in the result

    Returns:
        CompressionResult fields (camelCase) plus success flag
    """
    obs = get_observability()
    obs.generate_trace_id()
    obs.increment("tools.compress_context")

    resolved_level = level or get_config().compression.default_level

    try:
        with obs.trace("compress_context", tags={"level": resolved_level}):
            result = get_compression_engine().compress(text, resolved_level, persona)
    except Exception as e:
        return _tool_error("compress_context", e)

    obs.histogram("compression.ratio", result.compression_ratio, tags={"level": result.level.value})
    obs.increment("compression.tokens_saved", result.tokens_saved)

    response = result.to_dict()
    if not include_original:
        response.pop("originalText")
    response["success"] = True
    return response


@validate_input(EvaluateResponseInput)
async def evaluate_response(response_text: str, persona: str | None = None) -> dict[str, Any]:
    """
    Score a response against a persona.

    Args:
        response_text: Response to score
        persona: Active persona (unknown ids fall back to default scores)

    Returns:
        EvaluationResult fields (camelCase) plus success flag
    """
    obs = get_observability()
    obs.increment("tools.evaluate_response")

    try:
        result = get_quality_evaluator().evaluate(response_text, persona)
    except Exception as e:
        return _tool_error("evaluate_response", e)

    obs.histogram("evaluation.total_score", result.total_score)
    if result.needs_feedback:
        obs.increment("evaluation.feedback", tags={"persona": persona or "none"})

    response = result.to_dict()
    response["success"] = True
    return response


@validate_input(EstimateTokensInput)
async def estimate_tokens(content: str, include_breakdown: bool = False) -> dict[str, Any]:
    """
    Estimate tokens with the same heuristic the compressor uses.

    Args:
        content: Content to estimate
        include_breakdown: Include line/word/code-block breakdown

    Returns:
        Token estimate and optional breakdown
    """
    get_observability().increment("tools.estimate_tokens")

    result: dict[str, Any] = {
        "success": True,
        "token_estimate": estimate_token_count(content),
        "content_length": len(content),
    }
    if include_breakdown:
        result["breakdown"] = token_breakdown(content)

    return result


@validate_input(GetMetricsInput)
async def get_metrics() -> dict[str, Any]:
    """
    Get observability metrics.

    Returns:
        In-memory counters, gauges and histogram summaries
    """
    obs = get_observability()
    obs.increment("tools.get_metrics")

    return obs.get_metrics()


for _tool in (
    check_status,
    list_personas,
    get_persona,
    compress_context,
    evaluate_response,
    estimate_tokens,
    get_metrics,
):
    mcp.tool()(_tool)


# ============================================================================
# Lifecycle
# ============================================================================


async def initialize_server() -> None:
    """Initialize server resources on startup."""
    global _initialized

    if _initialized:
        return

    try:
        config = load_config()
        configure_logging(config.log_level, config.log_format)
        logger.info(f"Configuration loaded: environment={config.environment}")

        obs = initialize_observability(enable_metrics=config.observability.enable_metrics)

        # Build the shared registry and engine up front so bad config fails at startup
        registry = get_persona_registry()
        get_compression_engine()
        get_quality_evaluator()

        obs.increment("server.startup")
        obs.gauge("personas.registered", len(registry))
        obs.event(
            "server_started",
            {
                "environment": config.environment,
                "personas": registry.ids(),
                "default_level": config.compression.default_level,
                "max_input_chars": config.compression.max_input_chars,
            },
        )

        _initialized = True
        logger.info("Persona Context server initialized successfully")

    except Exception as e:
        logger.error(f"Failed to initialize server: {e}", exc_info=True)
        raise


async def cleanup_server() -> None:
    """Cleanup server resources on shutdown."""
    global _initialized

    if not _initialized:
        return

    obs = get_observability()
    obs.increment("server.shutdown")
    obs.event("server_stopped", {})

    _initialized = False
    logger.info("Persona Context server cleanup complete")


def main() -> None:
    """CLI entry point for the persona-context command."""
    mcp.run()


if __name__ == "__main__":
    main()
