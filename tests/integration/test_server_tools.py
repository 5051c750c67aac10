"""
Integration Tests: MCP Tool Layer

Calls the server's tool functions end to end (input validation, core call,
error envelope, metrics) and checks their registration with FastMCP.
"""

import pytest
from fastmcp import Client

from persona_context import server
from persona_context.evaluation import GENERIC_FEEDBACK
from persona_context.observability import get_observability

pytestmark = pytest.mark.integration

TOOL_NAMES = {
    "check_status",
    "list_personas",
    "get_persona",
    "compress_context",
    "evaluate_response",
    "estimate_tokens",
    "get_metrics",
}


class TestRegistration:
    """Tools are exposed over MCP."""

    @pytest.mark.asyncio
    async def test_tools_listed(self, clean_env):
        async with Client(server.mcp) as client:
            tools = await client.list_tools()

        assert TOOL_NAMES <= {tool.name for tool in tools}


class TestStatusAndPersonas:
    """check_status, list_personas, get_persona."""

    @pytest.mark.asyncio
    async def test_check_status(self, clean_env):
        status = await server.check_status()

        assert status["status"] == "healthy"
        assert status["service"] == "persona-context"
        assert status["personas"] == ["architect", "security", "frontend", "backend", "data_analyst"]
        assert status["default_level"] == "balanced"
        assert "config" not in status

    @pytest.mark.asyncio
    async def test_check_status_details(self, clean_env):
        clean_env.setenv("MAX_INPUT_CHARS", "500")

        status = await server.check_status(include_details=True)

        assert status["config"]["max_input_chars"] == 500
        assert status["observability"]["metrics_enabled"] is True

    @pytest.mark.asyncio
    async def test_list_personas(self, clean_env):
        response = await server.list_personas()

        assert response["success"] is True
        assert response["count"] == 5
        security = next(p for p in response["personas"] if p["id"] == "security")
        assert security["preserveKeywords"] == ["보안", "취약점", "암호화", "위협"]

    @pytest.mark.asyncio
    async def test_get_persona(self, clean_env):
        response = await server.get_persona(persona="frontend")

        assert response["success"] is True
        assert response["persona"]["displayName"] == "Frontend Developer"

    @pytest.mark.asyncio
    async def test_get_unknown_persona(self, clean_env):
        response = await server.get_persona(persona="designer")

        assert response["success"] is False
        assert response["error_code"] == "INVALID_PERSONA"
        assert response["details"]["persona"] == "designer"


class TestCompressContext:
    """compress_context tool."""

    @pytest.mark.asyncio
    async def test_compress_with_persona(self, clean_env, security_text):
        response = await server.compress_context(text=security_text, level="aggressive", persona="security")

        assert response["success"] is True
        assert "originalText" not in response
        assert "취약점" in response["compressedText"]
        assert response["validation"] == {"patternPreservationRate": 100, "personaAligned": True}
        assert response["compressedTokenEstimate"] < response["originalTokenEstimate"]

    @pytest.mark.asyncio
    async def test_include_original(self, clean_env):
        response = await server.compress_context(text="a   b", include_original=True)

        assert response["originalText"] == "a   b"
        assert response["compressedText"] == "a b"

    @pytest.mark.asyncio
    async def test_default_level_from_config(self, clean_env):
        clean_env.setenv("DEFAULT_COMPRESSION_LEVEL", "none")

        response = await server.compress_context(text="a   b")

        assert response["level"] == "none"
        assert response["compressedText"] == "a   b"

    @pytest.mark.asyncio
    async def test_unknown_level(self, clean_env):
        response = await server.compress_context(text="hello", level="extreme")

        assert response["success"] is False
        assert response["error_code"] == "INVALID_COMPRESSION_LEVEL"

    @pytest.mark.asyncio
    async def test_unknown_persona(self, clean_env):
        response = await server.compress_context(text="hello", persona="designer")

        assert response["error_code"] == "INVALID_PERSONA"

    @pytest.mark.asyncio
    async def test_input_too_large(self, clean_env):
        clean_env.setenv("MAX_INPUT_CHARS", "10")

        response = await server.compress_context(text="x" * 11)

        assert response["error_code"] == "INPUT_TOO_LARGE"
        assert response["details"] == {"size": 11, "limit": 10}

    @pytest.mark.asyncio
    async def test_invalid_input(self, clean_env):
        response = await server.compress_context(level="balanced")

        assert response["success"] is False
        assert response["error_code"] == "INVALID_INPUT"

    @pytest.mark.asyncio
    async def test_metrics_recorded(self, clean_env):
        await server.compress_context(text="a   b   c", level="balanced")
        await server.compress_context(text="hello", level="extreme")

        metrics = await server.get_metrics()

        assert metrics["counters"]["tools.compress_context"] == 2
        assert metrics["counters"]["tools.errors{error_code=INVALID_COMPRESSION_LEVEL,tool=compress_context}"] == 1
        assert metrics["histograms"]["compression.ratio{level=balanced}"]["count"] == 1


class TestEvaluateResponse:
    """evaluate_response tool."""

    @pytest.mark.asyncio
    async def test_low_score_with_feedback(self, clean_env):
        response = await server.evaluate_response(response_text="The weather is nice today ok", persona="architect")

        assert response["success"] is True
        assert response["totalScore"] == pytest.approx(0.44)
        assert response["needsFeedback"] is True
        assert response["feedback"] == "💡 시스템 설계 관점을 더 포함해보세요"

    @pytest.mark.asyncio
    async def test_unknown_persona_is_lenient(self, clean_env):
        response = await server.evaluate_response(response_text="short", persona="designer")

        assert response["success"] is True
        assert response["feedback"] == GENERIC_FEEDBACK

    @pytest.mark.asyncio
    async def test_short_circuit(self, clean_env):
        response = await server.evaluate_response(response_text="")

        assert response["totalScore"] == 1.0
        assert response["needsFeedback"] is False
        assert response["roleAlignment"] is None


class TestEstimateTokens:
    """estimate_tokens tool."""

    @pytest.mark.asyncio
    async def test_estimate(self, clean_env):
        response = await server.estimate_tokens(content="abcdefghi")

        assert response == {"success": True, "token_estimate": 3, "content_length": 9}

    @pytest.mark.asyncio
    async def test_breakdown(self, clean_env):
        response = await server.estimate_tokens(content="one\n```\ncode\n```", include_breakdown=True)

        assert response["breakdown"]["code_blocks"] == 1
        assert response["breakdown"]["lines"] == 4


class TestLifecycle:
    """Startup and shutdown hooks."""

    @pytest.mark.asyncio
    async def test_initialize_and_cleanup(self, clean_env):
        await server.initialize_server()
        try:
            assert server._initialized is True
            metrics = get_observability().get_metrics()
            assert metrics["counters"]["server.startup"] == 1
            assert metrics["gauges"]["personas.registered"] == 5
        finally:
            await server.cleanup_server()

        assert server._initialized is False
