"""
Persona Context - Tool Input Validation Schemas

Pydantic models for validating all MCP tool inputs.

Level and persona stay plain strings here: unknown values are reported by the
core with their own error codes (INVALID_COMPRESSION_LEVEL, INVALID_PERSONA)
rather than as generic INVALID_INPUT.
"""

from pydantic import BaseModel, Field, field_validator


class CheckStatusInput(BaseModel):
    """Input validation for check_status tool."""

    include_details: bool = Field(
        default=False,
        description="Include configuration and observability details",
    )


class ListPersonasInput(BaseModel):
    """Input validation for list_personas tool (no parameters)."""

    pass


class GetPersonaInput(BaseModel):
    """Input validation for get_persona tool."""

    persona: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Persona id (architect, security, frontend, backend, data_analyst)",
    )

    @field_validator("persona")
    @classmethod
    def normalize_persona(cls, v: str) -> str:
        """Strip surrounding whitespace; reject blank ids."""
        v = v.strip()
        if not v:
            raise ValueError("Persona cannot be empty or only whitespace")
        return v


class CompressContextInput(BaseModel):
    """Input validation for compress_context tool."""

    text: str = Field(
        ...,
        description="Text to compress (may be empty; size is capped by MAX_INPUT_CHARS)",
    )
    level: str | None = Field(
        default=None,
        max_length=100,
        description="Compression level: none, balanced or aggressive (None = configured default)",
    )
    persona: str | None = Field(
        default=None,
        max_length=100,
        description="Persona whose keywords must survive compression",
    )
    include_original: bool = Field(
        default=False,
        description="Echo the original text in the result",
    )

    @field_validator("level")
    @classmethod
    def normalize_level(cls, v: str | None) -> str | None:
        """Level names are case-insensitive."""
        if v is None:
            return None
        return v.strip().lower()


class EvaluateResponseInput(BaseModel):
    """Input validation for evaluate_response tool."""

    response_text: str = Field(
        ...,
        description="Agent response to score (empty text short-circuits)",
    )
    persona: str | None = Field(
        default=None,
        max_length=100,
        description="Active persona (unknown ids degrade to default scores)",
    )


class EstimateTokensInput(BaseModel):
    """Input validation for estimate_tokens tool."""

    content: str = Field(
        ...,
        description="Content to estimate tokens for",
    )
    include_breakdown: bool = Field(
        default=False,
        description="Include line/word/code-block breakdown",
    )


class GetMetricsInput(BaseModel):
    """Input validation for get_metrics tool (no parameters)."""

    pass
