"""
Compression Models

Value objects returned by the compression engine. Field names serialize in
camelCase (the wire contract consumed by CLI output and dashboards).
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CompressionLevel(str, Enum):
    """Compression tiers, ordered by how much content they remove."""

    NONE = "none"
    BALANCED = "balanced"
    AGGRESSIVE = "aggressive"

    @property
    def rank(self) -> int:
        return _LEVEL_ORDER.index(self)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, CompressionLevel):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: object) -> bool:
        if not isinstance(other, CompressionLevel):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, CompressionLevel):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, CompressionLevel):
            return NotImplemented
        return self.rank >= other.rank


_LEVEL_ORDER = (CompressionLevel.NONE, CompressionLevel.BALANCED, CompressionLevel.AGGRESSIVE)


class ValidationSummary(BaseModel):
    """How well a persona's preserve keywords survived compression."""

    pattern_preservation_rate: int = Field(..., ge=0, le=100, description="Percent of keywords present")
    persona_aligned: bool = Field(..., description="Whether the rate meets the alignment threshold")

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class CompressionResult(BaseModel):
    """Result of compressing one block of text."""

    original_text: str = Field(..., description="Input text")
    compressed_text: str = Field(..., description="Compressed text")
    original_token_estimate: int = Field(..., ge=0, description="Token estimate of the input")
    compressed_token_estimate: int = Field(..., ge=0, description="Token estimate of the output")
    compression_ratio: int = Field(..., ge=0, le=100, description="Percent of tokens removed")
    level: CompressionLevel = Field(default=CompressionLevel.NONE, description="Tier applied")
    persona: str | None = Field(default=None, description="Persona id the compression was tailored to")
    validation: ValidationSummary | None = Field(
        default=None, description="Preservation metrics; present only when a persona was given"
    )

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    @property
    def tokens_saved(self) -> int:
        return self.original_token_estimate - self.compressed_token_estimate

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready dict using wire (camelCase) field names."""
        return self.model_dump(by_alias=True, mode="json")

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)
