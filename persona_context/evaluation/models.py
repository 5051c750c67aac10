"""
Evaluation Models

Value object returned by the quality evaluator, serialized in camelCase.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class EvaluationResult(BaseModel):
    """
    Weighted score of a response against a persona.

    The three sub-scores are None when evaluation short-circuits (empty
    response or no persona), in which case totalScore is 1.0.
    """

    role_alignment: float | None = Field(default=None, ge=0.0, le=1.0)
    task_relevance: float | None = Field(default=None, ge=0.0, le=1.0)
    response_quality: float | None = Field(default=None, ge=0.0, le=1.0)
    total_score: float = Field(..., ge=0.0, le=1.0)
    needs_feedback: bool
    feedback: str | None = None

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    @property
    def short_circuited(self) -> bool:
        return self.role_alignment is None

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)
