"""
Response Quality Evaluator

Scores a response against a persona with three cheap heuristics:

    role alignment     share of the persona's keywords the response mentions
    task relevance     response length
    response quality   structure (line breaks or list markers) and length

totalScore = 0.5 * roleAlignment + 0.3 * taskRelevance + 0.2 * responseQuality

Evaluation is lenient: an unknown persona degrades to default scores instead
of failing, so scoring never blocks a larger pipeline.
"""

import logging

from ..errors import InputTooLargeError, ValidationError
from ..personas.registry import PersonaId, PersonaProfile, PersonaRegistry, get_persona_registry
from .models import EvaluationResult

logger = logging.getLogger(__name__)

WEIGHTS = {
    "role_alignment": 0.5,
    "task_relevance": 0.3,
    "response_quality": 0.2,
}

FEEDBACK_THRESHOLD = 0.6

GENERIC_FEEDBACK = "💡 페르소나 특성을 더 활용해보세요"

# Role alignment
ALIGNED_SCORE = 0.9
UNALIGNED_SCORE = 0.5
DEFAULT_ALIGNMENT = 0.7

# Length bands (characters)
SHORT_RESPONSE = 50
MEDIUM_RESPONSE = 200
STRUCTURED_MIN_LENGTH = 100


class QualityEvaluator:
    """Heuristic evaluator for persona responses. Stateless and thread-safe."""

    def __init__(
        self,
        registry: PersonaRegistry | None = None,
        max_input_chars: int | None = None,
    ):
        self.registry = registry if registry is not None else get_persona_registry()
        if max_input_chars is None:
            from ..config import get_config

            max_input_chars = get_config().compression.max_input_chars
        self.max_input_chars = max_input_chars

    def evaluate(self, response_text: str, persona_id: PersonaId | str | None = None) -> EvaluationResult:
        """
        Score a response for a persona.

        Args:
            response_text: Response to score
            persona_id: Active persona; None or "" short-circuits

        Returns:
            EvaluationResult; feedback is set only when needs_feedback is True

        Raises:
            ValidationError: response_text is not a string
            InputTooLargeError: response_text longer than max_input_chars
        """
        if not isinstance(response_text, str):
            raise ValidationError("response_text must be a string", {"type": type(response_text).__name__})
        if len(response_text) > self.max_input_chars:
            raise InputTooLargeError(len(response_text), self.max_input_chars)

        # Not enough data to judge: never emit negative feedback
        if not response_text or not persona_id:
            return EvaluationResult(total_score=1.0, needs_feedback=False, feedback=None)

        profile = self.registry.get(persona_id)
        if profile is None:
            logger.debug(f"Evaluating for unknown persona {persona_id!r}", extra={"persona": str(persona_id)})

        role_alignment = self.role_alignment(response_text, profile)
        task_relevance = self.task_relevance(response_text)
        response_quality = self.response_quality(response_text)

        total = round(
            WEIGHTS["role_alignment"] * role_alignment
            + WEIGHTS["task_relevance"] * task_relevance
            + WEIGHTS["response_quality"] * response_quality,
            4,
        )
        needs_feedback = self.should_notify(total)

        result = EvaluationResult(
            role_alignment=role_alignment,
            task_relevance=task_relevance,
            response_quality=response_quality,
            total_score=total,
            needs_feedback=needs_feedback,
            feedback=self._feedback_for(profile) if needs_feedback else None,
        )

        logger.debug(
            f"Evaluated response: total={total}",
            extra={
                "persona": profile.id if profile else str(persona_id),
                "total_score": total,
                "needs_feedback": needs_feedback,
            },
        )
        return result

    @staticmethod
    def role_alignment(response_text: str, profile: PersonaProfile | None) -> float:
        if profile is None or not profile.preserve_keywords:
            return DEFAULT_ALIGNMENT
        matched = len(profile.keywords_in(response_text))
        if matched >= len(profile.preserve_keywords) / 2:
            return ALIGNED_SCORE
        return UNALIGNED_SCORE

    @staticmethod
    def task_relevance(response_text: str) -> float:
        if len(response_text) < SHORT_RESPONSE:
            return 0.3
        if len(response_text) < MEDIUM_RESPONSE:
            return 0.6
        return 0.8

    @staticmethod
    def response_quality(response_text: str) -> float:
        long_enough = len(response_text) > STRUCTURED_MIN_LENGTH
        if long_enough and ("\n" in response_text or "-" in response_text):
            return 0.9
        if long_enough:
            return 0.7
        return 0.5

    @staticmethod
    def should_notify(score: float) -> bool:
        """Whether a score is low enough to surface feedback to the user."""
        return score < FEEDBACK_THRESHOLD

    def gentle_feedback(self, persona_id: PersonaId | str | None, score: float) -> str | None:
        """Feedback message for a score, or None when no feedback is warranted."""
        if not self.should_notify(score):
            return None
        return self._feedback_for(self.registry.get(persona_id))

    @staticmethod
    def _feedback_for(profile: PersonaProfile | None) -> str:
        return profile.feedback_message if profile else GENERIC_FEEDBACK


_evaluator_instance: QualityEvaluator | None = None


def get_quality_evaluator() -> QualityEvaluator:
    """Get the shared quality evaluator (built-in personas)."""
    global _evaluator_instance

    if _evaluator_instance is None:
        _evaluator_instance = QualityEvaluator()

    return _evaluator_instance


def evaluate(response_text: str, persona_id: PersonaId | str | None = None) -> EvaluationResult:
    """Convenience wrapper around the shared QualityEvaluator."""
    return get_quality_evaluator().evaluate(response_text, persona_id)
