"""
Evaluation Module

Heuristic scoring of agent responses against a persona, with a feedback
decision when the score falls below 0.6.
"""

from .evaluator import (
    FEEDBACK_THRESHOLD,
    GENERIC_FEEDBACK,
    WEIGHTS,
    QualityEvaluator,
    evaluate,
    get_quality_evaluator,
)
from .models import EvaluationResult

__all__ = [
    "FEEDBACK_THRESHOLD",
    "GENERIC_FEEDBACK",
    "WEIGHTS",
    "EvaluationResult",
    "QualityEvaluator",
    "evaluate",
    "get_quality_evaluator",
]
