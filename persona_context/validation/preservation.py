"""
Pattern Preservation Validation

Measures how many of a persona's preserve keywords are still present in a
compressed text and whether that counts as persona-aligned.
"""

from ..compression.models import ValidationSummary
from ..compression.tokens import round_half_up
from ..personas.registry import PersonaProfile

ALIGNMENT_THRESHOLD = 70


def compute_validation(
    compressed_text: str,
    profile: PersonaProfile,
    original_text: str | None = None,
) -> ValidationSummary:
    """
    Compute preservation metrics for a persona.

    Keywords are matched as case-insensitive substrings. Without
    original_text every profile keyword counts toward the denominator. With
    it, only keywords that occur in the original count, and an original
    containing none of them scores 100 (nothing was there to lose).

    Args:
        compressed_text: Text after compression
        profile: Persona whose keywords are checked
        original_text: Text before compression, when available

    Returns:
        ValidationSummary with the rounded rate and alignment flag
    """
    if original_text is None:
        expected = list(profile.preserve_keywords)
    else:
        expected = profile.keywords_in(original_text)

    if not expected:
        rate = 100
    else:
        haystack = compressed_text.lower()
        found = sum(1 for keyword in expected if keyword.lower() in haystack)
        rate = round_half_up(found / len(expected) * 100)

    return ValidationSummary(
        pattern_preservation_rate=rate,
        persona_aligned=rate >= ALIGNMENT_THRESHOLD,
    )
