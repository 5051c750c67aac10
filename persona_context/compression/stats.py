"""
Compression Statistics

Aggregates a batch of CompressionResult values, e.g. all documents of one
compression run. The core keeps no history; callers pass the results they
collected.
"""

from collections import defaultdict
from collections.abc import Iterable
from typing import Any

from .models import CompressionResult
from .tokens import reduction_ratio

NO_PERSONA = "none"


def summarize_results(results: Iterable[CompressionResult]) -> dict[str, Any]:
    """
    Summarize a batch of compression results.

    Args:
        results: Results to aggregate

    Returns:
        Dictionary with count, token totals, overall ratio and the average
        compression ratio per persona (results without a persona are keyed
        under "none")
    """
    count = 0
    tokens_before = 0
    tokens_after = 0
    ratios_by_persona: dict[str, list[int]] = defaultdict(list)

    for result in results:
        count += 1
        tokens_before += result.original_token_estimate
        tokens_after += result.compressed_token_estimate
        ratios_by_persona[result.persona or NO_PERSONA].append(result.compression_ratio)

    return {
        "count": count,
        "original_tokens": tokens_before,
        "compressed_tokens": tokens_after,
        "tokens_saved": tokens_before - tokens_after,
        "overall_ratio": reduction_ratio(tokens_before, tokens_after),
        "average_ratio_by_persona": {
            persona: round(sum(ratios) / len(ratios), 1) for persona, ratios in sorted(ratios_by_persona.items())
        },
    }
