"""
Token Estimation

One pinned heuristic for approximating language-model tokens:

    tokens = ceil(characters / CHARS_PER_TOKEN),  CHARS_PER_TOKEN = 4

Characters are Python str code points. The same function is applied to the
original and the compressed text so ratios are reproducible. It is not a real
tokenizer.
"""

import math
import re
from typing import Any

CHARS_PER_TOKEN = 4

_CODE_BLOCK_RE = re.compile(r"```[\s\S]*?```")


def estimate_tokens(text: str) -> int:
    """Estimate the token count of text. Empty text is 0 tokens."""
    if not text:
        return 0
    return math.ceil(len(text) / CHARS_PER_TOKEN)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, ties away from zero for non-negative values."""
    return int(math.floor(value + 0.5))


def reduction_ratio(original_tokens: int, compressed_tokens: int) -> int:
    """
    Percentage of tokens removed, as an integer in [0, 100].

    Returns 0 when the original is empty.
    """
    if original_tokens <= 0:
        return 0
    ratio = round_half_up((original_tokens - compressed_tokens) / original_tokens * 100)
    return max(0, min(100, ratio))


def token_breakdown(content: str) -> dict[str, Any]:
    """
    Describe content for the estimate_tokens tool.

    Args:
        content: Text to describe

    Returns:
        Lines, words, characters, fenced code blocks and their token share
    """
    token_count = estimate_tokens(content)
    lines = content.split("\n") if content else []
    code_blocks = _CODE_BLOCK_RE.findall(content)
    code_tokens = sum(estimate_tokens(block) for block in code_blocks)

    return {
        "lines": len(lines),
        "words": len(content.split()),
        "characters": len(content),
        "code_blocks": len(code_blocks),
        "code_block_tokens": code_tokens,
        "non_code_tokens": max(0, token_count - code_tokens),
        "avg_tokens_per_line": token_count / len(lines) if lines else 0,
    }
