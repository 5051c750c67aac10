"""
Compression Module

Persona-aware, deterministic context compression with a pinned token
estimate (ceil(characters / 4)).

Tiers:
1. none: passthrough
2. balanced: whitespace and decorative-formatting cleanup
3. aggressive: balanced + keyword-free paragraphs cut to their leading sentence
"""

from .engine import CompressionEngine, compress, get_compression_engine
from .models import CompressionLevel, CompressionResult, ValidationSummary
from .stats import summarize_results
from .tokens import CHARS_PER_TOKEN, estimate_tokens, reduction_ratio, token_breakdown

__all__ = [
    "CompressionEngine",
    "compress",
    "get_compression_engine",
    "CompressionLevel",
    "CompressionResult",
    "ValidationSummary",
    "summarize_results",
    "CHARS_PER_TOKEN",
    "estimate_tokens",
    "reduction_ratio",
    "token_breakdown",
]
