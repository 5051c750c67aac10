"""
Unit Tests for Token Estimation

The estimate is pinned to ceil(characters / 4); ratios depend on it being
applied identically to both texts.
"""

import pytest

from persona_context.compression.tokens import (
    CHARS_PER_TOKEN,
    estimate_tokens,
    reduction_ratio,
    round_half_up,
    token_breakdown,
)


class TestEstimateTokens:
    """Tests for estimate_tokens."""

    def test_empty_string(self):
        assert estimate_tokens("") == 0

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("a", 1),
            ("abcd", 1),
            ("abcde", 2),
            ("x" * 400, 100),
            ("x" * 401, 101),
        ],
    )
    def test_ceil_of_quarter_length(self, text, expected):
        assert estimate_tokens(text) == expected

    def test_counts_code_points_not_bytes(self):
        """Korean syllables are one character each."""
        assert estimate_tokens("보안취약점") == 2

    def test_chars_per_token_constant(self):
        assert CHARS_PER_TOKEN == 4


class TestRoundHalfUp:
    """Tests for round_half_up."""

    def test_ties_round_up(self):
        assert round_half_up(2.5) == 3
        assert round_half_up(0.5) == 1

    def test_below_half_rounds_down(self):
        assert round_half_up(66.4) == 66

    def test_integers_unchanged(self):
        assert round_half_up(100.0) == 100


class TestReductionRatio:
    """Tests for reduction_ratio."""

    def test_empty_original(self):
        assert reduction_ratio(0, 0) == 0

    def test_no_reduction(self):
        assert reduction_ratio(10, 10) == 0

    def test_half(self):
        assert reduction_ratio(10, 5) == 50

    def test_rounded_half_up(self):
        # 1/8 = 12.5%
        assert reduction_ratio(8, 7) == 13

    def test_clamped_to_range(self):
        assert reduction_ratio(10, 20) == 0
        assert reduction_ratio(10, 0) == 100


class TestTokenBreakdown:
    """Tests for token_breakdown."""

    def test_plain_text(self):
        breakdown = token_breakdown("one two\nthree")

        assert breakdown["lines"] == 2
        assert breakdown["words"] == 3
        assert breakdown["characters"] == 13
        assert breakdown["code_blocks"] == 0
        assert breakdown["code_block_tokens"] == 0
        assert breakdown["non_code_tokens"] == 4
        assert breakdown["avg_tokens_per_line"] == 2

    def test_code_blocks_counted(self):
        content = "intro\n```\nprint(1)\n```\n"
        breakdown = token_breakdown(content)

        assert breakdown["code_blocks"] == 1
        assert breakdown["code_block_tokens"] == estimate_tokens("```\nprint(1)\n```")
        assert breakdown["non_code_tokens"] == estimate_tokens(content) - breakdown["code_block_tokens"]

    def test_empty_content(self):
        breakdown = token_breakdown("")

        assert breakdown["lines"] == 0
        assert breakdown["words"] == 0
        assert breakdown["avg_tokens_per_line"] == 0
