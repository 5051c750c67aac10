"""
Persona-Aware Compression Engine

Deterministic text compression under three tiers:

none        passthrough, output is the input byte for byte
balanced    blank-line collapsing, whitespace tidying, removal of decorative
            formatting (rules, emphasis markers, pictographic symbols)
aggressive  balanced, plus prose paragraphs without any preserve keyword are
            cut down to their leading sentence

Text is parsed into blocks (paragraphs separated by blank lines, fenced code
blocks kept whole), blocks into units (headings, list items, table rows and
decorative lines start a new unit) and units into sentences. A sentence that
contains one of the active persona's preserve keywords is never modified, so
every keyword occurrence survives verbatim at every tier.
"""

from __future__ import annotations

import logging
import re
import unicodedata
from dataclasses import dataclass

from ..errors import (
    InputTooLargeError,
    InternalInconsistencyError,
    InvalidCompressionLevelError,
    ValidationError,
)
from ..personas.registry import PersonaId, PersonaProfile, PersonaRegistry, get_persona_registry
from ..validation.preservation import compute_validation
from .models import CompressionLevel, CompressionResult
from .tokens import estimate_tokens, reduction_ratio

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"^[ \t]*(?:```|~~~)")
_STRUCTURAL_RE = re.compile(r"^[ \t]*(?:[-*+•][ \t]|\d+[.)][ \t]|#{1,6}[ \t]|>|\|)")
_SINGLE_LINE_RE = re.compile(r"^[ \t]*(?:#{1,6}[ \t]|\|)")
_HEADING_RE = re.compile(r"^[ \t]*#{1,6}[ \t]")
_SENTENCE_SPLIT_RE = re.compile(r"(?<=[.!?。])(\s+)")
_BOLD_RE = re.compile(r"\*\*(?=\S)(.+?)(?<=\S)\*\*")
_STRIKE_RE = re.compile(r"~~(?=\S)(.+?)(?<=\S)~~")
_INNER_SPACE_RE = re.compile(r"(?<=\S)[ \t]{2,}")
# Whitespace that the sentence splitter would treat as a separator
_STOP_SPACE_RE = re.compile(r"(?<=[.!?。])[^\S\n]+")
_BRACKETS = frozenset("()[]{}<>")
_INVISIBLE = frozenset("\ufe0f\u200d")


@dataclass
class _Block:
    text: str
    code: bool
    # Separator emitted before this block ("" for the first block)
    gap: str


def _is_decorative(line: str) -> bool:
    """A line with no letters, digits or brackets that is not a table row."""
    stripped = line.strip()
    if not stripped or stripped.startswith("|"):
        return False
    return not any(ch.isalnum() or ch in _BRACKETS for ch in stripped)


def _has_keyword(text: str, keywords: tuple[str, ...]) -> bool:
    if not keywords:
        return False
    lowered = text.lower()
    return any(k in lowered for k in keywords)


def _strip_symbols(text: str) -> str:
    return "".join(ch for ch in text if ch not in _INVISIBLE and unicodedata.category(ch) != "So")


def _strip_emphasis(text: str) -> str:
    """Remove bold and strike markers, including stacked runs like ****a****."""
    while True:
        stripped = _STRIKE_RE.sub(r"\1", _BOLD_RE.sub(r"\1", text))
        if stripped == text:
            return text
        text = stripped


def _tidy_sentence(sentence: str) -> str:
    lines = []
    for line in sentence.split("\n"):
        body = line.lstrip()
        indent = line[: len(line) - len(body)]
        body = _strip_emphasis(_strip_symbols(body))
        body = _INNER_SPACE_RE.sub(" ", body)
        # Removed symbols or markers can expose a sentence break; tidy it like a separator
        body = _STOP_SPACE_RE.sub(" ", body).strip()
        if body:
            lines.append(indent + body)
    return "\n".join(lines)


def _tidy_separator(separator: str) -> str:
    if "\n" in separator:
        # keep the indentation of the following line
        return "\n" + separator.rsplit("\n", 1)[1]
    return " "


def _split_sentences(unit: str) -> list[str]:
    """Alternating [sentence, separator, sentence, ...] for one unit."""
    return _SENTENCE_SPLIT_RE.split(unit.rstrip())


def _split_blocks(text: str) -> list[_Block]:
    blocks: list[_Block] = []
    current: list[str] = []
    saw_blank = False
    in_fence = False

    def flush(code: bool) -> None:
        nonlocal saw_blank
        if current:
            gap = "" if not blocks else ("\n\n" if saw_blank else "\n")
            blocks.append(_Block("\n".join(current), code, gap))
            current.clear()
            saw_blank = False

    for line in text.split("\n"):
        if in_fence:
            current.append(line)
            if _FENCE_RE.match(line):
                flush(code=True)
                in_fence = False
            continue
        if _FENCE_RE.match(line):
            flush(code=False)
            current.append(line)
            in_fence = True
            continue
        if not line.strip():
            flush(code=False)
            saw_blank = True
            continue
        current.append(line)

    # An unterminated fence still counts as code
    flush(code=in_fence)
    return blocks


def _split_units(block_text: str) -> list[str]:
    units: list[str] = []
    for line in block_text.split("\n"):
        starts_new = (
            not units
            or _STRUCTURAL_RE.match(line) is not None
            or _is_decorative(line)
            or _SINGLE_LINE_RE.match(units[-1]) is not None
            or _is_decorative(units[-1])
        )
        if starts_new:
            units.append(line)
        else:
            units[-1] += "\n" + line
    return units


class CompressionEngine:
    """
    Compresses text for a persona under a named tier.

    The engine holds no per-call state; one instance can be shared across
    threads.
    """

    def __init__(
        self,
        registry: PersonaRegistry | None = None,
        max_input_chars: int | None = None,
    ):
        """
        Initialize the engine.

        Args:
            registry: Persona registry (default: built-in personas)
            max_input_chars: Input size cap (default: from configuration)
        """
        self.registry = registry if registry is not None else get_persona_registry()
        if max_input_chars is None:
            from ..config import get_config

            max_input_chars = get_config().compression.max_input_chars
        self.max_input_chars = max_input_chars

    @staticmethod
    def resolve_level(level: CompressionLevel | str) -> CompressionLevel:
        """
        Parse a compression level.

        Raises:
            InvalidCompressionLevelError: If the level is not recognized
        """
        if isinstance(level, CompressionLevel):
            return level
        try:
            return CompressionLevel(level)
        except ValueError:
            raise InvalidCompressionLevelError(level, known=[lvl.value for lvl in CompressionLevel]) from None

    def compress(
        self,
        text: str,
        level: CompressionLevel | str,
        persona_id: PersonaId | str | None = None,
    ) -> CompressionResult:
        """
        Compress text under a tier, preserving the persona's keywords.

        Args:
            text: Input text
            level: "none", "balanced" or "aggressive"
            persona_id: Active persona, or None for persona-agnostic compression

        Returns:
            CompressionResult; validation is present iff persona_id was given

        Raises:
            InvalidCompressionLevelError: Unknown level
            InvalidPersonaError: Unknown persona id
            InputTooLargeError: Text longer than max_input_chars
            InternalInconsistencyError: Output violates a compression invariant
        """
        resolved = self.resolve_level(level)
        profile = self.registry.lookup(persona_id) if persona_id is not None else None

        if not isinstance(text, str):
            raise ValidationError("text must be a string", {"type": type(text).__name__})
        if len(text) > self.max_input_chars:
            raise InputTooLargeError(len(text), self.max_input_chars)

        if resolved is CompressionLevel.NONE or not text:
            compressed = text
        else:
            compressed = self._transform(text, resolved, profile)

        original_tokens = estimate_tokens(text)
        compressed_tokens = estimate_tokens(compressed)

        if resolved is not CompressionLevel.NONE and compressed_tokens > original_tokens:
            raise InternalInconsistencyError(
                "Compressed token estimate exceeds the original",
                {"level": resolved.value, "original_tokens": original_tokens, "compressed_tokens": compressed_tokens},
            )

        validation = None
        if profile is not None:
            validation = compute_validation(compressed, profile, original_text=text)
            if validation.pattern_preservation_rate != 100:
                raise InternalInconsistencyError(
                    "Preserve keywords were lost during compression",
                    {
                        "level": resolved.value,
                        "persona": profile.id,
                        "pattern_preservation_rate": validation.pattern_preservation_rate,
                    },
                )

        result = CompressionResult(
            original_text=text,
            compressed_text=compressed,
            original_token_estimate=original_tokens,
            compressed_token_estimate=compressed_tokens,
            compression_ratio=reduction_ratio(original_tokens, compressed_tokens),
            level=resolved,
            persona=profile.id if profile else None,
            validation=validation,
        )

        logger.debug(
            f"Compressed {original_tokens} -> {compressed_tokens} tokens ({resolved.value})",
            extra={
                "level": resolved.value,
                "persona": result.persona,
                "original_tokens": original_tokens,
                "compressed_tokens": compressed_tokens,
                "compression_ratio": result.compression_ratio,
            },
        )
        return result

    # --- transforms

    def _transform(self, text: str, level: CompressionLevel, profile: PersonaProfile | None) -> str:
        keywords = tuple(k.lower() for k in profile.preserve_keywords) if profile else ()

        pieces: list[str] = []
        for block in _split_blocks(text):
            if block.code:
                rendered = block.text
            else:
                rendered = self._render_prose(block.text.strip(), keywords)
                if level is CompressionLevel.AGGRESSIVE and rendered and not _has_keyword(block.text, keywords):
                    rendered = self._leading_sentence(rendered)
            if not rendered:
                continue
            if pieces:
                pieces.append(block.gap)
            pieces.append(rendered)

        return "".join(pieces)

    def _render_prose(self, block_text: str, keywords: tuple[str, ...]) -> str:
        rendered_units = []
        for unit in _split_units(block_text):
            if _is_decorative(unit):
                continue
            parts = _split_sentences(unit)
            out = []
            for i, part in enumerate(parts):
                if i % 2:
                    out.append(_tidy_separator(part))
                elif _has_keyword(part, keywords):
                    out.append(part)
                else:
                    out.append(_tidy_sentence(part))
            rendered = "".join(out).rstrip()
            if rendered.strip():
                rendered_units.append(rendered)
        # Dropping a leading decorative unit can expose indentation
        return "\n".join(rendered_units).strip()

    @staticmethod
    def _leading_sentence(rendered_block: str) -> str:
        """First sentence of a rendered block; a leading heading keeps the sentence after it."""
        units = _split_units(rendered_block)
        if _HEADING_RE.match(units[0]) and len(units) > 1:
            return units[0] + "\n" + _split_sentences(units[1])[0]
        return _split_sentences(units[0])[0]


_engine_instance: CompressionEngine | None = None


def get_compression_engine() -> CompressionEngine:
    """Get the shared compression engine (built-in personas, configured size cap)."""
    global _engine_instance

    if _engine_instance is None:
        _engine_instance = CompressionEngine()

    return _engine_instance


def compress(
    text: str,
    level: CompressionLevel | str = CompressionLevel.BALANCED,
    persona_id: PersonaId | str | None = None,
) -> CompressionResult:
    """Convenience wrapper around the shared CompressionEngine."""
    return get_compression_engine().compress(text, level, persona_id)
