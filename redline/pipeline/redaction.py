"""Masking of sensitive entity values in display text.

Two passes run in a fixed order:

1. Exact-offset pass: entities whose offsets still point at their own text
   are replaced slice-for-slice with mask glyphs of equal length.
2. Fuzzy-pattern pass: every sensitive value longer than two characters is
   searched as a case-insensitive pattern that tolerates formatting
   differences between words (``555 123 4567`` also matches
   ``555-123-4567``), and each match is replaced by a fixed-width token.

The mask glyph is excluded from the flexible separator and never appears
in a literal pattern part. Offsets are ignored for any span that ends past a
mask glyph, since fixed-width tokens shift everything behind them.
Together these make masking already-masked text a no-op. A value found by
neither pass stays visible.
"""

import re
from collections.abc import Iterable, Sequence

import structlog

from redline.common.constants import MASK_GLYPH, MASK_TOKEN, SENSITIVE_TYPES, is_sensitive
from redline.common.models import RawEntity

logger = structlog.get_logger()

# Values this short are too ambiguous for pattern matching.
MIN_FUZZY_LENGTH = 3

# Matches a run of whitespace or punctuation, but never the mask glyph.
FLEXIBLE_SEPARATOR = rf"[^\w{re.escape(MASK_GLYPH)}]*"

_WHITESPACE_RUN = re.compile(r"\s+")


def select_sensitive(
    entities: Iterable[RawEntity], types: frozenset[str] = SENSITIVE_TYPES
) -> list[RawEntity]:
    """Sensitive entities, longest literal text first.

    Longest first so a shorter value never consumes part of a window that a
    longer, containing value should own.
    """
    selected = [e for e in entities if is_sensitive(e.entity_type, types)]
    selected.sort(key=lambda e: len(e.text), reverse=True)
    return selected


def valid_span(text: str, entity: RawEntity) -> tuple[int, int] | None:
    """Offsets of the entity if they still point at its text.

    Offsets refer to the unmasked source. Once a mask glyph appears at or
    before the span, earlier fixed-width tokens may have shifted it, so the
    span is rejected.
    """
    start, end = entity.start_char, entity.end_char
    if start is None or end is None:
        return None
    if not 0 <= start < end <= len(text):
        return None
    if MASK_GLYPH in text[:end]:
        return None
    if text[start:end].casefold() != entity.text.casefold():
        return None
    return start, end


def splice_mask(text: str, spans: Sequence[tuple[int, int]]) -> str:
    """Replace spans with mask glyphs of equal length.

    Precondition: ``spans`` is ordered by descending start offset. Equal
    length replacement keeps later (lower) offsets valid, and processing from
    the end keeps them valid even if a caller's replacement changed length.
    """
    for start, end in spans:
        text = text[:start] + MASK_GLYPH * (end - start) + text[end:]
    return text


def mask_exact_offsets(text: str, entities: Sequence[RawEntity]) -> str:
    """Exact-offset pass.

    All spans are validated against the unmodified text before any
    replacement, then spliced from the end towards the start.
    """
    spans = {span for entity in entities if (span := valid_span(text, entity))}
    if not spans:
        return text
    return splice_mask(text, sorted(spans, key=lambda s: s[0], reverse=True))


def build_flexible_pattern(literal: str) -> re.Pattern[str]:
    """Case-insensitive pattern for a literal with flexible word separators."""
    parts = _WHITESPACE_RUN.split(literal.strip())
    pattern = FLEXIBLE_SEPARATOR.join(re.escape(part) for part in parts)
    return re.compile(pattern, re.IGNORECASE)


def mask_fuzzy_patterns(text: str, entities: Sequence[RawEntity]) -> str:
    """Fuzzy-pattern pass over every sufficiently long sensitive value."""
    masked = text
    seen: set[str] = set()
    for entity in entities:
        value = entity.text
        if len(value) < MIN_FUZZY_LENGTH or not value.strip() or value in seen:
            continue
        seen.add(value)
        try:
            pattern = build_flexible_pattern(value)
        except re.error as e:
            logger.warning(
                "mask_pattern_invalid",
                entity_type=entity.entity_type,
                error=str(e),
            )
            masked = masked.replace(value, MASK_TOKEN)
            continue
        masked = pattern.sub(MASK_TOKEN, masked)
    return masked


def mask_text(
    text: str,
    entities: Iterable[RawEntity],
    types: frozenset[str] = SENSITIVE_TYPES,
) -> str:
    """Produce a display-safe copy of ``text``.

    Args:
        text: Any text to display (transcript body, generated explanations)
        entities: Entity records for the same content; offsets, where
            present, refer to ``text``
        types: Sensitive type set to mask

    Returns:
        Text with sensitive occurrences masked
    """
    if not text:
        return text

    sensitive = select_sensitive(entities, types)
    if not sensitive:
        return text

    masked = mask_exact_offsets(text, sensitive)
    masked = mask_fuzzy_patterns(masked, sensitive)

    if masked != text:
        logger.debug("text_masked", sensitive_entities=len(sensitive))
    return masked
