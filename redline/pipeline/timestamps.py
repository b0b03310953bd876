"""Mapping of corrected character offsets to media timestamps."""

import math
from collections.abc import Callable, Sequence
from decimal import Decimal

from redline.common.constants import UNLOCATED_TIMESTAMP
from redline.common.models import AlignedEntity, RawEntity
from redline.pipeline.alignment import WordSpan

# Forward tolerance, in characters, for residual drift.
FUZZY_WINDOW = 20


def containing_word(spans: Sequence[WordSpan], offset: int) -> WordSpan | None:
    """Word whose span contains the offset exactly."""
    for span in spans:
        if span.contains(offset):
            return span
    return None


def forward_window_word(spans: Sequence[WordSpan], offset: int) -> WordSpan | None:
    """First word starting within ``[offset, offset + FUZZY_WINDOW)``."""
    for span in spans:
        if offset <= span.start_char < offset + FUZZY_WINDOW:
            return span
    return None


WordLookup = Callable[[Sequence[WordSpan], int], WordSpan | None]

# Applied in order; the first strategy returning a word wins.
LOOKUP_STRATEGIES: tuple[WordLookup, ...] = (containing_word, forward_window_word)

_RAW_FIELDS = set(RawEntity.model_fields)


def locate_word(spans: Sequence[WordSpan], offset: int) -> WordSpan | None:
    """Find the word for a corrected offset, or None if unlocatable."""
    for strategy in LOOKUP_STRATEGIES:
        span = strategy(spans, offset)
        if span is not None:
            return span
    return None


def format_timestamp(seconds: float) -> str:
    """Format seconds as ``M:SS.mmm``.

    Minutes are unbounded, seconds padded to two digits, milliseconds to
    three. Every component is truncated, never rounded: 125.4567 renders
    as ``2:05.456``.
    """
    if not math.isfinite(seconds) or seconds <= 0:
        return UNLOCATED_TIMESTAMP

    # str() keeps the shortest decimal form, avoiding binary float residue.
    total_ms = int(Decimal(str(seconds)) * 1000)
    minutes, remainder_ms = divmod(total_ms, 60_000)
    secs, millis = divmod(remainder_ms, 1000)
    return f"{minutes}:{secs:02d}.{millis:03d}"


def align_entity(entity: RawEntity, spans: Sequence[WordSpan], offset: int) -> AlignedEntity:
    """Anchor one entity to the timeline.

    Never fails: entities without offsets or without a matching word get
    timestamp 0 and ``located=False``.
    """
    fields = entity.model_dump(include=_RAW_FIELDS)
    if entity.start_char is None:
        return AlignedEntity(**fields)

    corrected = entity.start_char + offset
    span = locate_word(spans, corrected)
    if span is None:
        return AlignedEntity(**fields, corrected_start_char=corrected)

    start_time = max(span.word.start_time, 0.0)
    return AlignedEntity(
        **fields,
        corrected_start_char=corrected,
        timestamp=start_time,
        formatted_timestamp=format_timestamp(start_time),
        located=True,
    )


def align_entities(
    entities: Sequence[RawEntity], spans: Sequence[WordSpan], offset: int
) -> list[AlignedEntity]:
    """Anchor every entity of one transcript using the same drift offset."""
    return [align_entity(entity, spans, offset) for entity in entities]
