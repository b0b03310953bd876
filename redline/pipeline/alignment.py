"""Text alignment between the annotator's text and the word stream.

The annotator reports entity offsets against its own ``full_text``, while
timings live on the word stream. The two strings usually agree but can
differ by a constant prefix (e.g. a leading ellipsis present in only one
of them). This module detects that prefix shift as a single signed offset.

Only a single constant prefix shift is corrected. Drift introduced in the
middle of the text by multiple insertions is not handled; this is an
accepted approximation.
"""

from collections.abc import Callable, Sequence
from dataclasses import dataclass

import structlog

from redline.common.models import Word

logger = structlog.get_logger()

# Number of leading characters used as the search anchor.
ANCHOR_LENGTH = 30

# Anchors this short (or shorter) produce spurious matches; skip correction.
MIN_ANCHOR_LENGTH = 5


@dataclass(frozen=True)
class WordSpan:
    """A word with its ``[start_char, end_char)`` span in the reconstructed text."""

    word: Word
    start_char: int
    end_char: int

    def contains(self, offset: int) -> bool:
        return self.start_char <= offset < self.end_char


def build_word_spans(words: Sequence[Word]) -> list[WordSpan]:
    """Assign cumulative character spans to every word.

    No separators are inserted: spacing items in the word stream already
    carry their own text.
    """
    spans: list[WordSpan] = []
    cursor = 0
    for word in words:
        end = cursor + len(word.text)
        spans.append(WordSpan(word=word, start_char=cursor, end_char=end))
        cursor = end
    return spans


def reconstruct_text(words: Sequence[Word]) -> str:
    """Concatenate word texts in order."""
    return "".join(word.text for word in words)


def leading_artifact_offset(full_text: str, reconstructed: str) -> int | None:
    """Reconstructed text carries extra leading characters.

    Searches the annotator anchor inside the reconstructed text; a match at
    index ``k`` means every annotator offset must be shifted by ``+k``.
    """
    anchor = full_text[:ANCHOR_LENGTH]
    index = reconstructed.find(anchor)
    return index if index != -1 else None


def missing_prefix_offset(full_text: str, reconstructed: str) -> int | None:
    """Annotator text carries extra leading characters.

    Searches the reconstructed anchor inside the annotator text; a match at
    index ``k`` means every annotator offset must be shifted by ``-k``.
    """
    anchor = reconstructed[:ANCHOR_LENGTH]
    if len(anchor) <= MIN_ANCHOR_LENGTH:
        return None
    index = full_text.find(anchor)
    return -index if index != -1 else None


DriftStrategy = Callable[[str, str], int | None]

# Applied in order; the first strategy returning an offset wins.
DRIFT_STRATEGIES: tuple[DriftStrategy, ...] = (
    leading_artifact_offset,
    missing_prefix_offset,
)


def compute_drift_offset(full_text: str, words: Sequence[Word]) -> int:
    """Compute the signed offset from annotator positions to word-stream positions.

    Never fails: unresolvable drift yields 0 (assume aligned).

    Args:
        full_text: Transcript text the annotator's offsets refer to
        words: Ordered word stream

    Returns:
        Offset to add to every annotator ``start_char`` of this transcript
    """
    if not full_text or not words:
        return 0

    if len(full_text[:ANCHOR_LENGTH]) <= MIN_ANCHOR_LENGTH:
        return 0

    reconstructed = reconstruct_text(words)
    if not reconstructed:
        return 0

    for strategy in DRIFT_STRATEGIES:
        offset = strategy(full_text, reconstructed)
        if offset is not None:
            if offset != 0:
                logger.info(
                    "text_drift_detected",
                    strategy=strategy.__name__,
                    offset=offset,
                )
            return offset

    logger.debug("text_drift_unresolved")
    return 0
