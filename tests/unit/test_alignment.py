"""Unit tests for text alignment drift correction."""

from redline.common.models import Word
from redline.pipeline.alignment import (
    ANCHOR_LENGTH,
    DRIFT_STRATEGIES,
    build_word_spans,
    compute_drift_offset,
    leading_artifact_offset,
    missing_prefix_offset,
    reconstruct_text,
)


def words(*texts: str) -> list[Word]:
    return [Word(text=t, start_time=float(i), end_time=float(i) + 0.5) for i, t in enumerate(texts)]


class TestWordSpans:
    """Tests for reconstructed text and word spans."""

    def test_spans_are_cumulative_without_separators(self):
        spans = build_word_spans(words("Hello", " ", "world"))

        assert [(s.start_char, s.end_char) for s in spans] == [(0, 5), (5, 6), (6, 11)]

    def test_reconstruct_concatenates_in_order(self):
        assert reconstruct_text(words("...", "Hello", " ", "world")) == "...Hello world"

    def test_empty_word_has_empty_span(self):
        spans = build_word_spans(words("a", "", "b"))

        assert (spans[1].start_char, spans[1].end_char) == (1, 1)
        assert not spans[1].contains(1)

    def test_contains_is_half_open(self):
        span = build_word_spans(words("Hello"))[0]

        assert span.contains(0)
        assert span.contains(4)
        assert not span.contains(5)


class TestLeadingArtifactOffset:
    """Reconstructed text carries extra leading characters."""

    def test_finds_anchor_after_prefix(self):
        assert leading_artifact_offset("Hello world", "...Hello world") == 3

    def test_returns_zero_when_aligned(self):
        assert leading_artifact_offset("Hello world", "Hello world") == 0

    def test_returns_none_when_anchor_missing(self):
        assert leading_artifact_offset("Hello world", "Goodbye world") is None

    def test_uses_only_first_anchor_characters(self):
        full_text = "x" * ANCHOR_LENGTH + " tail that differs"
        reconstructed = "--" + "x" * ANCHOR_LENGTH + " another tail"

        assert leading_artifact_offset(full_text, reconstructed) == 2


class TestMissingPrefixOffset:
    """Annotator text carries extra leading characters."""

    def test_finds_reconstructed_anchor_inside_full_text(self):
        assert missing_prefix_offset("...Hello world", "Hello world") == -3

    def test_short_reconstructed_anchor_is_ignored(self):
        assert missing_prefix_offset("...Hello", "Hello") is None

    def test_returns_none_when_not_found(self):
        assert missing_prefix_offset("Hello world", "Goodbye world") is None


class TestComputeDriftOffset:
    """Tests for compute_drift_offset strategy composition."""

    def test_positive_offset_for_leading_ellipsis_in_words(self):
        assert compute_drift_offset("Hello world", words("...Hello", " ", "world")) == 3

    def test_negative_offset_for_leading_ellipsis_in_text(self):
        assert compute_drift_offset("...Hello world", words("Hello", " ", "world")) == -3

    def test_zero_when_aligned(self):
        assert compute_drift_offset("Hello world", words("Hello", " ", "world")) == 0

    def test_short_text_skips_correction(self):
        assert compute_drift_offset("Hi yo", words("...", "Hi yo")) == 0

    def test_six_character_anchor_is_used(self):
        assert compute_drift_offset("Hi you", words("...", "Hi you")) == 3

    def test_unresolvable_drift_defaults_to_zero(self):
        assert compute_drift_offset("Completely different", words("Nothing", " ", "alike")) == 0

    def test_no_words_defaults_to_zero(self):
        assert compute_drift_offset("Hello world", []) == 0

    def test_empty_text_defaults_to_zero(self):
        assert compute_drift_offset("", words("Hello")) == 0

    def test_strategy_order_is_fixed(self):
        assert DRIFT_STRATEGIES == (leading_artifact_offset, missing_prefix_offset)
