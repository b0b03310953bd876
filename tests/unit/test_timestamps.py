"""Unit tests for timestamp mapping and formatting."""

import pytest

from redline.common.models import RawEntity, Word
from redline.pipeline.alignment import build_word_spans
from redline.pipeline.timestamps import (
    FUZZY_WINDOW,
    LOOKUP_STRATEGIES,
    align_entities,
    align_entity,
    containing_word,
    format_timestamp,
    forward_window_word,
    locate_word,
)


@pytest.fixture
def spans():
    # "My card is 4111" with one word per second
    texts = ["My", " ", "card", " ", "is", " ", "4111"]
    return build_word_spans(
        [Word(text=t, start_time=float(i), end_time=float(i) + 1) for i, t in enumerate(texts)]
    )


class TestFormatTimestamp:
    """Tests for M:SS.mmm formatting."""

    def test_truncates_instead_of_rounding(self):
        assert format_timestamp(125.4567) == "2:05.456"

    def test_zero(self):
        assert format_timestamp(0) == "0:00.000"

    def test_pads_seconds_and_milliseconds(self):
        assert format_timestamp(61.005) == "1:01.005"

    def test_just_below_a_second_is_not_rounded_up(self):
        assert format_timestamp(59.9999) == "0:59.999"

    def test_minutes_are_unbounded(self):
        assert format_timestamp(3725.5) == "62:05.500"

    def test_exact_millisecond_values_survive_float_representation(self):
        assert format_timestamp(1.001) == "0:01.001"

    def test_negative_clamps_to_zero(self):
        assert format_timestamp(-3.0) == "0:00.000"

    def test_nan_clamps_to_zero(self):
        assert format_timestamp(float("nan")) == "0:00.000"


class TestWordLookup:
    """Tests for the named lookup strategies."""

    def test_containing_word_exact(self, spans):
        assert containing_word(spans, 4).word.text == "card"

    def test_containing_word_none_past_end(self, spans):
        assert containing_word(spans, 100) is None

    def test_forward_window_picks_first_word_starting_in_window(self, spans):
        assert forward_window_word(spans, -5).word.text == "My"

    def test_forward_window_excludes_window_end(self, spans):
        assert forward_window_word(spans, -FUZZY_WINDOW) is None

    def test_locate_prefers_containing_word(self, spans):
        assert locate_word(spans, 8).word.text == "is"

    def test_locate_falls_back_to_forward_window(self, spans):
        assert locate_word(spans, -3).word.text == "My"

    def test_locate_returns_none_when_nothing_matches(self, spans):
        assert locate_word(spans, 500) is None

    def test_strategy_order_is_fixed(self):
        assert LOOKUP_STRATEGIES == (containing_word, forward_window_word)


class TestAlignEntity:
    """Tests for align_entity."""

    def test_maps_to_containing_word(self, spans):
        entity = RawEntity(entity_type="credit_card", text="4111", start_char=11, end_char=15)

        aligned = align_entity(entity, spans, offset=0)

        assert aligned.timestamp == 6.0
        assert aligned.formatted_timestamp == "0:06.000"
        assert aligned.corrected_start_char == 11
        assert aligned.located is True

    def test_applies_offset(self, spans):
        entity = RawEntity(entity_type="x", text="card", start_char=0, end_char=4)

        aligned = align_entity(entity, spans, offset=3)

        assert aligned.corrected_start_char == 3
        assert aligned.timestamp == 2.0

    def test_unlocated_defaults_to_zero(self, spans):
        entity = RawEntity(entity_type="x", text="?", start_char=400, end_char=401)

        aligned = align_entity(entity, spans, offset=0)

        assert aligned.timestamp == 0
        assert aligned.formatted_timestamp == "0:00.000"
        assert aligned.located is False
        assert aligned.corrected_start_char == 400

    def test_entity_without_offsets_is_unlocated(self, spans):
        aligned = align_entity(RawEntity(entity_type="x", text="card"), spans, offset=0)

        assert aligned.located is False
        assert aligned.corrected_start_char is None

    def test_keeps_raw_fields(self, spans):
        entity = RawEntity(entity_type="credit_card", text="4111", start_char=11, end_char=15)

        aligned = align_entity(entity, spans, offset=0)

        assert (aligned.entity_type, aligned.text, aligned.start_char, aligned.end_char) == (
            "credit_card",
            "4111",
            11,
            15,
        )

    def test_align_entities_preserves_order(self, spans):
        entities = [
            RawEntity(entity_type="a", text="is", start_char=8, end_char=10),
            RawEntity(entity_type="b", text="My", start_char=0, end_char=2),
        ]

        aligned = align_entities(entities, spans, offset=0)

        assert [e.entity_type for e in aligned] == ["a", "b"]
        assert [e.timestamp for e in aligned] == [4.0, 0.0]
        assert all(e.located for e in aligned)
