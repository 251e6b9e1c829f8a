"""
Unit tests for search visibility, highlighting and separators
"""
import string

import pytest
from hypothesis import given, strategies as st

from logbin.UI.views.log_stream.filter_engine import (
    FilterEngine,
    separators,
    tokenize,
)
from logbin.UI.views.log_stream.log_parser import LogRecord


def make_record(raw: str = "x", arrived_at: int = 0, time=None, sequence: int = 0) -> LogRecord:
    return LogRecord(sequence=sequence, raw=raw, time_string="", arrived_at=arrived_at, time=time)


class TestTokenize:

    def test_splits_and_lowercases(self):
        assert tokenize("  Error   DISK ") == ("error", "disk")

    @pytest.mark.parametrize("text", [None, "", "   ", "\t\n"])
    def test_blank(self, text):
        assert tokenize(text) == ()


class TestFilterEngine:

    def test_or_semantics(self):
        records = [make_record("error in db"), make_record("warning: disk 90%"), make_record("info ok")]
        results = FilterEngine("error disk").apply(records)
        assert [r.visible for r in results] == [True, True, False]

    def test_case_insensitive(self):
        assert FilterEngine("ERROR").match(make_record("an error occurred")).visible
        assert FilterEngine("error").match(make_record("AN ERROR OCCURRED")).visible

    @pytest.mark.parametrize("text", [None, "", "    "])
    def test_blank_filter_shows_everything(self, text):
        engine = FilterEngine(text)
        assert not engine.is_active
        for result in engine.apply([make_record("a"), make_record("b")]):
            assert result.visible
            assert result.highlights == ()

    def test_highlight_spans(self):
        result = FilterEngine("error").match(make_record("Error then error"))
        assert result.highlights == ((0, 5), (11, 16))

    def test_highlights_for_each_token(self):
        result = FilterEngine("db fail").match(make_record("db connect failed"))
        assert result.highlights == ((0, 2), (11, 15))

    def test_overlapping_tokens_prefer_longest(self):
        result = FilterEngine("err error").match(make_record("error"))
        assert result.highlights == ((0, 5),)

    def test_tokens_are_literal(self):
        engine = FilterEngine("a.b (x")
        assert not engine.match(make_record("axb")).visible
        assert engine.match(make_record("value a.b")).visible
        assert engine.match(make_record("call (x)")).visible

    def test_matches_raw_not_message(self):
        record = LogRecord(sequence=0, raw='{"msg": "hi", "user": "alice"}', time_string="",
                           arrived_at=0, message="hi")
        assert FilterEngine("alice").match(record).visible

    def test_apply_keeps_every_slot(self):
        records = [make_record("a"), make_record("b"), make_record("c")]
        assert len(FilterEngine("zzz").apply(records)) == 3

    @given(
        raw=st.text(alphabet=string.ascii_letters + " ", max_size=40),
        tokens=st.lists(st.text(alphabet=string.ascii_letters, min_size=1, max_size=4), max_size=4),
    )
    def test_visible_iff_any_token_is_contained(self, raw, tokens):
        result = FilterEngine(" ".join(tokens)).match(make_record(raw))
        expected = not tokens or any(token.lower() in raw.lower() for token in tokens)
        assert result.visible == expected


class TestSeparators:

    def test_gap_over_threshold(self):
        records = [make_record(arrived_at=0), make_record(arrived_at=3001)]
        assert separators(records) == [False, True]

    def test_gap_at_threshold(self):
        records = [make_record(arrived_at=0), make_record(arrived_at=3000)]
        assert separators(records) == [False, False]

    def test_uses_extracted_time_when_present(self):
        records = [
            make_record(arrived_at=0, time=10_000),
            make_record(arrived_at=1, time=20_000),
            make_record(arrived_at=2),
        ]
        assert separators(records) == [False, True, False]

    def test_custom_gap(self):
        records = [make_record(arrived_at=0), make_record(arrived_at=600)]
        assert separators(records, gap_ms=500) == [False, True]

    def test_empty(self):
        assert separators([]) == []
