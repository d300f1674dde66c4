#!/usr/bin/env python3
"""Unit tests for beeptone.score - score parsing and playback."""

from unittest.mock import MagicMock, call

import pytest

from beeptone.errors import InvalidDuration, InvalidNoteFormat, MalformedSegment, NoteOutOfRange
from beeptone.notes import note_to_frequency
from beeptone.score import (
    DEFAULT_DURATION_MS,
    MAX_DURATION_MS,
    Rest,
    Tone,
    parse_duration,
    parse_score,
    parse_segment,
    play_score,
    score_duration_ms,
)


class TestParseDuration:
    """Tests for parse_duration function."""

    def test_parse_duration_plain(self):
        assert parse_duration("1000") == 1000

    def test_parse_duration_zero(self):
        assert parse_duration("0") == 0

    def test_parse_duration_plus_sign(self):
        """Test an explicit plus sign is accepted."""
        assert parse_duration("+250") == 250

    def test_parse_duration_negative(self):
        """Test negative durations are rejected."""
        with pytest.raises(InvalidDuration, match="negative"):
            parse_duration("-5")

    def test_parse_duration_not_integer(self):
        for text in ("", "abc", "1.5", "500ms", " 500"):
            with pytest.raises(InvalidDuration):
                parse_duration(text)

    def test_parse_duration_too_large(self):
        """Test values beyond INT64 are rejected."""
        with pytest.raises(InvalidDuration, match="out of range"):
            parse_duration(str(2**63))

    def test_parse_duration_max(self):
        """Test the longest playable duration is accepted."""
        assert parse_duration(str(MAX_DURATION_MS)) == MAX_DURATION_MS

    def test_parse_duration_int64_max(self):
        """Test INT64-sized durations are rejected up front, not when sleeping."""
        with pytest.raises(InvalidDuration, match="out of range"):
            parse_duration(str(2**63 - 1))

    def test_parse_duration_huge_digit_string(self):
        """Test thousands of digits give InvalidDuration, not an int() error."""
        with pytest.raises(InvalidDuration, match="out of range"):
            parse_duration("9" * 5000)

    def test_parse_duration_leading_zeros(self):
        assert parse_duration("0" * 30 + "5") == 5


class TestParseSegment:
    """Tests for parse_segment function."""

    def test_segment_note_default_duration(self):
        assert parse_segment("A4") == Tone(440.0, DEFAULT_DURATION_MS)

    def test_segment_note_with_duration(self):
        assert parse_segment("A4,250") == Tone(440.0, 250)

    def test_segment_break(self):
        assert parse_segment("break,300") == Rest(300)

    def test_segment_dash(self):
        assert parse_segment("-") == Rest(DEFAULT_DURATION_MS)

    def test_segment_rest_case_sensitive(self):
        """Test 'BREAK' is treated as a note, not a rest."""
        with pytest.raises(InvalidNoteFormat):
            parse_segment("BREAK")

    def test_segment_empty(self):
        """Test empty segment yields no event."""
        assert parse_segment("") is None
        assert parse_segment(",100") is None

    def test_segment_too_many_fields(self):
        with pytest.raises(MalformedSegment, match="C4,500,200"):
            parse_segment("C4,500,200")

    def test_segment_uses_tuning(self):
        assert parse_segment("A4", 432.0) == Tone(432.0, DEFAULT_DURATION_MS)


class TestParseScore:
    """Tests for parse_score function."""

    def test_parse_score_triad(self):
        """Test C major triad plus octave."""
        events = parse_score("C4;E4;G4;C5,1000")
        assert len(events) == 4
        assert all(isinstance(e, Tone) for e in events)
        assert [e.duration_ms for e in events] == [500, 500, 500, 1000]
        frequencies = [e.frequency for e in events]
        assert frequencies == sorted(frequencies)
        assert frequencies[0] == pytest.approx(261.6256, abs=1e-4)
        assert frequencies[3] == pytest.approx(2 * frequencies[0])

    def test_parse_score_rest(self):
        """Test rests keep their place between tones."""
        events = parse_score("C4;-,200;E4")
        assert events == (
            Tone(note_to_frequency("C4"), 500),
            Rest(200),
            Tone(note_to_frequency("E4"), 500),
        )

    def test_parse_score_trailing_separator(self):
        """Test trailing ';' is skipped."""
        assert parse_score("C4;") == (Tone(note_to_frequency("C4"), 500),)

    def test_parse_score_empty_string(self):
        assert parse_score("") == ()

    def test_parse_score_empty_middle_segment(self):
        events = parse_score("C4;;E4")
        assert len(events) == 2

    def test_parse_score_adjacent_rests_not_merged(self):
        assert parse_score("-,100;break,100") == (Rest(100), Rest(100))

    def test_parse_score_duplicates_kept(self):
        events = parse_score("A4;A4;A4")
        assert events == (Tone(440.0, 500),) * 3

    def test_parse_score_malformed(self):
        with pytest.raises(MalformedSegment):
            parse_score("C4,500,200")

    def test_parse_score_fails_fast(self):
        """Test a bad note anywhere aborts the whole parse."""
        with pytest.raises(NoteOutOfRange):
            parse_score("C4;E4;C9")

    def test_parse_score_negative_duration(self):
        with pytest.raises(InvalidDuration):
            parse_score("C4,-100")

    def test_parse_score_oversized_rest(self):
        """Test a rest too long to sleep fails the parse before anything plays."""
        with pytest.raises(InvalidDuration):
            parse_score("A4,1;-,9223372036854775807")

    def test_parse_score_no_trimming(self):
        """Test padded tokens are not trimmed."""
        with pytest.raises(InvalidNoteFormat):
            parse_score("C4; E4")

    def test_parse_score_tuning(self):
        events = parse_score("A4;A5", 432.0)
        assert events[0].frequency == 432.0
        assert events[1].frequency == pytest.approx(864.0)

    def test_parse_score_idempotent(self):
        """Test parsing twice gives equal results."""
        score = "C4;-,200;E4,750;Gb3"
        assert parse_score(score) == parse_score(score)

    def test_parse_score_immutable(self):
        events = parse_score("C4")
        assert isinstance(events, tuple)
        with pytest.raises(AttributeError):
            events[0].duration_ms = 1


class TestScoreDuration:
    """Tests for score_duration_ms function."""

    def test_score_duration_sums_tones_and_rests(self):
        assert score_duration_ms(parse_score("C4;-,200;E4,1000")) == 1700

    def test_score_duration_empty(self):
        assert score_duration_ms(()) == 0


class TestPlayScore:
    """Tests for play_score function."""

    def test_play_score_order(self):
        """Test tones go to the sink and rests sleep, in order."""
        manager = MagicMock()
        events = (Tone(261.63, 500), Rest(200), Tone(329.63, 1000))

        play_score(events, manager.sink, manager.sleep)

        assert manager.mock_calls == [
            call.sink.emit(261.63, 500),
            call.sleep(0.2),
            call.sink.emit(329.63, 1000),
        ]

    def test_play_score_rest_does_not_emit(self):
        sink = MagicMock()
        sleep = MagicMock()
        play_score((Rest(300),), sink, sleep)
        sink.emit.assert_not_called()
        sleep.assert_called_once_with(0.3)

    def test_play_score_empty(self):
        sink = MagicMock()
        sleep = MagicMock()
        play_score((), sink, sleep)
        sink.emit.assert_not_called()
        sleep.assert_not_called()

    def test_play_score_sink_error_stops_playback(self):
        """Test an error from the sink propagates and later events are skipped."""
        sink = MagicMock()
        sink.emit.side_effect = [None, OSError("device busy")]
        with pytest.raises(OSError):
            play_score((Tone(440.0, 10), Tone(880.0, 10), Tone(220.0, 10)), sink, MagicMock())
        assert sink.emit.call_count == 2
