"""Tests for lyrics models."""

import pytest
from pydantic import ValidationError

from timed_lyrics.models import LyricLine, LyricParagraph, LyricSegment, line_at


def make_line(*spans):
    return LyricLine(
        text=" ".join(text for text, _, _ in spans),
        segments=[LyricSegment(text=t, start_time=s, end_time=e) for t, s, e in spans],
    )


class TestLyricSegment:
    """Tests for LyricSegment."""

    def test_duration(self):
        """Test segment duration."""
        segment = LyricSegment(text="We", start_time=0.5, end_time=0.9)
        assert segment.duration == pytest.approx(0.4)

    def test_contains_time(self):
        """Test the half-open time range."""
        segment = LyricSegment(text="We", start_time=1.0, end_time=2.0)

        assert segment.contains_time(1.0)
        assert segment.contains_time(1.5)
        assert not segment.contains_time(2.0)
        assert not segment.contains_time(0.9)

    def test_overlaps(self):
        """Test overlap with a time range."""
        segment = LyricSegment(text="We", start_time=1.0, end_time=2.0)

        assert segment.overlaps(1.5, 3.0)
        assert not segment.overlaps(2.0, 3.0)

    def test_zero_length_allowed(self):
        """Test that a zero-length segment is valid."""
        segment = LyricSegment(text="la", start_time=3.0, end_time=3.0)
        assert segment.duration == 0.0

    def test_end_before_start_rejected(self):
        """Test that end must not precede start."""
        with pytest.raises(ValidationError):
            LyricSegment(text="la", start_time=3.0, end_time=2.0)

    def test_negative_start_rejected(self):
        """Test that times are non-negative."""
        with pytest.raises(ValidationError):
            LyricSegment(text="la", start_time=-1.0, end_time=2.0)

    def test_empty_text_rejected(self):
        """Test that a segment needs text."""
        with pytest.raises(ValidationError):
            LyricSegment(text="", start_time=0.0, end_time=1.0)

    def test_frozen(self):
        """Test that segments cannot be changed."""
        segment = LyricSegment(text="We", start_time=0.5, end_time=0.9)
        with pytest.raises(ValidationError):
            segment.text = "They"


class TestLyricLine:
    """Tests for LyricLine."""

    def test_timed_line(self):
        """Test timing helpers of a timed line."""
        line = make_line(("We", 0.5, 0.9), ("rise", 0.9, 1.2))

        assert line.is_timed
        assert line.start_time == pytest.approx(0.5)
        assert line.end_time == pytest.approx(1.2)

    def test_untimed_line(self):
        """Test timing helpers of an untimed line."""
        line = LyricLine(text="Instrumental")

        assert not line.is_timed
        assert line.start_time is None
        assert line.end_time is None
        assert line.segment_at(1.0) is None

    def test_end_time_covers_background_segments(self):
        """Test that the line end is the latest segment end."""
        line = make_line(("Hello", 1.0, 3.5), ("(oh)", 2.0, 3.0))
        assert line.end_time == pytest.approx(3.5)

    def test_segment_at(self):
        """Test looking up the segment being sung."""
        line = make_line(("We", 0.5, 0.9), ("rise", 0.9, 1.2))

        assert line.segment_at(0.6).text == "We"
        assert line.segment_at(0.9).text == "rise"
        assert line.segment_at(1.5) is None


class TestLyricParagraph:
    """Tests for LyricParagraph."""

    def test_text_and_times(self):
        """Test paragraph text and timing."""
        paragraph = LyricParagraph(
            lines=[
                make_line(("one", 1.0, 2.0)),
                LyricLine(text="(untimed)"),
                make_line(("two", 3.0, 4.0)),
            ],
            song_part="Verse",
        )

        assert paragraph.text == "one\n(untimed)\ntwo"
        assert paragraph.start_time == pytest.approx(1.0)
        assert paragraph.end_time == pytest.approx(4.0)

    def test_empty_paragraph(self):
        """Test a paragraph without lines."""
        paragraph = LyricParagraph()

        assert paragraph.lines == []
        assert paragraph.song_part is None
        assert paragraph.start_time is None

    def test_model_dump(self):
        """Test serialization for JSON output."""
        paragraph = LyricParagraph(lines=[make_line(("We", 0.5, 0.9))], song_part="Verse")

        assert paragraph.model_dump() == {
            "lines": [
                {
                    "text": "We",
                    "segments": [{"text": "We", "start_time": 0.5, "end_time": 0.9}],
                }
            ],
            "song_part": "Verse",
        }


class TestLineAt:
    """Tests for line_at."""

    def test_finds_line(self):
        """Test locating the line being sung."""
        paragraphs = [
            LyricParagraph(lines=[make_line(("a", 1.0, 2.0)), make_line(("b", 2.0, 3.0))]),
            LyricParagraph(lines=[LyricLine(text="x"), make_line(("c", 5.0, 6.0))]),
        ]

        assert line_at(paragraphs, 1.5) == (0, 0)
        assert line_at(paragraphs, 2.0) == (0, 1)
        assert line_at(paragraphs, 5.5) == (1, 1)

    def test_between_lines(self):
        """Test that gaps return None."""
        paragraphs = [LyricParagraph(lines=[make_line(("a", 1.0, 2.0))])]

        assert line_at(paragraphs, 0.5) is None
        assert line_at(paragraphs, 3.0) is None
        assert line_at([], 1.0) is None
