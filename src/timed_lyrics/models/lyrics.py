"""Lyrics models for timed-lyrics.

Paragraphs hold lines, lines hold timed segments. All models are frozen:
the parser builds them once and nothing changes them afterwards.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator


class LyricSegment(BaseModel):
    """A timed run of text inside a line (a word or a syllable).

    Drives karaoke highlighting of the word currently being sung.
    """

    model_config = ConfigDict(frozen=True)

    text: str = Field(min_length=1)
    start_time: float = Field(ge=0.0)  # Start time in seconds
    end_time: float = Field(ge=0.0)  # End time in seconds

    @model_validator(mode="after")
    def _check_order(self) -> "LyricSegment":
        if self.end_time < self.start_time:
            raise ValueError("end_time must not be earlier than start_time")
        return self

    @property
    def duration(self) -> float:
        """Get the duration of this segment in seconds."""
        return self.end_time - self.start_time

    def contains_time(self, time: float) -> bool:
        """Check if this segment is being sung at a given time.

        Args:
            time: Time in seconds

        Returns:
            True if time falls within segment boundaries
        """
        return self.start_time <= time < self.end_time

    def overlaps(self, start: float, end: float) -> bool:
        """Check if this segment overlaps with a time range."""
        return self.start_time < end and self.end_time > start


class LyricLine(BaseModel):
    """A displayable row of lyrics."""

    model_config = ConfigDict(frozen=True)

    text: str  # Assembled text with word spacing rebuilt
    segments: list[LyricSegment] = Field(default_factory=list)

    @property
    def is_timed(self) -> bool:
        return bool(self.segments)

    @property
    def start_time(self) -> float | None:
        """Start of the first segment, or None for an untimed line."""
        if not self.segments:
            return None
        return self.segments[0].start_time

    @property
    def end_time(self) -> float | None:
        """Latest segment end, or None for an untimed line."""
        if not self.segments:
            return None
        return max(segment.end_time for segment in self.segments)

    def segment_at(self, time: float) -> LyricSegment | None:
        """Get the segment being sung at a specific time.

        Args:
            time: Time in seconds

        Returns:
            The segment at that time, or None if nothing is being sung
        """
        for segment in self.segments:
            if segment.contains_time(time):
                return segment
        return None


class LyricParagraph(BaseModel):
    """A section of a song such as a verse or chorus."""

    model_config = ConfigDict(frozen=True)

    lines: list[LyricLine] = Field(default_factory=list)
    song_part: str | None = None  # e.g. "Verse", "Chorus"

    @property
    def text(self) -> str:
        return "\n".join(line.text for line in self.lines)

    @property
    def start_time(self) -> float | None:
        times = [line.start_time for line in self.lines if line.is_timed]
        return min(times) if times else None

    @property
    def end_time(self) -> float | None:
        times = [line.end_time for line in self.lines if line.is_timed]
        return max(times) if times else None


def line_at(paragraphs: list[LyricParagraph], time: float) -> tuple[int, int] | None:
    """Find the line being sung at a specific time.

    A line covers the range from its first segment start to its latest
    segment end. When lines overlap the first one in document order wins.

    Args:
        paragraphs: Parsed lyrics
        time: Playback position in seconds

    Returns:
        (paragraph_index, line_index), or None between lines
    """
    for p_index, paragraph in enumerate(paragraphs):
        for l_index, line in enumerate(paragraph.lines):
            if not line.is_timed:
                continue
            if line.start_time <= time < line.end_time:
                return p_index, l_index
    return None
