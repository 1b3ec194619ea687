"""Timed lyrics markup parsing.

Provides the TTML lyrics parser plus the timecode and spacing rules it
is built from.
"""

from timed_lyrics.lyrics.parser import LyricsParser, iter_markup_events
from timed_lyrics.lyrics.timecode import parse_timecode, resolve_span_times
from timed_lyrics.lyrics.tokens import (
    ACCENTED_START_CHARS,
    CLOSING_PUNCTUATION,
    Token,
    assemble_line_text,
    normalize_text,
    should_suppress_space,
)

__all__ = [
    "LyricsParser",
    "iter_markup_events",
    "parse_timecode",
    "resolve_span_times",
    "ACCENTED_START_CHARS",
    "CLOSING_PUNCTUATION",
    "Token",
    "assemble_line_text",
    "normalize_text",
    "should_suppress_space",
]
