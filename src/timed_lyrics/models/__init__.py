"""Data models for timed-lyrics.

This module provides Pydantic models for parsed lyrics.
"""

from __future__ import annotations

from timed_lyrics.models.lyrics import LyricLine, LyricParagraph, LyricSegment, line_at

__all__ = [
    "LyricLine",
    "LyricParagraph",
    "LyricSegment",
    "line_at",
]
