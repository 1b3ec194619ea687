"""Catalog access for lyrics markup.

Provides the lyrics request and the decoding of its JSON envelope.
"""

from timed_lyrics.catalog.request import LyricsRequest, fetch_lyrics, fetch_paragraphs
from timed_lyrics.catalog.response import (
    LyricsAttributes,
    LyricsData,
    LyricsResponse,
    PlayParams,
    decode_error_code,
    decode_lyrics_response,
)

__all__ = [
    "LyricsRequest",
    "fetch_lyrics",
    "fetch_paragraphs",
    "LyricsAttributes",
    "LyricsData",
    "LyricsResponse",
    "PlayParams",
    "decode_error_code",
    "decode_lyrics_response",
]
