"""Timed Lyrics - TTML lyrics parsing for karaoke-style display.

Turns timed-text lyrics markup into paragraphs, lines and timed segments:
1. Parsing: a streaming parser that rebuilds word spacing and timecodes
2. Catalog: fetching the raw markup for a song from the catalog API
"""

__version__ = "0.1.0"
