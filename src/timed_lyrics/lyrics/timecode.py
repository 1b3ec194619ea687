"""Timecode parsing for span timing attributes.

Supported notations, all resolving to seconds:
- SS.mmm          (seconds only)
- MM:SS.mmm       (minutes and seconds)
- H:MM:SS.mmm     (hours, minutes and seconds)

The fractional separator may be "." or ",". Anything else degrades to 0
instead of failing the whole document.
"""

from __future__ import annotations

import math
import re

# One numeric component: digits with an optional fraction, or a bare fraction
_COMPONENT_PATTERN = re.compile(r"^(?:\d+(?:\.\d*)?|\.\d+)$")

# Seconds per component, right-aligned: [..., hours, minutes, seconds]
_UNIT_SECONDS = (3600.0, 60.0, 1.0)

UNPARSABLE = 0.0


def parse_timecode(value: str | None) -> float | None:
    """Parse a timecode attribute value into seconds.

    Args:
        value: Raw attribute value, or None if the attribute is absent

    Returns:
        Seconds as a float; None if value is None; 0.0 if unparsable
    """
    if value is None:
        return None

    text = value.strip()
    if not text:
        return UNPARSABLE

    parts = text.split(":")
    if len(parts) > len(_UNIT_SECONDS):
        return UNPARSABLE

    # Only the seconds component may carry a comma decimal separator
    parts[-1] = parts[-1].replace(",", ".")

    total = 0.0
    units = _UNIT_SECONDS[-len(parts):]
    for part, unit in zip(parts, units):
        if not _COMPONENT_PATTERN.match(part):
            return UNPARSABLE
        total += float(part) * unit
        if not math.isfinite(total):
            return UNPARSABLE

    return total


def resolve_span_times(begin: str | None, end: str | None) -> tuple[float, float]:
    """Resolve a span's begin/end attributes into a (start, end) pair.

    A missing begin starts at 0. A missing end mirrors the resolved start,
    giving a zero-length segment. An end-only span keeps its own end.
    The end is never earlier than the start.

    Args:
        begin: Raw "begin" attribute, None if absent
        end: Raw "end" attribute, None if absent

    Returns:
        (start_time, end_time) in seconds
    """
    start_time = parse_timecode(begin)
    if start_time is None:
        start_time = 0.0

    end_time = parse_timecode(end)
    if end_time is None:
        end_time = start_time

    return start_time, max(start_time, end_time)
