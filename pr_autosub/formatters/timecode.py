"""SRT timecode formatting.

WHY: Every caption block needs a start and end timecode in the fixed
``HH:MM:SS,mmm`` form that SRT readers expect.

HOW: Rounds to whole milliseconds first, then splits with integer
arithmetic, so values like 1.0005 never produce ",1000".

RULES:
- Always two-digit hours/minutes/seconds and three-digit milliseconds
- Comma as the fractional separator
- Hours are not wrapped at 24; they widen past 99
- Negative input is clamped to zero
"""

from __future__ import annotations


def format_time(seconds: float) -> str:
    """Format fractional seconds as an SRT timecode.

    >>> format_time(65.5)
    '00:01:05,500'
    """
    total_ms = max(0, int(round(seconds * 1000)))
    hours, rest = divmod(total_ms, 3_600_000)
    minutes, rest = divmod(rest, 60_000)
    secs, millis = divmod(rest, 1000)
    return "{:02d}:{:02d}:{:02d},{:03d}".format(hours, minutes, secs, millis)
