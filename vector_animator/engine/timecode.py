"""
Timecode helpers for the transport: HH:MM:SS.cc formatting and parsing.
"""

import re
from typing import Optional


DURATION_MIN_SECONDS = 0.01

_TIMECODE_RE = re.compile(r"^\s*(\d+):(\d{1,2}):(\d{1,2})(?:\.(\d+))?\s*$")


def format_duration(total_seconds: float) -> str:
    """
    Format seconds as HH:MM:SS.cc (centiseconds).

    Args:
        total_seconds: Duration; clamped to the 0.01 s minimum

    Returns:
        Timecode string, e.g. '00:01:05.25'
    """
    centis = int(round(max(DURATION_MIN_SECONDS, total_seconds) * 100))
    seconds, cc = divmod(centis, 100)
    minutes, ss = divmod(seconds, 60)
    hh, mm = divmod(minutes, 60)
    return f"{hh:02d}:{mm:02d}:{ss:02d}.{cc:02d}"


def parse_duration(text: str) -> Optional[float]:
    """
    Parse HH:MM:SS or HH:MM:SS.cc into seconds.

    A single fractional digit means tenths ('.1' is 0.10 s); digits beyond
    the second are ignored.

    Returns:
        Seconds (at least 0.01), or None when the text is not a timecode
    """
    if not isinstance(text, str):
        return None
    match = _TIMECODE_RE.match(text)
    if not match:
        return None
    hours, minutes, seconds = (int(g) for g in match.groups()[:3])
    fraction = match.group(4) or ''
    if minutes > 59 or seconds > 59:
        return None
    centis = int((fraction + '0')[:2]) if fraction else 0
    total = hours * 3600 + minutes * 60 + seconds + centis / 100.0
    return max(DURATION_MIN_SECONDS, total)


def adjust_duration(current_seconds: float, delta_ms: float) -> float:
    """Nudge a duration by milliseconds, keeping the 0.01 s minimum"""
    return max(DURATION_MIN_SECONDS, current_seconds + delta_ms / 1000.0)
