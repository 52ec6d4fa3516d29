"""
Timestamp parsing and formatting for chapter lists.
"""

import re

_TIME_RE = re.compile(r"(\d{1,2}:)?\d{1,2}:\d{2}")
_TITLE_PREFIX_RE = re.compile(r"^[\s\-–—:\[\]().]+")


def _to_seconds(time_str: str) -> int:
    parts = [int(p) for p in time_str.split(":")]
    seconds = 0
    for part in parts:
        seconds = seconds * 60 + part
    return seconds


def parse_timestamp(text: str) -> int | None:
    """Return the first ``[H:]M:SS`` time in ``text`` as seconds, or None."""
    m = _TIME_RE.search(text)
    if not m:
        return None
    return _to_seconds(m.group(0))


def parse_timestamp_line(line: str) -> tuple[int, str] | None:
    """
    Parse one line of a chapter list into ``(start_seconds, title)``.

    Accepts ``0:00 - Intro``, ``[00:05:30] Topic``, ``(1:02:03) Deep dive``
    and similar. Lines with no time token, or with nothing left after the
    time token is removed, return None.
    """
    m = _TIME_RE.search(line)
    if not m:
        return None
    time_str = m.group(0)
    title = line.replace(time_str, "", 1).strip()
    title = _TITLE_PREFIX_RE.sub("", title).strip()
    if not title:
        return None
    return _to_seconds(time_str), title


def format_time(seconds: float) -> str:
    """Format seconds as M:SS, or H:MM:SS from one hour up."""
    seconds = int(seconds)
    hours = seconds // 3600
    minutes = (seconds % 3600) // 60
    secs = seconds % 60
    if hours > 0:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"
