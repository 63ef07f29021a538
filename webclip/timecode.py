"""Timecode parsing and formatting."""

import re

_HMS = re.compile(r"^(\d+):(\d+):(\d+(?:\.\d+)?)$")
_MS = re.compile(r"^(\d+):(\d+(?:\.\d+)?)$")
_LEADING_FLOAT = re.compile(r"^\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def parse_time_input(text: str | None) -> float:
    """Convert ``H:MM:SS[.f]``, ``MM:SS[.f]`` or plain seconds to seconds.

    Components are not range-checked, so ``"99:99:99"`` is accepted
    arithmetically. Text that is not a number at all yields 0.0; a leading
    numeric prefix (``"12abc"``) is honored.
    """
    if not text:
        return 0.0
    text = text.strip()

    m = _HMS.match(text)
    if m:
        return int(m.group(1)) * 3600 + int(m.group(2)) * 60 + float(m.group(3))

    m = _MS.match(text)
    if m:
        return int(m.group(1)) * 60 + float(m.group(2))

    m = _LEADING_FLOAT.match(text)
    return float(m.group(0)) if m else 0.0


def format_time(seconds: float) -> str:
    seconds = max(0, int(seconds))
    h = seconds // 3600
    m = (seconds % 3600) // 60
    s = seconds % 60
    return f"{h:02d}:{m:02d}:{s:02d}"
