"""Rehearsal-mark line detection.

A lyric line written entirely as 【Label】 is a section label (Intro, A,
Chorus...) rather than sung text.
"""

from __future__ import annotations

MARKER_OPEN = "【"
MARKER_CLOSE = "】"


def detect_rehearsal_mark(
    line: str,
    open_bracket: str = MARKER_OPEN,
    close_bracket: str = MARKER_CLOSE,
) -> str | None:
    """Return the label of a rehearsal-mark line.

    Args:
        line: Raw line text
        open_bracket: Opening delimiter
        close_bracket: Closing delimiter

    Returns:
        The trimmed text between the delimiters, or None when the trimmed
        line is not exactly one delimited label
    """
    stripped = line.strip()
    if len(stripped) < len(open_bracket) + len(close_bracket):
        return None
    if not (stripped.startswith(open_bracket) and stripped.endswith(close_bracket)):
        return None

    inner = stripped[len(open_bracket) : len(stripped) - len(close_bracket)]
    # "【A】 and 【B】" starts and ends with brackets but is not one label.
    if open_bracket in inner or close_bracket in inner:
        return None
    return inner.strip()
