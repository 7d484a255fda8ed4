"""Read-only views over a Document.

Line grouping, marker placement between lines and selectable-phrase
navigation. Markers sit between lines by order value; their line_index is
never used for grouping.
"""

from __future__ import annotations

from dataclasses import dataclass

from vocal_phrases.models.document import Document
from vocal_phrases.models.phrase import Phrase

BEFORE_FIRST_LINE = -1


@dataclass
class LineGroup:
    """Lyric phrases sharing one source line."""

    line_index: int
    phrases: list[Phrase]

    @property
    def first_order(self) -> int:
        return self.phrases[0].order

    @property
    def last_order(self) -> int:
        return self.phrases[-1].order

    @property
    def text(self) -> str:
        return "".join(p.text for p in self.phrases)

    @property
    def is_blank(self) -> bool:
        return all(not p.text.strip() for p in self.phrases)


def is_selectable_phrase(phrase: Phrase) -> bool:
    """True for non-marker phrases with visible text."""
    return phrase.is_selectable


def group_phrases_by_line(document: Document) -> list[LineGroup]:
    """Group lyric phrases by line_index, markers excluded.

    Returns:
        Groups sorted by line_index, each sorted by order
    """
    by_line: dict[int, list[Phrase]] = {}
    for phrase in document.phrases:
        if phrase.is_marker:
            continue
        by_line.setdefault(phrase.line_index, []).append(phrase)

    return [
        LineGroup(line_index, sorted(phrases, key=lambda p: p.order))
        for line_index, phrases in sorted(by_line.items())
    ]


def _order_bounds(
    groups: list[LineGroup],
    document: Document,
    after_line_index: int,
    before_line_index: int | None,
) -> tuple[int, int] | None:
    """Exclusive order range between two lines, or None if a line is unknown."""
    if after_line_index == BEFORE_FIRST_LINE:
        lower = -1
        position = -1
    else:
        position = next(
            (i for i, g in enumerate(groups) if g.line_index == after_line_index),
            None,
        )
        if position is None:
            return None
        lower = groups[position].last_order

    if before_line_index is None:
        following = groups[position + 1] if position + 1 < len(groups) else None
    else:
        following = next((g for g in groups if g.line_index == before_line_index), None)
        if following is None:
            return None
    upper = following.first_order if following is not None else len(document.phrases)

    return lower, upper


def markers_between(
    document: Document,
    after_line_index: int,
    before_line_index: int | None = None,
) -> list[Phrase]:
    """Markers placed between two lines.

    Args:
        document: Document to inspect
        after_line_index: Line the markers follow; -1 means document start
        before_line_index: Line the markers precede; None means whichever
            line comes next (or the document end)

    Returns:
        Markers whose order lies strictly inside the gap, in order
    """
    groups = group_phrases_by_line(document)
    bounds = _order_bounds(groups, document, after_line_index, before_line_index)
    if bounds is None:
        return []
    lower, upper = bounds
    return [p for p in document.phrases if p.is_marker and lower < p.order < upper]


def markers_before_first_line(document: Document) -> list[Phrase]:
    return markers_between(document, BEFORE_FIRST_LINE)


def markers_after_line(document: Document, line_index: int) -> list[Phrase]:
    return markers_between(document, line_index)


def marker_insertion_order(document: Document, after_line_index: int) -> int | None:
    """Order value a new marker after the given line would take.

    Returns:
        The position right after the line's last phrase (0 for -1), or None
        when after_line_index names no line
    """
    groups = group_phrases_by_line(document)
    bounds = _order_bounds(groups, document, after_line_index, None)
    if bounds is None:
        return None
    return bounds[0] + 1


def line_text(document: Document, line_index: int) -> str:
    """Concatenated text of a line's lyric phrases."""
    return "".join(p.text for p in document.phrases_in_line(line_index))


def find_next_selectable_phrase(document: Document, current_order: int) -> Phrase | None:
    """First selectable phrase after current_order."""
    return next(
        (p for p in document.phrases if p.order > current_order and p.is_selectable),
        None,
    )


def find_previous_selectable_phrase(document: Document, current_order: int) -> Phrase | None:
    """Last selectable phrase before current_order."""
    return next(
        (p for p in reversed(document.phrases) if p.order < current_order and p.is_selectable),
        None,
    )


def next_selectable_index(document: Document, start_index: int) -> int:
    """Index of the next selectable phrase, or start_index if there is none."""
    for i in range(start_index + 1, len(document.phrases)):
        if document.phrases[i].is_selectable:
            return i
    return start_index


def previous_selectable_index(document: Document, start_index: int) -> int:
    """Index of the previous selectable phrase, or start_index if there is none."""
    for i in range(min(start_index, len(document.phrases)) - 1, -1, -1):
        if document.phrases[i].is_selectable:
            return i
    return start_index
