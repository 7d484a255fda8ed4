"""Annotation helpers: takes, marks and take selection.

All annotation data references phrases by id. Every helper returns a new
Document and refuses (returns the input) when an id it would reference
does not exist, so no dangling reference can be created.
"""

from __future__ import annotations

from datetime import datetime
from typing import Iterable

from vocal_phrases.ids import IdGenerator, resolve_id_generator
from vocal_phrases.models.document import Document
from vocal_phrases.models.take import Mark, Take

# 16-colour palette cycled by take order
TAKE_COLORS = (
    "#FFB6B6",  # light red
    "#FFE4B5",  # moccasin
    "#90EE90",  # light green
    "#FFD700",  # gold
    "#DDA0DD",  # plum
    "#87CEEB",  # sky blue
    "#FFC0CB",  # pink
    "#F0E68C",  # khaki
    "#98FB98",  # pale green
    "#FFDDCC",  # light coral
    "#B0E0E6",  # powder blue
    "#FFDAB9",  # peach puff
    "#E0BBE4",  # lavender
    "#FFDAC1",  # apricot
    "#B5EAD7",  # mint
    "#C7CEEA",  # periwinkle
)


def take_color(order: int) -> str:
    """Palette colour for a 1-based take order."""
    return TAKE_COLORS[(order - 1) % len(TAKE_COLORS)]


def _take_exists(document: Document, take_id: str) -> bool:
    return any(take.id == take_id for take in document.takes)


def get_mark(document: Document, phrase_id: str, take_id: str) -> Mark | None:
    """Mark for one phrase in one take, if any."""
    return next(
        (m for m in document.marks if m.phrase_id == phrase_id and m.take_id == take_id),
        None,
    )


def marks_for_phrase(document: Document, phrase_id: str) -> list[Mark]:
    return [m for m in document.marks if m.phrase_id == phrase_id]


def marks_for_take(document: Document, take_id: str) -> list[Mark]:
    return [m for m in document.marks if m.take_id == take_id]


def _upsert_mark(
    document: Document,
    phrase_id: str,
    take_id: str,
    changes: dict,
    id_generator: IdGenerator | None,
) -> Document:
    if not document.contains(phrase_id) or not _take_exists(document, take_id):
        return document

    changes = {**changes, "updated_at": datetime.now()}
    marks = list(document.marks)
    for i, mark in enumerate(marks):
        if mark.phrase_id == phrase_id and mark.take_id == take_id:
            marks[i] = mark.model_copy(update=changes)
            break
    else:
        ids = resolve_id_generator(id_generator)
        marks.append(Mark(id=ids.next_id(), phrase_id=phrase_id, take_id=take_id, **changes))

    return document.evolve(marks=marks)


def set_mark_value(
    document: Document,
    phrase_id: str,
    take_id: str,
    mark_value: str | None,
    id_generator: IdGenerator | None = None,
) -> Document:
    """Set the rating symbol for a phrase in a take.

    The value is cut to its first character; an empty value clears it.
    """
    normalized = mark_value[:1] if mark_value else None
    return _upsert_mark(document, phrase_id, take_id, {"mark_value": normalized}, id_generator)


def set_mark_memo(
    document: Document,
    phrase_id: str,
    take_id: str,
    memo: str | None,
    id_generator: IdGenerator | None = None,
) -> Document:
    """Set the free-text memo for a phrase in a take."""
    return _upsert_mark(document, phrase_id, take_id, {"memo": memo or None}, id_generator)


def clear_mark(document: Document, phrase_id: str, take_id: str) -> Document:
    """Blank the rating and memo of an existing mark."""
    if get_mark(document, phrase_id, take_id) is None:
        return document
    return _upsert_mark(document, phrase_id, take_id, {"mark_value": None, "memo": None}, None)


def add_take(document: Document, id_generator: IdGenerator | None = None) -> Document:
    """Append a take numbered after the current highest one."""
    ids = resolve_id_generator(id_generator)
    order = max((take.order for take in document.takes), default=0) + 1
    take = Take(id=ids.next_id(), order=order, label=str(order), color=take_color(order))
    return document.evolve(takes=(*document.takes, take))


def remove_take(document: Document, take_id: str) -> Document:
    """Delete a take with its marks and selections, renumbering the rest."""
    if not _take_exists(document, take_id):
        return document

    remaining = [take for take in document.takes if take.id != take_id]
    takes = [
        take.model_copy(update={"order": i, "label": str(i)})
        for i, take in enumerate(remaining, start=1)
    ]
    return document.evolve(
        takes=takes,
        marks=[m for m in document.marks if m.take_id != take_id],
        selected_take_by_phrase_id={
            phrase_id: selected
            for phrase_id, selected in document.selected_take_by_phrase_id.items()
            if selected != take_id
        },
    )


def select_take(document: Document, phrase_id: str, take_id: str) -> Document:
    """Choose the take used for a phrase in the final comp."""
    phrase = document.get_phrase(phrase_id)
    if phrase is None or not phrase.is_selectable or not _take_exists(document, take_id):
        return document
    return document.evolve(
        selected_take_by_phrase_id={**document.selected_take_by_phrase_id, phrase_id: take_id}
    )


def clear_selected_take(document: Document, phrase_id: str) -> Document:
    if phrase_id not in document.selected_take_by_phrase_id:
        return document
    selections = dict(document.selected_take_by_phrase_id)
    del selections[phrase_id]
    return document.evolve(selected_take_by_phrase_id=selections)


def has_annotation_data(document: Document, phrase_id: str) -> bool:
    """True if deleting the phrase would discard a rating, memo or selection.

    Callers check this before a merge or line removal to decide whether to
    ask for confirmation.
    """
    if phrase_id in document.selected_take_by_phrase_id:
        return True
    return any(mark.has_data for mark in marks_for_phrase(document, phrase_id))


def purge_annotations(document: Document, phrase_ids: Iterable[str]) -> Document:
    """Drop every mark and take selection keyed by the given phrase ids."""
    doomed = set(phrase_ids)
    if not doomed:
        return document
    return document.evolve(
        marks=[m for m in document.marks if m.phrase_id not in doomed],
        selected_take_by_phrase_id={
            phrase_id: take_id
            for phrase_id, take_id in document.selected_take_by_phrase_id.items()
            if phrase_id not in doomed
        },
    )
