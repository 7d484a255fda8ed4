"""Structural edits to a phrase document.

Every operation takes a Document and returns a new one; the input is never
touched. Whenever the phrase count changes, order values are rewritten to
match array positions. Requests that would break the document's structure
are refused rather than raised: split returns the input unchanged, merge
and marker insertion return None.

Annotation data for deleted phrases is purged in the same step.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from vocal_phrases.annotations import purge_annotations
from vocal_phrases.ids import IdGenerator, resolve_id_generator
from vocal_phrases.logging import get_logger
from vocal_phrases.models.document import Document
from vocal_phrases.models.phrase import Phrase
from vocal_phrases.views import marker_insertion_order, markers_between

logger = get_logger(__name__)

DEFAULT_MAX_PHRASES_AFTER_SPLIT = 12


@dataclass(frozen=True)
class MergeResult:
    """Outcome of a merge: the new document and the surviving phrase."""

    document: Document
    merged_phrase_id: str


@dataclass(frozen=True)
class InsertMarkerResult:
    """Outcome of a marker insertion: the new document and the marker id."""

    document: Document
    marker_id: str


def renumber(phrases: Iterable[Phrase]) -> list[Phrase]:
    """Rewrite order values to 0..N-1 following the iteration order."""
    return [phrase.with_order(i) for i, phrase in enumerate(phrases)]


def split_by_offset(
    document: Document,
    phrase_id: str,
    char_offset: int,
    *,
    id_generator: IdGenerator | None = None,
    max_phrases_per_line: int = DEFAULT_MAX_PHRASES_AFTER_SPLIT,
) -> Document:
    """Split a phrase in two at a character offset.

    The left part keeps the phrase id and its tokens; the right part is a
    new phrase with no tokens, placed directly after it.

    Args:
        document: Source document
        phrase_id: Phrase to split
        char_offset: Number of characters that stay on the left
        id_generator: Source of the new phrase id
        max_phrases_per_line: Splits are refused once the line holds this
            many lyric phrases

    Returns:
        The new document, or the input itself when the split is refused
    """
    index = document.index_of(phrase_id)
    if index is None:
        logger.debug("Split refused: unknown phrase", extra={"phrase_id": phrase_id})
        return document

    phrase = document.phrases[index]
    if phrase.is_marker:
        logger.debug("Split refused: phrase is a marker", extra={"phrase_id": phrase_id})
        return document
    if char_offset <= 0 or char_offset >= len(phrase.text):
        logger.debug(
            "Split refused: offset outside phrase",
            extra={"phrase_id": phrase_id, "offset": char_offset},
        )
        return document
    if len(document.phrases_in_line(phrase.line_index)) >= max_phrases_per_line:
        logger.debug(
            "Split refused: line is full",
            extra={"line_index": phrase.line_index, "limit": max_phrases_per_line},
        )
        return document

    ids = resolve_id_generator(id_generator)
    left = phrase.model_copy(update={"text": phrase.text[:char_offset]})
    right = Phrase(
        id=ids.next_id(),
        line_index=phrase.line_index,
        order=phrase.order + 1,
        text=phrase.text[char_offset:],
    )

    phrases = [*document.phrases[:index], left, right, *document.phrases[index + 1 :]]
    return document.evolve(phrases=renumber(phrases))


def merge_adjacent(
    document: Document,
    left_phrase_id: str,
    right_phrase_id: str,
) -> MergeResult | None:
    """Merge a phrase with the phrase directly after it on the same line.

    The left phrase survives with the joined text and tokens. Marks and the
    take selection of the right phrase are discarded; callers that want to
    warn about that should check ``has_annotation_data`` first.

    Returns:
        MergeResult, or None unless right directly follows left, both are
        lyric phrases and they share a line
    """
    left_index = document.index_of(left_phrase_id)
    right_index = document.index_of(right_phrase_id)
    if left_index is None or right_index is None or right_index != left_index + 1:
        logger.debug(
            "Merge refused: phrases are not adjacent",
            extra={"left": left_phrase_id, "right": right_phrase_id},
        )
        return None

    left = document.phrases[left_index]
    right = document.phrases[right_index]
    if left.is_marker or right.is_marker or left.line_index != right.line_index:
        logger.debug(
            "Merge refused: phrases are not on the same lyric line",
            extra={"left": left_phrase_id, "right": right_phrase_id},
        )
        return None

    merged = left.model_copy(
        update={"text": left.text + right.text, "tokens": left.tokens + right.tokens}
    )
    phrases = [*document.phrases[:left_index], merged, *document.phrases[right_index + 1 :]]
    result = purge_annotations(document, [right.id]).evolve(phrases=renumber(phrases))
    return MergeResult(document=result, merged_phrase_id=left.id)


def remove_line(document: Document, line_index: int) -> Document:
    """Delete every lyric phrase of a line along with its annotations.

    Markers are kept where they are; line_index values of other lines are
    left untouched.

    Returns:
        The new document, or the input when the line has no lyric phrases
    """
    doomed = {p.id for p in document.phrases_in_line(line_index)}
    if not doomed:
        logger.debug("Remove refused: no such line", extra={"line_index": line_index})
        return document

    phrases = [p for p in document.phrases if p.id not in doomed]
    return purge_annotations(document, doomed).evolve(phrases=renumber(phrases))


def insert_marker_between_lines(
    document: Document,
    after_line_index: int,
    *,
    text: str = "",
    id_generator: IdGenerator | None = None,
) -> InsertMarkerResult | None:
    """Insert an empty rehearsal marker after a line.

    Args:
        document: Source document
        after_line_index: Line the marker follows; -1 places it before the
            first line
        text: Initial marker label
        id_generator: Source of the marker id

    Returns:
        InsertMarkerResult, or None when the gap already holds a marker or
        the line does not exist
    """
    if markers_between(document, after_line_index):
        logger.debug("Marker insert refused: slot occupied", extra={"after_line": after_line_index})
        return None

    position = marker_insertion_order(document, after_line_index)
    if position is None:
        logger.debug("Marker insert refused: no such line", extra={"after_line": after_line_index})
        return None

    ids = resolve_id_generator(id_generator)
    marker = Phrase(
        id=ids.next_id(),
        line_index=after_line_index + 1,
        order=position,
        text=text,
        is_marker=True,
    )
    phrases = [*document.phrases[:position], marker, *document.phrases[position:]]
    return InsertMarkerResult(document=document.evolve(phrases=renumber(phrases)), marker_id=marker.id)


def _replace_text(document: Document, phrase_id: str, text: str, want_marker: bool) -> Document:
    index = document.index_of(phrase_id)
    if index is None or document.phrases[index].is_marker != want_marker:
        return document
    phrases = list(document.phrases)
    phrases[index] = phrases[index].model_copy(update={"text": text})
    return document.evolve(phrases=phrases)


def update_phrase_text(document: Document, phrase_id: str, text: str) -> Document:
    """Correct the text of a lyric phrase; its tokens are kept as they are."""
    return _replace_text(document, phrase_id, text, want_marker=False)


def update_marker_text(document: Document, marker_id: str, text: str) -> Document:
    """Change the label of a rehearsal marker."""
    return _replace_text(document, marker_id, text, want_marker=True)


def delete_marker(document: Document, marker_id: str) -> Document:
    """Remove a rehearsal marker; lyric phrases are not affected."""
    phrase = document.get_phrase(marker_id)
    if phrase is None or not phrase.is_marker:
        return document
    phrases = [p for p in document.phrases if p.id != marker_id]
    return purge_annotations(document, [marker_id]).evolve(phrases=renumber(phrases))
