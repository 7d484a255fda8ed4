"""Tests for split, merge, line removal and marker editing."""

import pytest
from conftest import build_document, texts, tok

from vocal_phrases.annotations import add_take, select_take, set_mark_memo, set_mark_value
from vocal_phrases.editing import (
    delete_marker,
    insert_marker_between_lines,
    merge_adjacent,
    remove_line,
    renumber,
    split_by_offset,
    update_marker_text,
    update_phrase_text,
)
from vocal_phrases.models.document import Document
from vocal_phrases.models.phrase import Phrase
from vocal_phrases.views import markers_between


def id_of(document, text):
    return next(p.id for p in document.phrases if p.text == text)


@pytest.fixture
def two_lines():
    return build_document(["これはテスト"], ["歌詞", "です"])


class TestSplitByOffset:
    """Tests for split_by_offset."""

    def test_split_phrase(self, two_lines, ids):
        """Test splitting これはテスト after three characters."""
        result = split_by_offset(two_lines, id_of(two_lines, "これはテスト"), 3, id_generator=ids)

        assert len(result.phrases) == len(two_lines.phrases) + 1
        assert texts(result)[:2] == ["これは", "テスト"]
        assert result.phrases[0].id == "p0"
        assert result.phrases[1].id == "t-1"
        assert result.phrases[1].line_index == 0
        assert [p.order for p in result.phrases] == list(range(4))
        assert result.invariant_violations() == []

    def test_right_half_has_no_tokens(self, ids):
        phrase = Phrase(
            id="a",
            line_index=0,
            order=0,
            text="歌詞です",
            tokens=(tok("歌詞", "名詞", "一般"), tok("です", "助動詞")),
        )
        result = split_by_offset(Document(phrases=[phrase]), "a", 2, id_generator=ids)

        assert result.phrases[0].tokens == phrase.tokens
        assert result.phrases[1].tokens == ()

    def test_input_untouched(self, two_lines, ids):
        before = texts(two_lines)
        split_by_offset(two_lines, "p0", 3, id_generator=ids)
        assert texts(two_lines) == before

    @pytest.mark.parametrize("offset", [0, -1, 6, 10])
    def test_offset_out_of_range(self, two_lines, offset):
        assert split_by_offset(two_lines, "p0", offset) is two_lines

    def test_unknown_phrase(self, two_lines):
        assert split_by_offset(two_lines, "missing", 1) is two_lines

    def test_marker_cannot_be_split(self):
        document = build_document("#Intro", ["歌詞"])
        assert split_by_offset(document, "p0", 2) is document

    def test_line_full(self, ids):
        document = build_document([str(i) * 2 for i in range(12)])
        assert split_by_offset(document, "p0", 1, id_generator=ids) is document

    def test_line_below_limit(self, ids):
        document = build_document([str(i) * 2 for i in range(11)])
        result = split_by_offset(document, "p0", 1, id_generator=ids)
        assert len(result.phrases_in_line(0)) == 12

    def test_custom_limit(self, ids):
        document = build_document(["ab", "cd"])
        assert split_by_offset(document, "p0", 1, max_phrases_per_line=2) is document

    def test_later_phrases_renumbered(self, two_lines, ids):
        result = split_by_offset(two_lines, "p0", 3, id_generator=ids)
        assert result.get_phrase("p2").order == 3


class TestMergeAdjacent:
    """Tests for merge_adjacent."""

    def test_merge_after_split(self, two_lines, ids):
        """Test that merging the split halves restores the text and count."""
        split = split_by_offset(two_lines, "p0", 3, id_generator=ids)
        result = merge_adjacent(split, id_of(split, "これは"), id_of(split, "テスト"))

        assert result is not None
        assert len(result.document.phrases) == len(two_lines.phrases)
        assert result.merged_phrase_id == "p0"
        assert result.document.get_phrase("p0").text == "これはテスト"
        assert result.document.invariant_violations() == []

    def test_round_trip_restores_document(self, ids):
        phrase = Phrase(
            id="a",
            line_index=0,
            order=0,
            text="歌詞です",
            tokens=(tok("歌詞", "名詞", "一般"), tok("です", "助動詞")),
        )
        original = Document(phrases=[phrase, Phrase(id="b", line_index=1, order=1, text="x")])
        split = split_by_offset(original, "a", 2, id_generator=ids)
        result = merge_adjacent(split, "a", split.phrases[1].id)

        assert result.document.phrases == original.phrases

    def test_tokens_concatenated(self):
        a = Phrase(id="a", line_index=0, order=0, text="歌詞", tokens=(tok("歌詞", "名詞", "一般"),))
        b = Phrase(id="b", line_index=0, order=1, text="です", tokens=(tok("です", "助動詞"),))
        result = merge_adjacent(Document(phrases=[a, b]), "a", "b")
        assert [t.surface_form for t in result.document.phrases[0].tokens] == ["歌詞", "です"]

    def test_different_lines_rejected(self, two_lines):
        assert merge_adjacent(two_lines, "p0", "p1") is None

    def test_not_adjacent_rejected(self):
        document = build_document(["a", "b", "c"])
        assert merge_adjacent(document, "p0", "p2") is None

    def test_reversed_order_rejected(self, two_lines):
        assert merge_adjacent(two_lines, "p2", "p1") is None

    def test_unknown_ids_rejected(self, two_lines):
        assert merge_adjacent(two_lines, "p1", "missing") is None
        assert merge_adjacent(two_lines, "missing", "p1") is None

    def test_marker_rejected(self):
        document = build_document(["a"], "#A")
        assert merge_adjacent(document, "p0", "p1") is None

    def test_rejection_is_idempotent(self, two_lines):
        assert merge_adjacent(two_lines, "p0", "p1") is None
        assert merge_adjacent(two_lines, "p0", "p1") is None
        assert texts(two_lines) == ["これはテスト", "歌詞", "です"]

    def test_right_annotations_purged(self, two_lines, ids):
        document = add_take(two_lines, ids)
        take_id = document.takes[0].id
        document = set_mark_value(document, "p2", take_id, "◎", ids)
        document = set_mark_value(document, "p1", take_id, "△", ids)
        document = select_take(document, "p2", take_id)

        result = merge_adjacent(document, "p1", "p2")

        assert [m.phrase_id for m in result.document.marks] == ["p1"]
        assert "p2" not in result.document.selected_take_by_phrase_id
        assert result.document.invariant_violations() == []


class TestRemoveLine:
    """Tests for remove_line."""

    def test_remove_line(self, two_lines):
        result = remove_line(two_lines, 1)

        assert texts(result) == ["これはテスト"]
        assert result.invariant_violations() == []

    def test_markers_survive(self):
        document = build_document(["a"], "#A", ["b", "c"], "#B")
        result = remove_line(document, 2)

        assert texts(result) == ["a", "A", "B"]
        assert [p.order for p in result.phrases] == [0, 1, 2]

    def test_other_line_indices_kept(self):
        document = build_document(["a"], ["b"], ["c"])
        result = remove_line(document, 1)
        assert [p.line_index for p in result.phrases] == [0, 2]

    def test_unknown_line(self, two_lines):
        assert remove_line(two_lines, 7) is two_lines

    def test_annotations_purged(self, two_lines, ids):
        document = add_take(two_lines, ids)
        take_id = document.takes[0].id
        document = set_mark_memo(document, "p1", take_id, "pitch", ids)
        document = select_take(document, "p0", take_id)

        result = remove_line(document, 1)

        assert result.marks == ()
        assert result.selected_take_by_phrase_id == {"p0": take_id}


class TestInsertMarker:
    """Tests for insert_marker_between_lines."""

    def test_insert_before_first_line(self, two_lines, ids):
        result = insert_marker_between_lines(two_lines, -1, id_generator=ids)

        assert result is not None
        marker = result.document.phrases[0]
        assert marker.id == result.marker_id
        assert marker.is_marker
        assert marker.text == ""
        assert marker.order == 0
        assert result.document.invariant_violations() == []

    def test_second_insert_in_same_slot_rejected(self, two_lines, ids):
        first = insert_marker_between_lines(two_lines, -1, id_generator=ids)
        assert insert_marker_between_lines(first.document, -1, id_generator=ids) is None

    def test_insert_between_lines(self, two_lines, ids):
        result = insert_marker_between_lines(two_lines, 0, text="サビ", id_generator=ids)

        assert texts(result.document) == ["これはテスト", "サビ", "歌詞", "です"]
        assert result.document.phrases[1].line_index == 1
        assert markers_between(result.document, 0, 1)[0].id == result.marker_id

    def test_insert_after_last_line(self, two_lines, ids):
        result = insert_marker_between_lines(two_lines, 1, id_generator=ids)
        assert result.document.phrases[-1].id == result.marker_id

    def test_other_slots_stay_free(self, two_lines, ids):
        first = insert_marker_between_lines(two_lines, 0, id_generator=ids)
        assert insert_marker_between_lines(first.document, -1, id_generator=ids) is not None
        assert insert_marker_between_lines(first.document, 1, id_generator=ids) is not None

    def test_unknown_line_rejected(self, two_lines, ids):
        assert insert_marker_between_lines(two_lines, 5, id_generator=ids) is None

    def test_empty_document(self, ids):
        result = insert_marker_between_lines(Document(), -1, id_generator=ids)
        assert texts(result.document) == [""]


class TestTextEdits:
    """Tests for text updates and marker deletion."""

    def test_update_phrase_text(self, two_lines):
        result = update_phrase_text(two_lines, "p1", "カシ")
        assert texts(result) == ["これはテスト", "カシ", "です"]

    def test_update_phrase_text_ignores_markers(self):
        document = build_document("#A")
        assert update_phrase_text(document, "p0", "B") is document

    def test_update_marker_text(self):
        document = build_document("#A", ["x"])
        assert texts(update_marker_text(document, "p0", "Chorus")) == ["Chorus", "x"]

    def test_update_marker_text_ignores_phrases(self, two_lines):
        assert update_marker_text(two_lines, "p0", "x") is two_lines

    def test_delete_marker(self):
        document = build_document(["a"], "#A", ["b"])
        result = delete_marker(document, "p1")

        assert texts(result) == ["a", "b"]
        assert [p.order for p in result.phrases] == [0, 1]

    def test_delete_marker_ignores_phrases(self, two_lines):
        assert delete_marker(two_lines, "p0") is two_lines


class TestRenumber:
    """Tests for renumber."""

    def test_renumber(self):
        phrases = [Phrase(id=x, line_index=0, order=9, text=x) for x in "abc"]
        assert [p.order for p in renumber(phrases)] == [0, 1, 2]

    def test_unchanged_phrases_reused(self):
        phrase = Phrase(id="a", line_index=0, order=0, text="a")
        assert renumber([phrase])[0] is phrase
