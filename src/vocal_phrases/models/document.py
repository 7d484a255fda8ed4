"""Document model.

A document is the ordered phrase sequence of one song plus the annotation
data that references phrases by id (takes, marks, take selections).
Documents are immutable: editing functions build new ones.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

from vocal_phrases.models.phrase import Phrase
from vocal_phrases.models.take import Mark, Take


class Document(BaseModel):
    """Ordered phrases and the annotations keyed on them.

    The id -> position lookup is rebuilt whenever a Document is
    constructed, so always derive new documents through ``evolve`` rather
    than ``model_copy``.
    """

    model_config = ConfigDict(frozen=True)

    phrases: tuple[Phrase, ...] = Field(default_factory=tuple)
    takes: tuple[Take, ...] = Field(default_factory=tuple)
    marks: tuple[Mark, ...] = Field(default_factory=tuple)
    selected_take_by_phrase_id: dict[str, str] = Field(default_factory=dict)

    _index: dict[str, int] = PrivateAttr(default_factory=dict)

    def model_post_init(self, __context: Any) -> None:
        self._index = {phrase.id: i for i, phrase in enumerate(self.phrases)}

    def __len__(self) -> int:
        return len(self.phrases)

    def evolve(self, **changes: Any) -> "Document":
        """Return a new document with some fields replaced."""
        data = {
            "phrases": self.phrases,
            "takes": self.takes,
            "marks": self.marks,
            "selected_take_by_phrase_id": self.selected_take_by_phrase_id,
        }
        data.update(changes)
        return Document(**data)

    def index_of(self, phrase_id: str) -> int | None:
        """Array position of a phrase, or None if the id is unknown."""
        return self._index.get(phrase_id)

    def contains(self, phrase_id: str) -> bool:
        return phrase_id in self._index

    def get_phrase(self, phrase_id: str) -> Phrase | None:
        index = self._index.get(phrase_id)
        if index is None:
            return None
        return self.phrases[index]

    @property
    def lyric_phrases(self) -> list[Phrase]:
        """All non-marker phrases in order."""
        return [p for p in self.phrases if not p.is_marker]

    @property
    def markers(self) -> list[Phrase]:
        """All rehearsal markers in order."""
        return [p for p in self.phrases if p.is_marker]

    def phrases_in_line(self, line_index: int) -> list[Phrase]:
        """Lyric phrases of one source line, in order."""
        return [p for p in self.phrases if not p.is_marker and p.line_index == line_index]

    def invariant_violations(self) -> list[str]:
        """Check the structural invariants.

        Returns:
            One message per violation; empty when the document is consistent
        """
        problems: list[str] = []

        if len(self._index) != len(self.phrases):
            problems.append("duplicate phrase ids")

        for i, phrase in enumerate(self.phrases):
            if phrase.order != i:
                problems.append(f"phrase {phrase.id} at position {i} has order {phrase.order}")
            if phrase.is_marker and phrase.tokens:
                problems.append(f"marker {phrase.id} carries tokens")

        # Lyric phrases of a line must form one contiguous run.
        spans: dict[int, tuple[int, int]] = {}
        for i, phrase in enumerate(self.phrases):
            if phrase.is_marker:
                continue
            first, _ = spans.get(phrase.line_index, (i, i))
            spans[phrase.line_index] = (first, i)
        for line_index, (first, last) in spans.items():
            for phrase in self.phrases[first : last + 1]:
                if phrase.is_marker or phrase.line_index != line_index:
                    problems.append(f"line {line_index} is interrupted by phrase {phrase.id}")
                    break

        take_ids = {take.id for take in self.takes}
        for mark in self.marks:
            if mark.phrase_id not in self._index:
                problems.append(f"mark {mark.id} references missing phrase {mark.phrase_id}")
            if take_ids and mark.take_id not in take_ids:
                problems.append(f"mark {mark.id} references missing take {mark.take_id}")
        for phrase_id in self.selected_take_by_phrase_id:
            if phrase_id not in self._index:
                problems.append(f"take selection references missing phrase {phrase_id}")

        return problems
