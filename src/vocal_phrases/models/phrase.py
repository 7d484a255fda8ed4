"""Phrase model.

A phrase is the unit that receives ratings and take selections. Rehearsal
marks share the same shape with ``is_marker`` set.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from vocal_phrases.models.token import Token


class Phrase(BaseModel):
    """An addressable unit of lyric text, or a rehearsal marker."""

    model_config = ConfigDict(frozen=True)

    id: str
    line_index: int  # Source line (0-based); not used for grouping markers
    order: int  # Global position in the document
    text: str
    tokens: tuple[Token, ...] = Field(default_factory=tuple)
    is_marker: bool = False

    @property
    def is_selectable(self) -> bool:
        """Non-marker phrase with visible text."""
        return not self.is_marker and bool(self.text.strip())

    @property
    def is_blank(self) -> bool:
        """Placeholder emitted for an empty source line."""
        return not self.is_marker and not self.text.strip()

    def with_order(self, order: int) -> "Phrase":
        """Return this phrase at a new position (self if unchanged)."""
        if order == self.order:
            return self
        return self.model_copy(update={"order": order})
