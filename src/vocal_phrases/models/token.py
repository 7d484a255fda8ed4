"""Morphological token model.

Tokens come from the external tokenizer and carry IPADIC part-of-speech
tags (e.g. 名詞, 助詞, 記号) with up to three refinements.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

WHITESPACE_DETAIL = "空白"
SYMBOL_POS = "記号"


class Token(BaseModel):
    """A single morpheme produced by the tokenizer."""

    model_config = ConfigDict(frozen=True)

    surface_form: str
    pos: str  # Primary category, e.g. 名詞
    pos_detail1: str = "*"
    pos_detail2: str = "*"
    pos_detail3: str = "*"
    base_form: str = "*"
    reading: str = ""
    pronunciation: str = ""

    @property
    def is_whitespace(self) -> bool:
        """True if the surface is a run of spaces/tabs (full or half width)."""
        return bool(self.surface_form) and self.surface_form.isspace()

    @property
    def is_symbol(self) -> bool:
        """True for 記号 tokens that are not whitespace runs."""
        return self.pos == SYMBOL_POS and self.pos_detail1 != WHITESPACE_DETAIL

    def with_surface(self, surface_form: str) -> "Token":
        """Return a copy of this token with a different surface text."""
        return self.model_copy(update={"surface_form": surface_form})
