"""Take and mark models.

Takes are recording attempts; marks are the per-(phrase, take) ratings and
memos entered while listening back. Both reference phrases by id only.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class Take(BaseModel):
    """A recording attempt shown as one rating column."""

    model_config = ConfigDict(frozen=True)

    id: str
    order: int  # 1..n
    label: str
    color: str  # Hex colour for the column header


class Mark(BaseModel):
    """Rating and memo for one phrase in one take."""

    model_config = ConfigDict(frozen=True)

    id: str
    phrase_id: str
    take_id: str
    mark_value: str | None = None  # Single symbol such as ◎ / 〇 / △
    memo: str | None = None
    updated_at: datetime = Field(default_factory=datetime.now)

    @property
    def has_data(self) -> bool:
        """True if the mark carries a rating or a memo."""
        return bool(self.mark_value) or bool(self.memo)
