"""Data models for vocal-phrases.

This module provides Pydantic models for tokens, phrases, takes, marks and
the document that ties them together.
"""

from __future__ import annotations

from vocal_phrases.models.document import Document
from vocal_phrases.models.phrase import Phrase
from vocal_phrases.models.take import Mark, Take
from vocal_phrases.models.token import Token

__all__ = [
    "Document",
    "Phrase",
    "Mark",
    "Take",
    "Token",
]
