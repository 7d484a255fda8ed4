"""Base class for tokenizer backends.

The assembler only depends on this interface; dictionary loading and
analysis are entirely the backend's business.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from vocal_phrases.models.token import Token


class Tokenizer(ABC):
    """Abstract morphological tokenizer.

    Implementations must be side-effect free from the caller's point of
    view and return the same tokens for the same line. Failures are
    reported as TokenizationError.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the backend name."""
        pass

    @abstractmethod
    async def tokenize(self, line: str) -> list[Token]:
        """Split one line of text into tokens.

        Args:
            line: A single line without line breaks

        Returns:
            Tokens in reading order

        Raises:
            TokenizationError: If the line cannot be analysed
        """
        pass

    def is_available(self) -> bool:
        """Check if the backend can be used.

        Returns:
            True if tokenize is expected to work
        """
        return True
