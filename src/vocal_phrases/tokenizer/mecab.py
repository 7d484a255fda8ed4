"""MeCab tokenizer backend.

Uses fugashi with the IPADIC dictionary, whose tag set the combine rules
are written against. The tagger is created on first use.

MeCab does not emit tokens for spaces between words; fugashi exposes the
skipped text as ``white_space`` and it is turned back into 記号/空白 tokens
here, matching what kuromoji-style analysers produce.
"""

from __future__ import annotations

from typing import Any, Sequence

from vocal_phrases.errors import TokenizationError, wrap_tokenizer_error
from vocal_phrases.logging import get_logger
from vocal_phrases.models.token import SYMBOL_POS, WHITESPACE_DETAIL, Token
from vocal_phrases.tokenizer.base import Tokenizer

logger = get_logger(__name__)

# IPADIC feature columns
_POS, _DETAIL1, _DETAIL2, _DETAIL3 = 0, 1, 2, 3
_BASE_FORM, _READING, _PRONUNCIATION = 6, 7, 8


def _feature(feature: Sequence[str], index: int, default: str = "") -> str:
    if index < len(feature) and feature[index] is not None:
        return feature[index]
    return default


def node_to_token(surface: str, feature: Sequence[str]) -> Token:
    """Convert a MeCab node (surface + IPADIC feature row) to a Token."""
    return Token(
        surface_form=surface,
        pos=_feature(feature, _POS, "*"),
        pos_detail1=_feature(feature, _DETAIL1, "*"),
        pos_detail2=_feature(feature, _DETAIL2, "*"),
        pos_detail3=_feature(feature, _DETAIL3, "*"),
        base_form=_feature(feature, _BASE_FORM, surface),
        reading=_feature(feature, _READING),
        pronunciation=_feature(feature, _PRONUNCIATION),
    )


def whitespace_token(text: str) -> Token:
    """Token standing for a run of spaces MeCab skipped."""
    return Token(
        surface_form=text,
        pos=SYMBOL_POS,
        pos_detail1=WHITESPACE_DETAIL,
        base_form=text,
    )


class MecabTokenizer(Tokenizer):
    """Tokenizer backed by fugashi + ipadic."""

    def __init__(self, mecab_args: str | None = None):
        """Initialize the tokenizer.

        Args:
            mecab_args: Extra MeCab arguments; defaults to the ipadic
                package's dictionary arguments
        """
        self.mecab_args = mecab_args
        self._tagger: Any = None

    @property
    def name(self) -> str:
        return "mecab"

    def is_available(self) -> bool:
        try:
            import fugashi  # noqa: F401
            import ipadic  # noqa: F401
        except ImportError:
            return False
        return True

    def _get_tagger(self) -> Any:
        """Create the MeCab tagger on first use.

        Raises:
            TokenizationError: If fugashi/ipadic are missing or the
                dictionary cannot be loaded
        """
        if self._tagger is not None:
            return self._tagger

        try:
            import fugashi
            import ipadic
        except ImportError as e:
            raise TokenizationError(
                "fugashi and ipadic are required for the MeCab tokenizer. "
                "Install with: pip install 'vocal-phrases[mecab]'",
                context={"tokenizer": self.name},
            ) from e

        args = self.mecab_args if self.mecab_args is not None else ipadic.MECAB_ARGS
        try:
            self._tagger = fugashi.GenericTagger(args)
        except RuntimeError as e:
            raise wrap_tokenizer_error(e, self.name) from e

        logger.debug("MeCab tagger loaded", extra={"mecab_args": args})
        return self._tagger

    async def tokenize(self, line: str) -> list[Token]:
        tagger = self._get_tagger()
        try:
            nodes = tagger(line)
        except Exception as e:
            raise wrap_tokenizer_error(e, self.name, line) from e

        tokens: list[Token] = []
        for node in nodes:
            gap = getattr(node, "white_space", "")
            if gap:
                tokens.append(whitespace_token(gap))
            tokens.append(node_to_token(node.surface, tuple(node.feature)))
        return tokens
