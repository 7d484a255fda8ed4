"""Tokenizer backends for vocal-phrases.

The document assembler talks to the abstract Tokenizer; MecabTokenizer is
the bundled fugashi/IPADIC implementation.
"""

from vocal_phrases.tokenizer.base import Tokenizer
from vocal_phrases.tokenizer.mecab import MecabTokenizer

__all__ = [
    "Tokenizer",
    "MecabTokenizer",
]
