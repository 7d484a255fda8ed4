"""Shared test helpers: token factory, fake tokenizers and document builders."""

import pytest

from vocal_phrases.errors import TokenizationError
from vocal_phrases.ids import SequentialIdGenerator
from vocal_phrases.models.document import Document
from vocal_phrases.models.phrase import Phrase
from vocal_phrases.models.token import Token
from vocal_phrases.tokenizer.base import Tokenizer


def tok(surface, pos, detail1="*", detail2="*"):
    """Build a token with IPADIC-style tags."""
    return Token(surface_form=surface, pos=pos, pos_detail1=detail1, pos_detail2=detail2)


def space(surface=" "):
    return tok(surface, "記号", "空白")


class FakeTokenizer(Tokenizer):
    """Tokenizer answering from a line -> tokens dictionary."""

    def __init__(self, lines=None):
        self.lines = dict(lines or {})
        self.calls = []

    @property
    def name(self):
        return "fake"

    async def tokenize(self, line):
        self.calls.append(line)
        if line in self.lines:
            return list(self.lines[line])
        # Unknown lines come back as a single noun.
        return [tok(line, "名詞", "一般")]


class FailingTokenizer(Tokenizer):
    """Tokenizer that always fails, optionally with a non-tokenizer error."""

    def __init__(self, error=None):
        self.error = error

    @property
    def name(self):
        return "failing"

    async def tokenize(self, line):
        if self.error is not None:
            raise self.error
        raise TokenizationError("dictionary not loaded", context={"tokenizer": self.name})


SCENARIO_A_TOKENS = {
    "これはテスト": [
        tok("これ", "名詞", "代名詞"),
        tok("は", "助詞", "係助詞"),
        tok("テスト", "名詞", "サ変接続"),
    ],
    "歌詞です": [
        tok("歌詞", "名詞", "一般"),
        tok("です", "助動詞"),
    ],
}


def build_document(*lines):
    """Build a consistent document by hand.

    Each argument is a list of phrase texts for one line, or a string
    starting with "#" for a marker. Ids are "p<order>".
    """
    phrases = []
    line_index = 0
    for line in lines:
        order = len(phrases)
        if isinstance(line, str) and line.startswith("#"):
            phrases.append(
                Phrase(id=f"p{order}", line_index=line_index, order=order, text=line[1:], is_marker=True)
            )
        else:
            for text in line:
                order = len(phrases)
                phrases.append(Phrase(id=f"p{order}", line_index=line_index, order=order, text=text))
        line_index += 1
    return Document(phrases=phrases)


def texts(document):
    return [p.text for p in document.phrases]


@pytest.fixture
def ids():
    return SequentialIdGenerator("t")


@pytest.fixture
def scenario_tokenizer():
    return FakeTokenizer(SCENARIO_A_TOKENS)
