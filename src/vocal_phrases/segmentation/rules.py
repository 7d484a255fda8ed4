"""Combine rules for phrase grouping.

Phrase boundaries should fall where a singer would naturally breathe or
re-attack, which follows morphological attachment: particles, auxiliaries
and copulas cling to their host word. Each rule below pairs a pattern for
the current token with a pattern for the next token; the rules are checked
in order and the first match means "same phrase". No match means the
current phrase ends here.

Tags follow the IPADIC tag set used by MeCab/kuromoji.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from vocal_phrases.models.token import Token

# Parts of speech
NOUN = "名詞"
PARTICLE = "助詞"
PREFIX = "接頭詞"
VERB = "動詞"
AUXILIARY = "助動詞"
ADJECTIVE = "形容詞"
ADVERB = "副詞"
SYMBOL = "記号"

# pos_detail1 refinements
ADNOMINAL = "連体化"
CASE = "格助詞"
BINDING = "係助詞"
ADVERBIAL = "副助詞"
PARALLEL = "並立助詞"
FINAL = "終助詞"
CONJUNCTIVE = "接続助詞"
NOUN_PREFIX = "名詞接続"
NUMERAL = "数"
SUFFIX = "接尾"
COUNTER = "助数詞"
ADJECTIVAL_STEM = "形容動詞語幹"
DEPENDENT = "非自立"
SPECIAL = "特殊"
VERBAL_NOUN = "サ変接続"
WHITESPACE = "空白"

_WHITESPACE_RUN = re.compile(r"^\s+$")


@dataclass(frozen=True)
class TokenPattern:
    """Predicate over a single token.

    Unset fields match anything.

    Attributes:
        pos: Required primary category
        details: Allowed pos_detail1 values
        exclude_details: Forbidden pos_detail1 values
        surfaces: Allowed surface forms
        surface_regex: Pattern the whole surface must match
    """

    pos: str | None = None
    details: frozenset[str] | None = None
    exclude_details: frozenset[str] | None = None
    surfaces: frozenset[str] | None = None
    surface_regex: re.Pattern[str] | None = None

    def matches(self, token: Token) -> bool:
        if self.pos is not None and token.pos != self.pos:
            return False
        if self.details is not None and token.pos_detail1 not in self.details:
            return False
        if self.exclude_details is not None and token.pos_detail1 in self.exclude_details:
            return False
        if self.surfaces is not None and token.surface_form not in self.surfaces:
            return False
        if self.surface_regex is not None and not self.surface_regex.match(token.surface_form):
            return False
        return True

    def describe(self) -> str:
        """Short human-readable form, e.g. ``助詞(格助詞/係助詞)``."""
        text = self.pos or "*"
        if self.details:
            text += "(" + "/".join(sorted(self.details)) + ")"
        if self.exclude_details:
            text += "(not " + "/".join(sorted(self.exclude_details)) + ")"
        if self.surfaces:
            text += "[" + "/".join(sorted(self.surfaces)) + "]"
        return text


ANY = TokenPattern()


def _pos(pos: str, *details: str) -> TokenPattern:
    return TokenPattern(pos=pos, details=frozenset(details) if details else None)


@dataclass(frozen=True)
class CombineRule:
    """Two adjacent tokens belong together when both patterns match."""

    name: str
    current: TokenPattern
    next: TokenPattern
    example: str = ""

    def applies(self, current: Token, next_token: Token) -> bool:
        return self.current.matches(current) and self.next.matches(next_token)


COMBINE_RULES: tuple[CombineRule, ...] = (
    CombineRule("noun+adnominal-particle", _pos(NOUN), _pos(PARTICLE, ADNOMINAL), "のっぽ+の"),
    CombineRule(
        "noun+no",
        _pos(NOUN),
        TokenPattern(pos=PARTICLE, surfaces=frozenset({"の"})),
        "おじいさん+の",
    ),
    CombineRule("prefix+noun", _pos(PREFIX, NOUN_PREFIX), _pos(NOUN), "古+時計"),
    CombineRule("numeral+counter", _pos(NOUN, NUMERAL), _pos(NOUN, SUFFIX, COUNTER), "百+年"),
    CombineRule("adjectival-stem+auxiliary", _pos(NOUN, ADJECTIVAL_STEM), _pos(AUXILIARY), "きれい+な"),
    CombineRule("suffix-noun+auxiliary", _pos(NOUN, SUFFIX), _pos(AUXILIARY), "おぼろげ+な"),
    CombineRule("adjective+final-particle", _pos(ADJECTIVE), _pos(PARTICLE, FINAL), "いい+よ"),
    CombineRule(
        "adverb+particle",
        _pos(ADVERB),
        _pos(PARTICLE, CASE, BINDING, ADVERBIAL),
        "これから+も",
    ),
    CombineRule(
        "verb+conjunctive-particle",
        _pos(VERB),
        _pos(PARTICLE, CONJUNCTIVE, ADNOMINAL),
        "動い+て",
    ),
    CombineRule(
        "conjunctive-particle+dependent-verb",
        _pos(PARTICLE, CONJUNCTIVE),
        _pos(VERB, DEPENDENT),
        "て+い",
    ),
    CombineRule("dependent-verb+auxiliary", _pos(VERB, DEPENDENT), _pos(AUXILIARY), "い+た"),
    CombineRule("verb+auxiliary", _pos(VERB), _pos(AUXILIARY), "生まれ+た"),
    CombineRule("verb+suffix-verb", _pos(VERB), _pos(VERB, SUFFIX), "許さ+れ"),
    CombineRule("suffix-verb+auxiliary", _pos(VERB, SUFFIX), _pos(AUXILIARY), "許され+た"),
    CombineRule(
        "auxiliary+particle",
        _pos(AUXILIARY),
        _pos(PARTICLE, CASE, CONJUNCTIVE, FINAL),
        "ず+に",
    ),
    CombineRule("verb+dependent-verb", _pos(VERB), _pos(VERB, DEPENDENT), "知っ+てる"),
    CombineRule("auxiliary+dependent-noun", _pos(AUXILIARY), _pos(NOUN, DEPENDENT), "きた+の"),
    CombineRule(
        "dependent-noun+particle",
        _pos(NOUN, DEPENDENT),
        _pos(PARTICLE, CASE, BINDING, FINAL),
        "の+を",
    ),
    CombineRule(
        "noun+particle",
        _pos(NOUN),
        _pos(PARTICLE, CASE, BINDING, PARALLEL, ADVERBIAL, FINAL),
        "ベル+が",
    ),
    CombineRule("noun+suffix-noun", _pos(NOUN), _pos(NOUN, SUFFIX, SPECIAL), "時計+さ"),
    CombineRule("prefix+verbal-noun", _pos(PREFIX), _pos(NOUN, VERBAL_NOUN), "ご+自慢"),
    CombineRule("auxiliary+auxiliary", _pos(AUXILIARY), _pos(AUXILIARY), "た+です"),
    CombineRule(
        "any+whitespace",
        ANY,
        TokenPattern(pos=SYMBOL, details=frozenset({WHITESPACE}), surface_regex=_WHITESPACE_RUN),
        "チク+　",
    ),
    CombineRule(
        "any+symbol",
        ANY,
        TokenPattern(pos=SYMBOL, exclude_details=frozenset({WHITESPACE})),
        "夢+」",
    ),
)


def matching_rule(
    current: Token,
    next_token: Token | None,
    rules: tuple[CombineRule, ...] = COMBINE_RULES,
) -> CombineRule | None:
    """Return the first rule that joins the two tokens, if any."""
    if next_token is None:
        return None
    for rule in rules:
        if rule.applies(current, next_token):
            return rule
    return None


def should_combine(
    current: Token,
    next_token: Token | None,
    rules: tuple[CombineRule, ...] = COMBINE_RULES,
) -> bool:
    """Decide whether next_token continues the phrase that current is in."""
    return matching_rule(current, next_token, rules) is not None
