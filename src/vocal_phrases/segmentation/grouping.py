"""Phrase grouping for a single lyric line.

Runs the punctuation pass, folds the tokens left to right with the combine
rules, applies the per-line cap and turns each token group into a Phrase.
"""

from __future__ import annotations

from dataclasses import dataclass

from vocal_phrases.ids import IdGenerator, resolve_id_generator
from vocal_phrases.models.phrase import Phrase
from vocal_phrases.models.token import Token
from vocal_phrases.segmentation.rules import COMBINE_RULES, CombineRule, should_combine
from vocal_phrases.segmentation.symbols import attach_symbols

DEFAULT_MAX_PHRASES_PER_LINE = 10


@dataclass
class LinePhrases:
    """Phrases built for one line and the next free order value."""

    phrases: list[Phrase]
    next_order: int


def group_tokens(
    tokens: list[Token],
    rules: tuple[CombineRule, ...] = COMBINE_RULES,
) -> list[list[Token]]:
    """Fold a token list into phrase-sized groups.

    Args:
        tokens: Normalized tokens of one line
        rules: Combine rules in priority order

    Returns:
        Token groups in reading order; empty input gives no groups
    """
    groups: list[list[Token]] = []
    buffer: list[Token] = []

    for i, token in enumerate(tokens):
        buffer.append(token)
        next_token = tokens[i + 1] if i + 1 < len(tokens) else None
        if not should_combine(token, next_token, rules):
            groups.append(buffer)
            buffer = []

    if buffer:
        groups.append(buffer)

    return groups


def cap_groups(groups: list[list[Token]], max_phrases: int) -> list[list[Token]]:
    """Collapse everything past the cap into the last allowed group.

    The first ``max_phrases - 1`` groups are kept as they are; the rest are
    concatenated into one final group.
    """
    if max_phrases < 1:
        raise ValueError("max_phrases must be at least 1")
    if len(groups) <= max_phrases:
        return groups

    keep = max_phrases - 1
    tail = [token for group in groups[keep:] for token in group]
    return groups[:keep] + [tail]


def build_line_phrases(
    tokens: list[Token],
    line_index: int,
    start_order: int,
    max_phrases: int = DEFAULT_MAX_PHRASES_PER_LINE,
    id_generator: IdGenerator | None = None,
    rules: tuple[CombineRule, ...] = COMBINE_RULES,
) -> LinePhrases:
    """Build the phrases of one line from its raw tokens.

    Args:
        tokens: Tokenizer output for the line
        line_index: Source line index
        start_order: Order value of the first phrase
        max_phrases: Per-line cap
        id_generator: Source of phrase ids
        rules: Combine rules in priority order

    Returns:
        LinePhrases with the phrases and the next free order value
    """
    ids = resolve_id_generator(id_generator)
    groups = cap_groups(group_tokens(attach_symbols(tokens), rules), max_phrases)

    phrases = []
    order = start_order
    for group in groups:
        phrases.append(
            Phrase(
                id=ids.next_id(),
                line_index=line_index,
                order=order,
                text="".join(token.surface_form for token in group),
                tokens=tuple(group),
            )
        )
        order += 1

    return LinePhrases(phrases=phrases, next_order=order)
