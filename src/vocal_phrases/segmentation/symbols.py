"""Punctuation attachment pass.

Fuses punctuation tokens onto a neighbouring word so that a bracket or a
comma never becomes a phrase of its own:

- Punctuation after a word is appended to that word.
- Punctuation after a whitespace run absorbs the run into a single 記号
  token, which the grouping rules then fuse onto the preceding word.
- Punctuation at the start of a line is held back and prepended to the
  first word that follows it.
- Punctuation that never finds a word (a line made only of symbols) is
  kept as one trailing token so no text is lost.

Whitespace runs are left alone; the grouping rules decide where they go.
"""

from __future__ import annotations

import unicodedata

from vocal_phrases.models.token import SYMBOL_POS, Token


def is_punctuation_text(text: str) -> bool:
    """True if every character is Unicode punctuation or a symbol."""
    if not text or text.isspace():
        return False
    return all(unicodedata.category(ch)[0] in ("P", "S") for ch in text)


def is_attachable_punctuation(token: Token) -> bool:
    """Decide whether a token should be fused onto a neighbour.

    Matches 記号 tokens other than whitespace, plus tokens of any category
    whose surface is made only of punctuation characters.
    """
    if not token.surface_form or token.is_whitespace:
        return False
    return token.is_symbol or is_punctuation_text(token.surface_form)


def attach_symbols(tokens: list[Token]) -> list[Token]:
    """Fold punctuation tokens into their neighbours.

    Args:
        tokens: Tokens of one line, in reading order

    Returns:
        New token list without standalone punctuation, except a trailing
        token holding punctuation that had no word to attach to
    """
    result: list[Token] = []
    pending = ""

    for token in tokens:
        if is_attachable_punctuation(token):
            if result and result[-1].is_whitespace:
                # The gap and the punctuation become one symbol token so the
                # grouping rules still fuse it onto the word before the gap.
                gap = result[-1].surface_form
                result[-1] = Token(surface_form=gap + token.surface_form, pos=SYMBOL_POS, pos_detail1="一般")
            elif result:
                previous = result[-1]
                result[-1] = previous.with_surface(previous.surface_form + token.surface_form)
            else:
                pending += token.surface_form
            continue

        if pending:
            if token.is_whitespace:
                # Keep reading order: the gap travels with the held punctuation.
                pending += token.surface_form
                continue
            token = token.with_surface(pending + token.surface_form)
            pending = ""
        result.append(token)

    if pending:
        result.append(Token(surface_form=pending, pos=SYMBOL_POS, pos_detail1="一般"))

    return result
