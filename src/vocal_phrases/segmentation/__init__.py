"""Lyric segmentation.

Turns raw lyrics into an ordered phrase sequence: punctuation attachment,
rule-based grouping, rehearsal-mark detection and document assembly.
"""

from vocal_phrases.segmentation.assembler import (
    DocumentAssembler,
    assemble_document,
    split_lines,
)
from vocal_phrases.segmentation.grouping import (
    LinePhrases,
    build_line_phrases,
    cap_groups,
    group_tokens,
)
from vocal_phrases.segmentation.markers import detect_rehearsal_mark
from vocal_phrases.segmentation.rules import (
    COMBINE_RULES,
    CombineRule,
    TokenPattern,
    matching_rule,
    should_combine,
)
from vocal_phrases.segmentation.symbols import attach_symbols, is_attachable_punctuation

__all__ = [
    "DocumentAssembler",
    "assemble_document",
    "split_lines",
    "LinePhrases",
    "build_line_phrases",
    "cap_groups",
    "group_tokens",
    "detect_rehearsal_mark",
    "COMBINE_RULES",
    "CombineRule",
    "TokenPattern",
    "matching_rule",
    "should_combine",
    "attach_symbols",
    "is_attachable_punctuation",
]
