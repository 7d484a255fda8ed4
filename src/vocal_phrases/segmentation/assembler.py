"""Document assembly from raw lyric text.

Walks the lyrics line by line with one global order counter:

- blank line   -> one empty placeholder phrase (keeps the spacing)
- 【Label】 line -> one rehearsal marker
- other lines  -> tokenizer -> punctuation pass -> grouping -> cap

Lines are tokenized one after another so the order counter stays
deterministic. If the tokenizer fails anywhere, the whole document is
rebuilt with plain whitespace segmentation instead; assembly itself never
raises.
"""

from __future__ import annotations

import re
import time

from vocal_phrases.config import SegmentationConfig
from vocal_phrases.errors import TokenizationError, wrap_tokenizer_error
from vocal_phrases.ids import IdGenerator, resolve_id_generator
from vocal_phrases.logging import (
    get_logger,
    log_operation_complete,
    log_operation_failed,
    log_operation_start,
)
from vocal_phrases.models.document import Document
from vocal_phrases.models.phrase import Phrase
from vocal_phrases.models.token import Token
from vocal_phrases.segmentation.grouping import build_line_phrases
from vocal_phrases.segmentation.markers import detect_rehearsal_mark
from vocal_phrases.tokenizer.base import Tokenizer

logger = get_logger(__name__)

_WORD_RUN = re.compile(r"\S+\s*")


def split_lines(raw_text: str) -> list[str]:
    """Split lyrics into lines, keeping empty ones (a trailing one too)."""
    return raw_text.replace("\r\n", "\n").split("\n")


class DocumentAssembler:
    """Builds a Document from raw lyrics.

    Example usage:
        assembler = DocumentAssembler(MecabTokenizer())
        document = asyncio.run(assembler.assemble(lyrics))
    """

    def __init__(
        self,
        tokenizer: Tokenizer | None = None,
        config: SegmentationConfig | None = None,
        id_generator: IdGenerator | None = None,
    ):
        """Initialize the assembler.

        Args:
            tokenizer: Tokenizer backend; None means whitespace segmentation
            config: Segmentation settings
            id_generator: Source of phrase ids
        """
        self.tokenizer = tokenizer
        self.config = config or SegmentationConfig()
        self.id_generator = resolve_id_generator(id_generator)

    async def assemble(self, raw_text: str) -> Document:
        """Assemble the phrase sequence for a whole song.

        Args:
            raw_text: Lyrics, one sung line per text line

        Returns:
            Document whose phrase orders are 0..N-1
        """
        if self.tokenizer is None or self.config.tokenizer == "whitespace":
            return self.segment_by_whitespace(raw_text)

        tokenizer = self.tokenizer
        run_logger = logger.with_context(tokenizer=tokenizer.name)
        started = time.perf_counter()
        log_operation_start(run_logger, "assemble")
        try:
            document = await self._assemble_with_tokenizer(tokenizer, raw_text)
        except TokenizationError as e:
            log_operation_failed(run_logger, "assemble", e, line_text=e.line_text)
            run_logger.warning("Falling back to whitespace segmentation")
            return self.segment_by_whitespace(raw_text)

        log_operation_complete(
            run_logger,
            "assemble",
            duration=time.perf_counter() - started,
            phrases=len(document.phrases),
        )
        return document

    async def _assemble_with_tokenizer(self, tokenizer: Tokenizer, raw_text: str) -> Document:
        phrases: list[Phrase] = []
        order = 0

        for line_index, raw_line in enumerate(split_lines(raw_text)):
            line = raw_line.strip()
            special = self._special_line(line, line_index, order)
            if special is not None:
                phrases.append(special)
                order += 1
                continue

            tokens = await self._tokenize_line(tokenizer, line)
            if not tokens:
                # Keep the line addressable even if the analyser saw nothing.
                phrases.append(self._phrase(line_index, order, line))
                order += 1
                continue

            built = build_line_phrases(
                tokens,
                line_index,
                order,
                max_phrases=self.config.max_phrases_per_line,
                id_generator=self.id_generator,
            )
            phrases.extend(built.phrases)
            order = built.next_order

        return Document(phrases=phrases)

    async def _tokenize_line(self, tokenizer: Tokenizer, line: str) -> list[Token]:
        try:
            return await tokenizer.tokenize(line)
        except TokenizationError:
            raise
        except Exception as e:
            raise wrap_tokenizer_error(e, tokenizer.name, line) from e

    def segment_by_whitespace(self, raw_text: str) -> Document:
        """Segment lyrics without a tokenizer.

        One phrase per whitespace-delimited run; the spaces after a run stay
        with it so each line still reads back exactly. Blank lines, marker
        lines and the per-line cap are handled as in full assembly.
        """
        phrases: list[Phrase] = []
        order = 0
        cap = self.config.max_phrases_per_line

        for line_index, raw_line in enumerate(split_lines(raw_text)):
            line = raw_line.strip()
            special = self._special_line(line, line_index, order)
            if special is not None:
                phrases.append(special)
                order += 1
                continue

            runs = _WORD_RUN.findall(line)
            if len(runs) > cap:
                runs = runs[: cap - 1] + ["".join(runs[cap - 1 :])]
            for run in runs:
                phrases.append(self._phrase(line_index, order, run))
                order += 1

        logger.debug("Whitespace segmentation complete", extra={"phrases": len(phrases)})
        return Document(phrases=phrases)

    def _special_line(self, line: str, line_index: int, order: int) -> Phrase | None:
        """Placeholder or marker phrase for lines that skip tokenization."""
        if not line:
            return self._phrase(line_index, order, "")

        label = detect_rehearsal_mark(
            line,
            self.config.marker_open,
            self.config.marker_close,
        )
        if label is not None:
            return self._phrase(line_index, order, label, is_marker=True)
        return None

    def _phrase(self, line_index: int, order: int, text: str, is_marker: bool = False) -> Phrase:
        return Phrase(
            id=self.id_generator.next_id(),
            line_index=line_index,
            order=order,
            text=text,
            is_marker=is_marker,
        )


async def assemble_document(
    raw_text: str,
    tokenizer: Tokenizer | None = None,
    config: SegmentationConfig | None = None,
    id_generator: IdGenerator | None = None,
) -> Document:
    """Assemble a Document, using the MeCab backend unless told otherwise.

    Args:
        raw_text: Lyrics text
        tokenizer: Tokenizer backend; defaults to MecabTokenizer when the
            config asks for "mecab"
        config: Segmentation settings
        id_generator: Source of phrase ids

    Returns:
        Assembled Document (never raises on tokenizer failure)
    """
    config = config or SegmentationConfig()
    if tokenizer is None and config.tokenizer == "mecab":
        from vocal_phrases.tokenizer.mecab import MecabTokenizer

        tokenizer = MecabTokenizer()

    assembler = DocumentAssembler(tokenizer, config, id_generator)
    return await assembler.assemble(raw_text)
