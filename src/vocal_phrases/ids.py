"""Identifier generation for phrases, marks and takes."""

from __future__ import annotations

from abc import ABC, abstractmethod
from itertools import count
from uuid import uuid4


class IdGenerator(ABC):
    """Source of opaque unique identifiers."""

    @abstractmethod
    def next_id(self) -> str:
        """Return an identifier not handed out before."""
        pass


class UuidIdGenerator(IdGenerator):
    """Random UUID4 identifiers."""

    def next_id(self) -> str:
        return str(uuid4())


class SequentialIdGenerator(IdGenerator):
    """Deterministic ``prefix-1``, ``prefix-2``, ... identifiers."""

    def __init__(self, prefix: str = "id", start: int = 1):
        self.prefix = prefix
        self._counter = count(start)

    def next_id(self) -> str:
        return f"{self.prefix}-{next(self._counter)}"


default_id_generator: IdGenerator = UuidIdGenerator()


def resolve_id_generator(id_generator: IdGenerator | None) -> IdGenerator:
    """Return the given generator, or the process default."""
    return id_generator if id_generator is not None else default_id_generator
