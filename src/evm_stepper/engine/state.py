"""Containers owned by the stepping engine: stack, memory, calldata, storage."""
from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import StrEnum

from ..errors import NothingToUndoError, StackUnderflowError

WORD_SIZE = 32

_HEX_RE = re.compile(r"[0-9a-fA-F]*")


class StackOp(StrEnum):
    PUSH = "push"
    POP = "pop"


@dataclass(slots=True, frozen=True)
class StackMutation:
    op: StackOp
    value: str


class Stack:
    """LIFO of literal strings that journals every push and pop.

    ``undo`` reverses the most recent journaled mutation, so repeated undos
    walk the journal backwards.
    """

    def __init__(self, values: Iterable[str] = ()) -> None:
        self._values: list[str] = list(values)
        self._journal: list[StackMutation] = []

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"Stack({self._values!r})"

    @property
    def values(self) -> tuple[str, ...]:
        """Snapshot, bottom first."""
        return tuple(self._values)

    @property
    def journal(self) -> tuple[StackMutation, ...]:
        return tuple(self._journal)

    def push(self, value: str) -> None:
        self._values.append(value)
        self._journal.append(StackMutation(StackOp.PUSH, value))

    def pop(self) -> str:
        if not self._values:
            raise StackUnderflowError("stack underflow")
        value = self._values.pop()
        self._journal.append(StackMutation(StackOp.POP, value))
        return value

    def top(self) -> str:
        if not self._values:
            raise StackUnderflowError("stack is empty")
        return self._values[-1]

    def undo(self) -> StackMutation:
        if not self._journal:
            raise NothingToUndoError("no stack mutation to undo")
        mutation = self._journal.pop()
        if mutation.op is StackOp.PUSH:
            self._values.pop()
        else:
            self._values.append(mutation.value)
        return mutation


class Memory:
    """Byte-addressable linear memory that grows on write."""

    def __init__(self, data: bytes = b"") -> None:
        self._data = bytearray(data)

    @property
    def size(self) -> int:
        return len(self._data)

    def load(self, offset: int, size: int = WORD_SIZE) -> bytes:
        if offset < 0 or size < 0:
            raise ValueError("negative memory offset or size")
        chunk = bytes(self._data[offset : offset + size])
        return chunk.ljust(size, b"\x00")

    def store(self, offset: int, data: bytes) -> None:
        if offset < 0:
            raise ValueError("negative memory offset")
        end = offset + len(data)
        if end > len(self._data):
            self._data.extend(b"\x00" * (end - len(self._data)))
        self._data[offset:end] = data


@dataclass(slots=True, frozen=True)
class Calldata:
    """Transaction input, held as the hex string it was supplied with."""

    data: str

    def __post_init__(self) -> None:
        if len(self.data) % 2:
            raise ValueError("Calldata hex must have an even number of characters")
        if not _HEX_RE.fullmatch(self.data):
            raise ValueError(f"Calldata must be hexadecimal, got {self.data!r}")

    @property
    def size(self) -> int:
        return len(self.data) // 2

    def load_word(self, offset: int) -> str:
        """32 bytes starting at byte ``offset``, zero padded past the end."""
        if offset < 0:
            raise ValueError("negative calldata offset")
        start = offset * 2
        return self.data[start : start + WORD_SIZE * 2].ljust(WORD_SIZE * 2, "0")


@dataclass(slots=True)
class Storage:
    slots: dict[str, str] = field(default_factory=dict)

    def load(self, key: str) -> str:
        return self.slots.get(key, "0")

    def store(self, key: str, value: str) -> None:
        self.slots[key] = value
