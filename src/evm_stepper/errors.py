"""Exception types raised by the stepping engine and its collaborators."""
from __future__ import annotations

__all__ = [
    "EngineError",
    "NothingToUndoError",
    "StackError",
    "StackUnderflowError",
    "TruncatedOperandError",
]


class EngineError(Exception):
    """Base class for every error raised by evm_stepper."""


class TruncatedOperandError(EngineError, ValueError):
    def __init__(self, opcode: str, pc: int, expected: int, available: int) -> None:
        self.opcode = opcode
        self.pc = pc
        self.expected = expected
        self.available = available
        super().__init__(
            f"Truncated operand for opcode 0x{opcode} at pc {pc}: "
            f"expected {expected} hex chars, {available} available"
        )


class StackError(EngineError, IndexError):
    """A stack collaborator could not apply the requested mutation."""


class StackUnderflowError(StackError):
    pass


class NothingToUndoError(StackError):
    pass
