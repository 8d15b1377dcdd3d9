"""Opcode dispatch: handler table and instruction decoding."""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..bytecode.opcodes import PUSH_OPERAND_BYTES, OpCode, mnemonic, opcode_hex
from ..bytecode.program import Program, payload_sizes
from ..errors import StackError

if TYPE_CHECKING:
    from .stepper import Engine

__all__ = [
    "CallDataLoad",
    "Dispatch",
    "Dispatcher",
    "Handler",
    "NoOp",
    "Pop",
    "Push",
    "Push0",
]


class Handler(ABC):
    """Side effect of one opcode. Takes at most one literal operand."""

    name = "base"

    @abstractmethod
    def __call__(self, engine: Engine, operand: str = "") -> None: ...

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class Pop(Handler):
    name = "POP"

    def __call__(self, engine: Engine, operand: str = "") -> None:
        engine.stack.pop()


class Push0(Handler):
    name = "PUSH0"

    def __call__(self, engine: Engine, operand: str = "") -> None:
        engine.stack.push("0")


class Push(Handler):
    """PUSH1..PUSH32: pushes the operand verbatim."""

    def __init__(self, byte_count: int) -> None:
        if not 1 <= byte_count <= 32:
            raise ValueError(f"PUSH width must be within 1..32 bytes, got {byte_count}")
        self.byte_count = byte_count
        self.name = f"PUSH{byte_count}"

    @property
    def payload_size(self) -> int:
        return self.byte_count * 2

    def __call__(self, engine: Engine, operand: str = "") -> None:
        engine.stack.push(operand)

    def __repr__(self) -> str:
        return f"Push({self.byte_count})"


class CallDataLoad(Handler):
    """Stub: neither reads calldata nor touches the stack."""

    name = "CALLDATALOAD"

    def __call__(self, engine: Engine, operand: str = "") -> None:
        return None


class NoOp(Handler):
    name = "NOOP"

    def __call__(self, engine: Engine, operand: str = "") -> None:
        return None


@dataclass(slots=True)
class Dispatch:
    """Outcome of running one opcode through the dispatcher."""

    opcode: str
    handler: Handler
    operand: str = ""
    error: StackError | None = None

    @property
    def payload_size(self) -> int:
        return len(self.operand)

    @property
    def mnemonic(self) -> str:
        return mnemonic(self.opcode)


class Dispatcher:
    """Routes two-character opcodes to handlers by exact string match.

    Every PUSH width has a ``Push`` handler; only the widths present in
    :func:`payload_sizes` are reachable. With ``full_push_family`` all 32
    are wired.
    """

    _NOOP = NoOp()

    def __init__(self, full_push_family: bool = False) -> None:
        self.full_push_family = full_push_family
        self.payload_sizes = payload_sizes(full_push_family)
        self.push_handlers: dict[str, Push] = {
            opcode_hex(opcode): Push(byte_count) for opcode, byte_count in PUSH_OPERAND_BYTES.items()
        }
        self._table: dict[str, Handler] = {
            opcode_hex(OpCode.CALLDATALOAD): CallDataLoad(),
            opcode_hex(OpCode.POP): Pop(),
            opcode_hex(OpCode.PUSH0): Push0(),
        }
        for opcode in self.payload_sizes:
            self._table[opcode] = self.push_handlers[opcode]

    def handler_for(self, opcode: str) -> Handler:
        return self._table.get(opcode, self._NOOP)

    def is_wired(self, opcode: str) -> bool:
        return opcode in self._table

    def decode(self, program: Program, pc: int) -> tuple[str, Handler, str]:
        """Return ``(opcode, handler, operand)`` without side effects.

        Raises ``TruncatedOperandError`` when a wired PUSH runs past the end.
        """
        opcode = program.opcode_at(pc)
        operand = program.operand_at(pc, self.payload_sizes.get(opcode, 0))
        return opcode, self.handler_for(opcode), operand

    def execute(self, engine: Engine, pc: int) -> Dispatch:
        opcode, handler, operand = self.decode(engine.program, pc)
        dispatch = Dispatch(opcode=opcode, handler=handler, operand=operand)
        try:
            handler(engine, operand)
        except StackError as exc:
            dispatch.error = exc
        return dispatch
