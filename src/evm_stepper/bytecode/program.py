"""Hex bytecode program and linear disassembler."""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

from ..errors import TruncatedOperandError
from .opcodes import DEFAULT_WIRED_PUSH_BYTES, PUSH_OPERAND_BYTES, mnemonic, opcode_hex

INSTRUCTION_WIDTH = 2


@dataclass(slots=True, frozen=True)
class Instruction:
    offset: int
    opcode: str
    mnemonic: str
    operand: str = ""

    @property
    def size(self) -> int:
        return INSTRUCTION_WIDTH + len(self.operand)


@dataclass(slots=True, frozen=True)
class Program:
    """Immutable hex instruction stream; every two characters are one byte.

    Only the minimum-length invariant is enforced here. Odd lengths and
    non-hex characters are passed through untouched; a PUSH operand running
    past the end is reported by :meth:`operand_at`.
    """

    bytecode: str
    instruction_width: int = INSTRUCTION_WIDTH

    def __post_init__(self) -> None:
        if len(self.bytecode) < self.instruction_width:
            raise ValueError(
                f"Bytecode must hold at least one instruction ({self.instruction_width} hex chars), "
                f"got {len(self.bytecode)}"
            )

    def __len__(self) -> int:
        return len(self.bytecode)

    @property
    def last_pc(self) -> int:
        return len(self.bytecode) - self.instruction_width

    def opcode_at(self, pc: int) -> str:
        return self.bytecode[pc : pc + self.instruction_width]

    def operand_at(self, pc: int, size: int) -> str:
        """Return ``size`` hex chars following the opcode at ``pc``."""
        start = pc + self.instruction_width
        end = start + size
        if end > len(self.bytecode):
            raise TruncatedOperandError(
                self.opcode_at(pc),
                pc,
                expected=size,
                available=max(0, len(self.bytecode) - start),
            )
        return self.bytecode[start:end]


def payload_sizes(full_push_family: bool = False) -> dict[str, int]:
    """Opcode -> immediate operand size in hex chars for the PUSH family.

    By default only the PUSH widths in ``DEFAULT_WIRED_PUSH_BYTES`` are
    decoded with an operand; every other opcode has payload 0.
    """
    sizes: dict[str, int] = {}
    for opcode, byte_count in PUSH_OPERAND_BYTES.items():
        if full_push_family or byte_count in DEFAULT_WIRED_PUSH_BYTES:
            sizes[opcode_hex(opcode)] = byte_count * 2
    return sizes


def disassemble(bytecode: str | Program, sizes: Mapping[str, int] | None = None) -> list[Instruction]:
    """Walk the program from offset 0 and decode each instruction in turn."""
    program = bytecode if isinstance(bytecode, Program) else Program(bytecode)
    sizes = payload_sizes() if sizes is None else sizes

    instructions: list[Instruction] = []
    pc = 0
    while pc <= program.last_pc:
        opcode = program.opcode_at(pc)
        operand = program.operand_at(pc, sizes.get(opcode, 0))
        instructions.append(Instruction(offset=pc, opcode=opcode, mnemonic=mnemonic(opcode), operand=operand))
        pc += program.instruction_width + len(operand)

    return instructions
