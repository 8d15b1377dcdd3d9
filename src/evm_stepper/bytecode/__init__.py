"""Bytecode program and opcode metadata package."""

from __future__ import annotations

from .opcodes import DEFAULT_WIRED_PUSH_BYTES, PUSH_OPERAND_BYTES, OpCode, mnemonic, opcode_hex
from .program import INSTRUCTION_WIDTH, Instruction, Program, disassemble, payload_sizes

__all__ = [
    "DEFAULT_WIRED_PUSH_BYTES",
    "INSTRUCTION_WIDTH",
    "PUSH_OPERAND_BYTES",
    "Instruction",
    "OpCode",
    "Program",
    "disassemble",
    "mnemonic",
    "opcode_hex",
    "payload_sizes",
]
