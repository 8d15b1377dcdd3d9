"""Tests for the bytecode program and disassembler."""
from __future__ import annotations

import pytest

from evm_stepper.bytecode.opcodes import OpCode, mnemonic, opcode_hex
from evm_stepper.bytecode.program import Program, disassemble, payload_sizes
from evm_stepper.errors import TruncatedOperandError


def test_program_exposes_bytecode_and_width():
    program = Program("630000000a50")
    assert program.bytecode == "630000000a50"
    assert program.instruction_width == 2
    assert len(program) == 12
    assert program.last_pc == 10


def test_program_rejects_bytecode_shorter_than_one_instruction():
    with pytest.raises(ValueError):
        Program("")
    with pytest.raises(ValueError):
        Program("5")


def test_program_does_not_validate_hex_characters():
    program = Program("zz")
    assert program.opcode_at(0) == "zz"


def test_operand_at_reads_following_chars():
    program = Program("630000000a50")
    assert program.opcode_at(0) == "63"
    assert program.operand_at(0, 8) == "0000000a"


def test_operand_at_raises_on_truncation():
    program = Program("630000")
    with pytest.raises(TruncatedOperandError) as excinfo:
        program.operand_at(0, 8)
    assert excinfo.value.expected == 8
    assert excinfo.value.available == 4
    assert excinfo.value.pc == 0
    assert isinstance(excinfo.value, ValueError)


def test_default_payload_sizes_only_wire_push4_and_push20():
    sizes = payload_sizes()
    assert sizes == {"63": 8, "73": 40}


def test_full_payload_sizes_cover_push1_to_push32():
    sizes = payload_sizes(full_push_family=True)
    assert len(sizes) == 32
    assert sizes["60"] == 2
    assert sizes["7f"] == 64


def test_disassemble_push_and_pop():
    instrs = disassemble("630000000a50")
    assert [ins.offset for ins in instrs] == [0, 10]
    assert instrs[0].mnemonic == "PUSH4"
    assert instrs[0].operand == "0000000a"
    assert instrs[0].size == 10
    assert instrs[1].mnemonic == "POP"
    assert instrs[1].operand == ""


def test_disassemble_treats_unwired_push_as_single_byte():
    instrs = disassemble("600150")
    assert [ins.mnemonic for ins in instrs] == ["PUSH1", "ADD", "POP"]
    assert all(ins.operand == "" for ins in instrs)


def test_disassemble_with_full_push_family():
    instrs = disassemble("600150", payload_sizes(full_push_family=True))
    assert len(instrs) == 2
    assert instrs[0].operand == "01"


def test_disassemble_truncated_push20():
    with pytest.raises(TruncatedOperandError):
        disassemble("73" + "ab" * 5)


def test_mnemonic_lookup():
    assert mnemonic(opcode_hex(OpCode.PUSH0)) == "PUSH0"
    assert mnemonic("35") == "CALLDATALOAD"
    assert mnemonic("0c") == "UNKNOWN"
    assert mnemonic("zz") == "UNKNOWN"
