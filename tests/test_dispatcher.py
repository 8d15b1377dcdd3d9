"""Tests for opcode dispatch."""
from __future__ import annotations

import pytest

from evm_stepper.bytecode.opcodes import PUSH_OPERAND_BYTES, OpCode, opcode_hex
from evm_stepper.engine.dispatcher import CallDataLoad, Dispatcher, NoOp, Pop, Push, Push0
from evm_stepper.engine.state import Stack
from evm_stepper.engine.stepper import Engine
from evm_stepper.errors import StackUnderflowError, TruncatedOperandError


def _unwired_push_opcodes() -> list[str]:
    return [opcode_hex(op) for op, n in PUSH_OPERAND_BYTES.items() if n not in (4, 20)]


def test_handler_table_routes_known_opcodes():
    dispatcher = Dispatcher()
    assert isinstance(dispatcher.handler_for("50"), Pop)
    assert isinstance(dispatcher.handler_for("5f"), Push0)
    assert isinstance(dispatcher.handler_for("35"), CallDataLoad)
    assert dispatcher.handler_for("63").byte_count == 4
    assert dispatcher.handler_for("73").byte_count == 20


def test_unknown_opcode_routes_to_noop():
    dispatcher = Dispatcher()
    assert isinstance(dispatcher.handler_for("01"), NoOp)
    assert isinstance(dispatcher.handler_for("ff"), NoOp)
    assert not dispatcher.is_wired("01")


def test_opcode_match_is_exact_lowercase():
    dispatcher = Dispatcher()
    assert isinstance(dispatcher.handler_for("5F"), NoOp)


def test_every_push_width_has_a_handler():
    dispatcher = Dispatcher()
    assert len(dispatcher.push_handlers) == 32
    for op, n in PUSH_OPERAND_BYTES.items():
        handler = dispatcher.push_handlers[opcode_hex(op)]
        assert handler.byte_count == n
        assert handler.payload_size == 2 * n
        assert handler.name == op.name


@pytest.mark.parametrize("opcode", _unwired_push_opcodes())
def test_unwired_push_widths_decode_as_unknown(opcode):
    dispatcher = Dispatcher()
    eng = Engine(opcode + "00" * 40, dispatcher=dispatcher)
    dispatch = dispatcher.execute(eng, 0)
    assert dispatch.payload_size == 0
    assert isinstance(dispatch.handler, NoOp)
    assert eng.stack.values == ()


def test_full_push_family_wires_every_width():
    dispatcher = Dispatcher(full_push_family=True)
    eng = Engine("60ab50", dispatcher=dispatcher)
    dispatch = dispatcher.execute(eng, 0)
    assert dispatch.operand == "ab"
    assert dispatch.payload_size == 2
    assert eng.stack.values == ("ab",)
    assert all(dispatcher.is_wired(opcode_hex(op)) for op in PUSH_OPERAND_BYTES)


def test_push_width_bounds():
    with pytest.raises(ValueError):
        Push(0)
    with pytest.raises(ValueError):
        Push(33)


def test_execute_push4_pushes_operand_verbatim():
    eng = Engine("630000000a50")
    dispatch = eng.dispatcher.execute(eng, 0)
    assert dispatch.opcode == "63"
    assert dispatch.mnemonic == "PUSH4"
    assert dispatch.operand == "0000000a"
    assert dispatch.payload_size == 8
    assert dispatch.error is None
    assert eng.stack.values == ("0000000a",)


def test_execute_calldataload_is_a_noop():
    eng = Engine(opcode_hex(OpCode.CALLDATALOAD) + "00")
    dispatch = eng.dispatcher.execute(eng, 0)
    assert dispatch.payload_size == 0
    assert eng.stack.values == ()
    assert eng.stack.journal == ()


def test_execute_pop_on_empty_stack_reports_error():
    eng = Engine("5050")
    dispatch = eng.dispatcher.execute(eng, 0)
    assert isinstance(dispatch.error, StackUnderflowError)
    assert dispatch.payload_size == 0


def test_execute_truncated_operand_raises_before_side_effect():
    eng = Engine("63000a", stack=Stack(["01"]))
    with pytest.raises(TruncatedOperandError):
        eng.dispatcher.execute(eng, 0)
    assert eng.stack.values == ("01",)
