"""Bidirectional single-step execution engine."""
from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum

import structlog

from ..bytecode.program import INSTRUCTION_WIDTH, Program
from ..errors import StackError
from .dispatcher import Dispatcher
from .state import Calldata, Memory, Stack, Storage

logger = structlog.wrap_logger(logging.getLogger(__name__), wrapper_class=structlog.stdlib.BoundLogger)


class Direction(StrEnum):
    LEFT = "left"
    RIGHT = "right"


@dataclass(slots=True, frozen=True)
class StepResult:
    direction: Direction
    pc_before: int
    pc_after: int
    opcode: str | None = None
    operand: str = ""
    error: StackError | None = None

    @property
    def moved(self) -> bool:
        return self.pc_before != self.pc_after

    @property
    def ok(self) -> bool:
        return self.error is None


class Engine:
    """Executes one instruction per :meth:`step` and can step back through history.

    A forward step always runs the instruction's handler before deciding
    whether the PC moves. At the last instruction the clamped PC cannot
    advance, so further forward steps re-run that instruction without
    growing the history.

    A backward step restores the previous PC and undoes the stack's last
    mutation. Memory, calldata and storage are not rolled back.
    """

    INSTRUCTION_WIDTH = INSTRUCTION_WIDTH

    def __init__(
        self,
        bytecode: str,
        calldata: Calldata | None = None,
        memory: Memory | None = None,
        storage: Storage | None = None,
        stack: Stack | None = None,
        dispatcher: Dispatcher | None = None,
    ) -> None:
        self.program = Program(bytecode, self.INSTRUCTION_WIDTH)
        self.calldata = calldata if calldata is not None else Calldata("")
        self.memory = memory if memory is not None else Memory()
        self.storage = storage if storage is not None else Storage()
        self.stack = stack if stack is not None else Stack()
        self.dispatcher = dispatcher if dispatcher is not None else Dispatcher()
        self._pc = 0
        self._history: list[int] = []

    @property
    def bytecode(self) -> str:
        return self.program.bytecode

    @property
    def program_counter(self) -> int:
        return self._pc

    @property
    def instruction_width(self) -> int:
        return self.program.instruction_width

    @property
    def pc_history(self) -> tuple[int, ...]:
        return tuple(self._history)

    def step(self, direction: Direction | str) -> StepResult:
        direction = Direction(direction)
        if direction is Direction.LEFT:
            return self._step_back()
        return self._step_forward()

    def run(self, directions: Iterable[Direction | str]) -> list[StepResult]:
        return [self.step(direction) for direction in directions]

    def _step_forward(self) -> StepResult:
        pc = self._pc
        dispatch = self.dispatcher.execute(self, pc)

        candidate = min(pc + self.instruction_width + dispatch.payload_size, self.program.last_pc)
        if candidate != pc:
            self._history.append(pc)
            self._pc = candidate

        error = dispatch.error
        if error is not None:
            logger.warning("handler failed", pc=pc, opcode=dispatch.opcode, error=str(error))
        logger.debug("step", direction="right", pc=pc, opcode=dispatch.opcode, moved=candidate != pc)
        return StepResult(
            direction=Direction.RIGHT,
            pc_before=pc,
            pc_after=self._pc,
            opcode=dispatch.opcode,
            operand=dispatch.operand,
            error=error,
        )

    def _step_back(self) -> StepResult:
        pc = self._pc
        if not self._history:
            logger.debug("step", direction="left", pc=pc, moved=False)
            return StepResult(direction=Direction.LEFT, pc_before=pc, pc_after=pc)

        error: StackError | None = None
        self._pc = self._history.pop()
        try:
            self.stack.undo()
        except StackError as exc:
            error = exc
            logger.warning("stack undo failed", pc=pc, error=str(exc))

        logger.debug("step", direction="left", pc=pc, moved=True)
        return StepResult(direction=Direction.LEFT, pc_before=pc, pc_after=self._pc, error=error)
