"""Stepping engine package."""

from __future__ import annotations

from .dispatcher import CallDataLoad, Dispatch, Dispatcher, Handler, NoOp, Pop, Push, Push0
from .state import Calldata, Memory, Stack, StackMutation, StackOp, Storage
from .stepper import Direction, Engine, StepResult

__all__ = [
    "CallDataLoad",
    "Calldata",
    "Direction",
    "Dispatch",
    "Dispatcher",
    "Engine",
    "Handler",
    "Memory",
    "NoOp",
    "Pop",
    "Push",
    "Push0",
    "Stack",
    "StackMutation",
    "StackOp",
    "Storage",
    "StepResult",
]
