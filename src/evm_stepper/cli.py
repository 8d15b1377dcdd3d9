"""CLI entry point for evm-stepper."""

from __future__ import annotations

import re
import sys
from collections.abc import Iterable
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from . import __version__
from .bytecode.program import disassemble
from .engine.dispatcher import Dispatcher
from .engine.state import Calldata, Stack
from .engine.stepper import Direction, Engine, StepResult
from .errors import TruncatedOperandError
from .logs import LOG_LEVELS, configure_logging
from .report.trace import TraceReport

console = Console()

_HEX_RE = re.compile(r"^[0-9a-f]*$")
_STEP_ALIASES: dict[str, Direction] = {
    "r": Direction.RIGHT,
    "right": Direction.RIGHT,
    "f": Direction.RIGHT,
    "l": Direction.LEFT,
    "left": Direction.LEFT,
    "b": Direction.LEFT,
}


def _normalize_hex(raw: str, label: str) -> str:
    text = raw.strip().lower()
    if text.startswith("0x"):
        text = text[2:]
    if not _HEX_RE.match(text):
        raise click.BadParameter(f"Invalid {label} '{raw}': expected hexadecimal characters only.")
    if len(text) % 2:
        raise click.BadParameter(f"Invalid {label} '{raw}': expected an even number of hex characters.")
    return text


def _parse_steps(spec: str) -> list[Direction]:
    """Accept either a compact string (``rrl``) or separated words (``right,left``)."""
    text = spec.strip().lower()
    if not text:
        return []
    if re.search(r"[\s,]", text):
        tokens = re.split(r"[\s,]+", text)
    elif text in _STEP_ALIASES:
        tokens = [text]
    else:
        tokens = list(text)
    directions: list[Direction] = []
    for token in tokens:
        if not token:
            continue
        direction = _STEP_ALIASES.get(token)
        if direction is None:
            allowed = ", ".join(sorted(_STEP_ALIASES))
            raise click.BadParameter(f"Invalid step '{token}' in --steps. Allowed: {allowed}.")
        directions.append(direction)
    return directions


def _parse_stack_values(values: Iterable[str]) -> Stack:
    return Stack(_normalize_hex(value, "stack value") for value in values)


def _render_steps_table(steps: list[StepResult]) -> Table:
    table = Table(title="Execution Trace")
    table.add_column("#", justify="right")
    table.add_column("Dir")
    table.add_column("PC")
    table.add_column("Opcode")
    table.add_column("Operand")
    table.add_column("Status")
    for index, step in enumerate(steps, 1):
        if step.error is not None:
            status = f"[red]{step.error}[/]"
        elif step.moved:
            status = "[green]moved[/]"
        else:
            status = "[yellow]pinned[/]"
        table.add_row(
            str(index),
            step.direction.value,
            f"{step.pc_before} -> {step.pc_after}",
            step.opcode or "-",
            step.operand or "-",
            status,
        )
    return table


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default="WARNING",
    help="Verbosity of engine logging (written to stderr).",
)
def main(log_level: str) -> None:
    """Step through EVM bytecode one instruction at a time."""
    configure_logging(log_level)


@main.command()
@click.argument("bytecode")
@click.option("--steps", "-s", default="", help="Directions to apply, e.g. 'rrl' or 'right,right,left'.")
@click.option("--calldata", default="", help="Transaction input as hex.")
@click.option(
    "--stack",
    "stack_values",
    multiple=True,
    help="Pre-populate the stack (bottom first). Can be repeated.",
)
@click.option("--full-push-family", is_flag=True, help="Wire every PUSH1..PUSH32 width into dispatch.")
@click.option("--format", "fmt", type=click.Choice(["table", "json", "markdown"]), default="table")
@click.option("--output", "-o", type=click.Path(), help="Output file path")
@click.option("--fail-on-error", is_flag=True, help="Exit with code 3 if any step reported a stack error.")
def run(
    bytecode: str,
    steps: str,
    calldata: str,
    stack_values: tuple[str, ...],
    full_push_family: bool,
    fmt: str,
    output: str | None,
    fail_on_error: bool,
) -> None:
    """Run a sequence of steps over BYTECODE and report the trace."""
    program_hex = _normalize_hex(bytecode, "bytecode")
    directions = _parse_steps(steps)
    calldata_hex = _normalize_hex(calldata, "calldata")
    stack = _parse_stack_values(stack_values)

    try:
        engine = Engine(
            program_hex,
            calldata=Calldata(calldata_hex),
            stack=stack,
            dispatcher=Dispatcher(full_push_family=full_push_family),
        )
        results = engine.run(directions)
    except TruncatedOperandError as exc:
        console.print(f"[red]Bytecode fault: {exc}[/]")
        sys.exit(1)
    except ValueError as exc:
        console.print(f"[red]Failed to load bytecode: {exc}[/]")
        sys.exit(1)

    trace = TraceReport(engine, results)
    errored = [step for step in results if not step.ok]

    if fmt == "table":
        console.print(_render_steps_table(results))
        console.print(f"\n[bold]PC:[/] {engine.program_counter}")
        console.print(f"[bold]History:[/] {list(engine.pc_history)}")
        console.print(f"[bold]Stack:[/] {list(engine.stack.values)}")
        report = None
    elif fmt == "json":
        report = trace.to_json()
    else:
        report = trace.to_markdown()

    if report is not None:
        if output:
            Path(output).write_text(report)
            console.print(f"[green]Report saved to {output}[/]")
        else:
            console.print(report, markup=False, highlight=False, soft_wrap=True)

    if fail_on_error and errored:
        console.print(f"[red]{len(errored)} step(s) reported stack errors.[/]")
        sys.exit(3)


@main.command()
@click.argument("bytecode")
@click.option("--full-push-family", is_flag=True, help="Decode every PUSH1..PUSH32 width.")
def disasm(bytecode: str, full_push_family: bool) -> None:
    """List the instructions of BYTECODE."""
    program_hex = _normalize_hex(bytecode, "bytecode")
    dispatcher = Dispatcher(full_push_family=full_push_family)
    try:
        instructions = disassemble(program_hex, dispatcher.payload_sizes)
    except ValueError as exc:
        console.print(f"[red]Failed to disassemble: {exc}[/]")
        sys.exit(1)

    table = Table(title="Disassembly")
    table.add_column("Offset", justify="right")
    table.add_column("Opcode")
    table.add_column("Mnemonic")
    table.add_column("Operand")
    for ins in instructions:
        table.add_row(str(ins.offset), ins.opcode, ins.mnemonic, ins.operand or "-")
    console.print(table)
    console.print(f"\n[bold]Total: {len(instructions)} instructions[/]")


if __name__ == "__main__":
    main()
