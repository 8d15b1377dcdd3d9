"""Trace report - JSON and Markdown output of a stepping session."""
from __future__ import annotations

import json
from datetime import UTC, datetime
from typing import Any

from ..bytecode.opcodes import mnemonic
from ..engine.stepper import Engine, StepResult

__all__ = ["TraceReport"]


class TraceReport:
    def __init__(self, engine: Engine, steps: list[StepResult]) -> None:
        self.engine = engine
        self.steps = steps

    @staticmethod
    def _step_to_dict(index: int, step: StepResult) -> dict[str, Any]:
        return {
            "index": index,
            "direction": step.direction.value,
            "pc_before": step.pc_before,
            "pc_after": step.pc_after,
            "opcode": step.opcode,
            "mnemonic": mnemonic(step.opcode) if step.opcode is not None else None,
            "operand": step.operand,
            "moved": step.moved,
            "error": str(step.error) if step.error is not None else None,
            "error_type": type(step.error).__name__ if step.error is not None else None,
        }

    def _summary(self) -> dict[str, int]:
        return {
            "total": len(self.steps),
            "moved": sum(1 for s in self.steps if s.moved),
            "pinned": sum(1 for s in self.steps if not s.moved),
            "errors": sum(1 for s in self.steps if not s.ok),
        }

    def to_dict(self) -> dict[str, Any]:
        """Serialize the session into a structured report dictionary."""
        return {
            "bytecode": self.engine.bytecode,
            "timestamp": datetime.now(UTC).isoformat(),
            "summary": self._summary(),
            "steps": [self._step_to_dict(i, s) for i, s in enumerate(self.steps, 1)],
            "final_state": {
                "program_counter": self.engine.program_counter,
                "pc_history": list(self.engine.pc_history),
                "stack": list(self.engine.stack.values),
            },
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2)

    @staticmethod
    def _markdown_table(headers: list[str], rows: list[list[str]]) -> list[str]:
        sep = "|".join("-" * max(len(h), 3) for h in headers)
        lines = [
            "| " + " | ".join(headers) + " |",
            "|" + sep + "|",
        ]
        for row in rows:
            lines.append("| " + " | ".join(row) + " |")
        return lines

    def to_markdown(self) -> str:
        d = self.to_dict()
        summary = d["summary"]
        lines = [
            "# Execution Trace",
            f"\nGenerated: {d['timestamp']}\n",
            f"- **Bytecode:** `{d['bytecode']}`",
            f"- **Steps:** {summary['total']} ({summary['moved']} moved, {summary['pinned']} pinned)",
            f"- **Errors:** {summary['errors']}",
            "",
            "## Steps\n",
        ]
        if d["steps"]:
            lines.extend(self._markdown_table(
                ["#", "Direction", "PC", "Opcode", "Operand", "Error"],
                [
                    [
                        str(s["index"]),
                        s["direction"],
                        f"{s['pc_before']} -> {s['pc_after']}",
                        s["mnemonic"] or "-",
                        s["operand"] or "-",
                        s["error"] or "-",
                    ]
                    for s in d["steps"]
                ],
            ))
        else:
            lines.append("No steps taken.")
        final = d["final_state"]
        lines.append("\n## Final State\n")
        lines.append(f"- **Program Counter:** {final['program_counter']}")
        lines.append(f"- **History:** {', '.join(str(pc) for pc in final['pc_history']) or 'empty'}")
        lines.append(f"- **Stack (bottom first):** {', '.join(final['stack']) or 'empty'}")
        return "\n".join(lines)
