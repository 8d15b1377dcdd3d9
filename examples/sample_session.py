"""Sample session demonstrating programmatic stepping."""
from evm_stepper.bytecode.opcodes import OpCode, opcode_hex
from evm_stepper.bytecode.program import disassemble
from evm_stepper.engine.state import Stack
from evm_stepper.engine.stepper import Direction, Engine
from evm_stepper.report.trace import TraceReport


def demo_forward_and_back():
    """Push a word, pop it, then walk back to the start."""
    # PUSH4 0x0000000a -> POP
    bytecode = opcode_hex(OpCode.PUSH4) + "0000000a" + opcode_hex(OpCode.POP)
    for ins in disassemble(bytecode):
        print(f"{ins.offset:4d}  {ins.mnemonic:<8} {ins.operand}")

    engine = Engine(bytecode, stack=Stack(["ff"]))
    steps = engine.run([Direction.RIGHT, Direction.RIGHT, Direction.LEFT])
    print(TraceReport(engine, steps).to_markdown())


if __name__ == "__main__":
    demo_forward_and_back()
