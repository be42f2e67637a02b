#!/usr/bin/env python3
"""
Toy16 Assembler and Emulator Demo
=================================

This script demonstrates how to:
1. Assemble a source file
2. Inspect the symbol table and listing
3. Disassemble the image
4. Run it on the emulator with a trace

Usage:
    python examples/emulator_demo.py
"""

from pathlib import Path

from toyasm import Assembler
from toyasm.disassembler import WordDisassembler
from toyasm.emulator import ToyCPU


def main():
    source = Path(__file__).with_name("countdown.asm")

    # ==========================================================================
    # 1. Assemble
    # ==========================================================================
    print(f"Assembling {source.name}...")
    asm = Assembler()
    code = asm.assemble_file(source)
    print(f"  {len(code)} bytes at 0x{asm.get_origin():04X}")

    # ==========================================================================
    # 2. Symbols and listing
    # ==========================================================================
    print("\nSymbols:")
    for name, address in sorted(asm.get_symbols().items(), key=lambda item: item[1]):
        print(f"  {name:8s} 0x{address:04X}")

    print()
    print(asm.get_listing())

    # ==========================================================================
    # 3. Disassemble
    # ==========================================================================
    disasm = WordDisassembler()
    disasm.add_symbols(asm.get_symbols())
    print("\nDisassembly:")
    print(disasm.disassemble_to_text(code, asm.get_origin()))

    # ==========================================================================
    # 4. Run with a trace
    # ==========================================================================
    print("\nRunning:")
    cpu = ToyCPU()

    def trace(pc):
        instr = disasm.disassemble_one(cpu.memory.dump(pc, 2), pc)
        print(f"  {pc:04X}: {instr.text:<20} {cpu.registers}")

    cpu.trace_hook = trace
    cpu.load(code, asm.get_origin())
    result = cpu.run(max_steps=1000)

    print(f"\nStopped: {result.reason.name} after {result.steps} steps")
    print(f"  {cpu.registers}")


if __name__ == "__main__":
    main()
