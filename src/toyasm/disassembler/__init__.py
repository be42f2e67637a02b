"""
toyasm Disassembler Module
==========================

Disassembly of Toy16 machine code, used by the ``toyrun --trace`` output
and for inspecting assembled images.

Usage:
    from toyasm.disassembler import WordDisassembler

    disasm = WordDisassembler()
    for instr in disasm.disassemble(image, start_address=0x8000):
        print(instr)
"""

from .toy16 import WordDisassembler, DisassembledInstruction

__all__ = [
    "WordDisassembler",
    "DisassembledInstruction",
]
