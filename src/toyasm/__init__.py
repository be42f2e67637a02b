"""
toyasm - Assembler Toolchain for the Toy16 CPU
==============================================

This package provides a two-pass assembler for Toy16, a small 16-bit CPU
with four registers and word-addressed memory, together with a
disassembler and an emulator for checking the assembled code.

Main Components
---------------
- **assembler**: two-pass assembler (toyasm)
    Converts assembly source files (.asm) to little-endian word images (.bin)

- **disassembler**: word image disassembler (toydis)

- **emulator**: Toy16 execution engine (toyrun)

- **cpu**: instruction set definitions shared by all of the above

Quick Start
-----------
Assemble a program:
    >>> from toyasm import assemble
    >>> assemble("ADD R0, #10\\nHALT").hex(" ")
    '00 29 0a 00 00 08'

Or keep the assembler around for symbols and listings:
    >>> from toyasm import Assembler
    >>> asm = Assembler()
    >>> code = asm.assemble_string("start: NOP")
    >>> asm.get_symbols()
    {'start': 32768}

Or use the command-line tools:
    $ toyasm prog.asm -o prog.bin -l prog.lst
    $ toyrun prog.bin
"""

__version__ = "1.0.0"
__author__ = "toyasm contributors"

from toyasm.assembler import Assembler, assemble, assemble_file
from toyasm.config import AssemblerConfig
from toyasm.errors import (
    ToyAsmError,
    SourceLocation,
    AssemblerError,
    AssemblySyntaxError,
    LexicalError,
    UndefinedSymbolError,
    DuplicateSymbolError,
    OperandError,
    UnknownInstructionError,
    ValueRangeError,
    DirectiveError,
    EmulatorError,
)

__all__ = [
    "__version__",
    "Assembler",
    "assemble",
    "assemble_file",
    "AssemblerConfig",
    "ToyAsmError",
    "SourceLocation",
    "AssemblerError",
    "AssemblySyntaxError",
    "LexicalError",
    "UndefinedSymbolError",
    "DuplicateSymbolError",
    "OperandError",
    "UnknownInstructionError",
    "ValueRangeError",
    "DirectiveError",
    "EmulatorError",
]
