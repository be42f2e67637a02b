"""
Toy16 Assembler
===============

This module provides the two-pass assembler for the Toy16 instruction set.
It turns assembly text into a stream of little-endian 16-bit words, ready
to be loaded at word address 0x8000 (by default) by the emulator.

Main Components
---------------
- **Assembler**: Main assembler class that orchestrates the assembly process
- **Lexer**: Tokenizes one source line
- **Parser**: Parses a line's tokens into a ParsedLine
- **CodeGenerator**: Pass 1 (addresses, labels) and pass 2 (encoding)

Assembly Process
----------------
1. **Parsing (Lexer + Parser)**: one ParsedLine per source line
2. **Pass 1**: address assignment and symbol table
3. **Pass 2**: instruction/directive encoding, label resolution,
   PC-relative offsets, little-endian serialization

Example Usage
-------------
>>> from toyasm.assembler import assemble
>>> assemble("loop: JZ loop").hex(" ")
'00 75 fe ff'

Supported Syntax
----------------
- Instructions: NOP, HALT, ADD, JMP, JZ
- Directives: .org, .word
- Labels (case-sensitive), registers R0-R3, ``#`` immediates
- Decimal and 0x-prefixed hexadecimal literals
- ``;`` comments
"""

from toyasm.assembler.assembler import Assembler, assemble, assemble_file
from toyasm.assembler.lexer import Lexer, Token, TokenType, tokenize_line
from toyasm.assembler.parser import (
    Parser,
    ParsedLine,
    LineKind,
    Operand,
    OperandKind,
    parse_line,
    parse_source,
)
from toyasm.assembler.codegen import (
    AssemblyContext,
    CodeGenerator,
    ListingEntry,
    Symbol,
    bytes_to_words,
    parse_number16,
    words_to_bytes,
)

__all__ = [
    # Main class and functions
    "Assembler",
    "assemble",
    "assemble_file",
    # Lexer
    "Lexer",
    "Token",
    "TokenType",
    "tokenize_line",
    # Parser
    "Parser",
    "ParsedLine",
    "LineKind",
    "Operand",
    "OperandKind",
    "parse_line",
    "parse_source",
    # Code generator
    "AssemblyContext",
    "CodeGenerator",
    "ListingEntry",
    "Symbol",
    "bytes_to_words",
    "parse_number16",
    "words_to_bytes",
]
