"""
toyasm CPU Package
==================

Instruction set definitions shared by the assembler, disassembler and
emulator, so that encoding and decoding never drift apart.

Modules:
    toy16: Opcode table, bit-field constants, and the pure packing and
           unpacking functions for 16-bit instruction words.

Usage:
    from toyasm.cpu import Opcode, Mode, pack_instruction
"""

from toyasm.cpu.toy16 import (
    # Memory layout
    DEFAULT_ORIGIN,
    WORD_MASK,
    ADDRESS_SPACE_WORDS,
    REGISTER_COUNT,
    REGISTER_NAMES,
    # Core types
    Mode,
    Opcode,
    DecodedWord,
    # Instruction tables
    OPCODE_TABLE,
    MNEMONICS,
    INHERENT_INSTRUCTIONS,
    JUMP_INSTRUCTIONS,
    # Packing
    pack_instruction,
    unpack_instruction,
    relative_offset,
    to_signed,
    # Lookup functions
    get_opcode,
    is_valid_instruction,
    register_id,
    instruction_size,
)

__all__ = [
    "DEFAULT_ORIGIN",
    "WORD_MASK",
    "ADDRESS_SPACE_WORDS",
    "REGISTER_COUNT",
    "REGISTER_NAMES",
    "Mode",
    "Opcode",
    "DecodedWord",
    "OPCODE_TABLE",
    "MNEMONICS",
    "INHERENT_INSTRUCTIONS",
    "JUMP_INSTRUCTIONS",
    "pack_instruction",
    "unpack_instruction",
    "relative_offset",
    "to_signed",
    "get_opcode",
    "is_valid_instruction",
    "register_id",
    "instruction_size",
]
