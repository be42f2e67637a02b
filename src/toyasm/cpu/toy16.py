"""
Toy16 Instruction Set Definitions
=================================

Single source of truth for the instruction encoding shared by the
assembler (which packs words), the disassembler and the emulator (which
unpack them).

Instruction Word Format
-----------------------
Every instruction starts with one 16-bit word, MSB first:

    15      11 10   8 7    5 4    2 1  0
    +---------+------+------+------+----+
    | opcode  | mode |  rd  |  rs  | 00 |
    +---------+------+------+------+----+

Some instructions are followed by one extra operand word:

| Mnemonic | Opcode | Forms                         | Words |
|----------|--------|-------------------------------|-------|
| NOP      | 0      | NOP                           | 1     |
| HALT     | 1      | HALT                          | 1     |
| ADD      | 5      | ADD rd, rs      (mode 0)      | 1     |
|          |        | ADD rd, #imm    (mode 1)      | 2     |
| JMP      | 13     | JMP target      (mode 5)      | 2     |
| JZ       | 14     | JZ target       (mode 5)      | 2     |

Jump offsets are PC-relative to the word following the offset word:
``offset = target - (address + 2)``, stored as a 16-bit two's complement
pattern.

Addresses are counted in 16-bit words, not bytes.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Optional


# =============================================================================
# Memory Layout
# =============================================================================

DEFAULT_ORIGIN = 0x8000
WORD_MASK = 0xFFFF
ADDRESS_SPACE_WORDS = 0x10000

REGISTER_COUNT = 4
REGISTER_NAMES = ("R0", "R1", "R2", "R3")


# =============================================================================
# Bit Fields
# =============================================================================

OPCODE_SHIFT = 11
OPCODE_MASK = 0x1F
MODE_SHIFT = 8
MODE_MASK = 0x07
RD_SHIFT = 5
RD_MASK = 0x07
RS_SHIFT = 2
RS_MASK = 0x07


class Mode(IntEnum):
    """Addressing modes used by the supported instructions."""
    REGISTER = 0     # No operand word (also used by NOP/HALT)
    IMMEDIATE = 1    # One immediate word follows
    RELATIVE = 5     # One PC-relative offset word follows


class Opcode(IntEnum):
    """The closed set of opcodes."""
    NOP = 0
    HALT = 1
    ADD = 5
    JMP = 13
    JZ = 14


# Mnemonic -> opcode lookup
OPCODE_TABLE: dict[str, int] = {op.name: op.value for op in Opcode}

MNEMONICS = frozenset(OPCODE_TABLE)

# Instructions that take no operands
INHERENT_INSTRUCTIONS = frozenset({"NOP", "HALT"})

# Instructions followed by a PC-relative offset word
JUMP_INSTRUCTIONS = frozenset({"JMP", "JZ"})


@dataclass(frozen=True)
class DecodedWord:
    """
    The fields of a single instruction word.

    Attributes:
        opcode: Bits 15-11
        mode: Bits 10-8
        rd: Bits 7-5 (destination register)
        rs: Bits 4-2 (source register)
    """
    opcode: int
    mode: int
    rd: int
    rs: int

    @property
    def mnemonic(self) -> Optional[str]:
        """Mnemonic for the opcode, or None if the opcode is unassigned."""
        try:
            return Opcode(self.opcode).name
        except ValueError:
            return None


# =============================================================================
# Packing Helpers
# =============================================================================

def pack_instruction(opcode: int, mode: int = 0, rd: int = 0, rs: int = 0) -> int:
    """
    Pack instruction fields into a 16-bit word.

    Each field is masked to its width; bits 1-0 are always zero.

    >>> hex(pack_instruction(Opcode.ADD, Mode.IMMEDIATE, 0, 0))
    '0x2900'
    """
    word = (opcode & OPCODE_MASK) << OPCODE_SHIFT
    word |= (mode & MODE_MASK) << MODE_SHIFT
    word |= (rd & RD_MASK) << RD_SHIFT
    word |= (rs & RS_MASK) << RS_SHIFT
    return word


def unpack_instruction(word: int) -> DecodedWord:
    """Split a 16-bit instruction word into its fields."""
    return DecodedWord(
        opcode=(word >> OPCODE_SHIFT) & OPCODE_MASK,
        mode=(word >> MODE_SHIFT) & MODE_MASK,
        rd=(word >> RD_SHIFT) & RD_MASK,
        rs=(word >> RS_SHIFT) & RS_MASK,
    )


def relative_offset(address: int, target: int) -> int:
    """
    Encode a jump from ``address`` to ``target`` as a 16-bit offset.

    The offset is relative to the word after the jump's offset word and
    wraps silently; there is no range check.
    """
    return (target - (address + 2)) & WORD_MASK


def to_signed(word: int) -> int:
    """Interpret a 16-bit pattern as a two's complement integer."""
    word &= WORD_MASK
    return word - 0x10000 if word & 0x8000 else word


# =============================================================================
# Lookup Functions
# =============================================================================

def get_opcode(mnemonic: str) -> Optional[int]:
    """Opcode for a mnemonic (case-insensitive), or None if unsupported."""
    return OPCODE_TABLE.get(mnemonic.upper())


def is_valid_instruction(mnemonic: str) -> bool:
    """Check whether a mnemonic (any case) is in the instruction table."""
    return mnemonic.upper() in OPCODE_TABLE


def register_id(name: str) -> Optional[int]:
    """Register number for ``R0``..``R3`` (any case), or None."""
    try:
        return REGISTER_NAMES.index(name.upper())
    except ValueError:
        return None


def instruction_size(mnemonic: str, has_immediate_source: bool = False) -> int:
    """
    Number of words an instruction occupies.

    The size depends only on the mnemonic and, for ADD, on whether the
    source operand is an immediate. Unknown mnemonics occupy no words.

    Args:
        mnemonic: Instruction name (any case)
        has_immediate_source: True when ADD's second operand is ``#n``
    """
    name = mnemonic.upper()
    if name not in OPCODE_TABLE:
        return 0
    if name in JUMP_INSTRUCTIONS:
        return 2
    if name == "ADD" and has_immediate_source:
        return 2
    return 1
