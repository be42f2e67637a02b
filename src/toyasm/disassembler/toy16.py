"""
Toy16 Disassembler
==================

Decodes Toy16 machine code back into assembler syntax. The output can be
fed back into the assembler: jump targets are printed as absolute word
addresses (or labels), immediates as 0x-prefixed hex.

Words that do not decode to a supported instruction, and instructions
whose operand word is missing, are shown as ``.word`` data.

Example
-------
>>> from toyasm.disassembler import WordDisassembler
>>> print(WordDisassembler().disassemble_to_text(bytes.fromhex("0075feff"), 0x8000))
8000: 7500 FFFE  JZ 0x8000        ; offset -2
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from toyasm.assembler.codegen import bytes_to_words
from toyasm.cpu import (
    JUMP_INSTRUCTIONS,
    REGISTER_NAMES,
    WORD_MASK,
    Mode,
    Opcode,
    to_signed,
    unpack_instruction,
)


# =============================================================================
# Data Structures
# =============================================================================

@dataclass
class DisassembledInstruction:
    """
    A single disassembled Toy16 instruction.

    Attributes:
        address: Word address of the instruction
        words: All words comprising this instruction
        mnemonic: The instruction mnemonic, or ".word" for data
        operand_str: Formatted operands for display
        target: Jump target address, for JMP/JZ
        comment: Optional comment (jump offset)
    """
    address: int
    words: List[int]
    mnemonic: str
    operand_str: str = ""
    target: Optional[int] = None
    comment: str = ""

    @property
    def size(self) -> int:
        """Size in words."""
        return len(self.words)

    @property
    def text(self) -> str:
        """Assembler syntax without address or encoding."""
        if self.operand_str:
            return f"{self.mnemonic} {self.operand_str}"
        return self.mnemonic

    def __str__(self) -> str:
        """Format as listing line: ADDRESS: WORDS  MNEMONIC OPERANDS"""
        hex_words = " ".join(f"{w:04X}" for w in self.words).ljust(9)
        if self.comment:
            return f"{self.address:04X}: {hex_words}  {self.text:<16} ; {self.comment}"
        return f"{self.address:04X}: {hex_words}  {self.text}"

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "address": f"0x{self.address:04X}",
            "address_int": self.address,
            "words": [f"0x{w:04X}" for w in self.words],
            "mnemonic": self.mnemonic,
            "operand": self.operand_str,
            "target": self.target,
            "comment": self.comment,
        }


# =============================================================================
# Toy16 Disassembler
# =============================================================================

class WordDisassembler:
    """
    Disassembler for Toy16 machine code.

    Attributes:
        _symbol_table: Optional address -> name map used to print jump
            targets as labels
    """

    def __init__(self, symbol_table: Optional[Dict[int, str]] = None):
        self._symbol_table: Dict[int, str] = dict(symbol_table or {})

    def add_symbol(self, address: int, name: str) -> None:
        self._symbol_table[address] = name

    def add_symbols(self, symbols: Dict[str, int]) -> None:
        """
        Add symbols in the assembler's name -> address form.

        Args:
            symbols: Mapping as returned by Assembler.get_symbols()
        """
        for name, address in symbols.items():
            self._symbol_table.setdefault(address, name)

    def disassemble_one(self, words: List[int], address: int, index: int = 0) -> DisassembledInstruction:
        """
        Disassemble the instruction starting at ``words[index]``.

        Args:
            words: Word buffer
            address: Word address of ``words[index]``
            index: Position in the buffer

        Returns:
            The decoded instruction (``.word`` for undecodable data)
        """
        word = words[index]
        fields = unpack_instruction(word)
        mnemonic = fields.mnemonic
        has_next = index + 1 < len(words)

        if mnemonic in ("NOP", "HALT") and fields.mode == Mode.REGISTER:
            return DisassembledInstruction(address, [word], mnemonic)

        if mnemonic == Opcode.ADD.name and fields.rd < len(REGISTER_NAMES):
            rd = REGISTER_NAMES[fields.rd]
            if fields.mode == Mode.REGISTER and fields.rs < len(REGISTER_NAMES):
                return DisassembledInstruction(
                    address, [word], mnemonic, f"{rd}, {REGISTER_NAMES[fields.rs]}"
                )
            if fields.mode == Mode.IMMEDIATE and has_next:
                value = words[index + 1]
                return DisassembledInstruction(
                    address, [word, value], mnemonic, f"{rd}, #0x{value:04X}"
                )

        if mnemonic in JUMP_INSTRUCTIONS and fields.mode == Mode.RELATIVE and has_next:
            offset = to_signed(words[index + 1])
            target = (address + 2 + offset) & WORD_MASK
            return DisassembledInstruction(
                address,
                [word, words[index + 1]],
                mnemonic,
                self._format_target(target),
                target=target,
                comment=f"offset {offset:+d}",
            )

        return DisassembledInstruction(address, [word], ".word", f"0x{word:04X}")

    def disassemble_words(
        self,
        words: List[int],
        start_address: int = 0,
        count: Optional[int] = None,
    ) -> List[DisassembledInstruction]:
        """
        Disassemble a word buffer.

        Args:
            words: Machine code words
            start_address: Word address of the first word
            count: Maximum number of instructions (None = all)
        """
        result = []
        index = 0
        address = start_address

        while index < len(words):
            if count is not None and len(result) >= count:
                break
            instr = self.disassemble_one(words, address, index)
            result.append(instr)
            index += instr.size
            address = (address + instr.size) & WORD_MASK

        return result

    def disassemble(
        self,
        data: bytes,
        start_address: int = 0,
        count: Optional[int] = None,
    ) -> List[DisassembledInstruction]:
        """
        Disassemble a little-endian byte image.

        Raises:
            ValueError: If the image has an odd number of bytes
        """
        return self.disassemble_words(bytes_to_words(data), start_address, count)

    def disassemble_to_text(
        self,
        data: bytes,
        start_address: int = 0,
        count: Optional[int] = None,
    ) -> str:
        """Disassemble and return a multi-line listing."""
        instructions = self.disassemble(data, start_address, count)
        return "\n".join(str(instr) for instr in instructions)

    def _format_target(self, target: int) -> str:
        if target in self._symbol_table:
            return self._symbol_table[target]
        return f"0x{target:04X}"
