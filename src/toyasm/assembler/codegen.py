"""
Toy16 Code Generator
====================

This module generates Toy16 machine code from parsed source lines. It
implements the classic two-pass assembly process.

Pass 1 (Address Assignment)
---------------------------
- Walk the lines in source order with a word-address location counter
- Record each line's start address before applying its effect
- Enter labels into the symbol table at that address
- Apply ``.org`` and advance the counter by each line's size

Every line's size is fixed by its mnemonic/directive and operand *kinds*
alone, so pass 1 never needs a label's value.

Pass 2 (Encoding)
-----------------
- Re-read each line's address from the pass 1 table
- Encode instructions and ``.word`` data, resolving labels
- Compute PC-relative jump offsets

Output
------
Words are serialized little-endian (low byte first) with no header,
padding, or framing, so the byte stream length is always even.
"""

from dataclasses import dataclass, field
from difflib import get_close_matches
from pathlib import Path
from typing import Optional
import logging
import string
import struct

from toyasm.config import AssemblerConfig
from toyasm.cpu import (
    DEFAULT_ORIGIN,
    WORD_MASK,
    INHERENT_INSTRUCTIONS,
    JUMP_INSTRUCTIONS,
    MNEMONICS,
    Mode,
    Opcode,
    get_opcode,
    instruction_size,
    pack_instruction,
    relative_offset,
)
from toyasm.errors import (
    AssemblerError,
    DirectiveError,
    DuplicateSymbolError,
    OperandError,
    SourceLocation,
    UndefinedSymbolError,
    UnknownInstructionError,
    ValueRangeError,
)
from toyasm.assembler.parser import LineKind, Operand, OperandKind, ParsedLine


logger = logging.getLogger(__name__)


# Usage strings for operand errors
USAGE = {
    "NOP": "NOP",
    "HALT": "HALT",
    "ADD": "ADD Rd, Rs  or  ADD Rd, #value",
    "JMP": "JMP label  or  JMP address",
    "JZ": "JZ label  or  JZ address",
    ".ORG": ".org address",
    ".WORD": ".word value  or  .word label",
}


# =============================================================================
# Numeric Literals
# =============================================================================

def parse_number16(text: str, location: Optional[SourceLocation] = None,
                   source_line: Optional[str] = None) -> int:
    """
    Resolve a numeric literal to an unsigned 16-bit value.

    Literals with a ``0x``/``0X`` prefix are hexadecimal; everything else
    is decimal.

    Raises:
        ValueRangeError: If the literal is malformed or outside 0..65535
    """
    if len(text) > 2 and text[:2] in ("0x", "0X"):
        digits, base, allowed = text[2:], 16, string.hexdigits
    else:
        digits, base, allowed = text, 10, string.digits

    # int() alone also accepts a second prefix and underscores
    if not digits or any(c not in allowed for c in digits):
        raise ValueRangeError(
            f"invalid numeric literal '{text}'",
            location,
            hint="use decimal digits or a 0x hexadecimal prefix",
            source_line=source_line,
        )

    value = int(digits, base)

    if not 0 <= value <= WORD_MASK:
        raise ValueRangeError(
            f"value {text} out of range for a 16-bit word (0..65535)",
            location,
            source_line=source_line,
        )
    return value


# =============================================================================
# Symbol Table and Assembly Context
# =============================================================================

@dataclass
class Symbol:
    """
    Symbol table entry.

    Attributes:
        name: Label name (case-sensitive, original spelling)
        value: Word address the label is bound to
        location: Where the label was defined
    """
    name: str
    value: int
    location: SourceLocation


@dataclass
class AssemblyContext:
    """
    State built by pass 1 and read by pass 2.

    Attributes:
        address: Current word address (location counter)
        symbols: Label name -> Symbol
        line_addresses: Start address of each line, indexed like the line list
    """
    address: int = DEFAULT_ORIGIN
    symbols: dict[str, Symbol] = field(default_factory=dict)
    line_addresses: list[int] = field(default_factory=list)

    def advance(self, words: int) -> None:
        """Move the location counter forward, wrapping at 16 bits."""
        self.address = (self.address + words) & WORD_MASK


@dataclass
class ListingEntry:
    """
    One line of assembler output, used for listings.

    Attributes:
        address: Word address of the line
        words: Words emitted by the line (may be empty)
        line: The parsed source line
    """
    address: int
    words: list[int]
    line: ParsedLine


# =============================================================================
# Code Generator
# =============================================================================

class CodeGenerator:
    """
    Generates Toy16 machine code from parsed lines.

    The code generator maintains:
    - The assembly context (location counter, symbols, line addresses)
    - The output word buffer
    - Listing entries for each line

    A generator can be reused; each ``generate`` call starts from scratch.

    Usage:
        codegen = CodeGenerator()
        code = codegen.generate(parse_source(text))
    """

    def __init__(self, config: Optional[AssemblerConfig] = None):
        self._config = config or AssemblerConfig()
        self._context = AssemblyContext(address=self._config.origin)
        self._words: list[int] = []
        self._listing: list[ListingEntry] = []

    # =========================================================================
    # Public Interface
    # =========================================================================

    @property
    def context(self) -> AssemblyContext:
        """The context built by the last pass 1."""
        return self._context

    def generate(self, lines: list[ParsedLine]) -> bytes:
        """
        Assemble parsed lines into a little-endian byte image.

        Args:
            lines: Parsed source lines, in source order

        Returns:
            The machine code bytes

        Raises:
            AssemblerError: On the first error in either pass
        """
        self._context = AssemblyContext(address=self._config.origin)
        self._words = []
        self._listing = []

        self._pass1(lines)
        logger.debug(
            f"Pass 1: {len(lines)} lines, {len(self._context.symbols)} symbols, "
            f"end address 0x{self._context.address:04X}"
        )

        self._pass2(lines)
        logger.debug(f"Pass 2: emitted {len(self._words)} words")

        return self.get_code()

    def get_words(self) -> list[int]:
        """Return the generated words."""
        return list(self._words)

    def get_code(self) -> bytes:
        """Return the generated words as little-endian bytes."""
        return words_to_bytes(self._words)

    def get_origin(self) -> int:
        """Address of the first emitted word (configured origin if none)."""
        for entry in self._listing:
            if entry.words:
                return entry.address
        return self._config.origin

    def get_symbols(self) -> dict[str, int]:
        """Return the symbol table as name -> word address."""
        return {name: sym.value for name, sym in self._context.symbols.items()}

    def get_listing_entries(self) -> list[ListingEntry]:
        """Listing records from the last successful run."""
        return list(self._listing)

    def get_listing(self) -> str:
        """
        Get the assembly listing as a string.

        Returns:
            Listing with word addresses, emitted words and source lines,
            followed by the symbol table.
        """
        lines = []
        lines.append("Toy16 Assembler Listing")
        lines.append("=" * 60)
        lines.append("")
        lines.append("Addr   Code         Line  Source")
        lines.append("-" * 60)
        for entry in self._listing:
            if entry.line.kind == LineKind.EMPTY and entry.line.label is None:
                addr_str = "     "
            else:
                addr_str = f"{entry.address:04X}:"
            code_str = " ".join(f"{w:04X}" for w in entry.words)
            lines.append(f"{addr_str}  {code_str:11s}  {entry.line.line_no:4d}  {entry.line.source}")
        lines.append("")
        lines.append("Symbol Table")
        lines.append("-" * 30)
        for name, sym in sorted(self._context.symbols.items()):
            lines.append(f"{name:20s} = 0x{sym.value:04X}")
        return "\n".join(lines)

    def write_listing(self, filepath: str | Path) -> None:
        """Write the assembly listing to a file."""
        with open(filepath, "w") as f:
            f.write(self.get_listing())
            f.write("\n")

    def write_symbols(self, filepath: str | Path) -> None:
        """
        Write the symbol table file.

        Format: name address (one per line)
        """
        with open(filepath, "w") as f:
            f.write("# Symbol table\n")
            f.write("# Generated by toyasm\n")
            for name, sym in sorted(self._context.symbols.items()):
                f.write(f"{name} 0x{sym.value:04X}\n")

    # =========================================================================
    # Pass 1: Address Assignment
    # =========================================================================

    def _pass1(self, lines: list[ParsedLine]) -> None:
        """
        First pass: assign addresses and collect labels.

        Only sizes are computed here; operands are not validated unless
        their kind decides the line's size or the line is a ``.org``.
        """
        ctx = self._context

        for line in lines:
            ctx.line_addresses.append(ctx.address)

            if line.label is not None:
                self._define_label(line)

            if line.kind == LineKind.DIRECTIVE:
                self._pass1_directive(line)
            elif line.kind == LineKind.INSTRUCTION:
                self._pass1_instruction(line)

    def _define_label(self, line: ParsedLine) -> None:
        """Bind the line's label to the current address."""
        symbols = self._context.symbols
        location = SourceLocation(line.filename, line.line_no, line.label_column)

        if line.label in symbols:
            raise DuplicateSymbolError(
                line.label,
                location=location,
                original_location=symbols[line.label].location,
                source_line=line.source,
            )

        symbols[line.label] = Symbol(line.label, self._context.address, location)

    def _pass1_directive(self, line: ParsedLine) -> None:
        name = line.op.upper()

        if name == ".ORG":
            self._context.address = self._resolve_org(line)

        elif name == ".WORD":
            self._context.advance(1)

        # Unknown directives occupy no space; pass 2 reports them

    def _pass1_instruction(self, line: ParsedLine) -> None:
        mnemonic = line.op.upper()

        if mnemonic not in MNEMONICS:
            if self._config.strict_mnemonics:
                raise self._unknown_instruction(line)
            # Sized as zero words; pass 2 rejects it
            return

        has_immediate_source = (
            len(line.operands) == 2 and line.operands[1].kind == OperandKind.IMMEDIATE
        )
        self._context.advance(instruction_size(mnemonic, has_immediate_source))

    def _resolve_org(self, line: ParsedLine) -> int:
        """
        Resolve the operand of ``.org``.

        Accepts exactly one raw number; with ``org_accepts_labels`` a label
        defined on an earlier line is accepted too.
        """
        operands = line.operands
        if len(operands) != 1:
            raise DirectiveError(
                ".org expects exactly one numeric operand",
                line.location,
                hint=f"usage: {USAGE['.ORG']}",
                source_line=line.source,
            )

        operand = operands[0]
        if operand.kind == OperandKind.RAW_NUMBER:
            return self._resolve_number(operand, line)

        if operand.kind == OperandKind.LABEL_REFERENCE and self._config.org_accepts_labels:
            # Only labels already seen in pass 1 have an address
            return self._lookup_symbol(operand, line)

        hint = None
        if operand.kind == OperandKind.LABEL_REFERENCE:
            hint = "label operands for .org are disabled (enable org_accepts_labels)"
        raise DirectiveError(
            ".org expects one numeric operand",
            operand.location or line.location,
            hint=hint,
            source_line=line.source,
        )

    # =========================================================================
    # Pass 2: Encoding
    # =========================================================================

    def _pass2(self, lines: list[ParsedLine]) -> None:
        """
        Second pass: encode every line at the address pass 1 assigned.

        Output is only stored once every line has been encoded.

        Raises:
            AssemblerError: If a line emits a different number of words
                than pass 1 reserved for it
        """
        addresses = self._context.line_addresses
        output: list[int] = []
        listing: list[ListingEntry] = []

        for index, line in enumerate(lines):
            address = addresses[index]
            words = self._encode_line(line, address)

            expected = self._reserved_words(index, lines)
            if expected is not None and len(words) != expected:
                raise AssemblerError(
                    f"internal error: line emitted {len(words)} words, "
                    f"pass 1 reserved {expected}",
                    line.location,
                    source_line=line.source,
                )

            output.extend(words)
            listing.append(ListingEntry(address, words, line))

        self._words = output
        self._listing = listing

    def _reserved_words(self, index: int, lines: list[ParsedLine]) -> Optional[int]:
        """Words pass 1 reserved for a line, or None when .org moved the counter."""
        line = lines[index]
        if line.kind == LineKind.DIRECTIVE and line.op.upper() == ".ORG":
            return None
        if index + 1 < len(lines):
            end = self._context.line_addresses[index + 1]
        else:
            end = self._context.address
        return (end - self._context.line_addresses[index]) & WORD_MASK

    def _encode_line(self, line: ParsedLine, address: int) -> list[int]:
        if line.kind == LineKind.DIRECTIVE:
            return self._encode_directive(line)
        if line.kind == LineKind.INSTRUCTION:
            return self._encode_instruction(line, address)
        return []

    def _encode_directive(self, line: ParsedLine) -> list[int]:
        name = line.op.upper()

        if name == ".ORG":
            return []

        if name == ".WORD":
            if len(line.operands) != 1:
                raise DirectiveError(
                    ".word expects one operand",
                    line.location,
                    hint=f"usage: {USAGE['.WORD']}",
                    source_line=line.source,
                )
            operand = line.operands[0]
            if operand.kind == OperandKind.RAW_NUMBER:
                return [self._resolve_number(operand, line)]
            if operand.kind == OperandKind.LABEL_REFERENCE:
                return [self._lookup_symbol(operand, line)]
            raise DirectiveError(
                f"unsupported operand '{operand}' for .word",
                operand.location or line.location,
                hint=f"usage: {USAGE['.WORD']}",
                source_line=line.source,
            )

        raise DirectiveError(
            f"unknown directive '{line.op}'",
            line.location,
            hint="supported directives: .org, .word",
            source_line=line.source,
        )

    def _encode_instruction(self, line: ParsedLine, address: int) -> list[int]:
        mnemonic = line.op.upper()
        opcode = get_opcode(mnemonic)
        if opcode is None:
            raise self._unknown_instruction(line)

        if mnemonic in INHERENT_INSTRUCTIONS:
            if line.operands:
                raise self._operand_error(line, "takes no operands")
            return [pack_instruction(opcode, Mode.REGISTER)]

        if mnemonic == Opcode.ADD.name:
            return self._encode_add(line, opcode)

        if mnemonic in JUMP_INSTRUCTIONS:
            return self._encode_jump(line, opcode, address)

        raise self._unknown_instruction(line)

    def _encode_add(self, line: ParsedLine, opcode: int) -> list[int]:
        """
        Encode ``ADD rd, rs`` (mode 0, one word) or ``ADD rd, #imm``
        (mode 1, instruction word followed by the immediate).
        """
        if len(line.operands) != 2:
            raise self._operand_error(line, f"expects two operands, got {len(line.operands)}")

        dest, src = line.operands
        if dest.kind != OperandKind.REGISTER:
            raise self._operand_error(line, "first operand must be a register", dest)

        if src.kind == OperandKind.REGISTER:
            return [pack_instruction(opcode, Mode.REGISTER, dest.register, src.register)]

        if src.kind == OperandKind.IMMEDIATE:
            value = self._resolve_number(src, line)
            return [pack_instruction(opcode, Mode.IMMEDIATE, dest.register, 0), value]

        raise self._operand_error(line, f"does not accept '{src}' as a source operand", src)

    def _encode_jump(self, line: ParsedLine, opcode: int, address: int) -> list[int]:
        """
        Encode ``JMP``/``JZ``: instruction word then the PC-relative offset.

        The offset is measured from the word after the offset word and
        masked to 16 bits without a range check.
        """
        if len(line.operands) != 1:
            raise self._operand_error(line, f"expects one operand, got {len(line.operands)}")

        operand = line.operands[0]
        if operand.kind == OperandKind.LABEL_REFERENCE:
            target = self._lookup_symbol(operand, line)
        elif operand.kind == OperandKind.RAW_NUMBER:
            target = self._resolve_number(operand, line)
        else:
            raise self._operand_error(line, f"does not accept '{operand}' as a target", operand)

        return [pack_instruction(opcode, Mode.RELATIVE), relative_offset(address, target)]

    # =========================================================================
    # Resolution Helpers
    # =========================================================================

    def _resolve_number(self, operand: Operand, line: ParsedLine) -> int:
        return parse_number16(operand.text, operand.location or line.location, line.source)

    def _lookup_symbol(self, operand: Operand, line: ParsedLine) -> int:
        """Resolve a label reference (case-sensitive)."""
        symbol = self._context.symbols.get(operand.text)
        if symbol is None:
            similar = get_close_matches(operand.text, list(self._context.symbols), n=3)
            # Case-only mismatches are the most likely typo
            similar += [
                name for name in self._context.symbols
                if name.lower() == operand.text.lower() and name not in similar
            ]
            raise UndefinedSymbolError(
                operand.text,
                location=operand.location or line.location,
                source_line=line.source,
                similar_symbols=similar,
            )
        return symbol.value

    def _operand_error(self, line: ParsedLine, problem: str,
                       operand: Optional[Operand] = None) -> OperandError:
        location = operand.location if operand and operand.location else line.location
        return OperandError(
            line.op.upper(),
            problem,
            location=location,
            source_line=line.source,
            usage=USAGE.get(line.op.upper()),
        )

    def _unknown_instruction(self, line: ParsedLine) -> UnknownInstructionError:
        return UnknownInstructionError(
            line.op,
            location=line.location,
            source_line=line.source,
            supported=[op.name for op in Opcode],
        )


# =============================================================================
# Serialization
# =============================================================================

def words_to_bytes(words: list[int]) -> bytes:
    """Serialize 16-bit words little-endian (low byte first)."""
    return struct.pack(f"<{len(words)}H", *(w & WORD_MASK for w in words))


def bytes_to_words(data: bytes) -> list[int]:
    """
    Deserialize a little-endian word image.

    Raises:
        ValueError: If the data has an odd number of bytes
    """
    if len(data) % 2:
        raise ValueError(f"image length {len(data)} is not a whole number of words")
    return list(struct.unpack(f"<{len(data) // 2}H", data))
