"""
toyasm Error Hierarchy
======================

This module defines the exception hierarchy for the toolchain. All
exceptions inherit from ToyAsmError, allowing callers to catch every
toolchain error with a single except clause if desired.

Exception Hierarchy
-------------------
ToyAsmError (base)
├── AssemblerError (assembler-related)
│   ├── AssemblySyntaxError - syntax errors in source
│   │   └── LexicalError - unrecognized character
│   ├── UndefinedSymbolError - reference to undefined label
│   ├── DuplicateSymbolError - label defined multiple times
│   ├── OperandError - wrong operand count or kind for a mnemonic
│   ├── UnknownInstructionError - mnemonic outside the instruction table
│   ├── ValueRangeError - numeric literal outside 0..65535 or malformed
│   └── DirectiveError - error in .org / .word or unknown directive
└── EmulatorError (execution engine faults)

Error messages follow this format:
    filename:line:column: error: description
        source_line_text
        ^ (pointer to error location)
    hint: suggestion for fixing (when available)

Assembly is all-or-nothing: the first error aborts the run, so there is
no error collection or warning mode.
"""

from dataclasses import dataclass
from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class ToyAsmError(Exception):
    """
    Base exception for all toolchain errors.

        try:
            assemble(source)
        except ToyAsmError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    A location in source code for error reporting.

    Attributes:
        filename: Name of the source file (or "<input>" for string input)
        line: Line number (1-indexed)
        column: Column number (1-indexed, 0 when unknown)
    """
    filename: str
    line: int
    column: int

    def __str__(self) -> str:
        """Format as 'filename:line:column' for error messages."""
        return f"{self.filename}:{self.line}:{self.column}"


# =============================================================================
# Assembler Exceptions
# =============================================================================

class AssemblerError(ToyAsmError):
    """
    Base exception for all assembler-related errors.

    Attributes:
        message: The error description
        location: Where in the source the error occurred (optional)
        hint: A suggestion for fixing the error (optional)
        source_line: The actual source text at the error location (optional)
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.message = message
        self.location = location
        self.hint = hint
        self.source_line = source_line
        super().__init__(self._format_message())

    @property
    def line(self) -> Optional[int]:
        """Source line number of the error, if known."""
        return self.location.line if self.location else None

    def _format_message(self) -> str:
        """
        Format the error message with location, source context, and hint.

        Example output:
            prog.asm:3:9: error: undefined symbol 'lop'
                JMP lop
                    ^
            hint: did you mean 'loop'?
        """
        parts = []

        if self.location:
            parts.append(f"{self.location}: error: {self.message}")
        else:
            parts.append(f"error: {self.message}")

        if self.source_line is not None and self.location is not None:
            parts.append(f"    {self.source_line}")
            if self.location.column > 0:
                padding = " " * (4 + self.location.column - 1)
                parts.append(f"{padding}^")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)


class AssemblySyntaxError(AssemblerError):
    """
    Syntax error in assembly source code.

    Raised when a line's tokens do not match the line grammar.

    Examples:
        - Label followed by a number instead of a mnemonic
        - '#' not followed by a number
        - Unsupported operand token such as '[' or '+'
    """
    pass


class LexicalError(AssemblySyntaxError):
    """
    A character that cannot start any token.

    Raised by the lexer; inherits from AssemblySyntaxError so callers
    that only care about "bad source text" can catch one class.
    """
    pass


class UndefinedSymbolError(AssemblerError):
    """
    Reference to an undefined label.

    The assembler suggests similarly-named labels when this error occurs,
    which catches most typos and case mismatches (labels are case-sensitive).
    """

    def __init__(
        self,
        symbol: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
        similar_symbols: Optional[list[str]] = None,
    ):
        self.symbol = symbol
        self.similar_symbols = similar_symbols or []

        if not hint and self.similar_symbols:
            suggestions = ", ".join(f"'{s}'" for s in self.similar_symbols[:3])
            hint = f"did you mean {suggestions}?"

        super().__init__(
            f"undefined symbol '{symbol}'",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class DuplicateSymbolError(AssemblerError):
    """
    Label defined more than once.

    Includes the original definition location in the hint when known.
    """

    def __init__(
        self,
        symbol: str,
        location: Optional[SourceLocation] = None,
        original_location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.symbol = symbol
        self.original_location = original_location

        hint = None
        if original_location:
            hint = f"'{symbol}' was first defined at {original_location}"

        super().__init__(
            f"duplicate symbol '{symbol}'",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class OperandError(AssemblerError):
    """
    Wrong operand count or kind for an instruction.

    Example:
        ADD #1, R0    ; Error: destination must be a register
    """

    def __init__(
        self,
        mnemonic: str,
        problem: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
        usage: Optional[str] = None,
    ):
        self.mnemonic = mnemonic
        self.problem = problem
        self.usage = usage

        hint = f"usage: {usage}" if usage else None

        super().__init__(
            f"'{mnemonic}' {problem}",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class UnknownInstructionError(AssemblerError):
    """
    Mnemonic that is not part of the instruction table.
    """

    def __init__(
        self,
        mnemonic: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
        supported: Optional[list[str]] = None,
    ):
        self.mnemonic = mnemonic
        self.supported = supported or []

        hint = None
        if self.supported:
            hint = f"supported instructions: {', '.join(self.supported)}"

        super().__init__(
            f"unsupported instruction '{mnemonic}'",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class ValueRangeError(AssemblerError):
    """
    Numeric literal that is malformed or does not fit in 16 bits.

    Every immediate, raw number and directive operand must resolve to an
    unsigned value in 0..65535.
    """
    pass


class DirectiveError(AssemblerError):
    """
    Error in an assembler directive.

    Examples:
        - .org without exactly one numeric operand
        - .word with an immediate or register operand
        - a directive name other than .org / .word
    """
    pass


# =============================================================================
# Execution Engine Exceptions
# =============================================================================

class EmulatorError(ToyAsmError):
    """
    Fault raised by the execution engine.

    Raised for undecodable instructions, badly sized program images and
    loads that do not fit in memory.
    """

    def __init__(self, message: str, pc: Optional[int] = None):
        self.pc = pc
        if pc is not None:
            message = f"{message} (pc=0x{pc:04X})"
        super().__init__(message)
