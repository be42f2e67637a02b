"""
Toy16 Assembly Language Lexer
=============================

This module implements the lexer (tokenizer) for Toy16 assembly language.
It converts one line of source text into the list of tokens the line
parser consumes. Lines are independent: no token spans a line break.

Token Types
-----------
- IDENTIFIER: Labels, mnemonics, directive names (``.org``, ``.word``)
- NUMBER: Numeric literals, kept as raw text (``10``, ``0x1F``)
- REGISTER: ``R0``..``R3`` in any case, value normalised to upper case
- Delimiters: ``,`` ``:`` ``#`` ``[`` ``]`` ``+``

Numbers are not validated here. ``0xZZ`` or ``12ab`` lex as a single
NUMBER token and are rejected later when the value is resolved.

Comments
--------
Everything from the first ``;`` to the end of the line is ignored.

Example
-------
>>> from toyasm.assembler.lexer import Lexer
>>> for token in Lexer("start: ADD r0, #10 ; bump", "example.asm").tokenize():
...     print(token)
Token(IDENTIFIER, 'start', 1:1)
Token(COLON, ':', 1:6)
Token(IDENTIFIER, 'ADD', 1:8)
Token(REGISTER, 'R0', 1:12)
Token(COMMA, ',', 1:14)
Token(HASH, '#', 1:16)
Token(NUMBER, '10', 1:17)
"""

from dataclasses import dataclass
from enum import Enum, auto
import string

from toyasm.cpu import REGISTER_NAMES
from toyasm.errors import LexicalError, SourceLocation


# =============================================================================
# Token Type Enumeration
# =============================================================================

class TokenType(Enum):
    """Token types for Toy16 assembly language."""

    # Values
    IDENTIFIER = auto()  # Labels, mnemonics, directives
    NUMBER = auto()      # Numeric literal (raw text)
    REGISTER = auto()    # R0..R3

    # Delimiters
    COMMA = auto()       # ,
    COLON = auto()       # :
    HASH = auto()        # # (immediate mode indicator)
    LBRACKET = auto()    # [
    RBRACKET = auto()    # ]
    PLUS = auto()        # +


# =============================================================================
# Token Data Class
# =============================================================================

@dataclass(frozen=True)
class Token:
    """
    A single token from one source line.

    Attributes:
        type: The TokenType classification
        value: Raw token text (register names are upper-cased)
        line: Line number in source (1-indexed)
        column: Column number in source (1-indexed)
        filename: Name of the source file
    """
    type: TokenType
    value: str
    line: int
    column: int
    filename: str = "<input>"

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.value!r}, {self.line}:{self.column})"

    @property
    def location(self) -> SourceLocation:
        """Return a SourceLocation for error reporting."""
        return SourceLocation(self.filename, self.line, self.column)


# =============================================================================
# Lexer Implementation
# =============================================================================

class Lexer:
    """
    Tokenizes one line of Toy16 assembly source.

    Usage:
        tokens = Lexer(line_text, filename, line_number).tokenize()

    Attributes:
        source: The line being tokenized
        filename: Name of the source file (for error reporting)
        line_number: Line number of this line in the file
    """

    DIGITS = string.digits
    IDENT_START = string.ascii_letters + "_"
    IDENT_CHARS = string.ascii_letters + string.digits + "_"
    NUMBER_CHARS = string.ascii_letters + string.digits

    WHITESPACE = " \t\r\n"

    SINGLE_CHAR_TOKENS = {
        ",": TokenType.COMMA,
        ":": TokenType.COLON,
        "#": TokenType.HASH,
        "[": TokenType.LBRACKET,
        "]": TokenType.RBRACKET,
        "+": TokenType.PLUS,
    }

    REGISTERS = frozenset(REGISTER_NAMES)

    def __init__(self, source: str, filename: str = "<input>", line_number: int = 1):
        self.source = source
        self.filename = filename
        self.line_number = line_number

        # Comment stripping happens before scanning
        comment = source.find(";")
        self._text = source if comment == -1 else source[:comment]
        self._pos = 0

    def tokenize(self) -> list[Token]:
        """
        Produce the tokens of the line, in order.

        Returns:
            List of Token objects (empty for blank or comment-only lines)

        Raises:
            LexicalError: If a character cannot start any token
        """
        tokens: list[Token] = []
        while not self._at_end():
            char = self._peek()

            if char in self.WHITESPACE:
                self._pos += 1
                continue

            if char in self.SINGLE_CHAR_TOKENS:
                tokens.append(self._make_token(self.SINGLE_CHAR_TOKENS[char], char, self._pos))
                self._pos += 1
                continue

            if char in self.DIGITS:
                tokens.append(self._scan_number())
                continue

            if char in self.IDENT_START:
                tokens.append(self._scan_identifier())
                continue

            # Directive names: a dot immediately followed by an identifier
            next_char = self._peek(1)
            if char == "." and next_char and next_char in self.IDENT_START:
                tokens.append(self._scan_identifier())
                continue

            raise self._error(f"unexpected character '{char}'")

        return tokens

    # =========================================================================
    # Character Access Methods
    # =========================================================================

    def _at_end(self) -> bool:
        return self._pos >= len(self._text)

    def _peek(self, offset: int = 0) -> str:
        """Character at current position + offset, or '' past the end."""
        pos = self._pos + offset
        if pos >= len(self._text):
            return ""
        return self._text[pos]

    def _make_token(self, token_type: TokenType, value: str, start: int) -> Token:
        return Token(
            type=token_type,
            value=value,
            line=self.line_number,
            column=start + 1,
            filename=self.filename,
        )

    def _error(self, message: str) -> LexicalError:
        location = SourceLocation(self.filename, self.line_number, self._pos + 1)
        return LexicalError(message, location, source_line=self.source.rstrip("\r\n"))

    # =========================================================================
    # Token Scanning
    # =========================================================================

    def _scan_number(self) -> Token:
        """
        Scan a numeric literal.

        Consumes every letter and digit so that ``0x1F`` stays one token;
        validation is left to value resolution.
        """
        start = self._pos
        # Note: Must check for non-empty string first because '' in 'string' is True in Python
        while self._peek() and self._peek() in self.NUMBER_CHARS:
            self._pos += 1
        return self._make_token(TokenType.NUMBER, self._text[start:self._pos], start)

    def _scan_identifier(self) -> Token:
        """
        Scan an identifier, classifying R0..R3 as registers.

        Identifiers keep their original spelling because label lookups are
        case-sensitive.
        """
        start = self._pos
        self._pos += 1  # first character already validated (letter, _ or .)
        while self._peek() and self._peek() in self.IDENT_CHARS:
            self._pos += 1

        name = self._text[start:self._pos]
        if name.upper() in self.REGISTERS:
            return self._make_token(TokenType.REGISTER, name.upper(), start)
        return self._make_token(TokenType.IDENTIFIER, name, start)


def tokenize_line(line: str, line_number: int = 1, filename: str = "<input>") -> list[Token]:
    """Convenience wrapper: tokenize one line of source."""
    return Lexer(line, filename, line_number).tokenize()
