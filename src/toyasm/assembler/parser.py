"""
Toy16 Assembly Language Parser
==============================

This module implements the line parser for Toy16 assembly language. It
turns the tokens of one source line into a ``ParsedLine`` record that
the code generator consumes.

Line Grammar
------------
::

    line     := [IDENTIFIER ':'] [name operands]
    name     := IDENTIFIER                  ; '.'-prefixed => directive
    operands := { [','] operand }
    operand  := REGISTER | '#' NUMBER | NUMBER | IDENTIFIER

Commas are separators that may be omitted or repeated; ``ADD R0 R1`` and
``ADD R0,,R1`` both parse as two operands.

Operand Kinds
-------------

| Syntax   | Kind            | Example     |
|----------|-----------------|-------------|
| Rn       | REGISTER        | R2          |
| #number  | IMMEDIATE       | #0x10       |
| number   | RAW_NUMBER      | 0x9000      |
| name     | LABEL_REFERENCE | loop        |

IMMEDIATE and RAW_NUMBER only differ in how they were written. Numeric
text is kept raw; the code generator resolves and range-checks it.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Optional

from toyasm.cpu import register_id
from toyasm.errors import AssemblySyntaxError, SourceLocation
from toyasm.assembler.lexer import Lexer, Token, TokenType


# =============================================================================
# Line and Operand Kinds
# =============================================================================

class LineKind(Enum):
    """What a source line contains besides an optional label."""
    EMPTY = auto()        # Blank, comment-only, or label-only
    INSTRUCTION = auto()  # Mnemonic with operands
    DIRECTIVE = auto()    # .org / .word (any '.'-prefixed name)


class OperandKind(Enum):
    """Syntactic operand categories."""
    REGISTER = auto()
    IMMEDIATE = auto()
    LABEL_REFERENCE = auto()
    RAW_NUMBER = auto()


# =============================================================================
# Parsed Line Data Classes
# =============================================================================

@dataclass
class Operand:
    """
    One operand of an instruction or directive.

    Attributes:
        kind: The operand category
        text: Raw text (register name, numeric literal, or label name)
        location: Where the operand starts in the source
        register: Register number for REGISTER operands
    """
    kind: OperandKind
    text: str
    location: Optional[SourceLocation] = None
    register: Optional[int] = None

    def __str__(self) -> str:
        if self.kind == OperandKind.IMMEDIATE:
            return f"#{self.text}"
        return self.text


@dataclass
class ParsedLine:
    """
    Parsed form of a single source line.

    Attributes:
        line_no: Source line number (1-indexed)
        kind: EMPTY, INSTRUCTION or DIRECTIVE
        label: Label defined on this line, if any (original spelling)
        op: Mnemonic or directive name as written
        operands: Ordered operand list
        source: Raw text of the line (for errors and listings)
        filename: Source file name
        column: Column of the mnemonic/directive (0 when absent)
        label_column: Column of the label (0 when absent)
    """
    line_no: int = 0
    kind: LineKind = LineKind.EMPTY
    label: Optional[str] = None
    op: str = ""
    operands: list[Operand] = field(default_factory=list)
    source: str = ""
    filename: str = "<input>"
    column: int = 0
    label_column: int = 0

    @property
    def location(self) -> SourceLocation:
        """Location of the mnemonic/directive (or the line start)."""
        return SourceLocation(self.filename, self.line_no, self.column)

    @property
    def is_directive(self) -> bool:
        return self.kind == LineKind.DIRECTIVE

    @property
    def is_instruction(self) -> bool:
        return self.kind == LineKind.INSTRUCTION


# =============================================================================
# Parser Implementation
# =============================================================================

class Parser:
    """
    Parses the tokens of one line into a ParsedLine.

    Usage:
        tokens = Lexer(text, filename, line_no).tokenize()
        line = Parser(tokens, line_no, filename, text).parse()
    """

    def __init__(
        self,
        tokens: list[Token],
        line_no: int = 1,
        filename: str = "<input>",
        source: str = "",
    ):
        self._tokens = tokens
        self._line_no = line_no
        self._filename = filename
        self._source = source.rstrip("\r\n")
        self._pos = 0

    def parse(self) -> ParsedLine:
        """
        Parse the line.

        Returns:
            ParsedLine for the tokens

        Raises:
            AssemblySyntaxError: If the tokens do not match the line grammar
        """
        line = ParsedLine(
            line_no=self._line_no,
            source=self._source,
            filename=self._filename,
        )

        if not self._tokens:
            return line

        # Label prefix
        if self._check(TokenType.IDENTIFIER) and self._peek(1) is not None \
                and self._peek(1).type == TokenType.COLON:
            label = self._advance()
            line.label = label.value
            line.label_column = label.column
            self._advance()  # consume colon

        if self._at_end():
            return line

        name = self._current()
        if name.type != TokenType.IDENTIFIER:
            raise self._error("expected instruction or directive", name)
        self._advance()

        line.op = name.value
        line.column = name.column
        line.kind = LineKind.DIRECTIVE if name.value.startswith(".") else LineKind.INSTRUCTION
        line.operands = self._parse_operands()
        return line

    # =========================================================================
    # Token Navigation
    # =========================================================================

    def _at_end(self) -> bool:
        return self._pos >= len(self._tokens)

    def _current(self) -> Token:
        return self._tokens[self._pos]

    def _peek(self, offset: int = 0) -> Optional[Token]:
        pos = self._pos + offset
        if pos >= len(self._tokens):
            return None
        return self._tokens[pos]

    def _advance(self) -> Token:
        token = self._tokens[self._pos]
        self._pos += 1
        return token

    def _check(self, token_type: TokenType) -> bool:
        return not self._at_end() and self._current().type == token_type

    def _error(self, message: str, token: Optional[Token] = None) -> AssemblySyntaxError:
        if token is not None:
            location = token.location
        else:
            # Point just past the last token of the line
            last = self._tokens[-1]
            location = SourceLocation(
                self._filename, self._line_no, last.column + len(last.value)
            )
        return AssemblySyntaxError(message, location, source_line=self._source)

    # =========================================================================
    # Operand Parsing
    # =========================================================================

    def _parse_operands(self) -> list[Operand]:
        operands: list[Operand] = []

        while not self._at_end():
            token = self._current()

            if token.type == TokenType.COMMA:
                self._advance()
                continue

            if token.type == TokenType.REGISTER:
                self._advance()
                operands.append(Operand(
                    kind=OperandKind.REGISTER,
                    text=token.value,
                    location=token.location,
                    register=register_id(token.value),
                ))

            elif token.type == TokenType.HASH:
                self._advance()
                if not self._check(TokenType.NUMBER):
                    raise self._error("expected number after '#'", self._peek())
                number = self._advance()
                operands.append(Operand(
                    kind=OperandKind.IMMEDIATE,
                    text=number.value,
                    location=token.location,
                ))

            elif token.type == TokenType.NUMBER:
                self._advance()
                operands.append(Operand(
                    kind=OperandKind.RAW_NUMBER,
                    text=token.value,
                    location=token.location,
                ))

            elif token.type == TokenType.IDENTIFIER:
                self._advance()
                operands.append(Operand(
                    kind=OperandKind.LABEL_REFERENCE,
                    text=token.value,
                    location=token.location,
                ))

            else:
                raise self._error(f"unsupported operand syntax '{token.value}'", token)

        return operands


# =============================================================================
# Convenience Functions
# =============================================================================

def parse_line(text: str, line_no: int = 1, filename: str = "<input>") -> ParsedLine:
    """Tokenize and parse a single line of source."""
    tokens = Lexer(text, filename, line_no).tokenize()
    return Parser(tokens, line_no, filename, text).parse()


def parse_source(source: str, filename: str = "<input>") -> list[ParsedLine]:
    """
    Parse a whole source text, one ParsedLine per physical line.

    Blank lines are kept as EMPTY lines so line numbers in errors and
    listings always match the file.

    Raises:
        AssemblySyntaxError: On the first lexical or syntax error
    """
    lines = source.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return [parse_line(text, number, filename) for number, text in enumerate(lines, start=1)]
