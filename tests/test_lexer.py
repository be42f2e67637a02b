# =============================================================================
# test_lexer.py - Lexer Unit Tests
# =============================================================================
# Tests for the Toy16 assembler lexer/tokenizer.
#
# Test coverage includes:
#   - Identifiers, registers and directive names
#   - Numeric literals (kept as raw text)
#   - Delimiters and comments
#   - Column and line tracking
#   - Error conditions
# =============================================================================

import pytest
from toyasm.assembler.lexer import Lexer, TokenType, Token, tokenize_line
from toyasm.errors import AssemblySyntaxError, LexicalError


# =============================================================================
# Helper Function
# =============================================================================

def tokenize(source: str, line_number: int = 1) -> list:
    """Tokenize one line with a test filename."""
    return Lexer(source, "<test>", line_number=line_number).tokenize()


def types(source: str) -> list:
    return [t.type for t in tokenize(source)]


# =============================================================================
# Basic Token Recognition Tests
# =============================================================================

class TestBasicTokens:
    """Test basic token recognition for simple inputs."""

    def test_empty_line(self):
        """Empty lines produce no tokens."""
        assert tokenize("") == []

    def test_whitespace_only(self):
        """Spaces, tabs and line endings are skipped."""
        assert tokenize("  \t \r\n") == []

    def test_identifier(self):
        tokens = tokenize("loop")
        assert len(tokens) == 1
        assert tokens[0].type == TokenType.IDENTIFIER
        assert tokens[0].value == "loop"

    def test_identifier_keeps_case(self):
        """Labels are case-sensitive, so spelling is preserved."""
        assert tokenize("MyLabel")[0].value == "MyLabel"

    def test_identifier_with_underscore_and_digits(self):
        tokens = tokenize("_loop_2")
        assert tokens[0].type == TokenType.IDENTIFIER
        assert tokens[0].value == "_loop_2"

    def test_directive_name(self):
        """A dot followed by a letter starts a directive identifier."""
        tokens = tokenize(".org")
        assert tokens[0].type == TokenType.IDENTIFIER
        assert tokens[0].value == ".org"

    def test_delimiters(self):
        assert types(", : # [ ] +") == [
            TokenType.COMMA,
            TokenType.COLON,
            TokenType.HASH,
            TokenType.LBRACKET,
            TokenType.RBRACKET,
            TokenType.PLUS,
        ]


# =============================================================================
# Register Tests
# =============================================================================

class TestRegisters:
    """R0..R3 are recognized in any case."""

    @pytest.mark.parametrize("text", ["R0", "R1", "R2", "R3"])
    def test_uppercase_registers(self, text):
        tokens = tokenize(text)
        assert tokens[0].type == TokenType.REGISTER
        assert tokens[0].value == text

    def test_lowercase_register_normalised(self):
        tokens = tokenize("r2")
        assert tokens[0].type == TokenType.REGISTER
        assert tokens[0].value == "R2"

    def test_r4_is_identifier(self):
        """Only four registers exist."""
        tokens = tokenize("R4")
        assert tokens[0].type == TokenType.IDENTIFIER
        assert tokens[0].value == "R4"

    def test_register_prefix_in_longer_name(self):
        tokens = tokenize("R0x")
        assert tokens[0].type == TokenType.IDENTIFIER
        assert tokens[0].value == "R0x"


# =============================================================================
# Number Tests
# =============================================================================

class TestNumbers:
    """Numbers are kept as raw text; validation happens later."""

    def test_decimal(self):
        tokens = tokenize("42")
        assert tokens[0].type == TokenType.NUMBER
        assert tokens[0].value == "42"

    def test_hex(self):
        tokens = tokenize("0x1F")
        assert len(tokens) == 1
        assert tokens[0].value == "0x1F"

    def test_malformed_number_is_one_token(self):
        """Trailing letters are consumed so the resolver can reject them."""
        tokens = tokenize("12ab")
        assert len(tokens) == 1
        assert tokens[0].type == TokenType.NUMBER
        assert tokens[0].value == "12ab"

    def test_immediate(self):
        assert types("#10") == [TokenType.HASH, TokenType.NUMBER]


# =============================================================================
# Full Line Tests
# =============================================================================

class TestFullLines:
    """Tokenizing complete source lines."""

    def test_instruction_with_label(self):
        tokens = tokenize("start: ADD R0, #10")
        assert [(t.type, t.value) for t in tokens] == [
            (TokenType.IDENTIFIER, "start"),
            (TokenType.COLON, ":"),
            (TokenType.IDENTIFIER, "ADD"),
            (TokenType.REGISTER, "R0"),
            (TokenType.COMMA, ","),
            (TokenType.HASH, "#"),
            (TokenType.NUMBER, "10"),
        ]

    def test_bracket_syntax_tokenizes(self):
        """Brackets lex fine; the parser rejects them."""
        assert types("[R0+1]") == [
            TokenType.LBRACKET,
            TokenType.REGISTER,
            TokenType.PLUS,
            TokenType.NUMBER,
            TokenType.RBRACKET,
        ]


# =============================================================================
# Comment Tests
# =============================================================================

class TestComments:
    """Everything after ';' is ignored."""

    def test_comment_only(self):
        assert tokenize("; just a comment") == []

    def test_trailing_comment(self):
        assert types("NOP ; do nothing") == [TokenType.IDENTIFIER]

    def test_invalid_characters_inside_comment(self):
        """Characters in a comment are never scanned."""
        assert types("HALT ; $ @ ! ?") == [TokenType.IDENTIFIER]


# =============================================================================
# Position Tracking Tests
# =============================================================================

class TestPositions:
    """Columns are 1-indexed; line and filename are carried on each token."""

    def test_columns(self):
        tokens = tokenize("start: ADD R0, #10")
        assert [t.column for t in tokens] == [1, 6, 8, 12, 14, 16, 17]

    def test_line_number_and_filename(self):
        tokens = Lexer("NOP", "prog.asm", line_number=7).tokenize()
        assert tokens[0].line == 7
        assert tokens[0].filename == "prog.asm"
        assert str(tokens[0].location) == "prog.asm:7:1"

    def test_repr(self):
        token = Token(TokenType.IDENTIFIER, "NOP", 1, 1)
        assert repr(token) == "Token(IDENTIFIER, 'NOP', 1:1)"

    def test_tokenize_line_helper(self):
        tokens = tokenize_line("  HALT", line_number=3, filename="x.asm")
        assert tokens[0].column == 3
        assert tokens[0].line == 3


# =============================================================================
# Error Tests
# =============================================================================

class TestLexerErrors:
    """Characters that cannot start a token."""

    def test_unexpected_character(self):
        with pytest.raises(LexicalError) as exc_info:
            tokenize("ADD R0, $5")
        assert exc_info.value.location.column == 9
        assert "unexpected character '$'" in str(exc_info.value)

    def test_lexical_error_is_syntax_error(self):
        with pytest.raises(AssemblySyntaxError):
            tokenize("@")

    def test_lone_dot(self):
        with pytest.raises(LexicalError):
            tokenize(".")

    def test_dot_followed_by_digit(self):
        with pytest.raises(LexicalError):
            tokenize(".5")

    def test_negative_number_rejected(self):
        """There is no minus operator."""
        with pytest.raises(LexicalError):
            tokenize("ADD R0, #-1")

    @pytest.mark.parametrize("line", ["ADD R0, #²", ".word ٣", "JMP ①"])
    def test_non_ascii_digit_rejected(self, line):
        """Only ASCII digits start a number."""
        with pytest.raises(LexicalError, match="unexpected character"):
            tokenize(line)

    def test_error_message_shows_source_and_caret(self):
        with pytest.raises(LexicalError) as exc_info:
            Lexer("NOP !", "prog.asm", 4).tokenize()
        message = str(exc_info.value)
        assert message.startswith("prog.asm:4:5: error:")
        assert "    NOP !" in message
        assert "        ^" in message
