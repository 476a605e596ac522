"""
SimpleLang Scanner (Tokenizer)
==============================

This module implements the lexical scanner for SimpleLang. It turns a
character source into tokens on demand, one per call to next_token().

Token Categories
----------------
- Keywords: int, if
- Identifiers: a letter followed by letters or digits
- Numbers: one or more decimal digits (no sign, no fraction)
- Operators: = == + -
- Delimiters: ( ) { } ;

Comments
--------
- Single-line: // comment (runs to end of line or end of input)

A lone '/' is not an operator. Like any other character the grammar
does not use, it becomes an UNKNOWN token; the scanner itself never
fails and leaves rejection to the parser.

Example Usage
-------------
>>> from simplelang.lexer import Scanner
>>> for token in Scanner("int x;", "test.sl").tokenize():
...     print(token)
Token(INT, 'int', 1:1)
Token(IDENTIFIER, 'x', 1:5)
Token(SEMICOLON, ';', 1:6)
Token(EOF, 1:7)
"""

import logging
import string
from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator, Optional, TextIO, Union

from simplelang.errors import SourceLocation

logger = logging.getLogger(__name__)

# Longest identifier or number kept; the rest of the run is dropped
MAX_LEXEME_LENGTH = 99


# =============================================================================
# Token Type Enumeration
# =============================================================================

class TokenType(Enum):
    """Token types for SimpleLang."""

    # === Structural ===
    EOF = auto()            # End of input
    UNKNOWN = auto()        # Unrecognized character

    # === Identifiers and Literals ===
    IDENTIFIER = auto()
    NUMBER = auto()

    # === Keywords ===
    INT = auto()            # int
    IF = auto()             # if

    # === Operators ===
    ASSIGN = auto()         # =
    EQUAL = auto()          # ==
    PLUS = auto()           # +
    MINUS = auto()          # -

    # === Delimiters ===
    LPAREN = auto()         # (
    RPAREN = auto()         # )
    LBRACE = auto()         # {
    RBRACE = auto()         # }
    SEMICOLON = auto()      # ;


KEYWORDS: dict[str, TokenType] = {
    "int": TokenType.INT,
    "if": TokenType.IF,
}

SINGLE_CHAR_TOKENS: dict[str, TokenType] = {
    "+": TokenType.PLUS,
    "-": TokenType.MINUS,
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    "{": TokenType.LBRACE,
    "}": TokenType.RBRACE,
    ";": TokenType.SEMICOLON,
}


def split_source_lines(source: str) -> list[str]:
    """
    Split source into lines the way the scanner numbers them.

    Only '\\n' ends a line; '\\r', '\\v' and '\\f' are ordinary whitespace.
    A trailing '\\r' from a CRLF line ending is dropped.
    """
    return [line.rstrip("\r") for line in source.split("\n")]


# =============================================================================
# Token Data Class
# =============================================================================

@dataclass(frozen=True)
class Token:
    """
    A single token from SimpleLang source.

    Attributes:
        type: The TokenType classification
        text: The raw lexeme (empty for EOF)
        value: Integer value for NUMBER tokens, None otherwise
        line: Line number in source (1-indexed)
        column: Column number in source (1-indexed)
        filename: Name of the source file
    """
    type: TokenType
    text: str
    value: Optional[int]
    line: int
    column: int
    filename: str = "<input>"

    def __repr__(self) -> str:
        if self.type == TokenType.EOF:
            return f"Token(EOF, {self.line}:{self.column})"
        return f"Token({self.type.name}, {self.text!r}, {self.line}:{self.column})"

    @property
    def location(self) -> SourceLocation:
        """Return a SourceLocation for error reporting."""
        return SourceLocation(self.filename, self.line, self.column)

    def describe(self) -> str:
        """Human-readable description for diagnostics."""
        if self.type == TokenType.EOF:
            return "end of input"
        return f"'{self.text}'"


# =============================================================================
# Scanner Implementation
# =============================================================================

class Scanner:
    """
    Tokenizes SimpleLang source code on demand.

    The scanner owns its position in the source; no state is shared
    between instances. Each call to next_token() returns the next token,
    and once the input is exhausted every further call returns EOF.

    Usage:
        scanner = Scanner(source_text, filename)
        token = scanner.next_token()

    Attributes:
        source: The complete source text
        filename: Name of the source file (for error reporting)
        max_lexeme_length: Longest identifier/number lexeme kept
    """

    LETTERS = string.ascii_letters
    DIGITS = string.digits
    WHITESPACE = " \t\n\r\v\f"

    def __init__(
        self,
        source: Union[str, TextIO],
        filename: str = "<input>",
        max_lexeme_length: int = MAX_LEXEME_LENGTH,
    ):
        """
        Initialize the scanner.

        Args:
            source: Source text, or a readable text stream
            filename: Name of the source file (for error messages)
            max_lexeme_length: Longest identifier/number lexeme kept
        """
        if hasattr(source, "read"):
            source = source.read()
        self.source = source
        self.filename = filename
        self.max_lexeme_length = max_lexeme_length

        self._pos = 0
        self._line = 1
        self._column = 1

    def tokenize(self) -> Iterator[Token]:
        """
        Generate every token up to and including EOF.

        Yields:
            Token objects in source order
        """
        while True:
            token = self.next_token()
            yield token
            if token.type == TokenType.EOF:
                return

    def next_token(self) -> Token:
        """Scan and return the next token."""
        self._skip_whitespace_and_comments()

        start_line = self._line
        start_column = self._column

        if self._at_end():
            return self._make_token(TokenType.EOF, "", start_line, start_column)

        char = self._peek()

        if char in self.LETTERS:
            return self._scan_identifier(start_line, start_column)

        if char in self.DIGITS:
            return self._scan_number(start_line, start_column)

        return self._scan_operator(start_line, start_column)

    def source_line(self, line: int) -> Optional[str]:
        """Return the text of a 1-indexed source line, if it exists."""
        lines = split_source_lines(self.source)
        if 0 < line <= len(lines):
            return lines[line - 1]
        return None

    # =========================================================================
    # Character Access Methods
    # =========================================================================

    def _at_end(self) -> bool:
        return self._pos >= len(self.source)

    def _peek(self, offset: int = 0) -> str:
        """Look at a character without consuming it ('' past the end)."""
        pos = self._pos + offset
        if pos >= len(self.source):
            return ""
        return self.source[pos]

    def _advance(self) -> str:
        """Consume and return the current character, tracking line/column."""
        if self._at_end():
            return ""

        char = self.source[self._pos]
        self._pos += 1

        if char == "\n":
            self._line += 1
            self._column = 1
        else:
            self._column += 1

        return char

    def _match(self, expected: str) -> bool:
        """Consume the next character if it matches expected."""
        if self._peek() == expected:
            self._advance()
            return True
        return False

    def _make_token(
        self,
        token_type: TokenType,
        text: str,
        line: int,
        column: int,
        value: Optional[int] = None,
    ) -> Token:
        return Token(
            type=token_type,
            text=text,
            value=value,
            line=line,
            column=column,
            filename=self.filename,
        )

    # =========================================================================
    # Whitespace and Comment Handling
    # =========================================================================

    def _skip_whitespace_and_comments(self) -> None:
        """Skip whitespace and // comments."""
        while not self._at_end():
            char = self._peek()

            if char in self.WHITESPACE:
                self._advance()
                continue

            if char == "/" and self._peek(1) == "/":
                while not self._at_end() and self._peek() != "\n":
                    self._advance()
                continue

            break

    # =========================================================================
    # Token Scanning
    # =========================================================================

    def _scan_run(self, allowed: str, start_line: int, start_column: int) -> str:
        """
        Consume a maximal run of allowed characters.

        Characters past max_lexeme_length are consumed but not kept.
        """
        chars = []
        while self._peek() and self._peek() in allowed:
            chars.append(self._advance())

        if len(chars) > self.max_lexeme_length:
            logger.warning(
                f"{self.filename}:{start_line}:{start_column}: lexeme truncated "
                f"to {self.max_lexeme_length} characters (was {len(chars)})"
            )
            chars = chars[:self.max_lexeme_length]

        return "".join(chars)

    def _scan_identifier(self, start_line: int, start_column: int) -> Token:
        """Scan an identifier or keyword."""
        name = self._scan_run(self.LETTERS + self.DIGITS, start_line, start_column)
        token_type = KEYWORDS.get(name, TokenType.IDENTIFIER)
        return self._make_token(token_type, name, start_line, start_column)

    def _scan_number(self, start_line: int, start_column: int) -> Token:
        """Scan a non-negative decimal integer."""
        digits = self._scan_run(self.DIGITS, start_line, start_column)
        return self._make_token(
            TokenType.NUMBER, digits, start_line, start_column, value=int(digits)
        )

    def _scan_operator(self, start_line: int, start_column: int) -> Token:
        """Scan an operator, delimiter, or unrecognized character."""
        char = self._advance()

        if char == "=":
            if self._match("="):
                return self._make_token(TokenType.EQUAL, "==", start_line, start_column)
            return self._make_token(TokenType.ASSIGN, "=", start_line, start_column)

        if char in SINGLE_CHAR_TOKENS:
            return self._make_token(SINGLE_CHAR_TOKENS[char], char, start_line, start_column)

        logger.debug(f"{self.filename}:{start_line}:{start_column}: unrecognized character {char!r}")
        return self._make_token(TokenType.UNKNOWN, char, start_line, start_column)
