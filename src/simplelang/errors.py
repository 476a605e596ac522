"""
SimpleLang Error Hierarchy
==========================

This module defines the exception hierarchy for the SimpleLang compiler.
All exceptions inherit from SimpleLangError, allowing callers to catch
every compiler error with a single except clause if desired.

Exception Hierarchy
-------------------
SimpleLangError (base)
├── SLSyntaxError - wrong token at a grammar position
│   ├── UnexpectedTokenError - token cannot start the expected construct
│   ├── MissingTokenError - required punctuation is absent
│   ├── UnsupportedOperatorError - condition operator other than '=='
│   └── InvalidCharacterError - unrecognized character reached the parser
├── SemanticError - well-formed source that cannot be compiled
│   ├── UnresolvedIdentifierError - use of an undeclared variable
│   └── DuplicateDeclarationError - variable declared twice
├── TableOverflowError - more variables than the table can hold
└── CodeGenError - internal code generation failure

Compilation is fail-fast: the first error detected aborts the whole
compilation and propagates to the caller. Nothing is aggregated.

Error Message Format
--------------------
    filename:line:column: error: description
        source_line_text
        ^ (pointer to error location)
    hint: suggestion for fixing (when available)

Example:
    prog.sl:3:5: error: undeclared identifier 'totl'
        totl = 1;
        ^
    hint: did you mean 'total'?
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import List, Optional


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a location in source code for error reporting.

    Attributes:
        filename: Name of the source file (or "<input>" for string input)
        line: Line number (1-indexed)
        column: Column number (1-indexed)
    """
    filename: str
    line: int
    column: int

    def __str__(self) -> str:
        """Format as 'filename:line:column' for error messages."""
        return f"{self.filename}:{self.line}:{self.column}"


# =============================================================================
# Base Exception
# =============================================================================

class SimpleLangError(Exception):
    """
    Base exception for all SimpleLang compiler errors.

    Attributes:
        message: The error description
        location: Where in the source the error occurred
        hint: A suggestion for fixing the error
        source_line: The actual source text at the error location
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

    def _format_message(self) -> str:
        """
        Format the error message with location, source context, and hint.

            prog.sl:1:5: error: expected identifier
                int 5;
                    ^
            hint: a declaration names a variable, e.g. 'int x;'
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


# =============================================================================
# Syntax Errors
# =============================================================================

class SyntaxErrorKind(Enum):
    """The grammar rule a syntax error violated."""
    EXPECTED_IDENTIFIER = auto()
    EXPECTED_SEMICOLON = auto()
    EXPECTED_ASSIGN = auto()
    EXPECTED_OPERAND = auto()
    EXPECTED_LPAREN = auto()
    EXPECTED_RPAREN = auto()
    EXPECTED_LBRACE = auto()
    EXPECTED_RBRACE = auto()
    EXPECTED_STATEMENT = auto()
    UNSUPPORTED_CONDITION_OPERATOR = auto()
    UNRECOGNIZED_CHARACTER = auto()


class SLSyntaxError(SimpleLangError):
    """
    Syntax error in SimpleLang source code.

    Raised by the parser when a token of the wrong kind appears at a
    grammar position, or a required token is missing.

    Attributes:
        kind: The SyntaxErrorKind describing the violated rule
    """

    def __init__(
        self,
        message: str,
        kind: SyntaxErrorKind,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.kind = kind
        super().__init__(message, location=location, hint=hint, source_line=source_line)


class UnexpectedTokenError(SLSyntaxError):
    """
    Unexpected token during parsing.

    Raised when the current token cannot begin the construct the
    grammar requires (a statement, an operand, a declared name).
    """

    def __init__(
        self,
        found: str,
        expected: str,
        kind: SyntaxErrorKind,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.found = found
        self.expected = expected
        super().__init__(
            f"expected {expected}, found {found}",
            kind,
            location=location,
            source_line=source_line,
        )


class MissingTokenError(SLSyntaxError):
    """
    Required token is missing.

    Raised when a required punctuation token (like ';' or ')') is not
    found where expected.
    """

    def __init__(
        self,
        expected: str,
        found: str,
        kind: SyntaxErrorKind,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.expected = expected
        self.found = found
        super().__init__(
            f"expected '{expected}' before {found}",
            kind,
            location=location,
            source_line=source_line,
        )


class UnsupportedOperatorError(SLSyntaxError):
    """
    Operator not supported in an if condition.

    Conditions are a single '==' comparison of two expressions.
    """

    def __init__(
        self,
        found: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.found = found
        super().__init__(
            f"only '==' is supported in conditions, found {found}",
            SyntaxErrorKind.UNSUPPORTED_CONDITION_OPERATOR,
            location=location,
            hint="write the condition as 'if (a == b)'",
            source_line=source_line,
        )


class InvalidCharacterError(SLSyntaxError):
    """
    Unrecognized character in source code.

    The scanner never fails: it turns an unclassifiable character into
    an UNKNOWN token. This error is raised when the parser rejects it.
    """

    def __init__(
        self,
        char: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.char = char
        super().__init__(
            f"unrecognized character '{char}' (0x{ord(char):02X})",
            SyntaxErrorKind.UNRECOGNIZED_CHARACTER,
            location=location,
            source_line=source_line,
        )


# =============================================================================
# Semantic Errors
# =============================================================================

class SemanticError(SimpleLangError):
    """
    Semantic error in SimpleLang source code.

    The source is syntactically correct but cannot be compiled, e.g.
    a variable is used without a declaration.
    """
    pass


class UnresolvedIdentifierError(SemanticError):
    """
    Reference to an undeclared variable.

    Raised by the code generator when an identifier has no entry in the
    variable table. Similarly-named variables are offered as a hint.
    """

    def __init__(
        self,
        identifier: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
        similar_identifiers: Optional[List[str]] = None,
    ):
        self.identifier = identifier
        self.similar_identifiers = similar_identifiers or []

        if self.similar_identifiers:
            suggestions = ", ".join(f"'{s}'" for s in self.similar_identifiers[:3])
            hint = f"did you mean {suggestions}?"
        else:
            hint = f"declare it first with 'int {identifier};'"

        super().__init__(
            f"undeclared identifier '{identifier}'",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class DuplicateDeclarationError(SemanticError):
    """
    Variable declared more than once.

    Raised unless the compiler is configured to allow redeclaration,
    in which case the later declaration shadows the earlier one.
    """

    def __init__(
        self,
        identifier: str,
        location: Optional[SourceLocation] = None,
        original_location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.identifier = identifier
        self.original_location = original_location

        hint = None
        if original_location:
            hint = f"'{identifier}' was first declared at {original_location}"

        super().__init__(
            f"redeclaration of '{identifier}'",
            location=location,
            hint=hint,
            source_line=source_line,
        )


# =============================================================================
# Resource Errors
# =============================================================================

class TableOverflowError(SimpleLangError, OverflowError):
    """
    Too many variables declared.

    The target CPU addresses a fixed number of variable slots. Declaring
    one more than the table capacity raises this error instead of
    producing an out-of-range offset.
    """

    def __init__(
        self,
        identifier: str,
        capacity: int,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.identifier = identifier
        self.capacity = capacity
        super().__init__(
            f"cannot declare '{identifier}': variable table is full ({capacity} variables)",
            location=location,
            hint=f"a program may declare at most {capacity} variables",
            source_line=source_line,
        )


# =============================================================================
# Code Generation Errors
# =============================================================================

class CodeGenError(SimpleLangError):
    """
    Error during code generation.

    Raised when the generator meets a node it cannot translate. A tree
    built by the parser never triggers this.
    """
    pass
