"""
SimpleLang Recursive Descent Parser
===================================

This module implements a recursive descent parser for SimpleLang. It
pulls tokens from a Scanner one at a time, builds an Abstract Syntax
Tree, and registers every declaration in a VariableTable as it goes.

Grammar (EBNF)
--------------
program     ::= statement*
statement   ::= var_decl | assignment | if_stmt
var_decl    ::= 'int' IDENTIFIER ';'
assignment  ::= IDENTIFIER '=' expression ';'
if_stmt     ::= 'if' '(' expression '==' expression ')' '{' statement '}'
expression  ::= term (('+' | '-') term)*
term        ::= NUMBER | IDENTIFIER

The parser reads strictly left to right with one token of lookahead
and never backtracks. '+' and '-' share one precedence level and
associate to the left.

Error Handling
--------------
Parsing is fail-fast: the first grammar violation raises an
SLSyntaxError subclass and nothing after it is examined. Identifiers
used in expressions are not checked here; the code generator resolves
them against the variable table.

Example Usage
-------------
>>> from simplelang.lexer import Scanner
>>> from simplelang.parser import Parser
>>> parser = Parser(Scanner("int x; x = 1 + 2;", "test.sl"))
>>> program = parser.parse()
>>> parser.table.lookup("x")
0
"""

import logging
from typing import Optional

from simplelang.ast import (
    AssignmentStatement,
    BinaryExpression,
    BinaryOperator,
    Expression,
    IdentifierExpression,
    IfStatement,
    NumberLiteral,
    ProgramNode,
    Statement,
    VariableDeclaration,
)
from simplelang.errors import (
    InvalidCharacterError,
    MissingTokenError,
    SourceLocation,
    SyntaxErrorKind,
    UnexpectedTokenError,
    UnsupportedOperatorError,
)
from simplelang.lexer import Scanner, Token, TokenType
from simplelang.symbols import VariableTable

logger = logging.getLogger(__name__)

ADDITIVE_OPERATORS = {
    TokenType.PLUS: BinaryOperator.ADD,
    TokenType.MINUS: BinaryOperator.SUBTRACT,
}


class Parser:
    """
    Recursive descent parser for SimpleLang.

    Attributes:
        scanner: Token source
        table: Variable table populated with each declaration
    """

    def __init__(self, scanner: Scanner, table: Optional[VariableTable] = None):
        """
        Initialize the parser.

        Args:
            scanner: The scanner to pull tokens from
            table: Variable table to register declarations in
                   (a fresh default table if None)
        """
        self.scanner = scanner
        self.table = table if table is not None else VariableTable()
        self._current: Token = scanner.next_token()

    def parse(self) -> ProgramNode:
        """
        Parse the whole token stream.

        Returns:
            ProgramNode holding the statements in source order

        Raises:
            SLSyntaxError: On the first grammar violation
            DuplicateDeclarationError: If a variable is declared twice
            TableOverflowError: If too many variables are declared
        """
        location = SourceLocation(self.scanner.filename, 1, 1)
        statements = []

        while not self._check(TokenType.EOF):
            statements.append(self._parse_statement())

        logger.debug(
            f"parsed {len(statements)} statements, {len(self.table)} variables declared"
        )
        return ProgramNode(location=location, statements=tuple(statements))

    # =========================================================================
    # Token Access Methods
    # =========================================================================

    def _advance(self) -> Token:
        """Consume and return the current token."""
        token = self._current
        self._current = self.scanner.next_token()
        return token

    def _check(self, token_type: TokenType) -> bool:
        return self._current.type == token_type

    def _source_line(self, token: Token) -> Optional[str]:
        return self.scanner.source_line(token.line)

    def _expect(self, token_type: TokenType, text: str, kind: SyntaxErrorKind) -> Token:
        """
        Consume a required punctuation token.

        Raises:
            MissingTokenError: If the current token is of another type
        """
        if self._check(token_type):
            return self._advance()

        token = self._current
        self._reject_unknown(token)
        raise MissingTokenError(
            text,
            token.describe(),
            kind,
            location=token.location,
            source_line=self._source_line(token),
        )

    def _unexpected(self, expected: str, kind: SyntaxErrorKind) -> UnexpectedTokenError:
        token = self._current
        self._reject_unknown(token)
        return UnexpectedTokenError(
            token.describe(),
            expected,
            kind,
            location=token.location,
            source_line=self._source_line(token),
        )

    def _reject_unknown(self, token: Token) -> None:
        """Raise InvalidCharacterError if token is an unrecognized character."""
        if token.type == TokenType.UNKNOWN:
            raise InvalidCharacterError(
                token.text,
                location=token.location,
                source_line=self._source_line(token),
            )

    # =========================================================================
    # Statements
    # =========================================================================

    def _parse_statement(self) -> Statement:
        """Parse one statement."""
        if self._check(TokenType.INT):
            return self._parse_var_decl()
        if self._check(TokenType.IDENTIFIER):
            return self._parse_assignment()
        if self._check(TokenType.IF):
            return self._parse_if()

        raise self._unexpected("statement", SyntaxErrorKind.EXPECTED_STATEMENT)

    def _parse_var_decl(self) -> VariableDeclaration:
        """Parse 'int' IDENTIFIER ';' and register the variable."""
        location = self._advance().location  # 'int'

        if not self._check(TokenType.IDENTIFIER):
            raise self._unexpected("identifier", SyntaxErrorKind.EXPECTED_IDENTIFIER)
        name_token = self._advance()

        # Registration happens at parse time so later statements resolve
        self.table.register(
            name_token.text,
            location=name_token.location,
            source_line=self._source_line(name_token),
        )

        self._expect(TokenType.SEMICOLON, ";", SyntaxErrorKind.EXPECTED_SEMICOLON)
        return VariableDeclaration(location=location, name=name_token.text)

    def _parse_assignment(self) -> AssignmentStatement:
        """Parse IDENTIFIER '=' expression ';'."""
        target = self._advance()
        self._expect(TokenType.ASSIGN, "=", SyntaxErrorKind.EXPECTED_ASSIGN)
        value = self._parse_expression()
        self._expect(TokenType.SEMICOLON, ";", SyntaxErrorKind.EXPECTED_SEMICOLON)
        return AssignmentStatement(location=target.location, target=target.text, value=value)

    def _parse_if(self) -> IfStatement:
        """Parse 'if' '(' expression '==' expression ')' '{' statement '}'."""
        location = self._advance().location  # 'if'
        self._expect(TokenType.LPAREN, "(", SyntaxErrorKind.EXPECTED_LPAREN)

        left = self._parse_expression()
        if not self._check(TokenType.EQUAL):
            token = self._current
            self._reject_unknown(token)
            raise UnsupportedOperatorError(
                token.describe(),
                location=token.location,
                source_line=self._source_line(token),
            )
        self._advance()
        right = self._parse_expression()

        condition = BinaryExpression(
            location=left.location,
            operator=BinaryOperator.EQUAL,
            left=left,
            right=right,
        )

        self._expect(TokenType.RPAREN, ")", SyntaxErrorKind.EXPECTED_RPAREN)
        self._expect(TokenType.LBRACE, "{", SyntaxErrorKind.EXPECTED_LBRACE)
        # The body is exactly one statement: '{ }' and '{ a b }' are rejected
        body = self._parse_statement()
        self._expect(TokenType.RBRACE, "}", SyntaxErrorKind.EXPECTED_RBRACE)

        return IfStatement(location=location, condition=condition, body=body)

    # =========================================================================
    # Expressions
    # =========================================================================

    def _parse_expression(self) -> Expression:
        """Parse term (('+' | '-') term)*, left-associative."""
        expr = self._parse_term()

        while self._current.type in ADDITIVE_OPERATORS:
            op_token = self._advance()
            right = self._parse_term()
            expr = BinaryExpression(
                location=expr.location,
                operator=ADDITIVE_OPERATORS[op_token.type],
                left=expr,
                right=right,
            )

        return expr

    def _parse_term(self) -> Expression:
        """Parse NUMBER | IDENTIFIER."""
        token = self._current

        if token.type == TokenType.NUMBER:
            self._advance()
            return NumberLiteral(location=token.location, value=token.value)

        if token.type == TokenType.IDENTIFIER:
            self._advance()
            return IdentifierExpression(location=token.location, name=token.text)

        raise self._unexpected("number or identifier", SyntaxErrorKind.EXPECTED_OPERAND)


# =============================================================================
# Convenience Functions
# =============================================================================

def parse_source(
    source: str,
    filename: str = "<input>",
    table: Optional[VariableTable] = None,
) -> tuple[ProgramNode, VariableTable]:
    """
    Parse SimpleLang source into an AST.

    Args:
        source: The source text
        filename: Source filename for error messages
        table: Variable table to populate (a fresh one if None)

    Returns:
        (program, table) - the root node and the populated variable table

    Raises:
        SimpleLangError: If parsing fails
    """
    parser = Parser(Scanner(source, filename), table)
    return parser.parse(), parser.table
