"""
SimpleLang - Compiler for a Minimal Imperative Language
=======================================================

This package translates SimpleLang source (integer declarations,
assignments, additive expressions, and a single-branch '=='
conditional) into textual assembly for a small 8-bit accumulator CPU.

Pipeline
--------
    Source → Scanner → Parser (+ Variable Table) → Code Generator → Assembly

Main Components
---------------
- **lexer**: Scanner producing tokens on demand
- **symbols**: Variable table assigning memory offsets
- **parser**: Recursive descent parser building the AST
- **codegen**: Tree-walking assembly emitter
- **compiler**: Driver tying the stages together (slc)

Quick Start
-----------
    >>> from simplelang import compile_source
    >>> print(compile_source("int x; x = 1 + 2;"))

Or use the command-line tool:
    $ slc prog.sl -o prog.asm

Language Example
----------------
    int a;
    int b;
    a = 5;
    b = a + 3 - 1;   // comments run to end of line
    if (a == 5) { b = 0; }
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from simplelang.compiler import (
    Compiler,
    CompilerOptions,
    CompilerResult,
    compile_file,
    compile_source,
)
from simplelang.errors import (
    SimpleLangError,
    SourceLocation,
    SyntaxErrorKind,
    SLSyntaxError,
    UnexpectedTokenError,
    MissingTokenError,
    UnsupportedOperatorError,
    InvalidCharacterError,
    SemanticError,
    UnresolvedIdentifierError,
    DuplicateDeclarationError,
    TableOverflowError,
    CodeGenError,
)
from simplelang.lexer import Scanner, Token, TokenType
from simplelang.symbols import VARIABLE_CAPACITY, VariableTable
from simplelang.parser import Parser, parse_source
from simplelang.codegen import CodeGenerator, Mnemonic
from simplelang.ast import (
    ASTNode,
    ASTPrinter,
    ProgramNode,
    VariableDeclaration,
    AssignmentStatement,
    IfStatement,
    BinaryExpression,
    BinaryOperator,
    NumberLiteral,
    IdentifierExpression,
)

__all__ = [
    "__version__",
    # Compiler
    "Compiler",
    "CompilerOptions",
    "CompilerResult",
    "compile_file",
    "compile_source",
    # Errors
    "SimpleLangError",
    "SourceLocation",
    "SyntaxErrorKind",
    "SLSyntaxError",
    "UnexpectedTokenError",
    "MissingTokenError",
    "UnsupportedOperatorError",
    "InvalidCharacterError",
    "SemanticError",
    "UnresolvedIdentifierError",
    "DuplicateDeclarationError",
    "TableOverflowError",
    "CodeGenError",
    # Scanner
    "Scanner",
    "Token",
    "TokenType",
    # Variable table
    "VARIABLE_CAPACITY",
    "VariableTable",
    # Parser
    "Parser",
    "parse_source",
    # Code generator
    "CodeGenerator",
    "Mnemonic",
    # AST
    "ASTNode",
    "ASTPrinter",
    "ProgramNode",
    "VariableDeclaration",
    "AssignmentStatement",
    "IfStatement",
    "BinaryExpression",
    "BinaryOperator",
    "NumberLiteral",
    "IdentifierExpression",
]
