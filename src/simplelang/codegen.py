"""
8-bit Accumulator CPU Code Generator for SimpleLang
===================================================

This module walks the SimpleLang AST and emits textual assembly for a
small 8-bit accumulator machine.

Code Generation Strategy
------------------------
Expressions are evaluated into the accumulator R0. A binary operation
evaluates its left operand, pushes it, evaluates the right operand,
moves it into R1, pops the left operand back into R0, and combines:

    <left>
    PUSH R0
    <right>
    MOV R1, R0
    POP R0
    ADD R0, R1          (or SUB)

Variables live in memory slots addressed by their table offset, so a
load is `LD R0, [n]` and a store is `ST R0, [n]`.

An if statement compares the two sides of its condition with the same
push/pop discipline and skips its body with JNE:

    <left>
    PUSH R0
    <right>
    MOV R1, R0
    POP R0
    CMP R0, R1
    JNE skip_1
    <body>
skip_1:

Register Usage
--------------
| Register | Usage                                   |
|----------|-----------------------------------------|
| R0       | Accumulator, expression results         |
| R1       | Secondary operand for ADD/SUB/CMP       |
| stack    | Saved left operands                     |

Labels
------
Skip labels are numbered from a counter that restarts at 1 for every
generate() call, so identical input always yields identical output.

Usage
-----
>>> from simplelang.parser import parse_source
>>> from simplelang.codegen import CodeGenerator
>>> program, table = parse_source("int x; x = 1 + 2;")
>>> print(CodeGenerator(table).generate(program))
"""

import logging
from enum import Enum
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
from simplelang.errors import CodeGenError, SourceLocation, UnresolvedIdentifierError
from simplelang.lexer import split_source_lines
from simplelang.symbols import VariableTable

logger = logging.getLogger(__name__)


class Mnemonic(str, Enum):
    """Instruction set of the target CPU."""
    LDI = "LDI"     # Load immediate into register
    LD = "LD"       # Load register from memory
    ST = "ST"       # Store register to memory
    PUSH = "PUSH"
    POP = "POP"
    MOV = "MOV"
    ADD = "ADD"
    SUB = "SUB"
    CMP = "CMP"
    JNE = "JNE"     # Jump if not equal
    HLT = "HLT"


ACCUMULATOR = "R0"
SECONDARY = "R1"

HEADER = (
    "; SimpleLang compiled code for 8-bit CPU",
    "; Variable memory starts at address 0",
)

# Instruction text is padded to this width before its comment
COMMENT_COLUMN = 17

COMBINE_INSTRUCTIONS = {
    BinaryOperator.ADD: (Mnemonic.ADD, "Add R0 + R1"),
    BinaryOperator.SUBTRACT: (Mnemonic.SUB, "Subtract R0 - R1"),
}


class CodeGenerator:
    """
    Generates assembly from a SimpleLang AST.

    The generator resolves identifiers through the variable table that
    the parser populated. Output is buffered and only returned once the
    whole program has been generated.

    Attributes:
        table: Variable table used to resolve identifiers
        annotate: Emit statement comments and per-instruction comments
    """

    def __init__(self, table: VariableTable, annotate: bool = True):
        self.table = table
        self.annotate = annotate

        self._output: list[str] = []
        self._label_counter: int = 0
        self._source_lines: list[str] = []

    def generate(self, program: ProgramNode, source: Optional[str] = None) -> str:
        """
        Generate the assembly listing for a program.

        Args:
            program: The root AST node
            source: Original source text, used for error context only

        Returns:
            The complete listing, newline-terminated

        Raises:
            UnresolvedIdentifierError: If a variable was never declared
        """
        self._output = []
        self._label_counter = 0
        self._source_lines = split_source_lines(source) if source else []

        for line in HEADER:
            self._emit(line)
        self._emit()

        for stmt in program.statements:
            self._generate_statement(stmt)

        self._emit()
        self._emit_instruction(Mnemonic.HLT, comment="Halt execution")

        logger.debug(
            f"generated {len(self._output)} lines, {self._label_counter} labels"
        )
        return "\n".join(self._output) + "\n"

    # =========================================================================
    # Assembly Output Methods
    # =========================================================================

    def _emit(self, line: str = "") -> None:
        self._output.append(line)

    def _emit_comment(self, comment: str) -> None:
        """Emit a statement comment line (omitted when not annotating)."""
        if self.annotate:
            self._emit(f"; {comment}")

    def _emit_label(self, label: str) -> None:
        self._emit(f"{label}:")

    def _emit_instruction(self, mnemonic: Mnemonic, *operands: str, comment: str = "") -> None:
        """Emit an instruction with its operands and optional comment."""
        text = mnemonic.value
        if operands:
            text = f"{text} {', '.join(operands)}"

        if comment and self.annotate:
            self._emit(f"    {text:<{COMMENT_COLUMN}}; {comment}")
        else:
            self._emit(f"    {text}")

    def _new_label(self, prefix: str = "skip") -> str:
        """Generate a unique label."""
        self._label_counter += 1
        return f"{prefix}_{self._label_counter}"

    # =========================================================================
    # Symbol Resolution
    # =========================================================================

    def _resolve(self, name: str, location: SourceLocation) -> int:
        """Return the memory offset of a declared variable."""
        offset = self.table.lookup(name)
        if offset is None:
            raise UnresolvedIdentifierError(
                name,
                location=location,
                source_line=self._get_source_line(location.line),
                similar_identifiers=self.table.similar_names(name),
            )
        return offset

    def _get_source_line(self, line: int) -> Optional[str]:
        if 0 < line <= len(self._source_lines):
            return self._source_lines[line - 1]
        return None

    # =========================================================================
    # Statements
    # =========================================================================

    def _generate_statement(self, stmt: Statement) -> None:
        if isinstance(stmt, VariableDeclaration):
            self._emit_comment(f"Declare variable: {stmt.name}")
        elif isinstance(stmt, AssignmentStatement):
            self._generate_assignment(stmt)
        elif isinstance(stmt, IfStatement):
            self._generate_if(stmt)
        else:
            raise CodeGenError(f"cannot generate code for {type(stmt).__name__}", stmt.location)

    def _generate_assignment(self, stmt: AssignmentStatement) -> None:
        if self.annotate:
            self._emit()
        self._emit_comment(f"Assignment: {stmt.target} = ...")
        self._generate_expression(stmt.value)
        offset = self._resolve(stmt.target, stmt.location)
        self._emit_instruction(
            Mnemonic.ST, ACCUMULATOR, f"[{offset}]",
            comment=f"Store to variable {stmt.target}",
        )

    def _generate_if(self, stmt: IfStatement) -> None:
        if self.annotate:
            self._emit()
        self._emit_comment("If statement")

        self._generate_operands(stmt.condition, "side")
        self._emit_instruction(Mnemonic.CMP, ACCUMULATOR, SECONDARY, comment="Compare")

        skip_label = self._new_label("skip")
        self._emit_instruction(Mnemonic.JNE, skip_label, comment="Jump if not equal")
        self._generate_statement(stmt.body)
        self._emit_label(skip_label)

    # =========================================================================
    # Expressions
    # =========================================================================

    def _generate_expression(self, expr: Expression) -> None:
        """Generate code leaving the value of expr in R0."""
        if isinstance(expr, NumberLiteral):
            self._emit_instruction(
                Mnemonic.LDI, ACCUMULATOR, str(expr.value),
                comment=f"Load immediate {expr.value}",
            )
        elif isinstance(expr, IdentifierExpression):
            offset = self._resolve(expr.name, expr.location)
            self._emit_instruction(
                Mnemonic.LD, ACCUMULATOR, f"[{offset}]",
                comment=f"Load variable {expr.name}",
            )
        elif isinstance(expr, BinaryExpression):
            self._generate_binary(expr)
        else:
            raise CodeGenError(f"cannot generate code for {type(expr).__name__}", expr.location)

    def _generate_binary(self, expr: BinaryExpression) -> None:
        if expr.operator not in COMBINE_INSTRUCTIONS:
            raise CodeGenError(
                f"operator '{expr.operator.symbol}' is only valid in an if condition",
                expr.location,
            )

        self._generate_operands(expr, "operand")
        mnemonic, comment = COMBINE_INSTRUCTIONS[expr.operator]
        self._emit_instruction(mnemonic, ACCUMULATOR, SECONDARY, comment=comment)

    def _generate_operands(self, expr: BinaryExpression, role: str) -> None:
        """Leave the left operand in R0 and the right operand in R1."""
        self._generate_expression(expr.left)
        self._emit_instruction(Mnemonic.PUSH, ACCUMULATOR, comment=f"Save left {role}")
        self._generate_expression(expr.right)
        self._emit_instruction(Mnemonic.MOV, SECONDARY, ACCUMULATOR, comment="Move right to R1")
        self._emit_instruction(Mnemonic.POP, ACCUMULATOR, comment=f"Restore left {role}")
