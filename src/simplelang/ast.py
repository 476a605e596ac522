"""
SimpleLang Abstract Syntax Tree (AST) Definitions
=================================================

This module defines the AST node types built by the parser and read by
the code generator.

Node Hierarchy
--------------
ASTNode (base)
├── ProgramNode - root, holds the statement sequence
├── Statements
│   ├── VariableDeclaration - int x;
│   ├── AssignmentStatement - x = expr;
│   └── IfStatement - if (a == b) { statement }
└── Expressions
    ├── BinaryExpression - a + b, a - b, a == b
    ├── NumberLiteral - integer constant
    └── IdentifierExpression - variable reference

Design Notes
------------
- Nodes are frozen dataclasses; the tree is never mutated after parsing
- Each node stores its source location for error reporting
- The statement sequence is an ordered tuple on ProgramNode
- IfStatement.body is exactly one statement, never a list: the grammar
  allows a single statement between the braces
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from simplelang.errors import SourceLocation


# =============================================================================
# AST Node Base Classes
# =============================================================================

@dataclass(frozen=True)
class ASTNode:
    """
    Base class for all AST nodes.

    Attributes:
        location: Source location where this node appears
    """
    location: SourceLocation

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}@{self.location.line}:{self.location.column}"


@dataclass(frozen=True)
class Expression(ASTNode):
    """Base class for expression nodes (they leave a value in R0)."""
    pass


@dataclass(frozen=True)
class Statement(ASTNode):
    """Base class for statement nodes."""
    pass


# =============================================================================
# Expression Nodes
# =============================================================================

class BinaryOperator(Enum):
    """Binary operator types."""
    ADD = "+"
    SUBTRACT = "-"
    EQUAL = "=="

    @property
    def symbol(self) -> str:
        return self.value


@dataclass(frozen=True)
class NumberLiteral(Expression):
    """
    Integer literal expression.

    Attributes:
        value: The non-negative integer value
    """
    value: int = 0


@dataclass(frozen=True)
class IdentifierExpression(Expression):
    """
    Variable reference expression.

    Attributes:
        name: The variable name
    """
    name: str = ""


@dataclass(frozen=True)
class BinaryExpression(Expression):
    """
    Binary operation expression (left op right).

    Attributes:
        operator: The binary operator
        left: Left operand expression
        right: Right operand expression
    """
    operator: BinaryOperator = BinaryOperator.ADD
    left: Expression = None
    right: Expression = None


# =============================================================================
# Statement Nodes
# =============================================================================

@dataclass(frozen=True)
class VariableDeclaration(Statement):
    """
    Variable declaration: int name;

    Attributes:
        name: Variable name
    """
    name: str = ""


@dataclass(frozen=True)
class AssignmentStatement(Statement):
    """
    Assignment: target = value;

    Attributes:
        target: Name of the variable assigned to
        value: Right-hand side expression
    """
    target: str = ""
    value: Expression = None


@dataclass(frozen=True)
class IfStatement(Statement):
    """
    Single-branch conditional: if (left == right) { body }

    Attributes:
        condition: BinaryExpression with operator EQUAL
        body: The one guarded statement
    """
    condition: BinaryExpression = None
    body: Statement = None


# =============================================================================
# Program Root Node
# =============================================================================

@dataclass(frozen=True)
class ProgramNode(ASTNode):
    """
    Root node of the AST.

    Attributes:
        statements: Top-level statements in source order
    """
    statements: tuple[Statement, ...] = ()


# =============================================================================
# AST Visitor Pattern
# =============================================================================

class ASTVisitor:
    """
    Base class for AST visitors.

    Subclasses override visit_<ClassName> methods for the node types
    they care about; everything else falls through to generic_visit,
    which visits child nodes.
    """

    def visit(self, node: ASTNode) -> Any:
        method_name = f"visit_{node.__class__.__name__}"
        visitor = getattr(self, method_name, self.generic_visit)
        return visitor(node)

    def generic_visit(self, node: ASTNode) -> None:
        for value in node.__dict__.values():
            if isinstance(value, ASTNode):
                self.visit(value)
            elif isinstance(value, tuple):
                for item in value:
                    if isinstance(item, ASTNode):
                        self.visit(item)


# =============================================================================
# AST Pretty Printer
# =============================================================================

class ASTPrinter(ASTVisitor):
    """
    Pretty printer for AST debugging.

    Usage:
        printer = ASTPrinter()
        print(printer.print(ast))
    """

    def __init__(self):
        self.output: list[str] = []
        self.indent_level = 0

    def print(self, node: ASTNode) -> str:
        """Print the AST and return as string."""
        self.output = []
        self.indent_level = 0
        self.visit(node)
        return "\n".join(self.output)

    def _emit(self, text: str) -> None:
        indent = "  " * self.indent_level
        self.output.append(f"{indent}{text}")

    def visit_ProgramNode(self, node: ProgramNode):
        self._emit("Program")
        self.indent_level += 1
        for stmt in node.statements:
            self.visit(stmt)
        self.indent_level -= 1

    def visit_VariableDeclaration(self, node: VariableDeclaration):
        self._emit(f"Declare: int {node.name}")

    def visit_AssignmentStatement(self, node: AssignmentStatement):
        self._emit(f"Assign: {node.target} = {self._expr_str(node.value)}")

    def visit_IfStatement(self, node: IfStatement):
        self._emit(f"If {self._expr_str(node.condition)}")
        self.indent_level += 1
        self.visit(node.body)
        self.indent_level -= 1

    def _expr_str(self, expr: Expression) -> str:
        """Convert expression to string representation."""
        if isinstance(expr, NumberLiteral):
            return str(expr.value)
        if isinstance(expr, IdentifierExpression):
            return expr.name
        if isinstance(expr, BinaryExpression):
            return f"({self._expr_str(expr.left)} {expr.operator.symbol} {self._expr_str(expr.right)})"
        return f"<{type(expr).__name__}>"
