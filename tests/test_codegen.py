"""
Code Generator Test Suite
=========================

Tests for the accumulator-machine assembly produced from SimpleLang
programs: instruction order, memory offsets, labels, and listing layout.
"""

import pytest

from simplelang.ast import ProgramNode, Statement
from simplelang.codegen import COMMENT_COLUMN, HEADER, CodeGenerator
from simplelang.errors import CodeGenError, SourceLocation, UnresolvedIdentifierError
from simplelang.parser import parse_source
from simplelang.symbols import VariableTable


def generate(source: str, annotate: bool = True) -> str:
    program, table = parse_source(source, "test.sl")
    return CodeGenerator(table, annotate=annotate).generate(program, source)


def instructions(asm: str) -> list[str]:
    """Return instruction lines with indentation and comments removed."""
    return [
        line.split(";")[0].strip()
        for line in asm.splitlines()
        if line.startswith("    ")
    ]


def labels(asm: str) -> list[str]:
    return [line[:-1] for line in asm.splitlines() if line.endswith(":")]


# =============================================================================
# Listing Layout
# =============================================================================

class TestListingLayout:
    """Header, trailer, and comment formatting."""

    def test_empty_program(self):
        asm = generate("")
        non_blank = [line for line in asm.splitlines() if line.strip()]
        assert non_blank == [
            HEADER[0],
            HEADER[1],
            "    HLT              ; Halt execution",
        ]

    def test_listing_newline_terminated(self):
        assert generate("int x;").endswith("Halt execution\n")

    def test_header_first(self):
        lines = generate("int x; x = 1;").splitlines()
        assert lines[:3] == [HEADER[0], HEADER[1], ""]

    def test_halt_is_last_instruction(self):
        assert instructions(generate("int x; x = 1;"))[-1] == "HLT"

    def test_declaration_emits_comment_only(self):
        asm = generate("int x;")
        assert "; Declare variable: x" in asm
        assert instructions(asm) == ["HLT"]

    def test_statement_comments(self):
        asm = generate("int x; x = 1; if (x == 1) { x = 2; }")
        assert "; Assignment: x = ..." in asm
        assert "; If statement" in asm

    def test_comment_column(self):
        asm = generate("int x; x = 1;")
        line = next(l for l in asm.splitlines() if "LDI" in l)
        assert line == "    LDI R0, 1        ; Load immediate 1"
        assert line.index(";") == 4 + COMMENT_COLUMN

    def test_comment_column_independent_of_operand_width(self):
        asm = generate("int x; x = 1 + 250;")
        commented = [l for l in asm.splitlines() if l.startswith("    ")]
        assert {l.index(";") for l in commented} == {4 + COMMENT_COLUMN}
        assert "    LDI R0, 250      ; Load immediate 250" in commented

    def test_store_comment(self):
        asm = generate("int total; total = 1;")
        assert "    ST R0, [0]       ; Store to variable total" in asm.splitlines()

    def test_no_annotations(self):
        asm = generate("int x; x = 1; if (x == 1) { x = 2; }", annotate=False)
        body = asm.splitlines()[len(HEADER):]
        assert not any(";" in line for line in body)
        assert instructions(asm)[:2] == ["LDI R0, 1", "ST R0, [0]"]
        assert "skip_1:" in asm.splitlines()

    def test_annotated_and_bare_same_instructions(self):
        source = "int a; int b; a = 3; b = a - 1; if (a == b) { a = 0; }"
        assert instructions(generate(source)) == instructions(generate(source, annotate=False))


# =============================================================================
# Expressions and Assignments
# =============================================================================

class TestAssignments:
    """Instruction sequences for assignments."""

    def test_literal_assignment(self):
        assert instructions(generate("int x; x = 7;")) == ["LDI R0, 7", "ST R0, [0]", "HLT"]

    def test_variable_assignment(self):
        asm = generate("int a; int b; b = a;")
        assert instructions(asm) == ["LD R0, [0]", "ST R0, [1]", "HLT"]

    def test_addition(self):
        assert instructions(generate("int x; x = 1 + 2;")) == [
            "LDI R0, 1",
            "PUSH R0",
            "LDI R0, 2",
            "MOV R1, R0",
            "POP R0",
            "ADD R0, R1",
            "ST R0, [0]",
            "HLT",
        ]

    def test_subtraction(self):
        asm = generate("int x; int y; y = x - 4;")
        assert instructions(asm) == [
            "LD R0, [0]",
            "PUSH R0",
            "LDI R0, 4",
            "MOV R1, R0",
            "POP R0",
            "SUB R0, R1",
            "ST R0, [1]",
            "HLT",
        ]

    def test_left_associative_chain(self):
        """1 - 2 + 3 computes (1 - 2) before adding 3."""
        assert instructions(generate("int x; x = 1 - 2 + 3;"))[:-2] == [
            "LDI R0, 1",
            "PUSH R0",
            "LDI R0, 2",
            "MOV R1, R0",
            "POP R0",
            "SUB R0, R1",
            "PUSH R0",
            "LDI R0, 3",
            "MOV R1, R0",
            "POP R0",
            "ADD R0, R1",
        ]

    def test_push_pop_balanced(self):
        ops = [i.split()[0] for i in instructions(generate("int x; x = 1 + 2 - x + 4;"))]
        assert ops.count("PUSH") == ops.count("POP") == 3

    def test_offsets_follow_declaration_order(self):
        asm = generate("int a; int b; int c; c = 1; a = 2; b = 3;")
        stores = [i for i in instructions(asm) if i.startswith("ST")]
        assert stores == ["ST R0, [2]", "ST R0, [0]", "ST R0, [1]"]

    def test_offset_stable_across_uses(self):
        asm = generate("int a; int b; b = 1; a = b; b = b + b;")
        loads = [i for i in instructions(asm) if i.startswith("LD ")]
        assert loads == ["LD R0, [1]", "LD R0, [1]", "LD R0, [1]"]

    def test_statements_in_program_order(self):
        asm = generate("int x; x = 1; x = 2; x = 3;")
        loads = [i for i in instructions(asm) if i.startswith("LDI")]
        assert loads == ["LDI R0, 1", "LDI R0, 2", "LDI R0, 3"]

    def test_large_literal_passed_through(self):
        assert "LDI R0, 300" in instructions(generate("int x; x = 300;"))


# =============================================================================
# If Statements
# =============================================================================

class TestIfStatements:
    """Comparison, conditional skip, and label numbering."""

    def test_if_sequence(self):
        asm = generate("int a; if (a == 5) { a = 0; }")
        assert instructions(asm) == [
            "LD R0, [0]",
            "PUSH R0",
            "LDI R0, 5",
            "MOV R1, R0",
            "POP R0",
            "CMP R0, R1",
            "JNE skip_1",
            "LDI R0, 0",
            "ST R0, [0]",
            "HLT",
        ]

    def test_label_follows_body(self):
        lines = generate("int a; if (a == 5) { a = 0; }").splitlines()
        jne = next(i for i, l in enumerate(lines) if "JNE skip_1" in l)
        label = lines.index("skip_1:")
        store = next(i for i, l in enumerate(lines) if l.strip().startswith("ST "))
        assert jne < store < label

    def test_labels_unique_and_sequential(self):
        asm = generate(
            "int a; if (a == 1) { a = 2; } if (a == 2) { a = 3; } if (a == 3) { a = 4; }"
        )
        assert labels(asm) == ["skip_1", "skip_2", "skip_3"]

    def test_nested_labels(self):
        """The outer label is allocated first and closes last."""
        asm = generate("int a; if (a == 1) { if (a == 2) { a = 3; } }")
        assert labels(asm) == ["skip_2", "skip_1"]
        jumps = [i for i in instructions(asm) if i.startswith("JNE")]
        assert jumps == ["JNE skip_1", "JNE skip_2"]

    def test_condition_with_expressions(self):
        ops = [i.split()[0] for i in instructions(generate("int a; if (a + 1 == 2) { a = 0; }"))]
        assert ops[:9] == ["LD", "PUSH", "LDI", "MOV", "POP", "ADD", "PUSH", "LDI", "MOV"]
        assert "CMP" in ops

    def test_declaration_body(self):
        asm = generate("if (1 == 1) { int y; }")
        assert "; Declare variable: y" in asm
        assert labels(asm) == ["skip_1"]


# =============================================================================
# Determinism and Errors
# =============================================================================

class TestGeneratorBehaviour:
    """Determinism and failure modes."""

    def test_identical_output_on_repeat(self):
        source = "int a; if (a == 1) { a = 2; } if (a == 2) { a = 3; }"
        program, table = parse_source(source)
        generator = CodeGenerator(table)
        assert generator.generate(program) == generator.generate(program)

    def test_undeclared_target(self):
        with pytest.raises(UnresolvedIdentifierError) as exc_info:
            generate("y = 1;")
        assert exc_info.value.identifier == "y"
        assert exc_info.value.location.line == 1

    def test_undeclared_operand(self):
        with pytest.raises(UnresolvedIdentifierError) as exc_info:
            generate("int x;\nx = x + totl;")
        error = exc_info.value
        assert error.identifier == "totl"
        assert (error.location.line, error.location.column) == (2, 9)
        assert error.source_line == "x = x + totl;"

    def test_undeclared_suggests_similar(self):
        with pytest.raises(UnresolvedIdentifierError) as exc_info:
            generate("int total; total = totl;")
        assert exc_info.value.similar_identifiers == ["total"]
        assert "did you mean 'total'?" in str(exc_info.value)

    def test_undeclared_in_condition(self):
        with pytest.raises(UnresolvedIdentifierError):
            generate("int a; if (q == 1) { a = 1; }")

    def test_unknown_statement_node(self):
        location = SourceLocation("test.sl", 1, 1)
        program = ProgramNode(location=location, statements=(Statement(location=location),))
        with pytest.raises(CodeGenError):
            CodeGenerator(VariableTable()).generate(program)

