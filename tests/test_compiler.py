"""
Compiler Driver Test Suite
==========================

End-to-end tests for Compiler, CompilerOptions, and the module-level
compile_source / compile_file helpers.
"""

import io

import pytest

import simplelang
from simplelang import (
    Compiler,
    CompilerOptions,
    SimpleLangError,
    compile_file,
    compile_source,
)
from simplelang.errors import (
    DuplicateDeclarationError,
    SLSyntaxError,
    TableOverflowError,
    UnresolvedIdentifierError,
)


EXAMPLE_PROGRAM = """\
// sample program
int a;
int b;
int c;
a = 10;
b = 20;
c = a + b;
if (c == 30) {
    c = c + 1;
}
"""


def instructions(asm: str) -> list[str]:
    return [
        line.split(";")[0].strip()
        for line in asm.splitlines()
        if line.startswith("    ")
    ]


# =============================================================================
# Successful Compilation
# =============================================================================

class TestCompileSource:
    """Compiling complete programs from strings and streams."""

    def test_example_program(self):
        asm = compile_source(EXAMPLE_PROGRAM, "example.sl")
        assert instructions(asm) == [
            "LDI R0, 10", "ST R0, [0]",
            "LDI R0, 20", "ST R0, [1]",
            "LD R0, [0]", "PUSH R0", "LD R0, [1]", "MOV R1, R0", "POP R0",
            "ADD R0, R1", "ST R0, [2]",
            "LD R0, [2]", "PUSH R0", "LDI R0, 30", "MOV R1, R0", "POP R0",
            "CMP R0, R1", "JNE skip_1",
            "LD R0, [2]", "PUSH R0", "LDI R0, 1", "MOV R1, R0", "POP R0",
            "ADD R0, R1", "ST R0, [2]",
            "HLT",
        ]
        assert "skip_1:" in asm.splitlines()

    def test_result_fields(self):
        result = Compiler().compile_source(EXAMPLE_PROGRAM, "example.sl")
        assert result.assembly.endswith("Halt execution\n")
        assert result.filename == "example.sl"
        assert result.variables == [("a", 0), ("b", 1), ("c", 2)]
        assert len(result.ast.statements) == 7
        assert result.line_count == len(result.assembly.splitlines())

    def test_deterministic(self):
        assert compile_source(EXAMPLE_PROGRAM) == compile_source(EXAMPLE_PROGRAM)

    def test_labels_restart_per_compilation(self):
        compiler = Compiler()
        first = compiler.compile_source("int a; if (a == 1) { a = 2; }").assembly
        second = compiler.compile_source("int a; if (a == 1) { a = 2; }").assembly
        assert first == second
        assert "skip_1:" in second.splitlines()

    def test_empty_program(self):
        asm = compile_source("")
        assert [l for l in asm.splitlines() if l.strip()] == [
            "; SimpleLang compiled code for 8-bit CPU",
            "; Variable memory starts at address 0",
            "    HLT              ; Halt execution",
        ]

    def test_stream_source(self):
        result = Compiler().compile_source(io.StringIO("int x; x = 1;"))
        assert instructions(result.assembly) == ["LDI R0, 1", "ST R0, [0]", "HLT"]

    def test_compile_stream(self):
        sink = io.StringIO()
        result = Compiler().compile_stream(io.StringIO("int x; x = 2;"), sink, "s.sl")
        assert sink.getvalue() == result.assembly

    def test_compile_stream_writes_nothing_on_error(self):
        sink = io.StringIO()
        with pytest.raises(UnresolvedIdentifierError):
            Compiler().compile_stream(io.StringIO("int x; x = 1; y = 2;"), sink)
        assert sink.getvalue() == ""


# =============================================================================
# Options
# =============================================================================

class TestCompilerOptions:
    """CompilerOptions flow through to every stage."""

    def test_defaults(self):
        options = CompilerOptions()
        assert options.capacity == 26
        assert options.max_lexeme_length == 99
        assert options.allow_redeclaration is False
        assert options.annotate is True

    def test_capacity(self):
        options = CompilerOptions(capacity=2)
        with pytest.raises(TableOverflowError):
            compile_source("int a; int b; int c;", options=options)

    def test_redeclaration_rejected_by_default(self):
        with pytest.raises(DuplicateDeclarationError):
            compile_source("int x; int x;")

    def test_redeclaration_shadows(self):
        options = CompilerOptions(allow_redeclaration=True)
        asm = compile_source("int x; x = 1; int x; x = 2;", options=options)
        assert instructions(asm) == ["LDI R0, 1", "ST R0, [0]", "LDI R0, 2", "ST R0, [1]", "HLT"]

    def test_no_annotations(self):
        asm = compile_source("int x; x = 1;", options=CompilerOptions(annotate=False))
        assert "Declare variable" not in asm
        assert "    LDI R0, 1" in asm.splitlines()

    def test_lexeme_limit(self):
        options = CompilerOptions(max_lexeme_length=3)
        result = Compiler(options).compile_source("int abcdef; abcxyz = 1;")
        assert result.variables == [("abc", 0)]


# =============================================================================
# Failing Compilation
# =============================================================================

class TestCompileErrors:
    """The first error aborts compilation."""

    @pytest.mark.parametrize("source", ["int 5;", "x = ;", "if (1 = 2) { }"])
    def test_malformed_input(self, source):
        with pytest.raises(SLSyntaxError):
            compile_source(source)

    def test_undeclared_identifier(self):
        with pytest.raises(UnresolvedIdentifierError):
            compile_source("y = 1;")

    def test_twenty_seventh_variable(self):
        source = "\n".join(f"int v{i};" for i in range(27))
        with pytest.raises(TableOverflowError) as exc_info:
            compile_source(source)
        assert exc_info.value.location.line == 27

    def test_all_errors_share_base(self):
        for source in ["int 5;", "y = 1;", "int x; int x;", "@"]:
            with pytest.raises(SimpleLangError):
                compile_source(source)

    def test_error_carries_filename(self):
        with pytest.raises(SimpleLangError) as exc_info:
            compile_source("int x;\nx = ;", "prog.sl")
        assert str(exc_info.value).startswith("prog.sl:2:5: error:")

    @pytest.mark.parametrize("source, error_type", [
        ("int x;\fx = y;", UnresolvedIdentifierError),
        ("int x;\rx = ;", SLSyntaxError),
    ])
    def test_error_quotes_line_containing_error(self, source, error_type):
        """Form feed and a lone carriage return stay inside one line."""
        with pytest.raises(error_type) as exc_info:
            compile_source(source)
        error = exc_info.value
        assert (error.location.line, error.location.column) == (1, 12)
        assert error.source_line == source

    def test_error_quotes_crlf_line(self):
        with pytest.raises(UnresolvedIdentifierError) as exc_info:
            compile_source("int x;\r\nx = y;\r\n")
        assert exc_info.value.source_line == "x = y;"
        assert "\n    x = y;\n        ^" in str(exc_info.value)


# =============================================================================
# Files
# =============================================================================

class TestCompileFile:
    """Compiling from and to files."""

    def test_compile_file(self, tmp_path):
        source = tmp_path / "prog.sl"
        source.write_text(EXAMPLE_PROGRAM)
        asm = compile_file(source)
        assert asm == compile_source(EXAMPLE_PROGRAM, str(source))

    def test_compile_file_writes_output(self, tmp_path):
        source = tmp_path / "prog.sl"
        source.write_text("int x; x = 1;")
        output = tmp_path / "prog.asm"
        asm = compile_file(source, output)
        assert output.read_text() == asm

    def test_no_output_on_error(self, tmp_path):
        source = tmp_path / "bad.sl"
        source.write_text("int x; x = 1; x = y;")
        output = tmp_path / "bad.asm"
        with pytest.raises(UnresolvedIdentifierError):
            compile_file(source, output)
        assert not output.exists()

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            compile_file(tmp_path / "nope.sl")

    def test_error_location_uses_path(self, tmp_path):
        source = tmp_path / "bad.sl"
        source.write_text("int 5;")
        with pytest.raises(SLSyntaxError) as exc_info:
            Compiler().compile_file(source)
        assert exc_info.value.location.filename == str(source)


def test_version():
    assert simplelang.__version__ == "1.0.0"
