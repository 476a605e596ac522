"""
SimpleLang Compiler Main Module
===============================

This module provides the main compiler interface. It runs the complete
compilation as a single pass:

    Source → Scanner → Parser (+ Variable Table) → Code Generator → Assembly

Usage
-----
Command line:
    $ slc prog.sl -o prog.asm

Programmatic:
    >>> from simplelang import compile_source
    >>> asm = compile_source('int x; x = 1 + 2;')

Error Handling
--------------
Compilation stops at the first error, which is raised to the caller as
a SimpleLangError subclass. The listing is built in memory and only
handed out (or written) after generation has finished, so a failed
compilation never leaves a partial output behind.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, TextIO, Union

from simplelang.ast import ProgramNode
from simplelang.codegen import CodeGenerator
from simplelang.lexer import MAX_LEXEME_LENGTH, Scanner
from simplelang.parser import Parser
from simplelang.symbols import VARIABLE_CAPACITY, VariableTable

logger = logging.getLogger(__name__)


@dataclass
class CompilerOptions:
    """
    Compiler configuration options.

    Attributes:
        capacity: Maximum number of declared variables
        max_lexeme_length: Longest identifier/number kept by the scanner;
                           longer runs are truncated with a warning
        allow_redeclaration: Let a second 'int x;' claim a new slot that
                             shadows the first instead of raising
                             DuplicateDeclarationError
        annotate: Include statement and instruction comments in the listing
    """
    capacity: int = VARIABLE_CAPACITY
    max_lexeme_length: int = MAX_LEXEME_LENGTH
    allow_redeclaration: bool = False
    annotate: bool = True


@dataclass
class CompilerResult:
    """
    Result of a successful compilation.

    A failed compilation raises its SimpleLangError instead of returning
    a result, so every CompilerResult holds a complete listing.

    Attributes:
        filename: Source filename
        assembly: Generated assembly listing
        ast: Abstract syntax tree
        variables: (name, offset) pairs in offset order
    """
    filename: str = ""
    assembly: str = ""
    ast: Optional[ProgramNode] = None
    variables: list[tuple[str, int]] = field(default_factory=list)

    @property
    def line_count(self) -> int:
        return len(self.assembly.splitlines())


class Compiler:
    """
    SimpleLang compiler for the 8-bit accumulator CPU.

    Each compile_* call is an independent pass with its own scanner,
    variable table, and generator.

    Example:
        compiler = Compiler()
        result = compiler.compile_file("prog.sl")
        print(result.assembly)
    """

    def __init__(self, options: Optional[CompilerOptions] = None):
        self.options = options or CompilerOptions()

    def compile_source(self, source: Union[str, TextIO], filename: str = "<input>") -> CompilerResult:
        """
        Compile SimpleLang source to assembly.

        Args:
            source: Source text or a readable text stream
            filename: Source filename for error messages

        Returns:
            CompilerResult containing the listing

        Raises:
            SimpleLangError: On the first error found
        """
        scanner = Scanner(source, filename, max_lexeme_length=self.options.max_lexeme_length)
        table = VariableTable(
            capacity=self.options.capacity,
            allow_redeclaration=self.options.allow_redeclaration,
        )

        logger.debug(f"compiling {filename}")
        program = Parser(scanner, table).parse()

        generator = CodeGenerator(table, annotate=self.options.annotate)
        assembly = generator.generate(program, scanner.source)

        return CompilerResult(
            filename=filename,
            assembly=assembly,
            ast=program,
            variables=table.entries(),
        )

    def compile_file(self, filepath: Union[str, Path]) -> CompilerResult:
        """
        Compile a SimpleLang source file.

        Raises:
            SimpleLangError: If compilation fails
            FileNotFoundError: If source file not found
        """
        path = Path(filepath)
        if not path.exists():
            raise FileNotFoundError(f"Source file not found: {filepath}")

        return self.compile_source(path.read_text(encoding="utf-8"), str(filepath))

    def compile_stream(self, source: TextIO, sink: TextIO, filename: str = "<input>") -> CompilerResult:
        """
        Compile from a text stream into a text sink.

        Nothing is written to the sink unless compilation succeeds.
        """
        result = self.compile_source(source, filename)
        sink.write(result.assembly)
        return result


# =============================================================================
# Convenience Functions
# =============================================================================

def compile_source(
    source: str,
    filename: str = "<input>",
    options: Optional[CompilerOptions] = None,
) -> str:
    """
    Compile SimpleLang source code to assembly.

    Raises:
        SimpleLangError: If compilation fails

    Example:
        >>> print(compile_source('int a; a = 5; if (a == 5) { a = a - 1; }'))
    """
    return Compiler(options).compile_source(source, filename).assembly


def compile_file(
    filepath: Union[str, Path],
    output_path: Optional[Union[str, Path]] = None,
    options: Optional[CompilerOptions] = None,
) -> str:
    """
    Compile a SimpleLang source file, optionally writing the listing.

    The output file is only written after the whole program compiled.

    Raises:
        SimpleLangError: If compilation fails
        FileNotFoundError: If source file not found
    """
    result = Compiler(options).compile_file(filepath)

    if output_path:
        Path(output_path).write_text(result.assembly, encoding="utf-8")

    return result.assembly
