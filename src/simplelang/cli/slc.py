"""
slc - SimpleLang Compiler Command-Line Interface
================================================

Usage Examples
--------------
Basic compilation:
    $ slc prog.sl

With output file:
    $ slc prog.sl -o prog.asm

Dump the AST instead of compiling:
    $ slc --ast prog.sl

Verbose mode (debug logging):
    $ slc -v prog.sl
"""

import logging
from pathlib import Path
from typing import Optional

import click

from simplelang import __version__
from simplelang.compiler import Compiler, CompilerOptions
from simplelang.cli.errors import handle_cli_exception


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "input_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Output assembly file (default: input.asm)",
)
@click.option(
    "--ast",
    is_flag=True,
    help="Print AST and exit (for debugging)",
)
@click.option(
    "--comments/--no-comments",
    default=True,
    help="Annotate the listing with statement and instruction comments. Default: on.",
)
@click.option(
    "--allow-redeclaration",
    is_flag=True,
    help="Let a repeated 'int x;' shadow the earlier declaration instead of failing",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="slc")
def main(
    input_file: Path,
    output: Optional[Path],
    ast: bool,
    comments: bool,
    allow_redeclaration: bool,
    verbose: bool,
) -> None:
    """
    Compile SimpleLang source to 8-bit CPU assembly.

    INPUT_FILE is the SimpleLang source file to compile.

    \b
    Examples:
        slc prog.sl                  # Outputs prog.asm
        slc prog.sl -o out.asm       # Specify output file
        slc --no-comments prog.sl    # Bare instructions only
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )

    if output is None:
        output = input_file.with_suffix(".asm")

    options = CompilerOptions(
        annotate=comments,
        allow_redeclaration=allow_redeclaration,
    )

    try:
        if not ast:
            click.echo(f"Compiling {input_file}...")

        result = Compiler(options).compile_file(input_file)

        if ast:
            from simplelang.ast import ASTPrinter
            click.echo(ASTPrinter().print(result.ast))
            return

        # Only reached after the whole program compiled
        output.write_text(result.assembly, encoding="utf-8")

        if verbose:
            click.echo(f"Wrote {result.line_count} lines to {output}")
            click.echo(f"Variables: {len(result.variables)}")
            for name, offset in result.variables:
                click.echo(f"  [{offset}] {name}")

        click.echo(f"Assembly code generated in {output}")

    except Exception as e:
        handle_cli_exception(e, verbose=verbose)


if __name__ == "__main__":
    main()
