"""
toyasm - Toy16 Assembler Command-Line Interface
===============================================

This module implements the command-line interface for the Toy16 assembler.

Usage Examples
--------------
Basic assembly:
    $ toyasm prog.asm               # writes prog.bin

With output file:
    $ toyasm prog.asm -o out.bin

Generate all output files:
    $ toyasm prog.asm -o prog.bin -l prog.lst -s prog.sym

Different start address:
    $ toyasm --origin 0x9000 prog.asm
"""

import sys
from pathlib import Path
from typing import Optional

import click

from toyasm import __version__
from toyasm.assembler import Assembler
from toyasm.cli.errors import ExitCode, handle_cli_exception, parse_address
from toyasm.config import AssemblerConfig


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
    help="Output image file (default: input with .bin suffix)",
)
@click.option(
    "-l", "--listing",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Generate listing file",
)
@click.option(
    "-s", "--symbols",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Generate symbol file",
)
@click.option(
    "--origin",
    callback=parse_address,
    help="Start word address (default: 0x8000, or $TOYASM_ORIGIN)",
)
@click.option(
    "--org-labels/--no-org-labels",
    default=None,
    help="Allow .org to take a label defined on an earlier line",
)
@click.option(
    "--strict/--no-strict",
    default=None,
    help="Reject unknown mnemonics while sizing lines (pass 1)",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="toyasm")
def main(
    input_file: Path,
    output: Optional[Path],
    listing: Optional[Path],
    symbols: Optional[Path],
    origin: Optional[int],
    org_labels: Optional[bool],
    strict: Optional[bool],
    verbose: bool,
) -> None:
    """
    Assemble Toy16 source code into a little-endian word image.

    INPUT_FILE is the assembly source file (.asm) to assemble.

    \b
    Examples:
        toyasm prog.asm              # Outputs prog.bin
        toyasm prog.asm -o out.bin   # Specify output file
        toyasm -l prog.lst prog.asm  # Also write a listing
    """
    output_file = output if output is not None else input_file.with_suffix(".bin")
    if output_file.resolve() == input_file.resolve():
        click.echo("Error: output file would overwrite the input file", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    # CLI options take precedence over the environment
    config = AssemblerConfig.from_env()
    if origin is not None:
        config.origin = origin
    if org_labels is not None:
        config.org_accepts_labels = org_labels
    if strict is not None:
        config.strict_mnemonics = strict

    if verbose:
        click.echo(f"Origin: 0x{config.origin:04X}")
        click.echo(f".org label operands: {'enabled' if config.org_accepts_labels else 'disabled'}")
        click.echo(f"Strict mnemonics: {'enabled' if config.strict_mnemonics else 'disabled'}")

    asm = Assembler(config=config)

    try:
        if verbose:
            click.echo(f"Assembling {input_file}...")

        asm.assemble_file(input_file)

        asm.write_binary(output_file)
        code = asm.get_code()
        click.echo(f"Wrote {len(code)} bytes to {output_file}")

        if listing:
            asm.write_listing(listing)
            if verbose:
                click.echo(f"Wrote listing to {listing}")

        if symbols:
            asm.write_symbols(symbols)
            if verbose:
                click.echo(f"Wrote symbols to {symbols}")

        if verbose:
            click.echo(
                f"Assembly complete: {len(code) // 2} words at 0x{asm.get_origin():04X}"
            )
            click.echo(f"Defined {len(asm.get_symbols())} symbols")

    except Exception as e:
        handle_cli_exception(e, verbose=verbose, error_type="Assembly")


if __name__ == "__main__":
    main()
