"""
toyrun - Toy16 Program Runner
=============================

Loads a Toy16 image produced by ``toyasm`` and runs it on the emulator,
then prints the final register state.

Usage Examples
--------------
Run an image at the default origin:
    $ toyrun prog.bin

Trace every instruction:
    $ toyrun prog.bin --trace

Image assembled for another origin:
    $ toyrun --origin 0x9000 prog.bin
"""

import sys
from pathlib import Path
from typing import Optional

import click

from toyasm import __version__
from toyasm.cli.errors import ExitCode, handle_cli_exception, parse_address
from toyasm.cpu import DEFAULT_ORIGIN
from toyasm.disassembler import WordDisassembler
from toyasm.emulator import StopReason, ToyCPU


@click.command()
@click.argument(
    "image_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "--origin",
    callback=parse_address,
    help="Word address to load the image at (default: 0x8000)",
)
@click.option(
    "--max-steps",
    type=click.IntRange(min=1),
    default=100_000,
    show_default=True,
    help="Stop after this many instructions",
)
@click.option(
    "--trace",
    is_flag=True,
    help="Print each instruction before it executes",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="toyrun")
def main(
    image_file: Path,
    origin: Optional[int],
    max_steps: int,
    trace: bool,
    verbose: bool,
) -> None:
    """
    Run a Toy16 image and print the final registers.

    IMAGE_FILE is a little-endian word image (.bin) from toyasm.
    """
    load_address = origin if origin is not None else DEFAULT_ORIGIN
    cpu = ToyCPU()

    if trace:
        disasm = WordDisassembler()

        def trace_hook(pc: int) -> None:
            instr = disasm.disassemble_one(cpu.memory.dump(pc, 2), pc)
            click.echo(f"{instr.address:04X}: {instr.text:<20} {cpu.registers}")

        cpu.trace_hook = trace_hook

    try:
        data = image_file.read_bytes()
        count = cpu.load(data, load_address)
        if verbose:
            click.echo(f"Loaded {count} words at 0x{load_address:04X}")

        result = cpu.run(max_steps=max_steps)

    except Exception as e:
        handle_cli_exception(e, verbose=verbose, error_type="Execution")

    click.echo(str(cpu.registers))

    if result.reason == StopReason.STEP_LIMIT:
        click.echo(f"Error: step limit of {max_steps} reached without HALT", err=True)
        sys.exit(ExitCode.BUILD_ERROR)

    if verbose:
        click.echo(f"Halted after {result.steps} steps")


if __name__ == "__main__":
    main()
