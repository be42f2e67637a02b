"""
toydis - Toy16 Disassembler Command-Line Interface
==================================================

Usage Examples
--------------
Disassemble an image:
    $ toydis prog.bin

With jump targets shown as labels from a symbol file:
    $ toydis prog.bin -s prog.sym

Output to file:
    $ toydis prog.bin -o prog.dis
"""

from pathlib import Path
from typing import Optional

import click

from toyasm import __version__
from toyasm.cli.errors import handle_cli_exception, parse_address
from toyasm.config import parse_int
from toyasm.cpu import DEFAULT_ORIGIN
from toyasm.disassembler import WordDisassembler


def read_symbol_file(path: Path) -> dict[str, int]:
    """
    Read a symbol file written by ``toyasm -s``.

    Lines are ``name address``; blank lines and ``#`` comments are skipped.

    Raises:
        click.BadParameter: On a malformed line
    """
    symbols = {}
    for number, line in enumerate(path.read_text(encoding="utf-8").splitlines(), start=1):
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        parts = line.split()
        try:
            name, value = parts
            symbols[name] = parse_int(value)
        except ValueError:
            raise click.BadParameter(f"{path}:{number}: expected 'name address'")
    return symbols


@click.command()
@click.argument(
    "input_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Output file (default: stdout)",
)
@click.option(
    "-a", "--address",
    callback=parse_address,
    help="Word address of the first word (default: 0x8000)",
)
@click.option(
    "-c", "--count",
    type=click.IntRange(min=1),
    default=None,
    help="Maximum number of instructions to disassemble (default: all)",
)
@click.option(
    "-s", "--symbols",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Symbol file used to name jump targets",
)
@click.version_option(version=__version__, prog_name="toydis")
def main(
    input_file: Path,
    output: Optional[Path],
    address: Optional[int],
    count: Optional[int],
    symbols: Optional[Path],
) -> None:
    """
    Disassemble a Toy16 word image.

    INPUT_FILE is a little-endian word image (.bin) from toyasm.
    """
    start = address if address is not None else DEFAULT_ORIGIN

    try:
        disasm = WordDisassembler()
        if symbols:
            disasm.add_symbols(read_symbol_file(symbols))

        data = input_file.read_bytes()
        if len(data) % 2:
            raise click.BadParameter(f"{input_file}: odd image length {len(data)}")

        text = disasm.disassemble_to_text(data, start, count)

        if output:
            output.write_text(text + "\n")
        else:
            click.echo(text)

    except Exception as e:
        handle_cli_exception(e)


if __name__ == "__main__":
    main()
