"""
Toy16 Assembler - Main Interface
================================

This module provides the main Assembler class, which is the primary interface
for assembling Toy16 source code. It coordinates the lexer, parser, and code
generator to produce a little-endian word image.

Example Usage
-------------
>>> from toyasm.assembler import Assembler
>>>
>>> asm = Assembler()
>>> code = asm.assemble_string('''
... start:  ADD R0, #10
...         ADD R0, #5
...         NOP
...         HALT
... ''')
>>> code.hex(" ")
'00 29 0a 00 00 29 05 00 00 00 00 08'
>>> asm.get_symbols()
{'start': 32768}

Command-Line Usage
------------------
The assembler can also be invoked from the command line:

    $ toyasm prog.asm -o prog.bin -l prog.lst -s prog.sym
"""

from pathlib import Path
from typing import Optional
import logging

from toyasm.assembler.codegen import CodeGenerator, ListingEntry
from toyasm.assembler.parser import parse_source
from toyasm.config import AssemblerConfig


logger = logging.getLogger(__name__)


class Assembler:
    """
    Main Toy16 assembler class.

    Each assembly run builds its own context, so one instance can
    assemble several sources in turn; the output accessors always refer
    to the most recent run.

    Attributes:
        config: The AssemblerConfig in effect
        verbose: If True, print progress messages
    """

    def __init__(self, config: Optional[AssemblerConfig] = None, verbose: bool = False):
        """
        Initialize the assembler.

        Args:
            config: Assembler settings (origin, .org policy, strictness).
                    Defaults to AssemblerConfig().
            verbose: Enable verbose output
        """
        self.config = config or AssemblerConfig()
        self.verbose = verbose
        self._codegen = CodeGenerator(self.config)
        self._source_file: Optional[Path] = None

    # =========================================================================
    # Assembly Methods
    # =========================================================================

    def assemble_string(self, source: str, filename: str = "<input>") -> bytes:
        """
        Assemble source code from a string.

        The assembly pipeline is:
        1. Parse source into lines (lexer -> parser)
        2. Pass 1: assign addresses and collect labels
        3. Pass 2: encode and serialize

        Args:
            source: Assembly source code
            filename: Virtual filename for error messages

        Returns:
            Machine code as little-endian bytes

        Raises:
            AssemblerError: If assembly fails
        """
        if self.verbose:
            print(f"Assembling {filename}...")

        lines = parse_source(source, filename)
        logger.debug(f"Parsed {len(lines)} lines from {filename}")

        code = self._codegen.generate(lines)

        if self.verbose:
            print(f"Generated {len(code)} bytes ({len(code) // 2} words)")

        return code

    # Alias matching the module-level function
    assemble = assemble_string

    def assemble_file(self, filepath: str | Path) -> bytes:
        """
        Assemble source code from a file.

        Args:
            filepath: Path to assembly source file

        Returns:
            Machine code as little-endian bytes

        Raises:
            AssemblerError: If assembly fails
            FileNotFoundError: If source file not found
        """
        filepath = Path(filepath)
        self._source_file = filepath
        source = filepath.read_text(encoding="utf-8")
        return self.assemble_string(source, str(filepath))

    # =========================================================================
    # Output Methods
    # =========================================================================

    def get_code(self) -> bytes:
        """Machine code bytes from the last assembly."""
        return self._codegen.get_code()

    def get_words(self) -> list[int]:
        """Machine code words from the last assembly."""
        return self._codegen.get_words()

    def get_origin(self) -> int:
        """Word address of the first emitted word."""
        return self._codegen.get_origin()

    def get_symbols(self) -> dict[str, int]:
        """Symbol table as name -> word address."""
        return self._codegen.get_symbols()

    def get_listing_entries(self) -> list[ListingEntry]:
        """Listing records from the last successful run."""
        return self._codegen.get_listing_entries()

    def get_listing(self) -> str:
        """Assembly listing with addresses, words, and source."""
        return self._codegen.get_listing()

    def write_binary(self, filepath: str | Path) -> None:
        """
        Write the raw little-endian image.

        Args:
            filepath: Output file path
        """
        code = self.get_code()
        Path(filepath).write_bytes(code)

        if self.verbose:
            print(f"Wrote {len(code)} bytes to {filepath}")

    def write_listing(self, filepath: str | Path) -> None:
        """
        Write assembly listing file.

        Args:
            filepath: Output file path
        """
        self._codegen.write_listing(filepath)

        if self.verbose:
            print(f"Wrote listing to {filepath}")

    def write_symbols(self, filepath: str | Path) -> None:
        """
        Write symbol table file.

        Args:
            filepath: Output file path
        """
        self._codegen.write_symbols(filepath)

        if self.verbose:
            print(f"Wrote symbols to {filepath}")


# =============================================================================
# Convenience Functions
# =============================================================================

def assemble(source: str, filename: str = "<input>",
             config: Optional[AssemblerConfig] = None) -> bytes:
    """
    Convenience function to assemble source code.

    Args:
        source: Assembly source code
        filename: Virtual filename for errors
        config: Optional assembler settings

    Returns:
        Machine code as little-endian bytes

    Raises:
        AssemblerError: If assembly fails
    """
    asm = Assembler(config=config)
    return asm.assemble_string(source, filename)


def assemble_file(filepath: str | Path, config: Optional[AssemblerConfig] = None) -> bytes:
    """
    Convenience function to assemble a file.

    Args:
        filepath: Path to source file
        config: Optional assembler settings

    Returns:
        Machine code as little-endian bytes

    Raises:
        AssemblerError: If assembly fails
    """
    asm = Assembler(config=config)
    return asm.assemble_file(filepath)
