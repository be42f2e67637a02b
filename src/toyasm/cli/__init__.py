"""
toyasm Command-Line Interface
=============================

This package provides command-line tools for the Toy16 toolchain:

- **toyasm**: two-pass assembler
- **toyrun**: runs an image on the emulator
- **toydis**: disassembles an image

Each tool is implemented as a Click-based CLI application sharing the
exit codes and error reporting in ``toyasm.cli.errors``.
"""

__all__ = ["tasm", "trun", "tdis"]
