"""
Toy16 Emulator
==============

A minimal execution engine for images produced by the assembler.

Quick Start
-----------

::

    >>> from toyasm.assembler import assemble
    >>> from toyasm.emulator import ToyCPU
    >>> cpu = ToyCPU()
    >>> cpu.load(assemble("ADD R0, #10\\nADD R0, #5\\nHALT"))
    5
    >>> cpu.run().halted
    True
    >>> cpu.registers.get_gpr(0)
    15

The image is loaded at word address 0x8000 unless another origin is
given, matching the assembler's default origin.
"""

from toyasm.emulator.cpu import Flags, Registers, RunResult, StopReason, ToyCPU
from toyasm.emulator.memory import Memory

__all__ = [
    "Flags",
    "Memory",
    "Registers",
    "RunResult",
    "StopReason",
    "ToyCPU",
]
