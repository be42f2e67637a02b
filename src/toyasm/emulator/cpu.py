"""
Toy16 CPU Emulator
==================

Executes images produced by the assembler. The machine has:
- Four 16-bit general purpose registers: R0..R3
- A 16-bit program counter holding a *word* address
- A zero flag (Z), set by ADD when the result is zero

Execution Model
---------------
Each step fetches the instruction word at PC and advances PC past it.
Instructions with an operand word (``ADD rd, #imm``, ``JMP``, ``JZ``)
fetch that word and advance PC again before acting, so a taken jump
computes ``PC = address + 2 + offset``, which is exactly the offset
the assembler encodes.

| Instruction    | Effect                               |
|----------------|--------------------------------------|
| NOP            | nothing                              |
| HALT           | stop                                 |
| ADD rd, rs     | rd = rd + rs, Z = (rd == 0)          |
| ADD rd, #imm   | rd = rd + imm, Z = (rd == 0)         |
| JMP off        | PC = PC + off                        |
| JZ off         | if Z: PC = PC + off                  |

Arithmetic wraps at 16 bits.
"""

from dataclasses import dataclass, field
from enum import Enum, IntFlag, auto
from typing import Callable, Optional
import logging

from toyasm.cpu import (
    DEFAULT_ORIGIN,
    REGISTER_COUNT,
    REGISTER_NAMES,
    WORD_MASK,
    Mode,
    Opcode,
    to_signed,
    unpack_instruction,
)
from toyasm.emulator.memory import Memory
from toyasm.errors import EmulatorError


logger = logging.getLogger(__name__)


class Flags(IntFlag):
    """CPU condition flags."""
    Z = 0x01  # Zero (last ADD result was zero)


class StopReason(Enum):
    """Why ``run`` returned."""
    HALTED = auto()
    STEP_LIMIT = auto()


@dataclass
class Registers:
    """
    CPU register file.

    Attributes:
        gpr: General purpose registers R0..R3
        pc: Program counter (word address)
        flags: Condition flags
    """
    gpr: list[int] = field(default_factory=lambda: [0] * REGISTER_COUNT)
    pc: int = DEFAULT_ORIGIN
    flags: Flags = Flags(0)

    def get_gpr(self, index: int) -> int:
        """Read general purpose register ``index`` (0..3)."""
        return self.gpr[index]

    def set_gpr(self, index: int, value: int) -> None:
        self.gpr[index] = value & WORD_MASK

    @property
    def zero(self) -> bool:
        return bool(self.flags & Flags.Z)

    def __str__(self) -> str:
        regs = " ".join(
            f"{name}=0x{value:04X}" for name, value in zip(REGISTER_NAMES, self.gpr)
        )
        return f"{regs} PC=0x{self.pc:04X} Z={int(self.zero)}"


@dataclass
class RunResult:
    """
    Outcome of ``ToyCPU.run``.

    Attributes:
        reason: HALTED or STEP_LIMIT
        steps: Instructions executed during this run
    """
    reason: StopReason
    steps: int

    @property
    def halted(self) -> bool:
        return self.reason == StopReason.HALTED


class ToyCPU:
    """
    Toy16 CPU.

    Usage:
        cpu = ToyCPU()
        cpu.load(image)            # at 0x8000 by default
        result = cpu.run()
        print(cpu.registers.get_gpr(0))

    Attributes:
        memory: The word-addressed memory
        registers: The register file
        trace_hook: Optional callback called with PC before each instruction
    """

    def __init__(self, memory: Optional[Memory] = None,
                 trace_hook: Optional[Callable[[int], None]] = None):
        self.memory = memory or Memory()
        self.registers = Registers()
        self.trace_hook = trace_hook
        self.halted = False
        self.steps = 0

    def reset(self, pc: int = DEFAULT_ORIGIN) -> None:
        """Clear registers and flags and set PC (memory is kept)."""
        self.registers = Registers(pc=pc & WORD_MASK)
        self.halted = False
        self.steps = 0

    def load(self, data: bytes, origin: int = DEFAULT_ORIGIN) -> int:
        """
        Load a little-endian image at word address ``origin`` and reset.

        Returns:
            Number of words loaded

        Raises:
            EmulatorError: If the image is badly sized or does not fit
        """
        count = self.memory.load_image(data, origin)
        self.reset(origin)
        logger.debug(f"Loaded {count} words at 0x{origin:04X}")
        return count

    # =========================================================================
    # Execution
    # =========================================================================

    def _fetch(self) -> int:
        regs = self.registers
        word = self.memory.read(regs.pc)
        regs.pc = (regs.pc + 1) & WORD_MASK
        return word

    def step(self) -> None:
        """
        Execute one instruction. Does nothing once halted.

        Raises:
            EmulatorError: On an undecodable instruction
        """
        if self.halted:
            return

        regs = self.registers
        address = regs.pc
        if self.trace_hook is not None:
            self.trace_hook(address)

        word = self._fetch()
        fields = unpack_instruction(word)

        try:
            opcode = Opcode(fields.opcode)
        except ValueError:
            raise EmulatorError(f"illegal opcode {fields.opcode} in word 0x{word:04X}", address) from None

        if opcode == Opcode.NOP:
            pass

        elif opcode == Opcode.HALT:
            self.halted = True

        elif opcode == Opcode.ADD:
            if fields.rd >= REGISTER_COUNT:
                raise EmulatorError(f"invalid register R{fields.rd}", address)
            if fields.mode == Mode.REGISTER:
                if fields.rs >= REGISTER_COUNT:
                    raise EmulatorError(f"invalid register R{fields.rs}", address)
                value = regs.get_gpr(fields.rs)
            elif fields.mode == Mode.IMMEDIATE:
                value = self._fetch()
            else:
                raise EmulatorError(f"unsupported mode {fields.mode} for ADD", address)
            result = (regs.get_gpr(fields.rd) + value) & WORD_MASK
            regs.set_gpr(fields.rd, result)
            regs.flags = Flags.Z if result == 0 else Flags(0)

        elif opcode in (Opcode.JMP, Opcode.JZ):
            if fields.mode != Mode.RELATIVE:
                raise EmulatorError(f"unsupported mode {fields.mode} for {opcode.name}", address)
            offset = to_signed(self._fetch())
            if opcode == Opcode.JMP or regs.zero:
                regs.pc = (regs.pc + offset) & WORD_MASK

        self.steps += 1
        logger.debug(f"0x{address:04X}: {opcode.name:<4} -> {regs}")

    def run(self, max_steps: int = 100_000) -> RunResult:
        """
        Run until HALT or until ``max_steps`` instructions have executed.

        Returns:
            RunResult with the stop reason and the number of steps
        """
        executed = 0
        while not self.halted and executed < max_steps:
            self.step()
            executed += 1

        reason = StopReason.HALTED if self.halted else StopReason.STEP_LIMIT
        return RunResult(reason, executed)

    def dump_state(self) -> str:
        """Human-readable register state."""
        status = "halted" if self.halted else "running"
        return f"{self.registers} ({status}, {self.steps} steps)"
