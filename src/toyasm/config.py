"""
toyasm Configuration
====================

Assembler settings. Configuration can come from:
- Default values (defined here)
- Environment variables (``AssemblerConfig.from_env``)
- Command-line options (which take precedence over the environment)

The two "policy" switches resolve behaviours that are otherwise left
open by the assembly language:

- ``org_accepts_labels``: whether ``.org`` may take a label that was
  defined on an earlier line, in addition to a plain number.
- ``strict_mnemonics``: whether unknown mnemonics are rejected while
  sizing lines (pass 1) instead of only when encoding them (pass 2).
"""

from dataclasses import dataclass
import os
import string

from toyasm.cpu import DEFAULT_ORIGIN, WORD_MASK


_TRUE_STRINGS = frozenset({"1", "true", "yes", "on"})
_FALSE_STRINGS = frozenset({"0", "false", "no", "off"})


def parse_int(text: str) -> int:
    """
    Parse a decimal or 0x-prefixed hexadecimal integer.

    Raises:
        ValueError: If the text is not a valid integer
    """
    text = text.strip()
    if text[:2].lower() == "0x":
        digits, base, allowed = text[2:], 16, string.hexdigits
    else:
        digits, base, allowed = text, 10, string.digits
    if not digits or any(c not in allowed for c in digits):
        raise ValueError(f"not an integer: {text!r}")
    return int(digits, base)


def _parse_bool(text: str) -> bool:
    value = text.strip().lower()
    if value in _TRUE_STRINGS:
        return True
    if value in _FALSE_STRINGS:
        return False
    raise ValueError(f"not a boolean: {text!r}")


@dataclass
class AssemblerConfig:
    """
    Configuration for one assembler instance.

    Attributes:
        origin: Word address the location counter starts at (default 0x8000)
        org_accepts_labels: Allow ``.org label`` for labels defined earlier
        strict_mnemonics: Reject unknown mnemonics in pass 1
    """

    origin: int = DEFAULT_ORIGIN
    org_accepts_labels: bool = False
    strict_mnemonics: bool = False

    def __post_init__(self) -> None:
        if not 0 <= self.origin <= WORD_MASK:
            raise ValueError(f"origin 0x{self.origin:X} is outside 0..0xFFFF")

    @classmethod
    def from_env(cls) -> "AssemblerConfig":
        """
        Create an AssemblerConfig from environment variables.

        Environment variables (all optional):
            TOYASM_ORIGIN: Start address (decimal or 0x hex)
            TOYASM_ORG_LABELS: Allow labels in .org (1/0, true/false)
            TOYASM_STRICT: Reject unknown mnemonics in pass 1

        Invalid values are ignored and the default is kept.
        """
        config = cls()

        if origin := os.environ.get("TOYASM_ORIGIN"):
            try:
                value = parse_int(origin)
            except ValueError:
                value = None
            if value is not None and 0 <= value <= WORD_MASK:
                config.origin = value

        if org_labels := os.environ.get("TOYASM_ORG_LABELS"):
            try:
                config.org_accepts_labels = _parse_bool(org_labels)
            except ValueError:
                pass

        if strict := os.environ.get("TOYASM_STRICT"):
            try:
                config.strict_mnemonics = _parse_bool(strict)
            except ValueError:
                pass

        return config
