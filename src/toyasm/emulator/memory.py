"""
Toy16 Memory
============

Word-addressed memory for the Toy16 emulator.

The whole 16-bit address space is backed by RAM: 65536 words of 16 bits.
Addresses wrap at 0xFFFF, matching the assembler's location counter.
"""

from toyasm.assembler.codegen import bytes_to_words
from toyasm.cpu import ADDRESS_SPACE_WORDS, WORD_MASK
from toyasm.errors import EmulatorError


class Memory:
    """
    64K words of RAM.

    Usage:
        mem = Memory()
        mem.load_image(image_bytes, origin=0x8000)
        word = mem.read(0x8000)
    """

    def __init__(self, size_words: int = ADDRESS_SPACE_WORDS):
        self._size = size_words
        self._data = [0] * size_words

    @property
    def size(self) -> int:
        return self._size

    def read(self, address: int) -> int:
        """Read the word at an address (wraps modulo memory size)."""
        return self._data[address % self._size]

    def write(self, address: int, value: int) -> None:
        """Write a word to an address (wraps modulo memory size)."""
        self._data[address % self._size] = value & WORD_MASK

    def load_words(self, words: list[int], origin: int) -> None:
        """
        Copy words into memory starting at ``origin``.

        Like the assembler's location counter, the copy wraps from 0xFFFF
        back to 0x0000.

        Raises:
            EmulatorError: If the image is larger than memory
        """
        if len(words) > self._size:
            raise EmulatorError(
                f"image of {len(words)} words does not fit in {self._size} words of memory"
            )
        for offset, word in enumerate(words):
            self.write(origin + offset, word)

    def load_image(self, data: bytes, origin: int) -> int:
        """
        Load a little-endian byte image starting at word address ``origin``.

        Returns:
            Number of words loaded

        Raises:
            EmulatorError: If the image length is odd or it is larger than memory
        """
        try:
            words = bytes_to_words(data)
        except ValueError as e:
            raise EmulatorError(str(e)) from e
        self.load_words(words, origin)
        return len(words)

    def dump(self, start: int, count: int) -> list[int]:
        """Return ``count`` words starting at ``start``."""
        return [self.read(start + i) for i in range(count)]

    def clear(self) -> None:
        self._data = [0] * self._size
