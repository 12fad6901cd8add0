"""
Fatal machine conditions.

The instruction set has no trap mechanism, so each of these ends the run.
Every error records the address of the faulting instruction and, where one
was fetched, the raw word.
"""

from __future__ import annotations

from typing import Optional


class Chip8Error(Exception):
    """Base class for unrecoverable machine faults."""

    def __init__(self, message: str, address: int, word: Optional[int] = None) -> None:
        self.address: int = address
        self.word: Optional[int] = word
        where = f"at ${address:03X}"
        if word is not None:
            where += f" (word ${word:04X})"
        super().__init__(f"{message} {where}")


class ProgramCounterError(Chip8Error):
    """The program counter left the program region or is misaligned."""


class DecodeError(Chip8Error):
    """The fetched word is not a recognised instruction."""


class StackUnderflowError(Chip8Error):
    """Return executed with an empty call stack."""


class MemoryAccessError(Chip8Error):
    """An index-derived address fell outside memory."""

    def __init__(self, target: int, address: int, word: Optional[int] = None) -> None:
        self.target: int = target
        super().__init__(f"memory access ${target:04X} out of range", address, word)
