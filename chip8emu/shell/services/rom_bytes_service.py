"""
ROM loading service for CHIP8EMU.

Responsibilities:
  - Read program images from disk.
  - Report basic metadata (size, truncation, entry instruction).

CHIP-8 images carry no header; the whole file is the program, loaded at
0x200.  Anything past the end of the 4 KB address space is dropped by
:meth:`Chip8.load_program <chip8emu.core.machine.Chip8.load_program>`.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from chip8emu.core.decode import decode
from chip8emu.core.types import MAX_PROGRAM_SIZE, PROGRAM_START

# Conventional file extensions for CHIP-8 program images.
ROM_EXTENSIONS: frozenset[str] = frozenset({".ch8", ".c8", ".rom", ".bin"})


@dataclass(frozen=True)
class RomInfo:
    """Summary of a program image."""

    title: str
    size: int
    truncated: bool
    entry: str


class RomBytesService:
    """Static utility for loading program images."""

    @staticmethod
    def read(path: str) -> bytes:
        """Read a program image from *path*.

        Returns:
            The raw file contents.

        Raises:
            FileNotFoundError: If *path* does not exist.
            OSError: On general I/O failure.
        """
        with open(path, "rb") as fh:
            return fh.read()

    @staticmethod
    def inspect(data: bytes, path: str) -> RomInfo:
        """Build a :class:`RomInfo` for already-loaded *data*."""
        if len(data) >= 2:
            entry = str(decode((data[0] << 8) | data[1]))
        else:
            entry = "(empty)"
        return RomInfo(
            title=os.path.basename(path),
            size=len(data),
            truncated=len(data) > MAX_PROGRAM_SIZE,
            entry=f"${PROGRAM_START:03X}: {entry}",
        )

    @staticmethod
    def has_rom_extension(path: str) -> bool:
        """``True`` if *path* ends in a conventional CHIP-8 extension."""
        return os.path.splitext(path)[1].lower() in ROM_EXTENSIONS
