"""
Machine creation factory for CHIP8EMU.

Creates a ready-to-run :class:`~chip8emu.core.machine.Chip8` from a ROM
file path plus optional seed and quirk overrides.

Typical usage::

    machine = MachineFactory.create("pong.ch8")
    machine = MachineFactory.create("pong.ch8", seed=1, quirks=Quirks(shift_sets_flag=True))
"""

from __future__ import annotations

import logging
from typing import Optional

from chip8emu.core.machine import Chip8
from chip8emu.core.quirks import Quirks
from chip8emu.shell.services.rom_bytes_service import RomBytesService

logger = logging.getLogger(__name__)


class MachineFactory:
    """Create an emulated machine from a ROM file."""

    @staticmethod
    def create(
        rom_path: str,
        seed: Optional[int] = None,
        quirks: Optional[Quirks] = None,
    ) -> Chip8:
        """Build and return a machine with the program loaded.

        Parameters
        ----------
        rom_path:
            Filesystem path to the program image.
        seed:
            Random number generator seed.  ``None`` for a fresh seed.
        quirks:
            Behaviour switches.  ``None`` uses the defaults.

        Raises
        ------
        FileNotFoundError
            If *rom_path* does not exist.
        OSError
            On any other read failure.
        """
        logger.info("Loading ROM: %s", rom_path)
        rom_bytes = RomBytesService.read(rom_path)
        if not RomBytesService.has_rom_extension(rom_path):
            logger.warning("Unusual extension for a CHIP-8 program: %s", rom_path)

        machine = Chip8(seed=seed, quirks=quirks)
        loaded = machine.load_program(rom_bytes)
        if loaded < len(rom_bytes):
            logger.warning(
                "ROM is %d bytes; truncated to %d", len(rom_bytes), loaded
            )
        logger.info("ROM size: %d bytes", loaded)
        logger.info("Quirks: %r", machine.quirks)
        logger.info("Machine created: %r", machine)
        return machine

    @staticmethod
    def describe(rom_path: str) -> dict[str, str]:
        """Return a human-readable description of a ROM file.

        Returns a dict with keys: ``title``, ``rom_size``, ``truncated``,
        ``entry``.
        """
        info = RomBytesService.inspect(RomBytesService.read(rom_path), rom_path)
        return {
            "title": info.title,
            "rom_size": str(info.size),
            "truncated": "yes" if info.truncated else "no",
            "entry": info.entry,
        }
