# CHIP8EMU emulation core
"""
Pure emulation core: bit-field extraction, decoding, machine state and
the execution engine.  Nothing in this package performs I/O.
"""

from chip8emu.core.decode import decode
from chip8emu.core.errors import (
    Chip8Error,
    DecodeError,
    MemoryAccessError,
    ProgramCounterError,
    StackUnderflowError,
)
from chip8emu.core.machine import Chip8
from chip8emu.core.quirks import Quirks
from chip8emu.core.types import Cycle

__all__ = [
    "Chip8",
    "Chip8Error",
    "Cycle",
    "DecodeError",
    "MemoryAccessError",
    "ProgramCounterError",
    "Quirks",
    "StackUnderflowError",
    "decode",
]
