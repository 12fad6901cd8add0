"""
Core enumerations and machine-wide constants for CHIP8EMU.
"""

from enum import IntEnum

MEMORY_SIZE: int = 4096
PROGRAM_START: int = 0x200
MAX_PROGRAM_SIZE: int = MEMORY_SIZE - PROGRAM_START

NUM_REGISTERS: int = 16
FLAG_REGISTER: int = 0xF
NUM_KEYS: int = 16

SCREEN_WIDTH: int = 64
SCREEN_HEIGHT: int = 32
SPRITE_WIDTH: int = 8

TIMER_HZ: int = 60

FONT_START: int = 0x000
FONT_GLYPH_SIZE: int = 5

# fmt: off
FONT: bytes = bytes([
    0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
    0x20, 0x60, 0x20, 0x20, 0x70,  # 1
    0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
    0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
    0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
    0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
    0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
    0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
    0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
    0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
    0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
    0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
    0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
    0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
    0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
    0xF0, 0x80, 0xF0, 0x80, 0x80,  # F
])
# fmt: on


class Cycle(IntEnum):
    """Outcome of executing one instruction."""

    Complete = 0
    RedrawRequested = 1
