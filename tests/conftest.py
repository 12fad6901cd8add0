"""
Pytest configuration for the CHIP8EMU test suite.

pygame is pointed at SDL's dummy drivers so the window and renderer tests
run without a display or sound card.
"""

import os
import sys

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest

from chip8emu.core.machine import Chip8


def words(*values: int) -> bytes:
    """Encode instruction words as a big-endian program image."""
    return b"".join(v.to_bytes(2, "big") for v in values)


@pytest.fixture
def machine():
    """A fresh machine with a fixed seed and timer baseline 0."""
    return Chip8(seed=1234, now=0.0)


@pytest.fixture
def make_machine():
    """Factory fixture: ``make_machine(0x6005, 0x7001, quirks=...)``."""

    def _make(*program: int, **kwargs) -> Chip8:
        kwargs.setdefault("seed", 1234)
        kwargs.setdefault("now", 0.0)
        m = Chip8(**kwargs)
        m.load_program(words(*program))
        return m

    return _make
