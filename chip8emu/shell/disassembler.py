"""
Linear disassembler for CHIP-8 program images.

Walks the image two bytes at a time and renders each word with the
decoder's mnemonics.  Data bytes embedded in code (sprites, tables) come
out as ``DW`` lines or as whatever instruction they happen to encode;
no control-flow analysis is attempted.
"""

from __future__ import annotations

from typing import Iterator, Tuple

from chip8emu.core.decode import decode
from chip8emu.core.types import PROGRAM_START

# Stop the listing after this many consecutive zero words (unused memory).
ZERO_RUN_LIMIT: int = 8


def disassemble(
    data: bytes,
    origin: int = PROGRAM_START,
    stop_on_zeros: bool = True,
) -> Iterator[Tuple[int, int, str]]:
    """Yield ``(address, word, text)`` for each word of *data*.

    A trailing odd byte is reported as a single-byte ``DB`` line.
    """
    zero_run = 0
    end = len(data) - (len(data) % 2)
    for offset in range(0, end, 2):
        word = (data[offset] << 8) | data[offset + 1]
        if word == 0:
            zero_run += 1
            if stop_on_zeros and zero_run > ZERO_RUN_LIMIT:
                return
        else:
            zero_run = 0
        yield origin + offset, word, str(decode(word))
    if end < len(data):
        yield origin + end, data[end], f"DB ${data[end]:02X}"


def format_listing(data: bytes, origin: int = PROGRAM_START) -> str:
    """Return the disassembly of *data* as text, one word per line."""
    lines = []
    for address, word, text in disassemble(data, origin):
        lines.append(f"${address:03X}  {word:04X}  {text}")
    return "\n".join(lines)
