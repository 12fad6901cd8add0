"""
DisplayBuffer -- the monochrome video output of the machine.

The buffer is a numpy ``bool`` array laid out in row order:
``pixels[y, x]`` with ``0 <= x < 64`` and ``0 <= y < 32``.  It only
changes through :meth:`DisplayBuffer.clear` and
:meth:`DisplayBuffer.draw_sprite`, and it persists across cycles.

Standard dimensions
-------------------

=======  =====  ======
Mode     width  height
=======  =====  ======
CHIP-8   64     32
=======  =====  ======
"""

from __future__ import annotations

from typing import Sequence

import numpy as np

from chip8emu.core.types import SCREEN_HEIGHT, SCREEN_WIDTH, SPRITE_WIDTH


class DisplayBuffer:
    """Holds the 64x32 pixel grid.

    Parameters
    ----------
    width:
        Horizontal pixel count.
    height:
        Vertical pixel count.
    """

    def __init__(self, width: int = SCREEN_WIDTH, height: int = SCREEN_HEIGHT) -> None:
        if width <= 0:
            raise ValueError(f"width must be positive, got {width}")
        if height <= 0:
            raise ValueError(f"height must be positive, got {height}")

        self.width: int = width
        self.height: int = height
        self.pixels: np.ndarray = np.zeros((height, width), dtype=bool)

    # ------------------------------------------------------------------
    # Pixel access
    # ------------------------------------------------------------------

    def get_pixel(self, x: int, y: int) -> bool:
        """Return ``True`` if the cell at (*x*, *y*) is lit.

        Raises:
            IndexError: If the coordinates are off-screen.
        """
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"pixel ({x}, {y}) out of range")
        return bool(self.pixels[y, x])

    @property
    def lit_count(self) -> int:
        """Number of lit cells."""
        return int(np.count_nonzero(self.pixels))

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def clear(self) -> None:
        """Turn every cell off."""
        self.pixels.fill(False)

    def draw_sprite(self, x: int, y: int, rows: Sequence[int]) -> bool:
        """XOR an 8-pixel-wide sprite onto the grid.

        The origin is wrapped onto the screen (``x mod width``,
        ``y mod height``) but the sprite body is clipped at the right and
        bottom edges.

        Args:
            x: Horizontal origin.
            y: Vertical origin.
            rows: One byte per sprite row, most significant bit leftmost.

        Returns:
            ``True`` if any lit cell was turned off.
        """
        x0 = x % self.width
        y0 = y % self.height
        collision = False
        for row_index, row in enumerate(rows):
            py = y0 + row_index
            if py >= self.height:
                break
            for bit in range(SPRITE_WIDTH):
                if not row & (0x80 >> bit):
                    continue
                px = x0 + bit
                if px >= self.width:
                    break
                if self.pixels[py, px]:
                    collision = True
                self.pixels[py, px] ^= True
        return collision

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------

    def to_luminance(self) -> np.ndarray:
        """Return a ``uint8`` copy of the grid: 255 for lit cells, else 0."""
        return np.where(self.pixels, 255, 0).astype(np.uint8)

    def copy(self) -> np.ndarray:
        """Return a snapshot of the pixel grid."""
        return self.pixels.copy()

    # ------------------------------------------------------------------
    # Dunder helpers
    # ------------------------------------------------------------------

    def __repr__(self) -> str:
        return (
            f"DisplayBuffer("
            f"width={self.width}, "
            f"height={self.height}, "
            f"lit={self.lit_count})"
        )
