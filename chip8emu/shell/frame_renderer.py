"""
Frame renderer for CHIP8EMU.
Converts the machine's boolean DisplayBuffer into an RGB pygame Surface.

The emulation core produces one boolean per pixel.  The renderer turns the
grid into luminance (lit -> 255, dark -> 0), maps that through a two-entry
colour table and writes the result into a pygame Surface suitable for
blitting to the display.

Performance notes
-----------------
The conversion uses **numpy** fancy indexing and
``pygame.surfarray.blit_array``, so the whole frame is written in one call.
"""

from __future__ import annotations

import logging
from typing import Tuple

import numpy as np
import pygame

logger = logging.getLogger(__name__)

RGB = Tuple[int, int, int]

DEFAULT_FOREGROUND: RGB = (0xFF, 0xFF, 0xFF)
DEFAULT_BACKGROUND: RGB = (0x00, 0x00, 0x00)


class FrameRenderer:
    """Convert a machine's :class:`DisplayBuffer` into a :class:`pygame.Surface`.

    Parameters
    ----------
    machine:
        The emulated machine.  Expected attributes:

        * ``display`` -- a :class:`~chip8emu.core.display.DisplayBuffer`
    foreground:
        RGB colour for lit pixels.
    background:
        RGB colour for dark pixels.
    """

    def __init__(
        self,
        machine: object,
        foreground: RGB = DEFAULT_FOREGROUND,
        background: RGB = DEFAULT_BACKGROUND,
    ) -> None:
        self._machine = machine
        display = machine.display  # type: ignore[attr-defined]
        self._width: int = display.width
        self._height: int = display.height

        # Two-entry LUT indexed by "is lit".
        self._lut: np.ndarray = np.zeros((2, 3), dtype=np.uint8)
        self.set_colours(foreground, background)

        self._surface: pygame.Surface = pygame.Surface((self._width, self._height))

        logger.info("FrameRenderer: %dx%d", self._width, self._height)

    # ------------------------------------------------------------------
    # Public interface
    # ------------------------------------------------------------------

    @property
    def width(self) -> int:
        """Width of the rendered surface in pixels."""
        return self._width

    @property
    def height(self) -> int:
        """Height of the rendered surface in pixels."""
        return self._height

    @property
    def surface(self) -> pygame.Surface:
        """The internal pygame Surface (updated on each :meth:`render` call)."""
        return self._surface

    def set_colours(self, foreground: RGB, background: RGB) -> None:
        """Replace the lit / dark colours."""
        for colour in (foreground, background):
            if len(colour) != 3 or not all(0 <= c <= 255 for c in colour):
                raise ValueError(f"Colour must be an (R, G, B) byte triple, got {colour!r}")
        self._lut[0] = background
        self._lut[1] = foreground

    def to_rgb(self) -> np.ndarray:
        """Return the current frame as an ``(H, W, 3)`` ``uint8`` array."""
        luminance = self._machine.display.to_luminance()  # type: ignore[attr-defined]
        return self._lut[(luminance > 0).astype(np.uint8)]

    def render(self) -> pygame.Surface:
        """Render the current frame and return the surface.

        The same :class:`pygame.Surface` object is reused each frame to
        avoid allocation churn.
        """
        rgb = self.to_rgb()
        # pygame surfarray expects (W, H, 3) -- transpose width and height.
        pygame.surfarray.blit_array(self._surface, rgb.transpose(1, 0, 2))
        return self._surface
