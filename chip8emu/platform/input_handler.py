"""
Input handler for CHIP8EMU.
Maps keyboard keys to the 16-key hexadecimal keypad.

Keyboard layout
---------------

The conventional mapping puts the COSMAC VIP keypad on the left of a
QWERTY keyboard:

===========  ===========
Keypad       Keyboard
===========  ===========
1 2 3 C      1 2 3 4
4 5 6 D      Q W E R
7 8 9 E      A S D F
A 0 B F      Z X C V
===========  ===========

=========  ==============
Key        Action
=========  ==============
Escape     Quit
P          Pause / resume
F1         Reset machine
=========  ==============

Only one key can be reported to the machine per cycle; while several are
held, the most recently pressed one wins.
"""

from __future__ import annotations

import logging
from typing import List, Optional

import pygame

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Keyboard -> keypad mappings
# ---------------------------------------------------------------------------

_KEY_MAP: dict[int, int] = {
    pygame.K_1: 0x1, pygame.K_2: 0x2, pygame.K_3: 0x3, pygame.K_4: 0xC,
    pygame.K_q: 0x4, pygame.K_w: 0x5, pygame.K_e: 0x6, pygame.K_r: 0xD,
    pygame.K_a: 0x7, pygame.K_s: 0x8, pygame.K_d: 0x9, pygame.K_f: 0xE,
    pygame.K_z: 0xA, pygame.K_x: 0x0, pygame.K_c: 0xB, pygame.K_v: 0xF,
}


class InputHandler:
    """Translates pygame keyboard events into the current keypad key."""

    def __init__(self) -> None:
        self._quit_requested: bool = False
        self._pause_requested: bool = False
        self._reset_requested: bool = False
        # Held keypad keys in press order; the last entry is reported.
        self._held: List[int] = []

    # ------------------------------------------------------------------
    # Public interface
    # ------------------------------------------------------------------

    @property
    def quit_requested(self) -> bool:
        """``True`` if the user pressed Escape or closed the window."""
        return self._quit_requested

    @property
    def pressed_key(self) -> Optional[int]:
        """The keypad key to report this cycle, or ``None``."""
        return self._held[-1] if self._held else None

    def take_pause_request(self) -> bool:
        """Return and clear the pending pause toggle."""
        requested, self._pause_requested = self._pause_requested, False
        return requested

    def take_reset_request(self) -> bool:
        """Return and clear the pending reset request."""
        requested, self._reset_requested = self._reset_requested, False
        return requested

    def poll(self) -> None:
        """Pump the pygame event queue and process all pending events.

        This should be called once at the top of each frame.
        """
        for event in pygame.event.get():
            self.handle_event(event)

    def handle_event(self, event: pygame.event.Event) -> None:
        """Process a single pygame event."""
        if event.type == pygame.QUIT:
            self._quit_requested = True
            return

        if event.type == pygame.KEYDOWN:
            self._on_key_down(event)
        elif event.type == pygame.KEYUP:
            self._on_key_up(event)

    def clear_all(self) -> None:
        """Release all currently-held keys."""
        self._held.clear()

    # ------------------------------------------------------------------
    # Keyboard handlers
    # ------------------------------------------------------------------

    def _on_key_down(self, event: pygame.event.Event) -> None:
        key = event.key

        if key == pygame.K_ESCAPE:
            self._quit_requested = True
            return
        if key == pygame.K_p:
            self._pause_requested = True
            return
        if key == pygame.K_F1:
            self._reset_requested = True
            return

        pad = _KEY_MAP.get(key)
        if pad is None:
            return
        if pad in self._held:
            self._held.remove(pad)
        self._held.append(pad)
        logger.debug("Keypad %X down", pad)

    def _on_key_up(self, event: pygame.event.Event) -> None:
        pad = _KEY_MAP.get(event.key)
        if pad is not None and pad in self._held:
            self._held.remove(pad)
            logger.debug("Keypad %X up", pad)
