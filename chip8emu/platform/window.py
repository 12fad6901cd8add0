"""
Main application window for CHIP8EMU.
Uses pygame to create a display, drive the emulation main loop, and
coordinate video and input.

Typical usage::

    from chip8emu.platform.window import Window

    machine = MachineFactory.create("pong.ch8")
    window = Window(machine, scale=10)
    window.run()
"""

from __future__ import annotations

import logging
import time
from typing import Optional

import pygame

from chip8emu.core.errors import Chip8Error
from chip8emu.core.machine import Chip8
from chip8emu.core.types import Cycle
from chip8emu.platform.input_handler import InputHandler
from chip8emu.shell.frame_renderer import FrameRenderer

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_WINDOW_TITLE: str = "CHIP8EMU - Python"

# Minimum / maximum allowed display scale factors.
_MIN_SCALE: int = 1
_MAX_SCALE: int = 20

# Host frame rate.  Timers run at 60 Hz regardless of this value.
_FRAME_HZ: int = 60

DEFAULT_SPEED: int = 700


class Window:
    """Pygame window that owns the emulation main loop.

    Parameters
    ----------
    machine:
        A machine with its program loaded.
    scale:
        Integer scale factor applied to the native 64x32 resolution.
    speed:
        Instructions executed per second of real time.
    """

    def __init__(
        self,
        machine: Chip8,
        scale: int = 10,
        *,
        speed: int = DEFAULT_SPEED,
    ) -> None:
        if speed <= 0:
            raise ValueError(f"speed must be positive, got {speed}")

        # ---- basic state -------------------------------------------------
        self._machine = machine
        self._scale: int = max(_MIN_SCALE, min(_MAX_SCALE, scale))
        self._cycles_per_frame: int = max(1, round(speed / _FRAME_HZ))
        self._running: bool = False
        self._paused: bool = False
        self._dirty: bool = True
        self.fault: Optional[Chip8Error] = None

        # ---- init pygame display -----------------------------------------
        if not pygame.get_init():
            pygame.init()

        self._native_width: int = machine.display.width
        self._native_height: int = machine.display.height
        self._display_width: int = self._native_width * self._scale
        self._display_height: int = self._native_height * self._scale

        self._screen: pygame.Surface = pygame.display.set_mode(
            (self._display_width, self._display_height),
            pygame.RESIZABLE,
        )
        pygame.display.set_caption(_WINDOW_TITLE)

        self._clock: pygame.time.Clock = pygame.time.Clock()

        # ---- subsystems --------------------------------------------------
        self._frame_renderer: FrameRenderer = FrameRenderer(machine)
        self._input: InputHandler = InputHandler()

        logger.info(
            "Window: %dx%d native, %dx%d display (scale=%d, %d cycles/frame)",
            self._native_width,
            self._native_height,
            self._display_width,
            self._display_height,
            self._scale,
            self._cycles_per_frame,
        )

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def running(self) -> bool:
        return self._running

    @property
    def paused(self) -> bool:
        return self._paused

    @paused.setter
    def paused(self, value: bool) -> None:
        self._paused = value

    @property
    def scale(self) -> int:
        return self._scale

    @property
    def cycles_per_frame(self) -> int:
        return self._cycles_per_frame

    # ------------------------------------------------------------------
    # Main loop
    # ------------------------------------------------------------------

    def run(self) -> None:
        """Enter the main emulation loop.

        This method blocks until the user closes the window, presses
        Escape, or the machine faults.  A fault is logged and kept in
        :attr:`fault` for the caller.
        """
        self._running = True
        logger.info("Entering main loop (%d fps)", _FRAME_HZ)

        try:
            while self._running:
                self._tick()
        except KeyboardInterrupt:
            logger.info("Interrupted by user")
        finally:
            self._shutdown()

    # ------------------------------------------------------------------
    # Per-frame tick
    # ------------------------------------------------------------------

    def _tick(self) -> None:
        """Execute one iteration of the main loop."""
        # ---- input -------------------------------------------------------
        self._input.poll()
        if self._input.quit_requested:
            self._running = False
            return
        if self._input.take_pause_request():
            self._paused = not self._paused
            logger.info("Paused" if self._paused else "Resumed")
        if self._input.take_reset_request():
            logger.info("Reset")
            self._machine.reset()
            self._dirty = True

        # ---- emulation ---------------------------------------------------
        if not self._paused:
            self._run_cycles()

        # ---- video -------------------------------------------------------
        if self._dirty:
            self._present()
            self._dirty = False

        # ---- timing ------------------------------------------------------
        self._clock.tick(_FRAME_HZ)

    def _run_cycles(self) -> None:
        key = self._input.pressed_key
        machine = self._machine
        try:
            for _ in range(self._cycles_per_frame):
                if machine.cycle(key, time.monotonic()) == Cycle.RedrawRequested:
                    self._dirty = True
        except Chip8Error as exc:
            logger.error("Machine halted: %s", exc)
            self.fault = exc
            self._running = False

    def _present(self) -> None:
        surface = self._frame_renderer.render()
        current_size = self._screen.get_size()
        scaled = pygame.transform.scale(surface, current_size)
        self._screen.blit(scaled, (0, 0))
        pygame.display.flip()

    # ------------------------------------------------------------------
    # Shutdown
    # ------------------------------------------------------------------

    def _shutdown(self) -> None:
        """Clean up all subsystems."""
        logger.info("Shutting down")
        pygame.quit()
