"""
TimerClock -- the delay and sound timers.

Both timers count down at a fixed 60 Hz of real time, independent of how
many instructions the host runs per second.  The clock never reads the
system time itself: every call receives the current instant, so tests
can drive it with synthetic time.
"""

from __future__ import annotations

from chip8emu.core.types import TIMER_HZ


class TimerClock:
    """Rate-limited countdown for the delay and sound timers.

    Parameters
    ----------
    now:
        Reference instant (seconds) used as the first update baseline.
    hz:
        Countdown frequency.
    """

    def __init__(self, now: float, hz: int = TIMER_HZ) -> None:
        if hz <= 0:
            raise ValueError(f"hz must be positive, got {hz}")
        self.period: float = 1.0 / hz
        self.last_update: float = now
        self.delay: int = 0
        self.sound: int = 0

    def tick(self, now: float) -> bool:
        """Decrement both timers if a full period has elapsed.

        Returns:
            ``True`` if the timers were updated on this call.
        """
        if now - self.last_update < self.period:
            return False
        self.last_update = now
        if self.delay > 0:
            self.delay -= 1
        if self.sound > 0:
            self.sound -= 1
        return True

    @property
    def sound_active(self) -> bool:
        """``True`` while the sound timer is non-zero."""
        return self.sound > 0

    def reset(self, now: float) -> None:
        self.last_update = now
        self.delay = 0
        self.sound = 0

    def __repr__(self) -> str:
        return f"TimerClock(delay={self.delay}, sound={self.sound})"
