"""
Human-readable machine dumps.

Nothing here is part of the emulation; these helpers exist for the
``--debug`` CLI mode and for poking at a machine from a REPL.
"""

from __future__ import annotations

from chip8emu.core.display import DisplayBuffer
from chip8emu.core.machine import Chip8

LIT_CHAR: str = "#"
DARK_CHAR: str = "."


def render_text(display: DisplayBuffer, lit: str = LIT_CHAR, dark: str = DARK_CHAR) -> str:
    """Render the display grid as lines of text."""
    return "\n".join(
        "".join(lit if cell else dark for cell in row)
        for row in display.pixels
    )


def format_state(machine: Chip8, include_display: bool = True) -> str:
    """Return a multi-line dump of registers, stack, timers and display."""
    regs = machine.registers
    lines = [
        f"PC=${machine.pc:03X}  I=${machine.index:04X}  "
        f"DT={machine.delay_timer:3d}  ST={machine.sound_timer:3d}  "
        f"cycles={machine.cycle_count}",
        "  ".join(f"V{r:X}={regs[r]:02X}" for r in range(0, 8)),
        "  ".join(f"V{r:X}={regs[r]:02X}" for r in range(8, 16)),
    ]
    if machine.stack:
        lines.append("Stack: " + " ".join(f"${a:03X}" for a in machine.stack))
    else:
        lines.append("Stack: (empty)")
    if include_display:
        lines.append(f"Display: {machine.display.lit_count} lit")
        lines.append(render_text(machine.display))
    return "\n".join(lines)
