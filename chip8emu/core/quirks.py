"""
Behavioural switches where interpreters historically disagree.

The defaults follow common modern interpreter behaviour.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Quirks:
    """Interpreter quirk configuration.

    Attributes
    ----------
    shift_sets_flag:
        When ``True``, 8xy6/8xyE write the shifted-out bit to VF as the
        original hardware did.  Off by default: shifts leave VF alone.
    strict_alignment:
        When ``True``, fetching from an odd program counter is fatal.
    wrap_memory:
        When ``True``, index-derived memory addresses wrap modulo 4096
        instead of raising :class:`~chip8emu.core.errors.MemoryAccessError`.
    """

    shift_sets_flag: bool = False
    strict_alignment: bool = False
    wrap_memory: bool = False
