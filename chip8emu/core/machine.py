"""
Chip8 -- machine state and execution engine.

The machine owns everything an instruction can touch:

* **Registers** -- sixteen 8-bit registers V0..VF.  VF doubles as the
  carry / borrow / collision flag.
* **Memory** -- 4 KB.  The font lives at 0x000, programs load at 0x200.
* **Index register** -- 16-bit, wraps on overflow.
* **Call stack** -- unbounded list of return addresses.
* **Display** -- a :class:`~chip8emu.core.display.DisplayBuffer`.
* **Timers** -- a :class:`~chip8emu.core.timers.TimerClock`.
* **PRNG** -- a seeded ``numpy.random.Generator``.

One :meth:`Chip8.cycle` is fetch -> timer update -> decode -> execute.
The program counter is advanced past the fetched word before the
instruction runs, so skips and calls are relative to the next instruction.

Behaviour notes:

* Shifts ignore Vy and leave VF untouched unless
  :attr:`Quirks.shift_sets_flag` is set.
* Fx55 / Fx65 do not change I.
* Addresses derived from I are bounds-checked and raise
  :class:`MemoryAccessError`; :attr:`Quirks.wrap_memory` wraps them instead.
"""

from __future__ import annotations

import io
import logging
import time
from typing import BinaryIO, Callable, Dict, List, Optional, Union

import numpy as np

from chip8emu.core import instructions as ins
from chip8emu.core.decode import decode
from chip8emu.core.display import DisplayBuffer
from chip8emu.core.errors import (
    DecodeError,
    MemoryAccessError,
    ProgramCounterError,
    StackUnderflowError,
)
from chip8emu.core.quirks import Quirks
from chip8emu.core.timers import TimerClock
from chip8emu.core.types import (
    FLAG_REGISTER,
    FONT,
    FONT_GLYPH_SIZE,
    FONT_START,
    MAX_PROGRAM_SIZE,
    MEMORY_SIZE,
    NUM_KEYS,
    NUM_REGISTERS,
    PROGRAM_START,
    Cycle,
)

logger = logging.getLogger(__name__)


class Chip8:
    """CHIP-8 virtual machine.

    Parameters
    ----------
    seed:
        Seed for the random number generator behind Cxkk.  ``None`` draws
        fresh entropy.
    now:
        Reference instant (seconds) for the timer baseline.  Defaults to
        ``time.monotonic()``.
    quirks:
        Behaviour switches, see :class:`~chip8emu.core.quirks.Quirks`.
    """

    def __init__(
        self,
        seed: Optional[int] = None,
        now: Optional[float] = None,
        quirks: Optional[Quirks] = None,
    ) -> None:
        self.quirks: Quirks = quirks if quirks is not None else Quirks()
        self.seed: Optional[int] = seed

        self.registers: List[int] = [0] * NUM_REGISTERS
        self.memory: bytearray = bytearray(MEMORY_SIZE)
        self.pc: int = PROGRAM_START
        self.index: int = 0
        self.stack: List[int] = []

        self.display: DisplayBuffer = DisplayBuffer()
        self.timers: TimerClock = TimerClock(time.monotonic() if now is None else now)
        self.rng: np.random.Generator = np.random.default_rng(seed)

        self.cycle_count: int = 0
        self.program_size: int = 0

        # Address and word of the instruction being executed, for fault
        # reports.
        self._fetch_address: int = PROGRAM_START
        self._fetch_word: Optional[int] = None

        self.memory[FONT_START:FONT_START + len(FONT)] = FONT

        self._dispatch: Dict[type, Callable[..., Cycle]] = self._build_dispatch_table()

    # ------------------------------------------------------------------
    # Timer views
    # ------------------------------------------------------------------

    @property
    def delay_timer(self) -> int:
        return self.timers.delay

    @delay_timer.setter
    def delay_timer(self, value: int) -> None:
        self.timers.delay = value & 0xFF

    @property
    def sound_timer(self) -> int:
        return self.timers.sound

    @sound_timer.setter
    def sound_timer(self, value: int) -> None:
        self.timers.sound = value & 0xFF

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def reset(self, now: Optional[float] = None) -> None:
        """Return to the power-on state, keeping the loaded program.

        The random number generator is re-seeded so a reset machine
        replays the same random stream.
        """
        self.registers = [0] * NUM_REGISTERS
        self.pc = PROGRAM_START
        self.index = 0
        self.stack.clear()
        self.display.clear()
        self.timers.reset(time.monotonic() if now is None else now)
        self.rng = np.random.default_rng(self.seed)
        self.cycle_count = 0
        self._fetch_address = PROGRAM_START
        self._fetch_word = None

    def load_program(self, source: Union[bytes, bytearray, BinaryIO]) -> int:
        """Copy a program image into memory at 0x200.

        Images longer than the program region are truncated.  Any previous
        program bytes are cleared first.

        Args:
            source: Raw bytes or a binary file-like object.

        Returns:
            The number of bytes loaded.

        Raises:
            OSError: If reading *source* fails.
        """
        if isinstance(source, (bytes, bytearray)):
            source = io.BytesIO(source)
        data = source.read(MAX_PROGRAM_SIZE)
        self.memory[PROGRAM_START:] = bytes(MAX_PROGRAM_SIZE)
        self.memory[PROGRAM_START:PROGRAM_START + len(data)] = data
        self.program_size = len(data)
        logger.debug("Loaded %d program bytes at $%03X", len(data), PROGRAM_START)
        return len(data)

    # ------------------------------------------------------------------
    # Fetch / cycle
    # ------------------------------------------------------------------

    def pc_in_bounds(self) -> bool:
        """``True`` if a full instruction word can be fetched at pc."""
        return PROGRAM_START <= self.pc <= MEMORY_SIZE - 2

    def fetch(self) -> int:
        """Return the big-endian word at pc without advancing."""
        return (self.memory[self.pc] << 8) | self.memory[self.pc + 1]

    def cycle(self, key: Optional[int] = None, now: Optional[float] = None) -> Cycle:
        """Run one fetch / timer / decode / execute step.

        Args:
            key: The currently pressed key (0x0-0xF), or ``None``.
            now: Current instant in seconds; defaults to
                ``time.monotonic()``.

        Raises:
            ProgramCounterError: pc is outside the program region, or odd
                with :attr:`Quirks.strict_alignment`.
            DecodeError: The fetched word is not an instruction.
            StackUnderflowError: Return with an empty stack.
            MemoryAccessError: An I-relative access left memory.
        """
        if not self.pc_in_bounds():
            raise ProgramCounterError("program counter out of bounds", self.pc)
        if self.quirks.strict_alignment and self.pc & 1:
            raise ProgramCounterError("misaligned program counter", self.pc)

        word = self.fetch()
        self._fetch_address = self.pc
        self._fetch_word = word

        self.timers.tick(time.monotonic() if now is None else now)

        self.pc += 2
        instruction = decode(word)
        if isinstance(instruction, ins.Unrecognized):
            raise DecodeError("unrecognized instruction", self._fetch_address, word)

        logger.debug("$%03X: %04X  %s", self._fetch_address, word, instruction)
        self.cycle_count += 1
        return self.execute(instruction, key)

    # ------------------------------------------------------------------
    # Execution engine
    # ------------------------------------------------------------------

    def execute(self, instruction: ins.Instruction, key: Optional[int] = None) -> Cycle:
        """Apply *instruction* to the machine state.

        pc must already point past the instruction.

        Returns:
            :attr:`Cycle.RedrawRequested` if the display was cleared or
            drawn to, :attr:`Cycle.Complete` otherwise.
        """
        if key is not None and not 0 <= key < NUM_KEYS:
            raise ValueError(f"key must be in [0, {NUM_KEYS - 1}], got {key}")
        handler = self._dispatch.get(type(instruction))
        if handler is None:
            raise TypeError(f"cannot execute {instruction!r}")
        return handler(instruction, key)

    def _build_dispatch_table(self) -> Dict[type, Callable[..., Cycle]]:
        return {
            ins.ClearScreen: self._op_clear_screen,
            ins.Return: self._op_return,
            ins.Jump: self._op_jump,
            ins.Call: self._op_call,
            ins.SkipEqImm: self._op_skip_eq_imm,
            ins.SkipNeqImm: self._op_skip_neq_imm,
            ins.SkipEqReg: self._op_skip_eq_reg,
            ins.SkipNeqReg: self._op_skip_neq_reg,
            ins.LoadImm: self._op_load_imm,
            ins.AddImm: self._op_add_imm,
            ins.Move: self._op_move,
            ins.Or: self._op_or,
            ins.And: self._op_and,
            ins.Xor: self._op_xor,
            ins.Add: self._op_add,
            ins.SubForward: self._op_sub_forward,
            ins.SubBackward: self._op_sub_backward,
            ins.ShiftRight: self._op_shift_right,
            ins.ShiftLeft: self._op_shift_left,
            ins.LoadIndex: self._op_load_index,
            ins.Random: self._op_random,
            ins.Draw: self._op_draw,
            ins.SkipKeyPressed: self._op_skip_key_pressed,
            ins.SkipKeyNotPressed: self._op_skip_key_not_pressed,
            ins.LoadDelay: self._op_load_delay,
            ins.WaitKey: self._op_wait_key,
            ins.StoreDelay: self._op_store_delay,
            ins.StoreSound: self._op_store_sound,
            ins.AddToIndex: self._op_add_to_index,
            ins.FontChar: self._op_font_char,
            ins.StoreBCD: self._op_store_bcd,
            ins.StoreRange: self._op_store_range,
            ins.LoadRange: self._op_load_range,
        }

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _skip_if(self, condition: bool) -> Cycle:
        if condition:
            self.pc += 2
        return Cycle.Complete

    def _address(self, offset: int) -> int:
        """Resolve ``I + offset`` against the memory bounds policy."""
        target = self.index + offset
        if target < MEMORY_SIZE:
            return target
        if self.quirks.wrap_memory:
            return target % MEMORY_SIZE
        raise MemoryAccessError(target, self._fetch_address, self._fetch_word)

    # ------------------------------------------------------------------
    # Flow control
    # ------------------------------------------------------------------

    def _op_clear_screen(self, op: ins.ClearScreen, key: Optional[int]) -> Cycle:
        self.display.clear()
        return Cycle.RedrawRequested

    def _op_return(self, op: ins.Return, key: Optional[int]) -> Cycle:
        if not self.stack:
            raise StackUnderflowError(
                "return with empty call stack", self._fetch_address, self._fetch_word
            )
        self.pc = self.stack.pop()
        return Cycle.Complete

    def _op_jump(self, op: ins.Jump, key: Optional[int]) -> Cycle:
        self.pc = op.dest
        return Cycle.Complete

    def _op_call(self, op: ins.Call, key: Optional[int]) -> Cycle:
        self.stack.append(self.pc)
        self.pc = op.dest
        return Cycle.Complete

    # ------------------------------------------------------------------
    # Skips
    # ------------------------------------------------------------------

    def _op_skip_eq_imm(self, op: ins.SkipEqImm, key: Optional[int]) -> Cycle:
        return self._skip_if(self.registers[op.register] == op.value)

    def _op_skip_neq_imm(self, op: ins.SkipNeqImm, key: Optional[int]) -> Cycle:
        return self._skip_if(self.registers[op.register] != op.value)

    def _op_skip_eq_reg(self, op: ins.SkipEqReg, key: Optional[int]) -> Cycle:
        return self._skip_if(self.registers[op.x] == self.registers[op.y])

    def _op_skip_neq_reg(self, op: ins.SkipNeqReg, key: Optional[int]) -> Cycle:
        return self._skip_if(self.registers[op.x] != self.registers[op.y])

    def _op_skip_key_pressed(self, op: ins.SkipKeyPressed, key: Optional[int]) -> Cycle:
        return self._skip_if(key is not None and key == self.registers[op.register])

    def _op_skip_key_not_pressed(self, op: ins.SkipKeyNotPressed, key: Optional[int]) -> Cycle:
        return self._skip_if(key is None or key != self.registers[op.register])

    # ------------------------------------------------------------------
    # Register arithmetic
    # ------------------------------------------------------------------

    def _op_load_imm(self, op: ins.LoadImm, key: Optional[int]) -> Cycle:
        self.registers[op.register] = op.value & 0xFF
        return Cycle.Complete

    def _op_add_imm(self, op: ins.AddImm, key: Optional[int]) -> Cycle:
        self.registers[op.register] = (self.registers[op.register] + op.value) & 0xFF
        return Cycle.Complete

    def _op_move(self, op: ins.Move, key: Optional[int]) -> Cycle:
        self.registers[op.x] = self.registers[op.y]
        return Cycle.Complete

    def _op_or(self, op: ins.Or, key: Optional[int]) -> Cycle:
        self.registers[op.x] |= self.registers[op.y]
        return Cycle.Complete

    def _op_and(self, op: ins.And, key: Optional[int]) -> Cycle:
        self.registers[op.x] &= self.registers[op.y]
        return Cycle.Complete

    def _op_xor(self, op: ins.Xor, key: Optional[int]) -> Cycle:
        self.registers[op.x] ^= self.registers[op.y]
        return Cycle.Complete

    def _op_add(self, op: ins.Add, key: Optional[int]) -> Cycle:
        total = self.registers[op.x] + self.registers[op.y]
        self.registers[op.x] = total & 0xFF
        self.registers[FLAG_REGISTER] = 1 if total > 0xFF else 0
        return Cycle.Complete

    def _op_sub_forward(self, op: ins.SubForward, key: Optional[int]) -> Cycle:
        vx, vy = self.registers[op.x], self.registers[op.y]
        self.registers[op.x] = (vx - vy) & 0xFF
        self.registers[FLAG_REGISTER] = 1 if vx >= vy else 0
        return Cycle.Complete

    def _op_sub_backward(self, op: ins.SubBackward, key: Optional[int]) -> Cycle:
        vx, vy = self.registers[op.x], self.registers[op.y]
        self.registers[op.x] = (vy - vx) & 0xFF
        self.registers[FLAG_REGISTER] = 1 if vy >= vx else 0
        return Cycle.Complete

    def _op_shift_right(self, op: ins.ShiftRight, key: Optional[int]) -> Cycle:
        vx = self.registers[op.x]
        self.registers[op.x] = vx >> 1
        if self.quirks.shift_sets_flag:
            self.registers[FLAG_REGISTER] = vx & 0x01
        return Cycle.Complete

    def _op_shift_left(self, op: ins.ShiftLeft, key: Optional[int]) -> Cycle:
        vx = self.registers[op.x]
        self.registers[op.x] = (vx << 1) & 0xFF
        if self.quirks.shift_sets_flag:
            self.registers[FLAG_REGISTER] = (vx >> 7) & 0x01
        return Cycle.Complete

    def _op_random(self, op: ins.Random, key: Optional[int]) -> Cycle:
        self.registers[op.register] = int(self.rng.integers(0, 256)) & op.mask
        return Cycle.Complete

    # ------------------------------------------------------------------
    # Index register and memory
    # ------------------------------------------------------------------

    def _op_load_index(self, op: ins.LoadIndex, key: Optional[int]) -> Cycle:
        self.index = op.value & 0xFFFF
        return Cycle.Complete

    def _op_add_to_index(self, op: ins.AddToIndex, key: Optional[int]) -> Cycle:
        total = self.index + self.registers[op.register]
        self.index = total & 0xFFFF
        self.registers[FLAG_REGISTER] = 1 if total > 0xFFFF else 0
        return Cycle.Complete

    def _op_font_char(self, op: ins.FontChar, key: Optional[int]) -> Cycle:
        self.index = FONT_START + (self.registers[op.register] & 0xF) * FONT_GLYPH_SIZE
        return Cycle.Complete

    def _op_store_bcd(self, op: ins.StoreBCD, key: Optional[int]) -> Cycle:
        value = self.registers[op.register]
        digits = (value // 100, (value // 10) % 10, value % 10)
        for offset, digit in enumerate(digits):
            self.memory[self._address(offset)] = digit
        return Cycle.Complete

    def _op_store_range(self, op: ins.StoreRange, key: Optional[int]) -> Cycle:
        for r in range(op.last + 1):
            self.memory[self._address(r)] = self.registers[r]
        return Cycle.Complete

    def _op_load_range(self, op: ins.LoadRange, key: Optional[int]) -> Cycle:
        for r in range(op.last + 1):
            self.registers[r] = self.memory[self._address(r)]
        return Cycle.Complete

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def _op_draw(self, op: ins.Draw, key: Optional[int]) -> Cycle:
        rows = [self.memory[self._address(r)] for r in range(op.height)]
        collision = self.display.draw_sprite(
            self.registers[op.x], self.registers[op.y], rows
        )
        self.registers[FLAG_REGISTER] = 1 if collision else 0
        return Cycle.RedrawRequested

    # ------------------------------------------------------------------
    # Timers and keyboard
    # ------------------------------------------------------------------

    def _op_load_delay(self, op: ins.LoadDelay, key: Optional[int]) -> Cycle:
        self.registers[op.register] = self.timers.delay
        return Cycle.Complete

    def _op_store_delay(self, op: ins.StoreDelay, key: Optional[int]) -> Cycle:
        self.timers.delay = self.registers[op.register]
        return Cycle.Complete

    def _op_store_sound(self, op: ins.StoreSound, key: Optional[int]) -> Cycle:
        self.timers.sound = self.registers[op.register]
        return Cycle.Complete

    def _op_wait_key(self, op: ins.WaitKey, key: Optional[int]) -> Cycle:
        if key is None:
            # Re-fetch this instruction next cycle.
            self.pc -= 2
        else:
            self.registers[op.register] = key
        return Cycle.Complete

    # ------------------------------------------------------------------
    # Serialisation helpers (save-state support)
    # ------------------------------------------------------------------

    def get_snapshot(self) -> dict:
        """Return a serialisable snapshot of the machine state.

        The random number generator state is included, so restoring a
        snapshot also restores the random stream.
        """
        return {
            "registers": list(self.registers),
            "memory": bytes(self.memory),
            "pc": self.pc,
            "index": self.index,
            "stack": list(self.stack),
            "delay_timer": self.timers.delay,
            "sound_timer": self.timers.sound,
            "display": self.display.pixels.tolist(),
            "rng_state": self.rng.bit_generator.state,
            "cycle_count": self.cycle_count,
        }

    def restore_snapshot(self, snapshot: dict) -> None:
        """Restore machine state from :meth:`get_snapshot` output."""
        self.registers = list(snapshot["registers"])
        self.memory[:] = snapshot["memory"]
        self.pc = snapshot["pc"]
        self.index = snapshot["index"]
        self.stack = list(snapshot["stack"])
        self.timers.delay = snapshot["delay_timer"]
        self.timers.sound = snapshot["sound_timer"]
        self.display.pixels[:, :] = np.array(snapshot["display"], dtype=bool)
        self.rng.bit_generator.state = snapshot["rng_state"]
        self.cycle_count = snapshot.get("cycle_count", 0)

    # ------------------------------------------------------------------
    # Dunder helpers
    # ------------------------------------------------------------------

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"pc=${self.pc:03X}, "
            f"index=${self.index:04X}, "
            f"stack_depth={len(self.stack)}, "
            f"cycles={self.cycle_count})"
        )
