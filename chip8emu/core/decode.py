"""
Instruction decoder.

:func:`decode` is total: every 16-bit word maps either to an
:class:`~chip8emu.core.instructions.Instruction` or to
:class:`~chip8emu.core.instructions.Unrecognized`.  Dispatch is on the top
nibble; groups 0x0, 0x8, 0xE and 0xF select the instruction from a second
table keyed on their low field.
"""

from __future__ import annotations

from typing import Callable, Dict

from chip8emu.core import instructions as ins
from chip8emu.core.bits import get_nibble, get_nibbles

# 0x0nnn: exact match on the low twelve bits.
_SYSTEM_OPS: Dict[int, ins.Instruction] = {
    0x0E0: ins.ClearScreen(),
    0x0EE: ins.Return(),
}

# 0x8xyN: keyed on the low nibble.
_ALU_OPS: Dict[int, type] = {
    0x0: ins.Move,
    0x1: ins.Or,
    0x2: ins.And,
    0x3: ins.Xor,
    0x4: ins.Add,
    0x5: ins.SubForward,
    0x6: ins.ShiftRight,
    0x7: ins.SubBackward,
    0xE: ins.ShiftLeft,
}

# 0xExNN: keyed on the low byte.
_KEY_OPS: Dict[int, type] = {
    0x9E: ins.SkipKeyPressed,
    0xA1: ins.SkipKeyNotPressed,
}

# 0xFxNN: keyed on the low byte.
_MISC_OPS: Dict[int, type] = {
    0x07: ins.LoadDelay,
    0x0A: ins.WaitKey,
    0x15: ins.StoreDelay,
    0x18: ins.StoreSound,
    0x1E: ins.AddToIndex,
    0x29: ins.FontChar,
    0x33: ins.StoreBCD,
    0x55: ins.StoreRange,
    0x65: ins.LoadRange,
}


def _x(word: int) -> int:
    return get_nibble(word, 1)


def _y(word: int) -> int:
    return get_nibble(word, 2)


def _kk(word: int) -> int:
    return get_nibbles(word, 2, 2)


def _nnn(word: int) -> int:
    return get_nibbles(word, 1, 3)


def _decode_system(word: int) -> ins.DecodeResult:
    return _SYSTEM_OPS.get(_nnn(word), ins.Unrecognized(word))


def _decode_jump(word: int) -> ins.DecodeResult:
    return ins.Jump(_nnn(word))


def _decode_call(word: int) -> ins.DecodeResult:
    return ins.Call(_nnn(word))


def _decode_skip_eq_imm(word: int) -> ins.DecodeResult:
    return ins.SkipEqImm(_x(word), _kk(word))


def _decode_skip_neq_imm(word: int) -> ins.DecodeResult:
    return ins.SkipNeqImm(_x(word), _kk(word))


def _decode_skip_eq_reg(word: int) -> ins.DecodeResult:
    if get_nibble(word, 3) != 0:
        return ins.Unrecognized(word)
    return ins.SkipEqReg(_x(word), _y(word))


def _decode_load_imm(word: int) -> ins.DecodeResult:
    return ins.LoadImm(_x(word), _kk(word))


def _decode_add_imm(word: int) -> ins.DecodeResult:
    return ins.AddImm(_x(word), _kk(word))


def _decode_alu(word: int) -> ins.DecodeResult:
    op = _ALU_OPS.get(get_nibble(word, 3))
    if op is None:
        return ins.Unrecognized(word)
    return op(_x(word), _y(word))


def _decode_skip_neq_reg(word: int) -> ins.DecodeResult:
    if get_nibble(word, 3) != 0:
        return ins.Unrecognized(word)
    return ins.SkipNeqReg(_x(word), _y(word))


def _decode_load_index(word: int) -> ins.DecodeResult:
    return ins.LoadIndex(_nnn(word))


def _decode_random(word: int) -> ins.DecodeResult:
    return ins.Random(_x(word), _kk(word))


def _decode_draw(word: int) -> ins.DecodeResult:
    return ins.Draw(_x(word), _y(word), get_nibble(word, 3))


def _decode_key(word: int) -> ins.DecodeResult:
    op = _KEY_OPS.get(_kk(word))
    if op is None:
        return ins.Unrecognized(word)
    return op(_x(word))


def _decode_misc(word: int) -> ins.DecodeResult:
    op = _MISC_OPS.get(_kk(word))
    if op is None:
        return ins.Unrecognized(word)
    return op(_x(word))


def _unrecognized(word: int) -> ins.DecodeResult:
    return ins.Unrecognized(word)


_GROUPS: Dict[int, Callable[[int], ins.DecodeResult]] = {
    0x0: _decode_system,
    0x1: _decode_jump,
    0x2: _decode_call,
    0x3: _decode_skip_eq_imm,
    0x4: _decode_skip_neq_imm,
    0x5: _decode_skip_eq_reg,
    0x6: _decode_load_imm,
    0x7: _decode_add_imm,
    0x8: _decode_alu,
    0x9: _decode_skip_neq_reg,
    0xA: _decode_load_index,
    0xB: _unrecognized,
    0xC: _decode_random,
    0xD: _decode_draw,
    0xE: _decode_key,
    0xF: _decode_misc,
}


def decode(word: int) -> ins.DecodeResult:
    """Decode a 16-bit instruction word.

    Words outside ``[0, 0xFFFF]`` are masked to 16 bits first.
    """
    word &= 0xFFFF
    return _GROUPS[get_nibble(word, 0)](word)
