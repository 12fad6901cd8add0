"""
Decoded instruction types.

Each instruction is a small frozen dataclass; together they form a tagged
union that :func:`~chip8emu.core.decode.decode` produces and
:meth:`~chip8emu.core.machine.Chip8.execute` consumes.  ``str()`` on any
instruction gives its assembler mnemonic.

Field naming: ``register`` is a single Vx operand, ``x``/``y`` are the two
register operands of register-register forms, ``value`` is an immediate.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union


class Instruction:
    """Marker base class for every decoded instruction."""

    __slots__ = ()


# ----------------------------------------------------------------------
# Flow control
# ----------------------------------------------------------------------


@dataclass(frozen=True)
class ClearScreen(Instruction):
    def __str__(self) -> str:
        return "CLS"


@dataclass(frozen=True)
class Return(Instruction):
    def __str__(self) -> str:
        return "RET"


@dataclass(frozen=True)
class Jump(Instruction):
    dest: int

    def __str__(self) -> str:
        return f"JP ${self.dest:03X}"


@dataclass(frozen=True)
class Call(Instruction):
    dest: int

    def __str__(self) -> str:
        return f"CALL ${self.dest:03X}"


# ----------------------------------------------------------------------
# Conditional skips
# ----------------------------------------------------------------------


@dataclass(frozen=True)
class SkipEqImm(Instruction):
    register: int
    value: int

    def __str__(self) -> str:
        return f"SE V{self.register:X}, #${self.value:02X}"


@dataclass(frozen=True)
class SkipNeqImm(Instruction):
    register: int
    value: int

    def __str__(self) -> str:
        return f"SNE V{self.register:X}, #${self.value:02X}"


@dataclass(frozen=True)
class SkipEqReg(Instruction):
    x: int
    y: int

    def __str__(self) -> str:
        return f"SE V{self.x:X}, V{self.y:X}"


@dataclass(frozen=True)
class SkipNeqReg(Instruction):
    x: int
    y: int

    def __str__(self) -> str:
        return f"SNE V{self.x:X}, V{self.y:X}"


@dataclass(frozen=True)
class SkipKeyPressed(Instruction):
    register: int

    def __str__(self) -> str:
        return f"SKP V{self.register:X}"


@dataclass(frozen=True)
class SkipKeyNotPressed(Instruction):
    register: int

    def __str__(self) -> str:
        return f"SKNP V{self.register:X}"


# ----------------------------------------------------------------------
# Register loads and arithmetic
# ----------------------------------------------------------------------


@dataclass(frozen=True)
class LoadImm(Instruction):
    register: int
    value: int

    def __str__(self) -> str:
        return f"LD V{self.register:X}, #${self.value:02X}"


@dataclass(frozen=True)
class AddImm(Instruction):
    register: int
    value: int

    def __str__(self) -> str:
        return f"ADD V{self.register:X}, #${self.value:02X}"


@dataclass(frozen=True)
class _RegisterPair(Instruction):
    x: int
    y: int

    mnemonic = "?"

    def __str__(self) -> str:
        return f"{self.mnemonic} V{self.x:X}, V{self.y:X}"


@dataclass(frozen=True)
class Move(_RegisterPair):
    mnemonic = "LD"


@dataclass(frozen=True)
class Or(_RegisterPair):
    mnemonic = "OR"


@dataclass(frozen=True)
class And(_RegisterPair):
    mnemonic = "AND"


@dataclass(frozen=True)
class Xor(_RegisterPair):
    mnemonic = "XOR"


@dataclass(frozen=True)
class Add(_RegisterPair):
    mnemonic = "ADD"


@dataclass(frozen=True)
class SubForward(_RegisterPair):
    """Vx = Vx - Vy."""

    mnemonic = "SUB"


@dataclass(frozen=True)
class SubBackward(_RegisterPair):
    """Vx = Vy - Vx."""

    mnemonic = "SUBN"


@dataclass(frozen=True)
class ShiftRight(_RegisterPair):
    """Vx >>= 1.  ``y`` is kept from the encoding but not used."""

    mnemonic = "SHR"


@dataclass(frozen=True)
class ShiftLeft(_RegisterPair):
    """Vx <<= 1.  ``y`` is kept from the encoding but not used."""

    mnemonic = "SHL"


@dataclass(frozen=True)
class Random(Instruction):
    register: int
    mask: int

    def __str__(self) -> str:
        return f"RND V{self.register:X}, #${self.mask:02X}"


# ----------------------------------------------------------------------
# Index register, memory and display
# ----------------------------------------------------------------------


@dataclass(frozen=True)
class LoadIndex(Instruction):
    value: int

    def __str__(self) -> str:
        return f"LD I, ${self.value:03X}"


@dataclass(frozen=True)
class AddToIndex(Instruction):
    register: int

    def __str__(self) -> str:
        return f"ADD I, V{self.register:X}"


@dataclass(frozen=True)
class FontChar(Instruction):
    register: int

    def __str__(self) -> str:
        return f"LD F, V{self.register:X}"


@dataclass(frozen=True)
class StoreBCD(Instruction):
    register: int

    def __str__(self) -> str:
        return f"LD B, V{self.register:X}"


@dataclass(frozen=True)
class StoreRange(Instruction):
    """Copy V0..V[last] to memory at I."""

    last: int

    def __str__(self) -> str:
        return f"LD [I], V{self.last:X}"


@dataclass(frozen=True)
class LoadRange(Instruction):
    """Copy memory at I into V0..V[last]."""

    last: int

    def __str__(self) -> str:
        return f"LD V{self.last:X}, [I]"


@dataclass(frozen=True)
class Draw(Instruction):
    x: int
    y: int
    height: int

    def __str__(self) -> str:
        return f"DRW V{self.x:X}, V{self.y:X}, {self.height}"


# ----------------------------------------------------------------------
# Timers and keyboard
# ----------------------------------------------------------------------


@dataclass(frozen=True)
class LoadDelay(Instruction):
    register: int

    def __str__(self) -> str:
        return f"LD V{self.register:X}, DT"


@dataclass(frozen=True)
class StoreDelay(Instruction):
    register: int

    def __str__(self) -> str:
        return f"LD DT, V{self.register:X}"


@dataclass(frozen=True)
class StoreSound(Instruction):
    register: int

    def __str__(self) -> str:
        return f"LD ST, V{self.register:X}"


@dataclass(frozen=True)
class WaitKey(Instruction):
    register: int

    def __str__(self) -> str:
        return f"LD V{self.register:X}, K"


# ----------------------------------------------------------------------
# Decode failure marker
# ----------------------------------------------------------------------


@dataclass(frozen=True)
class Unrecognized:
    """Returned by the decoder for words outside the instruction table."""

    word: int

    def __str__(self) -> str:
        return f"DW ${self.word:04X}"


DecodeResult = Union[Instruction, Unrecognized]
