"""
Nibble extraction for 16-bit instruction words.

Nibbles are indexed from the most significant end, so for ``0xABCD``
index 0 is ``0xA`` and index 3 is ``0xD``.
"""

from __future__ import annotations

NIBBLES_PER_WORD: int = 4


def n_set_bits(num_bits: int) -> int:
    """Return a mask with the low *num_bits* bits set."""
    return (1 << num_bits) - 1


def get_nibbles(word: int, index: int, width: int) -> int:
    """Return *width* nibbles of *word* starting at nibble *index*.

    The result is right-aligned.  ``get_nibbles(0xABCD, 1, 2)`` is
    ``0xBC``.

    Raises:
        ValueError: If *width* is outside ``[1, 4]``, *index* is negative,
            or the group runs past the last nibble.
    """
    if not 1 <= width <= NIBBLES_PER_WORD:
        raise ValueError(f"width must be in [1, 4], got {width}")
    if index < 0 or index + width > NIBBLES_PER_WORD:
        raise ValueError(
            f"nibble group ({index}, {width}) does not fit in a 16-bit word"
        )
    shift = (NIBBLES_PER_WORD - index - width) * 4
    return (word >> shift) & n_set_bits(width * 4)


def get_nibble(word: int, index: int) -> int:
    """Return the single nibble of *word* at *index*."""
    return get_nibbles(word, index, 1)
