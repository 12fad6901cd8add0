"""Nibble extraction tests."""

import pytest

from chip8emu.core.bits import get_nibble, get_nibbles, n_set_bits


class TestGetNibbles:

    def test_middle_group(self):
        assert get_nibbles(0xABCD, 1, 2) == 0xBC

    def test_single_nibbles(self):
        assert [get_nibble(0xABCD, i) for i in range(4)] == [0xA, 0xB, 0xC, 0xD]

    def test_low_twelve_bits(self):
        assert get_nibbles(0xA2E0, 1, 3) == 0x2E0

    def test_low_byte(self):
        assert get_nibbles(0x7ABC, 2, 2) == 0xBC

    def test_full_width_is_identity(self):
        for word in (0x0000, 0x0001, 0x8000, 0x1234, 0xFFFF):
            assert get_nibbles(word, 0, 4) == word

    def test_round_trip_all_words(self):
        for word in range(0x10000):
            n = [get_nibble(word, i) for i in range(4)]
            assert (n[0] << 12) | (n[1] << 8) | (n[2] << 4) | n[3] == word

    @pytest.mark.parametrize("index,width", [
        (0, 0),
        (0, 5),
        (1, 4),
        (3, 2),
        (4, 1),
        (-1, 1),
    ])
    def test_invalid_groups_fail_fast(self, index, width):
        with pytest.raises(ValueError):
            get_nibbles(0x1234, index, width)


def test_n_set_bits():
    assert n_set_bits(4) == 0xF
    assert n_set_bits(12) == 0xFFF
    assert n_set_bits(16) == 0xFFFF
