import pytest

from cipherkit.utils.bits import get_bit, permute, rotate_left, set_bit, xor_bytes


def test_identity_permute_returns_input():
    data = bytes([0xA5, 0x3C, 0x01, 0xFF])
    assert permute(data, list(range(32))) == data
    assert permute(data, list(range(32)), lsb_first=False) == data
    assert permute(data, list(range(1, 33)), one_based=True) == data


def test_permute_msb_first_reverses_byte():
    table = list(range(7, -1, -1))
    assert permute(b"\x01", table, lsb_first=False) == b"\x80"
    assert permute(b"\x01", table, lsb_first=True) == b"\x80"
    assert permute(b"\xF0", table) == b"\x0F"


def test_permute_out_of_range_reads_zero():
    assert permute(b"\xFF", [0, 100, 2, 3]) == b"\x0D"


def test_permute_output_length_rounds_up():
    assert len(permute(b"\xFF\xFF", list(range(12)))) == 2
    assert permute(b"\xFF\xFF", list(range(12))) == b"\xFF\x0F"


def test_get_and_set_bit_addressing():
    buf = bytearray(2)
    set_bit(buf, 0, 1)
    set_bit(buf, 8, 1, lsb_first=False)
    assert buf == bytearray([0x01, 0x80])
    assert get_bit(bytes(buf), 0) == 1
    assert get_bit(bytes(buf), 8, lsb_first=False) == 1
    assert get_bit(bytes(buf), -1) == 0
    set_bit(buf, 0, 0)
    assert buf[0] == 0


@pytest.mark.parametrize("x,r,w,expected", [
    (0b1000, 1, 4, 0b0001),
    (0x8000001, 1, 28, 0x0000003),
    (0x1, 28, 28, 0x1),
    (0xF0, 4, 8, 0x0F),
])
def test_rotate_left(x, r, w, expected):
    assert rotate_left(x, r, w) == expected


def test_xor_bytes_length_mismatch():
    assert xor_bytes(b"\x0F\xF0", b"\xFF\xFF") == b"\xF0\x0F"
    with pytest.raises(ValueError):
        xor_bytes(b"\x00", b"\x00\x00")
