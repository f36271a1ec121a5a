"""Bit-level helpers: XOR, rotation and table-driven bit permutation.

`permute` is the permutation engine used by the DES tables (IP, FP, PC1,
PC2, E, P). A table lists, for every output bit, the input bit it copies.

Research / education only. Do NOT use in production.
"""
from __future__ import annotations

from typing import Sequence


def xor_bytes(a: bytes, b: bytes) -> bytes:
    """XOR two byte strings of equal length."""
    if len(a) != len(b):
        raise ValueError("xor_bytes length mismatch")
    return bytes(x ^ y for x, y in zip(a, b))


def rotate_left(x: int, r: int, w: int) -> int:
    """Rotate-left x by r bits in a w-bit word."""
    mask = (1 << w) - 1
    r %= w
    x &= mask
    return ((x << r) & mask) | (x >> (w - r))


def _bit_position(bit_index: int, lsb_first: bool) -> int:
    pos = bit_index % 8
    return pos if lsb_first else 7 - pos


def get_bit(data: bytes, bit_index: int, *, lsb_first: bool = True) -> int:
    """Return bit `bit_index` of `data`; indices outside the buffer read as 0."""
    if bit_index < 0 or bit_index >= len(data) * 8:
        return 0
    return (data[bit_index // 8] >> _bit_position(bit_index, lsb_first)) & 1


def set_bit(data: bytearray, bit_index: int, value: int, *, lsb_first: bool = True) -> None:
    """Set bit `bit_index` of `data` in place; out-of-range writes are ignored."""
    if bit_index < 0 or bit_index >= len(data) * 8:
        return
    mask = 1 << _bit_position(bit_index, lsb_first)
    if value:
        data[bit_index // 8] |= mask
    else:
        data[bit_index // 8] &= ~mask & 0xFF


def permute(
    data: bytes,
    table: Sequence[int],
    *,
    lsb_first: bool = True,
    one_based: bool = False,
) -> bytes:
    """Permute the bits of `data` according to `table`.

    Output bit i is input bit ``table[i]`` (``table[i] - 1`` when
    `one_based`). Both sides use the same addressing: with `lsb_first`
    bit 0 is the least significant bit of byte 0, otherwise it is the most
    significant bit of byte 0.

    The output holds ``ceil(len(table) / 8)`` bytes. A source index outside
    the input reads as 0 rather than raising.
    """
    out = bytearray((len(table) + 7) // 8)
    offset = 1 if one_based else 0
    for i, src in enumerate(table):
        if get_bit(data, src - offset, lsb_first=lsb_first):
            set_bit(out, i, 1, lsb_first=lsb_first)
    return bytes(out)

