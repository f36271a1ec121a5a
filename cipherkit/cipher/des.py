"""DES: 16-round Feistel cipher with the FIPS 46-3 tables.

All tables are 1-based and address bits MSB-first, as printed in the
standard.

Research / education only. Do NOT use in production.
"""
from __future__ import annotations

import logging
from typing import List

from ..errors import InvalidInputError
from ..utils.bits import permute, rotate_left, xor_bytes
from .base import BlockCipher, KeyExpansion, RoundFunction
from .feistel import FeistelNetwork

logger = logging.getLogger(__name__)


# ============================================================================
# TABLES
# ============================================================================

# PC-1: Permuted Choice 1 (56 bits from 64-bit key)
PC1: List[int] = [
    57, 49, 41, 33, 25, 17, 9, 1, 58, 50, 42, 34, 26, 18,
    10, 2, 59, 51, 43, 35, 27, 19, 11, 3, 60, 52, 44, 36,
    63, 55, 47, 39, 31, 23, 15, 7, 62, 54, 46, 38, 30, 22,
    14, 6, 61, 53, 45, 37, 29, 21, 13, 5, 28, 20, 12, 4,
]

# PC-2: Permuted Choice 2 (48-bit round key from C||D)
PC2: List[int] = [
    14, 17, 11, 24, 1, 5, 3, 28, 15, 6, 21, 10,
    23, 19, 12, 4, 26, 8, 16, 7, 27, 20, 13, 2,
    41, 52, 31, 37, 47, 55, 30, 40, 51, 45, 33, 48,
    44, 49, 39, 56, 34, 53, 46, 42, 50, 36, 29, 32,
]

# Rotation schedule
SHIFTS: List[int] = [1, 1, 2, 2, 2, 2, 2, 2, 1, 2, 2, 2, 2, 2, 2, 1]

IP: List[int] = [
    58, 50, 42, 34, 26, 18, 10, 2, 60, 52, 44, 36, 28, 20, 12, 4,
    62, 54, 46, 38, 30, 22, 14, 6, 64, 56, 48, 40, 32, 24, 16, 8,
    57, 49, 41, 33, 25, 17, 9, 1, 59, 51, 43, 35, 27, 19, 11, 3,
    61, 53, 45, 37, 29, 21, 13, 5, 63, 55, 47, 39, 31, 23, 15, 7,
]

FP: List[int] = [
    40, 8, 48, 16, 56, 24, 64, 32, 39, 7, 47, 15, 55, 23, 63, 31,
    38, 6, 46, 14, 54, 22, 62, 30, 37, 5, 45, 13, 53, 21, 61, 29,
    36, 4, 44, 12, 52, 20, 60, 28, 35, 3, 43, 11, 51, 19, 59, 27,
    34, 2, 42, 10, 50, 18, 58, 26, 33, 1, 41, 9, 49, 17, 57, 25,
]

# E: expansion of the 32-bit half to 48 bits
E: List[int] = [
    32, 1, 2, 3, 4, 5, 4, 5, 6, 7, 8, 9,
    8, 9, 10, 11, 12, 13, 12, 13, 14, 15, 16, 17,
    16, 17, 18, 19, 20, 21, 20, 21, 22, 23, 24, 25,
    24, 25, 26, 27, 28, 29, 28, 29, 30, 31, 32, 1,
]

# P: permutation of the S-box output
P: List[int] = [
    16, 7, 20, 21, 29, 12, 28, 17, 1, 15, 23, 26, 5, 18, 31, 10,
    2, 8, 24, 14, 32, 27, 3, 9, 19, 13, 30, 6, 22, 11, 4, 25,
]

# DES S-boxes (6-bit input, 4-bit output)
SBOXES: List[List[List[int]]] = [
    # S1
    [[14, 4, 13, 1, 2, 15, 11, 8, 3, 10, 6, 12, 5, 9, 0, 7],
     [0, 15, 7, 4, 14, 2, 13, 1, 10, 6, 12, 11, 9, 5, 3, 8],
     [4, 1, 14, 8, 13, 6, 2, 11, 15, 12, 9, 7, 3, 10, 5, 0],
     [15, 12, 8, 2, 4, 9, 1, 7, 5, 11, 3, 14, 10, 0, 6, 13]],
    # S2
    [[15, 1, 8, 14, 6, 11, 3, 4, 9, 7, 2, 13, 12, 0, 5, 10],
     [3, 13, 4, 7, 15, 2, 8, 14, 12, 0, 1, 10, 6, 9, 11, 5],
     [0, 14, 7, 11, 10, 4, 13, 1, 5, 8, 12, 6, 9, 3, 2, 15],
     [13, 8, 10, 1, 3, 15, 4, 2, 11, 6, 7, 12, 0, 5, 14, 9]],
    # S3
    [[10, 0, 9, 14, 6, 3, 15, 5, 1, 13, 12, 7, 11, 4, 2, 8],
     [13, 7, 0, 9, 3, 4, 6, 10, 2, 8, 5, 14, 12, 11, 15, 1],
     [13, 6, 4, 9, 8, 15, 3, 0, 11, 1, 2, 12, 5, 10, 14, 7],
     [1, 10, 13, 0, 6, 9, 8, 7, 4, 15, 14, 3, 11, 5, 2, 12]],
    # S4
    [[7, 13, 14, 3, 0, 6, 9, 10, 1, 2, 8, 5, 11, 12, 4, 15],
     [13, 8, 11, 5, 6, 15, 0, 3, 4, 7, 2, 12, 1, 10, 14, 9],
     [10, 6, 9, 0, 12, 11, 7, 13, 15, 1, 3, 14, 5, 2, 8, 4],
     [3, 15, 0, 6, 10, 1, 13, 8, 9, 4, 5, 11, 12, 7, 2, 14]],
    # S5
    [[2, 12, 4, 1, 7, 10, 11, 6, 8, 5, 3, 15, 13, 0, 14, 9],
     [14, 11, 2, 12, 4, 7, 13, 1, 5, 0, 15, 10, 3, 9, 8, 6],
     [4, 2, 1, 11, 10, 13, 7, 8, 15, 9, 12, 5, 6, 3, 0, 14],
     [11, 8, 12, 7, 1, 14, 2, 13, 6, 15, 0, 9, 10, 4, 5, 3]],
    # S6
    [[12, 1, 10, 15, 9, 2, 6, 8, 0, 13, 3, 4, 14, 7, 5, 11],
     [10, 15, 4, 2, 7, 12, 9, 5, 6, 1, 13, 14, 0, 11, 3, 8],
     [9, 14, 15, 5, 2, 8, 12, 3, 7, 0, 4, 10, 1, 13, 11, 6],
     [4, 3, 2, 12, 9, 5, 15, 10, 11, 14, 1, 7, 6, 0, 8, 13]],
    # S7
    [[4, 11, 2, 14, 15, 0, 8, 13, 3, 12, 9, 7, 5, 10, 6, 1],
     [13, 0, 11, 7, 4, 9, 1, 10, 14, 3, 5, 12, 2, 15, 8, 6],
     [1, 4, 11, 13, 12, 3, 7, 14, 10, 15, 6, 8, 0, 5, 9, 2],
     [6, 11, 13, 8, 1, 4, 10, 7, 9, 5, 0, 15, 14, 2, 3, 12]],
    # S8
    [[13, 2, 8, 4, 6, 15, 11, 1, 10, 9, 3, 14, 5, 0, 12, 7],
     [1, 15, 13, 8, 10, 3, 7, 4, 12, 5, 6, 11, 0, 14, 9, 2],
     [7, 11, 4, 1, 9, 12, 14, 2, 0, 6, 10, 13, 15, 3, 5, 8],
     [2, 1, 14, 7, 4, 10, 8, 13, 15, 12, 9, 0, 3, 5, 6, 11]],
]

_MASK28 = (1 << 28) - 1


def _des_permute(data: bytes, table: List[int]) -> bytes:
    return permute(data, table, lsb_first=False, one_based=True)


# ============================================================================
# KEY SCHEDULE
# ============================================================================

class DESKeyExpansion(KeyExpansion):
    """DES key schedule: PC-1, per-round rotations of C and D, PC-2."""

    def generate(self, master_key: bytes) -> List[bytes]:
        if len(master_key) != 8:
            raise InvalidInputError("DES key must be 8 bytes")

        cd = int.from_bytes(_des_permute(master_key, PC1), "big")
        c, d = cd >> 28, cd & _MASK28

        round_keys: List[bytes] = []
        for shift in SHIFTS:
            c = rotate_left(c, shift, 28)
            d = rotate_left(d, shift, 28)
            combined = ((c << 28) | d).to_bytes(7, "big")
            round_keys.append(_des_permute(combined, PC2))
        return round_keys


# ============================================================================
# ROUND FUNCTION
# ============================================================================

class DESRoundFunction(RoundFunction):
    """f(R, K) = P(S(E(R) XOR K))."""

    def transform(self, block: bytes, round_key: bytes) -> bytes:
        if len(block) != 4:
            raise InvalidInputError("DES round input must be 4 bytes")
        if len(round_key) != 6:
            raise InvalidInputError("DES round key must be 6 bytes")

        mixed = int.from_bytes(xor_bytes(_des_permute(block, E), round_key), "big")

        out = 0
        for i, sbox in enumerate(SBOXES):
            group = (mixed >> (42 - 6 * i)) & 0x3F
            row = ((group >> 4) & 0x02) | (group & 0x01)
            col = (group >> 1) & 0x0F
            out = (out << 4) | sbox[row][col]

        return _des_permute(out.to_bytes(4, "big"), P)


# ============================================================================
# CIPHER
# ============================================================================

class DES(BlockCipher):
    """DES block cipher: IP, 16 Feistel rounds, FP.

    The Feistel core emits L16 || R16; the halves are exchanged before FP to
    form the standard pre-output block R16 || L16.
    """

    block_size = 8
    key_size = 8
    rounds = 16

    def __init__(self, key: bytes | None = None):
        self._network = FeistelNetwork(
            key_expansion=DESKeyExpansion(),
            round_function=DESRoundFunction(),
            rounds=self.rounds,
            block_size=self.block_size,
        )
        if key is not None:
            self.set_key(key)

    def set_key(self, key: bytes) -> None:
        if len(key) != self.key_size:
            raise InvalidInputError("DES key must be 8 bytes")
        self._network.set_key(key)
        logger.debug("DES key schedule generated")

    def _check_block(self, block: bytes) -> None:
        if len(block) != self.block_size:
            raise InvalidInputError(f"DES block must be 8 bytes, got {len(block)}")

    def encrypt(self, block: bytes) -> bytes:
        self._check_block(block)
        out = self._network.encrypt(_des_permute(block, IP))
        return _des_permute(out[4:] + out[:4], FP)

    def decrypt(self, block: bytes) -> bytes:
        self._check_block(block)
        permuted = _des_permute(block, IP)
        out = self._network.decrypt(permuted[4:] + permuted[:4])
        return _des_permute(out, FP)
