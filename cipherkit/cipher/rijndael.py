"""Rijndael over a configurable GF(2^8) modulus.

The S-box, the round constants and the MixColumns coefficients are all
evaluated in the field chosen by the caller. With modulus 0x1B and a
128-bit block this is AES (FIPS-197); any other irreducible modulus gives a
valid, invertible, non-standard cipher.

State layout is column-major: byte (row, col) lives at ``row + 4 * col``.

Research / education only. Do NOT use in production.
"""
from __future__ import annotations

import logging
from typing import List, Tuple

from ..errors import CipherStateError, InvalidInputError
from ..utils.bits import rotate_left
from . import gf256
from .base import BlockCipher, KeyExpansion

logger = logging.getLogger(__name__)

SUPPORTED_SIZES = (128, 192, 256)


# ============================================================================
# S-BOX CONSTRUCTION
# ============================================================================

def affine_transform(b: int) -> int:
    """AES affine map over GF(2): b ^ rotl(b,1..4) ^ 0x63."""
    return (
        b
        ^ rotate_left(b, 1, 8)
        ^ rotate_left(b, 2, 8)
        ^ rotate_left(b, 3, 8)
        ^ rotate_left(b, 4, 8)
        ^ 0x63
    )


def build_sboxes(modulus: int) -> Tuple[bytes, bytes]:
    """Return (sbox, inv_sbox) for the field defined by `modulus`."""
    gf256.require_irreducible(modulus)
    sbox = bytearray(256)
    inv_sbox = bytearray(256)
    sbox[0] = 0x63
    inv_sbox[0x63] = 0
    for x in range(1, 256):
        s = affine_transform(gf256.inverse(x, modulus))
        sbox[x] = s
        inv_sbox[s] = x
    logger.debug("Built Rijndael S-boxes for modulus 0x%02X", modulus)
    return bytes(sbox), bytes(inv_sbox)


# ============================================================================
# KEY SCHEDULE
# ============================================================================

class RijndaelKeyExpansion(KeyExpansion):
    """Word-oriented Rijndael key expansion producing rounds + 1 round keys."""

    def __init__(self, *, block_words: int, key_words: int, rounds: int, sbox: bytes, modulus: int):
        self.block_words = block_words
        self.key_words = key_words
        self.rounds = rounds
        self.sbox = sbox
        self.modulus = modulus

    def _sub_word(self, word: List[int]) -> List[int]:
        return [self.sbox[b] for b in word]

    def generate(self, master_key: bytes) -> List[bytes]:
        nk = self.key_words
        if len(master_key) != 4 * nk:
            raise InvalidInputError(f"Key must be {4 * nk} bytes")

        total = self.block_words * (self.rounds + 1)
        words: List[List[int]] = [list(master_key[4 * i:4 * i + 4]) for i in range(nk)]

        for i in range(nk, total):
            temp = list(words[i - 1])
            if i % nk == 0:
                temp = self._sub_word(temp[1:] + temp[:1])
                temp[0] ^= gf256.power(0x02, i // nk - 1, self.modulus)
            elif nk > 6 and i % nk == 4:
                temp = self._sub_word(temp)
            words.append([x ^ y for x, y in zip(words[i - nk], temp)])

        nb = self.block_words
        return [
            bytes(b for word in words[r * nb:(r + 1) * nb] for b in word)
            for r in range(self.rounds + 1)
        ]


# ============================================================================
# CIPHER
# ============================================================================

class RijndaelCipher(BlockCipher):
    """Substitution-permutation cipher with AES-shaped rounds.

    Follows the AES structure:
    1. AddRoundKey
    2. SubBytes / ShiftRows / MixColumns / AddRoundKey for rounds 1..R-1
    3. SubBytes / ShiftRows / AddRoundKey (no MixColumns) in the last round
    """

    def __init__(
        self,
        block_size_bits: int = 128,
        key_size_bits: int = 128,
        modulus: int = gf256.AES_MODULUS,
        key: bytes | None = None,
    ):
        if block_size_bits not in SUPPORTED_SIZES:
            raise InvalidInputError("Block size must be 128, 192, or 256 bits")
        if key_size_bits not in SUPPORTED_SIZES:
            raise InvalidInputError("Key size must be 128, 192, or 256 bits")

        self.block_size = block_size_bits // 8
        self.key_size = key_size_bits // 8
        self.modulus = modulus
        self.columns = self.block_size // 4
        self.rounds = max(self.columns, self.key_size // 4) + 6

        self._sbox, self._inv_sbox = build_sboxes(modulus)
        self._mul = {c: gf256.multiplication_table(c, modulus) for c in (2, 3, 9, 11, 13, 14)}
        self._key_expansion = RijndaelKeyExpansion(
            block_words=self.columns,
            key_words=self.key_size // 4,
            rounds=self.rounds,
            sbox=self._sbox,
            modulus=modulus,
        )
        self._round_keys: Tuple[bytes, ...] = ()
        if key is not None:
            self.set_key(key)

    @property
    def sbox(self) -> bytes:
        return self._sbox

    @property
    def inv_sbox(self) -> bytes:
        return self._inv_sbox

    def set_key(self, key: bytes) -> None:
        if len(key) != self.key_size:
            raise InvalidInputError(f"Key must be {self.key_size} bytes")
        self._round_keys = tuple(self._key_expansion.generate(key))
        logger.debug(
            "Rijndael key schedule: %d round keys (block=%d, key=%d, modulus=0x%02X)",
            len(self._round_keys), self.block_size * 8, self.key_size * 8, self.modulus,
        )

    def round_keys(self) -> List[bytes]:
        return list(self._round_keys)

    # -- round transforms ---------------------------------------------------

    @staticmethod
    def _add_round_key(state: bytearray, round_key: bytes) -> None:
        for i, k in enumerate(round_key):
            state[i] ^= k

    def _sub_bytes(self, state: bytearray, table: bytes) -> None:
        for i, b in enumerate(state):
            state[i] = table[b]

    def _shift_rows(self, state: bytearray, direction: int) -> None:
        nb = self.columns
        old = bytes(state)
        for row in range(1, 4):
            for col in range(nb):
                state[row + 4 * col] = old[row + 4 * ((col + direction * row) % nb)]

    def _mix_columns(self, state: bytearray) -> None:
        m2, m3 = self._mul[2], self._mul[3]
        for c in range(self.columns):
            i = c * 4
            a0, a1, a2, a3 = state[i], state[i + 1], state[i + 2], state[i + 3]
            state[i + 0] = m2[a0] ^ m3[a1] ^ a2 ^ a3
            state[i + 1] = a0 ^ m2[a1] ^ m3[a2] ^ a3
            state[i + 2] = a0 ^ a1 ^ m2[a2] ^ m3[a3]
            state[i + 3] = m3[a0] ^ a1 ^ a2 ^ m2[a3]

    def _inv_mix_columns(self, state: bytearray) -> None:
        m9, m11, m13, m14 = self._mul[9], self._mul[11], self._mul[13], self._mul[14]
        for c in range(self.columns):
            i = c * 4
            a0, a1, a2, a3 = state[i], state[i + 1], state[i + 2], state[i + 3]
            state[i + 0] = m14[a0] ^ m11[a1] ^ m13[a2] ^ m9[a3]
            state[i + 1] = m9[a0] ^ m14[a1] ^ m11[a2] ^ m13[a3]
            state[i + 2] = m13[a0] ^ m9[a1] ^ m14[a2] ^ m11[a3]
            state[i + 3] = m11[a0] ^ m13[a1] ^ m9[a2] ^ m14[a3]

    # -- block API ----------------------------------------------------------

    def _start(self, block: bytes) -> bytearray:
        if len(block) != self.block_size:
            raise InvalidInputError(f"Input must be {self.block_size} bytes, got {len(block)}")
        if not self._round_keys:
            raise CipherStateError("Key not set")
        return bytearray(block)

    def encrypt(self, block: bytes) -> bytes:
        state = self._start(block)
        rks = self._round_keys

        self._add_round_key(state, rks[0])
        for r in range(1, self.rounds):
            self._sub_bytes(state, self._sbox)
            self._shift_rows(state, 1)
            self._mix_columns(state)
            self._add_round_key(state, rks[r])

        self._sub_bytes(state, self._sbox)
        self._shift_rows(state, 1)
        self._add_round_key(state, rks[self.rounds])
        return bytes(state)

    def decrypt(self, block: bytes) -> bytes:
        state = self._start(block)
        rks = self._round_keys

        self._add_round_key(state, rks[self.rounds])
        for r in range(self.rounds - 1, 0, -1):
            self._shift_rows(state, -1)
            self._sub_bytes(state, self._inv_sbox)
            self._add_round_key(state, rks[r])
            self._inv_mix_columns(state)

        self._shift_rows(state, -1)
        self._sub_bytes(state, self._inv_sbox)
        self._add_round_key(state, rks[0])
        return bytes(state)
