"""DEAL: a 6-round Feistel cipher whose round function is DES.

This variant works on an 8-byte block split into 4-byte halves; each half
is widened to a DES block by repetition.

Research / education only. Do NOT use in production.
"""
from __future__ import annotations

import logging
from typing import List

from ..errors import InvalidInputError
from .base import BlockCipher, KeyExpansion, RoundFunction
from .des import DES
from .feistel import FeistelNetwork

logger = logging.getLogger(__name__)


def _round_constant(i: int) -> bytes:
    return bytes(7) + bytes([i + 1])


class DEALKeyExpansion(KeyExpansion):
    """Six 8-byte round keys: DES_K1(c1..c3) then DES_K2(c1..c3)."""

    rounds = 6

    def generate(self, master_key: bytes) -> List[bytes]:
        if len(master_key) != 16:
            raise InvalidInputError("DEAL master key must be 16 bytes (128 bits)")

        k1 = DES(master_key[:8])
        k2 = DES(master_key[8:])

        half = self.rounds // 2
        round_keys = [k1.encrypt(_round_constant(i)) for i in range(half)]
        round_keys += [k2.encrypt(_round_constant(i)) for i in range(half)]
        return round_keys


class DEALRoundFunction(RoundFunction):
    """F(h, k) = first 4 bytes of DES_k(h || h)."""

    def __init__(self):
        self._des = DES()

    def transform(self, block: bytes, round_key: bytes) -> bytes:
        if len(block) != 4:
            raise InvalidInputError("DEAL round input must be 4 bytes")
        if len(round_key) != 8:
            raise InvalidInputError("DEAL round key must be 8 bytes")
        self._des.set_key(round_key)
        return self._des.encrypt(bytes(block) * 2)[:4]


class DEAL(BlockCipher):
    block_size = 8
    key_size = 16
    rounds = 6

    def __init__(self, key: bytes | None = None):
        self._network = FeistelNetwork(
            key_expansion=DEALKeyExpansion(),
            round_function=DEALRoundFunction(),
            rounds=self.rounds,
            block_size=self.block_size,
        )
        if key is not None:
            self.set_key(key)

    def set_key(self, key: bytes) -> None:
        if len(key) != self.key_size:
            raise InvalidInputError("DEAL key must be 16 bytes (128 bits)")
        self._network.set_key(key)
        logger.debug("DEAL key schedule generated")

    def encrypt(self, block: bytes) -> bytes:
        if len(block) != self.block_size:
            raise InvalidInputError("DEAL block size must be 8 bytes")
        return self._network.encrypt(block)

    def decrypt(self, block: bytes) -> bytes:
        if len(block) != self.block_size:
            raise InvalidInputError("DEAL block size must be 8 bytes")
        return self._network.decrypt(block)
