"""Generic Feistel network over an injected key expansion and round function.

Research / education only. Do NOT use in production.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Tuple

from ..errors import CipherStateError, InvalidInputError
from ..utils.bits import xor_bytes
from .base import BlockCipher, KeyExpansion, RoundFunction

logger = logging.getLogger(__name__)


@dataclass
class FeistelNetwork(BlockCipher):
    """R-round Feistel construction.

    Classic Feistel structure:
    1. Split block into left (L) and right (R) halves
    2. For each round: L_new = R, R_new = L XOR F(R, round_key)
    3. Emit L || R as-is (no final swap)
    """
    key_expansion: KeyExpansion
    round_function: RoundFunction
    rounds: int = 16
    block_size: int = 8
    _round_keys: Tuple[bytes, ...] = field(default=(), init=False, repr=False)

    def __post_init__(self):
        if self.block_size <= 0 or self.block_size % 2 != 0:
            raise InvalidInputError("Feistel requires even byte block size")
        if self.rounds < 1:
            raise InvalidInputError("Feistel requires at least one round")

    @property
    def half_size(self) -> int:
        return self.block_size // 2

    def set_key(self, key: bytes) -> None:
        round_keys = tuple(bytes(k) for k in self.key_expansion.generate(key))
        if len(round_keys) < self.rounds:
            raise InvalidInputError(
                f"Key expansion produced {len(round_keys)} round keys, need {self.rounds}"
            )
        self._round_keys = round_keys
        logger.debug("Feistel network keyed: %d rounds, %d-byte block", self.rounds, self.block_size)

    def _split(self, block: bytes) -> Tuple[bytes, bytes]:
        if len(block) != self.block_size:
            raise InvalidInputError(f"Block must be {self.block_size} bytes, got {len(block)}")
        if not self._round_keys:
            raise CipherStateError("Key not set")
        half = self.half_size
        return bytes(block[:half]), bytes(block[half:])

    def encrypt(self, block: bytes) -> bytes:
        """Encrypt using Feistel structure."""
        L, R = self._split(block)
        for r in range(self.rounds):
            F = self.round_function.transform(R, self._round_keys[r])
            L, R = R, xor_bytes(L, F)
        return L + R

    def decrypt(self, block: bytes) -> bytes:
        """Decrypt using inverse Feistel structure (reverse round order)."""
        L, R = self._split(block)
        for r in reversed(range(self.rounds)):
            # Reverse of: L,R = R, L XOR F(R, k)
            prev_R = L
            prev_L = xor_bytes(R, self.round_function.transform(prev_R, self._round_keys[r]))
            L, R = prev_L, prev_R
        return L + R
