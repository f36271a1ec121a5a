"""Capabilities shared by every cipher: block cipher, key expansion, round function.

Research / education only. Do NOT use in production.
"""
from __future__ import annotations

from typing import List


class KeyExpansion:
    """Derives the ordered round keys from a master key."""

    def generate(self, master_key: bytes) -> List[bytes]:  # pragma: no cover
        raise NotImplementedError


class RoundFunction:
    """Keyed round transform F(block, round_key)."""

    def transform(self, block: bytes, round_key: bytes) -> bytes:  # pragma: no cover
        raise NotImplementedError


class BlockCipher:
    """Abstract base class for keyed block cipher implementations.

    Subclasses set `block_size` (bytes) and `key_size` (bytes) and hold the
    round-key schedule produced by `set_key`.
    """

    block_size: int = 0
    key_size: int = 0

    def set_key(self, key: bytes) -> None:  # pragma: no cover
        raise NotImplementedError

    def encrypt(self, block: bytes) -> bytes:  # pragma: no cover
        """Encrypt a single block of plaintext."""
        raise NotImplementedError

    def decrypt(self, block: bytes) -> bytes:  # pragma: no cover
        """Decrypt a single block of ciphertext."""
        raise NotImplementedError
