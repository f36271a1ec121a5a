"""Modes of operation over any keyed BlockCipher.

ECB, CBC and PCBC work on whole blocks and apply the configured padding.
CFB, OFB and CTR turn the cipher into a keystream generator: the last
partial block is XORed with a truncated keystream block, so ciphertext has
the same length as plaintext and padding is never added or removed.

Each encrypt/decrypt call starts again from the configured IV; no chaining
state survives between calls.

Research / education only. Do NOT use in production.
"""
from __future__ import annotations

import logging
import struct
from enum import Enum
from typing import Iterator, List, Optional

from ..cipher.base import BlockCipher
from ..errors import InvalidInputError, UnsupportedConfigurationError
from ..utils.bits import xor_bytes
from ..utils.randomness import RandomSource, default_source
from .padding import PaddingMode, pad, unpad

logger = logging.getLogger(__name__)

LENGTH_PREFIX = struct.Struct("<I")


class CipherMode(str, Enum):
    ECB = "ECB"
    CBC = "CBC"
    PCBC = "PCBC"
    CFB = "CFB"
    OFB = "OFB"
    CTR = "CTR"

    @classmethod
    def parse(cls, value: "CipherMode | str") -> "CipherMode":
        if isinstance(value, cls):
            return value
        key = str(value).strip().upper()
        if key in cls.__members__:
            return cls[key]
        raise UnsupportedConfigurationError(f"Unsupported cipher mode: {value}")

    @property
    def is_stream(self) -> bool:
        return self in (CipherMode.CFB, CipherMode.OFB, CipherMode.CTR)

    @property
    def needs_iv(self) -> bool:
        return self is not CipherMode.ECB


def _blocks(data: bytes, size: int) -> Iterator[bytes]:
    for i in range(0, len(data), size):
        yield data[i:i + size]


def _xor_prefix(data: bytes, keystream: bytes) -> bytes:
    return bytes(x ^ y for x, y in zip(data, keystream))


class CipherModeEngine:
    """Binds a keyed cipher to a mode, a padding scheme and an IV.

    Args:
        cipher: Keyed block cipher (DES, DEAL, RijndaelCipher, ...).
        mode: CipherMode or its name.
        padding: PaddingMode or its name; used by ECB, CBC and PCBC only.
        iv: IV / initial counter block. Generated from `rng` when omitted
            for modes that need one.
        block_size: Block size in bytes; defaults to ``cipher.block_size``.
        rng: RandomSource for IV generation and ISO 10126 filler.
    """

    def __init__(
        self,
        cipher: BlockCipher,
        mode: CipherMode | str = CipherMode.CBC,
        padding: PaddingMode | str = PaddingMode.PKCS7,
        *,
        iv: Optional[bytes] = None,
        block_size: Optional[int] = None,
        rng: Optional[RandomSource] = None,
    ):
        self.cipher = cipher
        self.mode = CipherMode.parse(mode)
        self.padding = PaddingMode.parse(padding)
        self.rng = default_source(rng)

        bs = cipher.block_size if block_size is None else block_size
        if bs <= 0:
            raise InvalidInputError("block_size must be positive")
        if block_size is not None and cipher.block_size and block_size != cipher.block_size:
            raise InvalidInputError(
                f"block_size {block_size} does not match cipher block size {cipher.block_size}"
            )
        self.block_size = bs

        if not self.mode.needs_iv:
            self.iv = b""
        elif iv is None:
            self.iv = self.rng.iv(bs)
        else:
            if len(iv) != bs:
                raise InvalidInputError(f"IV must be {bs} bytes, got {len(iv)}")
            self.iv = bytes(iv)

    # -- public API ---------------------------------------------------------

    def encrypt(self, data: bytes) -> bytes:
        data = bytes(data)
        if self.mode.is_stream:
            return self._stream(data, encrypting=True)

        padded = pad(data, self.block_size, self.padding, filler=self.rng.filler_bytes)
        if self.mode is CipherMode.ECB:
            return self._ecb(padded, self.cipher.encrypt)
        if self.mode is CipherMode.CBC:
            return self._cbc_encrypt(padded)
        return self._pcbc_encrypt(padded)

    def decrypt(self, data: bytes) -> bytes:
        plain = self._decrypt_raw(bytes(data))
        if self.mode.is_stream:
            return plain
        return unpad(plain, self.block_size, self.padding)

    def encrypt_framed(self, data: bytes) -> bytes:
        """Ciphertext prefixed with the plaintext length (4 bytes, little-endian).

        The prefix lets `decrypt_framed` recover the exact length, which makes
        Zeros padding lossless for data ending in zero bytes.
        """
        if len(data) > 0xFFFFFFFF:
            raise InvalidInputError("data too long for a 4-byte length prefix")
        return LENGTH_PREFIX.pack(len(data)) + self.encrypt(data)

    def decrypt_framed(self, blob: bytes) -> bytes:
        if len(blob) < LENGTH_PREFIX.size:
            raise InvalidInputError("framed ciphertext shorter than its length prefix")
        (length,) = LENGTH_PREFIX.unpack_from(blob)
        plain = self._decrypt_raw(bytes(blob[LENGTH_PREFIX.size:]))
        if length > len(plain):
            raise InvalidInputError(
                f"length prefix {length} exceeds decrypted size {len(plain)}"
            )
        return plain[:length]

    # -- block modes --------------------------------------------------------

    def _decrypt_raw(self, data: bytes) -> bytes:
        """Decrypt without removing padding."""
        if self.mode.is_stream:
            return self._stream(data, encrypting=False)
        if len(data) % self.block_size:
            raise InvalidInputError(
                f"Ciphertext length {len(data)} is not a multiple of {self.block_size}"
            )
        if self.mode is CipherMode.ECB:
            return self._ecb(data, self.cipher.decrypt)
        if self.mode is CipherMode.CBC:
            return self._cbc_decrypt(data)
        return self._pcbc_decrypt(data)

    def _ecb(self, data: bytes, op) -> bytes:
        return b"".join(op(block) for block in _blocks(data, self.block_size))

    def _cbc_encrypt(self, data: bytes) -> bytes:
        out: List[bytes] = []
        prev = self.iv
        for block in _blocks(data, self.block_size):
            prev = self.cipher.encrypt(xor_bytes(block, prev))
            out.append(prev)
        return b"".join(out)

    def _cbc_decrypt(self, data: bytes) -> bytes:
        # each block needs only C_i and C_{i-1}
        blocks = list(_blocks(data, self.block_size))
        prevs = [self.iv] + blocks[:-1]
        return b"".join(xor_bytes(self.cipher.decrypt(c), p) for c, p in zip(blocks, prevs))

    def _pcbc_encrypt(self, data: bytes) -> bytes:
        out: List[bytes] = []
        feedback = self.iv
        for block in _blocks(data, self.block_size):
            c = self.cipher.encrypt(xor_bytes(block, feedback))
            feedback = xor_bytes(block, c)
            out.append(c)
        return b"".join(out)

    def _pcbc_decrypt(self, data: bytes) -> bytes:
        out: List[bytes] = []
        feedback = self.iv
        for c in _blocks(data, self.block_size):
            p = xor_bytes(self.cipher.decrypt(c), feedback)
            feedback = xor_bytes(p, c)
            out.append(p)
        return b"".join(out)

    # -- stream modes -------------------------------------------------------

    def _stream(self, data: bytes, *, encrypting: bool) -> bytes:
        if self.mode is CipherMode.CFB:
            return self._cfb(data, encrypting)
        if self.mode is CipherMode.OFB:
            return self._ofb(data)
        return self._ctr(data)

    def _cfb(self, data: bytes, encrypting: bool) -> bytes:
        out: List[bytes] = []
        feedback = self.iv
        for chunk in _blocks(data, self.block_size):
            result = _xor_prefix(chunk, self.cipher.encrypt(feedback))
            out.append(result)
            feedback = result if encrypting else chunk
        return b"".join(out)

    def _ofb(self, data: bytes) -> bytes:
        out: List[bytes] = []
        feedback = self.iv
        for chunk in _blocks(data, self.block_size):
            feedback = self.cipher.encrypt(feedback)
            out.append(_xor_prefix(chunk, feedback))
        return b"".join(out)

    def _ctr(self, data: bytes) -> bytes:
        bs = self.block_size
        modulus = 1 << (8 * bs)
        counter = int.from_bytes(self.iv, "big")
        out: List[bytes] = []
        for chunk in _blocks(data, bs):
            out.append(_xor_prefix(chunk, self.cipher.encrypt(counter.to_bytes(bs, "big"))))
            counter = (counter + 1) % modulus
        return b"".join(out)
