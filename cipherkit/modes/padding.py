"""Block padding schemes: Zeros, PKCS#7, ANSI X9.23 and ISO 10126.

Removal never raises: when the trailing bytes do not form valid padding
the data is returned unchanged.

Research / education only. Do NOT use in production.
"""
from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Optional

from ..errors import InvalidInputError, UnsupportedConfigurationError

logger = logging.getLogger(__name__)


class PaddingMode(str, Enum):
    ZEROS = "Zeros"
    PKCS7 = "PKCS7"
    ANSIX923 = "ANSIX923"
    ISO10126 = "ISO10126"

    @classmethod
    def parse(cls, value: "PaddingMode | str") -> "PaddingMode":
        if isinstance(value, cls):
            return value
        key = str(value).strip().upper().replace("_", "").replace("-", "")
        for member in cls:
            if member.name == key:
                return member
        raise UnsupportedConfigurationError(f"Unsupported padding mode: {value}")


def pad(
    data: bytes,
    block_size: int,
    padding: PaddingMode | str,
    filler: Optional[Callable[[int], bytes]] = None,
) -> bytes:
    """Pad `data` to a multiple of `block_size`.

    Zeros adds 0..block_size-1 zero bytes. The other schemes always add
    1..block_size bytes whose last byte is the pad length, so aligned input
    gains a full block.
    """
    padding = PaddingMode.parse(padding)
    if not 1 <= block_size <= 255:
        raise InvalidInputError("block_size must be in 1..255 for padding")

    if padding is PaddingMode.ZEROS:
        n = -len(data) % block_size
        return bytes(data) + bytes(n)

    n = block_size - len(data) % block_size
    if padding is PaddingMode.PKCS7:
        tail = bytes([n]) * n
    elif padding is PaddingMode.ANSIX923:
        tail = bytes(n - 1) + bytes([n])
    else:
        if filler is None:
            raise InvalidInputError("ISO10126 padding requires a filler source")
        tail = filler(n - 1) + bytes([n])
    return bytes(data) + tail


def unpad(data: bytes, block_size: int, padding: PaddingMode | str) -> bytes:
    """Strip padding added by `pad`; malformed padding leaves data untouched."""
    padding = PaddingMode.parse(padding)
    if not data:
        return data

    if padding is PaddingMode.ZEROS:
        n = len(data) - len(data.rstrip(b"\x00"))
        n = min(n, block_size - 1)
        return data[:len(data) - n] if n else data

    n = data[-1]
    if n < 1 or n > block_size or n > len(data):
        logger.debug("Invalid %s pad length %d; returning data unchanged", padding.value, n)
        return data

    body = data[-n:-1]
    if padding is PaddingMode.PKCS7 and any(b != n for b in body):
        logger.debug("PKCS7 pad bytes mismatch; returning data unchanged")
        return data
    if padding is PaddingMode.ANSIX923 and any(body):
        logger.debug("ANSIX923 fill is not zero; returning data unchanged")
        return data
    return data[:-n]
