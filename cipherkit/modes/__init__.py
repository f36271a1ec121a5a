"""Modes of operation and padding for any keyed block cipher."""

from .engine import CipherMode, CipherModeEngine
from .padding import PaddingMode, pad, unpad

__all__ = [
    "CipherMode",
    "CipherModeEngine",
    "PaddingMode",
    "pad",
    "unpad",
]
