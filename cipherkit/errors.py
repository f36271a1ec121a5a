"""Exception hierarchy shared by the ciphers, field arithmetic and modes.

Research / education only. Do NOT use in production.
"""
from __future__ import annotations


class CipherKitError(Exception):
    """Base class for every error raised by cipherkit."""


class InvalidInputError(CipherKitError, ValueError):
    """Wrong block, key or IV length, or otherwise malformed input."""


class ReducibleModulusError(CipherKitError, ValueError):
    """The GF(2^8) modulus is not an irreducible polynomial."""

    def __init__(self, modulus: int):
        self.modulus = modulus
        super().__init__(f"Modulus 0x{modulus:02X} is reducible")


class UnsupportedConfigurationError(CipherKitError, ValueError):
    """Unknown cipher mode, padding mode or algorithm selector."""


class CipherStateError(CipherKitError, RuntimeError):
    """A cipher was used before a key was set."""
