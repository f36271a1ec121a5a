"""Cipher registry, algorithm templates and factories.

Research / education only. Do NOT use in production.
"""
from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional

from ..errors import UnsupportedConfigurationError
from ..modes.engine import CipherModeEngine
from ..utils.randomness import RandomSource
from .base import BlockCipher
from .deal import DEAL
from .des import DES
from .rijndael import RijndaelCipher
from .spec import CipherSpec, ModeSpec

logger = logging.getLogger(__name__)

CipherFactory = Callable[[CipherSpec], BlockCipher]


def _make_rijndael(spec: CipherSpec) -> BlockCipher:
    return RijndaelCipher(spec.block_size_bits, spec.key_size_bits, spec.modulus)


class CipherRegistry:
    """Maps algorithm names to factories that build unkeyed cipher instances."""

    def __init__(self):
        self._factories: Dict[str, CipherFactory] = {
            "DES": lambda spec: DES(),
            "DEAL": lambda spec: DEAL(),
            "RIJNDAEL": _make_rijndael,
        }

    def get(self, algorithm: str) -> CipherFactory:
        key = algorithm.upper()
        if key not in self._factories:
            raise UnsupportedConfigurationError(f"Unknown algorithm: {algorithm}")
        return self._factories[key]

    def list(self) -> List[str]:
        return sorted(self._factories)

    def exists(self, algorithm: str) -> bool:
        return algorithm.upper() in self._factories

    def register(self, algorithm: str, factory: CipherFactory) -> None:
        """Register a custom cipher factory."""
        self._factories[algorithm.upper()] = factory


# ============================================================================
# ALGORITHM LIBRARY
# ============================================================================

ALGORITHM_LIBRARY: Dict[str, Dict[str, object]] = {
    # ========== FEISTEL ALGORITHMS ==========
    "DES": {
        "algorithm": "DES",
        "block_size_bits": 64,
        "key_size_bits": 64,
        "notes": "FIPS 46-3 DES. 56 effective key bits; parity bits are ignored.",
    },
    "DEAL": {
        "algorithm": "DEAL",
        "block_size_bits": 64,
        "key_size_bits": 128,
        "notes": "6-round Feistel with DES as round function, 4-byte halves.",
    },

    # ========== SPN ALGORITHMS ==========
    "AES-128": {
        "algorithm": "RIJNDAEL",
        "block_size_bits": 128,
        "key_size_bits": 128,
        "modulus": 0x1B,
        "notes": "Rijndael with the AES polynomial; matches FIPS-197.",
    },
    "AES-192": {
        "algorithm": "RIJNDAEL",
        "block_size_bits": 128,
        "key_size_bits": 192,
        "modulus": 0x1B,
        "notes": "Rijndael with the AES polynomial; matches FIPS-197.",
    },
    "AES-256": {
        "algorithm": "RIJNDAEL",
        "block_size_bits": 128,
        "key_size_bits": 256,
        "modulus": 0x1B,
        "notes": "Rijndael with the AES polynomial; matches FIPS-197.",
    },
    "Rijndael-256": {
        "algorithm": "RIJNDAEL",
        "block_size_bits": 256,
        "key_size_bits": 256,
        "modulus": 0x1B,
        "notes": "256-bit block Rijndael; rows shift by their index.",
    },
}


def get_template(name: str, *, override_name: Optional[str] = None, modulus: Optional[int] = None) -> CipherSpec:
    """Get a predefined algorithm template as a CipherSpec.

    Args:
        name: Template name (e.g., "DES", "AES-128")
        override_name: Optional custom name for the spec
        modulus: Optional GF(2^8) modulus replacing the template's (Rijndael only)
    """
    if name not in ALGORITHM_LIBRARY:
        raise KeyError(f"Unknown template: {name}. Available: {list(ALGORITHM_LIBRARY.keys())}")

    t = dict(ALGORITHM_LIBRARY[name])
    if modulus is not None:
        t["modulus"] = modulus
    return CipherSpec(name=override_name or f"{name}_Template", **t)


def list_algorithms() -> List[str]:
    """List all available algorithm templates."""
    return sorted(ALGORITHM_LIBRARY.keys())


def build_cipher(
    spec: CipherSpec,
    key: Optional[bytes] = None,
    registry: Optional[CipherRegistry] = None,
) -> BlockCipher:
    """Factory function to create a cipher from a specification.

    Args:
        spec: CipherSpec defining the cipher configuration
        key: Optional key; the cipher is returned keyed when given
        registry: Optional CipherRegistry; uses default if not provided
    """
    reg = registry or CipherRegistry()
    cipher = reg.get(spec.algorithm)(spec)
    if key is not None:
        cipher.set_key(key)
    logger.debug("Built %s cipher for spec %s", spec.algorithm, spec.name)
    return cipher


def build_context(
    spec: CipherSpec,
    key: bytes,
    mode_spec: Optional[ModeSpec] = None,
    *,
    rng: Optional[RandomSource] = None,
    registry: Optional[CipherRegistry] = None,
) -> CipherModeEngine:
    """Keyed cipher wrapped in a CipherModeEngine for byte-stream use."""
    mode_spec = mode_spec or ModeSpec()
    cipher = build_cipher(spec, key, registry)
    return CipherModeEngine(
        cipher,
        mode_spec.mode,
        mode_spec.padding,
        iv=mode_spec.iv,
        rng=rng,
    )


def rijndael_spec_from_settings(settings) -> CipherSpec:
    """Rijndael spec using the block/key sizes and modulus from Settings."""
    return CipherSpec(
        name="Rijndael_Settings",
        algorithm="RIJNDAEL",
        block_size_bits=settings.rijndael_block_bits,
        key_size_bits=settings.rijndael_key_bits,
        modulus=settings.rijndael_modulus,
    )
