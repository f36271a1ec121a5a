"""Educational symmetric-cipher toolkit: DES, DEAL, Rijndael and modes of operation.

Research / education only. Do NOT use in production.
"""

from .cipher import DEAL, DES, BlockCipher, FeistelNetwork, RijndaelCipher
from .cipher.registry import build_cipher, build_context, get_template, list_algorithms
from .cipher.spec import CipherSpec, ModeSpec
from .config import Settings, load_settings
from .errors import (
    CipherKitError,
    CipherStateError,
    InvalidInputError,
    ReducibleModulusError,
    UnsupportedConfigurationError,
)
from .modes import CipherMode, CipherModeEngine, PaddingMode

__version__ = "0.1.0"

__all__ = [
    "BlockCipher",
    "FeistelNetwork",
    "DES",
    "DEAL",
    "RijndaelCipher",
    "CipherSpec",
    "ModeSpec",
    "build_cipher",
    "build_context",
    "get_template",
    "list_algorithms",
    "CipherMode",
    "CipherModeEngine",
    "PaddingMode",
    "Settings",
    "load_settings",
    "CipherKitError",
    "InvalidInputError",
    "ReducibleModulusError",
    "UnsupportedConfigurationError",
    "CipherStateError",
]
