"""Block ciphers: Feistel (DES, DEAL) and SPN (Rijndael) constructions."""

from .base import BlockCipher, KeyExpansion, RoundFunction
from .deal import DEAL
from .des import DES
from .feistel import FeistelNetwork
from .rijndael import RijndaelCipher

__all__ = [
    "BlockCipher",
    "KeyExpansion",
    "RoundFunction",
    "FeistelNetwork",
    "DES",
    "DEAL",
    "RijndaelCipher",
]
