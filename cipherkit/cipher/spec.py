from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from . import gf256


Algorithm = Literal["DES", "DEAL", "RIJNDAEL"]

FIXED_SIZES = {
    "DES": (64, 64),
    "DEAL": (64, 128),
}
RIJNDAEL_SIZES = (128, 192, 256)


class CipherSpec(BaseModel):
    """Structured description of a cipher configuration.

    Used by the registry to build cipher instances and by the evaluation
    harness to label results.
    """

    name: str = Field(..., min_length=3, max_length=80)
    algorithm: Algorithm
    block_size_bits: int = Field(..., ge=32, le=256)
    key_size_bits: int = Field(..., ge=32, le=512)
    modulus: int = Field(default=gf256.AES_MODULUS, ge=0, le=255, description="GF(2^8) modulus, x^8 implicit")
    notes: str = Field(default="")

    @field_validator("algorithm", mode="before")
    @classmethod
    def _upper_algorithm(cls, v: str) -> str:
        return str(v).upper()

    @field_validator("block_size_bits")
    @classmethod
    def _block_size(cls, v: int) -> int:
        if v % 8 != 0:
            raise ValueError("block_size_bits must be a multiple of 8")
        return v

    @field_validator("key_size_bits")
    @classmethod
    def _key_size(cls, v: int) -> int:
        if v % 8 != 0:
            raise ValueError("key_size_bits must be a multiple of 8")
        return v

    @model_validator(mode="after")
    def _check_algorithm_sizes(self) -> "CipherSpec":
        if self.algorithm in FIXED_SIZES:
            block, key = FIXED_SIZES[self.algorithm]
            if (self.block_size_bits, self.key_size_bits) != (block, key):
                raise ValueError(f"{self.algorithm} requires block={block} and key={key} bits")
        else:
            if self.block_size_bits not in RIJNDAEL_SIZES or self.key_size_bits not in RIJNDAEL_SIZES:
                raise ValueError("RIJNDAEL block and key sizes must be 128, 192 or 256 bits")
            if not gf256.is_irreducible(self.modulus):
                raise ValueError(f"modulus 0x{self.modulus:02X} is reducible")
        return self

    @property
    def block_size(self) -> int:
        return self.block_size_bits // 8

    @property
    def key_size(self) -> int:
        return self.key_size_bits // 8


class ModeSpec(BaseModel):
    """Mode-of-operation selection for a CipherModeEngine."""

    mode: str = Field(default="CBC")
    padding: str = Field(default="PKCS7")
    iv_hex: Optional[str] = Field(default=None, description="IV / initial counter block as hex")

    @field_validator("mode", "padding")
    @classmethod
    def _strip(cls, v: str) -> str:
        return v.strip()

    @field_validator("iv_hex")
    @classmethod
    def _hex(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        bytes.fromhex(v)
        return v.lower()

    @property
    def iv(self) -> Optional[bytes]:
        return bytes.fromhex(self.iv_hex) if self.iv_hex is not None else None

    @classmethod
    def from_settings(cls, settings) -> "ModeSpec":
        return cls(mode=settings.default_mode, padding=settings.default_padding)
