from __future__ import annotations

import logging
import os
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


class Settings(BaseModel):
    # Mode of operation defaults
    default_mode: str = Field(default="CBC")
    default_padding: str = Field(default="PKCS7")

    # Rijndael
    rijndael_modulus: int = Field(default=0x1B, ge=0, le=255, description="GF(2^8) modulus, x^8 implicit")
    rijndael_block_bits: int = Field(default=128)
    rijndael_key_bits: int = Field(default=128)

    # Logging
    log_level: str = Field(default="WARNING")

    # Reproducibility
    global_seed: int = Field(default=1337)

    @field_validator("rijndael_block_bits", "rijndael_key_bits")
    @classmethod
    def _rijndael_size(cls, v: int) -> int:
        if v not in (128, 192, 256):
            raise ValueError("Rijndael sizes must be 128, 192 or 256 bits")
        return v

    @field_validator("log_level")
    @classmethod
    def _level(cls, v: str) -> str:
        v = v.strip().upper()
        if v not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log level: {v}")
        return v


def _int(value: str) -> int:
    # accepts "27", "0x1B" or "0b11011"
    return int(value.strip(), 0)


@lru_cache(maxsize=1)
def load_settings() -> Settings:
    # Load .env if present
    load_dotenv()

    return Settings(
        default_mode=os.getenv("CIPHERKIT_MODE", "CBC"),
        default_padding=os.getenv("CIPHERKIT_PADDING", "PKCS7"),
        rijndael_modulus=_int(os.getenv("CIPHERKIT_RIJNDAEL_MODULUS", "0x1B")),
        rijndael_block_bits=int(os.getenv("CIPHERKIT_RIJNDAEL_BLOCK_BITS", "128")),
        rijndael_key_bits=int(os.getenv("CIPHERKIT_RIJNDAEL_KEY_BITS", "128")),
        log_level=os.getenv("CIPHERKIT_LOG_LEVEL", "WARNING"),
        global_seed=int(os.getenv("GLOBAL_SEED", "1337")),
    )


def configure_logging(settings: Optional[Settings] = None, *, verbose: bool = False) -> None:
    settings = settings or load_settings()
    logging.basicConfig(
        level=logging.DEBUG if verbose else getattr(logging, settings.log_level),
        format=LOG_FORMAT,
    )
