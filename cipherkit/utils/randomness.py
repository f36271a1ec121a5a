"""Explicit randomness source handed to the mode engine.

IVs and keys come from a cryptographically secure generator. ISO 10126
padding filler carries no secret, so it may come from a seeded PRNG, which
keeps tests reproducible.

Research / education only. Do NOT use in production.
"""
from __future__ import annotations

import random
import secrets
from dataclasses import dataclass, field
from typing import Callable, Optional


@dataclass
class RandomSource:
    secure_bytes: Callable[[int], bytes] = secrets.token_bytes
    filler: random.Random = field(default_factory=random.Random)

    def iv(self, n: int) -> bytes:
        return self.secure_bytes(n)

    def key(self, n: int) -> bytes:
        return self.secure_bytes(n)

    def filler_bytes(self, n: int) -> bytes:
        return bytes(self.filler.randrange(0, 256) for _ in range(n))

    @classmethod
    def seeded(cls, seed: int) -> "RandomSource":
        """Fully deterministic source for tests and reproducible runs.

        Not suitable for real keys: the "secure" stream is a seeded PRNG.
        """
        rng = random.Random(seed)
        return cls(secure_bytes=lambda n: bytes(rng.randrange(0, 256) for _ in range(n)),
                   filler=random.Random(seed + 1))


def default_source(rng: Optional[RandomSource] = None) -> RandomSource:
    return rng if rng is not None else RandomSource()
