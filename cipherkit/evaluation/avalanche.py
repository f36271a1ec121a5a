"""Avalanche measurement for plaintext and key bit flips.

Flips a single input bit, encrypts both inputs under a fresh key, and
records the fraction of ciphertext bits that changed. A well-diffusing
cipher averages close to 0.5 for every input bit.

Research / education only. Do NOT use in production.
"""
from __future__ import annotations

import random
import statistics
from dataclasses import dataclass, field, asdict
from typing import Any, Callable, Dict, List, Optional

from ..cipher.base import BlockCipher
from ..cipher.registry import CipherRegistry, build_cipher
from ..cipher.spec import CipherSpec
from ..errors import InvalidInputError

CipherFactory = Callable[[], BlockCipher]


@dataclass
class AvalancheResult:
    """Avalanche measurement for one input type."""
    algorithm_name: str
    input_type: str             # "plaintext" or "key"
    num_trials: int
    num_input_bits: int
    num_output_bits: int

    # Per-input-bit mean flip fraction (len = num_input_bits)
    per_input_bit_mean: List[float] = field(default_factory=list)

    global_mean: float = 0.0    # ~0.5 ideal
    global_std: float = 0.0
    min_bit_prob: float = 0.0
    max_bit_prob: float = 0.0
    sac_deviation: float = 0.0  # Mean |per_bit - 0.5|

    @property
    def passes_sac(self) -> bool:
        """Heuristic: SAC deviation < 0.05 and min_bit_prob > 0.35."""
        return self.sac_deviation < 0.05 and self.min_bit_prob > 0.35

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["passes_sac"] = self.passes_sac
        return d

    def summary(self) -> str:
        status = "PASS" if self.passes_sac else "FAIL"
        return (
            f"[{status}] {self.algorithm_name} avalanche({self.input_type}): "
            f"mean={self.global_mean:.4f}, std={self.global_std:.4f}, "
            f"deviation={self.sac_deviation:.4f}"
        )


def hamming_distance(a: bytes, b: bytes) -> int:
    if len(a) != len(b):
        raise InvalidInputError("hamming_distance length mismatch")
    return sum(bin(x ^ y).count("1") for x, y in zip(a, b))


def flip_bit(data: bytes, bit: int) -> bytes:
    out = bytearray(data)
    out[bit // 8] ^= 0x80 >> (bit % 8)
    return bytes(out)


def _rand_bytes(rng: random.Random, n: int) -> bytes:
    return bytes(rng.randrange(0, 256) for _ in range(n))


def _measure(
    factory: CipherFactory,
    *,
    input_type: str,
    trials: int,
    seed: int,
    algorithm_name: str,
    bits: Optional[List[int]],
) -> AvalancheResult:
    cipher = factory()
    block_bytes = cipher.block_size
    key_bytes = cipher.key_size
    num_input_bits = 8 * (block_bytes if input_type == "plaintext" else key_bytes)
    num_output_bits = 8 * block_bytes
    positions = bits if bits is not None else list(range(num_input_bits))
    rng = random.Random(seed)

    per_bit_means: List[float] = []
    for bit_i in positions:
        if not 0 <= bit_i < num_input_bits:
            raise InvalidInputError(f"bit {bit_i} outside 0..{num_input_bits - 1}")
        total_frac = 0.0
        for _ in range(trials):
            pt = _rand_bytes(rng, block_bytes)
            key = _rand_bytes(rng, key_bytes)

            cipher.set_key(key)
            ct1 = cipher.encrypt(pt)
            if input_type == "plaintext":
                ct2 = cipher.encrypt(flip_bit(pt, bit_i))
            else:
                cipher.set_key(flip_bit(key, bit_i))
                ct2 = cipher.encrypt(pt)

            total_frac += hamming_distance(ct1, ct2) / num_output_bits
        per_bit_means.append(total_frac / trials)

    global_mean = statistics.mean(per_bit_means) if per_bit_means else 0.0
    global_std = statistics.stdev(per_bit_means) if len(per_bit_means) > 1 else 0.0
    sac_dev = statistics.mean(abs(p - 0.5) for p in per_bit_means) if per_bit_means else 0.5

    return AvalancheResult(
        algorithm_name=algorithm_name,
        input_type=input_type,
        num_trials=trials,
        num_input_bits=num_input_bits,
        num_output_bits=num_output_bits,
        per_input_bit_mean=per_bit_means,
        global_mean=round(global_mean, 6),
        global_std=round(global_std, 6),
        min_bit_prob=round(min(per_bit_means), 6) if per_bit_means else 0.0,
        max_bit_prob=round(max(per_bit_means), 6) if per_bit_means else 0.0,
        sac_deviation=round(sac_dev, 6),
    )


def avalanche_plaintext(
    factory: CipherFactory,
    *,
    trials: int = 50,
    seed: int = 1337,
    algorithm_name: str = "",
    bits: Optional[List[int]] = None,
) -> AvalancheResult:
    """Mean fraction of ciphertext bits flipped per flipped plaintext bit.

    Args:
        factory: Zero-argument callable returning an unkeyed cipher; the
            cipher is re-keyed with a random key on every trial.
        trials: Random trials per input bit.
        seed: Random seed for reproducibility.
        algorithm_name: Label for the result.
        bits: Optional subset of input bit positions (MSB-first) to test.
    """
    return _measure(factory, input_type="plaintext", trials=trials, seed=seed,
                    algorithm_name=algorithm_name, bits=bits)


def avalanche_key(
    factory: CipherFactory,
    *,
    trials: int = 50,
    seed: int = 1337,
    algorithm_name: str = "",
    bits: Optional[List[int]] = None,
) -> AvalancheResult:
    """Mean fraction of ciphertext bits flipped per flipped key bit.

    DES ignores key parity bits (the low bit of every key byte), so those
    positions score 0.0.
    """
    return _measure(factory, input_type="key", trials=trials, seed=seed,
                    algorithm_name=algorithm_name, bits=bits)


def spec_factory(spec: CipherSpec, registry: Optional[CipherRegistry] = None) -> CipherFactory:
    """Adapt a CipherSpec into the zero-argument factory the measurements take."""
    return lambda: build_cipher(spec, registry=registry)
