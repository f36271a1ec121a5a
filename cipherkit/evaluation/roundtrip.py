"""Algebraic unit testing: roundtrip verification P = D(E(P, K), K).

Generates randomized test vectors per algorithm and verifies that
decryption perfectly inverts encryption, both for single blocks and for
every mode/padding combination of the mode engine.

Research / education only. Do NOT use in production.
"""
from __future__ import annotations

import logging
import random
import time
from dataclasses import dataclass, field, asdict
from typing import Any, Callable, Dict, List, Optional, Sequence

from ..cipher.registry import CipherRegistry, build_cipher, get_template, list_algorithms
from ..cipher.spec import CipherSpec
from ..errors import CipherKitError
from ..modes.engine import CipherMode, CipherModeEngine
from ..modes.padding import PaddingMode
from ..utils.randomness import RandomSource

logger = logging.getLogger(__name__)


@dataclass
class RoundtripFailure:
    """Details of a single failed roundtrip test vector."""
    vector_index: int
    plaintext_hex: str
    key_hex: str
    ciphertext_hex: str
    decrypted_hex: str       # What decrypt returned (should equal plaintext)
    error: Optional[str]     # Exception message if decrypt/encrypt threw
    label: str = ""          # mode/padding/length for mode roundtrips


@dataclass
class RoundtripResult:
    """Aggregate result of roundtrip testing for one algorithm."""
    algorithm_name: str
    algorithm: str
    block_size_bits: int
    key_size_bits: int
    total_vectors: int
    passed: int
    failed: int
    failures: List[RoundtripFailure] = field(default_factory=list)
    elapsed_seconds: float = 0.0
    seed: int = 1337

    @property
    def success_rate(self) -> float:
        return self.passed / self.total_vectors if self.total_vectors > 0 else 0.0

    @property
    def is_perfect(self) -> bool:
        return self.failed == 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def summary(self) -> str:
        status = "PASS" if self.is_perfect else "FAIL"
        return (
            f"[{status}] {self.algorithm_name} ({self.algorithm}): "
            f"{self.passed}/{self.total_vectors} vectors passed "
            f"({self.elapsed_seconds:.2f}s)"
        )


def _rand_bytes(rng: random.Random, n: int) -> bytes:
    return bytes(rng.randrange(0, 256) for _ in range(n))


def _new_result(spec: CipherSpec, seed: int) -> RoundtripResult:
    return RoundtripResult(
        algorithm_name=spec.name,
        algorithm=spec.algorithm,
        block_size_bits=spec.block_size_bits,
        key_size_bits=spec.key_size_bits,
        total_vectors=0,
        passed=0,
        failed=0,
        seed=seed,
    )


def _record(
    result: RoundtripResult,
    ok: bool,
    failure: RoundtripFailure,
    max_failures_recorded: int,
) -> None:
    result.total_vectors += 1
    if ok:
        result.passed += 1
        return
    result.failed += 1
    if len(result.failures) < max_failures_recorded:
        result.failures.append(failure)


def run_roundtrip_tests(
    spec: CipherSpec,
    *,
    num_vectors: int = 100,
    seed: int = 1337,
    max_failures_recorded: int = 10,
    registry: Optional[CipherRegistry] = None,
) -> RoundtripResult:
    """Run block-level roundtrip verification across many test vectors.

    Args:
        spec: Cipher specification to test.
        num_vectors: Number of random (plaintext, key) pairs to test.
        seed: Random seed for deterministic reproducibility.
        max_failures_recorded: Maximum number of failure details to keep.
        registry: Optional cipher registry; uses default if not provided.

    Returns:
        RoundtripResult with pass/fail counts and failure details.
    """
    cipher = build_cipher(spec, registry=registry)
    rng = random.Random(seed)
    result = _new_result(spec, seed)

    start = time.perf_counter()
    for i in range(num_vectors):
        pt = _rand_bytes(rng, spec.block_size)
        key = _rand_bytes(rng, spec.key_size)
        try:
            cipher.set_key(key)
            ct = cipher.encrypt(pt)
            pt2 = cipher.decrypt(ct)
            failure = RoundtripFailure(i, pt.hex(), key.hex(), ct.hex(), pt2.hex(), None)
            _record(result, pt == pt2, failure, max_failures_recorded)
        except CipherKitError as exc:
            failure = RoundtripFailure(i, pt.hex(), key.hex(), "<error>", "<error>", str(exc))
            _record(result, False, failure, max_failures_recorded)

    result.elapsed_seconds = round(time.perf_counter() - start, 4)
    return result


def mode_roundtrip_lengths(block_size: int) -> List[int]:
    """Plaintext lengths exercising empty, partial, aligned and multi-block input."""
    return [0, 1, block_size - 1, block_size, block_size + 1, 3 * block_size + 2]


def run_mode_roundtrips(
    spec: CipherSpec,
    *,
    modes: Optional[Sequence[CipherMode]] = None,
    paddings: Optional[Sequence[PaddingMode]] = None,
    seed: int = 1337,
    max_failures_recorded: int = 10,
    registry: Optional[CipherRegistry] = None,
) -> RoundtripResult:
    """Run decrypt(encrypt(p)) == p for every mode x padding x length.

    Zeros padding cannot tell real trailing zero bytes from padding, so
    plaintexts are generated without a trailing zero byte.
    """
    modes = list(CipherMode) if modes is None else list(modes)
    paddings = list(PaddingMode) if paddings is None else list(paddings)
    rng = random.Random(seed)
    source = RandomSource.seeded(seed)
    key = source.key(spec.key_size)
    cipher = build_cipher(spec, key, registry)
    result = _new_result(spec, seed)

    start = time.perf_counter()
    index = 0
    for mode in modes:
        for padding in paddings:
            engine = CipherModeEngine(cipher, mode, padding, rng=source)
            for length in mode_roundtrip_lengths(spec.block_size):
                pt = _rand_bytes(rng, length)
                if pt and pt[-1] == 0:
                    pt = pt[:-1] + b"\x01"
                label = f"{mode.value}/{padding.value}/len={length}"
                try:
                    ct = engine.encrypt(pt)
                    pt2 = engine.decrypt(ct)
                    failure = RoundtripFailure(index, pt.hex(), key.hex(), ct.hex(), pt2.hex(), None, label)
                    _record(result, pt == pt2, failure, max_failures_recorded)
                except CipherKitError as exc:
                    failure = RoundtripFailure(index, pt.hex(), key.hex(), "<error>", "<error>", str(exc), label)
                    _record(result, False, failure, max_failures_recorded)
                index += 1

    result.elapsed_seconds = round(time.perf_counter() - start, 4)
    if not result.is_perfect:
        logger.warning("%s: %d mode roundtrips failed", spec.name, result.failed)
    return result


def run_all_algorithms(
    *,
    num_vectors: int = 100,
    seed: int = 1337,
    progress_callback: Optional[Callable[[str, int, int], None]] = None,
) -> List[RoundtripResult]:
    """Run roundtrip tests for all algorithms in ALGORITHM_LIBRARY.

    Args:
        num_vectors: Number of test vectors per algorithm.
        seed: Random seed for reproducibility.
        progress_callback: Optional callback(algo_name, current_index, total)
            for progress reporting.

    Returns:
        List of RoundtripResult sorted by algorithm name.
    """
    algos = list_algorithms()
    registry = CipherRegistry()
    results: List[RoundtripResult] = []

    for idx, algo_name in enumerate(algos):
        if progress_callback:
            progress_callback(algo_name, idx, len(algos))

        spec = get_template(algo_name)
        results.append(run_roundtrip_tests(spec, num_vectors=num_vectors, seed=seed, registry=registry))

    return sorted(results, key=lambda r: r.algorithm_name)
