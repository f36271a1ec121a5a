"""CLI entry point for the cipherkit self-check harness.

Usage:
    python scripts/run_selfcheck.py                              # everything
    python scripts/run_selfcheck.py --algorithms DES AES-128     # subset
    python scripts/run_selfcheck.py --vectors 10 --skip-avalanche

Research / education only. Do NOT use in production.
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

# Ensure project root is on path
_project_root = Path(__file__).parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

from cipherkit.cipher.registry import get_template, list_algorithms
from cipherkit.config import configure_logging, load_settings
from cipherkit.evaluation import (
    EvaluationReport,
    analyze_rijndael_moduli,
    avalanche_key,
    avalanche_plaintext,
    run_mode_roundtrips,
    run_roundtrip_tests,
    spec_factory,
)
from cipherkit.utils.repro import set_global_seed, utc_timestamp

logger = logging.getLogger("run_selfcheck")


def _cli_progress(message: str, current: int, total: int) -> None:
    pct = (current / total * 100) if total > 0 else 0
    print(f"  [{current + 1}/{total}] ({pct:.0f}%) {message}", file=sys.stderr)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="cipherkit self-check: roundtrips, avalanche, S-boxes")
    parser.add_argument(
        "--algorithms", nargs="+", default=None,
        help="Template names to check (default: all)",
    )
    parser.add_argument(
        "--vectors", type=int, default=100,
        help="Roundtrip test vectors per algorithm (default: 100)",
    )
    parser.add_argument(
        "--avalanche-trials", type=int, default=20,
        help="Avalanche trials per input bit (default: 20)",
    )
    parser.add_argument(
        "--seed", type=int, default=None,
        help="Random seed (default: GLOBAL_SEED setting)",
    )
    parser.add_argument(
        "--output-dir", type=str, default="selfcheck",
        help="Output directory (default: selfcheck)",
    )
    parser.add_argument("--skip-avalanche", action="store_true", help="Skip avalanche measurement")
    parser.add_argument("--skip-sbox", action="store_true", help="Skip Rijndael S-box analysis")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")

    args = parser.parse_args(argv)

    available = list_algorithms()
    unknown = [name for name in args.algorithms or [] if name not in available]
    if unknown:
        parser.error(f"unknown algorithm(s): {', '.join(unknown)}. Available: {', '.join(available)}")

    settings = load_settings()
    configure_logging(settings, verbose=args.verbose)
    seed = settings.global_seed if args.seed is None else args.seed
    set_global_seed(seed)

    names = args.algorithms or available
    report = EvaluationReport()

    for idx, name in enumerate(names):
        _cli_progress(name, idx, len(names))
        spec = get_template(name)
        report.roundtrip_results.append(run_roundtrip_tests(spec, num_vectors=args.vectors, seed=seed))
        report.roundtrip_results.append(run_mode_roundtrips(spec, seed=seed))
        if not args.skip_avalanche:
            factory = spec_factory(spec)
            report.avalanche_results.append(
                avalanche_plaintext(factory, trials=args.avalanche_trials, seed=seed, algorithm_name=name)
            )
            report.avalanche_results.append(
                avalanche_key(factory, trials=args.avalanche_trials, seed=seed, algorithm_name=name)
            )

    if not args.skip_sbox:
        report.sbox_results.extend(analyze_rijndael_moduli())

    out_path = Path(args.output_dir) / f"{utc_timestamp()}_selfcheck.json"
    report.save(out_path)
    print(report.to_summary())
    print(f"\nReport written to {out_path}")

    failing = report.failing_algorithms()
    if failing:
        logger.error("Roundtrip failures: %s", ", ".join(failing))
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
