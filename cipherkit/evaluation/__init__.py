"""Self-check harness: roundtrip verification, avalanche and S-box analysis.

Research / education only. Do NOT use in production.
"""

from .roundtrip import (
    RoundtripResult,
    RoundtripFailure,
    run_roundtrip_tests,
    run_mode_roundtrips,
    run_all_algorithms,
)
from .avalanche import AvalancheResult, avalanche_plaintext, avalanche_key, spec_factory
from .sbox_analysis import SBoxAnalysisResult, analyze_sbox, analyze_rijndael_moduli
from .report import EvaluationReport

__all__ = [
    "RoundtripResult",
    "RoundtripFailure",
    "run_roundtrip_tests",
    "run_mode_roundtrips",
    "run_all_algorithms",
    "AvalancheResult",
    "avalanche_plaintext",
    "avalanche_key",
    "spec_factory",
    "SBoxAnalysisResult",
    "analyze_sbox",
    "analyze_rijndael_moduli",
    "EvaluationReport",
]
