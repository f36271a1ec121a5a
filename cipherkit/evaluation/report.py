"""Self-check report: roundtrip, avalanche and S-box results in one document.

Results are grouped per algorithm for the text view; the JSON form keeps
flat lists so a saved report can be loaded back with `EvaluationReport.load`.

Research / education only. Do NOT use in production.
"""
from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List

from ..utils.repro import read_json, write_json
from .avalanche import AvalancheResult
from .roundtrip import RoundtripFailure, RoundtripResult
from .sbox_analysis import SBoxAnalysisResult


@dataclass
class EvaluationReport:
    timestamp: str = ""
    roundtrip_results: List[RoundtripResult] = field(default_factory=list)
    avalanche_results: List[AvalancheResult] = field(default_factory=list)
    sbox_results: List[SBoxAnalysisResult] = field(default_factory=list)

    def __post_init__(self):
        if not self.timestamp:
            self.timestamp = datetime.now(timezone.utc).isoformat()

    @property
    def passed(self) -> bool:
        """Every roundtrip is perfect and every analyzed S-box is a bijection."""
        return (all(r.is_perfect for r in self.roundtrip_results)
                and all(s.is_bijective for s in self.sbox_results))

    def failing_algorithms(self) -> List[str]:
        """Names with at least one failed roundtrip, without duplicates."""
        return sorted({r.algorithm_name for r in self.roundtrip_results if not r.is_perfect})

    def by_algorithm(self) -> Dict[str, Dict[str, list]]:
        grouped: Dict[str, Dict[str, list]] = defaultdict(lambda: {"roundtrip": [], "avalanche": []})
        for r in self.roundtrip_results:
            grouped[r.algorithm_name]["roundtrip"].append(r)
        for a in self.avalanche_results:
            grouped[a.algorithm_name]["avalanche"].append(a)
        return dict(grouped)

    # -- serialization ------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timestamp": self.timestamp,
            "roundtrip": [r.to_dict() for r in self.roundtrip_results],
            "avalanche": [a.to_dict() for a in self.avalanche_results],
            "sbox": [s.to_dict() for s in self.sbox_results],
            "summary": {
                "passed": self.passed,
                "roundtrip_all_pass": all(r.is_perfect for r in self.roundtrip_results),
                "sbox_all_bijective": all(s.is_bijective for s in self.sbox_results),
                "failing_algorithms": self.failing_algorithms(),
                "worst_ddt_max": max((s.ddt_max for s in self.sbox_results), default=None),
            },
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EvaluationReport":
        roundtrips = []
        for item in data.get("roundtrip", []):
            item = dict(item)
            failures = [RoundtripFailure(**f) for f in item.pop("failures", [])]
            roundtrips.append(RoundtripResult(**item, failures=failures))
        avalanches = []
        for item in data.get("avalanche", []):
            item = {k: v for k, v in item.items() if k != "passes_sac"}
            avalanches.append(AvalancheResult(**item))
        return cls(
            timestamp=data.get("timestamp", ""),
            roundtrip_results=roundtrips,
            avalanche_results=avalanches,
            sbox_results=[SBoxAnalysisResult(**s) for s in data.get("sbox", [])],
        )

    def save(self, path: str | Path) -> None:
        write_json(path, self.to_dict())

    @classmethod
    def load(cls, path: str | Path) -> "EvaluationReport":
        return cls.from_dict(read_json(path))

    # -- text view ----------------------------------------------------------

    def to_summary(self) -> str:
        verdict = "PASS" if self.passed else "FAIL"
        lines = [f"cipherkit self-check [{verdict}] {self.timestamp}"]

        if self.roundtrip_results:
            ok = sum(1 for r in self.roundtrip_results if r.is_perfect)
            lines.append(f"Roundtrip Tests: {ok}/{len(self.roundtrip_results)} pass")

        for name, section in sorted(self.by_algorithm().items()):
            lines.append(f"\n{name}")
            lines.extend(f"  {r.summary()}" for r in section["roundtrip"])
            lines.extend(f"  {a.summary()}" for a in section["avalanche"])

        if self.sbox_results:
            weakest = max(self.sbox_results, key=lambda s: s.ddt_max)
            lines.append(f"\nS-boxes: {len(self.sbox_results)} analyzed, worst {weakest.summary()}")

        return "\n".join(lines)
