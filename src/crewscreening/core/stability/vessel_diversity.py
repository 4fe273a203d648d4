"""Reward experience across vessel types when each type carries real tenure."""

from __future__ import annotations

from typing import Any, Callable, Sequence

import pendulum

from ...schemas import CandidateContract
from ..rounding import clamp, days_to_months, round_half_up
from .config import StabilityConfig

EXCLUDED_VESSEL_TYPES = frozenset({"", "other"})


class VesselDiversityCalculator:
    def __init__(self, *, now_provider: Callable[[], pendulum.DateTime] | None = None) -> None:
        self._now_provider = now_provider or pendulum.now

    def calculate(
        self,
        contracts: Sequence[CandidateContract],
        config: StabilityConfig | None = None,
    ) -> dict[str, Any]:
        cfg = config or StabilityConfig()
        params = cfg.get_vessel_diversity()
        min_types = int(params["min_types_for_bonus"])
        max_types = int(params["max_types_for_bonus"])
        min_tenure = params["min_tenure_months"]
        max_score = params["max_score"]

        now = self._now_provider()
        tenure: dict[str, float] = {}
        for contract in contracts:
            vessel_type = (contract.vessel_type or "").strip().lower()
            if vessel_type in EXCLUDED_VESSEL_TYPES:
                continue
            tenure[vessel_type] = tenure.get(vessel_type, 0.0) + days_to_months(
                contract.duration_days(now)
            )

        breakdown = {
            vessel_type: {
                "months": round_half_up(months, 1),
                "qualifies": months >= min_tenure,
            }
            for vessel_type, months in tenure.items()
        }
        qualifying = sum(1 for entry in breakdown.values() if entry["qualifies"])

        if qualifying < min_types:
            score = 0.0
        else:
            capped = min(qualifying, max_types)
            base = 0.1 * max_score
            span = max(max_types - min_types, 1)
            score = base + (capped - min_types) / span * (max_score - base)
            score = round_half_up(clamp(score, 0.0, max_score), 4)

        return {
            "vessel_diversity_score": score,
            "qualifying_types": qualifying,
            "total_types": len(breakdown),
            "type_breakdown": breakdown,
        }


__all__ = ["VesselDiversityCalculator"]
