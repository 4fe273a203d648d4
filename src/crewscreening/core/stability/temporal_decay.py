"""Weight recent short contracts more heavily than old ones."""

from __future__ import annotations

from typing import Any, Callable, Sequence

import pendulum

from ...schemas import CandidateContract
from ..rounding import days_to_months, round_half_up
from .config import StabilityConfig


class TemporalDecayCalculator:
    """Score how much of the weighted instability sits in recent history."""

    def __init__(self, *, now_provider: Callable[[], pendulum.DateTime] | None = None) -> None:
        self._now_provider = now_provider or pendulum.now

    def calculate(
        self,
        contracts: Sequence[CandidateContract],
        config: StabilityConfig | None = None,
    ) -> dict[str, Any]:
        if not contracts:
            return {
                "temporal_recency_score": 0.0,
                "recent_short_ratio": 0.0,
                "old_short_ratio": 0.0,
                "weights_applied": [],
            }

        cfg = config or StabilityConfig()
        decay = cfg.get_temporal_decay()
        threshold = cfg.get_short_contract_months()
        now = self._now_provider()
        today = now.date()

        weighted_short = 0.0
        weighted_total = 0.0
        buckets: dict[str, list[bool]] = {"recent": [], "middle": [], "old": []}
        applied: list[dict[str, Any]] = []

        for contract in contracts:
            age_months = contract.period_start().diff(today).in_months()
            if age_months <= decay["recent_months"]:
                bucket, weight = "recent", decay["recent_weight"]
            elif age_months > decay["old_months"]:
                bucket, weight = "old", decay["old_weight"]
            else:
                bucket, weight = "middle", decay["default_weight"]

            is_short = days_to_months(contract.duration_days(now)) < threshold
            weighted_total += weight
            if is_short:
                weighted_short += weight
            buckets[bucket].append(is_short)
            applied.append(
                {
                    "contract_id": contract.contract_id,
                    "bucket": bucket,
                    "weight": weight,
                    "is_short": is_short,
                }
            )

        score = weighted_short / weighted_total if weighted_total > 0 else 0.0
        return {
            "temporal_recency_score": round_half_up(score, 4),
            "recent_short_ratio": _short_ratio(buckets["recent"]),
            "old_short_ratio": _short_ratio(buckets["old"]),
            "weights_applied": applied,
        }


def _short_ratio(flags: list[bool]) -> float:
    if not flags:
        return 0.0
    return round_half_up(sum(flags) / len(flags), 4)


__all__ = ["TemporalDecayCalculator"]
