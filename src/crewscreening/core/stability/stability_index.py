"""Inverse coefficient of variation over completed contract durations."""

from __future__ import annotations

import math
from typing import Any, Callable, Sequence

import pendulum

from ...schemas import CandidateContract
from ..rounding import days_to_months, round_half_up
from .config import StabilityConfig


class StabilityIndexCalculator:
    """Compute ``mean / std`` of contract durations in months.

    ``std`` is the sample standard deviation. Only contracts with an end date
    take part. Higher values mean more consistent tenure; the index is capped
    at ``stability_index_max_cap``.
    """

    def __init__(self, *, now_provider: Callable[[], pendulum.DateTime] | None = None) -> None:
        self._now_provider = now_provider or pendulum.now

    def calculate(
        self,
        contracts: Sequence[CandidateContract],
        config: StabilityConfig | None = None,
    ) -> dict[str, Any]:
        cfg = config or StabilityConfig()
        min_contracts = int(cfg.get("stability_index_min_contracts", 2))
        std_threshold = float(cfg.get("stability_index_std_threshold", 0.001))
        max_cap = float(cfg.get("stability_index_max_cap", 10.0))

        now = self._now_provider()
        durations = [
            days_to_months(contract.duration_days(now))
            for contract in contracts
            if contract.end_date is not None
        ]
        count = len(durations)

        if count < min_contracts:
            return {
                "stability_index": None,
                "avg_duration_months": round_half_up(durations[0], 2) if durations else 0.0,
                "std_duration_months": 0.0,
                "contract_count": count,
            }

        mean = sum(durations) / count
        std = math.sqrt(sum((value - mean) ** 2 for value in durations) / (count - 1))

        if std < std_threshold:
            index = max_cap
        else:
            index = min(max_cap, mean / std)

        return {
            "stability_index": round_half_up(index, 2),
            "avg_duration_months": round_half_up(mean, 2),
            "std_duration_months": round_half_up(std, 2),
            "contract_count": count,
        }


__all__ = ["StabilityIndexCalculator"]
