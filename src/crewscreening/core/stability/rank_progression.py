"""Detect downgrades and implausibly fast promotions in a rank history."""

from __future__ import annotations

from collections import Counter
from typing import Any, Sequence

from ...schemas import CandidateContract
from .config import StabilityConfig
from .ranks import department_of, normalize_rank, rank_level

FLAG_RANK_ANOMALY = "FLAG_RANK_ANOMALY"
FLAG_UNREALISTIC_PROMOTION = "FLAG_UNREALISTIC_PROMOTION"


class RankProgressionAnalyzer:
    """Walk contracts in start order and compare rank levels within a department."""

    def analyze(
        self,
        contracts: Sequence[CandidateContract],
        config: StabilityConfig | None = None,
    ) -> dict[str, Any]:
        if not contracts:
            return {
                "department": None,
                "progression": [],
                "anomalies": [],
                "unknown_ranks": [],
                "flags": [],
            }

        cfg = config or StabilityConfig()
        ordered = sorted(contracts, key=lambda contract: contract.start_date)

        progression: list[dict[str, Any]] = []
        unknown_ranks: list[dict[str, Any]] = []
        for contract in ordered:
            canonical = normalize_rank(contract.rank_code)
            if canonical is None:
                unknown_ranks.append({"rank": contract.rank_code, "contract_id": contract.contract_id})
                continue
            department = department_of(canonical)
            progression.append(
                {
                    "rank": contract.rank_code,
                    "canonical": canonical,
                    "department": department,
                    "level": rank_level(canonical),
                    "start_date": contract.start_date.isoformat(),
                    "contract_id": contract.contract_id,
                }
            )

        # Ties go to the department seen first.
        department_counts = Counter(
            step["department"] for step in progression if step["department"]
        )
        primary = department_counts.most_common(1)[0][0] if department_counts else None

        min_months = int(cfg.get("unrealistic_promotion_months", 6))
        min_levels = int(cfg.get("unrealistic_promotion_levels", 2))

        starts = {contract.contract_id: contract.period_start() for contract in ordered}
        path = [
            step
            for step in progression
            if step["department"] == primary and step["level"] is not None
        ]
        anomalies: list[dict[str, Any]] = []
        for previous, current in zip(path, path[1:]):
            if current["level"] < previous["level"]:
                anomalies.append(
                    {
                        "type": "rank_downgrade",
                        "from_rank": previous["canonical"],
                        "to_rank": current["canonical"],
                        "contract_id": current["contract_id"],
                        "detail": (
                            f"Rank dropped from {previous['canonical']} (level {previous['level']}) "
                            f"to {current['canonical']} (level {current['level']})"
                        ),
                    }
                )

            level_jump = current["level"] - previous["level"]
            if level_jump >= min_levels:
                start_gap = starts[previous["contract_id"]].diff(starts[current["contract_id"]])
                months_between = start_gap.in_months()
                if months_between < min_months:
                    anomalies.append(
                        {
                            "type": "unrealistic_promotion",
                            "from_rank": previous["canonical"],
                            "to_rank": current["canonical"],
                            "months_between": months_between,
                            "contract_id": current["contract_id"],
                            "detail": (
                                f"Jumped {level_jump} levels ({previous['canonical']} to "
                                f"{current['canonical']}) in {months_between} months"
                            ),
                        }
                    )

        flags: list[str] = []
        if any(anomaly["type"] == "rank_downgrade" for anomaly in anomalies):
            flags.append(FLAG_RANK_ANOMALY)
        if any(anomaly["type"] == "unrealistic_promotion" for anomaly in anomalies):
            flags.append(FLAG_UNREALISTIC_PROMOTION)

        return {
            "department": primary,
            "progression": progression,
            "anomalies": anomalies,
            "unknown_ranks": unknown_ranks,
            "flags": flags,
        }


__all__ = ["FLAG_RANK_ANOMALY", "FLAG_UNREALISTIC_PROMOTION", "RankProgressionAnalyzer"]
