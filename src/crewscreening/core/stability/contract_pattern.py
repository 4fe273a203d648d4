"""Contract-shape signals: durations, gaps, overlaps and company churn."""

from __future__ import annotations

from collections import Counter
from typing import Any, Callable, Sequence

import pendulum

from ...schemas import CandidateContract
from ..rounding import days_to_months, round_half_up
from .config import StabilityConfig
from .ranks import normalize_rank

FLAG_SHORT_PATTERN = "FLAG_SHORT_PATTERN"
FLAG_OVERLAP = "FLAG_OVERLAP"
FLAG_LONG_GAP = "FLAG_LONG_GAP"
FLAG_FREQUENT_SWITCH = "FLAG_FREQUENT_SWITCH"


class ContractPatternAnalyzer:
    """Summarize a contract history into the raw inputs of the risk score."""

    def __init__(self, *, now_provider: Callable[[], pendulum.DateTime] | None = None) -> None:
        self._now_provider = now_provider or pendulum.now

    def analyze(
        self,
        contracts: Sequence[CandidateContract],
        config: StabilityConfig | None = None,
    ) -> dict[str, Any]:
        if not contracts:
            return self._empty_result()

        cfg = config or StabilityConfig()
        now = self._now_provider()
        ordered = sorted(contracts, key=lambda contract: contract.start_date)
        total = len(ordered)

        durations = [days_to_months(contract.duration_days(now)) for contract in ordered]
        short_count = sum(
            1
            for contract, months in zip(ordered, durations)
            if months < cfg.get_short_contract_months(normalize_rank(contract.rank_code))
        )
        short_ratio = short_count / total

        company_counts = Counter(_company_key(contract) for contract in ordered)
        unique_companies = len(company_counts)
        repeat_companies = sum(1 for count in company_counts.values() if count >= 2)
        repeat_ratio = repeat_companies / unique_companies if unique_companies else 0.0

        gaps, total_gap, longest_gap = self._gaps(ordered)
        overlaps = self._overlaps(ordered)

        window_years = int(cfg.get("recent_companies_window_years", 3))
        window_start = now.subtract(years=window_years).date()
        recent_unique = len(
            {
                _company_key(contract)
                for contract in ordered
                if contract.period_start() >= window_start
            }
        )

        flags: list[str] = []
        if short_ratio > float(cfg.get("short_ratio_flag_threshold", 0.6)):
            flags.append(FLAG_SHORT_PATTERN)
        if overlaps:
            flags.append(FLAG_OVERLAP)
        if total_gap > float(cfg.get("gap_months_flag_threshold", 18)):
            flags.append(FLAG_LONG_GAP)
        if recent_unique > int(cfg.get("frequent_switch_flag_threshold", 6)):
            flags.append(FLAG_FREQUENT_SWITCH)

        return {
            "total_contracts": total,
            "avg_duration_months": round_half_up(sum(durations) / total, 1),
            "shortest_duration": round_half_up(min(durations), 1),
            "longest_duration": round_half_up(max(durations), 1),
            "short_contract_count": short_count,
            "short_contract_ratio": round_half_up(short_ratio, 4),
            "unique_companies": unique_companies,
            "company_repeat_ratio": round_half_up(repeat_ratio, 4),
            "gap_periods": gaps,
            "total_gap_months": round_half_up(total_gap, 1),
            "longest_gap_months": round_half_up(longest_gap, 1),
            "overlaps": overlaps,
            "overlap_count": len(overlaps),
            "recent_unique_companies_3y": recent_unique,
            "flags": flags,
        }

    @staticmethod
    def _gaps(ordered: Sequence[CandidateContract]) -> tuple[list[dict[str, Any]], float, float]:
        gaps: list[dict[str, Any]] = []
        total = 0.0
        longest = 0.0
        for previous, current in zip(ordered, ordered[1:]):
            if previous.end_date is None or current.start_date <= previous.end_date:
                continue
            months = days_to_months((current.start_date - previous.end_date).days)
            gaps.append(
                {
                    "from": previous.end_date.isoformat(),
                    "to": current.start_date.isoformat(),
                    "months": months,
                }
            )
            total += months
            longest = max(longest, months)
        return gaps, total, longest

    @staticmethod
    def _overlaps(ordered: Sequence[CandidateContract]) -> list[dict[str, Any]]:
        overlaps: list[dict[str, Any]] = []
        for previous, current in zip(ordered, ordered[1:]):
            if previous.end_date is None or current.start_date >= previous.end_date:
                continue
            overlaps.append(
                {
                    "contract_a_id": previous.contract_id,
                    "contract_b_id": current.contract_id,
                    "overlap_days": (previous.end_date - current.start_date).days,
                }
            )
        return overlaps

    @staticmethod
    def _empty_result() -> dict[str, Any]:
        return {
            "total_contracts": 0,
            "avg_duration_months": 0.0,
            "shortest_duration": 0.0,
            "longest_duration": 0.0,
            "short_contract_count": 0,
            "short_contract_ratio": 0.0,
            "unique_companies": 0,
            "company_repeat_ratio": 0.0,
            "gap_periods": [],
            "total_gap_months": 0.0,
            "longest_gap_months": 0.0,
            "overlaps": [],
            "overlap_count": 0,
            "recent_unique_companies_3y": 0,
            "flags": [],
        }


def _company_key(contract: CandidateContract) -> str:
    return (contract.company_name or "").strip().lower()


__all__ = [
    "ContractPatternAnalyzer",
    "FLAG_FREQUENT_SWITCH",
    "FLAG_LONG_GAP",
    "FLAG_OVERLAP",
    "FLAG_SHORT_PATTERN",
]
