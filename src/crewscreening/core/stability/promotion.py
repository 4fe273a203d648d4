"""Promotion gap lookup and the promotion-window penalty modifier."""

from __future__ import annotations

from typing import Any, Callable

import pendulum
import structlog

from ...storage import ContractRepository
from ..rounding import DAYS_PER_MONTH, days_to_months, round_half_up
from .config import StabilityConfig
from .ranks import RANK_HIERARCHY, normalize_rank


class PromotionGapCalculator:
    """Compare days served in the current rank with the days needed for promotion.

    A positive gap means the candidate has served more than required; a
    negative gap means the minimum has not been reached yet.
    """

    def __init__(
        self,
        contracts: ContractRepository,
        *,
        now_provider: Callable[[], pendulum.DateTime] | None = None,
    ) -> None:
        self._contracts = contracts
        self._now_provider = now_provider or pendulum.now

    def calculate(self, candidate_id: str) -> dict[str, Any] | None:
        contracts = self._contracts.list_for_candidate(candidate_id)
        if not contracts:
            return None

        latest = max(contracts, key=lambda contract: contract.start_date)
        canonical = normalize_rank(latest.rank_code)
        if canonical is None:
            return None
        requirement = RANK_HIERARCHY.get(canonical)
        if requirement is None:
            return None

        now = self._now_provider()
        actual_days = sum(
            contract.duration_days(now)
            for contract in contracts
            if normalize_rank(contract.rank_code) == canonical
        )
        total_sea_days = sum(contract.duration_days(now) for contract in contracts)
        required_days = int(round_half_up(requirement.min_sea_months_in_rank * DAYS_PER_MONTH))

        gap_days: int | None = None
        gap_months: float | None = None
        if requirement.is_top_rank:
            eligible = False
        elif required_days > 0:
            gap_days = actual_days - required_days
            gap_months = days_to_months(gap_days)
            eligible = gap_days >= 0
        else:
            eligible = True

        min_total_required = int(round_half_up(requirement.min_total_sea_months * DAYS_PER_MONTH))
        return {
            "current_rank": canonical,
            "department": requirement.department,
            "level": requirement.level,
            "next_rank": requirement.next_rank,
            "actual_rank_days": actual_days,
            "required_rank_days": required_days,
            "promotion_gap_days": gap_days,
            "promotion_gap_months": gap_months,
            "is_eligible": eligible,
            "is_top_rank": requirement.is_top_rank,
            "total_sea_days": total_sea_days,
            "min_total_required": min_total_required,
            "total_gap_days": total_sea_days - min_total_required if min_total_required else None,
        }


class PromotionContextAnalyzer:
    """Dampen short-stint penalties for candidates close to their next promotion."""

    def __init__(self, gap_calculator: PromotionGapCalculator) -> None:
        self._gap_calculator = gap_calculator
        self._logger = structlog.get_logger(__name__)

    def analyze(self, candidate_id: str, config: StabilityConfig | None = None) -> dict[str, Any]:
        cfg = config or StabilityConfig()
        outside = {
            "in_promotion_window": False,
            "modifier": 1.0,
            "promotion_gap_months": None,
            "current_rank": None,
        }

        try:
            gap = self._gap_calculator.calculate(candidate_id)
        except Exception as exc:  # noqa: BLE001
            self._logger.warning(
                "promotion.gap_failed", candidate_id=candidate_id, error=str(exc)
            )
            return outside

        if gap is None:
            return outside
        outside["current_rank"] = gap["current_rank"]
        gap_months = gap["promotion_gap_months"]
        if gap["is_top_rank"] or gap_months is None:
            return outside

        window = float(cfg.get("promotion_window_months", 12))
        in_window = abs(gap_months) <= window
        return {
            "in_promotion_window": in_window,
            "modifier": float(cfg.get("promotion_penalty_modifier", 0.5)) if in_window else 1.0,
            "promotion_gap_months": gap_months,
            "current_rank": gap["current_rank"],
        }


__all__ = ["PromotionContextAnalyzer", "PromotionGapCalculator"]
