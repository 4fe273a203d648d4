"""Weighted eight-factor risk score and tier resolution."""

from __future__ import annotations

from typing import Any

from ..rounding import clamp, round_half_up
from .config import StabilityConfig

TIER_ORDER: tuple[str, ...] = ("critical", "high", "medium")


class RiskScoreCalculator:
    """Combine normalized contract signals into a score in ``[0, 1]``.

    Every factor is normalized to ``[0, 1]`` and multiplied by its configured
    weight. Short-ratio and frequent-switch values are scaled by the
    promotion modifier first; vessel diversity is inverted because diverse,
    tenured experience lowers risk.
    """

    def calculate(
        self,
        *,
        short_ratio: float,
        total_gap_months: float,
        overlap_count: int,
        rank_anomaly: bool,
        recent_unique_companies: int,
        stability_index: float | None,
        temporal_recency_score: float = 0.0,
        vessel_diversity_score: float = 0.0,
        promotion_modifier: float = 1.0,
        config: StabilityConfig | None = None,
    ) -> dict[str, Any]:
        cfg = config or StabilityConfig()
        weights = cfg.get_factor_weights()

        gap_cap = float(cfg.get("gap_months_norm_cap", 36.0))
        overlap_cap = float(cfg.get("overlap_count_norm_cap", 5.0))
        switch_cap = float(cfg.get("frequent_switch_norm_cap", 8.0))
        pivot = float(cfg.get("stability_index_norm_pivot", 5.0))
        neutral = float(cfg.get("stability_index_neutral", 0.5))

        if stability_index is not None:
            stability_norm = max(0.0, 1.0 - min(stability_index / pivot, 1.0))
        else:
            stability_norm = neutral

        normalized = {
            "short_ratio": (short_ratio, clamp(short_ratio) * promotion_modifier),
            "gap_months": (total_gap_months, min(1.0, total_gap_months / gap_cap)),
            "overlap_count": (overlap_count, min(1.0, overlap_count / overlap_cap)),
            "rank_anomaly": (rank_anomaly, 1.0 if rank_anomaly else 0.0),
            "frequent_switch": (
                recent_unique_companies,
                min(1.0, recent_unique_companies / switch_cap) * promotion_modifier,
            ),
            "stability_inverse": (stability_index, stability_norm),
            "vessel_diversity": (vessel_diversity_score, clamp(1.0 - vessel_diversity_score)),
            "temporal_recency": (temporal_recency_score, clamp(temporal_recency_score)),
        }

        factors: dict[str, dict[str, Any]] = {}
        total = 0.0
        for name, (raw, value) in normalized.items():
            weight = weights.get(name, 0.0)
            contribution = round_half_up(value * weight, 4)
            factors[name] = {
                "raw": raw,
                "normalized": round_half_up(value, 4),
                "weight": weight,
                "contribution": contribution,
            }
            total += contribution

        return {
            "risk_score": round_half_up(clamp(total), 4),
            "factors": factors,
        }


class RiskTierResolver:
    """Map a risk score to the highest tier whose threshold it reaches."""

    def resolve(self, risk_score: float, config: StabilityConfig | None = None) -> str:
        thresholds = (config or StabilityConfig()).get_risk_tier_thresholds()
        for tier in TIER_ORDER:
            if risk_score >= thresholds[tier]:
                return tier
        return "low"


__all__ = ["RiskScoreCalculator", "RiskTierResolver"]
