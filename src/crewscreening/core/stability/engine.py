"""Stability and risk orchestration for a single candidate."""

from __future__ import annotations

import uuid
from typing import Any, Callable

import pendulum
import structlog

from ...schemas import TrustEvent
from ...schemas.config import StabilitySettings
from ...storage import (
    CandidateRepository,
    ContractRepository,
    TrustEventLog,
    TrustProfileStore,
)
from .config import StabilityConfig
from .contract_pattern import ContractPatternAnalyzer
from .promotion import PromotionContextAnalyzer, PromotionGapCalculator
from .rank_progression import RankProgressionAnalyzer
from .risk_score import RiskScoreCalculator, RiskTierResolver
from .stability_index import StabilityIndexCalculator
from .temporal_decay import TemporalDecayCalculator
from .vessel_diversity import VesselDiversityCalculator

ENGINE_VERSION = "1.1"
DETAIL_KEY = "stability_risk"
EVENT_TYPE = "stability_risk_computed"


class StabilityRiskEngine:
    """Run every stability calculator and persist the combined result.

    ``compute`` never raises: a disabled engine, an unknown candidate or any
    internal fault all yield ``None``.
    """

    def __init__(
        self,
        *,
        candidates: CandidateRepository,
        contracts: ContractRepository,
        profiles: TrustProfileStore,
        events: TrustEventLog,
        settings: StabilitySettings | None = None,
        now_provider: Callable[[], pendulum.DateTime] | None = None,
        contract_analyzer: ContractPatternAnalyzer | None = None,
        rank_analyzer: RankProgressionAnalyzer | None = None,
        index_calculator: StabilityIndexCalculator | None = None,
        promotion_analyzer: PromotionContextAnalyzer | None = None,
        temporal_calculator: TemporalDecayCalculator | None = None,
        diversity_calculator: VesselDiversityCalculator | None = None,
        risk_calculator: RiskScoreCalculator | None = None,
        tier_resolver: RiskTierResolver | None = None,
    ) -> None:
        self._candidates = candidates
        self._contracts = contracts
        self._profiles = profiles
        self._events = events
        self._settings = settings or StabilitySettings()
        self._now_provider = now_provider or pendulum.now

        now = self._now_provider
        self._contract_analyzer = contract_analyzer or ContractPatternAnalyzer(now_provider=now)
        self._rank_analyzer = rank_analyzer or RankProgressionAnalyzer()
        self._index_calculator = index_calculator or StabilityIndexCalculator(now_provider=now)
        self._promotion_analyzer = promotion_analyzer or PromotionContextAnalyzer(
            PromotionGapCalculator(contracts, now_provider=now)
        )
        self._temporal_calculator = temporal_calculator or TemporalDecayCalculator(now_provider=now)
        self._diversity_calculator = diversity_calculator or VesselDiversityCalculator(
            now_provider=now
        )
        self._risk_calculator = risk_calculator or RiskScoreCalculator()
        self._tier_resolver = tier_resolver or RiskTierResolver()
        self._logger = structlog.get_logger(__name__)

    def compute(self, candidate_id: str, fleet_type: str | None = None) -> dict[str, Any] | None:
        if not self._settings.enabled:
            return None
        try:
            return self._compute(candidate_id, fleet_type)
        except Exception as exc:  # noqa: BLE001
            self._logger.warning(
                "stability.compute_failed",
                candidate_id=candidate_id,
                fleet_type=fleet_type,
                error=str(exc),
            )
            return None

    def _compute(self, candidate_id: str, fleet_type: str | None) -> dict[str, Any] | None:
        candidate = self._candidates.get(candidate_id)
        if candidate is None:
            return None

        fleet = fleet_type or candidate.fleet_type
        cfg = StabilityConfig.from_settings(self._settings, fleet_type=fleet)
        contracts = self._contracts.list_for_candidate(candidate_id)

        pattern = self._contract_analyzer.analyze(contracts, cfg)
        ranks = self._rank_analyzer.analyze(contracts, cfg)
        stability = self._index_calculator.calculate(contracts, cfg)
        promotion = self._promotion_analyzer.analyze(candidate_id, cfg)
        temporal = self._temporal_calculator.calculate(contracts, cfg)
        diversity = self._diversity_calculator.calculate(contracts, cfg)

        risk = self._risk_calculator.calculate(
            short_ratio=pattern["short_contract_ratio"],
            total_gap_months=pattern["total_gap_months"],
            overlap_count=pattern["overlap_count"],
            rank_anomaly=bool(ranks["anomalies"]),
            recent_unique_companies=pattern["recent_unique_companies_3y"],
            stability_index=stability["stability_index"],
            temporal_recency_score=temporal["temporal_recency_score"],
            vessel_diversity_score=diversity["vessel_diversity_score"],
            promotion_modifier=promotion["modifier"],
            config=cfg,
        )
        tier = self._tier_resolver.resolve(risk["risk_score"], cfg)
        computed_at = self._now_provider().to_iso8601_string()

        result = {
            "engine_version": ENGINE_VERSION,
            "fleet_type": fleet,
            "stability_index": stability["stability_index"],
            "stability": stability,
            "risk_score": risk["risk_score"],
            "risk_tier": tier,
            "risk_factors": risk["factors"],
            "contract_summary": {
                key: pattern[key]
                for key in (
                    "total_contracts",
                    "avg_duration_months",
                    "short_contract_ratio",
                    "short_contract_count",
                    "overlap_count",
                    "total_gap_months",
                    "longest_gap_months",
                    "unique_companies",
                    "company_repeat_ratio",
                    "recent_unique_companies_3y",
                )
            },
            "rank_anomalies": ranks["anomalies"],
            "promotion_context": {
                "in_promotion_window": promotion["in_promotion_window"],
                "modifier": promotion["modifier"],
            },
            "temporal_decay": {
                "temporal_recency_score": temporal["temporal_recency_score"],
                "recent_short_ratio": temporal["recent_short_ratio"],
                "old_short_ratio": temporal["old_short_ratio"],
            },
            "vessel_diversity": {
                "vessel_diversity_score": diversity["vessel_diversity_score"],
                "qualifying_types": diversity["qualifying_types"],
                "total_types": diversity["total_types"],
                "type_breakdown": diversity["type_breakdown"],
            },
            "flags": [*pattern["flags"], *ranks["flags"]],
            "computed_at": computed_at,
        }

        self._profiles.upsert(
            candidate_id,
            {
                "stability_index": result["stability_index"],
                "risk_score": result["risk_score"],
                "risk_tier": tier,
            },
            detail={DETAIL_KEY: result},
            created_at=computed_at,
        )
        self._events.append(
            TrustEvent(
                event_id=uuid.uuid4().hex,
                candidate_id=candidate_id,
                event_type=EVENT_TYPE,
                payload={
                    "engine_version": ENGINE_VERSION,
                    "fleet_type": fleet,
                    "stability_index": stability["stability_index"],
                    "risk_score": risk["risk_score"],
                    "risk_tier": tier,
                    "promotion_modifier": promotion["modifier"],
                    "temporal_recency_score": temporal["temporal_recency_score"],
                    "vessel_diversity_score": diversity["vessel_diversity_score"],
                },
                created_at=computed_at,
            )
        )
        self._logger.info(
            "stability.computed",
            candidate_id=candidate_id,
            fleet_type=fleet,
            risk_score=risk["risk_score"],
            risk_tier=tier,
        )
        return result


__all__ = ["StabilityRiskEngine"]
