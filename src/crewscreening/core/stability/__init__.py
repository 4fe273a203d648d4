"""Stability and risk pipeline built from contract history."""

from .config import StabilityConfig
from .contract_pattern import ContractPatternAnalyzer
from .engine import StabilityRiskEngine
from .promotion import PromotionContextAnalyzer, PromotionGapCalculator
from .rank_progression import RankProgressionAnalyzer
from .risk_score import RiskScoreCalculator, RiskTierResolver
from .stability_index import StabilityIndexCalculator
from .temporal_decay import TemporalDecayCalculator
from .vessel_diversity import VesselDiversityCalculator

__all__ = [
    "ContractPatternAnalyzer",
    "PromotionContextAnalyzer",
    "PromotionGapCalculator",
    "RankProgressionAnalyzer",
    "RiskScoreCalculator",
    "RiskTierResolver",
    "StabilityConfig",
    "StabilityIndexCalculator",
    "StabilityRiskEngine",
    "TemporalDecayCalculator",
    "VesselDiversityCalculator",
]
