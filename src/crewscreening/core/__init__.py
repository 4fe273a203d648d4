"""Scoring cores for crew competency and contract stability."""

from .competency import CompetencyEngine, CompetencyScorer, RankToRoleScopeMapper
from .stability import StabilityConfig, StabilityRiskEngine

__all__ = [
    "CompetencyEngine",
    "CompetencyScorer",
    "RankToRoleScopeMapper",
    "StabilityConfig",
    "StabilityRiskEngine",
]
