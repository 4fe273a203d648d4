"""Competency pipeline built from interview answers."""

from .engine import CompetencyEngine
from .language import detect_language
from .role_scope import RankToRoleScopeMapper
from .rubric import AnswerRubric, KeywordCatalog, RubricScore
from .scorer import CompetencyScore, CompetencyScorer
from .technical_depth import TechnicalDepthAnalyzer

__all__ = [
    "AnswerRubric",
    "CompetencyEngine",
    "CompetencyScore",
    "CompetencyScorer",
    "KeywordCatalog",
    "RankToRoleScopeMapper",
    "RubricScore",
    "TechnicalDepthAnalyzer",
    "detect_language",
]
