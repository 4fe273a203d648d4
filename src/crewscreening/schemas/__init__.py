"""Pydantic schema definitions for crew scoring data."""

from __future__ import annotations

from .candidate import Candidate, CandidateContract, Interview, InterviewAnswer
from .competency import (
    LEGACY_DIMENSION_ALIASES,
    CompetencyAssessment,
    CompetencyFlag,
    CompetencyQuestion,
    Dimension,
    resolve_dimension,
)
from .trust import TrustEvent, TrustProfile

__all__ = [
    "Candidate",
    "CandidateContract",
    "CompetencyAssessment",
    "CompetencyFlag",
    "CompetencyQuestion",
    "Dimension",
    "Interview",
    "InterviewAnswer",
    "LEGACY_DIMENSION_ALIASES",
    "TrustEvent",
    "TrustProfile",
    "resolve_dimension",
]
