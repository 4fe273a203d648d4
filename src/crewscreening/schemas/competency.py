from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

GENERIC_SCOPES = frozenset({"ALL", "all", "both"})


class Dimension(str, Enum):
    """Competency scoring axes."""

    DISCIPLINE = "DISCIPLINE"
    LEADERSHIP = "LEADERSHIP"
    STRESS = "STRESS"
    TEAMWORK = "TEAMWORK"
    COMMS = "COMMS"
    TECH_PRACTICAL = "TECH_PRACTICAL"


class CompetencyFlag(str, Enum):
    """Composite flags raised when a dimension falls below its threshold."""

    LOW_DISCIPLINE = "low_discipline"
    POOR_TEAMWORK = "poor_teamwork"
    HIGH_STRESS_RISK = "high_stress_risk"
    COMMUNICATION_GAP = "communication_gap"
    SAFETY_MINDSET_MISSING = "safety_mindset_missing"
    LEADERSHIP_RISK = "leadership_risk"


# Codes used by interviews recorded before the six-dimension model.
LEGACY_DIMENSION_ALIASES: dict[str, Dimension] = {
    "COMMUNICATION": Dimension.COMMS,
    "ACCOUNTABILITY": Dimension.DISCIPLINE,
    "TEAMWORK": Dimension.TEAMWORK,
    "STRESS_RESILIENCE": Dimension.STRESS,
    "ADAPTABILITY": Dimension.TECH_PRACTICAL,
    "LEARNING_AGILITY": Dimension.LEADERSHIP,
    "INTEGRITY": Dimension.DISCIPLINE,
    "ROLE_COMPETENCE": Dimension.TECH_PRACTICAL,
}


def resolve_dimension(code: str | None) -> Dimension | None:
    """Translate a raw or legacy competency code into a ``Dimension``."""
    if not code:
        return None
    normalized = code.strip().upper()
    if normalized in LEGACY_DIMENSION_ALIASES:
        return LEGACY_DIMENSION_ALIASES[normalized]
    try:
        return Dimension(normalized)
    except ValueError:
        return None


class CompetencyQuestion(BaseModel):
    """Interview question bound to one competency dimension."""

    question_id: str
    dimension: Dimension
    role_scope: str = "ALL"
    vessel_scope: str = "all"
    operation_scope: str = "both"
    difficulty: int = Field(default=1, ge=1, le=3)
    question_text: dict[str, str] = Field(default_factory=dict)
    is_active: bool = True

    model_config = ConfigDict(extra="forbid")

    def applies_to(self, role_scope: str, vessel_scope: str, operation_scope: str) -> bool:
        return (
            _scope_matches(self.role_scope, role_scope)
            and _scope_matches(self.vessel_scope, vessel_scope)
            and _scope_matches(self.operation_scope, operation_scope)
        )


def _scope_matches(question_scope: str, requested: str) -> bool:
    return question_scope in GENERIC_SCOPES or question_scope == requested


class CompetencyAssessment(BaseModel):
    """Append-only record of one competency computation."""

    assessment_id: str
    candidate_id: str
    interview_id: str
    computed_at: str
    score_total: float
    score_by_dimension: dict[str, float] = Field(default_factory=dict)
    flags: list[str] = Field(default_factory=list)
    evidence_summary: dict[str, Any] = Field(default_factory=dict)
    answer_scores: list[dict[str, Any]] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid", frozen=True)
