"""Competency orchestration: scoring, flags, evidence and persistence."""

from __future__ import annotations

import uuid
from typing import Any, Callable, Mapping

import pendulum
import structlog

from ...schemas import (
    Candidate,
    CompetencyAssessment,
    CompetencyFlag,
    Dimension,
    Interview,
    TrustEvent,
)
from ...schemas.config import CompetencySettings
from ...storage import (
    AssessmentLog,
    CandidateRepository,
    InterviewRepository,
    TrustEventLog,
    TrustProfileStore,
)
from ..rounding import round_half_up
from .role_scope import RankToRoleScopeMapper
from .scorer import CompetencyScorer

DETAIL_KEY = "competency_engine"
EVENT_TYPE = "competency_assessed"

STRENGTH_MIN_SCORE = 60
CONCERN_MAX_SCORE = 50
MAX_EVIDENCE_LINES = 3

STRENGTH_LABELS: dict[str, str] = {
    "DISCIPLINE": "Strong procedural discipline and safety awareness",
    "LEADERSHIP": "Effective leadership and decision-making ability",
    "STRESS": "Good stress management and composure under pressure",
    "TEAMWORK": "Strong team collaboration and multicultural awareness",
    "COMMS": "Clear communication and reporting skills",
    "TECH_PRACTICAL": "Solid technical knowledge and practical problem-solving",
}

CONCERN_LABELS: dict[str, str] = {
    "DISCIPLINE": "Procedural discipline needs improvement",
    "LEADERSHIP": "Leadership capabilities require development",
    "STRESS": "Stress management approach needs attention",
    "TEAMWORK": "Team collaboration skills below expectations",
    "COMMS": "Communication and reporting accuracy needs improvement",
    "TECH_PRACTICAL": "Technical knowledge gaps identified",
}

FLAG_REASONS: dict[str, str] = {
    "low_discipline": "Candidate showed insufficient awareness of safety procedures and ISM compliance",
    "poor_teamwork": "Team collaboration and conflict resolution skills below threshold",
    "high_stress_risk": "Stress management responses indicate potential risk under pressure",
    "communication_gap": "Communication skills and reporting accuracy need significant improvement",
    "safety_mindset_missing": "Critical: Safety awareness below minimum acceptable standard",
    "leadership_risk": "Leadership and decision-making capability needs development",
}

BULLET_LABELS: dict[str, str] = {
    "DISCIPLINE": "Safety/Discipline",
    "LEADERSHIP": "Leadership",
    "STRESS": "Stress Management",
    "TEAMWORK": "Teamwork",
    "COMMS": "Communication",
    "TECH_PRACTICAL": "Technical",
}


class CompetencyEngine:
    """Compute, explain and record a candidate's competency assessment.

    ``compute`` returns ``None`` for every no-data case and for any internal
    fault; callers treat that as a normal outcome.
    """

    def __init__(
        self,
        *,
        candidates: CandidateRepository,
        interviews: InterviewRepository,
        scorer: CompetencyScorer,
        assessments: AssessmentLog,
        profiles: TrustProfileStore,
        events: TrustEventLog,
        settings: CompetencySettings | None = None,
        mapper: RankToRoleScopeMapper | None = None,
        now_provider: Callable[[], pendulum.DateTime] | None = None,
    ) -> None:
        self._candidates = candidates
        self._interviews = interviews
        self._scorer = scorer
        self._assessments = assessments
        self._profiles = profiles
        self._events = events
        self._settings = settings or CompetencySettings()
        self._mapper = mapper or RankToRoleScopeMapper()
        self._now_provider = now_provider or pendulum.now
        self._logger = structlog.get_logger(__name__)

    def compute(self, candidate_id: str, fleet_type: str | None = None) -> dict[str, Any] | None:
        if not self._settings.enabled:
            return None
        try:
            return self._compute(candidate_id, fleet_type)
        except Exception as exc:  # noqa: BLE001
            self._logger.warning(
                "competency.compute_failed",
                candidate_id=candidate_id,
                error=str(exc),
            )
            return None

    def _compute(self, candidate_id: str, fleet_type: str | None) -> dict[str, Any] | None:
        candidate = self._candidates.get(candidate_id)
        if candidate is None:
            return None

        interview = self._interviews.latest_completed(candidate_id)
        if interview is None or not interview.answers:
            return None

        role_scope = self._resolve_role_scope(interview, candidate)
        weights = self._settings.calibration.dimension_weights_for(
            fleet_type or candidate.fleet_type
        )
        scored = self._scorer.score(
            interview.answers,
            role_scope,
            "all",
            "both",
            dimension_weights=weights,
        )
        if scored.questions_evaluated == 0:
            return None

        flags = self._detect_flags(scored.score_by_dimension)
        evidence = self._build_evidence(
            scored.score_by_dimension, flags, scored.evidence_by_dimension
        )
        status = self._resolve_status(scored.score_total)
        computed_at = self._now_provider().to_iso8601_string()

        result = {
            "score_total": scored.score_total,
            "score_by_dimension": scored.score_by_dimension,
            "flags": flags,
            "evidence_summary": evidence,
            "evidence_by_dimension": scored.evidence_by_dimension,
            "status": status,
            "questions_evaluated": scored.questions_evaluated,
            "interview_id": interview.interview_id,
            "computed_at": computed_at,
            "language": scored.language,
            "language_confidence": scored.language_confidence,
            "coverage": scored.coverage,
            "technical_depth_index": scored.technical_depth_index,
            "technical_depth_detail": scored.technical_depth_detail,
        }

        assessment = CompetencyAssessment(
            assessment_id=uuid.uuid4().hex,
            candidate_id=candidate_id,
            interview_id=interview.interview_id,
            computed_at=computed_at,
            score_total=scored.score_total,
            score_by_dimension=scored.score_by_dimension,
            flags=flags,
            evidence_summary=evidence,
            answer_scores=scored.answer_scores,
        )
        self._assessments.append(assessment)

        self._profiles.upsert(
            candidate_id,
            {
                "competency_score": int(round_half_up(scored.score_total)),
                "competency_status": status,
                "competency_computed_at": computed_at,
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
                    "assessment_id": assessment.assessment_id,
                    "score_total": scored.score_total,
                    "status": status,
                    "flag_count": len(flags),
                    "questions_evaluated": scored.questions_evaluated,
                    "technical_depth_index": scored.technical_depth_index,
                },
                created_at=computed_at,
            )
        )
        self._logger.info(
            "competency.computed",
            candidate_id=candidate_id,
            role_scope=role_scope,
            score_total=scored.score_total,
            status=status,
            flags=flags,
        )
        return result

    def _resolve_role_scope(self, interview: Interview, candidate: Candidate) -> str:
        if interview.position_code is not None:
            position = interview.position_code
        elif interview.template_position_code is not None:
            position = interview.template_position_code
        else:
            position = candidate.position_code or candidate.template_position_code or ""
        position = position.strip()
        return self._mapper.map(position) if position else "ALL"

    def _detect_flags(self, scores: Mapping[str, float]) -> list[str]:
        flags: list[str] = []
        for flag, threshold in self._settings.flag_thresholds.items():
            dimension = self._settings.flag_dimension_map.get(flag)
            if dimension is None:
                continue
            score = scores.get(dimension.value)
            if score is not None and score < threshold:
                flags.append(_code(flag))
        return flags

    def _build_evidence(
        self,
        scores: Mapping[str, float],
        flags: list[str],
        evidence_by_dimension: Mapping[str, list[str]],
    ) -> dict[str, Any]:
        critical = {_code(flag) for flag in self._settings.critical_flags}
        ranked = sorted(scores.items(), key=lambda item: item[1], reverse=True)

        strengths = [
            _labelled(STRENGTH_LABELS.get(code, f"Strong in {code}"), score)
            for code, score in ranked
            if score >= STRENGTH_MIN_SCORE
        ][:MAX_EVIDENCE_LINES]
        concerns = [
            _labelled(CONCERN_LABELS.get(code, f"Concern in {code}"), score)
            for code, score in reversed(ranked)
            if score < CONCERN_MAX_SCORE
        ][:MAX_EVIDENCE_LINES]
        why_lines = [
            {
                "flag": flag,
                "severity": "critical" if flag in critical else "warning",
                "reason": FLAG_REASONS.get(flag, f"Flag triggered: {flag}"),
            }
            for flag in flags
        ]

        bullets: list[str] = []
        for code, _score in ranked:
            keywords = evidence_by_dimension.get(code) or []
            if not keywords:
                continue
            bullets.append(f"{BULLET_LABELS.get(code, code)}: {', '.join(keywords[:3])}")
            if len(bullets) >= MAX_EVIDENCE_LINES:
                break

        return {
            "strengths": strengths,
            "concerns": concerns,
            "why_lines": why_lines,
            "evidence_bullets": bullets,
        }

    def _resolve_status(self, score_total: float) -> str:
        thresholds = self._settings.status_thresholds
        if score_total >= thresholds.get("strong", 70):
            return "strong"
        if score_total >= thresholds.get("moderate", 45):
            return "moderate"
        return "weak"


def _labelled(label: str, score: float) -> str:
    return f"{label} ({int(round_half_up(score))}%)"


def _code(value: CompetencyFlag | Dimension | str) -> str:
    return value.value if isinstance(value, (CompetencyFlag, Dimension)) else str(value)


__all__ = ["CompetencyEngine"]
