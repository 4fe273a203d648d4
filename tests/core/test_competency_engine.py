from __future__ import annotations

from datetime import datetime, timezone

import pendulum
import pytest

from crewscreening.core.competency import CompetencyEngine, CompetencyScorer
from crewscreening.core.competency.engine import FLAG_REASONS
from crewscreening.schemas import (
    Candidate,
    CompetencyQuestion,
    Interview,
    InterviewAnswer,
)
from crewscreening.schemas.config import CompetencySettings
from crewscreening.storage import InMemoryStore

NOW = pendulum.datetime(2025, 1, 15, 9, 30, tz="UTC")

DISCIPLINE_ANSWER = (
    "For instance, I ensured the checklist and every safety procedure were followed; "
    "as a result nobody was hurt."
)
TEAMWORK_ANSWER = "We help each other."


def build_settings(**overrides) -> CompetencySettings:
    raw = {
        "dimension_weights": {"DISCIPLINE": 0.2, "TEAMWORK": 0.2},
        "flag_thresholds": {
            "low_discipline": 40,
            "poor_teamwork": 40,
            "safety_mindset_missing": 30,
        },
        "flag_dimension_map": {
            "low_discipline": "DISCIPLINE",
            "poor_teamwork": "TEAMWORK",
            "safety_mindset_missing": "DISCIPLINE",
        },
        "critical_flags": ["safety_mindset_missing"],
        "keywords": {
            "DISCIPLINE": {"en": ["safety", "procedure", "checklist"]},
            "TEAMWORK": {"en": ["team", "crew", "support"]},
        },
        "markers": {
            "example": {"en": ["for instance"]},
            "outcome": {"en": ["as a result"]},
            "ownership": {"en": ["i ensured"]},
        },
        "calibration": {
            "fleet_profiles": {
                "tanker": {"dimension_weights": {"DISCIPLINE": 0.75, "TEAMWORK": 0.25}}
            }
        },
    }
    raw.update(overrides)
    return CompetencySettings.model_validate(raw)


def build_interview(answers, **kwargs) -> Interview:
    defaults = {
        "interview_id": "INT-1",
        "candidate_id": "C-1",
        "status": "completed",
        "completed_at": datetime(2025, 1, 10, tzinfo=timezone.utc),
        "answers": answers,
    }
    defaults.update(kwargs)
    return Interview(**defaults)


def default_answers() -> list[InterviewAnswer]:
    return [
        InterviewAnswer(competency="DISCIPLINE", answer_text=DISCIPLINE_ANSWER),
        InterviewAnswer(competency="TEAMWORK", answer_text=TEAMWORK_ANSWER),
    ]


def build_store(*, candidate: Candidate | None = None, interviews=None, questions=None) -> InMemoryStore:
    store = InMemoryStore()
    store.candidates.add(candidate or Candidate(candidate_id="C-1", position_code="Captain"))
    for interview in interviews if interviews is not None else [build_interview(default_answers())]:
        store.interviews.add(interview)
    for question in questions if questions is not None else [
        CompetencyQuestion(question_id="DISC-01", dimension="DISCIPLINE"),
        CompetencyQuestion(question_id="TEAM-01", dimension="TEAMWORK"),
    ]:
        store.questions.add(question)
    return store


def build_engine(store: InMemoryStore, settings: CompetencySettings | None = None, scorer=None):
    settings = settings or build_settings()
    return CompetencyEngine(
        candidates=store.candidates,
        interviews=store.interviews,
        scorer=scorer or CompetencyScorer(questions=store.questions, settings=settings),
        assessments=store.assessments,
        profiles=store.profiles,
        events=store.events,
        settings=settings,
        now_provider=lambda: NOW,
    )


def test_compute_scores_flags_and_explains():
    store = build_store()

    result = build_engine(store).compute("C-1")

    assert result is not None
    assert result["score_total"] == pytest.approx(50.0)
    assert result["score_by_dimension"] == {"DISCIPLINE": 80.0, "TEAMWORK": 20.0}
    assert result["status"] == "moderate"
    assert result["flags"] == ["poor_teamwork"]
    assert result["interview_id"] == "INT-1"
    assert result["questions_evaluated"] == 2
    assert result["computed_at"] == "2025-01-15T09:30:00Z"

    evidence = result["evidence_summary"]
    assert evidence["strengths"] == ["Strong procedural discipline and safety awareness (80%)"]
    assert evidence["concerns"] == ["Team collaboration skills below expectations (20%)"]
    assert evidence["why_lines"] == [
        {"flag": "poor_teamwork", "severity": "warning", "reason": FLAG_REASONS["poor_teamwork"]}
    ]
    assert evidence["evidence_bullets"] == ["Safety/Discipline: safety, procedure, checklist"]


def test_compute_uses_latest_interview_across_naive_and_aware_timestamps():
    store = build_store(
        interviews=[
            build_interview(default_answers()),
            build_interview(
                default_answers(),
                interview_id="INT-2",
                completed_at=datetime(2025, 1, 12, 8),
            ),
        ]
    )

    result = build_engine(store).compute("C-1")

    assert result is not None
    assert result["interview_id"] == "INT-2"


def test_compute_persists_profile_assessment_and_event():
    store = build_store()

    result = build_engine(store).compute("C-1")

    profile = store.profiles.get("C-1")
    assert profile is not None
    assert profile.competency_score == 50
    assert profile.competency_status == "moderate"
    assert profile.competency_computed_at == result["computed_at"]
    assert profile.detail["competency_engine"] == result

    [assessment] = store.assessments.list_for_candidate("C-1")
    assert assessment.score_total == result["score_total"]
    assert assessment.flags == ["poor_teamwork"]

    [event] = store.events.list_for_candidate("C-1")
    assert event.event_type == "competency_assessed"
    assert event.payload["assessment_id"] == assessment.assessment_id
    assert event.payload["flag_count"] == 1


def test_repeated_runs_append_new_assessments():
    store = build_store()
    engine = build_engine(store)

    first = engine.compute("C-1")
    second = engine.compute("C-1")

    assert first == second
    assessments = store.assessments.list_for_candidate("C-1")
    assert len(assessments) == 2
    assert assessments[0].assessment_id != assessments[1].assessment_id
    assert len(store.events.list_for_candidate("C-1")) == 2


def test_critical_flag_severity_and_weak_status():
    answers = [InterviewAnswer(competency="TEAMWORK", answer_text=TEAMWORK_ANSWER)]
    store = build_store(interviews=[build_interview(answers)])

    result = build_engine(store).compute("C-1")

    assert result["flags"] == ["low_discipline", "poor_teamwork", "safety_mindset_missing"]
    assert result["status"] == "weak"
    severities = {line["flag"]: line["severity"] for line in result["evidence_summary"]["why_lines"]}
    assert severities["safety_mindset_missing"] == "critical"
    assert severities["low_discipline"] == "warning"
    assert result["evidence_summary"]["strengths"] == []


def test_fleet_calibration_weights_apply():
    store = build_store(candidate=Candidate(candidate_id="C-1", fleet_type="Tanker"))

    result = build_engine(store).compute("C-1")

    assert result["score_total"] == pytest.approx(65.0)


def test_role_scope_follows_interview_then_candidate_position():
    questions = [
        CompetencyQuestion(question_id="DISC-01", dimension="DISCIPLINE"),
        CompetencyQuestion(question_id="TEAM-01", dimension="TEAMWORK"),
        CompetencyQuestion(question_id="LEAD-02", dimension="LEADERSHIP", role_scope="MASTER"),
    ]

    unknown = build_store(candidate=Candidate(candidate_id="C-1", position_code="Purser"), questions=questions)
    assert build_engine(unknown).compute("C-1")["questions_evaluated"] == 2

    captain = build_store(candidate=Candidate(candidate_id="C-1", position_code="Captain"), questions=questions)
    assert build_engine(captain).compute("C-1")["questions_evaluated"] == 3

    interview = build_interview(default_answers(), position_code="Purser")
    override = build_store(
        candidate=Candidate(candidate_id="C-1", position_code="Captain"),
        interviews=[interview],
        questions=questions,
    )
    assert build_engine(override).compute("C-1")["questions_evaluated"] == 2


@pytest.mark.parametrize(
    "interviews",
    [
        [],
        [build_interview(default_answers(), status="in_progress", completed_at=None)],
        [build_interview([])],
    ],
)
def test_no_completed_interview_yields_none(interviews):
    store = build_store(interviews=interviews)

    assert build_engine(store).compute("C-1") is None
    assert store.assessments.list_for_candidate("C-1") == []
    assert store.profiles.get("C-1") is None


def test_unknown_candidate_and_empty_question_bank_yield_none():
    store = build_store(questions=[])
    engine = build_engine(store)

    assert engine.compute("C-404") is None
    assert engine.compute("C-1") is None


def test_disabled_engine_returns_none():
    store = build_store()

    assert build_engine(store, build_settings(enabled=False)).compute("C-1") is None
    assert store.events.list_for_candidate("C-1") == []


class ExplodingScorer:
    def score(self, *args, **kwargs):
        raise RuntimeError("scorer offline")


def test_internal_failure_is_swallowed():
    store = build_store()

    assert build_engine(store, scorer=ExplodingScorer()).compute("C-1") is None
    assert store.profiles.get("C-1") is None
