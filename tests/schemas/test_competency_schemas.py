from __future__ import annotations

from datetime import date

import pendulum
import pytest
from pydantic import ValidationError

from crewscreening.schemas import (
    CandidateContract,
    CompetencyQuestion,
    Dimension,
    Interview,
    resolve_dimension,
)


@pytest.mark.parametrize(
    ("code", "expected"),
    [
        ("COMMUNICATION", Dimension.COMMS),
        ("accountability", Dimension.DISCIPLINE),
        ("Integrity", Dimension.DISCIPLINE),
        ("STRESS_RESILIENCE", Dimension.STRESS),
        ("ADAPTABILITY", Dimension.TECH_PRACTICAL),
        ("ROLE_COMPETENCE", Dimension.TECH_PRACTICAL),
        ("LEARNING_AGILITY", Dimension.LEADERSHIP),
        ("TEAMWORK", Dimension.TEAMWORK),
        (" comms ", Dimension.COMMS),
        ("TECH_PRACTICAL", Dimension.TECH_PRACTICAL),
    ],
)
def test_legacy_and_current_codes_resolve(code: str, expected: Dimension):
    assert resolve_dimension(code) is expected


@pytest.mark.parametrize("code", [None, "", "CREATIVITY"])
def test_unknown_codes_resolve_to_none(code):
    assert resolve_dimension(code) is None


def test_question_scope_matching():
    generic = CompetencyQuestion(question_id="Q-1", dimension="DISCIPLINE")
    tanker_master = CompetencyQuestion(
        question_id="Q-2",
        dimension="DISCIPLINE",
        role_scope="MASTER",
        vessel_scope="tanker",
        operation_scope="sea",
    )

    assert generic.applies_to("OOW", "bulk", "river")
    assert tanker_master.applies_to("MASTER", "tanker", "sea")
    assert not tanker_master.applies_to("ALL", "all", "both")
    assert not tanker_master.applies_to("MASTER", "bulk", "sea")


def test_question_difficulty_is_bounded():
    with pytest.raises(ValidationError):
        CompetencyQuestion(question_id="Q-1", dimension="DISCIPLINE", difficulty=4)


def test_unknown_dimension_is_rejected():
    with pytest.raises(ValidationError):
        CompetencyQuestion(question_id="Q-1", dimension="CREATIVITY")


def test_interview_completion_requires_timestamp():
    assert not Interview(interview_id="I-1", candidate_id="C-1", status="completed").is_completed
    assert Interview(
        interview_id="I-1",
        candidate_id="C-1",
        status="completed",
        completed_at="2025-01-10T08:00:00Z",
    ).is_completed


def test_open_contract_runs_until_now():
    contract = CandidateContract(
        contract_id="K-1", candidate_id="C-1", start_date=date(2024, 12, 1)
    )
    now = pendulum.datetime(2025, 1, 1, tz="UTC")

    assert contract.period_end(now) == pendulum.date(2025, 1, 1)
    assert contract.duration_days(now) == 31
