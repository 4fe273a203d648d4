from __future__ import annotations

from datetime import date, datetime

import pendulum
from pydantic import BaseModel, ConfigDict, Field, field_validator


class Candidate(BaseModel):
    """Crew candidate profile fields used by the scoring engines."""

    candidate_id: str
    name: str | None = None
    position_code: str | None = None
    template_position_code: str | None = None
    fleet_type: str | None = None

    model_config = ConfigDict(extra="forbid")


class InterviewAnswer(BaseModel):
    """Free-text answer tagged with the competency it was given for."""

    competency: str
    answer_text: str | None = None

    model_config = ConfigDict(extra="forbid", frozen=True)


class Interview(BaseModel):
    """Interview session with its collected answers."""

    interview_id: str
    candidate_id: str
    status: str = "pending"
    completed_at: datetime | None = None
    position_code: str | None = None
    template_position_code: str | None = None
    answers: list[InterviewAnswer] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")

    @field_validator("completed_at")
    @classmethod
    def _coerce_completed_at(cls, value: datetime | None) -> pendulum.DateTime | None:
        """Naive timestamps are treated as UTC."""
        if value is None:
            return None
        return pendulum.instance(value, tz="UTC")

    @property
    def is_completed(self) -> bool:
        return self.status == "completed" and self.completed_at is not None


class CandidateContract(BaseModel):
    """Single employment stint on a vessel."""

    contract_id: str
    candidate_id: str
    start_date: date
    end_date: date | None = None
    vessel_type: str | None = None
    rank_code: str | None = None
    company_name: str | None = None

    model_config = ConfigDict(extra="forbid")

    def period_start(self) -> pendulum.Date:
        return _to_pendulum(self.start_date)

    def period_end(self, now: pendulum.DateTime) -> pendulum.Date:
        """Return the end date, treating an open contract as running until ``now``."""
        if self.end_date is None:
            return now.date()
        return _to_pendulum(self.end_date)

    def duration_days(self, now: pendulum.DateTime) -> int:
        return self.period_start().diff(self.period_end(now)).in_days()


def _to_pendulum(value: date) -> pendulum.Date:
    return pendulum.date(value.year, value.month, value.day)
