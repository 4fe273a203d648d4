"""Repository contracts consumed and produced by the scoring engines."""

from __future__ import annotations

from typing import Any, Mapping, Protocol, runtime_checkable

from ..schemas import (
    Candidate,
    CandidateContract,
    CompetencyAssessment,
    CompetencyQuestion,
    Interview,
    TrustEvent,
    TrustProfile,
)


@runtime_checkable
class CandidateRepository(Protocol):
    def get(self, candidate_id: str) -> Candidate | None:
        """Return the candidate or ``None`` when unknown."""


@runtime_checkable
class InterviewRepository(Protocol):
    def latest_completed(self, candidate_id: str) -> Interview | None:
        """Return the most recently completed interview for the candidate."""


@runtime_checkable
class QuestionRepository(Protocol):
    def list_active(
        self, role_scope: str, vessel_scope: str, operation_scope: str
    ) -> list[CompetencyQuestion]:
        """Return active questions applicable to the scope triple."""


@runtime_checkable
class ContractRepository(Protocol):
    def list_for_candidate(self, candidate_id: str) -> list[CandidateContract]:
        """Return contracts with a start date, ordered by start date."""


@runtime_checkable
class AssessmentLog(Protocol):
    """Append-only history of competency assessments."""

    def append(self, assessment: CompetencyAssessment) -> None:
        ...

    def list_for_candidate(self, candidate_id: str) -> list[CompetencyAssessment]:
        ...


@runtime_checkable
class TrustProfileStore(Protocol):
    """Last-write-wins rollup keyed by candidate."""

    def get(self, candidate_id: str) -> TrustProfile | None:
        ...

    def upsert(
        self,
        candidate_id: str,
        fields: Mapping[str, Any],
        *,
        detail: Mapping[str, Any] | None = None,
        created_at: str | None = None,
    ) -> TrustProfile:
        ...


@runtime_checkable
class TrustEventLog(Protocol):
    """Append-only audit trail."""

    def append(self, event: TrustEvent) -> None:
        ...

    def list_for_candidate(self, candidate_id: str) -> list[TrustEvent]:
        ...


from .memory import (  # noqa: E402
    Dataset,
    InMemoryAssessmentLog,
    InMemoryCandidateRepository,
    InMemoryContractRepository,
    InMemoryInterviewRepository,
    InMemoryQuestionRepository,
    InMemoryStore,
    InMemoryTrustEventLog,
    InMemoryTrustProfileStore,
)
from .jsonl import JsonlAssessmentLog, JsonlTrustEventLog  # noqa: E402

__all__ = [
    "AssessmentLog",
    "CandidateRepository",
    "ContractRepository",
    "Dataset",
    "InMemoryAssessmentLog",
    "InMemoryCandidateRepository",
    "InMemoryContractRepository",
    "InMemoryInterviewRepository",
    "InMemoryQuestionRepository",
    "InMemoryStore",
    "InMemoryTrustEventLog",
    "InMemoryTrustProfileStore",
    "InterviewRepository",
    "JsonlAssessmentLog",
    "JsonlTrustEventLog",
    "QuestionRepository",
    "TrustEventLog",
    "TrustProfileStore",
]
