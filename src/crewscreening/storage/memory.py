"""In-memory repositories backing the pipeline and the tests."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping

from ..schemas import (
    Candidate,
    CandidateContract,
    CompetencyAssessment,
    CompetencyQuestion,
    Interview,
    TrustEvent,
    TrustProfile,
)


@dataclass
class Dataset:
    """Input records for one scoring run."""

    candidates: list[Candidate] = field(default_factory=list)
    interviews: list[Interview] = field(default_factory=list)
    questions: list[CompetencyQuestion] = field(default_factory=list)
    contracts: list[CandidateContract] = field(default_factory=list)


class InMemoryCandidateRepository:
    def __init__(self, candidates: Iterable[Candidate] = ()) -> None:
        self._candidates = {candidate.candidate_id: candidate for candidate in candidates}

    def add(self, candidate: Candidate) -> None:
        self._candidates[candidate.candidate_id] = candidate

    def get(self, candidate_id: str) -> Candidate | None:
        return self._candidates.get(candidate_id)

    def list_all(self) -> list[Candidate]:
        return list(self._candidates.values())


class InMemoryInterviewRepository:
    def __init__(self, interviews: Iterable[Interview] = ()) -> None:
        self._interviews = list(interviews)

    def add(self, interview: Interview) -> None:
        self._interviews.append(interview)

    def latest_completed(self, candidate_id: str) -> Interview | None:
        completed = [
            interview
            for interview in self._interviews
            if interview.candidate_id == candidate_id and interview.is_completed
        ]
        if not completed:
            return None
        return max(completed, key=lambda interview: interview.completed_at)


class InMemoryQuestionRepository:
    def __init__(self, questions: Iterable[CompetencyQuestion] = ()) -> None:
        self._questions = list(questions)

    def add(self, question: CompetencyQuestion) -> None:
        self._questions.append(question)

    def __len__(self) -> int:
        return len(self._questions)

    def list_active(
        self, role_scope: str, vessel_scope: str, operation_scope: str
    ) -> list[CompetencyQuestion]:
        return [
            question
            for question in self._questions
            if question.is_active
            and question.applies_to(role_scope, vessel_scope, operation_scope)
        ]


class InMemoryContractRepository:
    def __init__(self, contracts: Iterable[CandidateContract] = ()) -> None:
        self._contracts = list(contracts)

    def add(self, contract: CandidateContract) -> None:
        self._contracts.append(contract)

    def list_for_candidate(self, candidate_id: str) -> list[CandidateContract]:
        owned = [c for c in self._contracts if c.candidate_id == candidate_id]
        return sorted(owned, key=lambda contract: contract.start_date)


class InMemoryAssessmentLog:
    """Append-only; records are never replaced or removed."""

    def __init__(self) -> None:
        self._records: list[CompetencyAssessment] = []

    def append(self, assessment: CompetencyAssessment) -> None:
        self._records.append(assessment)

    def list_for_candidate(self, candidate_id: str) -> list[CompetencyAssessment]:
        return [record for record in self._records if record.candidate_id == candidate_id]


class InMemoryTrustEventLog:
    def __init__(self) -> None:
        self._events: list[TrustEvent] = []

    def append(self, event: TrustEvent) -> None:
        self._events.append(event)

    def list_for_candidate(self, candidate_id: str) -> list[TrustEvent]:
        return [event for event in self._events if event.candidate_id == candidate_id]


class InMemoryTrustProfileStore:
    """Profiles are created lazily and updated in place on every upsert."""

    def __init__(self) -> None:
        self._profiles: dict[str, TrustProfile] = {}

    def get(self, candidate_id: str) -> TrustProfile | None:
        return self._profiles.get(candidate_id)

    def upsert(
        self,
        candidate_id: str,
        fields: Mapping[str, Any],
        *,
        detail: Mapping[str, Any] | None = None,
        created_at: str | None = None,
    ) -> TrustProfile:
        current = self._profiles.get(candidate_id)
        if current is None:
            current = TrustProfile(
                candidate_id=candidate_id,
                cri_score=0,
                confidence_level="low",
                computed_at=created_at,
            )
        merged_detail = {**current.detail, **dict(detail or {})}
        updated = current.model_copy(update={**dict(fields), "detail": merged_detail})
        self._profiles[candidate_id] = updated
        return updated


class InMemoryStore:
    """Bundle of in-memory repositories sharing one dataset."""

    def __init__(self, dataset: Dataset | None = None) -> None:
        self.candidates = InMemoryCandidateRepository()
        self.interviews = InMemoryInterviewRepository()
        self.questions = InMemoryQuestionRepository()
        self.contracts = InMemoryContractRepository()
        self.assessments = InMemoryAssessmentLog()
        self.profiles = InMemoryTrustProfileStore()
        self.events = InMemoryTrustEventLog()
        if dataset is not None:
            self.load(dataset)

    def load(self, dataset: Dataset) -> None:
        for candidate in dataset.candidates:
            self.candidates.add(candidate)
        for interview in dataset.interviews:
            self.interviews.add(interview)
        for question in dataset.questions:
            self.questions.add(question)
        for contract in dataset.contracts:
            self.contracts.add(contract)


__all__ = [
    "Dataset",
    "InMemoryAssessmentLog",
    "InMemoryCandidateRepository",
    "InMemoryContractRepository",
    "InMemoryInterviewRepository",
    "InMemoryQuestionRepository",
    "InMemoryStore",
    "InMemoryTrustEventLog",
    "InMemoryTrustProfileStore",
]
