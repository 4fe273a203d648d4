"""Append-only JSON-lines logs for assessments and trust events."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterator

from ..schemas import CompetencyAssessment, TrustEvent


class _JsonlFile:
    def __init__(self, path: Path):
        self._path = Path(path)
        self._path.parent.mkdir(parents=True, exist_ok=True)

    def _write(self, record: dict[str, Any]) -> None:
        with self._path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(record, ensure_ascii=False))
            handle.write("\n")

    def _read(self) -> Iterator[dict[str, Any]]:
        if not self._path.exists():
            return
        with self._path.open("r", encoding="utf-8") as handle:
            for line in handle:
                raw = line.strip()
                if raw:
                    yield json.loads(raw)


class JsonlAssessmentLog(_JsonlFile):
    """File-backed ``AssessmentLog``; lines are only ever appended."""

    def append(self, assessment: CompetencyAssessment) -> None:
        self._write(assessment.model_dump(mode="json"))

    def list_for_candidate(self, candidate_id: str) -> list[CompetencyAssessment]:
        return [
            CompetencyAssessment.model_validate(record)
            for record in self._read()
            if record.get("candidate_id") == candidate_id
        ]


class JsonlTrustEventLog(_JsonlFile):
    """File-backed ``TrustEventLog``."""

    def append(self, event: TrustEvent) -> None:
        self._write(event.model_dump(mode="json"))

    def list_for_candidate(self, candidate_id: str) -> list[TrustEvent]:
        return [
            TrustEvent.model_validate(record)
            for record in self._read()
            if record.get("candidate_id") == candidate_id
        ]


__all__ = ["JsonlAssessmentLog", "JsonlTrustEventLog"]
