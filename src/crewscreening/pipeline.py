"""Assessment pipeline assembly and execution."""

from __future__ import annotations

import json
from datetime import date, datetime
from pathlib import Path
from typing import Any, Iterable, Sequence

import pendulum
import structlog
from pydantic import BaseModel, ValidationError

from . import __version__
from .config import load_default_questions
from .core.competency import CompetencyEngine
from .core.stability import StabilityRiskEngine
from .schemas import Candidate, CandidateContract, CompetencyQuestion, Interview
from .storage import Dataset, InMemoryStore

ENGINE_NAMES = ("competency", "stability")

_SECTIONS: dict[str, type[BaseModel]] = {
    "candidates": Candidate,
    "interviews": Interview,
    "questions": CompetencyQuestion,
    "contracts": CandidateContract,
}


class DatasetLoadError(ValueError):
    """Raised when dataset loading encounters invalid records."""

    def __init__(self, errors: list[str], partial: Dataset):
        super().__init__("Dataset loading failed")
        self.errors = errors
        self.partial = partial

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"Dataset loading failed: {self.errors}"


class DatasetLoader:
    """Load candidates, interviews, questions and contracts from one JSON document.

    Records that fail validation are reported by section and index; the valid
    remainder is attached to the raised ``DatasetLoadError``.
    """

    def load(self, path: Path) -> Dataset:
        with path.open("r", encoding="utf-8") as handle:
            try:
                raw = json.load(handle)
            except json.JSONDecodeError as exc:
                raise ValueError(f"Invalid dataset JSON: {exc}") from exc
        if not isinstance(raw, dict):
            raise ValueError("Dataset JSON must be an object")

        if raw.get("questions") is None:
            raw = {**raw, "questions": load_default_questions()}

        dataset = Dataset()
        errors: list[str] = []
        for section, model in _SECTIONS.items():
            records = raw.get(section) or []
            if not isinstance(records, list):
                errors.append(f"{section}: expected a list")
                continue
            target = getattr(dataset, section)
            for idx, record in enumerate(records):
                try:
                    target.append(model.model_validate(record))
                except ValidationError as exc:
                    errors.append(f"{section}[{idx}]: {exc.errors()[0]['msg']}")
        if errors:
            raise DatasetLoadError(errors, dataset)
        return dataset


class OutputWriter:
    """Persist assessment outcomes."""

    def write(self, path: Path, payload: dict | list[dict]) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(
            json.dumps(payload, ensure_ascii=False, indent=2, default=_json_default),
            encoding="utf-8",
        )


class AuditLogger:
    """Append-only audit logger writing JSON lines."""

    def __init__(self, path: Path):
        self._path = path
        self._path.parent.mkdir(parents=True, exist_ok=True)

    def append(self, record: dict) -> None:
        with self._path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(record, ensure_ascii=False, default=_json_default))
            handle.write("\n")


class AssessmentPipeline:
    """End-to-end competency and stability scoring over a dataset file."""

    def __init__(
        self,
        *,
        store: InMemoryStore,
        competency_engine: CompetencyEngine,
        stability_engine: StabilityRiskEngine,
        loader: DatasetLoader | None = None,
        writer: OutputWriter | None = None,
    ) -> None:
        self._store = store
        self._competency = competency_engine
        self._stability = stability_engine
        self._loader = loader or DatasetLoader()
        self._writer = writer or OutputWriter()
        self._logger = structlog.get_logger(__name__)

    def run(
        self,
        *,
        dataset_path: Path,
        output_path: Path,
        engines: Sequence[str] = ENGINE_NAMES,
        fleet_type: str | None = None,
        audit_logger: AuditLogger | None = None,
    ) -> list[dict]:
        selected = _select_engines(engines)
        load_errors: list[str] = []
        try:
            dataset = self._loader.load(dataset_path)
        except DatasetLoadError as exc:
            dataset = exc.partial
            load_errors.extend(exc.errors)
            self._logger.warning("dataset.partial_load", errors=exc.errors)

        self._store.load(dataset)

        results: list[dict] = []
        for candidate in dataset.candidates:
            entry: dict[str, Any] = {"candidate_id": candidate.candidate_id}
            if "competency" in selected:
                entry["competency"] = self._competency.compute(
                    candidate.candidate_id, fleet_type=fleet_type
                )
            if "stability" in selected:
                entry["stability"] = self._stability.compute(
                    candidate.candidate_id, fleet_type=fleet_type
                )
            profile = self._store.profiles.get(candidate.candidate_id)
            entry["trust_profile"] = (
                profile.model_dump(mode="json") if profile is not None else None
            )

            serialized = json.loads(json.dumps(entry, default=_json_default, ensure_ascii=False))
            results.append(serialized)

            summary = _summary(serialized)
            if audit_logger:
                audit_logger.append(summary)
            self._logger.info("assessment.result", **summary)

        metadata = {
            "candidate_count": len(dataset.candidates),
            "errors": load_errors,
            "timestamp": pendulum.now().to_iso8601_string(),
            "app_version": __version__,
            "engines": list(selected),
        }
        self._writer.write(output_path, {"metadata": metadata, "results": results})
        return results


def _select_engines(engines: Iterable[str]) -> tuple[str, ...]:
    requested = {name.strip().lower() for name in engines}
    if "all" in requested:
        return ENGINE_NAMES
    unknown = requested - set(ENGINE_NAMES)
    if unknown:
        raise ValueError(f"Unsupported engine(s): {sorted(unknown)}")
    return tuple(name for name in ENGINE_NAMES if name in requested)


def _summary(entry: dict[str, Any]) -> dict[str, Any]:
    competency = entry.get("competency") or {}
    stability = entry.get("stability") or {}
    return {
        "candidate_id": entry["candidate_id"],
        "competency_score": competency.get("score_total"),
        "competency_status": competency.get("status"),
        "competency_flags": competency.get("flags", []),
        "stability_index": stability.get("stability_index"),
        "risk_score": stability.get("risk_score"),
        "risk_tier": stability.get("risk_tier"),
        "stability_flags": stability.get("flags", []),
    }


def _json_default(value: Any) -> Any:
    if isinstance(value, pendulum.DateTime):
        return value.to_iso8601_string()
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


__all__ = [
    "AssessmentPipeline",
    "AuditLogger",
    "DatasetLoadError",
    "DatasetLoader",
    "ENGINE_NAMES",
    "OutputWriter",
]
