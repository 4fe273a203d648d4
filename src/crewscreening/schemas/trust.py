from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class TrustProfile(BaseModel):
    """Per-candidate rollup of the latest engine outputs."""

    candidate_id: str
    cri_score: float = 0
    confidence_level: str = "low"
    computed_at: str | None = None
    competency_score: int | None = None
    competency_status: str | None = None
    competency_computed_at: str | None = None
    stability_index: float | None = None
    risk_score: float | None = None
    risk_tier: str | None = None
    detail: dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(extra="forbid")


class TrustEvent(BaseModel):
    """Audit trail entry emitted after each computation."""

    event_id: str
    candidate_id: str
    event_type: str
    payload: dict[str, Any] = Field(default_factory=dict)
    created_at: str

    model_config = ConfigDict(extra="forbid", frozen=True)
