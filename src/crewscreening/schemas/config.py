"""Pydantic configuration schema for packaged defaults and CLI YAML input."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .competency import CompetencyFlag, Dimension


class TechnicalDepthSettings(BaseModel):
    rank_packs: dict[str, dict[str, list[str]]] = Field(default_factory=dict)
    min_signals_for_bonus: int = 3
    secondary_bonus_rule: tuple[int, int] = (2, 1)
    total_signals_for_cap: int = 5
    primary_bonus_score: float = 70
    secondary_bonus_points: float = 10
    cap_score: float = 85
    phrase_weight: int = 2
    excluded_role_scopes: list[str] = Field(
        default_factory=lambda: ["AB", "OILER", "COOK", "ALL"]
    )
    depth_index_weights: dict[str, float] = Field(
        default_factory=lambda: {
            "keyword_density": 0.40,
            "category_diversity": 0.35,
            "specificity": 0.25,
        }
    )
    depth_boost_min_index: float = 40
    depth_boost_cap_tiers: dict[int, float] = Field(
        default_factory=lambda: {75: 85, 60: 75, 40: 60}
    )
    max_total_score_uplift: float = 15


class FleetCalibration(BaseModel):
    dimension_weights: dict[Dimension, float] = Field(default_factory=dict)


class CalibrationSettings(BaseModel):
    fleet_profiles: dict[str, FleetCalibration] = Field(default_factory=dict)

    def dimension_weights_for(self, fleet_type: str | None) -> dict[Dimension, float] | None:
        """Return fleet-calibrated weights, or ``None`` when the fleet has none."""
        if not fleet_type:
            return None
        profile = self.fleet_profiles.get(fleet_type.strip().lower())
        if profile is None or not profile.dimension_weights:
            return None
        return dict(profile.dimension_weights)


class CompetencySettings(BaseModel):
    enabled: bool = True
    dimension_weights: dict[Dimension, float] = Field(default_factory=dict)
    flag_thresholds: dict[CompetencyFlag, float] = Field(default_factory=dict)
    flag_dimension_map: dict[CompetencyFlag, Dimension] = Field(default_factory=dict)
    critical_flags: list[CompetencyFlag] = Field(default_factory=list)
    max_score_per_question: int = 5
    minimum_answer_length: int = 10
    status_thresholds: dict[str, float] = Field(
        default_factory=lambda: {"strong": 70, "moderate": 45}
    )
    keywords: dict[Dimension, dict[str, list[str]]] = Field(default_factory=dict)
    markers: dict[str, dict[str, list[str]]] = Field(default_factory=dict)
    tr_stopwords: list[str] = Field(default_factory=list)
    technical_depth: TechnicalDepthSettings = Field(default_factory=TechnicalDepthSettings)
    calibration: CalibrationSettings = Field(default_factory=CalibrationSettings)


class StabilitySettings(BaseModel):
    """Stability thresholds are kept as a free-form mapping for ``StabilityConfig``."""

    enabled: bool = True
    fleet_profiles: dict[str, dict[str, Any]] = Field(default_factory=dict)

    model_config = ConfigDict(extra="allow")

    def base_values(self) -> dict[str, Any]:
        return dict(self.model_extra or {})


class PipelineSettings(BaseModel):
    engines: list[str] = Field(default_factory=lambda: ["competency", "stability"])
    fleet_type: str | None = None


class AppConfig(BaseModel):
    competency: CompetencySettings = Field(default_factory=CompetencySettings)
    stability: StabilitySettings = Field(default_factory=StabilitySettings)
    pipeline: PipelineSettings = Field(default_factory=PipelineSettings)

    def to_settings(self) -> dict[str, Any]:
        return self.model_dump(mode="python", exclude_none=True)


def load_config(raw: Any) -> AppConfig:
    if not isinstance(raw, dict):
        raise ValidationError.from_exception_data(
            "AppConfig",
            [{"type": "dict_type", "loc": ("config",), "input": raw}],
        )
    return AppConfig.model_validate(raw)
