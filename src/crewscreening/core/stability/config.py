"""Layered resolver for stability thresholds with per-fleet overrides."""

from __future__ import annotations

import copy
from typing import Any, Mapping

DEFAULT_SHORT_CONTRACT_MONTHS = 6.0

DEFAULT_FACTOR_WEIGHTS: dict[str, float] = {
    "short_ratio": 0.20,
    "gap_months": 0.18,
    "overlap_count": 0.18,
    "rank_anomaly": 0.12,
    "frequent_switch": 0.08,
    "stability_inverse": 0.09,
    "vessel_diversity": 0.05,
    "temporal_recency": 0.10,
}

DEFAULT_RISK_TIER_THRESHOLDS: dict[str, float] = {
    "critical": 0.75,
    "high": 0.50,
    "medium": 0.25,
}

DEFAULT_TEMPORAL_DECAY: dict[str, float] = {
    "recent_months": 36,
    "old_months": 60,
    "recent_weight": 1.5,
    "old_weight": 0.5,
    "default_weight": 1.0,
}

DEFAULT_VESSEL_DIVERSITY: dict[str, float] = {
    "min_types_for_bonus": 2,
    "max_types_for_bonus": 5,
    "min_tenure_months": 6,
    "max_score": 1.0,
}


class StabilityConfig:
    """Resolve stability settings from a base mapping and an optional fleet profile.

    Lookups check the fleet profile first, then the base mapping, then the
    default supplied by the caller. Section accessors merge fleet values over
    base values field by field. Instances never change after construction;
    ``with_fleet`` builds a new one.
    """

    def __init__(
        self,
        base: Mapping[str, Any] | None = None,
        *,
        fleet_profiles: Mapping[str, Mapping[str, Any]] | None = None,
        fleet_type: str | None = None,
    ) -> None:
        self._base: dict[str, Any] = copy.deepcopy(dict(base or {}))
        self._fleet_profiles: dict[str, dict[str, Any]] = {
            str(name).lower(): copy.deepcopy(dict(profile or {}))
            for name, profile in (fleet_profiles or {}).items()
        }
        self._fleet_type = fleet_type
        key = fleet_type.strip().lower() if fleet_type else None
        self._fleet: dict[str, Any] = self._fleet_profiles.get(key, {}) if key else {}

    @classmethod
    def from_settings(cls, settings: Any, fleet_type: str | None = None) -> "StabilityConfig":
        """Build from ``StabilitySettings`` or a plain mapping with ``fleet_profiles``."""
        if hasattr(settings, "base_values"):
            return cls(
                settings.base_values(),
                fleet_profiles=settings.fleet_profiles,
                fleet_type=fleet_type,
            )
        raw = dict(settings or {})
        profiles = raw.pop("fleet_profiles", {})
        raw.pop("enabled", None)
        return cls(raw, fleet_profiles=profiles, fleet_type=fleet_type)

    @property
    def fleet_type(self) -> str | None:
        return self._fleet_type

    def with_fleet(self, fleet_type: str | None) -> "StabilityConfig":
        return StabilityConfig(
            self._base,
            fleet_profiles=self._fleet_profiles,
            fleet_type=fleet_type,
        )

    def get(self, key: str, default: Any = None) -> Any:
        if key in self._fleet:
            return self._fleet[key]
        if key in self._base:
            return self._base[key]
        return default

    def get_nested(self, section: str, key: str, default: Any = None) -> Any:
        fleet_section = self._fleet.get(section)
        if isinstance(fleet_section, Mapping) and key in fleet_section:
            return fleet_section[key]
        base_section = self._base.get(section)
        if isinstance(base_section, Mapping) and key in base_section:
            return base_section[key]
        return default

    def get_factor_weights(self) -> dict[str, float]:
        return self._merged_section("factor_weights", DEFAULT_FACTOR_WEIGHTS)

    def get_risk_tier_thresholds(self) -> dict[str, float]:
        return self._merged_section("risk_tier_thresholds", DEFAULT_RISK_TIER_THRESHOLDS)

    def get_temporal_decay(self) -> dict[str, float]:
        return self._merged_section("temporal_decay", DEFAULT_TEMPORAL_DECAY)

    def get_vessel_diversity(self) -> dict[str, float]:
        return self._merged_section("vessel_diversity", DEFAULT_VESSEL_DIVERSITY)

    def get_short_contract_months(self, rank: str | None = None) -> float:
        """Short-contract threshold for a canonical rank code.

        Order: fleet rank map, base rank map, fleet global value, base global
        value, then the built-in default.
        """
        if rank:
            for source in (self._fleet, self._base):
                by_rank = source.get("short_contract_months_by_rank")
                if isinstance(by_rank, Mapping) and rank in by_rank:
                    return float(by_rank[rank])
        return float(self.get("short_contract_months", DEFAULT_SHORT_CONTRACT_MONTHS))

    def _merged_section(self, section: str, defaults: Mapping[str, float]) -> dict[str, float]:
        merged = {key: float(value) for key, value in defaults.items()}
        for source in (self._base, self._fleet):
            values = source.get(section)
            if isinstance(values, Mapping):
                merged.update({str(k): float(v) for k, v in values.items()})
        return merged


__all__ = ["StabilityConfig"]
