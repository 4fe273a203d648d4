"""Rank-specific technical vocabulary bonus for senior officers."""

from __future__ import annotations

from typing import Any

from ...schemas.config import TechnicalDepthSettings
from ..rounding import round_half_up


class TechnicalDepthAnalyzer:
    """Measure how much rank-specific technical vocabulary an answer set uses.

    The index blends keyword density, category diversity and phrase
    specificity. When it clears ``depth_boost_min_index`` it also yields a
    floor, bonus and cap for the TECH_PRACTICAL dimension.
    """

    def __init__(self, settings: TechnicalDepthSettings | None = None) -> None:
        self._settings = settings or TechnicalDepthSettings()

    @property
    def settings(self) -> TechnicalDepthSettings:
        return self._settings

    def analyze(self, text: str, role_scope: str) -> dict[str, Any] | None:
        settings = self._settings
        if not settings.rank_packs or role_scope in settings.excluded_role_scopes:
            return None
        pack = settings.rank_packs.get(role_scope)
        if not pack:
            return None

        lowered = text.lower()
        phrase_weight = settings.phrase_weight

        matched_by_category: dict[str, list[str]] = {}
        hits_by_category: dict[str, int] = {}
        total_signals = 0
        keyword_count = 0
        raw_hits = 0
        phrase_hits = 0

        for category, keywords in pack.items():
            matched: list[str] = []
            for keyword in keywords:
                is_phrase = " " in keyword
                weight = phrase_weight if is_phrase else 1
                keyword_count += 1
                if keyword.lower() in lowered:
                    matched.append(keyword)
                    total_signals += weight
                    raw_hits += 1
                    if is_phrase:
                        phrase_hits += 1
            matched_by_category[category] = matched
            hits_by_category[category] = len(matched)

        categories = list(pack)
        primary_hits = hits_by_category[categories[0]]
        secondary_hits = hits_by_category[categories[1]] if len(categories) > 1 else 0
        tertiary_hits = hits_by_category[categories[2]] if len(categories) > 2 else 0
        categories_hit = sum(1 for hits in hits_by_category.values() if hits > 0)

        weights = settings.depth_index_weights
        density = min(100.0, total_signals / keyword_count * 100) if keyword_count else 0.0
        diversity = categories_hit / len(categories) * 100
        specificity = phrase_hits / raw_hits * 100 if raw_hits else 0.0
        index = round_half_up(
            density * weights.get("keyword_density", 0.40)
            + diversity * weights.get("category_diversity", 0.35)
            + specificity * weights.get("specificity", 0.25),
            1,
        )

        floor = 0.0
        bonus = 0.0
        cap = 100.0
        if index >= settings.depth_boost_min_index:
            if primary_hits >= settings.min_signals_for_bonus:
                floor = float(settings.primary_bonus_score)
            secondary_min, tertiary_min = settings.secondary_bonus_rule
            if secondary_hits >= secondary_min and tertiary_hits >= tertiary_min:
                bonus = float(settings.secondary_bonus_points)
            if total_signals >= settings.total_signals_for_cap:
                cap = float(settings.cap_score)
            for tier_min in sorted(settings.depth_boost_cap_tiers, reverse=True):
                if index >= tier_min:
                    cap = min(cap, float(settings.depth_boost_cap_tiers[tier_min]))
                    break

        return {
            "technical_depth_index": index,
            "tech_practical_floor": floor,
            "bonus_points": bonus,
            "tech_practical_cap": cap,
            "matched_by_category": matched_by_category,
            "total_signals": total_signals,
            "primary_hits": primary_hits,
            "categories_hit": categories_hit,
        }


__all__ = ["TechnicalDepthAnalyzer"]
