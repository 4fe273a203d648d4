"""Additive per-answer rubric with language-aware keyword sets."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Mapping

from ...schemas import Dimension

MARKER_KINDS = ("example", "outcome", "ownership")
LONG_ANSWER_WORDS = 20


@dataclass(slots=True)
class RubricScore:
    score: int
    keyword_hits: int = 0
    matched_keywords: list[str] = field(default_factory=list)


class KeywordCatalog:
    """Select keyword and marker lists for a detected language.

    Single-word stopwords are dropped from every list; multi-word phrases are
    always kept.
    """

    def __init__(
        self,
        keywords: Mapping[Dimension, Mapping[str, list[str]]],
        markers: Mapping[str, Mapping[str, list[str]]],
        stopwords: Iterable[str] = (),
    ) -> None:
        self._keywords = keywords
        self._markers = markers
        self._stopwords = {word.lower() for word in stopwords}

    def dimension_keywords(self, dimension: Dimension, language: str) -> list[str]:
        by_language = self._keywords.get(dimension, {})
        if language == "unknown":
            languages = ["en", "tr"]
        elif language == "en":
            languages = ["en"]
        else:
            languages = [language, "en"]
        return self._filtered(by_language, languages)

    def markers(self, kind: str, language: str) -> list[str]:
        languages = ["en"]
        if language not in ("en", "unknown"):
            languages.append(language)
        return self._filtered(self._markers.get(kind, {}), languages)

    def _filtered(self, by_language: Mapping[str, list[str]], languages: list[str]) -> list[str]:
        seen: set[str] = set()
        selected: list[str] = []
        for language in languages:
            for keyword in by_language.get(language, []):
                if keyword in seen:
                    continue
                seen.add(keyword)
                if " " not in keyword and keyword.lower() in self._stopwords:
                    continue
                selected.append(keyword)
        return selected


class AnswerRubric:
    """Score one answer on a 0..max scale.

    Base 1 point (2 for answers of 20+ words), +1 when both an example and an
    outcome marker appear, +1 for two or more dimension keywords, +1 for an
    ownership marker.
    """

    def __init__(
        self,
        catalog: KeywordCatalog,
        *,
        max_score: int = 5,
        minimum_answer_length: int = 10,
    ) -> None:
        self._catalog = catalog
        self._max_score = max_score
        self._minimum_answer_length = minimum_answer_length

    @property
    def max_score(self) -> int:
        return self._max_score

    def score(self, text: str | None, dimension: Dimension, language: str) -> RubricScore:
        if text is None or len(text.strip()) < self._minimum_answer_length:
            return RubricScore(score=0)

        lowered = text.lower().strip()
        points = 2 if len(lowered.split()) >= LONG_ANSWER_WORDS else 1

        example_hits = _count_hits(lowered, self._catalog.markers("example", language))
        outcome_hits = _count_hits(lowered, self._catalog.markers("outcome", language))
        if example_hits >= 1 and outcome_hits >= 1:
            points += 1

        matched = [
            keyword
            for keyword in self._catalog.dimension_keywords(dimension, language)
            if keyword.lower() in lowered
        ]
        if len(matched) >= 2:
            points += 1

        if _count_hits(lowered, self._catalog.markers("ownership", language)) >= 1:
            points += 1

        return RubricScore(
            score=min(points, self._max_score),
            keyword_hits=len(matched),
            matched_keywords=matched,
        )


def _count_hits(text: str, terms: Iterable[str]) -> int:
    return sum(1 for term in terms if term.lower() in text)


__all__ = ["AnswerRubric", "KeywordCatalog", "RubricScore"]
