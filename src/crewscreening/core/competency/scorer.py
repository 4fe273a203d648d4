"""Rubric-based competency scoring over a set of interview answers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping

from ...schemas import Dimension, InterviewAnswer, resolve_dimension
from ...schemas.config import CompetencySettings
from ...storage import QuestionRepository
from ..rounding import round_half_up
from .language import detect_language
from .rubric import AnswerRubric, KeywordCatalog
from .technical_depth import TechnicalDepthAnalyzer

DEFAULT_DIMENSION_WEIGHT = 0.15
# TECH_PRACTICAL value assumed when depth applies but no question scored it.
DEFAULT_TECH_PRACTICAL = 40.0
EVIDENCE_PER_DIMENSION = 3


@dataclass(slots=True)
class CompetencyScore:
    score_total: float = 0.0
    score_before_depth: float = 0.0
    depth_uplift: float = 0.0
    score_by_dimension: dict[str, float] = field(default_factory=dict)
    answer_scores: list[dict[str, Any]] = field(default_factory=list)
    questions_evaluated: int = 0
    language: str = "unknown"
    language_confidence: float = 0.0
    coverage: float = 0.0
    evidence_by_dimension: dict[str, list[str]] = field(default_factory=dict)
    technical_depth_index: float | None = None
    technical_depth_detail: dict[str, Any] | None = None


class CompetencyScorer:
    """Score answers against the questions applicable to a role/vessel/operation scope."""

    def __init__(
        self,
        *,
        questions: QuestionRepository,
        settings: CompetencySettings | None = None,
        depth_analyzer: TechnicalDepthAnalyzer | None = None,
    ) -> None:
        self._questions = questions
        self._settings = settings or CompetencySettings()
        catalog = KeywordCatalog(
            self._settings.keywords,
            self._settings.markers,
            self._settings.tr_stopwords,
        )
        self._catalog = catalog
        self._rubric = AnswerRubric(
            catalog,
            max_score=self._settings.max_score_per_question,
            minimum_answer_length=self._settings.minimum_answer_length,
        )
        self._depth = depth_analyzer or TechnicalDepthAnalyzer(self._settings.technical_depth)

    def score(
        self,
        answers: Iterable[InterviewAnswer],
        role_scope: str = "ALL",
        vessel_scope: str = "all",
        operation_scope: str = "both",
        dimension_weights: Mapping[Dimension, float] | None = None,
    ) -> CompetencyScore:
        questions = self._questions.list_active(role_scope, vessel_scope, operation_scope)
        if not questions:
            return CompetencyScore()

        answers = list(answers)
        all_text = " ".join(answer.answer_text for answer in answers if answer.answer_text)
        language, confidence = detect_language(all_text)

        answers_by_dimension: dict[Dimension, str | None] = {}
        for answer in answers:
            dimension = resolve_dimension(answer.competency)
            if dimension is not None and dimension not in answers_by_dimension:
                answers_by_dimension[dimension] = answer.answer_text

        max_score = self._rubric.max_score
        answer_scores: list[dict[str, Any]] = []
        points: dict[str, list[int]] = {}
        evidence: dict[str, list[str]] = {}
        total_hits = 0
        expected_hits = 0

        for question in questions:
            dimension = question.dimension
            # Every question of a dimension is scored against the same answer.
            text = answers_by_dimension.get(dimension)
            keywords = self._catalog.dimension_keywords(dimension, language)
            detail = self._rubric.score(text, dimension, language)

            total_hits += detail.keyword_hits
            expected_hits += max(len(keywords), 1)

            if detail.matched_keywords:
                bucket = evidence.setdefault(dimension.value, [])
                bucket.extend(kw for kw in detail.matched_keywords if kw not in bucket)

            answer_scores.append(
                {
                    "question_id": question.question_id,
                    "dimension": dimension.value,
                    "difficulty": question.difficulty,
                    "score": detail.score,
                    "max_score": max_score,
                    "answer_length": len(text or ""),
                }
            )
            points.setdefault(dimension.value, []).append(detail.score)

        score_by_dimension = {
            code: round_half_up(sum(values) / (max_score * len(values)) * 100, 1)
            if max_score > 0
            else 0.0
            for code, values in points.items()
        }

        weights = {
            _code(key): float(value)
            for key, value in (
                dimension_weights
                if dimension_weights is not None
                else self._settings.dimension_weights
            ).items()
        }
        total = self._weighted_total(score_by_dimension, weights)
        before_depth = total

        depth = self._depth.analyze(all_text, role_scope)
        uplift = 0.0
        if depth is not None:
            code = Dimension.TECH_PRACTICAL.value
            tech = score_by_dimension.get(code, DEFAULT_TECH_PRACTICAL)
            tech = max(tech, depth["tech_practical_floor"])
            tech += depth["bonus_points"]
            tech = min(tech, depth["tech_practical_cap"])
            score_by_dimension[code] = round_half_up(tech, 1)

            total = self._weighted_total(score_by_dimension, weights)
            max_uplift = float(self._depth.settings.max_total_score_uplift)
            uplift = round_half_up(total - before_depth, 1)
            if uplift > max_uplift:
                total = before_depth + max_uplift
                uplift = max_uplift

        coverage = round_half_up(total_hits / expected_hits, 3) if expected_hits else 0.0

        return CompetencyScore(
            score_total=round_half_up(total, 1),
            score_before_depth=round_half_up(before_depth, 1),
            depth_uplift=uplift,
            score_by_dimension=score_by_dimension,
            answer_scores=answer_scores,
            questions_evaluated=len(answer_scores),
            language=language,
            language_confidence=confidence,
            coverage=coverage,
            evidence_by_dimension={
                code: keywords[:EVIDENCE_PER_DIMENSION] for code, keywords in evidence.items()
            },
            technical_depth_index=depth["technical_depth_index"] if depth else None,
            technical_depth_detail=depth,
        )

    @staticmethod
    def _weighted_total(scores: Mapping[str, float], weights: Mapping[str, float]) -> float:
        if not scores:
            return 0.0
        weighted_sum = 0.0
        total_weight = 0.0
        for code, value in scores.items():
            weight = weights.get(code, DEFAULT_DIMENSION_WEIGHT)
            weighted_sum += value * weight
            total_weight += weight
        return weighted_sum / total_weight if total_weight > 0 else 0.0


def _code(key: Dimension | str) -> str:
    return key.value if isinstance(key, Dimension) else str(key).strip().upper()


__all__ = ["CompetencyScore", "CompetencyScorer"]
