"""Dependency injection container for the crew assessment system."""

from __future__ import annotations

from typing import Any, Mapping

from dependency_injector import containers, providers

from .config import build_app_config
from .core.competency import (
    CompetencyEngine,
    CompetencyScorer,
    RankToRoleScopeMapper,
    TechnicalDepthAnalyzer,
)
from .core.stability import StabilityRiskEngine
from .pipeline import AssessmentPipeline
from .storage import InMemoryStore


class AssessmentContainer(containers.DeclarativeContainer):
    """Dependency-injector container definition."""

    config = providers.Configuration()

    app_config = providers.Singleton(build_app_config, overrides=config)

    store = providers.Singleton(InMemoryStore)

    role_scope_mapper = providers.Singleton(RankToRoleScopeMapper)

    depth_analyzer = providers.Singleton(
        TechnicalDepthAnalyzer,
        settings=app_config.provided.competency.technical_depth,
    )

    competency_scorer = providers.Singleton(
        CompetencyScorer,
        questions=store.provided.questions,
        settings=app_config.provided.competency,
        depth_analyzer=depth_analyzer,
    )

    competency_engine = providers.Singleton(
        CompetencyEngine,
        candidates=store.provided.candidates,
        interviews=store.provided.interviews,
        scorer=competency_scorer,
        assessments=store.provided.assessments,
        profiles=store.provided.profiles,
        events=store.provided.events,
        settings=app_config.provided.competency,
        mapper=role_scope_mapper,
    )

    stability_engine = providers.Singleton(
        StabilityRiskEngine,
        candidates=store.provided.candidates,
        contracts=store.provided.contracts,
        profiles=store.provided.profiles,
        events=store.provided.events,
        settings=app_config.provided.stability,
    )

    pipeline = providers.Factory(
        AssessmentPipeline,
        store=store,
        competency_engine=competency_engine,
        stability_engine=stability_engine,
    )


def create_container(
    *,
    settings: Mapping[str, Any] | None = None,
    store: InMemoryStore | None = None,
) -> AssessmentContainer:
    """Instantiate container with optional overrides.

    ``settings`` is merged over the packaged defaults; ``store`` replaces the
    fresh in-memory store so callers can inspect logs and profiles afterwards.
    """

    container = AssessmentContainer()

    if settings:
        container.config.from_dict(dict(settings))

    if store is not None:
        container.store.override(providers.Object(store))

    return container
