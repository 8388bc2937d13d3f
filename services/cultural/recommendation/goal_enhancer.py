"""
GoalEnhancer: enrich a stated goal with taste-graph recommendations.

Pipeline (fail-fast, any upstream error propagates to the caller):
  1. Resolve the user's interests into entities
  2. Aggregate goal-relevant entities for the goal category
  3. Link user interests to the goal domain when both sides resolved
  4. Build four personalized projects, each one place-type insight query
     signalled by the first 3 resolved entities, scored by average affinity
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

from services.cultural.gateway import entity_types as et
from services.cultural.gateway.client import TasteGraphGateway
from services.cultural.gateway.models import (
    ConcreteEntity,
    Entity,
    Filters,
    InsightQuery,
    LocationSignal,
    ProjectContext,
    Signals,
    TagEntity,
    TasteProfile,
)
from services.cultural.recommendation.aggregator import InsightAggregator
from services.cultural.recommendation.resolver import EntityResolver
from services.cultural.recommendation.scoring import average_affinity

logger = logging.getLogger(__name__)

PROJECT_KINDS = ("discovery", "execution", "community", "learning")
PROJECT_SIGNAL_ENTITIES = 3
PROJECT_TAKE = 10

LINK_ENTITY_LIMIT = 5
# Fixed strength for the interest -> goal link; no comparison call backs it
LINK_STRENGTH = 0.8


@dataclass
class PersonalizedProject:
    project_name: str
    cultural_alignment: list[Entity]
    affinity_score: float


@dataclass
class CrossDomainLink:
    source: str
    target: str
    connection: list[Entity]
    strength: float


@dataclass
class GoalEnhancement:
    cultural_recommendations: list[Entity]
    personalized_projects: list[PersonalizedProject]
    cross_domain_connections: list[CrossDomainLink]
    user_entities: list[Entity]


def project_signals(user_entities: list[Entity], context: ProjectContext) -> Signals:
    head = user_entities[:PROJECT_SIGNAL_ENTITIES]
    return Signals(
        entities=tuple(e.id for e in head if isinstance(e, ConcreteEntity)),
        tags=tuple(e.id for e in head if isinstance(e, TagEntity)),
        location=LocationSignal(query=context.user_location) if context.user_location else None,
    )


class GoalEnhancer:
    def __init__(
        self,
        gateway: TasteGraphGateway,
        resolver: EntityResolver | None = None,
        aggregator: InsightAggregator | None = None,
    ) -> None:
        self._gateway = gateway
        self._resolver = resolver or EntityResolver(gateway)
        self._aggregator = aggregator or InsightAggregator(gateway)

    async def enhance(
        self,
        goal: str,
        profile: TasteProfile,
        context: ProjectContext,
    ) -> GoalEnhancement:
        logger.info("Enhancing goal %r (category=%r)", goal, context.goal_category)

        user_entities = await self._resolver.resolve(profile.interests)

        filters = Filters(location=context.user_location) if context.user_location else None
        goal_entities = await self._aggregator.aggregate(goal, context.goal_category, filters=filters)

        links: list[CrossDomainLink] = []
        if user_entities and goal_entities:
            links.append(CrossDomainLink(
                source="user_interests",
                target="goal_domain",
                connection=goal_entities[:LINK_ENTITY_LIMIT],
                strength=LINK_STRENGTH,
            ))

        projects = await self._build_projects(user_entities, context)

        return GoalEnhancement(
            cultural_recommendations=goal_entities,
            personalized_projects=projects,
            cross_domain_connections=links,
            user_entities=user_entities,
        )

    async def _build_projects(
        self,
        user_entities: list[Entity],
        context: ProjectContext,
    ) -> list[PersonalizedProject]:
        signals = project_signals(user_entities, context)
        results = await asyncio.gather(*(
            self._gateway.get_insights(InsightQuery(
                filter_type=et.PLACE,
                signals=signals,
                take=PROJECT_TAKE,
            ))
            for _ in PROJECT_KINDS
        ))

        return [
            PersonalizedProject(
                project_name=f"{kind.capitalize()} Project",
                cultural_alignment=result.results,
                affinity_score=average_affinity(result.results),
            )
            for kind, result in zip(PROJECT_KINDS, results)
        ]
