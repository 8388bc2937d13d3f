"""
ComponentGenerator: categorized project components from a taste profile.

Four branches fan out concurrently and are joined positionally:

  venues       place        take 15   interests, demographics, location + context filters
  content      book/podcast/movie, take 5 each, one query per type in order
  tools        brand        take 10   interests, demographics
  communities  destination  take 10   interests, location

Each branch catches its own upstream failures and reports a BranchResult, so
the response is always structurally complete. Content degrades per type: a
failed book query still returns podcasts and movies (status "partial").
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

from services.cultural.gateway import entity_types as et
from services.cultural.gateway.client import TasteGraphGateway
from services.cultural.gateway.models import (
    Entity,
    Filters,
    InsightQuery,
    ProjectContext,
    Signals,
    TasteProfile,
)
from services.cultural.recommendation.outcome import BranchResult, capture

logger = logging.getLogger(__name__)

MAX_INTEREST_SIGNALS = 5
VENUE_TAKE = 15
CONTENT_TAKE = 5
TOOL_TAKE = 10
COMMUNITY_TAKE = 10

CONTENT_TYPES = (et.BOOK, et.PODCAST, et.MOVIE)


@dataclass
class ComponentRecommendations:
    venues: BranchResult[Entity]
    content: BranchResult[Entity]
    tools: BranchResult[Entity]
    communities: BranchResult[Entity]


class ComponentGenerator:
    def __init__(self, gateway: TasteGraphGateway) -> None:
        self._gateway = gateway

    async def generate(
        self,
        project_type: str,
        profile: TasteProfile,
        context: ProjectContext,
    ) -> ComponentRecommendations:
        logger.info("Generating components for project_type=%r", project_type)

        venues, content, tools, communities = await asyncio.gather(
            capture("venues", self._venues(profile, context)),
            self._content(profile),
            capture("tools", self._tools(profile)),
            capture("communities", self._communities(profile)),
        )
        return ComponentRecommendations(
            venues=venues,
            content=content,
            tools=tools,
            communities=communities,
        )

    async def _venues(self, profile: TasteProfile, context: ProjectContext) -> list[Entity]:
        prefs = profile.preferences
        filters = Filters(
            location=context.user_location,
            price_level=prefs.price_level if prefs else None,
            popularity=prefs.popularity if prefs else None,
        )
        result = await self._gateway.get_insights(InsightQuery(
            filter_type=et.PLACE,
            signals=Signals.from_profile(profile, MAX_INTEREST_SIGNALS),
            filters=filters,
            take=VENUE_TAKE,
        ))
        return result.results

    async def _content(self, profile: TasteProfile) -> BranchResult[Entity]:
        signals = Signals.from_profile(profile, MAX_INTEREST_SIGNALS, include_location=False)
        content: BranchResult[Entity] = BranchResult()
        for content_type in CONTENT_TYPES:
            try:
                result = await self._gateway.get_insights(InsightQuery(
                    filter_type=content_type,
                    signals=signals,
                    take=CONTENT_TAKE,
                ))
            except Exception as exc:
                logger.warning("Failed to get %s recommendations: %s", content_type, exc)
                content.errors.append(f"{content_type}: {type(exc).__name__}: {exc}")
                continue
            content.items.extend(result.results)
        return content

    async def _tools(self, profile: TasteProfile) -> list[Entity]:
        result = await self._gateway.get_insights(InsightQuery(
            filter_type=et.BRAND,
            signals=Signals.from_profile(profile, MAX_INTEREST_SIGNALS, include_location=False),
            take=TOOL_TAKE,
        ))
        return result.results

    async def _communities(self, profile: TasteProfile) -> list[Entity]:
        result = await self._gateway.get_insights(InsightQuery(
            filter_type=et.DESTINATION,
            signals=Signals.from_profile(profile, MAX_INTEREST_SIGNALS, include_demographics=False),
            take=COMMUNITY_TAKE,
        ))
        return result.results
