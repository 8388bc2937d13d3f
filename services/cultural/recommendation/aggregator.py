"""
InsightAggregator: goal category -> one insight query per relevant entity type.

Category table:
  fitness   place, brand, book
  business  brand, book, person
  travel    destination, place, book
  learning  book, podcast, person
  creative  artist, book, movie
  social    place, brand, destination
  (other)   place

The per-type queries are independent and run concurrently. Results are
concatenated in table order, each type keeping its upstream rank; there is no
cross-type dedup or re-ranking. Any failed query propagates.
"""

from __future__ import annotations

import asyncio
import logging

from services.cultural.gateway import entity_types as et
from services.cultural.gateway.client import TasteGraphGateway
from services.cultural.gateway.models import Entity, Filters, InsightQuery, Signals

logger = logging.getLogger(__name__)

GOAL_ENTITY_TYPES: dict[str, list[str]] = {
    "fitness": [et.PLACE, et.BRAND, et.BOOK],
    "business": [et.BRAND, et.BOOK, et.PERSON],
    "travel": [et.DESTINATION, et.PLACE, et.BOOK],
    "learning": [et.BOOK, et.PODCAST, et.PERSON],
    "creative": [et.ARTIST, et.BOOK, et.MOVIE],
    "social": [et.PLACE, et.BRAND, et.DESTINATION],
}
DEFAULT_GOAL_ENTITY_TYPES: list[str] = [et.PLACE]

DEFAULT_TAKE_PER_TYPE = 10


def entity_types_for_category(category: str) -> list[str]:
    return list(GOAL_ENTITY_TYPES.get(category, DEFAULT_GOAL_ENTITY_TYPES))


class InsightAggregator:
    def __init__(self, gateway: TasteGraphGateway, take: int = DEFAULT_TAKE_PER_TYPE) -> None:
        self._gateway = gateway
        self._take = take

    async def aggregate(
        self,
        goal: str,
        category: str,
        *,
        signals: Signals | None = None,
        filters: Filters | None = None,
    ) -> list[Entity]:
        """
        Fetch goal-relevant entities for `category`.

        The goal text picks nothing on the wire by itself: the insights
        endpoint takes no free-text signal, so the goal is carried by the
        category choice and the optional signals/filters.
        """
        types = entity_types_for_category(category)
        logger.info("Aggregating insights for goal=%r category=%r types=%s", goal, category, types)

        batches = await asyncio.gather(*(
            self._gateway.get_insights(InsightQuery(
                filter_type=entity_type,
                signals=signals,
                filters=filters,
                take=self._take,
            ))
            for entity_type in types
        ))

        entities: list[Entity] = []
        for batch in batches:
            entities.extend(batch.results)
        return entities
