"""Resolve free-text interests into taste-graph entities via the search endpoint."""

import logging

from services.cultural.gateway.client import TasteGraphGateway
from services.cultural.gateway.models import Entity

logger = logging.getLogger(__name__)

DEFAULT_RESULTS_PER_INTEREST = 5


class EntityResolver:
    """
    One bounded search per interest, in list order.

    Results are appended in encounter order with no deduplication: an entity
    matched by two interests appears twice. Any failed search propagates.
    """

    def __init__(self, gateway: TasteGraphGateway, take: int = DEFAULT_RESULTS_PER_INTEREST) -> None:
        self._gateway = gateway
        self._take = take

    async def resolve(self, interests: list[str]) -> list[Entity]:
        resolved: list[Entity] = []
        for interest in interests:
            matches = await self._gateway.search_entities(interest, take=self._take)
            resolved.extend(matches)

        logger.info("Resolved %d interests into %d entities", len(interests), len(resolved))
        return resolved
