"""
Cross-domain discovery: surprise connections and domain bridges between a
user's interests and an unrelated target domain.

Target-domain retrieval is a three-tier fallback, evaluated in order:

  1. LOCATION    no concrete entity resolved  -> location-only query at the
                 default fallback location, no other signals
  2. TAG_SIGNAL  concrete + tag entities      -> first 5 tag ids as
                 signal.interests.tags, explainability on
  3. PLAIN       concrete entities, no tags   -> plain query on the target type

Concrete entity ids are never sent as signals: upstream rejects search ids
in signal.interests.entities.

Domain bridges and trending crossovers sit behind provider seams. The
defaults make no upstream call: SyntheticBridgeProvider emits one templated
bridge and NoTrendingProvider emits nothing.

TODO: back the providers with TasteGraphGateway.compare_entities and
get_trending_entities once those endpoints accept this API key.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from services.cultural.gateway import entity_types as et
from services.cultural.gateway.client import TasteGraphGateway
from services.cultural.gateway.models import (
    ConcreteEntity,
    DomainBridge,
    Entity,
    InsightQuery,
    LocationSignal,
    ProjectContext,
    Signals,
    SurpriseConnection,
    TagEntity,
)
from services.cultural.recommendation.outcome import BranchResult, capture
from services.cultural.recommendation.resolver import EntityResolver

logger = logging.getLogger(__name__)

# business maps to place, not brand: brand insight queries are rejected upstream
DOMAIN_ENTITY_TYPE: dict[str, str] = {
    "fitness": et.PLACE,
    "food": et.PLACE,
    "travel": et.DESTINATION,
    "entertainment": et.MOVIE,
    "music": et.ARTIST,
    "business": et.PLACE,
    "creative": et.PLACE,
    "learning": et.BOOK,
}
DEFAULT_DOMAIN_ENTITY_TYPE = et.PLACE

DEFAULT_FALLBACK_LOCATION = "Brooklyn, NY"
MAX_TAG_SIGNALS = 5
TARGET_TAKE = 20
DISCOVERY_RESULTS_PER_INTEREST = 3

SURPRISE_USER_LIMIT = 3
SURPRISE_TARGET_LIMIT = 5
SURPRISE_MIN_AFFINITY = 0.7

USER_INTERESTS_DOMAIN = "user_interests"


class FallbackTier(str, Enum):
    LOCATION = "location"
    TAG_SIGNAL = "tag_signal"
    PLAIN = "plain"


def target_entity_type(domain: str) -> str:
    return DOMAIN_ENTITY_TYPE.get(domain, DEFAULT_DOMAIN_ENTITY_TYPE)


def classify(entities: list[Entity]) -> tuple[list[ConcreteEntity], list[TagEntity]]:
    concrete = [e for e in entities if isinstance(e, ConcreteEntity)]
    tags = [e for e in entities if isinstance(e, TagEntity)]
    return concrete, tags


def select_tier(concrete: list[ConcreteEntity], tags: list[TagEntity]) -> FallbackTier:
    if not concrete:
        return FallbackTier.LOCATION
    if tags:
        return FallbackTier.TAG_SIGNAL
    return FallbackTier.PLAIN


def build_target_query(
    tier: FallbackTier,
    target_type: str,
    tags: list[TagEntity],
    fallback_location: str = DEFAULT_FALLBACK_LOCATION,
) -> InsightQuery:
    if tier is FallbackTier.LOCATION:
        return InsightQuery(
            filter_type=target_type,
            signals=Signals(location=LocationSignal(query=fallback_location)),
            take=TARGET_TAKE,
        )
    if tier is FallbackTier.TAG_SIGNAL:
        return InsightQuery(
            filter_type=target_type,
            signals=Signals(tags=tuple(t.id for t in tags[:MAX_TAG_SIGNALS])),
            take=TARGET_TAKE,
            explainability=True,
        )
    return InsightQuery(filter_type=target_type, take=TARGET_TAKE)


def find_surprise_connections(
    user_entities: list[Entity],
    target_entities: list[Entity],
) -> list[SurpriseConnection]:
    """
    Pair the first 3 user entities with the first 5 target entities and keep
    pairs whose target affinity is above 0.7, strongest first.
    """
    connections: list[SurpriseConnection] = []
    for user_entity in user_entities[:SURPRISE_USER_LIMIT]:
        for target in target_entities[:SURPRISE_TARGET_LIMIT]:
            if target.affinity is not None and target.affinity > SURPRISE_MIN_AFFINITY:
                connections.append(SurpriseConnection(
                    from_interest=user_entity.name,
                    to_recommendation=target,
                    connection_strength=target.affinity,
                    explanation=f"People who like {user_entity.name} often also enjoy {target.name}",
                ))

    connections.sort(key=lambda c: c.connection_strength, reverse=True)
    return connections


# ---------------------------------------------------------------------------
# Provider seams
# ---------------------------------------------------------------------------

class BridgeProvider(Protocol):
    async def find_bridges(
        self,
        interests: list[str],
        target_domain: str,
        user_entities: list[Entity],
    ) -> list[DomainBridge]: ...


class TrendingProvider(Protocol):
    async def find_trending(self, target_domain: str, target_type: str) -> list[Entity]: ...


class SyntheticBridgeProvider:
    """Exactly one templated bridge per call. Makes no upstream request."""

    async def find_bridges(
        self,
        interests: list[str],
        target_domain: str,
        user_entities: list[Entity],
    ) -> list[DomainBridge]:
        return [DomainBridge(
            domain1=USER_INTERESTS_DOMAIN,
            domain2=target_domain,
            bridge_entities=[],
            insights=[
                f"Bridge found between {', '.join(interests)} and {target_domain} domain",
                "Cultural connections exist across these domains",
                "Consider exploring crossover opportunities",
            ],
        )]


class NoTrendingProvider:
    async def find_trending(self, target_domain: str, target_type: str) -> list[Entity]:
        return []


# ---------------------------------------------------------------------------
# Connector
# ---------------------------------------------------------------------------

@dataclass
class DiscoveryResult:
    surprise_connections: list[SurpriseConnection]
    domain_bridges: BranchResult[DomainBridge]
    trending_crossovers: BranchResult[Entity]
    tier: FallbackTier
    target_entities: list[Entity]


class CrossDomainConnector:
    """
    Usage:
        connector = CrossDomainConnector(gateway)
        result = await connector.discover(["vinyl records", "meditation"], "business", context)

    Interest resolution and the target-domain query propagate failures; the
    bridge and trending branches degrade to a failed BranchResult.
    """

    def __init__(
        self,
        gateway: TasteGraphGateway,
        resolver: EntityResolver | None = None,
        bridges: BridgeProvider | None = None,
        trending: TrendingProvider | None = None,
        fallback_location: str = DEFAULT_FALLBACK_LOCATION,
    ) -> None:
        self._gateway = gateway
        self._resolver = resolver or EntityResolver(gateway, take=DISCOVERY_RESULTS_PER_INTEREST)
        self._bridges = bridges or SyntheticBridgeProvider()
        self._trending = trending or NoTrendingProvider()
        self._fallback_location = fallback_location

    async def fetch_target_entities(
        self,
        target_domain: str,
        user_entities: list[Entity],
    ) -> tuple[FallbackTier, list[Entity]]:
        target_type = target_entity_type(target_domain)
        concrete, tags = classify(user_entities)
        tier = select_tier(concrete, tags)

        if tier is FallbackTier.LOCATION:
            logger.warning(
                "No concrete entities resolved, falling back to location insights at %r",
                self._fallback_location,
            )
        else:
            logger.info(
                "Target query tier=%s type=%s (concrete=%d, tags=%d)",
                tier.value, target_type, len(concrete), len(tags),
            )

        query = build_target_query(tier, target_type, tags, self._fallback_location)
        result = await self._gateway.get_insights(query)
        return tier, result.results

    async def discover(
        self,
        interests: list[str],
        target_domain: str,
        context: ProjectContext,
    ) -> DiscoveryResult:
        logger.info(
            "Discovering cross-domain connections: %d interests -> %r (project=%r)",
            len(interests), target_domain, context.project_type,
        )
        user_entities = await self._resolver.resolve(interests)
        tier, target_entities = await self.fetch_target_entities(target_domain, user_entities)

        surprises = find_surprise_connections(user_entities, target_entities)
        bridges = await capture(
            "domain_bridges",
            self._bridges.find_bridges(interests, target_domain, user_entities),
        )
        trending = await capture(
            "trending_crossovers",
            self._trending.find_trending(target_domain, target_entity_type(target_domain)),
        )

        return DiscoveryResult(
            surprise_connections=surprises,
            domain_bridges=bridges,
            trending_crossovers=trending,
            tier=tier,
            target_entities=target_entities,
        )
