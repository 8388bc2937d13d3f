"""
Value types shared by the gateway and the recommendation orchestrators.

Entities are a two-variant sum type, ConcreteEntity | TagEntity, decided once
by the gateway normalizers. Consumers switch on the variant (isinstance or
`kind`) instead of re-parsing the `urn:tag` prefix.

Nothing here is persisted or shared across requests: every instance lives for
one request/response cycle.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from services.cultural.gateway.entity_types import is_tag_type


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------

# Upstream property keys that get a named field. Everything else lands in `extra`.
_KNOWN_PROPERTY_KEYS = {
    "description",
    "short_description",
    "address",
    "website",
    "phone",
    "image",
    "business_rating",
    "price_level",
    "keywords",
}


@dataclass(frozen=True)
class EntityProperties:
    description: str | None = None
    short_description: str | None = None
    address: str | None = None
    website: str | None = None
    phone: str | None = None
    image_url: str | None = None
    business_rating: float | None = None
    price_level: int | None = None
    keywords: tuple[str, ...] = ()
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_payload(cls, payload: Any) -> EntityProperties | None:
        """Split an upstream `properties` object into known fields + extra.

        Returns None for anything that is not a mapping.
        """
        if not isinstance(payload, dict):
            return None

        image = payload.get("image")
        image_url = image.get("url") if isinstance(image, dict) else image

        keywords: list[str] = []
        for kw in payload.get("keywords") or []:
            if isinstance(kw, dict) and kw.get("name"):
                keywords.append(str(kw["name"]))
            elif isinstance(kw, str):
                keywords.append(kw)

        return cls(
            description=payload.get("description"),
            short_description=payload.get("short_description"),
            address=payload.get("address"),
            website=payload.get("website"),
            phone=payload.get("phone"),
            image_url=image_url if isinstance(image_url, str) else None,
            business_rating=_as_float(payload.get("business_rating")),
            price_level=_as_int(payload.get("price_level")),
            keywords=tuple(keywords),
            extra={k: v for k, v in payload.items() if k not in _KNOWN_PROPERTY_KEYS},
        )


@dataclass(frozen=True)
class _EntityBase:
    id: str
    name: str
    type: str
    affinity: float | None = None
    # extra holds a dict, so properties stay out of the hash
    properties: EntityProperties | None = field(default=None, hash=False)


@dataclass(frozen=True)
class ConcreteEntity(_EntityBase):
    """A real taste-graph item: place, brand, book, artist..."""

    kind: str = field(default="concrete", init=False)


@dataclass(frozen=True)
class TagEntity(_EntityBase):
    """A tag returned by search (type under the `urn:tag` namespace)."""

    kind: str = field(default="tag", init=False)


Entity = ConcreteEntity | TagEntity


def make_entity(
    id: str,
    name: str,
    type: str,
    affinity: float | None = None,
    properties: EntityProperties | None = None,
) -> Entity:
    """Pick the variant for an upstream type string. The only place that looks at the prefix."""
    cls = TagEntity if is_tag_type(type) else ConcreteEntity
    return cls(id=id, name=name, type=type, affinity=affinity, properties=properties)


def _as_float(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    try:
        return float(value) if value is not None else None
    except (TypeError, ValueError):
        return None


def _as_int(value: Any) -> int | None:
    number = _as_float(value)
    return int(number) if number is not None else None


# ---------------------------------------------------------------------------
# Profiles and context
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Range:
    min: float | None = None
    max: float | None = None


@dataclass(frozen=True)
class Demographics:
    age: str | None = None
    gender: str | None = None
    audiences: tuple[str, ...] = ()


@dataclass(frozen=True)
class LocationSignal:
    query: str | None = None
    coordinates: str | None = None  # WKT POINT or "lat,lon"
    radius: float | None = None


@dataclass(frozen=True)
class Preferences:
    price_level: Range | None = None
    popularity: Range | None = None


@dataclass
class TasteProfile:
    interests: list[str]
    demographics: Demographics | None = None
    location: LocationSignal | None = None
    preferences: Preferences | None = None


@dataclass(frozen=True)
class ProjectContext:
    project_type: str
    goal_category: str
    user_location: str | None = None
    timeframe: str | None = None
    budget: str | None = None


def create_taste_profile(
    interests: list[str],
    age: str | None = None,
    gender: str | None = None,
    location: str | None = None,
    coordinates: str | None = None,
    price_range: Range | None = None,
    popularity: Range | None = None,
) -> TasteProfile:
    """Build a TasteProfile from flat request fields, leaving empty sections as None."""
    demographics = Demographics(age=age, gender=gender) if (age or gender) else None
    loc = LocationSignal(query=location, coordinates=coordinates) if (location or coordinates) else None
    preferences = (
        Preferences(price_level=price_range, popularity=popularity)
        if (price_range or popularity) else None
    )
    return TasteProfile(
        interests=list(interests),
        demographics=demographics,
        location=loc,
        preferences=preferences,
    )


def create_project_context(
    project_type: str,
    goal_category: str,
    user_location: str | None = None,
    timeframe: str | None = None,
    budget: str | None = None,
) -> ProjectContext:
    return ProjectContext(
        project_type=project_type,
        goal_category=goal_category,
        user_location=user_location,
        timeframe=timeframe,
        budget=budget,
    )


# ---------------------------------------------------------------------------
# Insight queries
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Signals:
    entities: tuple[str, ...] = ()
    tags: tuple[str, ...] = ()
    demographics: Demographics | None = None
    location: LocationSignal | None = None

    @classmethod
    def from_profile(cls, profile: TasteProfile, max_interests: int = 5,
                     include_location: bool = True,
                     include_demographics: bool = True) -> Signals:
        """Signal on the first `max_interests` interests.

        Interests that are tag URNs go to `tags`, everything else is sent as
        an entity id.
        """
        head = profile.interests[:max_interests]
        return cls(
            entities=tuple(i for i in head if not is_tag_type(i)),
            tags=tuple(i for i in head if is_tag_type(i)),
            demographics=profile.demographics if include_demographics else None,
            location=profile.location if include_location else None,
        )


@dataclass(frozen=True)
class Filters:
    location: str | None = None
    tags: tuple[str, ...] = ()
    price_level: Range | None = None
    popularity: Range | None = None
    rating: Range | None = None


@dataclass(frozen=True)
class InsightQuery:
    filter_type: str
    signals: Signals | None = None
    filters: Filters | None = None
    take: int = 20
    page: int = 1
    explainability: bool = False


@dataclass(frozen=True)
class Pagination:
    page: int | None = None
    take: int | None = None
    total: int | None = None


@dataclass
class InsightResult:
    results: list[Entity]
    query: dict[str, Any] = field(default_factory=dict)
    pagination: Pagination | None = None


# ---------------------------------------------------------------------------
# Discovery output
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SurpriseConnection:
    from_interest: str
    to_recommendation: Entity
    connection_strength: float
    explanation: str


@dataclass(frozen=True)
class DomainBridge:
    domain1: str
    domain2: str
    bridge_entities: list[Entity]
    insights: list[str]
