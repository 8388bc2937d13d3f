"""
Query-parameter building for the taste-graph API.

The API uses dot-namespaced keys (`signal.interests.entities`,
`filter.price_level.min`, ...). Multi-valued params are sent as ONE
comma-joined value, never as repeated keys. None values and empty lists are
dropped before serialization so they never reach the wire.
"""

from __future__ import annotations

import re
from typing import Any

from services.cultural.gateway.models import (
    Demographics,
    InsightQuery,
    LocationSignal,
    Range,
    Signals,
)

# "40.726408,-73.994275"
_COORDINATE_RE = re.compile(r"^-?\d+\.?\d*,-?\d+\.?\d*$")

ENTITIES_KEY = "signal.interests.entities"
TAGS_KEY = "signal.interests.tags"
AGE_KEY = "signal.demographics.age"
GENDER_KEY = "signal.demographics.gender"
AUDIENCES_KEY = "signal.demographics.audiences"
LOCATION_QUERY_KEY = "signal.location.query"
LOCATION_KEY = "signal.location"
LOCATION_RADIUS_KEY = "signal.location.radius"


def is_coordinates(location: str) -> bool:
    """True if `location` looks like a "lat,lon" pair."""
    return bool(_COORDINATE_RE.match(location))


def _format_scalar(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def serialize_params(params: dict[str, Any]) -> dict[str, str]:
    """Flatten a raw parameter map into wire strings.

    - None values are dropped
    - lists/tuples become a single comma-joined value; empty ones are dropped
    - booleans become "true"/"false", other scalars go through str()
    """
    out: dict[str, str] = {}
    for key, value in params.items():
        if value is None:
            continue
        if isinstance(value, (list, tuple)):
            if not value:
                continue
            out[key] = ",".join(_format_scalar(v) for v in value)
        else:
            out[key] = _format_scalar(value)
    return out


def _add_range(params: dict[str, Any], prefix: str, value: Range | None) -> None:
    if value is None:
        return
    if value.min is not None:
        params[f"{prefix}.min"] = value.min
    if value.max is not None:
        params[f"{prefix}.max"] = value.max


def build_insight_params(query: InsightQuery) -> dict[str, Any]:
    """Raw (unserialized) params for GET /v2/insights."""
    params: dict[str, Any] = {
        "filter.type": query.filter_type,
        "take": query.take or 20,
        "page": query.page or 1,
    }

    signals = query.signals
    if signals is not None:
        if signals.entities:
            params[ENTITIES_KEY] = list(signals.entities)
        if signals.tags:
            params[TAGS_KEY] = list(signals.tags)
        if signals.demographics is not None:
            demo = signals.demographics
            if demo.age:
                params[AGE_KEY] = demo.age
            if demo.gender:
                params[GENDER_KEY] = demo.gender
            if demo.audiences:
                params[AUDIENCES_KEY] = list(demo.audiences)
        if signals.location is not None:
            loc = signals.location
            if loc.query:
                params[LOCATION_QUERY_KEY] = loc.query
            elif loc.coordinates:
                params[LOCATION_KEY] = loc.coordinates
            if loc.radius:
                params[LOCATION_RADIUS_KEY] = loc.radius

    filters = query.filters
    if filters is not None:
        if filters.location:
            params["filter.location.query"] = filters.location
        if filters.tags:
            params["filter.tags"] = list(filters.tags)
        _add_range(params, "filter.price_level", filters.price_level)
        _add_range(params, "filter.popularity", filters.popularity)
        _add_range(params, "filter.rating", filters.rating)

    if query.explainability:
        params["feature.explainability"] = True

    return params


def _split(value: str | None) -> tuple[str, ...]:
    if not value:
        return ()
    return tuple(part for part in value.split(",") if part)


def signals_from_params(params: dict[str, str]) -> Signals:
    """Parse the signal.* keys of a serialized insight param map back into Signals."""
    demographics = None
    if any(k in params for k in (AGE_KEY, GENDER_KEY, AUDIENCES_KEY)):
        demographics = Demographics(
            age=params.get(AGE_KEY),
            gender=params.get(GENDER_KEY),
            audiences=_split(params.get(AUDIENCES_KEY)),
        )

    location = None
    if any(k in params for k in (LOCATION_QUERY_KEY, LOCATION_KEY, LOCATION_RADIUS_KEY)):
        radius = params.get(LOCATION_RADIUS_KEY)
        location = LocationSignal(
            query=params.get(LOCATION_QUERY_KEY),
            coordinates=params.get(LOCATION_KEY),
            radius=float(radius) if radius else None,
        )

    return Signals(
        entities=_split(params.get(ENTITIES_KEY)),
        tags=_split(params.get(TAGS_KEY)),
        demographics=demographics,
        location=location,
    )
