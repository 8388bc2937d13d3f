"""
Response normalization for the taste-graph endpoints.

Each endpoint shapes its items differently:

  /search        {"results": [{"entity_id", "name", "types": [...], "affinity", "properties"}]}
  /v2/insights   {"results": {"entities": [{"entity_id"|"id", "name", "subtype"|"type",
                                            "query": {"affinity"}, "affinity", "properties"}]},
                  "query": {...}, "pagination": {...}}

Malformed items are skipped; a malformed container raises ShapeError, which
the gateway turns into an empty result.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable

from services.cultural.gateway.errors import ShapeError
from services.cultural.gateway.models import (
    Entity,
    EntityProperties,
    InsightResult,
    Pagination,
    make_entity,
)

logger = logging.getLogger(__name__)

UNKNOWN_TYPE = "unknown"


def coerce_affinity(value: Any) -> float | None:
    """Affinity as a float clamped to [0, 1], or None when absent or non-numeric."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if number != number:  # NaN
        return None
    return min(max(number, 0.0), 1.0)


def _text(value: Any) -> str:
    """String form of an upstream scalar; null becomes the empty string."""
    return "" if value is None else str(value)


def _first_type(item: dict[str, Any]) -> str | None:
    types = item.get("types")
    if isinstance(types, list) and types:
        return str(types[0])
    return None


def normalize_search_item(item: dict[str, Any]) -> Entity:
    return make_entity(
        id=_text(item.get("entity_id")),
        name=_text(item.get("name")),
        type=_first_type(item) or UNKNOWN_TYPE,
        affinity=coerce_affinity(item.get("affinity")),
        properties=EntityProperties.from_payload(item.get("properties")),
    )


def normalize_insight_item(item: dict[str, Any]) -> Entity:
    query_meta = item.get("query")
    nested_affinity = query_meta.get("affinity") if isinstance(query_meta, dict) else None
    return make_entity(
        id=_text(item.get("entity_id") or item.get("id")),
        name=_text(item.get("name")),
        type=str(item.get("subtype") or item.get("type") or UNKNOWN_TYPE),
        # a zero nested affinity falls through to the top-level value
        affinity=coerce_affinity(nested_affinity or item.get("affinity")),
        properties=EntityProperties.from_payload(item.get("properties")),
    )


def normalize_generic_item(item: dict[str, Any]) -> Entity:
    """Lenient mapping for endpoints with no documented item shape (trending)."""
    return make_entity(
        id=_text(item.get("entity_id") or item.get("id")),
        name=_text(item.get("name")),
        type=_first_type(item) or str(item.get("subtype") or item.get("type") or UNKNOWN_TYPE),
        affinity=coerce_affinity(item.get("affinity")),
        properties=EntityProperties.from_payload(item.get("properties")),
    )


def identified(entities: Iterable[Entity]) -> list[Entity]:
    """Drop entities upstream sent without an id; they cannot be used as signals."""
    return [e for e in entities if e.id]


def result_list(payload: Any) -> list[Any]:
    """`payload["results"]` if it is a list, else raise ShapeError."""
    results = payload.get("results") if isinstance(payload, dict) else None
    if results is None:
        return []
    if not isinstance(results, list):
        raise ShapeError(f"expected results to be a list, got {type(results).__name__}")
    return results


def parse_search_response(payload: Any) -> list[Entity]:
    return identified(normalize_search_item(i) for i in result_list(payload) if isinstance(i, dict))


def extract_insight_items(payload: Any) -> list[dict[str, Any]]:
    results = payload.get("results") if isinstance(payload, dict) else None
    entities = results.get("entities") if isinstance(results, dict) else None
    if not isinstance(entities, list):
        raise ShapeError("insights response has no results.entities list")
    return [i for i in entities if isinstance(i, dict)]


def _pagination(payload: dict[str, Any]) -> Pagination | None:
    raw = payload.get("pagination")
    if not isinstance(raw, dict):
        return None
    return Pagination(page=raw.get("page"), take=raw.get("take"), total=raw.get("total"))


def parse_insight_response(payload: Any) -> InsightResult:
    """Normalize an insights payload. A missing results.entities yields `results=[]`."""
    try:
        entities = identified(normalize_insight_item(i) for i in extract_insight_items(payload))
    except ShapeError as exc:
        logger.warning("Unexpected insights payload shape, returning no results: %s", exc)
        entities = []

    meta: dict[str, Any] = {}
    pagination = None
    if isinstance(payload, dict):
        query = payload.get("query")
        meta = dict(query) if isinstance(query, dict) else {}
        pagination = _pagination(payload)

    return InsightResult(results=entities, query=meta, pagination=pagination)
