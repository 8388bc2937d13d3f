"""
TasteGraphGateway: the only HTTP boundary to the taste-graph (Qloo) API.

Every method is exactly one outbound GET. There is no caching, no retry and no
timeout here: callers bound the duration themselves (the HTTP routers use
asyncio.wait_for).

Failure modes:
  - non-2xx response        -> HttpError(status_code, body)
  - transport failure       -> NetworkError
  - unexpected payload shape -> logged, coerced to an empty result

Usage:
    gateway = TasteGraphGateway(api_key="...", base_url="https://hackathon.api.qloo.com")
    places = await gateway.search_entities("coffee shop", [PLACE], take=5)
"""

from __future__ import annotations

import logging
import warnings
from typing import Any

import httpx

from services.cultural.gateway.errors import AuthWarning, HttpError, NetworkError, ShapeError
from services.cultural.gateway.models import Entity, InsightQuery, InsightResult
from services.cultural.gateway.normalize import (
    identified,
    normalize_generic_item,
    parse_insight_response,
    parse_search_response,
    result_list,
)
from services.cultural.gateway.params import build_insight_params, is_coordinates, serialize_params

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://hackathon.api.qloo.com"

SEARCH_ENDPOINT = "/search"
INSIGHTS_ENDPOINT = "/v2/insights"
TAGS_ENDPOINT = "/v2/tags"
AUDIENCES_ENDPOINT = "/v2/audiences"
COMPARE_ENDPOINT = "/v2/insights/compare"
TRENDING_ENDPOINT = "/trends/category"

DEFAULT_TAKE = 20


class TasteGraphGateway:
    """
    Thin async client over the taste-graph endpoints.

    One instance per (api_key, base_url). It holds no mutable state, so a
    single instance is safely shared by concurrent orchestrator branches.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Args:
            api_key:   Taste-graph API key (QLOO_API_KEY env var). May be empty.
            base_url:  API root, no trailing slash needed.
            transport: Optional httpx transport (tests pass httpx.MockTransport).
        """
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._transport = transport

        if not api_key:
            logger.warning("Taste graph API key not set; requests will be rejected upstream")
            warnings.warn("QLOO_API_KEY is not set", AuthWarning, stacklevel=2)

    @property
    def base_url(self) -> str:
        return self._base_url

    def _headers(self) -> dict[str, str]:
        return {
            "x-api-key": self._api_key,
            "Content-Type": "application/json",
        }

    async def _get(self, endpoint: str, params: dict[str, Any]) -> Any:
        url = f"{self._base_url}{endpoint}"
        query = serialize_params(params)

        try:
            async with httpx.AsyncClient(timeout=None, transport=self._transport) as client:
                resp = await client.get(url, params=query, headers=self._headers())
        except httpx.RequestError as exc:
            logger.error("Taste graph request to %s failed: %r", endpoint, exc)
            raise NetworkError(f"Taste graph request failed: {exc!r}", url=url) from exc

        if not resp.is_success:
            body = resp.text
            logger.error(
                "Taste graph API error %d on %s: %s",
                resp.status_code,
                str(resp.request.url),
                body[:500],
            )
            raise HttpError(resp.status_code, body, url=str(resp.request.url))

        try:
            return resp.json()
        except ValueError:
            logger.warning("Taste graph returned non-JSON body for %s", endpoint)
            return {}

    @staticmethod
    def _results_or_empty(payload: Any, endpoint: str) -> list[Any]:
        try:
            return result_list(payload)
        except ShapeError as exc:
            logger.warning("Unexpected %s payload shape, returning no results: %s", endpoint, exc)
            return []

    # ------------------------------------------------------------------
    # Endpoints
    # ------------------------------------------------------------------

    async def search_entities(
        self,
        query: str,
        types: list[str] | None = None,
        *,
        location: str | None = None,
        radius: float | None = None,
        take: int = DEFAULT_TAKE,
        page: int = 1,
    ) -> list[Entity]:
        """
        Search entities by name.

        The search endpoint only understands "lat,lon" locations, so a
        free-text location is silently left off the request.
        """
        params: dict[str, Any] = {
            "query": query,
            "take": take or DEFAULT_TAKE,
            "page": page or 1,
            "types": types,
        }
        if location and is_coordinates(location):
            params["filter.location"] = location
        if radius:
            params["filter.radius"] = radius

        payload = await self._get(SEARCH_ENDPOINT, params)
        try:
            return parse_search_response(payload)
        except ShapeError as exc:
            logger.warning("Unexpected search payload shape, returning no results: %s", exc)
            return []

    async def get_insights(self, query: InsightQuery) -> InsightResult:
        payload = await self._get(INSIGHTS_ENDPOINT, build_insight_params(query))
        return parse_insight_response(payload)

    async def search_tags(
        self,
        query: str | None = None,
        *,
        tag_types: list[str] | None = None,
        take: int = DEFAULT_TAKE,
        page: int = 1,
    ) -> list[dict[str, Any]]:
        params: dict[str, Any] = {
            "take": take or DEFAULT_TAKE,
            "page": page or 1,
            "filter.query": query or None,
            "filter.tag.types": tag_types,
        }
        payload = await self._get(TAGS_ENDPOINT, params)
        return self._results_or_empty(payload, TAGS_ENDPOINT)

    async def find_audiences(
        self,
        *,
        audience_types: list[str] | None = None,
        take: int = DEFAULT_TAKE,
        page: int = 1,
    ) -> list[dict[str, Any]]:
        params: dict[str, Any] = {
            "take": take or DEFAULT_TAKE,
            "page": page or 1,
            "filter.audience.types": audience_types,
        }
        payload = await self._get(AUDIENCES_ENDPOINT, params)
        return self._results_or_empty(payload, AUDIENCES_ENDPOINT)

    async def compare_entities(
        self,
        group_a: list[str],
        group_b: list[str],
        *,
        filter_types: list[str] | None = None,
        take: int = DEFAULT_TAKE,
        page: int = 1,
    ) -> dict[str, Any]:
        """Raw comparison payload; its shape is not normalized."""
        params: dict[str, Any] = {
            "a.signal.interests.entities": group_a,
            "b.signal.interests.entities": group_b,
            "take": take or DEFAULT_TAKE,
            "page": page or 1,
            "filter.type": filter_types,
        }
        payload = await self._get(COMPARE_ENDPOINT, params)
        return payload if isinstance(payload, dict) else {}

    async def get_trending_entities(
        self,
        entity_type: str,
        *,
        take: int = DEFAULT_TAKE,
        page: int = 1,
    ) -> list[Entity]:
        params: dict[str, Any] = {
            "type": entity_type,
            "take": take or DEFAULT_TAKE,
            "page": page or 1,
        }
        payload = await self._get(TRENDING_ENDPOINT, params)
        items = self._results_or_empty(payload, TRENDING_ENDPOINT)
        return identified(normalize_generic_item(i) for i in items if isinstance(i, dict))
