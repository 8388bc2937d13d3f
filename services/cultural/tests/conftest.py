"""
Shared test fixtures for the cultural recommendation test suite.

Provides:
- payload factories for the /search and /v2/insights response shapes
- entity factories for both Entity variants
- a recording httpx.MockTransport for wire-level gateway tests
- an AsyncMock gateway for orchestrator tests
- an async FastAPI test client with orchestrators built on the mock gateway
"""

import os
import uuid
from typing import Any, Callable
from unittest.mock import AsyncMock

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

# Ensure test env vars before any app imports
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("QLOO_API_KEY", "test-key-123")
os.environ.setdefault("SENTRY_DSN", "")

from services.cultural.gateway.client import TasteGraphGateway  # noqa: E402
from services.cultural.gateway.models import (  # noqa: E402
    ConcreteEntity,
    InsightResult,
    TagEntity,
)


# ---------------------------------------------------------------------------
# Payload factories
# ---------------------------------------------------------------------------

def make_search_item(**overrides: Any) -> dict:
    """One item of a /search response."""
    base = {
        "entity_id": f"ent-{uuid.uuid4().hex[:8]}",
        "name": "Test Place",
        "types": ["urn:entity:place"],
        "affinity": None,
        "properties": {"address": "1 Main St"},
    }
    base.update(overrides)
    return base


def make_insight_item(**overrides: Any) -> dict:
    """One item of a /v2/insights results.entities list."""
    base = {
        "entity_id": f"ent-{uuid.uuid4().hex[:8]}",
        "name": "Test Insight",
        "subtype": "urn:entity:place",
        "query": {"affinity": 0.5},
        "properties": {},
    }
    base.update(overrides)
    return base


def insights_payload(items: list[dict], **extra: Any) -> dict:
    payload = {"success": True, "results": {"entities": items}, "query": {}}
    payload.update(extra)
    return payload


# ---------------------------------------------------------------------------
# Entity factories
# ---------------------------------------------------------------------------

def concrete(name: str, affinity: float | None = None, id: str | None = None,
             type: str = "urn:entity:place") -> ConcreteEntity:
    return ConcreteEntity(id=id or f"id-{name}", name=name, type=type, affinity=affinity)


def tag(name: str, id: str | None = None) -> TagEntity:
    return TagEntity(id=id or f"urn:tag:keyword:{name}", name=name, type="urn:tag:keyword:qloo")


# ---------------------------------------------------------------------------
# Wire-level transport
# ---------------------------------------------------------------------------

class RecordingTransport:
    """httpx.MockTransport wrapper that records every request it serves."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self.requests: list[httpx.Request] = []
        self._handler = handler
        self.transport = httpx.MockTransport(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._handler(request)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


@pytest.fixture
def json_transport():
    """Factory: transport answering every request with the given JSON + status."""
    def _make(payload: Any, status_code: int = 200) -> RecordingTransport:
        return RecordingTransport(lambda request: httpx.Response(status_code, json=payload))
    return _make


@pytest.fixture
def make_gateway():
    def _make(transport: RecordingTransport, api_key: str = "test-key-123") -> TasteGraphGateway:
        return TasteGraphGateway(
            api_key=api_key,
            base_url="https://taste.test",
            transport=transport.transport,
        )
    return _make


# ---------------------------------------------------------------------------
# Orchestrator-level gateway mock
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_gateway():
    """AsyncMock gateway. Defaults: empty searches and empty insight results."""
    gateway = AsyncMock(spec=TasteGraphGateway)
    gateway.search_entities = AsyncMock(return_value=[])
    gateway.get_insights = AsyncMock(return_value=InsightResult(results=[]))
    gateway.search_tags = AsyncMock(return_value=[])
    return gateway


# ---------------------------------------------------------------------------
# FastAPI test client
# ---------------------------------------------------------------------------

@pytest.fixture
async def app(mock_gateway):
    """FastAPI app with orchestrators wired to the mock gateway (lifespan not run)."""
    from services.cultural.config import settings
    from services.cultural.main import app as _app, build_services

    _app.state.settings = settings
    build_services(_app, mock_gateway)
    return _app


@pytest.fixture
async def client(app):
    """Async HTTP client bound to the test app."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
