"""
Cultural recommendation endpoints.

  POST /cultural/goals/enhance   goal enhancement (all-or-nothing)
  POST /cultural/components      project components (always complete, per-branch status)
  POST /cultural/discover        cross-domain discovery (all-or-nothing)
  GET  /cultural/taste/search    direct entity search
  GET  /cultural/taste/tags      direct tag search

Each orchestration is bounded by settings.request_timeout_s; the gateway
itself imposes none. Upstream HttpError / NetworkError are mapped to 502 / 503
by the exception handlers in main.py.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import asdict
from typing import Any, Awaitable, TypeVar

from fastapi import APIRouter, HTTPException, Query, Request
from pydantic import BaseModel, Field

from services.cultural.gateway.models import (
    Entity,
    Range,
    create_project_context,
    create_taste_profile,
)
from services.cultural.recommendation import narrative
from services.cultural.recommendation.outcome import BranchResult
from services.cultural.recommendation.scoring import cultural_fit_score

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/cultural", tags=["cultural"])

T = TypeVar("T")


# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------

class DemographicsBody(BaseModel):
    age: str | None = None
    gender: str | None = None


class RangeBody(BaseModel):
    min: float | None = None
    max: float | None = None

    def to_range(self) -> Range:
        return Range(min=self.min, max=self.max)


class PreferencesBody(BaseModel):
    priceRange: RangeBody | None = None
    popularityLevel: RangeBody | None = None


class EnhanceGoalRequest(BaseModel):
    goal: str = Field(..., min_length=1, max_length=1000)
    userInterests: list[str] = Field(..., min_length=1, max_length=20)
    goalCategory: str = Field(..., min_length=1, max_length=50)
    demographics: DemographicsBody | None = None
    location: str | None = Field(default=None, max_length=200)


class ComponentsRequest(BaseModel):
    projectName: str = Field(..., min_length=1, max_length=200)
    projectDescription: str = Field(default="", max_length=2000)
    projectType: str = Field(..., min_length=1, max_length=100)
    userInterests: list[str] = Field(..., min_length=1, max_length=20)
    demographics: DemographicsBody | None = None
    location: str | None = Field(default=None, max_length=200)
    preferences: PreferencesBody | None = None


class DiscoverRequest(BaseModel):
    userInterests: list[str] = Field(..., min_length=1, max_length=20)
    targetDomain: str = Field(..., min_length=1, max_length=50)
    goalContext: str | None = Field(default=None, max_length=1000)
    location: str | None = Field(default=None, max_length=200)


# ---------------------------------------------------------------------------
# Serialization
# ---------------------------------------------------------------------------

def _entity(entity: Entity) -> dict[str, Any]:
    return {
        "id": entity.id,
        "name": entity.name,
        "type": entity.type,
        "kind": entity.kind,
        "affinity": entity.affinity,
        "properties": asdict(entity.properties) if entity.properties else None,
    }


def _branch(branch: BranchResult[Entity]) -> dict[str, Any]:
    return {
        "status": branch.status.value,
        "items": [_entity(e) for e in branch.items],
        "errors": branch.errors,
    }


def _envelope(request: Request, data: dict[str, Any]) -> dict[str, Any]:
    return {"success": True, "data": data, "requestId": request.state.request_id}


async def _bounded(request: Request, coro: Awaitable[T], operation: str) -> T:
    timeout = request.app.state.settings.request_timeout_s
    try:
        return await asyncio.wait_for(coro, timeout=timeout)
    except asyncio.TimeoutError:
        logger.warning("%s exceeded %.1fs", operation, timeout)
        raise HTTPException(
            status_code=504,
            detail={
                "code": "UPSTREAM_TIMEOUT",
                "message": f"{operation} did not complete within {timeout:.0f}s.",
            },
        )


# ---------------------------------------------------------------------------
# Orchestrations
# ---------------------------------------------------------------------------

@router.post("/goals/enhance")
async def enhance_goal(body: EnhanceGoalRequest, request: Request) -> dict:
    demographics = body.demographics or DemographicsBody()
    profile = create_taste_profile(
        body.userInterests,
        age=demographics.age,
        gender=demographics.gender,
        location=body.location,
    )
    context = create_project_context(
        project_type="goal_enhancement",
        goal_category=body.goalCategory,
        user_location=body.location,
    )

    enhancement = await _bounded(
        request,
        request.app.state.goal_enhancer.enhance(body.goal, profile, context),
        "Goal enhancement",
    )

    return _envelope(request, {
        "culturalEnhancement": {
            "personalizedProjects": [
                {
                    "projectName": p.project_name,
                    "culturalAlignment": [_entity(e) for e in p.cultural_alignment],
                    "affinityScore": p.affinity_score,
                }
                for p in enhancement.personalized_projects
            ],
            "crossDomainConnections": [
                {
                    "from": link.source,
                    "to": link.target,
                    "strength": link.strength,
                    "connection": [_entity(e) for e in link.connection],
                    "insights": [f"Strong cultural alignment between {link.source} and {link.target}"],
                }
                for link in enhancement.cross_domain_connections
            ],
            "culturalRecommendations": [_entity(e) for e in enhancement.cultural_recommendations],
        },
        "enhancedGoalDescription": narrative.enhanced_goal_description(
            body.goal, enhancement, body.userInterests
        ),
        "culturalFitScore": cultural_fit_score(
            enhancement.personalized_projects, enhancement.cross_domain_connections
        ),
    })


@router.post("/components")
async def generate_components(body: ComponentsRequest, request: Request) -> dict:
    demographics = body.demographics or DemographicsBody()
    prefs = body.preferences or PreferencesBody()
    profile = create_taste_profile(
        body.userInterests,
        age=demographics.age,
        gender=demographics.gender,
        location=body.location,
        price_range=prefs.priceRange.to_range() if prefs.priceRange else None,
        popularity=prefs.popularityLevel.to_range() if prefs.popularityLevel else None,
    )
    context = create_project_context(
        project_type=body.projectType,
        goal_category=narrative.categorize_project(body.projectType),
        user_location=body.location,
    )

    components = await _bounded(
        request,
        request.app.state.component_generator.generate(body.projectType, profile, context),
        "Component generation",
    )

    content = _branch(components.content)
    for item in content["items"]:
        item["category"] = narrative.content_category(item["type"])

    suggestions = narrative.component_suggestions(body.projectName, components)
    for suggestion in suggestions:
        data = suggestion["culturalData"]
        for key in ("recommendedVenues", "recommendedContent", "recommendedBrands"):
            if key in data:
                data[key] = [_entity(e) for e in data[key]]

    return _envelope(request, {
        "smartComponents": {
            "venues": _branch(components.venues),
            "content": content,
            "tools": _branch(components.tools),
            "communities": _branch(components.communities),
        },
        "componentSuggestions": suggestions,
    })


@router.post("/discover")
async def discover_connections(body: DiscoverRequest, request: Request) -> dict:
    context = create_project_context(
        project_type="discovery",
        goal_category=body.targetDomain,
        user_location=body.location,
    )

    discovery = await _bounded(
        request,
        request.app.state.connector.discover(body.userInterests, body.targetDomain, context),
        "Cross-domain discovery",
    )

    return _envelope(request, {
        "discoveries": {
            "tier": discovery.tier.value,
            "surpriseConnections": [
                {
                    "fromInterest": c.from_interest,
                    "toRecommendation": _entity(c.to_recommendation),
                    "connectionStrength": c.connection_strength,
                    "explanation": c.explanation,
                }
                for c in discovery.surprise_connections
            ],
            "domainBridges": {
                "status": discovery.domain_bridges.status.value,
                "errors": discovery.domain_bridges.errors,
                "items": [
                    {
                        "domain1": b.domain1,
                        "domain2": b.domain2,
                        "bridgeEntities": narrative.entity_names(b.bridge_entities),
                        "insights": b.insights,
                    }
                    for b in discovery.domain_bridges.items
                ],
            },
            "trendingCrossOvers": _branch(discovery.trending_crossovers),
        },
        "actionableInsights": narrative.actionable_insights(discovery, body.targetDomain),
        "innovationOpportunities": narrative.innovation_opportunities(discovery, body.targetDomain),
    })


# ---------------------------------------------------------------------------
# Direct gateway queries
# ---------------------------------------------------------------------------

@router.get("/taste/search")
async def search_entities(
    request: Request,
    q: str = Query(..., min_length=1, max_length=200, description="Entity name query"),
    types: list[str] | None = Query(None, description="Entity type URNs"),
    location: str | None = Query(None, description='"lat,lon"; free-text locations are ignored'),
    take: int = Query(20, ge=1, le=100),
) -> dict:
    entities = await _bounded(
        request,
        request.app.state.gateway.search_entities(q, types, location=location, take=take),
        "Entity search",
    )
    return _envelope(request, {"results": [_entity(e) for e in entities], "count": len(entities)})


@router.get("/taste/tags")
async def search_tags(
    request: Request,
    q: str | None = Query(None, max_length=200),
    take: int = Query(20, ge=1, le=100),
) -> dict:
    tags = await _bounded(
        request,
        request.app.state.gateway.search_tags(q, take=take),
        "Tag search",
    )
    return _envelope(request, {"results": tags, "count": len(tags)})
