"""
Deterministic text and grouping built on top of orchestrator results:
goal descriptions, component groupings, actionable insights and innovation
opportunities for the HTTP responses.
"""

from __future__ import annotations

from typing import Any

from services.cultural.gateway import entity_types as et
from services.cultural.gateway.models import Entity
from services.cultural.recommendation.components import ComponentRecommendations
from services.cultural.recommendation.connector import DiscoveryResult
from services.cultural.recommendation.goal_enhancer import GoalEnhancement

PROJECT_CATEGORIES: dict[str, str] = {
    "fitness": "fitness",
    "health": "fitness",
    "business": "business",
    "startup": "business",
    "travel": "travel",
    "learning": "learning",
    "education": "learning",
    "creative": "creative",
    "art": "creative",
    "social": "social",
    "networking": "social",
}
DEFAULT_PROJECT_CATEGORY = "general"

CONTENT_CATEGORIES: dict[str, str] = {
    et.BOOK: "Learning Resource",
    et.PODCAST: "Audio Content",
    et.MOVIE: "Visual Content",
    et.ARTIST: "Music & Art",
    et.BRAND: "Tools & Services",
    et.PLACE: "Venues & Locations",
    et.DESTINATION: "Travel & Exploration",
}


def categorize_project(project_type: str) -> str:
    return PROJECT_CATEGORIES.get(project_type.lower(), DEFAULT_PROJECT_CATEGORY)


def content_category(entity_type: str) -> str:
    return CONTENT_CATEGORIES.get(entity_type, "General")


def enhanced_goal_description(goal: str, enhancement: GoalEnhancement, interests: list[str]) -> str:
    elements = [e.name for e in enhancement.cultural_recommendations[:3]]
    return (
        f"{goal} - Enhanced with cultural intelligence: Leveraging your interests in "
        f"{', '.join(interests)}, this goal incorporates culturally-aligned elements like "
        f"{', '.join(elements)} to make your journey more personally meaningful and sustainable."
    )


def component_suggestions(project_name: str, components: ComponentRecommendations) -> list[dict[str, Any]]:
    """Group non-empty categories into workspace components, top entities first."""
    suggestions: list[dict[str, Any]] = []

    venues = components.venues.items
    if venues:
        suggestions.append({
            "componentName": "Cultural Venues & Locations",
            "componentType": "task_group",
            "projectName": project_name,
            "culturalData": {
                "recommendedVenues": venues[:5],
                "defaultView": "database",
                "supportedViews": ["database", "list", "board"],
            },
        })

    content = components.content.items
    if content:
        suggestions.append({
            "componentName": "Personalized Learning Library",
            "componentType": "file_repository",
            "projectName": project_name,
            "culturalData": {
                "recommendedContent": content[:10],
                "contentTypes": ["books", "podcasts", "videos", "articles"],
            },
        })

    tools = components.tools.items
    if tools:
        suggestions.append({
            "componentName": "Culturally-Aligned Tools & Brands",
            "componentType": "task_group",
            "projectName": project_name,
            "culturalData": {
                "recommendedBrands": tools[:8],
                "defaultView": "list",
                "supportedViews": ["list", "database"],
            },
        })

    return suggestions


def actionable_insights(discovery: DiscoveryResult, target_domain: str) -> list[str]:
    insights: list[str] = []

    if discovery.surprise_connections:
        insights.append(
            f"Your interests reveal {len(discovery.surprise_connections)} unexpected connections "
            f"to {target_domain} - leverage these for unique approaches"
        )
    if discovery.domain_bridges.items:
        insights.append(
            f"{len(discovery.domain_bridges.items)} bridge opportunities identified between "
            f"your interests and {target_domain} domain"
        )
    if discovery.trending_crossovers.items:
        insights.append(
            f"{len(discovery.trending_crossovers.items)} trending crossover opportunities in "
            f"{target_domain} align with your profile"
        )

    insights.append(
        f"Consider approaching {target_domain} through the lens of your existing interests for better engagement"
    )
    insights.append(
        f"Look for communities and brands that bridge your interests with {target_domain} objectives"
    )
    return insights


def innovation_opportunities(discovery: DiscoveryResult, target_domain: str) -> list[dict[str, str]]:
    opportunities = [
        {
            "opportunity": (
                f"Create a {target_domain} solution that incorporates elements from {conn.from_interest}"
            ),
            "potential": f"High - based on {round(conn.connection_strength * 100)}% cultural affinity",
            "culturalBasis": conn.explanation,
        }
        for conn in discovery.surprise_connections[:3]
    ]

    if discovery.domain_bridges.items:
        opportunities.append({
            "opportunity": "Develop cross-domain partnerships or products",
            "potential": "Medium to High - untapped market potential",
            "culturalBasis": "Strong cultural bridges exist between your interests and target domain",
        })
    return opportunities


def entity_names(entities: list[Entity]) -> list[str]:
    return [e.name for e in entities]
