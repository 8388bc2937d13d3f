"""
Affinity scoring.

average_affinity is the single score attached to a batch of entities (one per
personalized project). cultural_fit_score rolls projects and cross-domain
links into a 0-100 figure for the goal-enhancement response.
"""

from __future__ import annotations

from typing import Iterable, Protocol

from services.cultural.gateway.models import Entity

# Returned when there is nothing to score
DEFAULT_CULTURAL_FIT = 70


class _Scored(Protocol):
    affinity_score: float


class _Linked(Protocol):
    strength: float


def average_affinity(entities: list[Entity]) -> float:
    """Mean affinity with missing values counted as 0. Empty batch -> 0.0."""
    if not entities:
        return 0.0
    total = sum(e.affinity or 0.0 for e in entities)
    return total / len(entities)


def cultural_fit_score(projects: Iterable[_Scored], links: Iterable[_Linked]) -> int:
    scores = [p.affinity_score * 100 for p in projects]
    scores.extend(link.strength * 100 for link in links)
    if not scores:
        return DEFAULT_CULTURAL_FIT
    return round(sum(scores) / len(scores))
