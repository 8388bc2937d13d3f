"""Tests for ComponentGenerator: four degradable branches joined positionally."""

import pytest

from services.cultural.gateway import HttpError, NetworkError
from services.cultural.gateway import entity_types as et
from services.cultural.gateway.models import (
    InsightResult,
    Range,
    create_project_context,
    create_taste_profile,
)
from services.cultural.recommendation.components import ComponentGenerator
from services.cultural.recommendation.outcome import BranchStatus
from services.cultural.tests.conftest import concrete


def _profile(**kwargs):
    defaults = {"interests": ["i1", "i2"], "age": "25_to_29", "location": "Brooklyn, NY"}
    defaults.update(kwargs)
    return create_taste_profile(**defaults)


def _context(location="Brooklyn, NY"):
    return create_project_context(project_type="fitness", goal_category="fitness", user_location=location)


def _by_type(failing=()):
    async def insights(query):
        if query.filter_type in failing:
            raise HttpError(500, f"{query.filter_type} failed")
        return InsightResult(results=[concrete(query.filter_type)])
    return insights


def _queries(mock_gateway):
    return {c.args[0].filter_type: c.args[0] for c in mock_gateway.get_insights.await_args_list}


class TestGenerate:
    @pytest.mark.asyncio
    async def test_each_branch_lands_in_its_slot(self, mock_gateway):
        mock_gateway.get_insights.side_effect = _by_type()

        result = await ComponentGenerator(mock_gateway).generate("fitness", _profile(), _context())

        assert [e.name for e in result.venues.items] == [et.PLACE]
        assert [e.name for e in result.content.items] == [et.BOOK, et.PODCAST, et.MOVIE]
        assert [e.name for e in result.tools.items] == [et.BRAND]
        assert [e.name for e in result.communities.items] == [et.DESTINATION]
        assert all(
            branch.status is BranchStatus.OK
            for branch in (result.venues, result.content, result.tools, result.communities)
        )

    @pytest.mark.asyncio
    async def test_branch_queries(self, mock_gateway):
        profile = _profile(price_range=Range(min=1, max=3), popularity=Range(min=0.5))

        await ComponentGenerator(mock_gateway).generate("fitness", profile, _context("Austin, TX"))

        queries = _queries(mock_gateway)

        venues = queries[et.PLACE]
        assert venues.take == 15
        assert venues.filters.location == "Austin, TX"
        assert venues.filters.price_level == Range(min=1, max=3)
        assert venues.filters.popularity == Range(min=0.5)
        assert venues.signals.entities == ("i1", "i2")
        assert venues.signals.location.query == "Brooklyn, NY"

        for content_type in (et.BOOK, et.PODCAST, et.MOVIE):
            assert queries[content_type].take == 5
            assert queries[content_type].signals.location is None

        tools = queries[et.BRAND]
        assert tools.take == 10
        assert tools.signals.location is None
        assert tools.signals.demographics.age == "25_to_29"

        communities = queries[et.DESTINATION]
        assert communities.take == 10
        assert communities.signals.demographics is None
        assert communities.signals.location.query == "Brooklyn, NY"

    @pytest.mark.asyncio
    async def test_signals_capped_at_five_interests(self, mock_gateway):
        profile = _profile(interests=[f"i{n}" for n in range(9)])

        await ComponentGenerator(mock_gateway).generate("x", profile, _context())

        assert _queries(mock_gateway)[et.PLACE].signals.entities == tuple(f"i{n}" for n in range(5))

    @pytest.mark.asyncio
    async def test_failed_branch_degrades_alone(self, mock_gateway):
        mock_gateway.get_insights.side_effect = _by_type(failing={et.BRAND})

        result = await ComponentGenerator(mock_gateway).generate("x", _profile(), _context())

        assert result.tools.status is BranchStatus.FAILED
        assert result.tools.items == []
        assert result.venues.status is BranchStatus.OK
        assert result.communities.status is BranchStatus.OK
        assert len(result.content) == 3

    @pytest.mark.asyncio
    async def test_content_degrades_per_type(self, mock_gateway):
        mock_gateway.get_insights.side_effect = _by_type(failing={et.BOOK})

        result = await ComponentGenerator(mock_gateway).generate("x", _profile(), _context())

        assert result.content.status is BranchStatus.PARTIAL
        assert [e.name for e in result.content.items] == [et.PODCAST, et.MOVIE]
        assert len(result.content.errors) == 1
        assert result.content.errors[0].startswith(et.BOOK)

    @pytest.mark.asyncio
    async def test_everything_failing_is_still_complete(self, mock_gateway):
        mock_gateway.get_insights.side_effect = NetworkError("down")

        result = await ComponentGenerator(mock_gateway).generate("x", _profile(), _context())

        for branch in (result.venues, result.content, result.tools, result.communities):
            assert branch.status is BranchStatus.FAILED
        assert len(result.content.errors) == 3

    @pytest.mark.asyncio
    async def test_empty_upstream_is_empty_not_failed(self, mock_gateway):
        result = await ComponentGenerator(mock_gateway).generate("x", _profile(), _context())

        assert result.venues.status is BranchStatus.EMPTY
        assert result.content.status is BranchStatus.EMPTY
