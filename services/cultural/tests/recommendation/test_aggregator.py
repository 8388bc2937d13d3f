"""Tests for InsightAggregator: category table, concurrency, ordering."""

import asyncio

import pytest

from services.cultural.gateway import NetworkError
from services.cultural.gateway import entity_types as et
from services.cultural.gateway.models import Filters, InsightResult
from services.cultural.recommendation.aggregator import (
    GOAL_ENTITY_TYPES,
    InsightAggregator,
    entity_types_for_category,
)
from services.cultural.tests.conftest import concrete


class TestCategoryTable:
    @pytest.mark.parametrize("category,expected", [
        ("fitness", [et.PLACE, et.BRAND, et.BOOK]),
        ("business", [et.BRAND, et.BOOK, et.PERSON]),
        ("travel", [et.DESTINATION, et.PLACE, et.BOOK]),
        ("learning", [et.BOOK, et.PODCAST, et.PERSON]),
        ("creative", [et.ARTIST, et.BOOK, et.MOVIE]),
        ("social", [et.PLACE, et.BRAND, et.DESTINATION]),
    ])
    def test_known_categories(self, category, expected):
        assert entity_types_for_category(category) == expected

    def test_unknown_category_defaults_to_place(self):
        assert entity_types_for_category("knitting") == [et.PLACE]

    def test_returned_list_is_a_copy(self):
        entity_types_for_category("fitness").append("x")
        assert GOAL_ENTITY_TYPES["fitness"] == [et.PLACE, et.BRAND, et.BOOK]


class TestAggregate:
    @pytest.mark.asyncio
    async def test_one_query_per_type(self, mock_gateway):
        await InsightAggregator(mock_gateway).aggregate("get fit", "fitness")

        queries = [c.args[0] for c in mock_gateway.get_insights.await_args_list]
        assert [q.filter_type for q in queries] == [et.PLACE, et.BRAND, et.BOOK]
        assert all(q.take == 10 for q in queries)

    @pytest.mark.asyncio
    async def test_filters_are_forwarded(self, mock_gateway):
        filters = Filters(location="Austin, TX")
        await InsightAggregator(mock_gateway).aggregate("x", "other", filters=filters)

        query = mock_gateway.get_insights.await_args.args[0]
        assert query.filters == filters

    @pytest.mark.asyncio
    async def test_concatenated_in_table_order_despite_completion_order(self, mock_gateway):
        delays = {et.BOOK: 0, et.PODCAST: 0.02, et.PERSON: 0.01}

        async def insights(query):
            await asyncio.sleep(delays[query.filter_type])
            return InsightResult(results=[
                concrete(f"{query.filter_type}-1"),
                concrete(f"{query.filter_type}-2"),
            ])

        mock_gateway.get_insights.side_effect = insights

        entities = await InsightAggregator(mock_gateway).aggregate("learn", "learning")

        assert [e.name for e in entities] == [
            f"{et.BOOK}-1", f"{et.BOOK}-2",
            f"{et.PODCAST}-1", f"{et.PODCAST}-2",
            f"{et.PERSON}-1", f"{et.PERSON}-2",
        ]

    @pytest.mark.asyncio
    async def test_failed_type_query_propagates(self, mock_gateway):
        async def insights(query):
            if query.filter_type == et.BRAND:
                raise NetworkError("down")
            return InsightResult(results=[concrete("x")])

        mock_gateway.get_insights.side_effect = insights

        with pytest.raises(NetworkError):
            await InsightAggregator(mock_gateway).aggregate("grow", "business")
