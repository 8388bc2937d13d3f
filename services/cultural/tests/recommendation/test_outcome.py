"""Tests for BranchResult status derivation and capture()."""

import pytest

from services.cultural.gateway import NetworkError
from services.cultural.recommendation.outcome import BranchResult, BranchStatus, capture


class TestBranchStatus:
    @pytest.mark.parametrize("items,errors,expected", [
        (["a"], [], BranchStatus.OK),
        ([], [], BranchStatus.EMPTY),
        (["a"], ["book: boom"], BranchStatus.PARTIAL),
        ([], ["boom"], BranchStatus.FAILED),
    ])
    def test_status(self, items, errors, expected):
        assert BranchResult(items=items, errors=errors).status is expected

    def test_failure_describes_exception(self):
        result = BranchResult.failure(NetworkError("unreachable"))
        assert result.failed
        assert result.errors == ["NetworkError: unreachable"]

    def test_status_serializes_as_string(self):
        assert BranchStatus.PARTIAL.value == "partial"


class TestCapture:
    @pytest.mark.asyncio
    async def test_success(self):
        async def ok():
            return ["x", "y"]

        result = await capture("ok", ok())
        assert result.items == ["x", "y"]
        assert result.status is BranchStatus.OK

    @pytest.mark.asyncio
    async def test_exception_becomes_failed_branch(self):
        async def boom():
            raise RuntimeError("kaput")

        result = await capture("boom", boom())
        assert result.failed
        assert result.errors == ["RuntimeError: kaput"]
