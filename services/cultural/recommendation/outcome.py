"""
BranchResult: outcome of one degradable branch of an orchestration.

Branches that catch their own upstream failures (component categories, the
discovery bridge/trending seams) report through this type so callers can tell
"upstream returned nothing" apart from "upstream call failed".
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Awaitable, Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class BranchStatus(str, Enum):
    OK = "ok"
    EMPTY = "empty"
    PARTIAL = "partial"
    FAILED = "failed"


@dataclass
class BranchResult(Generic[T]):
    items: list[T] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    @property
    def status(self) -> BranchStatus:
        if self.errors:
            return BranchStatus.PARTIAL if self.items else BranchStatus.FAILED
        return BranchStatus.OK if self.items else BranchStatus.EMPTY

    @property
    def failed(self) -> bool:
        return self.status == BranchStatus.FAILED

    def __len__(self) -> int:
        return len(self.items)

    @classmethod
    def failure(cls, error: BaseException | str) -> BranchResult[T]:
        return cls(items=[], errors=[_describe(error)])


def _describe(error: BaseException | str) -> str:
    if isinstance(error, str):
        return error
    return f"{type(error).__name__}: {error}"


async def capture(label: str, coro: Awaitable[list[T]]) -> BranchResult[T]:
    """Await `coro`; on failure log and return a failed BranchResult instead of raising."""
    try:
        items = await coro
    except Exception as exc:
        logger.warning("Branch %r failed, degrading to empty: %s", label, exc)
        return BranchResult.failure(exc)
    return BranchResult(items=list(items))
