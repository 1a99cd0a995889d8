from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel

from .enums import FailureKind, RunOutcome

T = TypeVar("T")


class FetchResult(BaseModel, Generic[T]):
    """Outcome of an adapter call: the items found, or why none were."""

    items: List[T] = []
    failure: Optional[FailureKind] = None
    detail: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.failure is None

    @classmethod
    def failed(cls, failure: FailureKind, detail: str) -> "FetchResult[T]":
        return cls(items=[], failure=failure, detail=detail)


class RunReport(BaseModel):
    """What a digest run ended up doing."""

    outcome: RunOutcome
    text: Optional[str] = None
    regions: int = 0
    games: int = 0
