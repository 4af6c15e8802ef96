"""Explicit success/failure results for content loading."""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")


class FailureKind(Enum):
    """Category of a failed content load or navigation."""

    TRANSPORT = "transport"
    PARSE = "parse"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful result carrying a value."""

    value: T


@dataclass(frozen=True)
class Err:
    """Failed result describing what went wrong and where."""

    kind: FailureKind
    path: str
    message: str

    def __str__(self) -> str:
        return f"{self.kind.value} failure for {self.path}: {self.message}"


Result = Ok[T] | Err
