"""
Explicit result types returned by collaborator calls.

Weather and completion providers return ``Ok(value)`` or ``Err(kind, detail)``
instead of raising, so callers branch on the outcome directly.
"""

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

from core.errors import ErrorKind

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Err:
    kind: ErrorKind
    detail: str

    @property
    def ok(self) -> bool:
        return False

    def __str__(self) -> str:
        return self.detail


Result = Union[Ok[T], Err]
