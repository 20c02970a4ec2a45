"""Result of resolving a reference that may dangle.

Orders outlive the products they were placed for, and products outlive
the stock items they consume.  Instead of ``None`` checks scattered around,
callers get either ``Resolved(entity)`` or ``Missing(id)`` and must handle
both.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Generic, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class Resolved(Generic[T]):
    entity: T


@dataclass(frozen=True)
class Missing:
    id: str


Lookup = Union[Resolved[T], Missing]


def resolve(entity_id: str, fetch: Callable[[str], T | None]) -> Lookup[T]:
    """Wrap a repository ``get``-style call into a Lookup."""
    entity = fetch(entity_id)
    if entity is None:
        return Missing(entity_id)
    return Resolved(entity)
