"""Date-based selection helpers over repositories and commits."""

from datetime import datetime
from typing import Iterable, List, Protocol, Sequence, TypeVar

from gitinsights.domain.commit import Commit
from gitinsights.domain.errors import EmptyResultError
from gitinsights.domain.repository import Repository


class Dated(Protocol):
    @property
    def date(self) -> datetime: ...


T = TypeVar("T", bound=Dated)


def oldest_dated(items: Iterable[T]) -> T:
    """
    Return the item with the earliest date.

    Ties keep the first item encountered.

    Raises:
        EmptyResultError: If there are no items.
    """
    oldest = None
    for item in items:
        if oldest is None or item.date < oldest.date:
            oldest = item
    if oldest is None:
        raise EmptyResultError("No dated items to choose from")
    return oldest


def oldest_repository(repos: Iterable[Repository]) -> Repository:
    return oldest_dated(repos)


def oldest_commit(commits: Iterable[Commit]) -> Commit:
    return oldest_dated(commits)


def oldest_of(first: T, second: T) -> T:
    # ties resolve to the first argument
    return second if second.date < first.date else first


def last_n(items: Sequence[T], n: int) -> List[T]:
    """Return the ``n`` most recent items, newest first."""
    if n <= 0:
        return []
    ordered = sorted(items, key=lambda item: item.date, reverse=True)
    return ordered[:n]
