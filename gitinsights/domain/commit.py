"""Domain entities for GitHub commits."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Commit:
    """Immutable commit entity.

    ``author_login`` is None when GitHub could not match the commit email
    to an account.
    """
    
    sha: str
    url: str
    author_login: Optional[str]
    authored_at: datetime
    committed_at: datetime

    @property
    def date(self) -> datetime:
        return self.authored_at

    def is_authored_by(self, login: str) -> bool:
        return self.author_login is not None and self.author_login == login


@dataclass(frozen=True)
class CommitStats:
    """Line counts of a single commit, fetched from its detail URL."""
    
    additions: int
    deletions: int
    total: int
