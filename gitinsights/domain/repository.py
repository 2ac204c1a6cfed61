"""Domain entities for GitHub repositories."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Repository:
    """Immutable repository entity."""
    
    full_name: str
    name: str
    owner: str
    fork: bool
    stars: int
    created_at: datetime
    private: bool = False

    @property
    def date(self) -> datetime:
        return self.created_at

    def is_owned_by(self, login: str) -> bool:
        return self.owner == login
