"""Domain entity for the authenticated GitHub user."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class User:
    login: str
    avatar_url: str
    created_at: datetime
    location: Optional[str] = None
