"""Domain entities for GitHub issues."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class IssueState(str, Enum):
    OPEN = "open"
    CLOSED = "closed"


@dataclass(frozen=True)
class Issue:
    number: int
    state: IssueState
    repository: Optional[str] = None
