"""Application service collecting every dashboard metric in one pass."""

import asyncio
import logging
from collections import Counter
from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any, Awaitable, Dict, Iterable, List, Optional

from gitinsights.application.insights_service import InsightsService
from gitinsights.domain.errors import EmptyResultError

logger = logging.getLogger(__name__)


def sum_languages(language_maps: Iterable[Dict[str, int]]) -> Dict[str, int]:
    """Total byte counts per language, largest first."""
    totals: Counter = Counter()
    for languages in language_maps:
        totals.update(languages)
    return dict(totals.most_common())


@dataclass
class DashboardSnapshot:
    """All dashboard widgets for one user. Dates are None when there is no data yet."""

    login: str
    location: Optional[str]
    avatar_url: str
    created_at: datetime
    first_repository_date: Optional[datetime]
    first_commit_date: Optional[datetime]
    opened_issues: int
    closed_issues: int
    commits: int
    coded_lines: int
    created_repositories: int
    forked_repositories: int
    stars: int
    repository_languages: List[Dict[str, int]] = field(default_factory=list)

    @property
    def languages(self) -> Dict[str, int]:
        return sum_languages(self.repository_languages)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        for key, value in data.items():
            if isinstance(value, datetime):
                data[key] = value.isoformat()
        data["languages"] = self.languages
        return data


class DashboardService:
    """Runs every widget query concurrently against one InsightsService."""

    def __init__(self, insights: InsightsService):
        self.insights = insights

    async def collect(self) -> DashboardSnapshot:
        """
        Collect a full dashboard snapshot.

        Raises:
            RemoteRequestError: If any widget query fails (AuthError for bad tokens).
        """
        user = await self.insights.user()
        logger.info(f"Collecting dashboard for {user.login}")

        (
            first_repository_date,
            first_commit_date,
            repository_languages,
            opened_issues,
            closed_issues,
            commits,
            coded_lines,
            created_repositories,
            forked_repositories,
            stars,
        ) = await asyncio.gather(
            _or_none(self.insights.user_first_repository_date()),
            _or_none(self.insights.user_first_commit_date()),
            self.insights.user_languages(),
            self.insights.user_opened_issues(),
            self.insights.user_closed_issues(),
            self.insights.user_count_commits(),
            self.insights.user_count_coded_lines(),
            self.insights.user_count_created_repositories(),
            self.insights.user_count_forked_repositories(),
            self.insights.user_count_stars_repositories(),
        )

        return DashboardSnapshot(
            login=user.login,
            location=user.location,
            avatar_url=user.avatar_url,
            created_at=user.created_at,
            first_repository_date=first_repository_date,
            first_commit_date=first_commit_date,
            opened_issues=opened_issues,
            closed_issues=closed_issues,
            commits=commits,
            coded_lines=coded_lines,
            created_repositories=created_repositories,
            forked_repositories=forked_repositories,
            stars=stars,
            repository_languages=repository_languages,
        )


async def _or_none(awaitable: Awaitable[datetime]) -> Optional[datetime]:
    try:
        return await awaitable
    except EmptyResultError as e:
        logger.info(f"No data: {e}")
        return None
