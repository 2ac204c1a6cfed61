"""Application service aggregating GitHub statistics for the authenticated user."""

import asyncio
import logging
import operator
from datetime import datetime
from functools import reduce
from typing import Awaitable, Callable, Dict, List, Sequence, TypeVar, Union

from gitinsights.config import (
    DEFAULT_PRIVATE_VISIBILITY,
    DEFAULT_STATS_CONCURRENCY,
    LAST_COMMITS_WINDOW,
    PRIVATE_VISIBILITY_CHOICES,
)
from gitinsights.domain.commit import Commit
from gitinsights.domain.dates import last_n, oldest_commit, oldest_of, oldest_repository
from gitinsights.domain.errors import EmptyResultError
from gitinsights.domain.issue import Issue, IssueState
from gitinsights.domain.repository import Repository
from gitinsights.domain.user import User
from gitinsights.infrastructure.github_client import GitHubRestClient

logger = logging.getLogger(__name__)

RepoSource = Callable[[], Awaitable[List[Repository]]]

T = TypeVar("T")
R = TypeVar("R")


class InsightsService:
    """
    Aggregates statistics across the user's public and private repositories.

    Every operation is a coroutine that issues its own remote calls; nothing
    is cached between calls. A failure in any fetched branch fails the whole
    operation.

    Two repository sources are exposed, ``public_repos`` and ``private_repos``.
    With ``private_visibility="private"`` they are disjoint, so user-level
    totals built by adding both never count a repository twice. With
    ``private_visibility="all"`` the private source lists every repository the
    token can see and public repositories are counted on both sides.
    """

    COMMITS_WINDOW = LAST_COMMITS_WINDOW

    def __init__(
        self,
        github_client: GitHubRestClient,
        private_visibility: str = DEFAULT_PRIVATE_VISIBILITY,
        stats_concurrency: int = DEFAULT_STATS_CONCURRENCY,
    ):
        """
        Initialize insights service.

        Args:
            github_client: Authenticated GitHub REST client
            private_visibility: Scope of the private source, "private" or "all"
            stats_concurrency: Maximum commit-detail requests in flight at once
        """
        if private_visibility not in PRIVATE_VISIBILITY_CHOICES:
            raise ValueError(f"Unknown private visibility: {private_visibility!r}")
        if stats_concurrency < 1:
            raise ValueError("stats_concurrency must be at least 1")

        self.github_client = github_client
        self.private_visibility = private_visibility
        self.stats_concurrency = stats_concurrency

    async def combine_by_source(
        self,
        op: Callable[[RepoSource], Awaitable[T]],
        combine: Callable[[T, T], R],
    ) -> R:
        """Run ``op`` against the public and the private source concurrently and combine both results."""
        public_result, private_result = await asyncio.gather(
            op(self.public_repos),
            op(self.private_repos),
        )
        return combine(public_result, private_result)

    # Profile

    async def user(self) -> User:
        return await self.github_client.get_user()

    async def get_login(self) -> str:
        user = await self.user()
        return user.login

    async def user_location(self):
        user = await self.user()
        return user.location

    async def user_avatar_url(self) -> str:
        user = await self.user()
        return user.avatar_url

    async def user_creation(self) -> datetime:
        user = await self.user()
        return user.created_at

    # Timeline

    async def user_first_date(
        self,
        public_fn: Callable[[], Awaitable[Sequence[T]]],
        private_fn: Callable[[], Awaitable[Sequence[T]]],
        rank_fn: Callable[[Sequence[T]], T],
    ) -> datetime:
        """
        Return the date of the oldest item across both sources.

        ``rank_fn`` picks the oldest item of one source. A source with no
        items is left out.

        Raises:
            EmptyResultError: If neither source has any item.
        """
        public_items, private_items = await asyncio.gather(public_fn(), private_fn())
        candidates = [rank_fn(items) for items in (public_items, private_items) if items]
        if not candidates:
            raise EmptyResultError("Neither the public nor the private source returned any item")
        return reduce(oldest_of, candidates).date

    async def user_first_repository_date(self) -> datetime:
        return await self.user_first_date(
            lambda: self.personal_repos(self.public_repos),
            lambda: self.personal_repos(self.private_repos),
            oldest_repository,
        )

    async def user_first_commit_date(self) -> datetime:
        return await self.user_first_date(
            lambda: self.repos_personal_commits(self.public_repos),
            lambda: self.repos_personal_commits(self.private_repos),
            oldest_commit,
        )

    # Languages

    async def repo_languages(self, full_name: str) -> Dict[str, int]:
        return await self.github_client.get_repo_languages(full_name)

    async def user_languages(self) -> List[Dict[str, int]]:
        """Return one language map per repository visible to the token, in repository order."""
        repos = await self.visible_repos()
        logger.info(f"Fetching languages for {len(repos)} repositories")
        return list(await asyncio.gather(*(self.repo_languages(repo.full_name) for repo in repos)))

    # Issues

    async def issues(self) -> List[Issue]:
        return await self.github_client.get_user_issues()

    async def user_issues_by_state(self, state: Union[IssueState, str]) -> int:
        wanted = IssueState(state)
        issues = await self.issues()
        return sum(1 for issue in issues if issue.state == wanted)

    async def user_opened_issues(self) -> int:
        return await self.user_issues_by_state(IssueState.OPEN)

    async def user_closed_issues(self) -> int:
        return await self.user_issues_by_state(IssueState.CLOSED)

    # Commits and coded lines

    async def repo_commits(self, full_name: str) -> List[Commit]:
        return await self.github_client.get_repo_commits(full_name)

    async def repos_personal_commits(self, source: RepoSource) -> List[Commit]:
        """Return the commits authored by the current user across every repository of ``source``."""
        repos = await source()
        login = await self.get_login()

        async def personal_commits(repo: Repository) -> List[Commit]:
            commits = await self.repo_commits(repo.full_name)
            return [commit for commit in commits if commit.is_authored_by(login)]

        results = await asyncio.gather(*(personal_commits(repo) for repo in repos))
        return [commit for commits in results for commit in commits]

    async def repos_count_coded_lines_for_last_hundred_commits(
        self,
        source1: RepoSource,
        source2: RepoSource,
    ) -> int:
        """
        Sum the lines added by the user's most recent personal commits.

        Each commit needs its own detail request; at most
        ``stats_concurrency`` of them run at once.
        """
        first, second = await asyncio.gather(
            self.repos_personal_commits(source1),
            self.repos_personal_commits(source2),
        )
        commits = last_n(first + second, self.COMMITS_WINDOW)
        logger.info(f"Fetching stats for {len(commits)} commits")

        semaphore = asyncio.Semaphore(self.stats_concurrency)

        async def additions(commit: Commit) -> int:
            async with semaphore:
                stats = await self.github_client.get_commit_stats(commit.url)
            return stats.additions

        return sum(await asyncio.gather(*(additions(commit) for commit in commits)))

    async def user_count_coded_lines(self) -> int:
        return await self.repos_count_coded_lines_for_last_hundred_commits(self.public_repos, self.private_repos)

    async def user_count_commits(self) -> int:
        async def count(source: RepoSource) -> int:
            return len(await self.repos_personal_commits(source))

        return await self.combine_by_source(count, operator.add)

    # Repositories

    async def public_repos(self) -> List[Repository]:
        login = await self.get_login()
        return await self.github_client.get_public_repos(login)

    async def private_repos(self) -> List[Repository]:
        return await self.github_client.get_user_repos(visibility=self.private_visibility)

    async def visible_repos(self) -> List[Repository]:
        return await self.github_client.get_user_repos(visibility="all")

    async def personal_repos(self, source: RepoSource) -> List[Repository]:
        repos = await source()
        login = await self.get_login()
        return [repo for repo in repos if repo.is_owned_by(login)]

    async def repos_count_forked_repositories(self, source: RepoSource) -> int:
        repos = await source()
        return sum(1 for repo in repos if repo.fork)

    async def repos_count_stars_repositories(self, source: RepoSource) -> int:
        repos = await source()
        return sum(repo.stars for repo in repos)

    async def user_count_created_repositories(self) -> int:
        async def count(source: RepoSource) -> int:
            return len(await self.personal_repos(source))

        return await self.combine_by_source(count, operator.add)

    async def user_count_forked_repositories(self) -> int:
        return await self.combine_by_source(self.repos_count_forked_repositories, operator.add)

    async def user_count_stars_repositories(self) -> int:
        return await self.combine_by_source(self.repos_count_stars_repositories, operator.add)
