"""In-memory stand-ins for the GitHub REST client."""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from typing import Dict, List, Optional

from gitinsights.domain.commit import Commit, CommitStats
from gitinsights.domain.issue import Issue, IssueState
from gitinsights.domain.repository import Repository
from gitinsights.domain.user import User
from gitinsights.infrastructure.github_client import RemoteRequestError


def at(day: str) -> datetime:
    return datetime.fromisoformat(day).replace(tzinfo=timezone.utc)


def make_repo(
    full_name: str,
    *,
    fork: bool = False,
    stars: int = 0,
    created: str = "2020-01-01",
    private: bool = False,
) -> Repository:
    owner, name = full_name.split("/", 1)
    return Repository(
        full_name=full_name,
        name=name,
        owner=owner,
        fork=fork,
        stars=stars,
        created_at=at(created),
        private=private,
    )


def make_commit(sha: str, author: Optional[str], day: str = "2021-01-01") -> Commit:
    return Commit(
        sha=sha,
        url=f"https://api.github.com/repos/x/y/commits/{sha}",
        author_login=author,
        authored_at=at(day),
        committed_at=at(day),
    )


class FakeGitHubClient:
    """Serves canned entities and records every call it receives."""

    def __init__(
        self,
        login: str = "octocat",
        public: Optional[List[Repository]] = None,
        private: Optional[List[Repository]] = None,
        commits: Optional[Dict[str, List[Commit]]] = None,
        languages: Optional[Dict[str, Dict[str, int]]] = None,
        additions: Optional[Dict[str, int]] = None,
        issues: Optional[List[Issue]] = None,
        failing: Optional[Dict[str, int]] = None,
    ):
        self.user = User(
            login=login,
            avatar_url=f"https://avatars.example/{login}.png",
            created_at=at("2015-03-04"),
            location="Lyon",
        )
        self.public = list(public or [])
        self.private = list(private or [])
        self.commits = commits or {}
        self.languages = languages or {}
        self.additions = additions or {}
        self.issues = issues or []
        self.failing = failing or {}
        self.calls: List[tuple] = []
        self.in_flight: Dict[str, int] = {}
        self.max_in_flight: Dict[str, int] = {}

    async def _pause(self, kind: str) -> None:
        """Yield to the event loop while counting how many calls of ``kind`` overlap."""
        self.in_flight[kind] = self.in_flight.get(kind, 0) + 1
        self.max_in_flight[kind] = max(self.max_in_flight.get(kind, 0), self.in_flight[kind])
        try:
            await asyncio.sleep(0)
        finally:
            self.in_flight[kind] -= 1

    def _check(self, key: str) -> None:
        if key in self.failing:
            raise RemoteRequestError(self.failing[key], f"https://api.github.com{key}", {"message": "Not Found"})

    async def get_user(self) -> User:
        self.calls.append(("user",))
        return self.user

    async def get_public_repos(self, login: str) -> List[Repository]:
        self.calls.append(("public_repos", login))
        return list(self.public)

    async def get_user_repos(self, visibility: str = "all") -> List[Repository]:
        self.calls.append(("user_repos", visibility))
        if visibility == "private":
            return list(self.private)
        return list(self.public) + list(self.private)

    async def get_repo_commits(self, full_name: str) -> List[Commit]:
        self.calls.append(("commits", full_name))
        await self._pause("commits")
        self._check(f"/repos/{full_name}/commits")
        return list(self.commits.get(full_name, []))

    async def get_repo_languages(self, full_name: str) -> Dict[str, int]:
        self.calls.append(("languages", full_name))
        await self._pause("languages")
        return dict(self.languages.get(full_name, {}))

    async def get_user_issues(self) -> List[Issue]:
        self.calls.append(("issues",))
        return list(self.issues)

    async def get_commit_stats(self, url: str) -> CommitStats:
        self.calls.append(("stats", url))
        await self._pause("stats")
        added = self.additions.get(url, 0)
        return CommitStats(additions=added, deletions=0, total=added)


def issue(number: int, state: str) -> Issue:
    return Issue(number=number, state=IssueState(state), repository="octocat/hello")
