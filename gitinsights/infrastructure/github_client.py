"""GitHub REST API client with typed decoding of responses."""

import asyncio
import logging
import os
from datetime import datetime
from typing import Any, Dict, List, Optional

import requests

from gitinsights.config import (
    GITHUB_API_ACCEPT_HEADER,
    GITHUB_API_BASE_URL,
    GITHUB_REQUEST_TIMEOUT_SECONDS,
    Settings,
)
from gitinsights.domain.commit import Commit, CommitStats
from gitinsights.domain.errors import DecodeError
from gitinsights.domain.issue import Issue, IssueState
from gitinsights.domain.repository import Repository
from gitinsights.domain.user import User

logger = logging.getLogger(__name__)

USER_ENDPOINT = "/user"
USER_REPOS_ENDPOINT = "/user/repos"
USER_ISSUES_ENDPOINT = "/user/issues"
PUBLIC_REPOS_ENDPOINT_TEMPLATE = "/users/{login}/repos"
REPO_COMMITS_ENDPOINT_TEMPLATE = "/repos/{full_name}/commits"
REPO_LANGUAGES_ENDPOINT_TEMPLATE = "/repos/{full_name}/languages"

_NOT_JSON = object()


class RemoteRequestError(Exception):
    """Raised when GitHub answers with a non-success HTTP status."""

    def __init__(self, status: int, url: str, body: Any, reason: str = ""):
        message = body.get("message") if isinstance(body, dict) else None
        super().__init__(f"{status} error requesting {url}: {message or reason}")
        self.status = status
        self.url = url
        self.body = body


class AuthError(RemoteRequestError):
    """Raised on 401/403 responses: the token is missing, invalid or expired."""

    STATUSES = (401, 403)


class GitHubRestClient:
    """Client for the GitHub REST API (v3) authenticated with a user token."""

    def __init__(
        self,
        token: Optional[str] = None,
        base_url: str = GITHUB_API_BASE_URL,
        timeout: float = GITHUB_REQUEST_TIMEOUT_SECONDS,
    ):
        """
        Initialize GitHub REST client.

        Args:
            token: OAuth or personal access token. If None, uses GITHUB_TOKEN env var.
            base_url: API root that relative paths are resolved against.
            timeout: Per-request timeout in seconds.
        """
        if token is None:
            token = os.getenv("GITHUB_TOKEN")

        self.token = token
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.headers = {
            "Accept": GITHUB_API_ACCEPT_HEADER,
        }

        if self.token:
            self.headers["Authorization"] = f"token {self.token}"
        else:
            logger.warning("No GitHub token configured; private data will be unavailable")

    @classmethod
    def from_settings(cls, settings: Settings) -> "GitHubRestClient":
        return cls(
            token=settings.github_token,
            base_url=settings.api_base_url,
            timeout=settings.request_timeout,
        )

    def resolve_url(self, path: str, absolute_url: bool = False) -> str:
        return path if absolute_url else f"{self.base_url}{path}"

    def _execute_request(self, url: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """
        Perform one blocking GET and decode its JSON body.

        The body is decoded before the status check so that error payloads
        are attached to the raised exception.

        Raises:
            AuthError: On 401 or 403.
            RemoteRequestError: On any other non-success status.
            DecodeError: If a successful response is not JSON.
        """
        logger.debug(f"GET {url} params={params}")
        response = requests.get(url, headers=self.headers, params=params, timeout=self.timeout)

        remaining = response.headers.get("X-RateLimit-Remaining")
        if remaining is not None:
            logger.debug(f"Rate limit remaining: {remaining}")

        try:
            data = response.json()
        except ValueError:
            data = _NOT_JSON

        if not response.ok:
            body = response.text if data is _NOT_JSON else data
            resolved = response.url or url
            error_cls = AuthError if response.status_code in AuthError.STATUSES else RemoteRequestError
            logger.warning(f"Request to {resolved} failed with status {response.status_code}")
            raise error_cls(response.status_code, resolved, body, response.reason or "")

        if data is _NOT_JSON:
            raise DecodeError("response", url, "not valid JSON")

        return data

    async def request(
        self,
        path: str,
        absolute_url: bool = False,
        params: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """
        Request a path (or an absolute URL) and return the decoded JSON.

        The blocking HTTP call runs in a worker thread so that concurrent
        requests overlap.
        """
        url = self.resolve_url(path, absolute_url)
        return await asyncio.to_thread(self._execute_request, url, params)

    async def get_user(self) -> User:
        data = await self.request(USER_ENDPOINT)
        return parse_user(data)

    async def get_user_repos(self, visibility: str = "all") -> List[Repository]:
        data = await self.request(USER_REPOS_ENDPOINT, params={"visibility": visibility})
        return [parse_repository(node) for node in _expect_list(data, "repository list")]

    async def get_public_repos(self, login: str) -> List[Repository]:
        data = await self.request(PUBLIC_REPOS_ENDPOINT_TEMPLATE.format(login=login))
        return [parse_repository(node) for node in _expect_list(data, "repository list")]

    async def get_user_issues(self) -> List[Issue]:
        data = await self.request(USER_ISSUES_ENDPOINT, params={"filter": "all", "state": "all"})
        return [parse_issue(node) for node in _expect_list(data, "issue list")]

    async def get_repo_commits(self, full_name: str) -> List[Commit]:
        data = await self.request(REPO_COMMITS_ENDPOINT_TEMPLATE.format(full_name=full_name))
        return [parse_commit(node) for node in _expect_list(data, "commit list")]

    async def get_repo_languages(self, full_name: str) -> Dict[str, int]:
        data = await self.request(REPO_LANGUAGES_ENDPOINT_TEMPLATE.format(full_name=full_name))
        return parse_languages(data)

    async def get_commit_stats(self, url: str) -> CommitStats:
        data = await self.request(url, absolute_url=True)
        return parse_commit_stats(data)


def _expect_list(data: Any, entity: str) -> List[Any]:
    if not isinstance(data, list):
        raise DecodeError(entity, "<root>", "not a JSON array")
    return data


def _field(node: Any, key: str, entity: str, kind=None) -> Any:
    if not isinstance(node, dict) or node.get(key) is None:
        raise DecodeError(entity, key)
    value = node[key]
    # bool is an int subclass; a flag is never a count
    if kind is not None and (not isinstance(value, kind) or (kind is int and isinstance(value, bool))):
        raise DecodeError(entity, key, f"not of type {kind.__name__}")
    return value


def _datetime(node: Any, key: str, entity: str) -> datetime:
    raw = _field(node, key, entity, str)
    try:
        return datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except ValueError as e:
        raise DecodeError(entity, key, f"not an ISO-8601 date ({raw!r})") from e


def parse_repository(node: Any) -> Repository:
    owner = _field(node, "owner", "repository", dict)
    stars = _field(node, "stargazers_count", "repository", int)
    if stars < 0:
        raise DecodeError("repository", "stargazers_count", "negative")

    return Repository(
        full_name=_field(node, "full_name", "repository", str),
        name=_field(node, "name", "repository", str),
        owner=_field(owner, "login", "repository.owner", str),
        fork=_field(node, "fork", "repository", bool),
        stars=stars,
        created_at=_datetime(node, "created_at", "repository"),
        private=bool(node.get("private", False)),
    )


def parse_commit(node: Any) -> Commit:
    details = _field(node, "commit", "commit", dict)
    # author is null when the commit email is not linked to a GitHub account
    author = node.get("author")
    author_login = author.get("login") if isinstance(author, dict) else None

    return Commit(
        sha=_field(node, "sha", "commit", str),
        url=_field(node, "url", "commit", str),
        author_login=author_login,
        authored_at=_datetime(_field(details, "author", "commit.commit", dict), "date", "commit.author"),
        committed_at=_datetime(_field(details, "committer", "commit.commit", dict), "date", "commit.committer"),
    )


def parse_commit_stats(node: Any) -> CommitStats:
    stats = _field(node, "stats", "commit detail", dict)
    return CommitStats(
        additions=_field(stats, "additions", "commit.stats", int),
        deletions=_field(stats, "deletions", "commit.stats", int),
        total=_field(stats, "total", "commit.stats", int),
    )


def parse_issue(node: Any) -> Issue:
    raw_state = _field(node, "state", "issue", str)
    try:
        state = IssueState(raw_state)
    except ValueError as e:
        raise DecodeError("issue", "state", f"unknown ({raw_state!r})") from e

    repository = node.get("repository")
    return Issue(
        number=_field(node, "number", "issue", int),
        state=state,
        repository=repository.get("full_name") if isinstance(repository, dict) else None,
    )


def parse_user(node: Any) -> User:
    return User(
        login=_field(node, "login", "user", str),
        avatar_url=_field(node, "avatar_url", "user", str),
        created_at=_datetime(node, "created_at", "user"),
        location=node.get("location"),
    )


def parse_languages(node: Any) -> Dict[str, int]:
    if not isinstance(node, dict):
        raise DecodeError("languages", "<root>", "not a JSON object")
    for language, size in node.items():
        if not isinstance(size, int) or isinstance(size, bool):
            raise DecodeError("languages", language, "not a byte count")
    return dict(node)
