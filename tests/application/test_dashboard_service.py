"""Tests for the dashboard snapshot collection."""

from __future__ import annotations

import asyncio

import pytest

from gitinsights.application.dashboard_service import DashboardService, sum_languages
from gitinsights.application.insights_service import InsightsService
from gitinsights.infrastructure.github_client import AuthError
from tests._fixtures.github_fakes import at, issue, make_commit


def test_sum_languages_orders_by_size() -> None:
    totals = sum_languages([{"Python": 10, "Go": 50}, {"Python": 45}, {}])

    assert totals == {"Python": 55, "Go": 50}
    assert list(totals) == ["Python", "Go"]


def test_collect_builds_full_snapshot(fake_client, service) -> None:
    fake_client.commits = {
        "octocat/hello": [make_commit("h1", "octocat", "2019-01-01")],
        "octocat/secret": [make_commit("s1", "octocat", "2018-01-01")],
    }
    fake_client.additions = {commit.url: 5 for commits in fake_client.commits.values() for commit in commits}
    fake_client.languages = {"octocat/hello": {"Python": 10}, "octocat/secret": {"Python": 5, "C": 1}}
    fake_client.issues = [issue(1, "open"), issue(2, "closed")]

    snapshot = asyncio.run(DashboardService(service).collect())

    assert snapshot.login == "octocat"
    assert snapshot.first_repository_date == at("2014-11-20")
    assert snapshot.first_commit_date == at("2018-01-01")
    assert (snapshot.opened_issues, snapshot.closed_issues) == (1, 1)
    assert snapshot.commits == 2
    assert snapshot.coded_lines == 10
    assert (snapshot.created_repositories, snapshot.forked_repositories, snapshot.stars) == (2, 1, 8)
    assert snapshot.languages == {"Python": 15, "C": 1}

    data = snapshot.to_dict()
    assert data["first_commit_date"] == "2018-01-01T00:00:00+00:00"
    assert data["languages"] == {"Python": 15, "C": 1}


def test_collect_reports_missing_dates_as_none(service) -> None:
    snapshot = asyncio.run(DashboardService(service).collect())

    assert snapshot.first_commit_date is None
    assert snapshot.commits == 0
    assert snapshot.coded_lines == 0
    assert snapshot.to_dict()["first_commit_date"] is None


def test_collect_propagates_auth_errors() -> None:
    class ExpiredClient:
        async def get_user(self):
            raise AuthError(401, "https://api.github.com/user", {"message": "Bad credentials"})

    with pytest.raises(AuthError):
        asyncio.run(DashboardService(InsightsService(ExpiredClient())).collect())
