from __future__ import annotations

import pytest

from gitinsights.application.insights_service import InsightsService
from tests._fixtures.github_fakes import FakeGitHubClient, make_repo


@pytest.fixture
def fake_client() -> FakeGitHubClient:
    """Two public repos (one a fork of someone else's project) and one private repo."""
    return FakeGitHubClient(
        login="octocat",
        public=[
            make_repo("octocat/hello", stars=3, created="2016-05-01"),
            make_repo("upstream/tool", fork=True, stars=0, created="2018-02-10"),
        ],
        private=[
            make_repo("octocat/secret", stars=5, created="2014-11-20", private=True),
        ],
    )


@pytest.fixture
def service(fake_client: FakeGitHubClient) -> InsightsService:
    return InsightsService(fake_client)
