"""Runtime configuration for the GitHub insights service."""

import os
from dataclasses import dataclass
from typing import Optional

# GitHub REST API
GITHUB_API_BASE_URL = "https://api.github.com"
GITHUB_API_ACCEPT_HEADER = "application/vnd.github.v3+json"
GITHUB_REQUEST_TIMEOUT_SECONDS = 30.0

# OAuth web flow
GITHUB_OAUTH_AUTHORIZE_URL = "https://github.com/login/oauth/authorize"
GITHUB_OAUTH_TOKEN_URL = "https://github.com/login/oauth/access_token"
GITHUB_OAUTH_DEFAULT_SCOPE = "repo user"

# Aggregation
LAST_COMMITS_WINDOW = 100
DEFAULT_STATS_CONCURRENCY = 10
PRIVATE_VISIBILITY_CHOICES = ("private", "all")
DEFAULT_PRIVATE_VISIBILITY = "private"

# Environment variable names
ENV_GITHUB_TOKEN = "GITHUB_TOKEN"
ENV_GITHUB_API_URL = "GITHUB_API_URL"
ENV_GITHUB_CLIENT_ID = "GITHUB_CLIENT_ID"
ENV_GITHUB_CLIENT_SECRET = "GITHUB_CLIENT_SECRET"
ENV_PRIVATE_VISIBILITY = "GITINSIGHTS_PRIVATE_VISIBILITY"
ENV_STATS_CONCURRENCY = "GITINSIGHTS_STATS_CONCURRENCY"
ENV_REQUEST_TIMEOUT = "GITINSIGHTS_REQUEST_TIMEOUT"


class ConfigError(ValueError):
    """Raised when an environment setting has an unusable value."""
    pass


@dataclass
class Settings:
    github_token: Optional[str] = None
    api_base_url: str = GITHUB_API_BASE_URL
    request_timeout: float = GITHUB_REQUEST_TIMEOUT_SECONDS
    private_visibility: str = DEFAULT_PRIVATE_VISIBILITY
    stats_concurrency: int = DEFAULT_STATS_CONCURRENCY
    client_id: Optional[str] = None
    client_secret: Optional[str] = None

    def __post_init__(self):
        if self.private_visibility not in PRIVATE_VISIBILITY_CHOICES:
            raise ConfigError(
                f"private_visibility must be one of {PRIVATE_VISIBILITY_CHOICES}, "
                f"got {self.private_visibility!r}"
            )
        if self.stats_concurrency < 1:
            raise ConfigError(f"stats_concurrency must be at least 1, got {self.stats_concurrency}")
        if self.request_timeout <= 0:
            raise ConfigError(f"request_timeout must be positive, got {self.request_timeout}")

    @classmethod
    def from_env(cls) -> "Settings":
        """
        Build settings from environment variables.
        
        Raises:
            ConfigError: If a numeric variable cannot be parsed or a value is out of range.
        """
        return cls(
            github_token=os.getenv(ENV_GITHUB_TOKEN) or None,
            api_base_url=os.getenv(ENV_GITHUB_API_URL, GITHUB_API_BASE_URL).rstrip("/"),
            request_timeout=_env_number(ENV_REQUEST_TIMEOUT, float, GITHUB_REQUEST_TIMEOUT_SECONDS),
            private_visibility=os.getenv(ENV_PRIVATE_VISIBILITY, DEFAULT_PRIVATE_VISIBILITY).strip().lower(),
            stats_concurrency=_env_number(ENV_STATS_CONCURRENCY, int, DEFAULT_STATS_CONCURRENCY),
            client_id=os.getenv(ENV_GITHUB_CLIENT_ID) or None,
            client_secret=os.getenv(ENV_GITHUB_CLIENT_SECRET) or None,
        )


def _env_number(name: str, kind, default):
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return kind(raw.strip())
    except ValueError as e:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from e
