"""GitHub OAuth web flow: build the authorize redirect and exchange the code for a token."""

import logging
from typing import Optional
from urllib.parse import urlencode

import requests

from gitinsights.config import (
    GITHUB_OAUTH_AUTHORIZE_URL,
    GITHUB_OAUTH_DEFAULT_SCOPE,
    GITHUB_OAUTH_TOKEN_URL,
    GITHUB_REQUEST_TIMEOUT_SECONDS,
)

logger = logging.getLogger(__name__)


class OAuthError(Exception):
    """Raised when GitHub refuses to exchange an authorization code."""
    pass


def authorize_url(client_id: str, scope: str = GITHUB_OAUTH_DEFAULT_SCOPE, state: Optional[str] = None) -> str:
    params = {"client_id": client_id, "scope": scope}
    if state:
        params["state"] = state
    return f"{GITHUB_OAUTH_AUTHORIZE_URL}?{urlencode(params)}"


def exchange_code(
    client_id: str,
    client_secret: str,
    code: str,
    timeout: float = GITHUB_REQUEST_TIMEOUT_SECONDS,
) -> str:
    """
    Exchange an OAuth authorization code for an access token.

    Args:
        client_id: OAuth application client id
        client_secret: OAuth application client secret
        code: Code GitHub appended to the redirect URL

    Returns:
        The bearer token to hand to GitHubRestClient

    Raises:
        OAuthError: If GitHub rejects the code or answers without a token
    """
    response = requests.post(
        GITHUB_OAUTH_TOKEN_URL,
        data={"client_id": client_id, "client_secret": client_secret, "code": code},
        headers={"Accept": "application/json"},
        timeout=timeout,
    )

    if not response.ok:
        raise OAuthError(f"Token exchange failed with status {response.status_code}")

    try:
        payload = response.json()
    except ValueError as e:
        raise OAuthError("Token exchange response was not JSON") from e

    # GitHub reports bad codes with a 200 and an "error" field
    if "error" in payload:
        description = payload.get("error_description") or payload["error"]
        raise OAuthError(f"Token exchange rejected: {description}")

    token = payload.get("access_token")
    if not token:
        raise OAuthError("Token exchange response did not contain an access_token")

    logger.info(f"Obtained access token with scope '{payload.get('scope', '')}'")
    return token
