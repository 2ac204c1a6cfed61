#!/usr/bin/env python3
"""Script to obtain a GitHub token through the OAuth web flow."""

import logging
import sys
import os

# Add project root to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from gitinsights.config import ConfigError, Settings
from gitinsights.infrastructure.oauth import OAuthError, authorize_url, exchange_code

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger(__name__)


def main(argv=None):
    """Print the authorize URL, or exchange the code given as first argument for a token."""
    argv = sys.argv[1:] if argv is None else argv
    try:
        settings = Settings.from_env()
    except ConfigError as e:
        logger.error(f"Invalid configuration: {e}")
        return 1

    if not settings.client_id:
        logger.error("GITHUB_CLIENT_ID is not set")
        return 1

    if not argv:
        print(authorize_url(settings.client_id))
        return 0

    if not settings.client_secret:
        logger.error("GITHUB_CLIENT_SECRET is not set")
        return 1

    try:
        token = exchange_code(settings.client_id, settings.client_secret, argv[0], timeout=settings.request_timeout)
    except OAuthError as e:
        logger.error(f"Login failed: {e}")
        return 1

    print(token)
    return 0


if __name__ == "__main__":
    sys.exit(main())
