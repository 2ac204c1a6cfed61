#!/usr/bin/env python3
"""Script to collect the GitHub insights dashboard for the token's user."""

import argparse
import asyncio
import json
import logging
import sys
import os

# Add project root to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from gitinsights.config import ConfigError, Settings
from gitinsights.infrastructure.github_client import AuthError, GitHubRestClient, RemoteRequestError
from gitinsights.application.insights_service import InsightsService
from gitinsights.application.dashboard_service import DashboardService

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_AUTH = 2


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Aggregate GitHub statistics for the authenticated user.")
    parser.add_argument("--json", dest="json_path", help="Also write the snapshot as JSON to this path")
    return parser.parse_args(argv)


def main(argv=None):
    """Collect and report every dashboard metric."""
    args = parse_args(argv)
    try:
        settings = Settings.from_env()
        if not settings.github_token:
            logger.error("GITHUB_TOKEN not found. Run scripts/exchange_code.py to obtain one.")
            return EXIT_AUTH

        github_client = GitHubRestClient.from_settings(settings)
        insights = InsightsService(
            github_client,
            private_visibility=settings.private_visibility,
            stats_concurrency=settings.stats_concurrency,
        )
        snapshot = asyncio.run(DashboardService(insights).collect())

        for key, value in snapshot.to_dict().items():
            if key == "repository_languages":
                continue
            logger.info(f"{key}: {'-' if value is None else value}")

        if args.json_path:
            with open(args.json_path, "w", encoding="utf-8") as handle:
                json.dump(snapshot.to_dict(), handle, indent=2)
            logger.info(f"Snapshot written to {args.json_path}")

        return EXIT_OK

    except AuthError as e:
        logger.error(f"GitHub rejected the token, log in again: {e}")
        return EXIT_AUTH
    except ConfigError as e:
        logger.error(f"Invalid configuration: {e}")
        return EXIT_FAILED
    except RemoteRequestError as e:
        logger.error(f"GitHub request failed, try again later: {e}")
        return EXIT_FAILED
    except Exception as e:
        logger.error(f"Dashboard failed: {e}", exc_info=True)
        return EXIT_FAILED


if __name__ == "__main__":
    sys.exit(main())
