#!/usr/bin/env python3
"""
Info script for GitStarBot.
Shows public metadata of the configured repositories.
"""

import sys
import argparse

from core.exceptions import ConfigurationError
from core.use_cases import GetRepositoryInfo
from infrastructure.config import load_config, split_repositories
from infrastructure.github_client import GitHubClient
from infrastructure.logging_config import configure_logging


def main(argv=None):
    """Main info entry point."""
    parser = argparse.ArgumentParser(
        description="Show metadata of GitHub repositories"
    )
    parser.add_argument(
        "--repos",
        type=str,
        help="Comma-separated owner/name list (default: REPOSITORIES env var)",
    )
    parser.add_argument("--env-file", type=str, help="Path of the .env file to load")
    parser.add_argument("--no-color", action="store_true", help="Disable coloured output")
    args = parser.parse_args(argv)

    logger = configure_logging(no_color=args.no_color)

    try:
        config = load_config(
            env_file=args.env_file,
            repositories=split_repositories(args.repos) if args.repos else None,
        )
        if not config.credential:
            raise ConfigurationError("GITHUB_TOKEN is not configured")

        github = GitHubClient(token=config.credential)
        infos = GetRepositoryInfo(github, log=logger).execute(config.repositories)

        for info in infos:
            logger.info(
                f"{info.full_name:40s} {info.stars:8,} stars  "
                f"{info.language or '-':12s} {info.url}"
            )
            if info.description:
                logger.info(f"    {info.description}")

        logger.info(f"{len(infos)} repositories found")
        return 0

    except ConfigurationError as e:
        logger.error(str(e))
        return 1

    except Exception as e:
        logger.error(f"Lookup failed: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
