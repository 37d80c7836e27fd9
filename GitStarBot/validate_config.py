#!/usr/bin/env python3
"""
Configuration check script for GitStarBot.
Validates settings and diagnoses the GitHub token's permissions.
"""

import sys
import argparse

import requests

from core.exceptions import ConfigurationError
from core.validators import looks_like_github_token, parse_repository
from infrastructure.config import load_config
from infrastructure.github_client import GitHubAPIError, GitHubClient
from infrastructure.logging_config import SUCCESS, configure_logging

STAR_SCOPES = ("repo", "public_repo")


def check_token_scopes(github: GitHubClient, logger) -> None:
    """Report whether a classic token carries a scope that allows starring."""
    scopes = github.get_token_scopes()
    if not scopes:
        logger.debug("No OAuth scopes reported (fine-grained token?)")
        return

    logger.info(f"Token scopes: {', '.join(scopes)}")
    if any(scope in STAR_SCOPES for scope in scopes):
        logger.log(SUCCESS, "Token has a scope that allows starring")
    else:
        logger.warning("Token may lack the required scope: public_repo or repo")


def main(argv=None):
    """Validate configuration and exit non-zero when it is unusable."""
    parser = argparse.ArgumentParser(
        description="Validate GitStarBot configuration and token permissions"
    )
    parser.add_argument("--env-file", type=str, help="Path of the .env file to load")
    parser.add_argument("--no-color", action="store_true", help="Disable coloured output")
    args = parser.parse_args(argv)

    logger = configure_logging(no_color=args.no_color)
    logger.info("Validating bot configuration...")

    try:
        config = load_config(env_file=args.env_file)
    except ConfigurationError as e:
        logger.error(str(e))
        return 1

    has_errors = False

    if not config.credential:
        logger.error("GITHUB_TOKEN is not configured")
        has_errors = True
    elif not looks_like_github_token(config.credential):
        logger.warning("GITHUB_TOKEN may not be a valid GitHub token")
    else:
        logger.log(SUCCESS, "GITHUB_TOKEN configured")

    if not config.repositories:
        logger.error("REPOSITORIES is not configured")
        has_errors = True
    else:
        valid = [repo for repo in config.repositories if parse_repository(repo)]
        if not valid:
            logger.error("No valid repositories found")
            has_errors = True
        else:
            logger.log(SUCCESS, f"{len(valid)} valid repositories")
            invalid = len(config.repositories) - len(valid)
            if invalid:
                logger.warning(f"{invalid} invalid repositories will be ignored")

    logger.log(SUCCESS, f"Interval: {config.interval_seconds:g}s")
    logger.log(SUCCESS, f"Mode: {config.mode.value}")
    if config.batching:
        logger.log(
            SUCCESS,
            f"Batching: {config.batching.batch_size} per batch, "
            f"{config.batching.batch_pause_seconds:g}s pause",
        )

    if not has_errors:
        logger.info("Testing GitHub authentication...")
        try:
            github = GitHubClient(token=config.credential)
            user = github.authenticate()
            logger.log(SUCCESS, f"Authenticated as: {user.get('login')}")

            rate = github.get_rate_limit()
            logger.info(f"Rate limit: {rate.remaining}/{rate.limit}")

            check_token_scopes(github, logger)
        except (GitHubAPIError, requests.RequestException) as e:
            logger.error(f"Authentication error: {e}")
            has_errors = True

    logger.info("=" * 50)
    if has_errors:
        logger.error("Configuration has errors. Fix them before running the bot.")
        return 1

    logger.log(SUCCESS, "Configuration valid! Bot ready to run.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
