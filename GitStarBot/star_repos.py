#!/usr/bin/env python3
"""
Main script for GitStarBot.
Stars, unstars or checks the configured GitHub repositories.
"""

import sys
import argparse

from core.exceptions import ConfigurationError, StarBotError
from core.use_cases import RunStarBot
from infrastructure.config import load_config
from infrastructure.github_client import GitHubClient
from infrastructure.logging_config import configure_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Star, unstar or check a list of GitHub repositories"
    )
    parser.add_argument(
        "--mode",
        choices=["star", "unstar", "check"],
        help="Action to apply (default: MODE env var or 'star')",
    )
    parser.add_argument(
        "--repos",
        type=str,
        help="Comma-separated owner/name list (default: REPOSITORIES env var)",
    )
    parser.add_argument(
        "--interval",
        type=float,
        help="Seconds between repositories (default: STAR_INTERVAL env var or 2)",
    )
    parser.add_argument(
        "--batched",
        action="store_true",
        help="Process in rate-limit aware batches",
    )
    parser.add_argument(
        "--batch-size",
        type=int,
        help="Repositories per batch, implies --batched (default: 50)",
    )
    parser.add_argument(
        "--batch-pause",
        type=float,
        help="Seconds to pause between batches (default: 5)",
    )
    parser.add_argument(
        "--env-file",
        type=str,
        help="Path of the .env file to load (default: ./.env)",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable coloured output",
    )
    return parser


def main(argv=None):
    """Main bot entry point."""
    args = build_parser().parse_args(argv)
    logger = configure_logging(verbose=args.verbose, no_color=args.no_color)

    try:
        logger.info("Starting GitHub Star Bot...")

        config = load_config(
            env_file=args.env_file,
            repositories=args.repos,
            interval=args.interval,
            mode=args.mode,
            batched=True if (args.batched or args.batch_size is not None) else None,
            batch_size=args.batch_size,
            batch_pause=args.batch_pause,
        )

        if not config.credential:
            raise ConfigurationError("GITHUB_TOKEN is not configured")

        github = GitHubClient(token=config.credential)
        RunStarBot(github, log=logger).execute(config)

        logger.info("Bot finished successfully!")
        return 0

    except KeyboardInterrupt:
        logger.info("Bot interrupted by user.")
        return 130  # Standard exit code for SIGINT

    except StarBotError as e:
        logger.error(f"Bot failed: {e}")
        return 1

    except Exception as e:
        logger.error(f"Bot failed: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
