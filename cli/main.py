"""Command-line entry point for gitcleaner."""
from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from config.settings import CleanerSettings, resolve_credentials
from engine.cleaner import RepositoryCleaner
from engine.errors import GitCleanerError
from engine.operator import ConsoleOperator, Operator

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build the gitcleaner argument parser."""
    parser = argparse.ArgumentParser(
        prog="gitcleaner",
        usage="gitcleaner [options]",
        description="Squash the history of a GitHub repository or Gist and force-push it",
    )
    parser.add_argument("-u", "--url", help="Git repository URL")
    parser.add_argument("--username", help="Git username")
    parser.add_argument("--password", help="Git password or access token")
    parser.add_argument(
        "--env-file",
        default=".env",
        help="File with GITURL, USERNAME and PASSWORD fallbacks (default: .env)",
    )
    parser.add_argument("--git", default="git", help="Git executable to use")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose output")
    return parser


def main(argv: Optional[List[str]] = None, operator: Optional[Operator] = None) -> int:
    """Run gitcleaner.

    Args:
        argv: Command-line arguments; sys.argv is used if None
        operator: Operator to ask for decisions; the console if None

    Returns:
        Exit code (0 for success, 1 for errors, 130 when interrupted)
    """
    args = build_parser().parse_args(argv)

    log_level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        settings = CleanerSettings(_env_file=args.env_file)
        credentials = resolve_credentials(
            args.url, args.username, args.password, settings=settings
        )
        cleaner = RepositoryCleaner(
            credentials,
            operator if operator is not None else ConsoleOperator(),
            git_binary=args.git,
        )
        cleaner.clean()
        return 0
    except GitCleanerError as e:
        print(f"Error: {e}")
        return 1
    except KeyboardInterrupt:
        print("Error: Interrupted")
        return 130


def run() -> None:
    """Console script wrapper."""
    sys.exit(main())


if __name__ == "__main__":
    run()
