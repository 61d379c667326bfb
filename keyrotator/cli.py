"""
Command line and AWS Lambda entry points.

Usage:
    keyrotator --config teams.json
    cat team.json | keyrotator --grace-delay 5
"""

import argparse
import json
import logging
import sys
from datetime import timedelta
from typing import Any, TextIO

from keyrotator.config import Settings
from keyrotator.exceptions import ConfigurationError
from keyrotator.handler import Handler
from keyrotator.logging import configure_logging, get_logger
from keyrotator.manager import Manager
from keyrotator.types.teams import Team

logger = get_logger()


def load_teams(data: Any) -> list[Team]:
    """
    Parse a team object, or a list of team objects.

    Raises:
        ConfigurationError: If the input is not a team or list of teams
    """
    if isinstance(data, list):
        return [Team.from_dict(item) for item in data]
    return [Team.from_dict(data)]


def read_teams(stream: TextIO) -> list[Team]:
    try:
        data = json.load(stream)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"invalid team configuration: {e}") from e
    return load_teams(data)


def build_handler(settings: Settings, manager: Manager) -> Handler:
    return Handler(
        manager,
        token_template=settings.token_template,
        key_template=settings.key_template,
        title_template=settings.title_template,
        grace_delay=settings.grace_delay,
        max_key_age=timedelta(days=settings.max_key_age_days),
    )


def _setup_logging(level: str) -> None:
    if not get_logger().handlers:
        configure_logging(level=logging.getLevelName(level))
    else:
        get_logger().setLevel(level)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="keyrotator",
        description="Rotate GitHub deploy keys for Concourse teams.",
    )
    parser.add_argument(
        "--config",
        default="-",
        help="JSON file with a team or a list of teams (default: stdin)",
    )
    parser.add_argument("--token-template", help="secret path template for access tokens")
    parser.add_argument("--key-template", help="secret path template for deploy keys")
    parser.add_argument("--title-template", help="deploy key title template")
    parser.add_argument(
        "--grace-delay",
        type=float,
        help="seconds to wait before deleting a replaced key",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="log level (default: KEYROTATOR_LOG_LEVEL or INFO)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """
    Run a rotation from the command line.

    Returns:
        0 once the run completed, whatever happened to individual
        repositories; 1 if configuration or input could not be loaded
    """
    args = build_parser().parse_args(argv)

    try:
        settings = Settings.from_env()
        for name in ("token_template", "key_template", "title_template", "grace_delay", "log_level"):
            value = getattr(args, name)
            if value is not None:
                setattr(settings, name, value)
        _setup_logging(settings.log_level)

        if args.config == "-":
            teams = read_teams(sys.stdin)
        else:
            with open(args.config) as f:
                teams = read_teams(f)

        manager = Manager.from_settings(settings)
    except (ConfigurationError, OSError) as e:
        logger.error("%s", e)
        print(f"keyrotator: {e}", file=sys.stderr)
        return 1

    with manager:
        build_handler(settings, manager).run(teams)
    return 0


def lambda_handler(event: dict[str, Any], context: Any = None) -> None:
    """
    AWS Lambda entry point; the event is a single team.

    Raises:
        ConfigurationError: If settings or the event are invalid
    """
    settings = Settings.from_env()
    _setup_logging(settings.log_level)

    team = Team.from_dict(event)
    with Manager.from_settings(settings) as manager:
        build_handler(settings, manager).run([team])
