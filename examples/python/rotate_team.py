#!/usr/bin/env python3
"""
keyrotator - Rotate a Single Team Example

This example walks through one rotation run:
1. Load settings from KEYROTATOR_* environment variables
2. Show the secret paths and key title for each repository
3. List the current deploy keys on GitHub
4. Rotate, then report the outcome per repository

Usage:
    export KEYROTATOR_GITHUB_APP_ID=12345
    export KEYROTATOR_GITHUB_KEY_PATH=./app.private-key.pem
    python rotate_team.py ops acme/infra acme/site:rw
"""

import logging
import sys

from keyrotator import Handler, Manager, Settings, configure_logging
from keyrotator.exceptions import KeyRotatorError
from keyrotator.rotation import OrgTokenCache
from keyrotator.templates import resolve_paths
from keyrotator.types.teams import Repository, Team


def parse_repository(arg: str) -> Repository:
    """Parse owner/name[:rw] into a repository; keys are read-only unless :rw."""
    path, _, mode = arg.partition(":")
    owner, _, name = path.partition("/")
    return Repository(name=name, owner=owner, read_only=mode != "rw")


def main() -> int:
    if len(sys.argv) < 3:
        print(__doc__)
        return 2

    configure_logging(level=logging.INFO)
    team = Team(name=sys.argv[1], repositories=[parse_repository(a) for a in sys.argv[2:]])

    print("=== keyrotator example ===\n")

    try:
        settings = Settings.from_env()
        manager = Manager.from_settings(settings)
    except KeyRotatorError as e:
        print(f"Configuration error: {e}")
        return 1

    with manager:
        print("1. Resolved paths")
        for repository in team.repositories:
            paths = resolve_paths(team.name, repository.name, repository.owner)
            print(f"   {repository.owner}/{repository.name}")
            print(f"     token:  {paths.token_path}")
            print(f"     key:    {paths.key_path}")
            print(f"     title:  {paths.title}")

        print("\n2. Current deploy keys")
        for repository in team.repositories:
            try:
                keys = manager.list_keys(repository)
            except KeyRotatorError as e:
                print(f"   {repository.name}: {e}")
                continue
            for key in keys:
                print(f"   {repository.name}: #{key.id} {key.title} read_only={key.read_only}")

        print("\n3. Rotating")
        handler = Handler(manager, grace_delay=settings.grace_delay)
        cache = OrgTokenCache()
        for repository in team.repositories:
            state = handler.process_repository(team, repository, cache)
            print(f"   {repository.name}: {state.value}")

    print("\n=== Example Complete ===")
    return 0


if __name__ == "__main__":
    sys.exit(main())
