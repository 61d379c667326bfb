"""
Rotation run orchestration.

Walks teams and their repositories in order. Every failure is confined to
the repository it happened in: it is logged as a warning and the run moves
on, so a run as a whole always succeeds.
"""

from collections.abc import Iterable
from datetime import timedelta
from typing import TYPE_CHECKING

from keyrotator.exceptions import KeyRotatorError
from keyrotator.logging import RepositoryLogger, get_logger
from keyrotator.rotation import (
    GRACE_DELAY,
    MAX_KEY_AGE,
    OrgTokenCache,
    RepositoryState,
    decide,
    execute_rotation,
)
from keyrotator.templates import (
    DEFAULT_KEY_TEMPLATE,
    DEFAULT_TITLE_TEMPLATE,
    DEFAULT_TOKEN_TEMPLATE,
    resolve_paths,
)
from keyrotator.types.teams import Repository, Team

if TYPE_CHECKING:
    from keyrotator.manager import Manager

logger = get_logger("rotation")


class Handler:
    """
    Rotates deploy keys for teams of repositories.

    Example:
        ```python
        handler = Handler(manager, grace_delay=1.0)
        handler.run([Team.from_dict(payload)])
        ```
    """

    def __init__(
        self,
        manager: "Manager",
        token_template: str = DEFAULT_TOKEN_TEMPLATE,
        key_template: str = DEFAULT_KEY_TEMPLATE,
        title_template: str = DEFAULT_TITLE_TEMPLATE,
        grace_delay: float = GRACE_DELAY,
        max_key_age: timedelta = MAX_KEY_AGE,
    ) -> None:
        """
        Initialize the handler.

        Args:
            manager: GitHub, secret store and key generation collaborators
            token_template: Secret path template for organisation access tokens
            key_template: Secret path template for deploy private keys
            title_template: Deploy key title template
            grace_delay: Seconds to wait before deleting a replaced key
            max_key_age: Age after which a deploy key is rotated
        """
        self.manager = manager
        self.token_template = token_template
        self.key_template = key_template
        self.title_template = title_template
        self.grace_delay = grace_delay
        self.max_key_age = max_key_age

    def run(self, teams: Iterable[Team]) -> None:
        """Process every repository of every team, sharing one token cache."""
        cache = OrgTokenCache()
        for team in teams:
            self.handle(team, cache)

    def handle(self, team: Team, cache: OrgTokenCache | None = None) -> None:
        """
        Process every repository of a team.

        Args:
            team: The team to process
            cache: Token cache of the current run (default: a new one)
        """
        if cache is None:
            cache = OrgTokenCache()

        for repository in team.repositories:
            self.process_repository(team, repository, cache)

    def process_repository(
        self, team: Team, repository: Repository, cache: OrgTokenCache
    ) -> RepositoryState:
        """
        Rotate the deploy key of one repository if needed.

        Returns:
            The terminal state of the repository
        """
        log = RepositoryLogger(
            logger, team=team.name, repository=repository.name, owner=repository.owner
        )

        try:
            paths = resolve_paths(
                team.name,
                repository.name,
                repository.owner,
                token_template=self.token_template,
                key_template=self.key_template,
                title_template=self.title_template,
            )
            cache.ensure_token(self.manager, repository.owner, paths.token_path)
            keys = self.manager.list_keys(repository)

            verdict = decide(
                repository, paths, keys, self.manager, log, max_age=self.max_key_age
            )
            if not verdict.should_rotate:
                log.debug("deploy key is up to date")
                return RepositoryState.SKIP_NOOP

            return execute_rotation(
                repository, paths, verdict, self.manager, log, grace_delay=self.grace_delay
            )
        except KeyRotatorError as e:
            log.warning("%s", e.message)
            return RepositoryState.SKIPPED
