"""
Deploy key rotation.

Decides per repository whether the existing deploy key must be replaced,
and carries out the replacement so that a repository always keeps at least
one usable key: the new key is published and its secret persisted before
the old key is deleted.
"""

import time
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import TYPE_CHECKING

from keyrotator.exceptions import (
    KeyDeletionError,
    SecretInspectionError,
    SecretNotFoundError,
    SecretPersistError,
    SecretWriteError,
    TokenWriteError,
)
from keyrotator.logging import RepositoryLogger
from keyrotator.templates import ResolvedPaths
from keyrotator.types.keys import DeployKey
from keyrotator.types.teams import Repository

if TYPE_CHECKING:
    from keyrotator.manager import Manager

MAX_KEY_AGE = timedelta(days=7)
GRACE_DELAY = 1.0


class Verdict(str, Enum):
    """Outcome of the rotation decision."""

    SKIP = "skip"
    ROTATE = "rotate"


class RepositoryState(str, Enum):
    """
    Terminal state of a repository after a run.

    SKIPPED: a step failed before the new key was persisted.
    SKIP_NOOP: the current key is fresh and matches the read-only flag.
    ROTATED: the new key is published and persisted, and any old key deleted.
    ROTATED_WITH_ORPHAN: as ROTATED, but the old key could not be deleted.
    """

    SKIPPED = "skipped"
    SKIP_NOOP = "skip_noop"
    ROTATED = "rotated"
    ROTATED_WITH_ORPHAN = "rotated_with_orphan"


@dataclass(frozen=True)
class RotationVerdict:
    """Whether to rotate, and which key to retire afterwards."""

    action: Verdict
    old_key: DeployKey | None = None

    @property
    def should_rotate(self) -> bool:
        return self.action is Verdict.ROTATE


@dataclass
class OrgTokenCache:
    """
    Owners whose installation token has been written during this run.

    One cache is created per run and handed to the processing loop; an owner
    is only recorded once both the mint and the write succeeded.
    """

    owners: set[str] = field(default_factory=set)

    def __contains__(self, owner: str) -> bool:
        return owner in self.owners

    def ensure_token(self, manager: "Manager", owner: str, token_path: str) -> None:
        """
        Mint and store the owner's access token unless already done this run.

        Raises:
            TokenMintError: If the token cannot be minted
            TokenWriteError: If the token cannot be written
        """
        if owner in self.owners:
            return

        token = manager.mint_token(owner)
        try:
            manager.write_secret(token_path, token)
        except SecretWriteError as e:
            raise TokenWriteError(f"failed to write access token: {e.message}") from e

        self.owners.add(owner)


def find_key(keys: list[DeployKey], title: str) -> DeployKey | None:
    """
    Return the first key whose title equals title exactly.

    GitHub does not guarantee the order of listed keys, so with duplicate
    titles the key chosen may differ between runs.
    """
    for key in keys:
        if key.title == title:
            return key
    return None


def decide(
    repository: Repository,
    paths: ResolvedPaths,
    keys: list[DeployKey],
    manager: "Manager",
    log: RepositoryLogger,
    max_age: timedelta = MAX_KEY_AGE,
    now: datetime | None = None,
) -> RotationVerdict:
    """
    Decide whether a repository's deploy key must be rotated.

    A key is rotated when none exists, when its read-only flag no longer
    matches the repository, when its secret is missing or cannot be
    inspected, or when the secret is older than max_age.

    Args:
        repository: The repository and its desired read-only flag
        paths: Resolved key title and secret paths
        keys: Deploy keys currently on the repository
        manager: Collaborators used to inspect the secret
        log: Logger carrying the repository context
        max_age: Maximum age of a secret before it is rotated
        now: Current time (default: now, UTC)

    Returns:
        RotationVerdict, carrying the key to retire when one exists
    """
    old_key = find_key(keys, paths.title)
    if old_key is None:
        return RotationVerdict(Verdict.ROTATE)

    # Permission drift rotates regardless of freshness
    if old_key.read_only is not None and old_key.read_only != repository.read_only:
        log.info("read only flag changed from %s to %s", old_key.read_only, repository.read_only)
        return RotationVerdict(Verdict.ROTATE, old_key)

    try:
        updated = manager.last_updated(paths.key_path)
    except SecretNotFoundError:
        return RotationVerdict(Verdict.ROTATE, old_key)
    except SecretInspectionError as e:
        log.warning("%s", e.message)
        return RotationVerdict(Verdict.ROTATE, old_key)

    if now is None:
        now = datetime.now(timezone.utc)
    if updated.tzinfo is None:
        updated = updated.replace(tzinfo=timezone.utc)

    if updated > now - max_age:
        return RotationVerdict(Verdict.SKIP, old_key)
    return RotationVerdict(Verdict.ROTATE, old_key)


def execute_rotation(
    repository: Repository,
    paths: ResolvedPaths,
    verdict: RotationVerdict,
    manager: "Manager",
    log: RepositoryLogger,
    grace_delay: float = GRACE_DELAY,
) -> RepositoryState:
    """
    Replace a repository's deploy key.

    Generates a key pair, publishes the public key, persists the private key
    and finally deletes the old key after grace_delay seconds, so that a
    consumer that has just read the previous secret can still use it.

    Returns:
        ROTATED, or ROTATED_WITH_ORPHAN when the old key could not be deleted

    Raises:
        KeyGenerationError: If a key pair cannot be generated
        KeyPublishError: If the public key cannot be added to GitHub
        SecretPersistError: If the private key cannot be written
    """
    key_pair = manager.generate_key_pair(paths.title)
    manager.create_key(repository, paths.title, key_pair.public_key)

    try:
        manager.write_secret(paths.key_path, key_pair.private_key)
    except SecretWriteError as e:
        raise SecretPersistError(f"failed to write secret key: {e.message}") from e

    if verdict.old_key is None:
        log.info("created deploy key")
        return RepositoryState.ROTATED

    time.sleep(grace_delay)
    try:
        manager.delete_key(repository, verdict.old_key.id)
    except KeyDeletionError as e:
        log.warning("%s", e.message)
        return RepositoryState.ROTATED_WITH_ORPHAN

    log.info("rotated deploy key %d", verdict.old_key.id)
    return RepositoryState.ROTATED
