"""
Pytest fixtures for keyrotator testing.

Provides common fixtures and factories for exercising rotation runs
against a MockManager.
"""

from datetime import datetime, timedelta, timezone
from typing import Generator

import pytest

from keyrotator.keypairs import Ed25519KeyPairGenerator
from keyrotator.templates import ResolvedPaths
from keyrotator.testing.mock import MockManager
from keyrotator.types.keys import DeployKey
from keyrotator.types.teams import Repository, Team


# ============================================================================
# Factories
# ============================================================================


def create_mock_key(
    id: int = 1,
    title: str = "concourse-test-team-deploy-key",
    read_only: bool | None = True,
    key: str | None = None,
) -> DeployKey:
    """
    Create a DeployKey for testing.

    All parameters have sensible defaults.
    """
    return DeployKey(
        id=id,
        title=title,
        read_only=read_only,
        key=key or f"ssh-ed25519 AAAAC3NzaC1lZDI1NTE5AAAAImock{id} {title}",
    )


def create_mock_team(
    name: str = "test-team",
    repositories: list[Repository] | None = None,
) -> Team:
    """Create a Team with a single read-only repository unless given repositories."""
    if repositories is None:
        repositories = [Repository(name="test-repository", owner="telia-oss", read_only=True)]
    return Team(name=name, repositories=repositories)


def days_ago(days: float) -> datetime:
    """Return the UTC time the given number of days ago."""
    return datetime.now(timezone.utc) - timedelta(days=days)


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def mock_manager() -> Generator[MockManager, None, None]:
    """
    Provide a MockManager for testing.

    Example:
        ```python
        def test_rotates_missing_key(mock_manager):
            Handler(mock_manager, grace_delay=0).run([create_mock_team()])
            assert mock_manager.was_called("create_key")
        ```
    """
    manager = MockManager()
    yield manager
    manager.reset()


@pytest.fixture
def sample_repository() -> Repository:
    """Provide a read-only repository."""
    return Repository(name="test-repository", owner="telia-oss", read_only=True)


@pytest.fixture
def sample_team(sample_repository: Repository) -> Team:
    """Provide a team with one repository."""
    return Team(name="test-team", repositories=[sample_repository])


@pytest.fixture
def sample_paths() -> ResolvedPaths:
    """Provide the default paths resolved for sample_team and sample_repository."""
    return ResolvedPaths(
        token_path="/concourse/test-team/telia-oss-access-token",
        key_path="/concourse/test-team/test-repository-deploy-key",
        title="concourse-test-team-deploy-key",
    )


@pytest.fixture
def sample_key() -> DeployKey:
    """Provide a read-only key titled like the default title template."""
    return create_mock_key()


@pytest.fixture
def ed25519_generator() -> Ed25519KeyPairGenerator:
    """Provide a real Ed25519 key pair generator."""
    return Ed25519KeyPairGenerator()
