"""Shared fixtures for the keyrotator test suite."""

from keyrotator.testing.conftest import (  # noqa: F401
    ed25519_generator,
    mock_manager,
    sample_key,
    sample_paths,
    sample_repository,
    sample_team,
)
