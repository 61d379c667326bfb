"""
Pytest plugin for keyrotator testing fixtures.

This module re-exports all fixtures from fixtures.py so they can be
discovered by pytest. Add this to your conftest.py:

    pytest_plugins = ["keyrotator.testing.conftest"]
"""

from keyrotator.testing.fixtures import (
    ed25519_generator,
    mock_manager,
    sample_key,
    sample_paths,
    sample_repository,
    sample_team,
)

__all__ = [
    "mock_manager",
    "sample_repository",
    "sample_team",
    "sample_paths",
    "sample_key",
    "ed25519_generator",
]
