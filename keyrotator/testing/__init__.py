"""keyrotator testing utilities.

Provides a mock manager and fixtures for testing rotation runs.
"""

from keyrotator.testing.fixtures import create_mock_key, create_mock_team, days_ago
from keyrotator.testing.mock import MockCall, MockManager, MockResponse

__all__ = [
    # Mock manager
    "MockManager",
    "MockCall",
    "MockResponse",
    # Helper functions
    "create_mock_key",
    "create_mock_team",
    "days_ago",
]
