"""keyrotator type definitions."""

from keyrotator.types.keys import DeployKey, Installation, InstallationToken, KeyPair
from keyrotator.types.teams import Repository, Team, parse_bool

__all__ = [
    # Input
    "Team",
    "Repository",
    "parse_bool",
    # GitHub
    "DeployKey",
    "Installation",
    "InstallationToken",
    "KeyPair",
]
