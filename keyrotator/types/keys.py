"""GitHub key and credential data models."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class DeployKey:
    """A deploy key as reported by GitHub."""

    id: int
    title: str
    read_only: bool | None  # None when GitHub did not report the flag
    key: str | None = None
    created_at: datetime | None = None


@dataclass
class KeyPair:
    """A freshly generated SSH key pair."""

    private_key: str  # OpenSSH PEM
    public_key: str  # authorized_keys format


@dataclass
class InstallationToken:
    """An access token for a GitHub App installation."""

    token: str
    expires_at: datetime


@dataclass
class Installation:
    """A GitHub App installation on a user or organisation account."""

    id: int
    account: str
