"""
GitHub App client.

Authenticates as a GitHub App, mints installation access tokens and exposes
deploy key operations for every account the app is installed on.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

import jwt
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from keyrotator.clients import AppsClient, KeysClient
from keyrotator.exceptions import ConfigurationError, NotFoundError
from keyrotator.logging import get_logger
from keyrotator.transport import HTTPTransport
from keyrotator.types.keys import InstallationToken

logger = get_logger("github")

# GitHub rejects app JWTs that live longer than ten minutes.
JWT_LIFETIME = timedelta(minutes=9)
JWT_BACKDATE = timedelta(seconds=60)

# Installation sessions are refreshed this long before their token expires.
TOKEN_REFRESH_MARGIN = timedelta(minutes=5)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _load_app_key(pem: str) -> rsa.RSAPrivateKey:
    try:
        key = serialization.load_pem_private_key(pem.encode(), password=None)
    except (ValueError, TypeError) as e:
        raise ConfigurationError(f"invalid GitHub App private key: {e}") from e

    if not isinstance(key, rsa.RSAPrivateKey):
        raise ConfigurationError(
            f"expected RSA GitHub App private key, got {type(key).__name__}"
        )
    return key


@dataclass
class InstallationSession:
    """Keys client bound to one installation, with its current token."""

    installation_id: int
    token: InstallationToken
    transport: HTTPTransport
    keys: KeysClient

    def expired(self, now: datetime) -> bool:
        return self.token.expires_at - TOKEN_REFRESH_MARGIN <= now


class GitHubApp:
    """
    Client for a GitHub App and its installations.

    Example:
        ```python
        from keyrotator.github import GitHubApp

        with GitHubApp(app_id=1234, private_key=pem) as app:
            token = app.create_installation_token("acme")
            keys = app.installation("acme").list("acme", "infra")
        ```
    """

    DEFAULT_BASE_URL = "https://api.github.com"
    DEFAULT_TIMEOUT = 30.0

    def __init__(
        self,
        app_id: int,
        private_key: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        """
        Initialize the GitHub App client.

        Args:
            app_id: The GitHub App identifier
            private_key: PEM-encoded RSA private key of the app
            base_url: Base URL for API requests (default: https://api.github.com)
            timeout: Request timeout in seconds (default: 30.0)
        """
        self.app_id = app_id
        self.base_url = base_url
        self.timeout = timeout
        self._private_key = _load_app_key(private_key)

        self._transport = HTTPTransport(
            base_url=base_url,
            token_provider=self.app_jwt,
            timeout=timeout,
        )
        self.apps = AppsClient(self._transport)

        self._installations: dict[str, int] | None = None
        self._sessions: dict[str, InstallationSession] = {}

    def app_jwt(self) -> str:
        """Return a freshly signed RS256 JWT authenticating as the app."""
        now = _now()
        payload = {
            "iat": int((now - JWT_BACKDATE).timestamp()),
            "exp": int((now + JWT_LIFETIME).timestamp()),
            "iss": str(self.app_id),
        }
        return jwt.encode(payload, self._private_key, algorithm="RS256")

    def installation_id(self, owner: str) -> int:
        """
        Look up the installation of the app on an account.

        The installation list is fetched once and reused.

        Raises:
            NotFoundError: If the app is not installed on the account
        """
        if self._installations is None:
            self._installations = {
                i.account: i.id for i in self.apps.list_installations()
            }
            logger.debug("found %d installations", len(self._installations))

        try:
            return self._installations[owner]
        except KeyError:
            raise NotFoundError(
                "INSTALLATION_NOT_FOUND", f"app is not installed for owner: {owner}"
            ) from None

    def create_installation_token(self, owner: str) -> InstallationToken:
        """
        Mint a new installation access token for an account.

        Raises:
            NotFoundError: If the app is not installed on the account
            GitHubError: On API errors
        """
        return self.apps.create_installation_token(self.installation_id(owner))

    def installation(self, owner: str) -> KeysClient:
        """
        Get a keys client authenticated as the installation for an account.

        Sessions are cached per owner and re-created when their token is
        about to expire.
        """
        session = self._sessions.get(owner)
        if session is None or session.expired(_now()):
            if session is not None:
                session.transport.close()
            session = self._new_session(owner)
            self._sessions[owner] = session
        return session.keys

    def _new_session(self, owner: str) -> InstallationSession:
        installation_id = self.installation_id(owner)
        token = self.apps.create_installation_token(installation_id)
        transport = HTTPTransport(
            base_url=self.base_url,
            token_provider=lambda: token.token,
            timeout=self.timeout,
        )
        return InstallationSession(
            installation_id=installation_id,
            token=token,
            transport=transport,
            keys=KeysClient(transport),
        )

    def close(self) -> None:
        """Close the client and all installation sessions."""
        for session in self._sessions.values():
            session.transport.close()
        self._sessions.clear()
        self._transport.close()

    def __enter__(self) -> "GitHubApp":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()
