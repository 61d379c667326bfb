"""GitHub App resource client."""

from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime
from typing import TYPE_CHECKING

from keyrotator.exceptions import ServerError
from keyrotator.types.keys import Installation, InstallationToken

if TYPE_CHECKING:
    from keyrotator.transport import HTTPTransport

PER_PAGE = 100


def parse_timestamp(value: str) -> datetime:
    """Parse a GitHub ISO 8601 timestamp such as 2024-01-01T00:00:00Z."""
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


@contextmanager
def parsing(what: str) -> Iterator[None]:
    """Turn a malformed response body into a ServerError."""
    try:
        yield
    except (KeyError, IndexError, TypeError, ValueError, AttributeError) as e:
        raise ServerError("INVALID_RESPONSE", f"malformed {what} in response: {e!r}") from e


class AppsClient:
    """Client for GitHub App operations, authenticated as the app itself."""

    def __init__(self, transport: "HTTPTransport") -> None:
        """
        Initialize the apps client.

        Args:
            transport: HTTP transport authenticating with the app JWT
        """
        self.transport = transport

    def list_installations(self) -> list[Installation]:
        """
        List every installation of the app.

        Returns:
            List of Installation objects with id and account login

        Raises:
            AuthenticationError: If the app JWT is rejected
        """
        installations: list[Installation] = []
        page = 1
        while True:
            response = self.transport.request(
                method="GET",
                path="/app/installations",
                params={"per_page": PER_PAGE, "page": page},
            ) or []

            with parsing("installation"):
                installations.extend(
                    Installation(id=item["id"], account=item["account"]["login"])
                    for item in response
                )
                full_page = len(response) >= PER_PAGE

            if not full_page:
                return installations
            page += 1

    def create_installation_token(self, installation_id: int) -> InstallationToken:
        """
        Create an access token for an installation.

        Args:
            installation_id: The installation identifier

        Returns:
            InstallationToken with the token and its expiry

        Raises:
            AuthenticationError: If the app JWT is rejected
            NotFoundError: If the installation does not exist
        """
        data = self.transport.request(
            method="POST",
            path=f"/app/installations/{installation_id}/access_tokens",
        )
        with parsing("installation token"):
            if not isinstance(data["token"], str):
                raise TypeError(f"token is {type(data['token']).__name__}, not str")
            return InstallationToken(
                token=data["token"],
                expires_at=parse_timestamp(data["expires_at"]),
            )
