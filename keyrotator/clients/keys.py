"""Repository deploy key resource client."""

from typing import TYPE_CHECKING, Any

from keyrotator.clients.apps import PER_PAGE, parse_timestamp, parsing
from keyrotator.types.keys import DeployKey

if TYPE_CHECKING:
    from keyrotator.transport import HTTPTransport


def _to_key(data: dict[str, Any]) -> DeployKey:
    with parsing("deploy key"):
        created_at = data.get("created_at")
        return DeployKey(
            id=int(data["id"]),
            title=data["title"],
            read_only=data.get("read_only"),
            key=data.get("key"),
            created_at=parse_timestamp(created_at) if created_at else None,
        )


class KeysClient:
    """Client for repository deploy key operations."""

    def __init__(self, transport: "HTTPTransport") -> None:
        """
        Initialize the keys client.

        Args:
            transport: HTTP transport authenticating with an installation token
        """
        self.transport = transport

    def list(self, owner: str, repo: str) -> list[DeployKey]:
        """
        List the deploy keys of a repository, in the order GitHub returns them.

        Args:
            owner: Repository owner (user or organisation login)
            repo: Repository name

        Returns:
            List of DeployKey objects

        Raises:
            NotFoundError: If the repository is not found
        """
        keys: list[DeployKey] = []
        page = 1
        while True:
            response = self.transport.request(
                method="GET",
                path=f"/repos/{owner}/{repo}/keys",
                params={"per_page": PER_PAGE, "page": page},
            ) or []

            with parsing("deploy key list"):
                keys.extend(_to_key(item) for item in response)
                full_page = len(response) >= PER_PAGE

            if not full_page:
                return keys
            page += 1

    def create(
        self,
        owner: str,
        repo: str,
        title: str,
        key: str,
        read_only: bool,
    ) -> DeployKey:
        """
        Add a deploy key to a repository.

        Args:
            owner: Repository owner
            repo: Repository name
            title: Key title
            key: Public key in authorized_keys format
            read_only: Whether the key only grants read access

        Returns:
            The created DeployKey

        Raises:
            ValidationError: If the key is invalid or already in use
            NotFoundError: If the repository is not found
        """
        data = self.transport.request(
            method="POST",
            path=f"/repos/{owner}/{repo}/keys",
            body={"title": title, "key": key, "read_only": read_only},
        )
        return _to_key(data)

    def delete(self, owner: str, repo: str, key_id: int) -> None:
        """
        Delete a deploy key from a repository.

        Raises:
            NotFoundError: If the repository or key is not found
        """
        self.transport.request(
            method="DELETE",
            path=f"/repos/{owner}/{repo}/keys/{key_id}",
        )
