"""
Collaborator facade used by the rotation engine.

Wraps the GitHub App, the secret store and the key pair generator, and
translates their failures into the rotation error taxonomy.
"""

from datetime import datetime
from typing import TYPE_CHECKING, Any

from keyrotator.exceptions import (
    ConfigurationError,
    GitHubError,
    KeyDeletionError,
    KeyGenerationError,
    KeyListError,
    KeyPublishError,
    KeyRotatorError,
    SecretInspectionError,
    SecretNotFoundError,
    SecretStoreError,
    SecretWriteError,
    TokenMintError,
)
from keyrotator.github import GitHubApp
from keyrotator.keypairs import KeyPairGenerator, key_pair_generator
from keyrotator.secrets import SecretsManagerStore
from keyrotator.types.keys import DeployKey, KeyPair
from keyrotator.types.teams import Repository

if TYPE_CHECKING:
    from keyrotator.config import Settings


class Manager:
    """GitHub, Secrets Manager and key generation operations for one run."""

    def __init__(
        self,
        github: GitHubApp,
        secrets: SecretsManagerStore,
        generator: KeyPairGenerator,
    ) -> None:
        self.github = github
        self.secrets = secrets
        self.generator = generator

    def mint_token(self, owner: str) -> str:
        """
        Mint an installation access token for an owner.

        Raises:
            TokenMintError: If the app is not installed or GitHub rejects the request
        """
        try:
            return self.github.create_installation_token(owner).token
        except GitHubError as e:
            raise TokenMintError(f"failed to get access token: {e}") from e

    def write_secret(self, path: str, value: str) -> None:
        """
        Raises:
            SecretWriteError: If the secret cannot be written
        """
        try:
            self.secrets.write_secret(path, value)
        except SecretWriteError:
            raise
        except SecretStoreError as e:
            raise SecretWriteError(str(e)) from e

    def last_updated(self, path: str) -> datetime:
        """
        Raises:
            SecretNotFoundError: If the secret does not exist
            SecretInspectionError: If the secret cannot be described
        """
        try:
            return self.secrets.last_updated(path)
        except SecretNotFoundError:
            raise
        except SecretStoreError as e:
            raise SecretInspectionError(f"failed to get last updated for secret: {e}") from e

    def list_keys(self, repository: Repository) -> list[DeployKey]:
        """
        Raises:
            KeyListError: If the keys cannot be listed
        """
        try:
            return self.github.installation(repository.owner).list(
                repository.owner, repository.name
            )
        except GitHubError as e:
            raise KeyListError(f"failed to list github keys: {e}") from e

    def create_key(self, repository: Repository, title: str, public_key: str) -> DeployKey:
        """
        Add a deploy key with the repository's desired read-only flag.

        Raises:
            KeyPublishError: If GitHub rejects the key
        """
        try:
            return self.github.installation(repository.owner).create(
                repository.owner,
                repository.name,
                title=title,
                key=public_key,
                read_only=repository.read_only,
            )
        except GitHubError as e:
            raise KeyPublishError(f"failed to create key on github: {e}") from e

    def delete_key(self, repository: Repository, key_id: int) -> None:
        """
        Raises:
            KeyDeletionError: If the key cannot be deleted
        """
        try:
            self.github.installation(repository.owner).delete(
                repository.owner, repository.name, key_id
            )
        except GitHubError as e:
            raise KeyDeletionError(f"failed to delete old github key: {key_id}: {e}") from e

    def generate_key_pair(self, name: str) -> KeyPair:
        """
        Raises:
            KeyGenerationError: If key generation fails
        """
        try:
            return self.generator.generate(name)
        except (ValueError, TypeError) as e:
            raise KeyGenerationError(f"failed to generate new key pair: {e}") from e

    def close(self) -> None:
        """Close the GitHub client."""
        self.github.close()

    def __enter__(self) -> "Manager":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    @classmethod
    def from_settings(cls, settings: "Settings") -> "Manager":
        """
        Build the collaborators described by run settings.

        The GitHub App key is read from its file, or from Secrets Manager
        when only a secret name is configured.

        Raises:
            ConfigurationError: If the GitHub App key cannot be loaded
        """
        secrets = SecretsManagerStore.from_region(settings.region)

        if settings.github_key_path:
            private_key = settings.read_github_key()
        else:
            try:
                private_key = secrets.read_secret(settings.github_key_secret)
            except KeyRotatorError as e:
                raise ConfigurationError(f"failed to load GitHub App key: {e.message}") from e

        github = GitHubApp(
            app_id=settings.github_app_id,
            private_key=private_key,
            base_url=settings.github_base_url,
            timeout=settings.timeout,
        )
        return cls(github, secrets, key_pair_generator(settings.key_type))
