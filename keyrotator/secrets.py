"""
AWS Secrets Manager secret store.

Secrets are written with a description that records when they were last
updated, which is what rotation freshness is judged by.
"""

from datetime import datetime, timezone
from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from keyrotator.exceptions import ConfigurationError, SecretNotFoundError, SecretStoreError, SecretWriteError
from keyrotator.logging import get_logger

logger = get_logger("secrets")

DESCRIPTION_PREFIX = "Github credentials for Concourse. Last updated: "


def _error_code(error: ClientError) -> str:
    return error.response.get("Error", {}).get("Code", "")


def _format_timestamp(value: datetime) -> str:
    return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


class SecretsManagerStore:
    """Secret store backed by AWS Secrets Manager."""

    def __init__(self, client: Any) -> None:
        """
        Initialize the store.

        Args:
            client: A boto3 "secretsmanager" client
        """
        self.client = client

    @classmethod
    def from_region(cls, region: str | None = None) -> "SecretsManagerStore":
        """
        Create a store using the default boto3 credential chain.

        Raises:
            ConfigurationError: If no region is configured
        """
        try:
            return cls(boto3.client("secretsmanager", region_name=region))
        except BotoCoreError as e:
            raise ConfigurationError(f"failed to create secrets manager client: {e}") from e

    def write_secret(self, name: str, value: str) -> None:
        """
        Create or update a secret.

        Args:
            name: Secret name (e.g. "/concourse/team/repo-deploy-key")
            value: Secret string

        Raises:
            SecretWriteError: If the secret cannot be created or updated
        """
        description = DESCRIPTION_PREFIX + _format_timestamp(datetime.now(timezone.utc))

        try:
            self.client.create_secret(Name=name, Description=description, SecretString=value)
            logger.debug("created secret %s", name)
            return
        except ClientError as e:
            if _error_code(e) != "ResourceExistsException":
                raise SecretWriteError(f"failed to create secret {name}: {e}") from e
        except BotoCoreError as e:
            raise SecretWriteError(f"failed to create secret {name}: {e}") from e

        try:
            self.client.update_secret(SecretId=name, Description=description, SecretString=value)
        except (ClientError, BotoCoreError) as e:
            raise SecretWriteError(f"failed to update secret {name}: {e}") from e
        logger.debug("updated secret %s", name)

    def last_updated(self, name: str) -> datetime:
        """
        Get the time a secret was last written.

        The time recorded in the description is preferred; secrets written by
        other tools fall back to LastChangedDate.

        Raises:
            SecretNotFoundError: If the secret does not exist
            SecretStoreError: On any other failure
        """
        try:
            output = self.client.describe_secret(SecretId=name)
        except ClientError as e:
            if _error_code(e) == "ResourceNotFoundException":
                raise SecretNotFoundError(f"secret not found: {name}") from e
            raise SecretStoreError("DESCRIBE_ERROR", f"failed to describe secret {name}: {e}") from e
        except BotoCoreError as e:
            raise SecretStoreError("DESCRIBE_ERROR", f"failed to describe secret {name}: {e}") from e

        description = output.get("Description") or ""
        if description.startswith(DESCRIPTION_PREFIX):
            try:
                return datetime.fromisoformat(
                    description[len(DESCRIPTION_PREFIX):].strip().replace("Z", "+00:00")
                )
            except ValueError:
                logger.debug("unparseable description on secret %s", name)

        changed = output.get("LastChangedDate")
        if changed is None:
            raise SecretStoreError("DESCRIBE_ERROR", f"no last updated time for secret {name}")
        return changed

    def read_secret(self, name: str) -> str:
        """
        Read the current value of a secret.

        Raises:
            SecretNotFoundError: If the secret does not exist
            SecretStoreError: On any other failure
        """
        try:
            output = self.client.get_secret_value(SecretId=name)
        except ClientError as e:
            if _error_code(e) == "ResourceNotFoundException":
                raise SecretNotFoundError(f"secret not found: {name}") from e
            raise SecretStoreError("READ_ERROR", f"failed to read secret {name}: {e}") from e
        except BotoCoreError as e:
            raise SecretStoreError("READ_ERROR", f"failed to read secret {name}: {e}") from e

        if "SecretString" not in output:
            raise SecretStoreError("READ_ERROR", f"secret {name} has no string value")
        return output["SecretString"]
