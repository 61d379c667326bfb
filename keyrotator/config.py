"""Run configuration loaded from environment variables."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from keyrotator.exceptions import ConfigurationError
from keyrotator.github import GitHubApp
from keyrotator.rotation import GRACE_DELAY, MAX_KEY_AGE
from keyrotator.templates import (
    DEFAULT_KEY_TEMPLATE,
    DEFAULT_TITLE_TEMPLATE,
    DEFAULT_TOKEN_TEMPLATE,
)

ENV_PREFIX = "KEYROTATOR_"


def _env(name: str, default: str | None = None) -> str | None:
    value = os.environ.get(ENV_PREFIX + name)
    if value is None or value == "":
        return default
    return value


def _parse_number(name: str, value: str, kind: type) -> float:
    try:
        number = kind(value)
    except ValueError:
        raise ConfigurationError(f"{ENV_PREFIX}{name} must be a number, got {value!r}") from None
    if number < 0:
        raise ConfigurationError(f"{ENV_PREFIX}{name} must not be negative, got {value!r}")
    return number


@dataclass
class Settings:
    """Settings for a rotation run."""

    github_app_id: int
    github_key_path: str | None = None
    github_key_secret: str | None = None
    github_base_url: str = GitHubApp.DEFAULT_BASE_URL
    region: str | None = None
    token_template: str = DEFAULT_TOKEN_TEMPLATE
    key_template: str = DEFAULT_KEY_TEMPLATE
    title_template: str = DEFAULT_TITLE_TEMPLATE
    grace_delay: float = GRACE_DELAY
    max_key_age_days: int = MAX_KEY_AGE.days
    key_type: str = "ed25519"
    timeout: float = GitHubApp.DEFAULT_TIMEOUT
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        """
        Create settings from environment variables.

        Environment variables:
            KEYROTATOR_GITHUB_APP_ID: GitHub App identifier (required)
            KEYROTATOR_GITHUB_KEY_PATH: Path to the app's PEM private key
            KEYROTATOR_GITHUB_KEY_SECRET: Secrets Manager secret holding the app's PEM private key
            KEYROTATOR_GITHUB_BASE_URL: GitHub API URL (optional, default: https://api.github.com)
            KEYROTATOR_REGION: AWS region (optional, default: AWS_REGION)
            KEYROTATOR_TOKEN_TEMPLATE: Secret path template for access tokens
            KEYROTATOR_KEY_TEMPLATE: Secret path template for deploy keys
            KEYROTATOR_TITLE_TEMPLATE: Deploy key title template
            KEYROTATOR_GRACE_DELAY: Seconds to wait before deleting an old key (default: 1)
            KEYROTATOR_MAX_KEY_AGE_DAYS: Age in days after which keys rotate (default: 7)
            KEYROTATOR_KEY_TYPE: "ed25519" or "rsa" (default: ed25519)
            KEYROTATOR_TIMEOUT: GitHub request timeout in seconds (default: 30)
            KEYROTATOR_LOG_LEVEL: Log level name (default: INFO)

        One of KEYROTATOR_GITHUB_KEY_PATH and KEYROTATOR_GITHUB_KEY_SECRET is required.

        Raises:
            ConfigurationError: If required variables are missing or invalid
        """
        app_id = _env("GITHUB_APP_ID")
        if not app_id:
            raise ConfigurationError(f"{ENV_PREFIX}GITHUB_APP_ID environment variable not set")
        try:
            github_app_id = int(app_id)
        except ValueError:
            raise ConfigurationError(
                f"{ENV_PREFIX}GITHUB_APP_ID must be an integer, got {app_id!r}"
            ) from None

        key_path = _env("GITHUB_KEY_PATH")
        key_secret = _env("GITHUB_KEY_SECRET")
        if not key_path and not key_secret:
            raise ConfigurationError(
                f"{ENV_PREFIX}GITHUB_KEY_PATH or {ENV_PREFIX}GITHUB_KEY_SECRET must be set"
            )

        key_type = (_env("KEY_TYPE", "ed25519") or "ed25519").lower()
        if key_type not in ("ed25519", "rsa"):
            raise ConfigurationError(
                f"Invalid {ENV_PREFIX}KEY_TYPE: {key_type}. Must be 'ed25519' or 'rsa'"
            )

        log_level = (_env("LOG_LEVEL", "INFO") or "INFO").upper()
        if not isinstance(logging.getLevelName(log_level), int):
            raise ConfigurationError(f"Invalid {ENV_PREFIX}LOG_LEVEL: {log_level}")

        return cls(
            github_app_id=github_app_id,
            github_key_path=key_path,
            github_key_secret=key_secret,
            github_base_url=_env("GITHUB_BASE_URL", GitHubApp.DEFAULT_BASE_URL),
            region=_env("REGION", os.environ.get("AWS_REGION") or None),
            token_template=_env("TOKEN_TEMPLATE", DEFAULT_TOKEN_TEMPLATE),
            key_template=_env("KEY_TEMPLATE", DEFAULT_KEY_TEMPLATE),
            title_template=_env("TITLE_TEMPLATE", DEFAULT_TITLE_TEMPLATE),
            grace_delay=_parse_number("GRACE_DELAY", _env("GRACE_DELAY", str(GRACE_DELAY)), float),
            max_key_age_days=int(
                _parse_number("MAX_KEY_AGE_DAYS", _env("MAX_KEY_AGE_DAYS", str(MAX_KEY_AGE.days)), int)
            ),
            key_type=key_type,
            timeout=_parse_number("TIMEOUT", _env("TIMEOUT", str(GitHubApp.DEFAULT_TIMEOUT)), float),
            log_level=log_level,
        )

    def read_github_key(self) -> str:
        """
        Read the GitHub App private key from its file.

        Raises:
            ConfigurationError: If no key path is set or the file cannot be read
        """
        if not self.github_key_path:
            raise ConfigurationError("no GitHub App key path configured")
        try:
            return Path(self.github_key_path).read_text()
        except OSError as e:
            raise ConfigurationError(
                f"failed to read GitHub App key {self.github_key_path}: {e}"
            ) from e
