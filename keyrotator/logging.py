"""
keyrotator logging utilities.

Provides configurable logging for rotation runs and GitHub HTTP traffic.
Ensures no private keys or access tokens are logged.
"""

import logging
import re
from collections.abc import MutableMapping
from typing import Any

# Create package loggers
_root_logger = logging.getLogger("keyrotator")
_http_logger = logging.getLogger("keyrotator.http")
_rotation_logger = logging.getLogger("keyrotator.rotation")

# Patterns for sensitive data that should be masked
_SENSITIVE_PATTERNS = [
    # Private key patterns (PEM and OpenSSH format)
    (re.compile(r"-----BEGIN[^-]*PRIVATE KEY-----.*?-----END[^-]*PRIVATE KEY-----", re.DOTALL), "[PRIVATE_KEY_REDACTED]"),
    # GitHub tokens (installation, personal, OAuth, refresh)
    (re.compile(r"\bgh[pousr]_[A-Za-z0-9]{20,}\b"), "[TOKEN_REDACTED]"),
    # JWTs (app authentication)
    (re.compile(r"\beyJ[A-Za-z0-9_-]+\.[A-Za-z0-9_-]+\.[A-Za-z0-9_-]+"), "[JWT_REDACTED]"),
    # Bearer authorization headers
    (re.compile(r"(Bearer)\s+[^\s'\"]+", re.IGNORECASE), r"\1 [REDACTED]"),
    # Secret/token patterns
    (re.compile(r"(secret|token|password|private_key)['\"]?\s*[:=]\s*['\"][^'\"]+['\"]", re.IGNORECASE), r"\1: [REDACTED]"),
]

_SENSITIVE_KEYS = frozenset({"token", "private_key", "secret", "password", "authorization", "key"})


def configure_logging(
    level: int = logging.INFO,
    http_level: int | None = None,
    rotation_level: int | None = None,
    handler: logging.Handler | None = None,
    format_string: str | None = None,
) -> None:
    """
    Configure keyrotator logging.

    Args:
        level: Default log level for all keyrotator loggers (default: INFO)
        http_level: Log level for GitHub request/response logging (default: same as level)
        rotation_level: Log level for per-repository rotation logging (default: same as level)
        handler: Custom handler to use (default: StreamHandler to stderr)
        format_string: Custom format string (default: includes timestamp, level, logger name)

    Example:
        ```python
        import logging
        from keyrotator.logging import configure_logging

        # Enable debug logging for GitHub requests
        configure_logging(level=logging.INFO, http_level=logging.DEBUG)
        ```
    """
    if format_string is None:
        format_string = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    formatter = logging.Formatter(format_string)

    if handler is None:
        handler = logging.StreamHandler()

    handler.setFormatter(formatter)

    _root_logger.setLevel(level)
    _root_logger.addHandler(handler)

    _http_logger.setLevel(http_level if http_level is not None else level)
    _rotation_logger.setLevel(rotation_level if rotation_level is not None else level)


def get_logger(name: str | None = None) -> logging.Logger:
    """
    Get a keyrotator logger.

    Args:
        name: Logger name suffix (e.g., "http", "rotation"). If None, returns the package logger.

    Returns:
        Logger instance
    """
    if name is None:
        return _root_logger
    return logging.getLogger(f"keyrotator.{name}")


class RepositoryLogger(logging.LoggerAdapter):
    """
    Logger adapter carrying team, repository and owner context.

    The context is attached to each record as extra attributes and appended
    to the message so it survives plain-text formatters.

    Example:
        ```python
        log = RepositoryLogger(get_logger("rotation"), team="ops", repository="infra", owner="acme")
        log.warning("failed to list github keys: %s", err)
        # failed to list github keys: ... team=ops repository=infra owner=acme
        ```
    """

    def __init__(self, logger: logging.Logger, team: str, repository: str, owner: str) -> None:
        super().__init__(logger, {"team": team, "repository": repository, "owner": owner})

    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any]
    ) -> tuple[Any, MutableMapping[str, Any]]:
        kwargs["extra"] = {**self.extra, **kwargs.get("extra", {})}
        return msg, kwargs

    def log(self, level: int, msg: Any, *args: Any, **kwargs: Any) -> None:
        fields = " ".join(f"{k}={v}" for k, v in self.extra.items())
        if args:
            # The message is %-formatted later
            fields = fields.replace("%", "%%")
        super().log(level, f"{msg} {fields}", *args, **kwargs)


def mask_sensitive_data(text: str) -> str:
    """
    Mask sensitive data in a string.

    Replaces private keys, GitHub tokens, JWTs and other sensitive patterns
    with redacted placeholders.

    Args:
        text: Text that may contain sensitive data

    Returns:
        Text with sensitive data masked
    """
    result = text
    for pattern, replacement in _SENSITIVE_PATTERNS:
        result = pattern.sub(replacement, result)
    return result


def safe_log_dict(data: dict[str, Any], sensitive_keys: frozenset[str] | None = None) -> dict[str, Any]:
    """
    Create a copy of a dictionary with sensitive values masked.

    Args:
        data: Dictionary that may contain sensitive values
        sensitive_keys: Keys to mask (default: token, private_key, secret, password, authorization, key)

    Returns:
        Dictionary with sensitive values replaced with "[REDACTED]"
    """
    if sensitive_keys is None:
        sensitive_keys = _SENSITIVE_KEYS

    result: dict[str, Any] = {}
    for key, value in data.items():
        if key.lower() in sensitive_keys:
            result[key] = "[REDACTED]"
        elif isinstance(value, dict):
            result[key] = safe_log_dict(value, sensitive_keys)
        elif isinstance(value, list):
            result[key] = [
                safe_log_dict(item, sensitive_keys) if isinstance(item, dict) else item
                for item in value
            ]
        elif isinstance(value, str):
            result[key] = mask_sensitive_data(value)
        else:
            result[key] = value

    return result


def log_http_request(
    method: str,
    url: str,
    params: dict[str, Any] | None = None,
    body: dict[str, Any] | None = None,
) -> None:
    """Log a GitHub request at DEBUG level with sensitive data masked."""
    if not _http_logger.isEnabledFor(logging.DEBUG):
        return

    log_parts = [f"{method} {url}"]

    if params:
        log_parts.append(f"params={params}")

    if body:
        log_parts.append(f"body={safe_log_dict(body)}")

    _http_logger.debug(" | ".join(log_parts))


def log_http_response(
    status_code: int,
    url: str,
    elapsed_ms: float | None = None,
) -> None:
    """Log a GitHub response at DEBUG level."""
    if not _http_logger.isEnabledFor(logging.DEBUG):
        return

    log_parts = [f"Response {status_code} from {url}"]

    if elapsed_ms is not None:
        log_parts.append(f"elapsed={elapsed_ms:.2f}ms")

    _http_logger.debug(" | ".join(log_parts))


__all__ = [
    "configure_logging",
    "get_logger",
    "RepositoryLogger",
    "mask_sensitive_data",
    "safe_log_dict",
    "log_http_request",
    "log_http_response",
]
