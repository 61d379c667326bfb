"""keyrotator exception classes."""


class KeyRotatorError(Exception):
    """Base exception for all keyrotator errors."""

    def __init__(self, code: str, message: str) -> None:
        self.code = code
        self.message = message
        super().__init__(f"[{code}] {message}")


class ConfigurationError(KeyRotatorError):
    """Raised when configuration or team input is invalid or missing."""

    def __init__(self, message: str) -> None:
        super().__init__("CONFIGURATION_ERROR", message)


class TemplateResolutionError(KeyRotatorError):
    """Raised when a path or title template cannot be resolved."""

    def __init__(self, message: str) -> None:
        super().__init__("TEMPLATE_ERROR", message)


# ============================================================================
# Rotation step errors
# ============================================================================


class TokenMintError(KeyRotatorError):
    """Raised when an installation access token cannot be minted."""

    def __init__(self, message: str) -> None:
        super().__init__("TOKEN_MINT_ERROR", message)


class TokenWriteError(KeyRotatorError):
    """Raised when a minted access token cannot be written to the secret store."""

    def __init__(self, message: str) -> None:
        super().__init__("TOKEN_WRITE_ERROR", message)


class KeyListError(KeyRotatorError):
    """Raised when the deploy keys of a repository cannot be listed."""

    def __init__(self, message: str) -> None:
        super().__init__("KEY_LIST_ERROR", message)


class SecretInspectionError(KeyRotatorError):
    """Raised when the last update time of a secret cannot be read."""

    def __init__(self, message: str, code: str = "SECRET_INSPECTION_ERROR") -> None:
        super().__init__(code, message)


class SecretNotFoundError(SecretInspectionError):
    """Raised when a secret does not exist in the secret store."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="SECRET_NOT_FOUND")


class KeyGenerationError(KeyRotatorError):
    """Raised when a new key pair cannot be generated."""

    def __init__(self, message: str) -> None:
        super().__init__("KEY_GENERATION_ERROR", message)


class KeyPublishError(KeyRotatorError):
    """Raised when a public key cannot be added to a repository."""

    def __init__(self, message: str) -> None:
        super().__init__("KEY_PUBLISH_ERROR", message)


class SecretPersistError(KeyRotatorError):
    """Raised when a new private key cannot be written to the secret store."""

    def __init__(self, message: str) -> None:
        super().__init__("SECRET_PERSIST_ERROR", message)


class KeyDeletionError(KeyRotatorError):
    """Raised when a retired deploy key cannot be deleted."""

    def __init__(self, message: str) -> None:
        super().__init__("KEY_DELETION_ERROR", message)


# ============================================================================
# Client errors
# ============================================================================


class SecretStoreError(KeyRotatorError):
    """Raised on secret store failures other than a missing secret."""

    pass


class SecretWriteError(SecretStoreError):
    """Raised when a secret value cannot be written."""

    def __init__(self, message: str) -> None:
        super().__init__("SECRET_WRITE_ERROR", message)


class GitHubError(KeyRotatorError):
    """Base exception for GitHub API errors."""

    def __init__(
        self, code: str, message: str, request_id: str | None = None
    ) -> None:
        super().__init__(code, message)
        self.request_id = request_id


class AuthenticationError(GitHubError):
    """Raised when the app JWT or installation token is rejected."""

    pass


class AuthorizationError(GitHubError):
    """Raised when access is denied."""

    pass


class NotFoundError(GitHubError):
    """Raised when a resource is not found."""

    pass


class ConflictError(GitHubError):
    """Raised on conflicts."""

    pass


class RateLimitedError(GitHubError):
    """Raised when rate limited."""

    def __init__(
        self,
        code: str,
        message: str,
        retry_after: int,
        request_id: str | None = None,
    ) -> None:
        super().__init__(code, message, request_id)
        self.retry_after = retry_after


class ValidationError(GitHubError):
    """Raised on validation errors (e.g. a key that is already in use)."""

    pass


class ServerError(GitHubError):
    """Raised on server errors (5xx) and connection failures."""

    pass
