"""keyrotator - rotates GitHub deploy keys into AWS Secrets Manager."""

from keyrotator.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConfigurationError,
    ConflictError,
    GitHubError,
    KeyDeletionError,
    KeyGenerationError,
    KeyListError,
    KeyPublishError,
    KeyRotatorError,
    NotFoundError,
    RateLimitedError,
    SecretInspectionError,
    SecretNotFoundError,
    SecretPersistError,
    SecretStoreError,
    SecretWriteError,
    ServerError,
    TemplateResolutionError,
    TokenMintError,
    TokenWriteError,
    ValidationError,
)
from keyrotator.github import GitHubApp
from keyrotator.config import Settings
from keyrotator.handler import Handler
from keyrotator.keypairs import (
    Ed25519KeyPairGenerator,
    KeyPairGenerator,
    RsaKeyPairGenerator,
    key_pair_generator,
)
from keyrotator.logging import configure_logging, get_logger
from keyrotator.manager import Manager
from keyrotator.rotation import (
    OrgTokenCache,
    RepositoryState,
    RotationVerdict,
    Verdict,
    decide,
    execute_rotation,
)
from keyrotator.secrets import SecretsManagerStore
from keyrotator.templates import ResolvedPaths, Template, resolve_paths
from keyrotator.transport import HTTPTransport
from keyrotator.types import DeployKey, KeyPair, Repository, Team

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Run
    "Handler",
    "Manager",
    "Settings",
    # Rotation
    "OrgTokenCache",
    "RepositoryState",
    "RotationVerdict",
    "Verdict",
    "decide",
    "execute_rotation",
    # Input
    "Team",
    "Repository",
    "Template",
    "ResolvedPaths",
    "resolve_paths",
    # Collaborators
    "GitHubApp",
    "HTTPTransport",
    "SecretsManagerStore",
    "KeyPairGenerator",
    "Ed25519KeyPairGenerator",
    "RsaKeyPairGenerator",
    "key_pair_generator",
    "DeployKey",
    "KeyPair",
    # Exceptions
    "KeyRotatorError",
    "ConfigurationError",
    "TemplateResolutionError",
    "TokenMintError",
    "TokenWriteError",
    "KeyListError",
    "SecretInspectionError",
    "SecretNotFoundError",
    "KeyGenerationError",
    "KeyPublishError",
    "SecretPersistError",
    "KeyDeletionError",
    "SecretStoreError",
    "SecretWriteError",
    "GitHubError",
    "AuthenticationError",
    "AuthorizationError",
    "NotFoundError",
    "ConflictError",
    "RateLimitedError",
    "ValidationError",
    "ServerError",
    # Logging
    "configure_logging",
    "get_logger",
]
