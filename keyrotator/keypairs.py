"""
SSH key pair generators.

Supports Ed25519 and RSA deploy keys.
"""

from abc import ABC, abstractmethod

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ed25519, rsa

from keyrotator.exceptions import ConfigurationError
from keyrotator.types.keys import KeyPair


def _openssh_private(private_key: ed25519.Ed25519PrivateKey | rsa.RSAPrivateKey) -> str:
    return private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.OpenSSH,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode()


def _openssh_public(private_key: ed25519.Ed25519PrivateKey | rsa.RSAPrivateKey, comment: str) -> str:
    public = private_key.public_key().public_bytes(
        encoding=serialization.Encoding.OpenSSH,
        format=serialization.PublicFormat.OpenSSH,
    ).decode()
    if comment:
        return f"{public} {comment}"
    return public


class KeyPairGenerator(ABC):
    """Abstract base class for deploy key generators."""

    name: str

    @abstractmethod
    def generate(self, name: str) -> KeyPair:
        """Generate a new key pair, using name as the public key comment."""
        pass


class Ed25519KeyPairGenerator(KeyPairGenerator):
    """Generates Ed25519 deploy keys."""

    name = "ed25519"

    def generate(self, name: str) -> KeyPair:
        """
        Generate a new Ed25519 key pair.

        Args:
            name: Comment attached to the public key

        Returns:
            KeyPair with an OpenSSH private key and authorized_keys public key
        """
        private_key = ed25519.Ed25519PrivateKey.generate()
        return KeyPair(
            private_key=_openssh_private(private_key),
            public_key=_openssh_public(private_key, name),
        )


class RsaKeyPairGenerator(KeyPairGenerator):
    """Generates RSA deploy keys."""

    name = "rsa"

    def __init__(self, key_size: int = 4096) -> None:
        if key_size < 2048:
            raise ConfigurationError(f"RSA key size must be at least 2048, got {key_size}")
        self.key_size = key_size

    def generate(self, name: str) -> KeyPair:
        """
        Generate a new RSA key pair.

        Args:
            name: Comment attached to the public key

        Returns:
            KeyPair with an OpenSSH private key and authorized_keys public key
        """
        private_key = rsa.generate_private_key(public_exponent=65537, key_size=self.key_size)
        return KeyPair(
            private_key=_openssh_private(private_key),
            public_key=_openssh_public(private_key, name),
        )


def key_pair_generator(kind: str) -> KeyPairGenerator:
    """
    Select a key pair generator by name.

    Raises:
        ConfigurationError: If kind is not "ed25519" or "rsa"
    """
    kind = kind.lower()
    if kind == "ed25519":
        return Ed25519KeyPairGenerator()
    if kind == "rsa":
        return RsaKeyPairGenerator()
    raise ConfigurationError(f"Invalid key type: {kind}. Must be 'ed25519' or 'rsa'")
