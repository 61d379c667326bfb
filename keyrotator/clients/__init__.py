"""GitHub resource clients."""

from keyrotator.clients.apps import AppsClient
from keyrotator.clients.keys import KeysClient

__all__ = [
    "AppsClient",
    "KeysClient",
]
