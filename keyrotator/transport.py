"""
HTTP Transport for the GitHub REST API.

Handles HTTP communication, bearer authentication and error handling.
Requests are attempted exactly once; a failed request surfaces as a typed
exception and is never retried.
"""

import time
from collections.abc import Callable
from typing import Any

import httpx

from keyrotator.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    GitHubError,
    NotFoundError,
    RateLimitedError,
    ServerError,
    ValidationError,
)
from keyrotator.logging import log_http_request, log_http_response

GITHUB_API_VERSION = "2022-11-28"


class HTTPTransport:
    """
    HTTP transport layer for GitHub with bearer authentication.

    Handles:
    - Authorization headers from a token provider (app JWT or installation token)
    - Empty (204) responses
    - Error response parsing into typed exceptions
    """

    def __init__(
        self,
        base_url: str,
        token_provider: Callable[[], str],
        timeout: float = 30.0,
    ) -> None:
        """
        Initialize HTTP transport.

        Args:
            base_url: Base URL for API requests (e.g., "https://api.github.com")
            token_provider: Callable returning the bearer token for each request
            timeout: Request timeout in seconds
        """
        self.base_url = base_url.rstrip("/")
        self.token_provider = token_provider
        self.timeout = timeout

        self._client = httpx.Client(
            base_url=self.base_url,
            timeout=timeout,
            headers={
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": GITHUB_API_VERSION,
            },
        )

    def close(self) -> None:
        """Close the HTTP client."""
        self._client.close()

    def __enter__(self) -> "HTTPTransport":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        body: dict[str, Any] | None = None,
    ) -> Any:
        """
        Make an authenticated request.

        Args:
            method: HTTP method (GET, POST, DELETE, etc.)
            path: API path (e.g., "/repos/acme/infra/keys")
            params: Query parameters
            body: JSON request body

        Returns:
            Parsed JSON response, or None for empty responses

        Raises:
            GitHubError: On API or connection errors
        """
        headers = {"Authorization": f"Bearer {self.token_provider()}"}
        log_http_request(method, path, params=params, body=body)

        started = time.monotonic()
        try:
            response = self._client.request(
                method, path, params=params, json=body, headers=headers
            )
        except httpx.RequestError as e:
            raise ServerError("CONNECTION_ERROR", str(e)) from e

        log_http_response(
            response.status_code, path, elapsed_ms=(time.monotonic() - started) * 1000
        )

        if response.status_code >= 400:
            raise self._parse_error_response(response)

        if response.status_code == 204 or not response.content:
            return None

        try:
            return response.json()
        except ValueError as e:
            raise ServerError(
                "INVALID_RESPONSE",
                f"invalid JSON response from {path}: {e}",
                response.headers.get("X-GitHub-Request-Id"),
            ) from e

    def _parse_error_response(self, response: httpx.Response) -> GitHubError:
        """
        Parse an error response into a typed exception.

        Args:
            response: HTTP response with error status

        Returns:
            Appropriate GitHubError subclass
        """
        try:
            data = response.json()
        except ValueError:
            data = {}

        if not isinstance(data, dict):
            data = {}

        message = data.get("message", f"HTTP {response.status_code}")
        request_id = response.headers.get("X-GitHub-Request-Id")
        status_code = response.status_code

        if status_code == 401:
            return AuthenticationError("UNAUTHORIZED", message, request_id)
        elif status_code == 403:
            if response.headers.get("X-RateLimit-Remaining") == "0":
                return RateLimitedError(
                    "RATE_LIMITED", message, self._retry_after(response), request_id
                )
            return AuthorizationError("FORBIDDEN", message, request_id)
        elif status_code == 404:
            return NotFoundError("NOT_FOUND", message, request_id)
        elif status_code == 409:
            return ConflictError("CONFLICT", message, request_id)
        elif status_code == 429:
            return RateLimitedError(
                "RATE_LIMITED", message, self._retry_after(response), request_id
            )
        elif status_code >= 500:
            return ServerError("SERVER_ERROR", message, request_id)
        else:
            return ValidationError("VALIDATION_ERROR", message, request_id)

    @staticmethod
    def _retry_after(response: httpx.Response) -> int:
        try:
            return int(response.headers.get("Retry-After", "60"))
        except ValueError:
            return 60
