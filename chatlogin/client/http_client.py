"""Base HTTP client with retry logic for the chat server REST API."""

import logging
from typing import Optional

import requests

from .retry import RetryConfig, retry_with_backoff, RetryExhausted

__all__ = [
    "BaseApiClient",
    "ChatClientError",
    "ChatTwoFactorError",
]

logger = logging.getLogger(__name__)

TWO_FACTOR_ERRORS = {"totp-required", "totp-invalid"}


class ChatClientError(Exception):
    """Chat server client error.

    ``message`` is the human readable text reported by the server, or None
    when the server gave nothing usable.
    """

    def __init__(self, message: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message or "")
        self.message = message
        self.status_code = status_code


class ChatTwoFactorError(ChatClientError):
    """The server accepted the credentials but wants a second factor."""

    pass


class _TransientError(Exception):
    """Internal: Marks an error as transient/retryable."""

    pass


def _error_details(response: requests.Response) -> tuple[Optional[str], Optional[str]]:
    """Pull (error_code, message) out of an error response body."""
    try:
        body = response.json()
    except ValueError:
        return None, None
    if not isinstance(body, dict):
        return None, None
    code = body.get("errorType") or body.get("error")
    message = body.get("message") or body.get("reason") or body.get("error")
    return code, message


class BaseApiClient:
    """Base HTTP client with retry logic.

    Handles:
    - Session management
    - Authentication headers (X-User-Id / X-Auth-Token)
    - Retry with exponential backoff
    - Error handling and classification
    """

    DEFAULT_RETRY_CONFIG = RetryConfig()

    USER_AGENT = "chatlogin/0.3.0"

    def __init__(
        self,
        server_url: str,
        user_id: Optional[str] = None,
        auth_token: Optional[str] = None,
        timeout: int = 30,
        retry_config: Optional[RetryConfig] = None,
        session: Optional[requests.Session] = None,
    ):
        """Initialize base API client.

        Args:
            server_url: Chat server base URL, e.g. "https://chat.example.com"
            user_id: User id from a previous login
            auth_token: Auth token from a previous login
            timeout: Request timeout in seconds
            retry_config: Configuration for retry with exponential backoff
            session: Optional requests session (for dependency injection/testing)
        """
        self.server_url = server_url.rstrip("/")
        self.user_id = user_id
        self.auth_token = auth_token
        self.timeout = timeout
        self.retry_config = retry_config or self.DEFAULT_RETRY_CONFIG
        self._session = session or requests.Session()
        self._owns_session = session is None

    @property
    def api_url(self) -> str:
        return f"{self.server_url}/api/v1"

    def _get_headers(self) -> dict:
        """Get request headers with authentication."""
        headers = {
            "Accept": "application/json",
            "User-Agent": self.USER_AGENT,
        }
        if self.user_id and self.auth_token:
            headers["X-User-Id"] = self.user_id
            headers["X-Auth-Token"] = self.auth_token
        return headers

    def _request(
        self,
        method: str,
        endpoint: str,
        data: Optional[dict] = None,
        params: Optional[dict] = None,
        retry: bool = True,
    ) -> dict:
        """Make request to the chat server API.

        Args:
            method: HTTP method
            endpoint: API endpoint (relative to api_url)
            data: JSON request body
            params: Query string parameters
            retry: Whether to retry on transient failures

        Returns:
            Response data as dict

        Raises:
            ChatTwoFactorError: When the server asks for a second factor
            ChatClientError: For other errors
        """
        url = f"{self.api_url}/{endpoint.lstrip('/')}"
        kwargs: dict = {"timeout": self.timeout, "headers": self._get_headers()}
        if data is not None:
            kwargs["json"] = data
        if params:
            kwargs["params"] = params

        def do_request() -> dict:
            try:
                response = self._session.request(method, url, **kwargs)
            except requests.exceptions.ConnectionError:
                raise _TransientError("Cannot connect to chat server")
            except requests.exceptions.Timeout:
                raise _TransientError("Request timed out")

            # Server errors (5xx) are retryable
            if response.status_code >= 500:
                raise _TransientError(f"Server error: {response.status_code}")

            if response.status_code >= 400:
                code, message = _error_details(response)
                if code in TWO_FACTOR_ERRORS:
                    raise ChatTwoFactorError(message, response.status_code)
                raise ChatClientError(message, response.status_code)

            if not response.content:
                return {}
            try:
                body = response.json()
            except ValueError:
                raise ChatClientError("Invalid response from chat server", response.status_code)
            if not isinstance(body, dict):
                raise ChatClientError("Invalid response from chat server", response.status_code)
            return body

        if retry:
            try:
                return retry_with_backoff(
                    do_request,
                    config=self.retry_config,
                    retryable_exceptions=(_TransientError,),
                )
            except RetryExhausted as e:
                if e.last_error:
                    raise ChatClientError(str(e.last_error)) from e.last_error
                raise ChatClientError("Request failed after retries") from e
        else:
            try:
                return do_request()
            except _TransientError as e:
                raise ChatClientError(str(e)) from e

    def set_credentials(self, user_id: str, auth_token: str) -> None:
        """Set authentication credentials."""
        self.user_id = user_id
        self.auth_token = auth_token

    def close(self) -> None:
        """Close the session if we own it."""
        if self._owns_session and self._session is not None:
            self._session.close()
            self._session = None

    def __enter__(self) -> "BaseApiClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
