"""Client module - talks to the chat server REST API."""

from .chat_client import ChatClient, SessionToken
from .http_client import ChatClientError, ChatTwoFactorError
from .retry import RetryConfig, retry_with_backoff

__all__ = [
    "ChatClient",
    "ChatClientError",
    "ChatTwoFactorError",
    "RetryConfig",
    "SessionToken",
    "retry_with_backoff",
]
