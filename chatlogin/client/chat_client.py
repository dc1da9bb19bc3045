"""Chat server REST client - the login, profile and push endpoints."""

import json
import logging
from dataclasses import dataclass
from typing import Optional

from ..config import DEFAULT_PUSH_APP_NAME
from ..server.settings import ServerSettings, PUBLIC_SETTING_KEYS, REGISTRATION_FORM_KEY
from .http_client import BaseApiClient, ChatClientError, ChatTwoFactorError

__all__ = [
    "ChatClient",
    "ChatClientError",
    "ChatTwoFactorError",
    "SessionToken",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionToken:
    """Credentials issued by a successful login."""

    user_id: str
    auth_token: str


class ChatClient(BaseApiClient):
    """Client for the chat server's authentication related endpoints."""

    def __init__(self, server_url: str, push_app_name: str = DEFAULT_PUSH_APP_NAME, **kwargs):
        super().__init__(server_url, **kwargs)
        self.push_app_name = push_app_name

    def _login(self, payload: dict) -> Optional[SessionToken]:
        """POST the login payload and capture the issued token.

        Returns:
            SessionToken, or None when the server answered without one

        Raises:
            ChatTwoFactorError: If a second factor is required
            ChatClientError: For any other failure
        """
        # Login is not idempotent on the server side (it mints a token)
        response = self._request("POST", "login", data=payload, retry=False)
        if response.get("status") == "error":
            raise ChatClientError(response.get("message") or response.get("error"))

        data = response.get("data") or {}
        user_id = data.get("userId")
        auth_token = data.get("authToken")
        if not user_id or not auth_token:
            logger.warning("Login response carried no token")
            return None

        self.set_credentials(user_id, auth_token)
        return SessionToken(user_id=user_id, auth_token=auth_token)

    def login(self, username: str, password: str) -> Optional[SessionToken]:
        """Log in with a username and password."""
        return self._login({"username": username, "password": password})

    def login_with_email(self, email: str, password: str) -> Optional[SessionToken]:
        """Log in with an email address and password."""
        return self._login({"email": email, "password": password})

    def login_with_ldap(self, username: str, password: str) -> Optional[SessionToken]:
        """Log in against the server's LDAP directory."""
        return self._login(
            {
                "ldap": True,
                "username": username,
                "ldapPass": password,
                "ldapOptions": {},
            }
        )

    def login_with_cas(self, credential_token: str) -> Optional[SessionToken]:
        """Finish a CAS login using the correlation token of the redirect."""
        return self._login({"cas": {"credentialToken": credential_token}})

    def me(self) -> dict:
        """Profile of the logged in user."""
        return self._request("GET", "me")

    def register_push_token(self, token: str) -> None:
        """Tell the server where to deliver push notifications for this user."""
        self._request(
            "POST",
            "push.token",
            data={"type": "gcm", "value": token, "appName": self.push_app_name},
        )
        logger.info("Push token registered")

    def get_settings(self) -> ServerSettings:
        """Fetch the public settings relevant to the login screen."""
        wanted = [*PUBLIC_SETTING_KEYS, REGISTRATION_FORM_KEY]
        response = self._request(
            "GET",
            "settings.public",
            params={"query": json.dumps({"_id": {"$in": wanted}})},
        )
        return ServerSettings.from_public_settings(response.get("settings", []))
