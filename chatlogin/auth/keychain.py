"""Per-server session token storage using the system keychain."""

import json
import logging
from dataclasses import dataclass
from typing import Optional

import keyring
from keyring.errors import KeyringError, PasswordDeleteError

__all__ = ["MultiServerTokenStore", "TokenModel"]

logger = logging.getLogger(__name__)

SERVICE_NAME = "chatlogin"


@dataclass
class TokenModel:
    """Session credentials persisted for one server."""

    user_id: str
    auth_token: str

    def to_json(self) -> str:
        return json.dumps({"user_id": self.user_id, "auth_token": self.auth_token})

    @classmethod
    def from_json(cls, data: str) -> "TokenModel":
        parsed = json.loads(data)
        return cls(user_id=parsed["user_id"], auth_token=parsed["auth_token"])


class MultiServerTokenStore:
    """Keeps at most one session token per server address.

    The server address is the keychain account name, so saving a new token
    for a server replaces the previous one.
    """

    def __init__(self, service_name: str = SERVICE_NAME):
        """Initialize token store.

        Args:
            service_name: Service name for keychain entries
        """
        self.service_name = service_name

    def save(self, server: str, token: TokenModel) -> bool:
        """Store the token for ``server``, replacing any earlier one.

        Returns:
            True if stored successfully
        """
        try:
            keyring.set_password(self.service_name, server, token.to_json())
            logger.info(f"Token stored for {server}")
            return True
        except KeyringError as e:
            logger.error(f"Failed to store token for {server}: {e}")
            return False

    def load(self, server: str) -> Optional[TokenModel]:
        """Token for ``server``, or None if none is stored."""
        try:
            data = keyring.get_password(self.service_name, server)
            if data:
                return TokenModel.from_json(data)
            return None
        except KeyringError as e:
            logger.error(f"Failed to load token for {server}: {e}")
            return None
        except (json.JSONDecodeError, KeyError) as e:
            logger.error(f"Invalid token format for {server}: {e}")
            return None

    def delete(self, server: str) -> bool:
        """Forget the token for ``server``.

        Returns:
            True if deleted (or didn't exist)
        """
        try:
            keyring.delete_password(self.service_name, server)
            logger.info(f"Token deleted for {server}")
            return True
        except PasswordDeleteError:
            return True
        except KeyringError as e:
            logger.error(f"Failed to delete token for {server}: {e}")
            return False
