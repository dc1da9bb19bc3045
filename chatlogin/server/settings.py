"""Server capability settings and their local cache."""

import logging
from dataclasses import dataclass, asdict, fields
from typing import TYPE_CHECKING, Optional

from .repository import LocalRepository

if TYPE_CHECKING:
    from ..client.chat_client import ChatClient

__all__ = ["ServerSettings", "SettingsRepository", "SOCIAL_PROVIDERS", "PUBLIC_SETTING_KEYS"]

logger = logging.getLogger(__name__)

# Display order of the social login buttons
SOCIAL_PROVIDERS = ("facebook", "github", "google", "linkedin", "meteor", "twitter", "gitlab")

# Public setting id on the server -> ServerSettings field
PUBLIC_SETTING_KEYS = {
    "CAS_enabled": "cas_enabled",
    "CAS_login_url": "cas_login_url",
    "LDAP_Enable": "ldap_enabled",
    "Accounts_OAuth_Facebook": "facebook_enabled",
    "Accounts_OAuth_Github": "github_enabled",
    "Accounts_OAuth_Google": "google_enabled",
    "Accounts_OAuth_Linkedin": "linkedin_enabled",
    "Accounts_OAuth_Meteor": "meteor_enabled",
    "Accounts_OAuth_Twitter": "twitter_enabled",
    "Accounts_OAuth_Gitlab": "gitlab_enabled",
}
REGISTRATION_FORM_KEY = "Accounts_RegistrationForm"

SETTINGS_KEY_PREFIX = "settings:"


@dataclass(frozen=True)
class ServerSettings:
    """Snapshot of what a chat server allows on its login screen."""

    cas_enabled: bool = False
    cas_login_url: str = ""
    registration_enabled: bool = False
    ldap_enabled: bool = False
    facebook_enabled: bool = False
    github_enabled: bool = False
    google_enabled: bool = False
    linkedin_enabled: bool = False
    meteor_enabled: bool = False
    twitter_enabled: bool = False
    gitlab_enabled: bool = False

    def provider_enabled(self, provider: str) -> bool:
        return getattr(self, f"{provider}_enabled")

    def enabled_providers(self) -> list[str]:
        """Social providers turned on, in button order."""
        return [p for p in SOCIAL_PROVIDERS if self.provider_enabled(p)]

    @classmethod
    def from_public_settings(cls, settings: list[dict]) -> "ServerSettings":
        """Build from the ``settings`` list of ``GET /api/v1/settings.public``.

        Unknown ids are ignored and missing ones keep their defaults.
        """
        values: dict = {}
        for item in settings:
            setting_id = item.get("_id")
            value = item.get("value")
            if setting_id == REGISTRATION_FORM_KEY:
                values["registration_enabled"] = value == "Public"
            elif setting_id in PUBLIC_SETTING_KEYS:
                name = PUBLIC_SETTING_KEYS[setting_id]
                if name == "cas_login_url":
                    values[name] = value or ""
                else:
                    values[name] = bool(value)
        return cls(**values)

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "ServerSettings":
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})


class SettingsRepository:
    """Per-server settings cached in the local key/value store."""

    def __init__(self, local: LocalRepository):
        self.local = local

    def get(self, server: str) -> Optional[ServerSettings]:
        """Cached settings for ``server``, or None if never fetched."""
        data = self.local.get(SETTINGS_KEY_PREFIX + server)
        if not isinstance(data, dict):
            return None
        try:
            return ServerSettings.from_dict(data)
        except TypeError as e:
            logger.warning(f"Ignoring malformed settings cache for {server}: {e}")
            return None

    def save(self, server: str, settings: ServerSettings) -> None:
        self.local.save(SETTINGS_KEY_PREFIX + server, settings.to_dict())

    def refresh(self, server: str, client: "ChatClient") -> ServerSettings:
        """Fetch settings from the server and update the cache.

        Raises:
            ChatClientError: If the server cannot be queried
        """
        settings = client.get_settings()
        self.save(server, settings)
        logger.info(f"Settings refreshed for {server}")
        return settings
