"""Server module - current server selection and server settings."""

from .repository import CurrentServerRepository, LocalRepository
from .settings import ServerSettings, SettingsRepository

__all__ = ["CurrentServerRepository", "LocalRepository", "ServerSettings", "SettingsRepository"]
