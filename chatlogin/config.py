"""Configuration management for chatlogin."""

import json
import logging
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Optional

from platformdirs import user_config_dir, user_data_dir, user_log_dir

__all__ = [
    "Config",
    "setup_logging",
    "DEFAULT_REQUEST_TIMEOUT",
    "SSO_TOKEN_LENGTH",
]

logger = logging.getLogger(__name__)

APP_NAME = "chatlogin"
APP_AUTHOR = "chatlogin"

# Network defaults
DEFAULT_REQUEST_TIMEOUT = 30  # seconds
DEFAULT_CONNECTIVITY_HOST = "8.8.8.8"
DEFAULT_CONNECTIVITY_PORT = 53
DEFAULT_CONNECTIVITY_TIMEOUT = 1.5  # seconds

# Push registration
DEFAULT_PUSH_APP_NAME = "chat.rocket.android"

# Length of the random token that ties a CAS redirect back to this login
SSO_TOKEN_LENGTH = 17


@dataclass
class Config:
    """Main configuration object."""

    server_url: Optional[str] = None
    request_timeout: int = DEFAULT_REQUEST_TIMEOUT
    push_app_name: str = DEFAULT_PUSH_APP_NAME
    connectivity_host: str = DEFAULT_CONNECTIVITY_HOST
    connectivity_port: int = DEFAULT_CONNECTIVITY_PORT
    debug_mode: bool = False

    @classmethod
    def get_config_dir(cls) -> Path:
        """Get the configuration directory path."""
        return Path(user_config_dir(APP_NAME, APP_AUTHOR))

    @classmethod
    def get_data_dir(cls) -> Path:
        """Get the data directory path (local key/value store, settings cache)."""
        return Path(user_data_dir(APP_NAME, APP_AUTHOR))

    @classmethod
    def get_log_dir(cls) -> Path:
        """Get the log directory path."""
        return Path(user_log_dir(APP_NAME, APP_AUTHOR))

    @classmethod
    def get_config_file(cls) -> Path:
        """Get the config file path."""
        return cls.get_config_dir() / "config.json"

    @classmethod
    def load(cls) -> "Config":
        """Load config from file, or return defaults."""
        config_file = cls.get_config_file()
        if config_file.exists():
            try:
                with open(config_file, "r") as f:
                    data = json.load(f)
                return cls._from_dict(data)
            except Exception as e:
                logger.warning(f"Failed to load config: {e}, using defaults")
        return cls()

    @classmethod
    def _from_dict(cls, data: dict) -> "Config":
        """Create Config from dictionary, ignoring unknown keys."""
        return cls(**{k: v for k, v in data.items() if k in cls.__dataclass_fields__})

    def save(self) -> None:
        """Save config to file."""
        config_file = self.get_config_file()
        config_file.parent.mkdir(parents=True, exist_ok=True)

        with open(config_file, "w") as f:
            json.dump(asdict(self), f, indent=2)
        logger.info(f"Config saved to {config_file}")


def setup_logging(debug: bool = False) -> None:
    """Configure logging."""
    log_dir = Config.get_log_dir()
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "chatlogin.log"

    level = logging.DEBUG if debug else logging.INFO
    format_str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=level,
        format=format_str,
        handlers=[
            logging.FileHandler(log_file),
            logging.StreamHandler(),
        ],
    )

    # Reduce noise from libraries
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("requests").setLevel(logging.WARNING)
    logging.getLogger("keyring").setLevel(logging.WARNING)
