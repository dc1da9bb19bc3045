"""Internet connectivity check."""

import logging
import socket

from .config import (
    DEFAULT_CONNECTIVITY_HOST,
    DEFAULT_CONNECTIVITY_PORT,
    DEFAULT_CONNECTIVITY_TIMEOUT,
)

__all__ = ["NetworkProbe"]

logger = logging.getLogger(__name__)


class NetworkProbe:
    """Reports whether the device can reach the internet at all."""

    def __init__(
        self,
        host: str = DEFAULT_CONNECTIVITY_HOST,
        port: int = DEFAULT_CONNECTIVITY_PORT,
        timeout: float = DEFAULT_CONNECTIVITY_TIMEOUT,
    ):
        self.host = host
        self.port = port
        self.timeout = timeout

    def has_internet_access(self) -> bool:
        """True if a TCP connection to the probe host succeeds."""
        try:
            socket.create_connection((self.host, self.port), timeout=self.timeout).close()
            return True
        except OSError as e:
            logger.debug(f"No connectivity ({self.host}:{self.port}): {e}")
            return False
