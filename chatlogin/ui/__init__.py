"""UI module - terminal login screen."""

from .console import ConsoleLoginView, ConsoleNavigator, Destination

__all__ = ["ConsoleLoginView", "ConsoleNavigator", "Destination"]
