"""chatlogin - login workflow for multi-server chat clients."""

__version__ = "0.3.0"
