"""Auth module - login workflow and session token storage."""

from .keychain import MultiServerTokenStore, TokenModel
from .login import LoginWorkflow

__all__ = ["LoginWorkflow", "MultiServerTokenStore", "TokenModel"]
