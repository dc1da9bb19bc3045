"""CAS single sign-on helpers.

A CAS login leaves the app: the user signs in on the CAS page, which then
redirects to the chat server's ``/_cas/<token>`` callback. The random token
travels with the redirect and is later handed back to the server to claim
the session that the redirect created.
"""

import secrets
import string

from ..config import SSO_TOKEN_LENGTH

__all__ = ["generate_correlation_token", "build_cas_url"]

_ALPHABET = string.ascii_letters + string.digits


def generate_correlation_token(length: int = SSO_TOKEN_LENGTH) -> str:
    """Random alphanumeric token tying a CAS redirect to this login attempt.

    Example:
        >>> len(generate_correlation_token())
        17
    """
    return "".join(secrets.choice(_ALPHABET) for _ in range(length))


def build_cas_url(cas_login_url: str, server: str, token: str) -> str:
    """URL of the CAS login page that redirects back to ``server``.

    Example:
        >>> build_cas_url("https://cas.example.com/login/", "https://chat.example.com", "abc")
        'https://cas.example.com/login?service=https://chat.example.com/_cas/abc'
    """
    return f"{cas_login_url.rstrip('/')}?service={server.rstrip('/')}/_cas/{token}"
