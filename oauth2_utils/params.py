"""Syntax checks for RFC6749 request and response parameters.

Grammars from RFC6749 appendix A:
    VSCHAR            = %x20-7E
    UNICODECHARNOCRLF = %x09 / %x20-7E / %x80-D7FF / %xE000-FFFD / %x10000-10FFFF
"""

import re

VSCHAR = r"\x20-\x7E"
UNICODECHARNOCRLF = r"\x09\x20-\x7E\x80-\uD7FF\uE000-\uFFFD\U00010000-\U0010FFFF"

_VSCHARS = re.compile(rf"[{VSCHAR}]*")
_VSCHARS_NON_EMPTY = re.compile(rf"[{VSCHAR}]+")
_UNICODECHARS_NO_CRLF = re.compile(rf"[{UNICODECHARNOCRLF}]*")


def _matches(pattern: re.Pattern, value: str) -> bool:
    if not isinstance(value, str):
        return False
    return pattern.fullmatch(value) is not None


def is_client_id(client_id: str) -> bool:
    """Check if the value is a valid client_id (``*VSCHAR``).

    Example:
        ```python
        is_client_id("my_client_23")  # True
        is_client_id("my_client\\x1623")  # False
        ```
    """
    return _matches(_VSCHARS, client_id)


def is_client_secret(client_secret: str) -> bool:
    """Check if the value is a valid client_secret (``*VSCHAR``)."""
    return _matches(_VSCHARS, client_secret)


def is_authorization_code(code: str) -> bool:
    """Check if the value is a valid authorization code (``1*VSCHAR``).

    Example:
        ```python
        is_authorization_code("WIrgzqwBTQrgx*^TcyhBXonuCQ;',oi2~QO")  # True
        is_authorization_code("H\\u00ef")  # False
        ```
    """
    return _matches(_VSCHARS_NON_EMPTY, code)


def is_access_token(access_token: str) -> bool:
    """Check if the value is a valid access_token (``1*VSCHAR``)."""
    return _matches(_VSCHARS_NON_EMPTY, access_token)


def is_refresh_token(refresh_token: str) -> bool:
    """Check if the value is a valid refresh_token (``1*VSCHAR``)."""
    return _matches(_VSCHARS_NON_EMPTY, refresh_token)


def is_username(username: str) -> bool:
    """Check if the value is a valid username (``*UNICODECHARNOCRLF``).

    Example:
        ```python
        is_username("\\u043c\\u043e\\u043b\\u0434\\u0443")  # True
        is_username("john\\nsmith")  # False
        ```
    """
    return _matches(_UNICODECHARS_NO_CRLF, username)


def is_password(password: str) -> bool:
    """Check if the value is a valid password (``*UNICODECHARNOCRLF``)."""
    return _matches(_UNICODECHARS_NO_CRLF, password)


# Parameter kind (as named on the command line) -> validator
VALIDATORS = {
    "client-id": is_client_id,
    "client-secret": is_client_secret,
    "code": is_authorization_code,
    "access-token": is_access_token,
    "refresh-token": is_refresh_token,
    "username": is_username,
    "password": is_password,
}
