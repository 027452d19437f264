"""Utilities for OAuth2 and connected standards (OpenID Connect, UMA2)."""

from oauth2_utils.scope import (
    InvalidScopeParameter,
    InvalidScopeToken,
    MalformedScopeParameter,
    ScopeError,
    ScopeSet,
    is_scope_parameter,
    is_scope_token,
    parse_scope_parameter,
)

__all__ = [
    "ScopeSet",
    "ScopeError",
    "MalformedScopeParameter",
    "InvalidScopeParameter",
    "InvalidScopeToken",
    "is_scope_token",
    "is_scope_parameter",
    "parse_scope_parameter",
]
