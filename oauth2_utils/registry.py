"""Static registries of OAuth2 and connected standards values.

Values come from the IANA "OAuth Parameters" registry
(https://www.iana.org/assignments/oauth-parameters/oauth-parameters.xhtml),
OpenID Connect Discovery 1.0 and the UMA 2.0 specifications. Each entry is
tagged with the standard set it originates from:

- StandardSet.OAUTH2: RFC6749 and the other RFCs published by the IETF
- StandardSet.OIDC: OpenID Connect (https://openid.net/developers/specs/)
- StandardSet.UMA2: User Managed Access, published by the Kantara Initiative

Regarding the origin of a value, the IETF has precedence over the others.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Optional

logger = logging.getLogger(__name__)


class RegistryError(ValueError):
    """Raised when a standard set, location or table name is unknown."""

    pass


class StandardSet(Enum):
    """Standard a registry value originates from."""

    OAUTH2 = "oauth2"
    OIDC = "oidc"
    UMA2 = "uma2"


class ParameterLocation(Enum):
    """Where an OAuth parameter may appear.

    AUTHORIZATION_REQUEST to TOKEN_RESPONSE come from OAuth2,
    ACCESS_TOKEN_RESPONSE from OpenID Connect, and the remaining values from
    UMA 2.0.
    """

    AUTHORIZATION_REQUEST = "authorization_request"
    AUTHORIZATION_RESPONSE = "authorization_response"
    TOKEN_REQUEST = "token_request"
    TOKEN_RESPONSE = "token_response"
    ACCESS_TOKEN_RESPONSE = "access_token_response"
    CLIENT_REQUEST = "client_request"
    AUTHORIZATION_SERVER_RESPONSE = "authorization_server_response"
    TOKEN_ENDPOINT = "token_endpoint"


@dataclass(frozen=True)
class RegistryEntry:
    """Metadata of a registry value.

    Attributes:
        standard_set: Standard the value originates from
        locations: Parameter locations (parameters table only)
        uses_authorization_endpoint: Whether a grant type goes through the
            authorization endpoint (grant types table only)
    """

    standard_set: StandardSet
    locations: tuple[ParameterLocation, ...] = ()
    uses_authorization_endpoint: Optional[bool] = None


DEFAULT_STANDARD_SETS: tuple[StandardSet, ...] = (StandardSet.OAUTH2,)

_OAUTH2 = RegistryEntry(StandardSet.OAUTH2)
_OIDC = RegistryEntry(StandardSet.OIDC)
_UMA2 = RegistryEntry(StandardSet.UMA2)


def _param(standard_set: str, *locations: str) -> RegistryEntry:
    return RegistryEntry(
        StandardSet(standard_set),
        tuple(ParameterLocation(location) for location in locations),
    )


def _grant(uses_authorization_endpoint: bool) -> RegistryEntry:
    return RegistryEntry(
        StandardSet.OAUTH2, uses_authorization_endpoint=uses_authorization_endpoint
    )


ACCESS_TOKEN_TYPES: dict[str, RegistryEntry] = {
    "Bearer": _OAUTH2,
}

AUTHORIZATION_ENDPOINT_RESPONSE_TYPES: dict[str, RegistryEntry] = {
    "code": _OAUTH2,
    "code id_token": _OIDC,
    "code id_token token": _OIDC,
    "code token": _OIDC,
    "id_token": _OIDC,
    "id_token token": _OIDC,
    "none": _OIDC,
    "token": _OAUTH2,
}

EXTENSION_ERRORS: dict[str, RegistryEntry] = {
    "invalid_request": _OAUTH2,
    "invalid_token": _OAUTH2,
    "insufficient_scope": _OAUTH2,
    "unsupported_token_type": _OAUTH2,
    "interaction_required": _OIDC,
    "login_required": _OIDC,
    "session_selection_required": _OIDC,
    "consent_required": _OIDC,
    "invalid_request_uri": _OIDC,
    "invalid_request_object": _OIDC,
    "request_not_supported": _OIDC,
    "request_uri_not_supported": _OIDC,
    "registration_not_supported": _OIDC,
    "need_info": _UMA2,
    "request_denied": _UMA2,
    "request_submitted": _UMA2,
}

PARAMETERS: dict[str, RegistryEntry] = {
    "client_id": _param("oauth2", "authorization_request", "token_request"),
    "client_secret": _param("oauth2", "token_request"),
    "response_type": _param("oauth2", "authorization_request"),
    "redirect_uri": _param("oauth2", "authorization_request", "token_request"),
    "scope": _param(
        "oauth2",
        "authorization_request",
        "authorization_response",
        "token_request",
        "token_response",
    ),
    "state": _param("oauth2", "authorization_request", "authorization_response"),
    "code": _param("oauth2", "authorization_response", "token_request"),
    "error": _param("oauth2", "authorization_response", "token_response"),
    "error_description": _param("oauth2", "authorization_response", "token_response"),
    "error_uri": _param("oauth2", "authorization_response", "token_response"),
    "grant_type": _param("oauth2", "token_request"),
    "access_token": _param("oauth2", "authorization_response", "token_response"),
    "token_type": _param("oauth2", "authorization_response", "token_response"),
    "expires_in": _param("oauth2", "authorization_response", "token_response"),
    "username": _param("oauth2", "token_request"),
    "password": _param("oauth2", "token_request"),
    "refresh_token": _param("oauth2", "token_request", "token_response"),
    "nonce": _param("oidc", "authorization_request"),
    "display": _param("oidc", "authorization_request"),
    "prompt": _param("oidc", "authorization_request"),
    "max_age": _param("oidc", "authorization_request"),
    "ui_locales": _param("oidc", "authorization_request"),
    "claims_locales": _param("oidc", "authorization_request"),
    "id_token_hint": _param("oidc", "authorization_request"),
    "login_hint": _param("oidc", "authorization_request"),
    "acr_values": _param("oidc", "authorization_request"),
    "claims": _param("oidc", "authorization_request"),
    "registration": _param("oidc", "authorization_request"),
    "request": _param("oidc", "authorization_request"),
    "request_uri": _param("oidc", "authorization_request"),
    "id_token": _param("oidc", "authorization_response", "access_token_response"),
    "session_state": _param("oidc", "authorization_response", "access_token_response"),
    "assertion": _param("oidc", "token_request"),
    "client_assertion": _param("oauth2", "token_request"),
    "client_assertion_type": _param("oauth2", "token_request"),
    "code_verifier": _param("oauth2", "token_request"),
    "code_challenge": _param("oauth2", "authorization_request"),
    "code_challenge_method": _param("oauth2", "authorization_request"),
    "claim_token": _param("uma2", "client_request", "token_endpoint"),
    "pct": _param(
        "uma2", "client_request", "token_endpoint", "authorization_server_response"
    ),
    "rpt": _param("uma2", "client_request", "token_endpoint"),
    "ticket": _param("uma2", "client_request", "token_endpoint"),
    "upgraded": _param("uma2", "authorization_server_response", "token_endpoint"),
    "vtr": _param("oauth2", "authorization_request", "token_request"),
}

TOKEN_TYPE_HINTS: dict[str, RegistryEntry] = {
    "access_token": _OAUTH2,
    "refresh_token": _OAUTH2,
    "pct": _UMA2,
}

URIS: dict[str, RegistryEntry] = {
    "urn:ietf:params:oauth:grant-type:jwt-bearer": _OAUTH2,
    "urn:ietf:params:oauth:client-assertion-type:jwt-bearer": _OAUTH2,
    "urn:ietf:params:oauth:grant-type:saml2-bearer": _OAUTH2,
    "urn:ietf:params:oauth:client-assertion-type:saml2-bearer": _OAUTH2,
    "urn:ietf:params:oauth:token-type:jwt": _OAUTH2,
}

DYNAMIC_CLIENT_REGISTRATION_METADATA: dict[str, RegistryEntry] = {
    "redirect_uris": _OAUTH2,
    "token_endpoint_auth_method": _OAUTH2,
    "grant_types": _OAUTH2,
    "response_types": _OAUTH2,
    "client_name": _OAUTH2,
    "client_uri": _OAUTH2,
    "logo_uri": _OAUTH2,
    "scope": _OAUTH2,
    "contacts": _OAUTH2,
    "tos_uri": _OAUTH2,
    "policy_uri": _OAUTH2,
    "jwks_uri": _OAUTH2,
    "jwks": _OAUTH2,
    "software_id": _OAUTH2,
    "software_version": _OAUTH2,
    "client_id": _OAUTH2,
    "client_secret": _OAUTH2,
    "client_id_issued_at": _OAUTH2,
    "client_secret_expires_at": _OAUTH2,
    "registration_access_token": _OAUTH2,
    "registration_client_uri": _OAUTH2,
    "application_type": _OIDC,
    "sector_identifier_uri": _OIDC,
    "subject_type": _OIDC,
    "id_token_signed_response_alg": _OIDC,
    "id_token_encrypted_response_alg": _OIDC,
    "id_token_encrypted_response_enc": _OIDC,
    "userinfo_signed_response_alg": _OIDC,
    "userinfo_encrypted_response_alg": _OIDC,
    "userinfo_encrypted_response_enc": _OIDC,
    "request_object_signing_alg": _OIDC,
    "request_object_encryption_alg": _OIDC,
    "request_object_encryption_enc": _OIDC,
    "token_endpoint_auth_signing_alg": _OIDC,
    "default_max_age": _OIDC,
    "require_auth_time": _OIDC,
    "default_acr_values": _OIDC,
    "initiate_login_uri": _OIDC,
    "request_uris": _OIDC,
    "claims_redirect_uris": _UMA2,
}

TOKEN_ENDPOINT_AUTHENTICATION_METHODS: dict[str, RegistryEntry] = {
    "none": _OAUTH2,
    "client_secret_post": _OAUTH2,
    "client_secret_basic": _OAUTH2,
    "client_secret_jwt": _OIDC,
    "private_key_jwt": _OIDC,
}

PKCE_CODE_CHALLENGE_METHODS: dict[str, RegistryEntry] = {
    "plain": _OAUTH2,
    "S256": _OAUTH2,
}

TOKEN_INTROSPECTION_RESPONSE_MEMBERS: dict[str, RegistryEntry] = {
    "active": _OAUTH2,
    "username": _OAUTH2,
    "client_id": _OAUTH2,
    "scope": _OAUTH2,
    "token_type": _OAUTH2,
    "exp": _OAUTH2,
    "iat": _OAUTH2,
    "nbf": _OAUTH2,
    "sub": _OAUTH2,
    "aud": _OAUTH2,
    "iss": _OAUTH2,
    "jti": _OAUTH2,
    "permissions": _UMA2,
    "vot": _OAUTH2,
    "vtm": _OAUTH2,
}

AUTHORIZATION_SERVER_METADATA: dict[str, RegistryEntry] = {
    "issuer": _OAUTH2,
    "authorization_endpoint": _OAUTH2,
    "token_endpoint": _OAUTH2,
    "jwks_uri": _OAUTH2,
    "registration_endpoint": _OAUTH2,
    "scopes_supported": _OAUTH2,
    "response_types_supported": _OAUTH2,
    "response_modes_supported": _OAUTH2,
    "grant_types_supported": _OAUTH2,
    "token_endpoint_auth_methods_supported": _OAUTH2,
    "token_endpoint_auth_signing_alg_values_supported": _OAUTH2,
    "service_documentation": _OAUTH2,
    "ui_locales_supported": _OAUTH2,
    "op_policy_uri": _OAUTH2,
    "op_tos_uri": _OAUTH2,
    "revocation_endpoint": _OAUTH2,
    "revocation_endpoint_auth_methods_supported": _OAUTH2,
    "revocation_endpoint_auth_signing_alg_values_supported": _OAUTH2,
    "introspection_endpoint": _OAUTH2,
    "introspection_endpoint_auth_methods_supported": _OAUTH2,
    "introspection_endpoint_auth_signing_alg_values_supported": _OAUTH2,
    "code_challenge_methods_supported": _OAUTH2,
    "signed_metadata": _OAUTH2,
    "userinfo_endpoint": _OIDC,
    "acr_values_supported": _OIDC,
    "subject_types_supported": _OIDC,
    "id_token_signing_alg_values_supported": _OIDC,
    "id_token_encryption_alg_values_supported": _OIDC,
    "id_token_encryption_enc_values_supported": _OIDC,
    "userinfo_signing_alg_values_supported": _OIDC,
    "userinfo_encryption_alg_values_supported": _OIDC,
    "userinfo_encryption_enc_values_supported": _OIDC,
    "request_object_signing_alg_values_supported": _OIDC,
    "request_object_encryption_alg_values_supported": _OIDC,
    "request_object_encryption_enc_values_supported": _OIDC,
    "display_values_supported": _OIDC,
    "claim_types_supported": _OIDC,
    "claims_supported": _OIDC,
    "claims_locales_supported": _OIDC,
    "claims_parameter_supported": _OIDC,
    "request_parameter_supported": _OIDC,
    "request_uri_parameter_supported": _OIDC,
    "require_request_uri_registration": _OIDC,
}

GRANT_TYPES: dict[str, RegistryEntry] = {
    "authorization_code": _grant(True),
    "implicit": _grant(True),
    "password": _grant(False),
    "client_credentials": _grant(False),
    "refresh_token": _grant(False),
    "urn:ietf:params:oauth:grant-type:jwt-bearer": _grant(False),
    "urn:ietf:params:oauth:grant-type:saml2-bearer": _grant(False),
}

# Table name -> table, as exposed on the command line
REGISTRIES: dict[str, dict[str, RegistryEntry]] = {
    "access_token_types": ACCESS_TOKEN_TYPES,
    "authorization_endpoint_response_types": AUTHORIZATION_ENDPOINT_RESPONSE_TYPES,
    "extension_errors": EXTENSION_ERRORS,
    "parameters": PARAMETERS,
    "token_type_hints": TOKEN_TYPE_HINTS,
    "uris": URIS,
    "dynamic_client_registration_metadata": DYNAMIC_CLIENT_REGISTRATION_METADATA,
    "token_endpoint_authentication_methods": TOKEN_ENDPOINT_AUTHENTICATION_METHODS,
    "pkce_code_challenge_methods": PKCE_CODE_CHALLENGE_METHODS,
    "token_introspection_response_members": TOKEN_INTROSPECTION_RESPONSE_MEMBERS,
    "authorization_server_metadata": AUTHORIZATION_SERVER_METADATA,
    "grant_types": GRANT_TYPES,
}


def parse_standard_sets(names: Iterable[str]) -> tuple[StandardSet, ...]:
    """Convert standard set names (e.g. "oauth2", "oidc") to StandardSet values.

    Raises:
        RegistryError: If a name is not a known standard set
    """
    standard_sets = []
    for name in names:
        try:
            standard_sets.append(StandardSet(name.strip().lower()))
        except ValueError:
            valid = ", ".join(s.value for s in StandardSet)
            raise RegistryError(
                f"Unknown standard set: {name!r}. Must be one of: {valid}"
            ) from None
    return tuple(standard_sets)


def parse_location(name: str) -> ParameterLocation:
    """Convert a location name (e.g. "token_request") to a ParameterLocation.

    Raises:
        RegistryError: If the name is not a known location
    """
    try:
        return ParameterLocation(name.strip().lower())
    except ValueError:
        valid = ", ".join(location.value for location in ParameterLocation)
        raise RegistryError(
            f"Unknown parameter location: {name!r}. Must be one of: {valid}"
        ) from None


def get_registry(name: str) -> dict[str, RegistryEntry]:
    """Look up a registry table by name.

    Raises:
        RegistryError: If no table has that name
    """
    try:
        return REGISTRIES[name]
    except KeyError:
        raise RegistryError(
            f"Unknown registry: {name!r}. Must be one of: {', '.join(REGISTRIES)}"
        ) from None


def filter_registry(
    registry: dict[str, RegistryEntry],
    standard_sets: Iterable[StandardSet] = DEFAULT_STANDARD_SETS,
    location: Optional[ParameterLocation] = None,
) -> list[str]:
    """Return the sorted names of a table whose entries match the filters."""
    wanted = set(standard_sets)
    names = [
        name
        for name, entry in registry.items()
        if entry.standard_set in wanted
        and (location is None or location in entry.locations)
    ]
    logger.debug(
        f"Registry lookup matched {len(names)} of {len(registry)} entries "
        f"(standard_sets={sorted(s.value for s in wanted)}, location={location})"
    )
    return sorted(names)


def get_access_token_types(
    standard_sets: Iterable[StandardSet] = DEFAULT_STANDARD_SETS,
) -> list[str]:
    """Return the access token types (IANA "OAuth Access Token Types").

    Example:
        ```python
        get_access_token_types()  # ["Bearer"]
        ```
    """
    return filter_registry(ACCESS_TOKEN_TYPES, standard_sets)


def get_authorization_endpoint_response_types(
    standard_sets: Iterable[StandardSet] = DEFAULT_STANDARD_SETS,
) -> list[str]:
    """Return the authorization endpoint response types.

    Example:
        ```python
        get_authorization_endpoint_response_types([StandardSet.OAUTH2])
        # ["code", "token"]
        ```
    """
    return filter_registry(AUTHORIZATION_ENDPOINT_RESPONSE_TYPES, standard_sets)


def get_extension_errors(
    standard_sets: Iterable[StandardSet] = DEFAULT_STANDARD_SETS,
) -> list[str]:
    """Return the extension error codes."""
    return filter_registry(EXTENSION_ERRORS, standard_sets)


def get_parameters(
    standard_sets: Iterable[StandardSet] = DEFAULT_STANDARD_SETS,
) -> list[str]:
    """Return the OAuth parameter names.

    Example:
        ```python
        get_parameters([StandardSet.UMA2])
        # ["claim_token", "pct", "rpt", "ticket", "upgraded"]
        ```
    """
    return filter_registry(PARAMETERS, standard_sets)


def get_parameters_for_location(
    location: ParameterLocation,
    standard_sets: Iterable[StandardSet] = DEFAULT_STANDARD_SETS,
) -> list[str]:
    """Return the OAuth parameter names allowed in a location."""
    return filter_registry(PARAMETERS, standard_sets, location=location)


def get_token_type_hints(
    standard_sets: Iterable[StandardSet] = DEFAULT_STANDARD_SETS,
) -> list[str]:
    """Return the token type hints (RFC7009 / UMA 2.0)."""
    return filter_registry(TOKEN_TYPE_HINTS, standard_sets)


def get_uris(standard_sets: Iterable[StandardSet] = DEFAULT_STANDARD_SETS) -> list[str]:
    """Return the OAuth URIs (IANA "OAuth URI")."""
    return filter_registry(URIS, standard_sets)


def get_dynamic_client_registration_metadata(
    standard_sets: Iterable[StandardSet] = DEFAULT_STANDARD_SETS,
) -> list[str]:
    """Return the dynamic client registration metadata names (RFC7591)."""
    return filter_registry(DYNAMIC_CLIENT_REGISTRATION_METADATA, standard_sets)


def get_token_endpoint_authentication_methods(
    standard_sets: Iterable[StandardSet] = DEFAULT_STANDARD_SETS,
) -> list[str]:
    """Return the token endpoint authentication methods.

    Example:
        ```python
        get_token_endpoint_authentication_methods()
        # ["client_secret_basic", "client_secret_post", "none"]
        ```
    """
    return filter_registry(TOKEN_ENDPOINT_AUTHENTICATION_METHODS, standard_sets)


def get_pkce_code_challenge_methods(
    standard_sets: Iterable[StandardSet] = DEFAULT_STANDARD_SETS,
) -> list[str]:
    return filter_registry(PKCE_CODE_CHALLENGE_METHODS, standard_sets)


def get_token_introspection_response_members(
    standard_sets: Iterable[StandardSet] = DEFAULT_STANDARD_SETS,
) -> list[str]:
    return filter_registry(TOKEN_INTROSPECTION_RESPONSE_MEMBERS, standard_sets)


def get_authorization_server_metadata(
    standard_sets: Iterable[StandardSet] = DEFAULT_STANDARD_SETS,
) -> list[str]:
    """Return the authorization server metadata names.

    Covers RFC8414 and OpenID Connect Discovery 1.0 provider metadata.
    """
    return filter_registry(AUTHORIZATION_SERVER_METADATA, standard_sets)


def get_grant_types(
    standard_sets: Iterable[StandardSet] = DEFAULT_STANDARD_SETS,
) -> list[str]:
    """Return the grant types (RFC7591)."""
    return filter_registry(GRANT_TYPES, standard_sets)


def uses_authorization_endpoint(grant_type: str) -> bool:
    """Check if a grant type requires the authorization endpoint.

    Unknown grant types return False.
    """
    entry = GRANT_TYPES.get(grant_type)
    return entry is not None and entry.uses_authorization_endpoint is True
