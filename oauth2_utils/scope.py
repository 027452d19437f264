"""OAuth2 scope grammar and scope sets (RFC6749 section 3.3).

This module provides:
- Predicates for a single scope token and for a space-delimited scope parameter
- ScopeSet, an immutable set of validated scope tokens that parses from and
  serializes to the scope parameter wire form

Grammar:
    scope       = scope-token *( SP scope-token )
    scope-token = 1*NQCHAR
    NQCHAR      = %x21 / %x23-5B / %x5D-7E
"""

import logging
import re
from collections.abc import Iterable, Iterator, Set
from typing import Any, Union

from pydantic import GetCoreSchemaHandler, GetJsonSchemaHandler
from pydantic.json_schema import JsonSchemaValue
from pydantic_core import core_schema

logger = logging.getLogger(__name__)

ScopeToken = str
ScopeParameter = str

NQCHAR = r"\x21\x23-\x5B\x5D-\x7E"

SCOPE_TOKEN_PATTERN = re.compile(rf"[{NQCHAR}]+")
SCOPE_PARAMETER_PATTERN = re.compile(rf"[{NQCHAR}]+(?: [{NQCHAR}]+)*")


class ScopeError(Exception):
    """Base class for scope errors."""

    def __init__(self, value: Any, message: str):
        self.value = value
        super().__init__(message)


class MalformedScopeParameter(ScopeError, ValueError):
    """Raised when a string is not a well-formed scope parameter.

    Possible reasons:
    - Additional space before, after or between the scopes
    - Forbidden character
    - Empty string

    Callers owning protocol responses should answer with ``error``.
    """

    error = "invalid_scope"

    def __init__(self, value: Any, message: str | None = None):
        super().__init__(value, message or f"Invalid scope parameter: {value!r}")


class InvalidScopeToken(ScopeError, ValueError):
    """Raised when a scope set member is not a valid scope token."""

    def __init__(self, value: Any, message: str | None = None):
        super().__init__(value, message or f"Invalid scope token: {value!r}")


class InvalidScopeParameter(ScopeError, AssertionError):
    """Raised by ScopeSet.from_parameter_or_panic on malformed input.

    Signals a programming error, not bad client input, so it is not a
    ValueError and is not caught alongside MalformedScopeParameter.
    """

    def __init__(self, value: Any, message: str | None = None):
        super().__init__(
            value, message or f"Scope parameter should have been valid: {value!r}"
        )


def is_scope_token(text: str) -> bool:
    """Check if the value is a valid OAuth2 scope token.

    Example:
        ```python
        is_scope_token("document.read")   # True
        is_scope_token("invalid\\\\scope")  # False
        ```
    """
    if not isinstance(text, str):
        return False
    return SCOPE_TOKEN_PATTERN.fullmatch(text) is not None


def is_scope_parameter(text: str) -> bool:
    """Check if the value is a valid OAuth2 scope parameter.

    The empty string is not a scope parameter. Use ``ScopeSet.new`` if an
    empty value should mean "no scopes".

    Example:
        ```python
        is_scope_parameter("users:read feed:edit room:manage")   # True
        is_scope_parameter("users:read feed:edit  room:manage")  # False
        ```
    """
    if not isinstance(text, str):
        return False
    return SCOPE_PARAMETER_PATTERN.fullmatch(text) is not None


def invalid_scope_tokens(text: str) -> list[str]:
    """Return the segments of a space-split string that are not scope tokens.

    Empty segments (from leading, trailing or doubled spaces) are reported as
    ``""``. Intended for error messages only; validity is decided by
    ``is_scope_parameter``.
    """
    return [segment for segment in text.split(" ") if not is_scope_token(segment)]


def _reject_string(scopes: Iterable[str]) -> Iterable[str]:
    # A str is an iterable of characters, never of scope tokens
    if isinstance(scopes, str):
        raise TypeError(
            f"Expected an iterable of scope tokens, got the string {scopes!r}; "
            "use ScopeSet.from_parameter to parse a scope parameter"
        )
    return scopes


class ScopeSet(Set):
    """Immutable set of OAuth2 scope tokens.

    Every member is a valid scope token. The only ways in are the validating
    constructors; set algebra between scope sets never re-validates.

    Example:
        ```python
        scopes = ScopeSet.from_parameter("users:read feed:edit room:manage")
        scopes.to_parameter()  # "feed:edit room:manage users:read"
        "users:read" in scopes  # True
        ```
    """

    __slots__ = ("_scopes",)

    def __init__(self):
        self._scopes: frozenset[str] = frozenset()

    @classmethod
    def _trusted(cls, scopes: Iterable[str]) -> "ScopeSet":
        # Members are already known to be valid scope tokens
        instance = cls.__new__(cls)
        instance._scopes = frozenset(scopes)
        return instance

    @classmethod
    def _from_iterable(cls, it: Iterable[str]) -> "ScopeSet":
        # Used by the collections.abc.Set operators
        return cls._trusted(it)

    @classmethod
    def empty(cls) -> "ScopeSet":
        """Return a scope set with no members."""
        return cls._trusted(())

    @classmethod
    def from_parameter(cls, scope_parameter: ScopeParameter) -> "ScopeSet":
        """Parse a scope parameter.

        Raises:
            MalformedScopeParameter: If the value is not a well-formed scope
                parameter (this includes the empty string)
        """
        if not is_scope_parameter(scope_parameter):
            logger.debug(f"Rejected malformed scope parameter: {scope_parameter!r}")
            raise MalformedScopeParameter(scope_parameter)
        return cls._trusted(scope_parameter.split(" "))

    @classmethod
    def from_parameter_or_panic(cls, scope_parameter: ScopeParameter) -> "ScopeSet":
        """Parse a scope parameter that the caller has already validated.

        Raises:
            InvalidScopeParameter: If the value is malformed
        """
        try:
            return cls.from_parameter(scope_parameter)
        except MalformedScopeParameter as e:
            raise InvalidScopeParameter(scope_parameter) from e

    @classmethod
    def from_scopes(cls, scopes: Iterable[str]) -> "ScopeSet":
        """Build a scope set from an iterable of scope tokens.

        Raises:
            TypeError: If ``scopes`` is a string; parse it with
                ``from_parameter`` instead
            InvalidScopeToken: On the first member that is not a scope token
        """
        _reject_string(scopes)
        members = []
        for scope in scopes:
            if not is_scope_token(scope):
                raise InvalidScopeToken(scope)
            members.append(scope)
        return cls._trusted(members)

    @classmethod
    def new(
        cls, value: Union["ScopeSet", ScopeParameter, Iterable[str], None] = None
    ) -> "ScopeSet":
        """Build a scope set from whatever form the scopes come in.

        - ``None`` or ``""`` returns the empty set
        - a non-empty string is parsed with ``from_parameter_or_panic``
        - a ScopeSet is returned unchanged
        - any other iterable is validated with ``from_scopes``
        """
        if value is None or value == "":
            return cls.empty()
        if isinstance(value, str):
            return cls.from_parameter_or_panic(value)
        if isinstance(value, ScopeSet):
            return value
        return cls.from_scopes(value)

    def to_parameter(self) -> ScopeParameter:
        """Serialize to a scope parameter, members sorted.

        The empty set serializes to ``""``, which is not itself a valid scope
        parameter.
        """
        return " ".join(self.to_list())

    def to_list(self) -> list[str]:
        return sorted(self._scopes)

    def insert(self, scope: ScopeToken) -> "ScopeSet":
        """Return a new set with ``scope`` added.

        Raises:
            InvalidScopeToken: If ``scope`` is not a scope token
        """
        if not is_scope_token(scope):
            raise InvalidScopeToken(scope)
        return self._trusted(self._scopes | {scope})

    def delete(self, scope: ScopeToken) -> "ScopeSet":
        """Return a new set without ``scope``."""
        return self._trusted(self._scopes - {scope})

    def union(self, other: Iterable[str]) -> "ScopeSet":
        return self._trusted(self._scopes | self._coerce(other)._scopes)

    def intersection(self, other: Iterable[str]) -> "ScopeSet":
        return self._trusted(self._scopes.intersection(_reject_string(other)))

    def difference(self, other: Iterable[str]) -> "ScopeSet":
        return self._trusted(self._scopes.difference(_reject_string(other)))

    def symmetric_difference(self, other: Iterable[str]) -> "ScopeSet":
        return self._trusted(self._scopes ^ self._coerce(other)._scopes)

    def __or__(self, other: object) -> "ScopeSet":
        if not isinstance(other, Set):
            return NotImplemented
        return self.union(other)

    def __xor__(self, other: object) -> "ScopeSet":
        if not isinstance(other, Set):
            return NotImplemented
        return self.symmetric_difference(other)

    def __rsub__(self, other: object) -> "ScopeSet":
        if not isinstance(other, Set):
            return NotImplemented
        return self._coerce(other).difference(self)

    __ror__ = __or__
    __rxor__ = __xor__

    def issubset(self, other: Iterable[str]) -> bool:
        return self._scopes.issubset(_reject_string(other))

    def issuperset(self, other: Iterable[str]) -> bool:
        return self._scopes.issuperset(_reject_string(other))

    def _coerce(self, other: Iterable[str]) -> "ScopeSet":
        # Anything that may add members must go through validation
        if isinstance(other, ScopeSet):
            return other
        return self.from_scopes(other)

    def __contains__(self, scope: object) -> bool:
        return scope in self._scopes

    def __iter__(self) -> Iterator[str]:
        return iter(self._scopes)

    def __len__(self) -> int:
        return len(self._scopes)

    def __hash__(self) -> int:
        return hash(self._scopes)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ScopeSet):
            return self._scopes == other._scopes
        if isinstance(other, (set, frozenset)):
            return self._scopes == other
        return NotImplemented

    def __str__(self) -> str:
        return self.to_parameter()

    def __repr__(self) -> str:
        return f"ScopeSet({self.to_list()!r})"

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        return core_schema.no_info_plain_validator_function(
            cls._validate,
            serialization=core_schema.plain_serializer_function_ser_schema(
                lambda scopes: scopes.to_parameter()
            ),
        )

    @classmethod
    def __get_pydantic_json_schema__(
        cls, schema: core_schema.CoreSchema, handler: GetJsonSchemaHandler
    ) -> JsonSchemaValue:
        # Models expose scopes in their wire form
        return {
            "type": "string",
            "pattern": f"^({SCOPE_PARAMETER_PATTERN.pattern})?$",
            "description": "Space-delimited OAuth2 scope tokens",
        }

    @classmethod
    def _validate(cls, value: Any) -> "ScopeSet":
        # Fields carry client input: malformed strings are a ValueError here,
        # not a programming error
        if isinstance(value, str):
            return cls.from_parameter(value) if value else cls.empty()
        if value is None or isinstance(value, (ScopeSet, list, tuple, set, frozenset)):
            return cls.new(value)
        raise ValueError(f"Cannot build a scope set from {type(value).__name__}")


def parse_scope_parameter(scope_parameter: ScopeParameter | None) -> ScopeSet:
    """Parse a possibly absent ``scope`` request parameter.

    An absent or empty parameter means no scopes were requested. Anything
    else must be a well-formed scope parameter.

    Raises:
        MalformedScopeParameter: If a non-empty value is malformed
    """
    if not scope_parameter:
        return ScopeSet.empty()
    return ScopeSet.from_parameter(scope_parameter)
