"""Argument checks shared by the builder and the adapters.

Every public operation validates its arguments up front so a failing call
leaves the receiver untouched.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from .errors import InvalidArgumentError


def describe_type(value: object) -> str:
    """Return the short type name used in error messages.

    Example:
        >>> describe_type(42)
        'int'
        >>> describe_type(None)
        'NoneType'
    """
    return type(value).__name__


def require_str(method: str, value: object) -> str:
    """Return *value* unchanged when it is a string, else raise.

    Raises:
        InvalidArgumentError: When *value* is not a ``str``.

    Example:
        >>> require_str("add_to", "a@example.com")
        'a@example.com'
        >>> require_str("add_to", 42)  # doctest: +IGNORE_EXCEPTION_DETAIL
        Traceback (most recent call last):
        ...
        InvalidArgumentError: add_to: expects a string argument; received "int"
    """
    if not isinstance(value, str):
        raise InvalidArgumentError(f'{method}: expects a string argument; received "{describe_type(value)}"')
    return value


def require_optional_str(method: str, value: object) -> str | None:
    """Like :func:`require_str` but lets ``None`` through."""
    if value is None:
        return None
    return require_str(method, value)


def require_mapping(method: str, value: object) -> Mapping[str, Any]:
    """Return *value* when it is a mapping, else raise InvalidArgumentError."""
    if not isinstance(value, Mapping):
        raise InvalidArgumentError(f'{method}: expects a mapping argument; received "{describe_type(value)}"')
    return value  # type: ignore[return-value]


def require_sequence(method: str, value: object) -> Sequence[Any]:
    """Return *value* when it is a list or tuple, else raise InvalidArgumentError.

    Strings are sequences too but never what a caller means here.
    """
    if isinstance(value, str) or not isinstance(value, Sequence):
        raise InvalidArgumentError(f'{method}: expects an array argument; received "{describe_type(value)}"')
    return value


__all__ = [
    "describe_type",
    "require_mapping",
    "require_optional_str",
    "require_sequence",
    "require_str",
]
