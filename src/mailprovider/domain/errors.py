"""Domain-specific exceptions for typed error handling at boundaries.

There is no transport failure exception: a rejected send is reported as a
``False`` return plus an entry in :attr:`Message.errors`, never raised.
"""

from __future__ import annotations


class InvalidArgumentError(TypeError):
    """A builder or adapter operation received a value of the wrong type.

    Raised before any state is touched, so the object keeps its previous
    contents. Inherits from TypeError so generic ``except TypeError``
    handlers still catch it.

    Example:
        >>> from mailprovider.domain.errors import InvalidArgumentError
        >>> err = InvalidArgumentError("add_to: expects a string argument; received 'int'")
        >>> isinstance(err, TypeError)
        True
    """


class UnsupportedProtocolError(ValueError):
    """A transport protocol name outside the recognised set.

    Example:
        >>> from mailprovider.domain.errors import UnsupportedProtocolError
        >>> err = UnsupportedProtocolError("Protocol ftp does not exist")
        >>> str(err)
        'Protocol ftp does not exist'
    """


class AttachmentNotFoundError(FileNotFoundError):
    """An attachment path that does not resolve to a regular file.

    Example:
        >>> from mailprovider.domain.errors import AttachmentNotFoundError
        >>> err = AttachmentNotFoundError('File at path "/nope" does not exist.')
        >>> isinstance(err, FileNotFoundError)
        True
    """


class InvalidMessageError(ValueError):
    """Message state that cannot be dispatched (no sender, no recipients).

    Example:
        >>> from mailprovider.domain.errors import InvalidMessageError
        >>> str(InvalidMessageError("No sender address set"))
        'No sender address set'
    """


class ConfigurationError(Exception):
    """Missing, invalid, or incomplete transport configuration.

    Example:
        >>> from mailprovider.domain.errors import ConfigurationError
        >>> err = ConfigurationError("mailer section must be a table")
        >>> str(err)
        'mailer section must be a table'
    """


__all__ = [
    "AttachmentNotFoundError",
    "ConfigurationError",
    "InvalidArgumentError",
    "InvalidMessageError",
    "UnsupportedProtocolError",
]
