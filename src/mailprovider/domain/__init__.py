"""Domain layer - pure message data with no transport or framework dependencies.

Contents:
    * :mod:`.values` - Address and attachment value types
    * :mod:`.message` - The Message builder aggregate
    * :mod:`.enums` - Transport protocol, mode, secure channel, content type
    * :mod:`.errors` - Domain exception types
    * :mod:`.validation` - Argument checks shared by builder and adapters
"""

from __future__ import annotations

from .enums import ContentType, SecureChannel, TransportMode, TransportProtocol
from .errors import (
    AttachmentNotFoundError,
    ConfigurationError,
    InvalidArgumentError,
    InvalidMessageError,
    UnsupportedProtocolError,
)
from .message import Message
from .values import Address, Attachment, FileAttachment, InlineAttachment, guess_mime_type, sniff_mime_type

__all__ = [
    # Values
    "Address",
    "Attachment",
    "FileAttachment",
    "InlineAttachment",
    "guess_mime_type",
    "sniff_mime_type",
    # Aggregate
    "Message",
    # Enums
    "ContentType",
    "SecureChannel",
    "TransportMode",
    "TransportProtocol",
    # Errors
    "AttachmentNotFoundError",
    "ConfigurationError",
    "InvalidArgumentError",
    "InvalidMessageError",
    "UnsupportedProtocolError",
]
