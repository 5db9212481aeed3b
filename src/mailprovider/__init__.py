"""Public package surface: message model, provider facade, transports, wiring.

Routes imports through the architectural layers:
- Domain exports: Message, value types, enums, errors
- Application exports: MailProvider and the MailTransport port
- Adapter exports: the reference LibraryMailer and its TransportConfig
- Composition exports: wired services and ``create_provider``
- Metadata: Package information
"""

from __future__ import annotations

# Metadata
from .__init__conf__ import print_info

# Adapter exports
from .adapters.mailer import LibraryMailer, MailerSession, TransportConfig

# Application exports
from .application import MailProvider, MailTransport

# Composition exports (wired adapters)
from .composition import build_production, build_testing, create_provider, get_config

# Domain exports
from .domain import (
    Address,
    AttachmentNotFoundError,
    ConfigurationError,
    ContentType,
    FileAttachment,
    InlineAttachment,
    InvalidArgumentError,
    InvalidMessageError,
    Message,
    SecureChannel,
    TransportMode,
    TransportProtocol,
    UnsupportedProtocolError,
)

__all__ = [
    "Address",
    "AttachmentNotFoundError",
    "ConfigurationError",
    "ContentType",
    "FileAttachment",
    "InlineAttachment",
    "InvalidArgumentError",
    "InvalidMessageError",
    "LibraryMailer",
    "MailProvider",
    "MailTransport",
    "MailerSession",
    "Message",
    "SecureChannel",
    "TransportConfig",
    "TransportMode",
    "TransportProtocol",
    "UnsupportedProtocolError",
    "build_production",
    "build_testing",
    "create_provider",
    "get_config",
    "print_info",
]
