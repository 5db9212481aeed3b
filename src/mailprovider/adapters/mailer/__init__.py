"""Mailer adapter - reference transport backed by btx_lib_mail.

Structure:
    * :mod:`.config` - Template configuration model, protocol/port rules, loader
    * :mod:`.session` - Working session performing one delivery
    * :mod:`.transport` - LibraryMailer adapter (template + session lifecycle)

Contents:
    * :class:`.config.TransportConfig` - Validated template configuration
    * :func:`.config.load_transport_config_from_dict` - Config dict loader
    * :class:`.session.MailerSession` - Working client
    * :class:`.transport.LibraryMailer` - MailTransport implementation
"""

from __future__ import annotations

from .config import (
    STARTTLS_PORT,
    TransportConfig,
    load_transport_config_from_dict,
    port_settings,
    protocol_settings,
)
from .session import MailerSession
from .transport import LibraryMailer

__all__ = [
    "STARTTLS_PORT",
    "LibraryMailer",
    "MailerSession",
    "TransportConfig",
    "load_transport_config_from_dict",
    "port_settings",
    "protocol_settings",
]
