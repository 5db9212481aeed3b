"""Application layer - the provider facade and port definitions.

Contents:
    * :mod:`.ports` - Protocol definitions for adapter implementations
    * :mod:`.provider` - MailProvider, a Message bound to a transport
"""

from __future__ import annotations

from .ports import (
    CreateTransport,
    GetConfig,
    InitLogging,
    LoadTransportConfigFromDict,
    MailTransport,
)
from .provider import MailProvider

__all__ = [
    "CreateTransport",
    "GetConfig",
    "InitLogging",
    "LoadTransportConfigFromDict",
    "MailProvider",
    "MailTransport",
]
