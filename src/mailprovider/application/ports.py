"""Application ports - Protocol definitions for adapters.

``MailTransport`` is the narrow interface every delivery adapter satisfies;
the remaining Protocols describe the callables the composition root wires
together. Existing adapter classes and functions satisfy them structurally
(PEP 544).

System Role:
    Sits between domain and adapters. Infrastructure types (``Config``,
    ``TransportConfig``) are imported under ``TYPE_CHECKING`` only.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Protocol

from ..domain.message import Message

if TYPE_CHECKING:
    from lib_layered_config import Config

    from ..adapters.mailer.config import TransportConfig


class MailTransport(Protocol):
    """Deliver a Message through one transport.

    Implementations read the message, hand it to their transport and return
    whether the transport accepted it. Transport failures are reported via
    ``message.add_error`` and a ``False`` return, never raised.
    """

    @property
    def name(self) -> str: ...

    def send(self, message: Message) -> bool: ...


class GetConfig(Protocol):
    """Load layered configuration with application defaults."""

    def __call__(self, *, profile: str | None = ..., start_dir: str | None = ...) -> Config: ...


class LoadTransportConfigFromDict(Protocol):
    """Load TransportConfig from a configuration dictionary."""

    def __call__(self, config_dict: Mapping[str, Any]) -> TransportConfig: ...


class CreateTransport(Protocol):
    """Build a transport adapter from its template configuration."""

    def __call__(self, config: TransportConfig | None = ...) -> MailTransport: ...


class InitLogging(Protocol):
    """Initialize lib_log_rich runtime with the provided configuration."""

    def __call__(self, config: Config) -> None: ...


__all__ = [
    "CreateTransport",
    "GetConfig",
    "InitLogging",
    "LoadTransportConfigFromDict",
    "MailTransport",
]
