"""In-memory adapter implementations for testing.

Provides lightweight implementations of all application ports that operate
entirely in memory -- no filesystem, no SMTP, no logging framework.

Contents:
    * :mod:`.config` - In-memory configuration adapter
    * :mod:`.transport` - In-memory transport (TransportSpy class)
    * :mod:`.logging` - In-memory logging adapter
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .config import get_config_in_memory
from .logging import init_logging_in_memory
from .transport import (
    TransportSpy,
    create_transport_in_memory,
    load_transport_config_from_dict_in_memory,
)

# Static conformance assertions
if TYPE_CHECKING:
    from mailprovider.application.ports import (
        CreateTransport,
        GetConfig,
        InitLogging,
        LoadTransportConfigFromDict,
        MailTransport,
    )

    _assert_get_config: GetConfig = get_config_in_memory
    _assert_load_transport_config: LoadTransportConfigFromDict = load_transport_config_from_dict_in_memory
    _assert_create_transport: CreateTransport = create_transport_in_memory
    _assert_init_logging: InitLogging = init_logging_in_memory
    _assert_transport: MailTransport = TransportSpy()

__all__ = [
    "TransportSpy",
    "create_transport_in_memory",
    "get_config_in_memory",
    "init_logging_in_memory",
    "load_transport_config_from_dict_in_memory",
]
