"""Composition root wiring adapters to application ports."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

# Configuration services
from ..adapters.config.loader import get_config

# Logging services
from ..adapters.logging.setup import init_logging

# Transport services
from ..adapters.mailer import LibraryMailer, TransportConfig, load_transport_config_from_dict
from ..application.provider import MailProvider

if TYPE_CHECKING:
    from ..adapters.memory.transport import TransportSpy
    from ..application.ports import (
        CreateTransport,
        GetConfig,
        InitLogging,
        LoadTransportConfigFromDict,
    )


def create_transport(config: TransportConfig | None = None) -> LibraryMailer:
    """Build the reference transport from its template configuration."""
    return LibraryMailer(config)


# Static conformance assertions: pyright verifies that each adapter function
# structurally satisfies its corresponding Protocol at type-check time.
if TYPE_CHECKING:
    _assert_get_config: GetConfig = get_config
    _assert_load_transport_config_from_dict: LoadTransportConfigFromDict = load_transport_config_from_dict
    _assert_create_transport: CreateTransport = create_transport
    _assert_init_logging: InitLogging = init_logging


@dataclass(frozen=True, slots=True)
class AppServices:
    """Frozen container holding all application port implementations."""

    get_config: GetConfig
    load_transport_config_from_dict: LoadTransportConfigFromDict
    create_transport: CreateTransport
    init_logging: InitLogging


def build_production() -> AppServices:
    """Wire production adapters into an AppServices container."""
    return AppServices(
        get_config=get_config,
        load_transport_config_from_dict=load_transport_config_from_dict,
        create_transport=create_transport,
        init_logging=init_logging,
    )


def build_testing(*, spy: TransportSpy | None = None) -> AppServices:
    """Wire in-memory adapters into an AppServices container.

    Args:
        spy: Optional TransportSpy instance returned by ``create_transport``.
            When None, a fresh TransportSpy is created. Pass your own spy
            to assert on captured messages in tests.

    Returns:
        AppServices container with in-memory adapters.
    """
    from ..adapters.memory import (
        TransportSpy,
        get_config_in_memory,
        init_logging_in_memory,
        load_transport_config_from_dict_in_memory,
    )

    transport_spy = spy if spy is not None else TransportSpy()

    def create_transport_spy(config: TransportConfig | None = None) -> TransportSpy:
        return transport_spy

    return AppServices(
        get_config=get_config_in_memory,
        load_transport_config_from_dict=load_transport_config_from_dict_in_memory,
        create_transport=create_transport_spy,
        init_logging=init_logging_in_memory,
    )


def create_provider(services: AppServices | None = None, *, profile: str | None = None) -> MailProvider:
    """Load configuration, initialise logging and return a ready MailProvider.

    Args:
        services: Wiring to use; production adapters when None.
        profile: Optional configuration profile name.

    Returns:
        An empty MailProvider bound to a transport built from the
        ``[mailer]`` configuration section.

    Example:
        >>> provider = create_provider(build_testing())
        >>> provider.name
        'TransportSpy'
    """
    wiring = services if services is not None else build_production()
    config = wiring.get_config(profile=profile)
    wiring.init_logging(config)
    transport_config = wiring.load_transport_config_from_dict(config.as_dict())
    return MailProvider(wiring.create_transport(transport_config))


__all__ = [
    # Configuration
    "get_config",
    # Transport
    "create_transport",
    "load_transport_config_from_dict",
    # Logging
    "init_logging",
    # Composition
    "AppServices",
    "build_production",
    "build_testing",
    "create_provider",
]
