"""In-memory transport for testing.

Provides a transport that satisfies the same MailTransport Protocol as the
production adapter but performs no delivery.

Contents:
    * :class:`TransportSpy` - Captures sent messages for test assertions.
    * :func:`load_transport_config_from_dict_in_memory` - In-memory config loader.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from mailprovider.domain.message import Message

from ..mailer.config import TransportConfig, load_transport_config_from_dict


def _empty_message_list() -> list[dict[str, Any]]:
    """Create an empty typed list for message records."""
    return []


@dataclass
class TransportSpy:
    """Captures send operations for test assertions.

    Each test should create its own TransportSpy instance to avoid
    cross-test pollution.

    Attributes:
        name: Transport name used to tag error entries.
        sent_messages: ``to_dict()`` snapshots of every accepted message.
        attempts: Number of send calls, accepted or not.
        should_fail: When True, send returns False and reports ``error_info``.
        error_info: Error detail appended to the message on simulated failure.
        raise_exception: When set, send raises this exception.

    Example:
        >>> spy = TransportSpy()
        >>> message = Message().set_from("a@example.com").add_to("b@example.com")
        >>> spy.send(message)
        True
        >>> spy.sent_messages[0]["to"]
        [{'email': 'b@example.com', 'name': ''}]
    """

    name: str = "TransportSpy"
    sent_messages: list[dict[str, Any]] = field(default_factory=_empty_message_list)
    attempts: int = 0
    should_fail: bool = False
    error_info: str = "Simulated transport failure"
    raise_exception: Exception | None = None

    def clear(self) -> None:
        """Reset captured data for next test."""
        self.sent_messages.clear()
        self.attempts = 0
        self.raise_exception = None

    def send(self, message: Message) -> bool:
        """Record the message and return success/failure based on spy state.

        Raises:
            InvalidMessageError: When the message has no sender or recipients.
            Exception: If raise_exception is set, raises that exception.
        """
        message.validate_for_dispatch()
        self.attempts += 1
        if self.raise_exception is not None:
            raise self.raise_exception
        if self.should_fail:
            if self.error_info:
                message.add_error(self.error_info, source=self.name)
            return False
        self.sent_messages.append(message.to_dict())
        return True


def load_transport_config_from_dict_in_memory(
    config_dict: Mapping[str, Any],
) -> TransportConfig:
    """Apply the production [mailer] rules (protocol key, port 587) without touching files."""
    return load_transport_config_from_dict(config_dict)


def create_transport_in_memory(config: TransportConfig | None = None) -> TransportSpy:
    """Return a fresh TransportSpy; *config* is ignored."""
    return TransportSpy()


__all__ = [
    "TransportSpy",
    "create_transport_in_memory",
    "load_transport_config_from_dict_in_memory",
]
