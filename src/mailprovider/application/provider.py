"""MailProvider: a Message bound to the transport that will deliver it.

The builder and storage logic is plain data manipulation and lives on
:class:`~mailprovider.domain.message.Message`; delivery is delegated to an
injected :class:`~mailprovider.application.ports.MailTransport`. Swapping
transports never changes calling code::

    provider = MailProvider(LibraryMailer(config))
    provider.set_from("app@example.com").add_to("ops@example.com").set_text("hi")
    if not provider.send():
        print(provider.errors)
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from ..domain.message import Message
from .ports import MailTransport

logger = logging.getLogger(__name__)


class MailProvider(Message):
    """Builder facade that sends through its transport.

    Error entries are tagged with the transport's name.

    Example:
        >>> from mailprovider.adapters.memory import TransportSpy
        >>> spy = TransportSpy()
        >>> provider = MailProvider(spy).set_from("a@example.com").add_to("b@example.com")
        >>> provider.send()
        True
        >>> len(spy.sent_messages)
        1
    """

    def __init__(self, transport: MailTransport, data: Mapping[str, Any] | None = None) -> None:
        self._transport = transport
        super().__init__(data)

    @property  # type: ignore[override]
    def name(self) -> str:
        return self._transport.name

    @property
    def transport(self) -> MailTransport:
        return self._transport

    def send(self) -> bool:
        """Hand the message to the transport.

        Returns:
            True when the transport accepted the message. On False, the
            transport's error detail has been appended to :attr:`errors`.

        Raises:
            InvalidMessageError: No sender or no recipients; the transport
                is not touched.
        """
        self.validate_for_dispatch()

        logger.info(
            "Sending email",
            extra={
                "provider": self.name,
                "sender": self.from_address,
                "recipients": [address.email for address in (*self._to, *self._cc, *self._bcc)],
                "subject": self.subject,
                "content_type": self.content_type.value,
                "attachment_count": len(self._attachments),
            },
        )

        accepted = self._transport.send(self)

        if accepted:
            logger.info("Email sent successfully", extra={"provider": self.name, "sender": self.from_address})
        else:
            logger.warning(
                "Email send returned failure",
                extra={"provider": self.name, "sender": self.from_address, "error_count": len(self._errors)},
            )
        return accepted


__all__ = ["MailProvider"]
