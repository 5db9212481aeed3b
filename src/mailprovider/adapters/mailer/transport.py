"""Reference transport adapter backed by btx_lib_mail.

LibraryMailer owns two things: an immutable template configuration and a
replaceable working session built from it. The session is rebuilt right
before every send and again after a successful one, so recipients, body
and attachments of one send never leak into the next.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from mailprovider.domain.enums import ContentType
from mailprovider.domain.errors import InvalidArgumentError, InvalidMessageError
from mailprovider.domain.message import Message
from mailprovider.domain.values import FileAttachment
from mailprovider.domain.validation import describe_type, require_str

from .config import TransportConfig, port_settings, protocol_settings
from .session import MailerSession

logger = logging.getLogger(__name__)


class LibraryMailer:
    """Translate a Message onto a btx_lib_mail working session and send it.

    Setters change the template (created from defaults on first use) and
    the live session together. When ``set_port`` and ``set_protocol`` both
    touch the secure channel, the setter called last wins.

    Example:
        >>> mailer = LibraryMailer()
        >>> mailer.set_protocol("ssl").set_port(587).session.smtp_secure
        <SecureChannel.TLS: 'tls'>
        >>> mailer.set_protocol("ssl").session.smtp_secure
        <SecureChannel.SSL: 'ssl'>
    """

    name = "LibraryMailer"

    def __init__(self, config: TransportConfig | None = None) -> None:
        self._template: TransportConfig | None = None
        self._session = MailerSession()
        self.set_client(config)

    @property
    def template(self) -> TransportConfig | None:
        return self._template

    @property
    def session(self) -> MailerSession:
        return self._session

    @property
    def error_info(self) -> str:
        return self._session.error_info

    def set_client(self, config: TransportConfig | None = None) -> LibraryMailer:
        """Replace the working session.

        A given *config* becomes the new template. The session is then
        rebuilt from the template, or from defaults while there is none.
        """
        if config is not None:
            if not isinstance(config, TransportConfig):
                raise InvalidArgumentError(
                    f'set_client: expects a TransportConfig argument; received "{describe_type(config)}"'
                )
            self._template = config
        self._session = MailerSession.from_config(self._template or TransportConfig())
        return self

    # ------------------------------------------------------------------
    # Template settings
    # ------------------------------------------------------------------

    def set_host(self, host: str) -> LibraryMailer:
        return self._update("set_host", {"host": require_str("set_host", host)})

    def set_port(self, port: int | str) -> LibraryMailer:
        """Set the server port; port 587 also switches the secure channel to TLS."""
        return self._update("set_port", port_settings(port))

    def set_protocol(self, protocol: str) -> LibraryMailer:
        """Select the transport by name: smtp, mail, sendmail, qmail, ssl or tls.

        Raises:
            InvalidArgumentError: *protocol* is not a string.
            UnsupportedProtocolError: *protocol* is not one of the names above.
        """
        return self._update("set_protocol", protocol_settings(protocol))

    def set_login(self, username: str, password: str) -> LibraryMailer:
        """Turn on SMTP authentication with these credentials."""
        require_str("set_login", username)
        require_str("set_login", password)
        return self._update("set_login", {"smtp_auth": True, "username": username, "password": password})

    def configure(self, **settings: Any) -> LibraryMailer:
        """Change any template setting by name.

        Raises:
            InvalidArgumentError: Unknown setting name or invalid value.
        """
        return self._update("configure", settings)

    def get_setting(self, key: str) -> Any:
        """Return one template setting by name."""
        require_str("get_setting", key)
        if key not in TransportConfig.model_fields:
            raise InvalidArgumentError(f"get_setting: unknown setting {key!r}")
        return getattr(self._template or TransportConfig(), key)

    def _update(self, method: str, changes: Mapping[str, Any]) -> LibraryMailer:
        base = self._template or TransportConfig()
        try:
            updated = base.merged(changes)
        except ValidationError as exc:
            details = "; ".join(
                f"{'.'.join(str(part) for part in err['loc']) or 'config'}: {err['msg']}" for err in exc.errors()
            )
            raise InvalidArgumentError(f"{method}: {details}") from exc
        self._template = updated
        self._session.apply_config(updated)
        return self

    # ------------------------------------------------------------------
    # Delivery
    # ------------------------------------------------------------------

    def send(self, message: Message) -> bool:
        """Copy *message* onto a fresh session and deliver it.

        Order: sender and reply-to, to/cc/bcc, attachments, headers,
        subject, content type and body, then the transport call.

        Returns:
            True when the transport accepted the message. On False, the
            transport's error detail (when it gave one) is appended to
            ``message.errors``.

        Raises:
            InvalidMessageError: No sender or no recipients.
        """
        message.validate_for_dispatch()
        self.set_client()
        session = self._session

        sender = message.sender
        if sender is None:
            raise InvalidMessageError("No sender address set")
        session.set_from(sender.email, sender.name)
        if message.reply_to is not None:
            session.add_reply_to(message.reply_to.email, message.reply_to.name)

        for address in message.tos:
            session.add_address(address.email, address.name)
        for address in message.ccs:
            session.add_cc(address.email, address.name)
        for address in message.bccs:
            session.add_bcc(address.email, address.name)

        for attachment in message.attachments:
            if isinstance(attachment, FileAttachment):
                session.add_attachment(attachment.path, attachment.name, attachment.mime_type)
            else:
                session.add_string_attachment(
                    attachment.data,
                    attachment.name,
                    attachment.encoding,
                    attachment.mime_type,
                    attachment.disposition,
                )

        for key, value in message.headers.items():
            session.add_custom_header(key, value)

        session.subject = message.subject or ""
        session.is_html(message.content_type is ContentType.HTML)
        if session.content_type is ContentType.HTML:
            session.body = message.html or ""
        else:
            session.body = message.text or ""

        logger.debug(
            "Dispatching through working session",
            extra={"mode": session.mode.value, "smtp_host": session.smtp_host, "secure": session.smtp_secure.value},
        )

        if session.send():
            self.set_client()
            return True

        if session.error_info:
            message.add_error(session.error_info, source=self.name)
        return False


__all__ = ["LibraryMailer"]
