"""Working mail session: the per-send transport object.

A MailerSession collects one message worth of envelope, content and
attachments and performs a single synchronous delivery. SMTP delivery goes
through btx_lib_mail; the ``mail``, ``sendmail`` and ``qmail`` modes render
a MIME message and pipe it into the local MTA binary.

Sessions are cheap and disposable. The adapter builds a fresh one from its
template configuration around every send instead of clearing an old one.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
import tempfile
from email.message import EmailMessage
from email.utils import formataddr
from pathlib import Path

from btx_lib_mail.lib_mail import send as btx_send

from mailprovider.domain.enums import ContentType, SecureChannel, TransportMode
from mailprovider.domain.values import Address, Attachment, FileAttachment, InlineAttachment

from .config import TransportConfig

logger = logging.getLogger(__name__)

# Keywords that may indicate sensitive data in exception messages
_SENSITIVE_KEYWORDS = frozenset(
    {
        "password",
        "credential",
        "auth",
        "secret",
        "token",
        "key",
        "login",
    }
)


def _sanitize_exception_message(exc: BaseException) -> str:
    """Sanitize exception message to prevent credential exposure.

    Returns a generic message when the original exception text contains
    keywords suggesting sensitive data (passwords, credentials, tokens).
    The full exception is preserved for DEBUG-level logging.

    Example:
        >>> class FakeExc(Exception): pass
        >>> _sanitize_exception_message(FakeExc("Connection failed"))
        'Connection failed'
        >>> _sanitize_exception_message(FakeExc("Auth password rejected"))
        'Email delivery failed. Check transport configuration.'
    """
    message = str(exc).lower()
    if any(keyword in message for keyword in _SENSITIVE_KEYWORDS):
        return "Email delivery failed. Check transport configuration."
    return str(exc) or type(exc).__name__


# Owned by set_content/add_attachment in render().
_MIME_STRUCTURE_HEADERS = frozenset(
    {
        "content-type",
        "content-transfer-encoding",
        "content-disposition",
        "mime-version",
    }
)


def _split_mime_type(mime_type: str) -> tuple[str, str]:
    maintype, _, subtype = mime_type.partition("/")
    if not subtype:
        return "application", "octet-stream"
    return maintype, subtype


class MailerSession:
    """Mutable working client for exactly one delivery.

    Transport settings come from a :class:`TransportConfig`; message fields
    are filled by the adapter right before :meth:`send`.

    Example:
        >>> session = MailerSession.from_config(TransportConfig(port=587, secure="tls"))
        >>> session.smtp_secure
        <SecureChannel.TLS: 'tls'>
        >>> session.recipients
        []
    """

    def __init__(self, config: TransportConfig | None = None) -> None:
        self.apply_config(config or TransportConfig())

        self.from_email = ""
        self.from_name = ""
        self.reply_to: list[Address] = []
        self.to: list[Address] = []
        self.cc: list[Address] = []
        self.bcc: list[Address] = []
        self.attachments: list[Attachment] = []
        self.custom_headers: dict[str, str] = {}
        self.subject = ""
        self.body = ""
        self.content_type = ContentType.TEXT
        self.error_info = ""

    @classmethod
    def from_config(cls, config: TransportConfig) -> MailerSession:
        return cls(config)

    def apply_config(self, config: TransportConfig) -> None:
        """Copy every transport-level setting from *config*; message fields stay."""
        self.host = config.host
        self.port = config.port
        self.mode = config.mode
        self.smtp_secure = config.secure
        self.smtp_auth = config.smtp_auth
        self.username = config.username
        self.password = config.password
        self.timeout = config.timeout
        self.sendmail_path = config.sendmail_path
        self.qmail_path = config.qmail_path
        self.smtp_host = config.smtp_host

    # ------------------------------------------------------------------
    # Transport mode and content type
    # ------------------------------------------------------------------

    def is_smtp(self) -> None:
        self.mode = TransportMode.SMTP

    def is_mail(self) -> None:
        self.mode = TransportMode.MAIL

    def is_sendmail(self) -> None:
        self.mode = TransportMode.SENDMAIL

    def is_qmail(self) -> None:
        self.mode = TransportMode.QMAIL

    def is_html(self, flag: bool = True) -> None:
        self.content_type = ContentType.HTML if flag else ContentType.TEXT

    # ------------------------------------------------------------------
    # Message fields
    # ------------------------------------------------------------------

    def set_from(self, email: str, name: str = "") -> None:
        self.from_email = email
        self.from_name = name

    def add_reply_to(self, email: str, name: str = "") -> None:
        self.reply_to.append(Address(email, name))

    def add_address(self, email: str, name: str = "") -> None:
        self.to.append(Address(email, name))

    def add_cc(self, email: str, name: str = "") -> None:
        self.cc.append(Address(email, name))

    def add_bcc(self, email: str, name: str = "") -> None:
        self.bcc.append(Address(email, name))

    def add_attachment(self, path: Path, name: str | None = None, mime_type: str = "") -> None:
        """Attach a file by absolute path; the path was checked when it was added to the message."""
        self.attachments.append(FileAttachment(path=path, name=name, mime_type=mime_type))

    def add_string_attachment(
        self,
        data: bytes,
        name: str,
        encoding: str = "base64",
        mime_type: str = "",
        disposition: str = "attachment",
    ) -> None:
        self.attachments.append(InlineAttachment.build(data, name, encoding, mime_type, disposition))

    def add_custom_header(self, name: str, value: str) -> None:
        self.custom_headers[name] = value

    @property
    def recipients(self) -> list[str]:
        """Envelope recipients (to, cc, bcc) without duplicates, in order."""
        return list(dict.fromkeys(address.email for address in (*self.to, *self.cc, *self.bcc)))

    @property
    def credentials(self) -> tuple[str, str] | None:
        """Return (username, password) when authentication is on and both are set."""
        if self.smtp_auth and self.username is not None and self.password is not None:
            return (self.username, self.password)
        return None

    # ------------------------------------------------------------------
    # Delivery
    # ------------------------------------------------------------------

    def send(self) -> bool:
        """Deliver the collected message once.

        Returns:
            True when the transport accepted the message. On False,
            :attr:`error_info` describes the failure.
        """
        self.error_info = ""
        try:
            if self.mode is TransportMode.SMTP:
                accepted = self._send_smtp()
            else:
                accepted = self._send_local()
        except subprocess.CalledProcessError as exc:
            logger.debug("Local MTA rejected message", exc_info=True)
            detail = (exc.stderr or b"").decode("utf-8", errors="replace").strip()
            self.error_info = detail or _sanitize_exception_message(exc)
            return False
        except (RuntimeError, ValueError, OSError, subprocess.SubprocessError) as exc:
            logger.debug("Mail transport failed", exc_info=True)
            self.error_info = _sanitize_exception_message(exc)
            return False

        if not accepted:
            self.error_info = "Transport reported a delivery failure"
        return accepted

    def _send_smtp(self) -> bool:
        if self.custom_headers:
            logger.debug(
                "SMTP relay transport does not carry custom headers",
                extra={"headers": sorted(self.custom_headers)},
            )
        html = self.content_type is ContentType.HTML
        with tempfile.TemporaryDirectory(prefix="mailprovider-") as spool:
            attachment_paths = self._spool_attachments(Path(spool))
            return btx_send(
                mail_from=self.from_email,
                mail_recipients=self.recipients,
                mail_subject=self.subject,
                mail_body="" if html else self.body,
                mail_body_html=self.body if html else "",
                smtphosts=[self.smtp_host],
                attachment_file_paths=attachment_paths or None,
                credentials=self.credentials,
                use_starttls=self.smtp_secure is not SecureChannel.NONE,
                timeout=self.timeout,
            )

    def _spool_attachments(self, spool: Path) -> list[Path]:
        """Return file paths for every attachment.

        The SMTP library attaches files by path under their own name, so
        renamed files and in-memory payloads are written to *spool* first.
        """
        paths: list[Path] = []
        for index, attachment in enumerate(self.attachments):
            if isinstance(attachment, FileAttachment) and attachment.display_name == attachment.path.name:
                paths.append(attachment.path)
                continue
            target_dir = spool / str(index)
            target_dir.mkdir()
            target = target_dir / attachment.display_name
            if isinstance(attachment, FileAttachment):
                shutil.copyfile(attachment.path, target)
            else:
                target.write_bytes(attachment.data)
            paths.append(target)
        return paths

    def _send_local(self) -> bool:
        if self.mode is TransportMode.QMAIL:
            command = [self.qmail_path]
        else:
            command = [self.sendmail_path, "-t", "-i"]
            if self.from_email:
                command.extend(["-f", self.from_email])
        subprocess.run(
            command,
            input=self.render().as_bytes(),
            capture_output=True,
            check=True,
            timeout=self.timeout,
        )
        return True

    def render(self) -> EmailMessage:
        """Build the full MIME message, including names, reply-to, cc/bcc and custom headers.

        A custom header with the name of a rendered header (Subject, Reply-To,
        ...) replaces it. MIME structure headers are never taken from custom
        headers.
        """
        message = EmailMessage()
        message["From"] = formataddr((self.from_name, self.from_email))
        for header, addresses in (("To", self.to), ("Cc", self.cc), ("Bcc", self.bcc), ("Reply-To", self.reply_to)):
            if addresses:
                message[header] = ", ".join(formataddr((a.name, a.email)) for a in addresses)
        message["Subject"] = self.subject
        for name, value in self.custom_headers.items():
            if name.lower() in _MIME_STRUCTURE_HEADERS:
                logger.debug("Custom header would change MIME structure; skipped", extra={"header": name})
                continue
            del message[name]
            message[name] = value

        subtype = "html" if self.content_type is ContentType.HTML else "plain"
        message.set_content(self.body, subtype=subtype)

        for attachment in self.attachments:
            maintype, mime_subtype = _split_mime_type(attachment.mime_type)
            if isinstance(attachment, FileAttachment):
                data = attachment.path.read_bytes()
                disposition = "attachment"
            else:
                data = attachment.data
                disposition = attachment.disposition
            message.add_attachment(
                data,
                maintype=maintype,
                subtype=mime_subtype,
                filename=attachment.display_name,
                disposition=disposition,
            )
        return message


__all__ = ["MailerSession"]
