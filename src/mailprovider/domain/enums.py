"""Type-safe domain enums for transport selection and body content type."""

from __future__ import annotations

from enum import Enum


class TransportProtocol(str, Enum):
    """Protocol names accepted by ``set_protocol``.

    ``ssl`` and ``tls`` are not transports of their own: both select SMTP
    and additionally set the secure channel.

    Example:
        >>> TransportProtocol("tls") is TransportProtocol.TLS
        True
        >>> ", ".join(p.value for p in TransportProtocol)
        'smtp, mail, sendmail, qmail, ssl, tls'
    """

    SMTP = "smtp"
    MAIL = "mail"
    SENDMAIL = "sendmail"
    QMAIL = "qmail"
    SSL = "ssl"
    TLS = "tls"


class TransportMode(str, Enum):
    """How the working session hands a message off.

    Attributes:
        SMTP: Deliver through an SMTP relay.
        MAIL: Hand off to the local MTA the way the platform ``mail`` does.
        SENDMAIL: Pipe through the sendmail binary.
        QMAIL: Pipe through qmail-inject.
    """

    SMTP = "smtp"
    MAIL = "mail"
    SENDMAIL = "sendmail"
    QMAIL = "qmail"


class SecureChannel(str, Enum):
    """Secure-channel flag carried by an SMTP session.

    Example:
        >>> SecureChannel.TLS == "tls"
        True
        >>> bool(SecureChannel.NONE.value)
        False
    """

    NONE = ""
    SSL = "ssl"
    TLS = "tls"


class ContentType(str, Enum):
    """Body content type; decided by whichever body setter ran last."""

    TEXT = "text/plain"
    HTML = "text/html"


__all__ = [
    "ContentType",
    "SecureChannel",
    "TransportMode",
    "TransportProtocol",
]
