"""Transport template configuration and loader.

Provides the TransportConfig Pydantic model holding the settings a working
session is built from, the protocol/port rules that derive transport mode
and secure channel, and the loader creating it from configuration
dictionaries.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, cast

from btx_lib_mail import validate_smtp_host
from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from mailprovider.domain.enums import SecureChannel, TransportMode, TransportProtocol
from mailprovider.domain.errors import ConfigurationError, InvalidArgumentError, UnsupportedProtocolError
from mailprovider.domain.validation import describe_type, require_str

STARTTLS_PORT = 587

_PROTOCOL_SETTINGS: dict[TransportProtocol, dict[str, Any]] = {
    TransportProtocol.SMTP: {"mode": TransportMode.SMTP},
    TransportProtocol.MAIL: {"mode": TransportMode.MAIL},
    TransportProtocol.SENDMAIL: {"mode": TransportMode.SENDMAIL},
    TransportProtocol.QMAIL: {"mode": TransportMode.QMAIL},
    TransportProtocol.SSL: {"mode": TransportMode.SMTP, "secure": SecureChannel.SSL},
    TransportProtocol.TLS: {"mode": TransportMode.SMTP, "secure": SecureChannel.TLS},
}


class TransportConfig(BaseModel):
    """Validated, immutable template for working sessions.

    Unknown keys are rejected, so a typo in a settings name fails when the
    configuration is defined rather than silently doing nothing.

    Example:
        >>> config = TransportConfig(host="smtp.example.com", port=2525)
        >>> config.smtp_host
        'smtp.example.com:2525'
        >>> config.mode
        <TransportMode.SMTP: 'smtp'>
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    host: str = "localhost"
    port: int = 25
    mode: TransportMode = TransportMode.SMTP
    secure: SecureChannel = SecureChannel.NONE
    smtp_auth: bool = False
    username: str | None = None
    password: str | None = None
    timeout: float = 30.0
    sendmail_path: str = "/usr/sbin/sendmail"
    qmail_path: str = "/var/qmail/bin/qmail-inject"

    @field_validator("username", "password", mode="before")
    @classmethod
    def _coerce_empty_string_to_none(cls, v: str | None) -> str | None:
        """Treat empty or whitespace-only credentials as not configured."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @model_validator(mode="after")
    def _validate_config(self) -> TransportConfig:
        """Catch impossible values early with clear messages.

        Example:
            >>> TransportConfig(port=0)  # doctest: +IGNORE_EXCEPTION_DETAIL
            Traceback (most recent call last):
            ...
            ValidationError: ...
        """
        if self.timeout <= 0:
            raise ValueError(f"timeout must be positive, got {self.timeout}")
        if not 1 <= self.port <= 65535:
            raise ValueError(f"port must be 1-65535, got {self.port}")
        validate_smtp_host(self.smtp_host)
        return self

    @property
    def smtp_host(self) -> str:
        """Host and port in the ``host:port`` form the SMTP library expects."""
        host = self.host
        if ":" in host and not host.startswith("["):
            host = f"[{host}]"
        return f"{host}:{self.port}"

    def merged(self, changes: Mapping[str, Any]) -> TransportConfig:
        """Return a new, fully validated config with *changes* applied.

        Raises:
            pydantic.ValidationError: Unknown key or invalid value.
        """
        return TransportConfig.model_validate({**self.model_dump(), **changes})

    def __repr__(self) -> str:
        """Return string representation with password redacted.

        Example:
            >>> "secret" in repr(TransportConfig(username="u", password="secret"))
            False
        """
        fields: list[str] = []
        for name, value in self:
            if name == "password" and value is not None:
                fields.append(f"{name}='[REDACTED]'")
            else:
                fields.append(f"{name}={value!r}")
        return f"TransportConfig({', '.join(fields)})"


def protocol_settings(protocol: str) -> dict[str, Any]:
    """Translate a protocol name into transport mode and secure-channel changes.

    Matching is case-insensitive. Plain transports leave the secure channel
    untouched; ``ssl``/``tls`` select SMTP and set it.

    Raises:
        InvalidArgumentError: *protocol* is not a string.
        UnsupportedProtocolError: *protocol* is not a recognised name.

    Example:
        >>> protocol_settings("TLS")
        {'mode': <TransportMode.SMTP: 'smtp'>, 'secure': <SecureChannel.TLS: 'tls'>}
        >>> protocol_settings("sendmail")
        {'mode': <TransportMode.SENDMAIL: 'sendmail'>}
    """
    name = require_str("set_protocol", protocol).lower()
    try:
        key = TransportProtocol(name)
    except ValueError:
        existing = ", ".join(item.value for item in TransportProtocol)
        raise UnsupportedProtocolError(f"Protocol {name} does not exist; Existing protocols are {existing}") from None
    return dict(_PROTOCOL_SETTINGS[key])


def port_settings(port: int | str) -> dict[str, Any]:
    """Translate a port into config changes; 587 also forces STARTTLS.

    Raises:
        InvalidArgumentError: *port* is not an integer or a string of digits.

    Example:
        >>> port_settings(465)
        {'port': 465}
        >>> port_settings("587")
        {'port': 587, 'secure': <SecureChannel.TLS: 'tls'>}
    """
    if isinstance(port, bool) or not isinstance(port, (int, str)):
        raise InvalidArgumentError(f'set_port: expects a numeric argument; received "{describe_type(port)}"')
    if isinstance(port, str):
        if not port.strip().isdigit():
            raise InvalidArgumentError(f'set_port: expects a numeric argument; received "{port}"')
        port = int(port)
    changes: dict[str, Any] = {"port": port}
    if port == STARTTLS_PORT:
        changes["secure"] = SecureChannel.TLS
    return changes


def load_transport_config_from_dict(config_dict: Mapping[str, Any]) -> TransportConfig:
    """Load TransportConfig from the ``[mailer]`` section of a config dictionary.

    A ``protocol`` key is translated through :func:`protocol_settings`
    before validation, so config files can say ``protocol = "tls"``. It is
    applied before ``port``, which keeps the 587 rule in force.

    Raises:
        ConfigurationError: The ``mailer`` section is not a table.
        UnsupportedProtocolError: Unknown ``protocol`` value.
        pydantic.ValidationError: Invalid or unknown settings.

    Example:
        >>> config = load_transport_config_from_dict(
        ...     {"mailer": {"host": "smtp.example.com", "port": 587, "protocol": "smtp"}}
        ... )
        >>> config.secure
        <SecureChannel.TLS: 'tls'>
    """
    section: Any = config_dict.get("mailer", {})
    if not isinstance(section, Mapping):
        raise ConfigurationError(f"mailer section must be a table, got {describe_type(section)}")

    raw: dict[str, Any] = dict(cast(Mapping[str, Any], section))
    protocol = raw.pop("protocol", None)
    if protocol:
        raw.update(protocol_settings(protocol))
    if raw.get("port") is not None and not isinstance(raw["port"], bool):
        raw.update(port_settings(raw["port"]))

    return TransportConfig.model_validate(raw)


__all__ = [
    "STARTTLS_PORT",
    "TransportConfig",
    "load_transport_config_from_dict",
    "port_settings",
    "protocol_settings",
]
