"""TransportConfig model and the protocol/port rules feeding it."""

from __future__ import annotations

from typing import Any

import pytest
from pydantic import ValidationError as PydanticValidationError

from mailprovider.adapters.mailer import (
    STARTTLS_PORT,
    TransportConfig,
    load_transport_config_from_dict,
    port_settings,
    protocol_settings,
)
from mailprovider.domain.enums import SecureChannel, TransportMode
from mailprovider.domain.errors import ConfigurationError, InvalidArgumentError, UnsupportedProtocolError

# ======================== Defaults ========================


@pytest.mark.os_agnostic
def test_default_config_targets_local_smtp() -> None:
    """Defaults describe plain SMTP on localhost:25 without authentication."""
    config = TransportConfig()

    assert config.host == "localhost"
    assert config.port == 25
    assert config.mode is TransportMode.SMTP
    assert config.secure is SecureChannel.NONE
    assert config.smtp_auth is False
    assert config.username is None
    assert config.password is None


@pytest.mark.os_agnostic
def test_default_timeout_is_thirty_seconds() -> None:
    """Sessions wait 30 seconds by default."""
    assert TransportConfig().timeout == 30.0


@pytest.mark.os_agnostic
def test_config_is_immutable() -> None:
    """Once created, a template cannot be modified in place."""
    config = TransportConfig()
    with pytest.raises(PydanticValidationError):
        config.host = "other"  # type: ignore[misc]


# ======================== Validation ========================


@pytest.mark.os_agnostic
def test_config_rejects_unknown_keys() -> None:
    """Typos in setting names fail loudly."""
    with pytest.raises(PydanticValidationError):
        TransportConfig(hots="smtp.example.com")  # type: ignore[call-arg]


@pytest.mark.os_agnostic
@pytest.mark.parametrize("timeout", [0.0, -1.0])
def test_config_rejects_non_positive_timeout(timeout: float) -> None:
    """Zero or negative timeouts are caught early."""
    with pytest.raises(PydanticValidationError, match="timeout must be positive"):
        TransportConfig(timeout=timeout)


@pytest.mark.os_agnostic
@pytest.mark.parametrize("port", [0, 65536])
def test_config_rejects_out_of_range_port(port: int) -> None:
    """Ports outside 1-65535 are rejected."""
    with pytest.raises(PydanticValidationError, match="port must be 1-65535"):
        TransportConfig(port=port)


@pytest.mark.os_agnostic
def test_config_treats_blank_credentials_as_unset() -> None:
    """Empty or whitespace-only credentials become None."""
    config = TransportConfig(username="  ", password="")
    assert config.username is None
    assert config.password is None


# ======================== Derived values ========================


@pytest.mark.os_agnostic
def test_smtp_host_joins_host_and_port() -> None:
    """The relay address is host:port."""
    assert TransportConfig(host="smtp.example.com", port=2525).smtp_host == "smtp.example.com:2525"


@pytest.mark.os_agnostic
def test_smtp_host_brackets_ipv6_literals() -> None:
    """IPv6 literals are bracketed so the port stays unambiguous."""
    assert TransportConfig(host="::1").smtp_host == "[::1]:25"


@pytest.mark.os_agnostic
def test_merged_returns_new_validated_config() -> None:
    """merged leaves the original alone and validates the result."""
    original = TransportConfig()

    updated = original.merged({"host": "smtp.example.com"})

    assert updated.host == "smtp.example.com"
    assert original.host == "localhost"
    with pytest.raises(PydanticValidationError):
        original.merged({"port": -1})


@pytest.mark.os_agnostic
def test_repr_redacts_password() -> None:
    """Passwords never appear in repr output."""
    text = repr(TransportConfig(username="user", password="hunter2"))

    assert "hunter2" not in text
    assert "[REDACTED]" in text
    assert "username='user'" in text


# ======================== Protocol rules ========================


@pytest.mark.os_agnostic
@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("smtp", {"mode": TransportMode.SMTP}),
        ("mail", {"mode": TransportMode.MAIL}),
        ("sendmail", {"mode": TransportMode.SENDMAIL}),
        ("qmail", {"mode": TransportMode.QMAIL}),
        ("ssl", {"mode": TransportMode.SMTP, "secure": SecureChannel.SSL}),
        ("tls", {"mode": TransportMode.SMTP, "secure": SecureChannel.TLS}),
    ],
)
def test_protocol_settings_table(name: str, expected: dict[str, Any]) -> None:
    """Each protocol name maps to a mode and, for ssl/tls, a secure channel."""
    assert protocol_settings(name) == expected


@pytest.mark.os_agnostic
def test_protocol_settings_is_case_insensitive() -> None:
    """Upper-case names select the same transport."""
    assert protocol_settings("SendMail") == protocol_settings("sendmail")


@pytest.mark.os_agnostic
def test_protocol_settings_unknown_name_lists_existing_protocols() -> None:
    """The error names the bad protocol and every valid one."""
    with pytest.raises(UnsupportedProtocolError) as exc_info:
        protocol_settings("ftp")

    assert str(exc_info.value) == (
        "Protocol ftp does not exist; Existing protocols are smtp, mail, sendmail, qmail, ssl, tls"
    )


@pytest.mark.os_agnostic
def test_protocol_settings_rejects_non_string() -> None:
    """Protocol names must be strings."""
    with pytest.raises(InvalidArgumentError, match='set_protocol: expects a string argument; received "int"'):
        protocol_settings(1)  # type: ignore[arg-type]


# ======================== Port rules ========================


@pytest.mark.os_agnostic
def test_port_settings_plain_port() -> None:
    """Ordinary ports only change the port."""
    assert port_settings(465) == {"port": 465}


@pytest.mark.os_agnostic
@pytest.mark.parametrize("port", [STARTTLS_PORT, "587"])
def test_port_settings_submission_port_forces_tls(port: int | str) -> None:
    """Port 587, as int or digit string, also selects TLS."""
    assert port_settings(port) == {"port": 587, "secure": SecureChannel.TLS}


@pytest.mark.os_agnostic
@pytest.mark.parametrize("port", [True, 25.0, None, "twenty-five"])
def test_port_settings_rejects_non_numeric(port: object) -> None:
    """Booleans, floats, None and non-digit text are not ports."""
    with pytest.raises(InvalidArgumentError, match="set_port: expects a numeric argument"):
        port_settings(port)  # type: ignore[arg-type]


# ======================== Loader ========================


@pytest.mark.os_agnostic
def test_loader_without_mailer_section_uses_defaults() -> None:
    """A config without [mailer] yields the default template."""
    assert load_transport_config_from_dict({}) == TransportConfig()


@pytest.mark.os_agnostic
def test_loader_translates_protocol_key() -> None:
    """protocol = "sendmail" selects sendmail mode."""
    config = load_transport_config_from_dict({"mailer": {"protocol": "sendmail"}})
    assert config.mode is TransportMode.SENDMAIL


@pytest.mark.os_agnostic
def test_loader_applies_port_rule_after_protocol() -> None:
    """Port 587 wins over protocol = "ssl" because the port is applied last."""
    config = load_transport_config_from_dict({"mailer": {"protocol": "ssl", "port": 587}})
    assert config.secure is SecureChannel.TLS


@pytest.mark.os_agnostic
def test_loader_reads_credentials() -> None:
    """Authentication settings pass straight through."""
    config = load_transport_config_from_dict(
        {"mailer": {"host": "smtp.example.com", "smtp_auth": True, "username": "u", "password": "p"}}
    )
    assert (config.host, config.smtp_auth, config.username, config.password) == ("smtp.example.com", True, "u", "p")


@pytest.mark.os_agnostic
def test_loader_rejects_non_table_section() -> None:
    """A scalar [mailer] value is a configuration error."""
    with pytest.raises(ConfigurationError, match="mailer section must be a table"):
        load_transport_config_from_dict({"mailer": "smtp"})


@pytest.mark.os_agnostic
def test_loader_rejects_unknown_protocol() -> None:
    """Unknown protocol names in config fail like they do in code."""
    with pytest.raises(UnsupportedProtocolError):
        load_transport_config_from_dict({"mailer": {"protocol": "ftp"}})


@pytest.mark.os_agnostic
def test_loader_rejects_unknown_keys() -> None:
    """Unknown settings in the [mailer] section are rejected."""
    with pytest.raises(PydanticValidationError):
        load_transport_config_from_dict({"mailer": {"relay": "x"}})
