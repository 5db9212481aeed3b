"""Shared pytest fixtures for message, transport and wiring tests.

Centralizes test infrastructure:
- All shared fixtures live here
- Tests import fixtures implicitly via pytest's conftest discovery
- Fixtures use descriptive names that read as plain English
"""

from __future__ import annotations

import contextlib
import os
import tempfile
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock, patch

import pytest
from lib_layered_config import Config

from mailprovider.adapters.mailer import LibraryMailer, TransportConfig
from mailprovider.adapters.memory import TransportSpy
from mailprovider.domain import Message

_COVERAGE_BASENAME = ".coverage.mailprovider"


def _purge_stale_coverage_files(cov_path: Path) -> None:
    """Delete leftover SQLite database and journal files from crashed runs."""
    for suffix in ("", "-journal", "-wal", "-shm"):
        with contextlib.suppress(FileNotFoundError):
            Path(str(cov_path) + suffix).unlink()


def pytest_configure(config: pytest.Config) -> None:
    """Redirect the coverage database to a **local** temp directory.

    Runs before ``pytest-cov`` creates its ``Coverage()`` object, so the
    ``COVERAGE_FILE`` value is picked up however pytest is invoked.
    """
    if "COVERAGE_FILE" not in os.environ:
        cov_path = Path(tempfile.gettempdir()) / _COVERAGE_BASENAME
        _purge_stale_coverage_files(cov_path)
        os.environ["COVERAGE_FILE"] = str(cov_path)


@pytest.fixture
def attachment_file(tmp_path: Path) -> Path:
    """Provide a small existing text file to attach."""
    path = tmp_path / "report.txt"
    path.write_text("quarterly numbers\n", encoding="utf-8")
    return path


@pytest.fixture
def ready_message() -> Message:
    """Provide a Message with sender, one recipient per list, subject and text."""
    return (
        Message()
        .set_from("sender@example.com", "Sender")
        .set_reply_to("replies@example.com")
        .add_to("to@example.com", "To Person")
        .add_cc("cc@example.com")
        .add_bcc("bcc@example.com")
        .set_subject("Status")
        .set_text("All green")
    )


@pytest.fixture
def transport_spy() -> TransportSpy:
    """Provide a fresh TransportSpy per test."""
    return TransportSpy()


@pytest.fixture
def smtp_config() -> TransportConfig:
    """Provide a template configuration for an authenticated SMTP relay."""
    return TransportConfig(
        host="smtp.example.com",
        port=2525,
        smtp_auth=True,
        username="mailer",
        password="s3cret",
    )


@pytest.fixture
def library_mailer(smtp_config: TransportConfig) -> LibraryMailer:
    """Provide a LibraryMailer built from ``smtp_config``."""
    return LibraryMailer(smtp_config)


@pytest.fixture
def btx_send_mock() -> Iterator[MagicMock]:
    """Patch the btx_lib_mail send primitive used by working sessions.

    Returns True by default; set ``return_value`` or ``side_effect`` to
    simulate failures.

    Example:
        def test_rejected(btx_send_mock: MagicMock) -> None:
            btx_send_mock.side_effect = RuntimeError("relay refused")
    """
    with patch("mailprovider.adapters.mailer.session.btx_send", return_value=True) as mock_send:
        yield mock_send


@pytest.fixture
def subprocess_run_mock() -> Iterator[MagicMock]:
    """Patch ``subprocess.run`` as seen by working sessions."""
    with patch("mailprovider.adapters.mailer.session.subprocess.run") as mock_run:
        yield mock_run


@pytest.fixture
def config_factory() -> Callable[[dict[str, Any]], Config]:
    """Create real Config instances from test data dicts.

    Builds actual ``lib_layered_config.Config`` objects without filesystem I/O.
    The second argument (empty dict) represents no source provenance info.
    """

    def _factory(data: dict[str, Any]) -> Config:
        return Config(data, {})

    return _factory


@pytest.fixture
def clear_config_cache() -> Iterator[None]:
    """Clear the get_config lru_cache before each test."""
    from mailprovider.adapters.config import loader as config_mod

    config_mod.get_config.cache_clear()
    yield
