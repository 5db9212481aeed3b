"""Adapters layer - infrastructure and framework integrations.

Contains adapter implementations that connect the application to external
systems and frameworks (transports, configuration, logging).

Contents:
    * :mod:`.mailer` - Reference transport via btx_lib_mail and the local MTA
    * :mod:`.memory` - In-memory adapters for tests
    * :mod:`.config` - Layered configuration loading
    * :mod:`.logging` - Logging setup with lib_log_rich
"""

from __future__ import annotations

__all__: list[str] = []
