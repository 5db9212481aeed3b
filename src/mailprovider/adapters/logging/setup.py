"""lib_log_rich initialisation for applications embedding mailprovider.

Library modules only ever call ``logging.getLogger(__name__)``. This module
turns the ``[lib_log_rich]`` configuration section into a lib_log_rich
runtime and bridges standard-library records into it, once per process.

Contents:
    * :class:`LoggingConfigModel` - parsed ``[lib_log_rich]`` section.
    * :func:`init_logging` - idempotent runtime initialisation.
"""

from __future__ import annotations

from typing import Any, cast

import lib_log_rich.config
import lib_log_rich.runtime
from lib_layered_config import Config
from pydantic import BaseModel, ConfigDict

from mailprovider import __init__conf__

_SECTION = "lib_log_rich"


class LoggingConfigModel(BaseModel):
    """The ``[lib_log_rich]`` section.

    Unknown keys are kept and handed to ``RuntimeConfig`` unchanged, so any
    lib_log_rich option can be set from configuration.

    Example:
        >>> model = LoggingConfigModel(service="mailer", environment="staging")
        >>> model.service
        'mailer'
        >>> LoggingConfigModel().environment
        'prod'
    """

    service: str | None = None
    environment: str = "prod"

    model_config = ConfigDict(extra="allow")

    @classmethod
    def from_config(cls, config: Config) -> LoggingConfigModel:
        """Parse the section out of a layered config; a missing section means defaults.

        Example:
            >>> LoggingConfigModel.from_config(Config({"lib_log_rich": {"environment": "ci"}}, {})).environment
            'ci'
        """
        section: object = config.get(_SECTION, default={})
        return cls.model_validate(cast("dict[str, Any]", section) if section else {})

    def runtime_options(self) -> dict[str, Any]:
        """Options lib_log_rich receives besides service and environment."""
        return self.model_dump(exclude={"service", "environment"}, exclude_none=True)

    def to_runtime_config(self) -> lib_log_rich.runtime.RuntimeConfig:
        """Build the runtime config; the service name falls back to the package name."""
        return lib_log_rich.runtime.RuntimeConfig(
            service=self.service or __init__conf__.name,
            environment=self.environment,
            **self.runtime_options(),
        )


def _build_runtime_config(config: Config) -> lib_log_rich.runtime.RuntimeConfig:
    return LoggingConfigModel.from_config(config).to_runtime_config()


def init_logging(config: Config) -> None:
    """Start lib_log_rich from *config* unless a runtime is already running.

    The first call loads ``.env`` files so ``LOG_*`` variables take effect,
    starts the runtime and attaches standard logging. Later calls do nothing.

    Example:
        >>> init_logging(Config({"lib_log_rich": {"environment": "test"}}, {}))  # doctest: +SKIP
    """
    if lib_log_rich.runtime.is_initialised():
        return
    lib_log_rich.config.enable_dotenv()
    lib_log_rich.runtime.init(_build_runtime_config(config))
    lib_log_rich.runtime.attach_std_logging()


__all__ = [
    "LoggingConfigModel",
    "init_logging",
]
