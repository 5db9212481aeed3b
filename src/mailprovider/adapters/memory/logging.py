"""In-memory logging adapter for testing.

Does not start lib_log_rich. Records from mailprovider loggers propagate to
the root logger, where pytest's ``caplog`` sees them.
"""

from __future__ import annotations

from lib_layered_config import Config

from ..logging.setup import LoggingConfigModel


def init_logging_in_memory(config: Config) -> None:
    """Parse the ``[lib_log_rich]`` section so malformed test configs fail, then stop.

    Raises:
        pydantic.ValidationError: The section does not parse.
    """
    LoggingConfigModel.from_config(config)


__all__ = ["init_logging_in_memory"]
