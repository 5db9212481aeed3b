"""Layered configuration for mailprovider: bundled defaults plus host overrides.

The ``[mailer]`` section feeds :class:`~mailprovider.adapters.mailer.TransportConfig`
and ``[lib_log_rich]`` feeds logging. Layers are read by lib_layered_config in
its usual order (defaults, app, host, user, dotenv, environment) and the
result is cached per ``(profile, start_dir)``.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Protocol

from lib_layered_config import (
    DEFAULT_MAX_PROFILE_LENGTH,
    Config,
    read_config,
    validate_profile_name,
)

from mailprovider import __init__conf__

_DEFAULT_CONFIG_FILE = "defaultconfig.toml"


class ConfigLoaderProtocol(Protocol):
    """Callable config loader that can drop its cache."""

    def __call__(self, *, profile: str | None = None, start_dir: str | None = None) -> Config: ...
    def cache_clear(self) -> None: ...


def validate_profile(profile: str, max_length: int | None = None) -> None:
    """Reject profile names that are empty, too long or path-like.

    Raises:
        ValueError: Raised by lib_layered_config for an unusable name.

    Example:
        >>> validate_profile("production")
        >>> try:
        ...     validate_profile("../etc/passwd")
        ... except ValueError:
        ...     print("rejected")
        rejected
    """
    limit = DEFAULT_MAX_PROFILE_LENGTH if max_length is None else max_length
    validate_profile_name(profile, max_length=limit)


@lru_cache(maxsize=1)
def get_default_config_path() -> Path:
    """Return the ``defaultconfig.toml`` shipped next to this module.

    Example:
        >>> get_default_config_path().name
        'defaultconfig.toml'
    """
    return Path(__file__).with_name(_DEFAULT_CONFIG_FILE)


class _LayeredConfigLoader:
    """Reads the layered configuration once per profile and start directory."""

    def __init__(self) -> None:
        self._read = lru_cache(maxsize=4)(self._read_uncached)

    @staticmethod
    def _read_uncached(profile: str | None, start_dir: str | None) -> Config:
        return read_config(
            vendor=__init__conf__.LAYEREDCONF_VENDOR,
            app=__init__conf__.LAYEREDCONF_APP,
            slug=__init__conf__.LAYEREDCONF_SLUG,
            profile=profile,
            default_file=get_default_config_path(),
            start_dir=start_dir,
        )

    def __call__(self, *, profile: str | None = None, start_dir: str | None = None) -> Config:
        """Return the merged configuration.

        Args:
            profile: Optional profile name; adds a ``profile/<name>/`` level
                to every configuration path.
            start_dir: Directory where ``.env`` discovery starts; the
                working directory when None.

        Example:
            >>> get_config().get("mailer", default={})["host"]
            'localhost'
        """
        if profile is not None:
            validate_profile(profile)
        return self._read(profile, start_dir)

    def cache_clear(self) -> None:
        """Forget cached results so the next call reads the files again."""
        self._read.cache_clear()


get_config: ConfigLoaderProtocol = _LayeredConfigLoader()


__all__ = [
    "ConfigLoaderProtocol",
    "get_config",
    "get_default_config_path",
    "validate_profile",
]
