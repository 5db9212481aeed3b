"""Configuration adapter - layered configuration loading.

Provides the loader built on lib_layered_config and the bundled
``defaultconfig.toml``.

Contents:
    * :mod:`.loader` - Configuration loading with caching
"""

from __future__ import annotations

from .loader import get_config, get_default_config_path, validate_profile

__all__ = [
    "get_config",
    "get_default_config_path",
    "validate_profile",
]
