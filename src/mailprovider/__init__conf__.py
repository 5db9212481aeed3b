"""Static package metadata surfaced to configuration and logging.

Keeps identifiers that several adapters need (service name for lib_log_rich,
vendor/app/slug for lib_layered_config) in one import-cheap module.
"""

from __future__ import annotations

name = "mailprovider"
title = "Provider-agnostic email composition with interchangeable transport adapters"
version = "1.2.0"
homepage = "https://github.com/mailprovider/mailprovider"
author = "mailprovider maintainers"

LAYEREDCONF_VENDOR = "mailprovider"
LAYEREDCONF_APP = "mailprovider"
LAYEREDCONF_SLUG = "mailprovider"


def print_info() -> None:
    """Print the summarised metadata block.

    Example:
        >>> print_info()  # doctest: +ELLIPSIS
        Info for mailprovider:
        ...
    """
    fields = [
        ("name", name),
        ("title", title),
        ("version", version),
        ("homepage", homepage),
        ("author", author),
    ]
    pad = max(len(label) for label, _ in fields)
    lines = [f"Info for {name}:", ""]
    lines.extend(f"    {label.ljust(pad)} = {value}" for label, value in fields)
    print("\n".join(lines))
