"""
Process-wide settings.

Defaults can be overridden with ``TEXTDICT_<NAME>`` environment variables,
e.g. ``TEXTDICT_LOG_LEVEL=DEBUG``.
"""

from __future__ import annotations

import os
from typing import Any, Dict, Mapping, Optional


ENV_PREFIX = "TEXTDICT_"

DEFAULT_SETTINGS: Dict[str, Any] = {
    "log_level": "WARNING",
    "log_format": "console",  # console or json
    "duplicate_policy": "error",  # error, keep_first or replace
}

ALLOWED_VALUES: Dict[str, tuple] = {
    "log_level": ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"),
    "log_format": ("console", "json"),
    "duplicate_policy": ("error", "keep_first", "replace"),
}


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
    """
    Merge environment overrides into the defaults.

    Raises:
        ValueError: An override is not one of the allowed values
    """
    if environ is None:
        environ = os.environ
    settings = {}
    for key, default in DEFAULT_SETTINGS.items():
        name = ENV_PREFIX + key.upper()
        value = environ.get(name, default)
        if key == "log_level":
            value = value.upper()
        if value not in ALLOWED_VALUES[key]:
            allowed = ", ".join(ALLOWED_VALUES[key])
            raise ValueError(f"{name}={value!r} is not one of: {allowed}")
        settings[key] = value
    return settings
