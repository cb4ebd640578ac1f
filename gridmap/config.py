"""Global configuration: canonical field names, constants, settings."""

from __future__ import annotations

import logging
import os
from typing import Any
from uuid import UUID

logger = logging.getLogger(__name__)

# Canonical key used by leaf strategies when a record carries several fields
VALUE_KEY = "value"

# Identifier field, always emitted first by the processors
UUID_FIELD = "uuid"

# Series-level field of flattened time-series entries
TIME_SERIES_FIELD = "timeseries"

# All-zero UUID, written as an empty field
NIL_UUID = UUID("00000000-0000-0000-0000-000000000000")

NO_OPERATOR_ID = "NO_OPERATOR_ASSIGNED"

# All known configuration keys with defaults
_CONFIG_KEYS: dict[str, dict[str, Any]] = {
    "GRIDMAP_EXTRACTION_WORKERS": {
        "default": "4",
        "description": "Thread pool size for dependency extraction",
    },
    "GRIDMAP_LENIENT_BOOLEANS": {
        "default": "false",
        "description": "Decode unparseable boolean text as false instead of failing",
    },
}

_TRUTHY = {"1", "true", "yes", "on"}


def load_config(overrides: dict[str, str] | None = None) -> dict[str, str]:
    """Load merged config: defaults -> overrides -> env vars.

    Returns a flat dict of configuration values.
    """
    config: dict[str, str] = {}

    # 1. Defaults
    for key, info in _CONFIG_KEYS.items():
        config[key] = str(info["default"])

    # 2. Explicit overrides
    if overrides:
        for k, v in overrides.items():
            config[k] = str(v)

    # 3. Environment variables override all
    for key in _CONFIG_KEYS:
        env_val = os.environ.get(key)
        if env_val is not None:
            config[key] = env_val

    return config


def extraction_workers(config: dict[str, str] | None = None) -> int:
    """Thread pool size for extraction; falls back to the default on bad input."""
    config = config or load_config()
    raw = config.get("GRIDMAP_EXTRACTION_WORKERS", "")
    try:
        workers = int(raw)
    except ValueError:
        logger.warning("Invalid GRIDMAP_EXTRACTION_WORKERS %r, using default", raw)
        return int(_CONFIG_KEYS["GRIDMAP_EXTRACTION_WORKERS"]["default"])
    return max(1, workers)


def lenient_booleans(config: dict[str, str] | None = None) -> bool:
    config = config or load_config()
    return config.get("GRIDMAP_LENIENT_BOOLEANS", "false").strip().lower() in _TRUTHY
