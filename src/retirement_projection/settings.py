# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""
Process settings read from the environment.

Priority: 1) process environment variables
          2) .env file at the project root (for local development)
"""

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

_PROJECT_ROOT = Path(__file__).resolve().parents[2]

# override=False keeps real environment variables ahead of the .env file
_env_path = _PROJECT_ROOT / ".env"
if _env_path.exists():
    load_dotenv(_env_path, override=False)


def _get_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _get_float(name: str, default: float) -> float:
    value = os.getenv(name, "").strip()
    if not value:
        return default
    try:
        return float(value)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {value!r}")


def _get_optional_int(name: str) -> Optional[int]:
    value = os.getenv(name, "").strip()
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {value!r}")


HISTORY_URL = os.getenv(
    "HISTORY_URL", "https://www.slickcharts.com/sp500/returns/history.json"
).strip()
HISTORY_PROXY_URL = os.getenv("HISTORY_PROXY_URL", "https://corsproxy.io/?").strip()
HISTORY_FETCH_ENABLED = _get_bool("HISTORY_FETCH_ENABLED", True)


# Numeric settings are parsed on access so a malformed value only fails the
# caller that needs it, not the package import.
def history_fetch_timeout() -> float:
    """HISTORY_FETCH_TIMEOUT in seconds (default 10)."""
    return _get_float("HISTORY_FETCH_TIMEOUT", 10.0)


def verify_random_seed() -> Optional[int]:
    """VERIFY_RANDOM_SEED, or None for fresh entropy."""
    return _get_optional_int("VERIFY_RANDOM_SEED")
