"""Runtime configuration helpers for the OECD bridge."""
from __future__ import annotations

import os
from typing import Final


def _parse_float(value: str | None, *, default: float) -> float:
    if value is None or not value.strip():
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _parse_int(value: str | None, *, default: int) -> int:
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _env_str(name: str, *, default: str) -> str:
    value = os.getenv(name, "").strip()
    return value or default


def _env_float(name: str, *, default: float) -> float:
    return _parse_float(os.getenv(name), default=default)


def _env_int(name: str, *, default: int) -> int:
    return _parse_int(os.getenv(name), default=default)


SDMX_BASE_URL: Final[str] = _env_str(
    "OECD_SDMX_BASE_URL", default="https://sdmx.oecd.org/public/rest"
)
EXPLORER_BASE_URL: Final[str] = _env_str(
    "OECD_EXPLORER_BASE_URL", default="https://data-explorer.oecd.org/vis"
)
HTTP_TIMEOUT: Final[float] = _env_float("OECD_HTTP_TIMEOUT", default=30.0)
MCP_HOST: Final[str] = _env_str("OECD_MCP_HOST", default="127.0.0.1")
MCP_PORT: Final[int] = _env_int("OECD_MCP_PORT", default=3000)

# Observation limits protecting the caller's context window. Not configurable.
DEFAULT_OBSERVATIONS: Final[int] = 100
MAX_OBSERVATIONS: Final[int] = 1000
WARN_RATIO: Final[float] = 0.8


__all__ = [
    "DEFAULT_OBSERVATIONS",
    "EXPLORER_BASE_URL",
    "HTTP_TIMEOUT",
    "MAX_OBSERVATIONS",
    "MCP_HOST",
    "MCP_PORT",
    "SDMX_BASE_URL",
    "WARN_RATIO",
]
