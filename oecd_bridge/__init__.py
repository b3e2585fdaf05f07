"""MCP bridge exposing OECD SDMX statistics to language-model agents."""

__version__ = "0.1.0"

from .utils.env import load_env  # noqa: E402

# Ensure environment defaults from `.env` are available to all modules on import.
load_env()
