#!/usr/bin/env python3
"""Run the OECD MCP bridge without installing the package."""
from __future__ import annotations

from oecd_bridge.cli import main


if __name__ == "__main__":  # pragma: no cover - script entry point
    main()
