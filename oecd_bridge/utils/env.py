"""Load ``OECD_*`` settings from a dotenv file before config is read."""
from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from dotenv import find_dotenv, load_dotenv

ENV_FILE_VAR = "OECD_BRIDGE_ENV_FILE"

_loaded_from: Optional[str] = None


def load_env(*, dotenv_path: Optional[str | Path] = None) -> Optional[str]:
    """Load settings once and return the file used, if any.

    The file is ``dotenv_path``, else ``$OECD_BRIDGE_ENV_FILE``, else the
    nearest ``.env`` above the working directory. Variables already set in
    the process environment are never overwritten.
    """

    global _loaded_from
    if _loaded_from is not None:
        return _loaded_from or None

    path = str(dotenv_path or os.getenv(ENV_FILE_VAR) or find_dotenv(usecwd=True))
    if path:
        load_dotenv(dotenv_path=path, override=False)
    _loaded_from = path
    return path or None


__all__ = ["ENV_FILE_VAR", "load_env"]
