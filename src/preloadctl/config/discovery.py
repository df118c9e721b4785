"""Locating ``preloadctl.toml``.

An import batch is usually verified from inside the project that owns
the policy, so the nearest ``preloadctl.toml`` at or above the working
directory applies. ``$PRELOADCTL_CONFIG`` names a file outright and turns
the search off.
"""

from __future__ import annotations

import os
from pathlib import Path

CONFIG_FILENAME = "preloadctl.toml"
CONFIG_ENV_VAR = "PRELOADCTL_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Return the policy file that applies to *start* (default: cwd), or None."""
    named = os.environ.get(CONFIG_ENV_VAR)
    if named:
        path = Path(named)
        return path if path.is_file() else None

    here = (start or Path.cwd()).resolve()
    for directory in (here, *here.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None
