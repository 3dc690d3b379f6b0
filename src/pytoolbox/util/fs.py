from __future__ import annotations
import os
from pathlib import Path

def expand_home(path_str: str, home: str | None = None) -> str:
    """Expand a leading ``~`` to the caller's home directory.

    Only ``~`` and ``~/...`` are expanded; anything else is returned as given.
    """
    if path_str != "~" and not path_str.startswith("~/"):
        return path_str
    home = home or os.environ.get("HOME") or str(Path.home())
    return home + path_str[1:]
