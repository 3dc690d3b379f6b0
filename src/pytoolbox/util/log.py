from __future__ import annotations

import logging
import os

from rich.console import Console
from rich.logging import RichHandler

# stdout carries tool output; diagnostics always go to stderr.
err_console = Console(stderr=True)

_TRUTHY = {"1", "true", "yes", "on"}


def debug_from_env() -> bool:
    return os.environ.get("TOOLBOX_DEBUG", "").strip().lower() in _TRUTHY


def setup_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if (verbose or debug_from_env()) else logging.WARNING
    root = logging.getLogger("pytoolbox")
    root.setLevel(level)
    if not any(isinstance(h, RichHandler) for h in root.handlers):
        root.addHandler(RichHandler(console=err_console, show_path=False, markup=False))
    root.propagate = False
