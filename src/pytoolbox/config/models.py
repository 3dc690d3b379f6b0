from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any


@dataclass
class ToolboxConfig:
    """Settings shared by the builtin tools.

    The tmux session name is deliberately absent: it is always derived from
    the working directory.
    """

    amp_binary: str = "amp"
    tmux_binary: str = "tmux"
    tmux_socket: str = "amp"
    send_keys_delay: float = 0.1

    loaded_from: Path | None = None

    @staticmethod
    def from_obj(obj: Any) -> "ToolboxConfig":
        cfg = ToolboxConfig()
        if not isinstance(obj, dict):
            return cfg
        for key in ("amp_binary", "tmux_binary", "tmux_socket"):
            v = obj.get(key)
            if isinstance(v, str) and v.strip():
                setattr(cfg, key, v.strip())
        delay = obj.get("send_keys_delay")
        # bool is an int subclass; reject it explicitly
        if isinstance(delay, (int, float)) and not isinstance(delay, bool) and delay >= 0:
            cfg.send_keys_delay = float(delay)
        return cfg
