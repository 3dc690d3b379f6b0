from __future__ import annotations

from .registry import ToolRegistry
from ..config.models import ToolboxConfig
from ..util.subprocess import Runner, run_cmd

from .builtin_tools.permissions_tool import PermissionsTool
from .builtin_tools.tmux_tool import TmuxTool

def register_builtin_tools(registry: ToolRegistry, config: ToolboxConfig | None = None, runner: Runner | None = None) -> None:
    config = config or ToolboxConfig()
    runner = runner or run_cmd
    registry.register(PermissionsTool(amp_binary=config.amp_binary, runner=runner))
    registry.register(
        TmuxTool(
            binary=config.tmux_binary,
            socket=config.tmux_socket,
            send_keys_delay=config.send_keys_delay,
            runner=runner,
        )
    )
