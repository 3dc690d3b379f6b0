from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Callable, Sequence

from ..base import (
    OutputBuffer,
    ToolContext,
    ToolExecutionError,
    ToolInputError,
    ToolRequest,
    ToolResult,
    ToolSpec,
)
from ...util.subprocess import CmdResult, Runner, SpawnError, run_cmd

logger = logging.getLogger(__name__)

ACTIONS = ("list-windows", "run-shell", "capture-output", "send-keys", "run-raw-commands", "info")

# Actions that operate on the cwd session and therefore need it to exist first.
_SESSION_ACTIONS = {"info", "list-windows", "run-shell", "run-raw-commands"}

DESCRIPTION = """This tool allows you to run commands in the background and follow their output,
using tmux under the hood.

Every time you run an interactive or long-running process, you MUST use this tool.

This includes:

- common development servers (pnpm dev, npm start, npm dev, etc)
- test watchers (npm run test --watch, vitest --watch)"""

DESCRIBE_ACTION = """
  The tmux action to perform:
  info shows all information necessary for connecting to the running tmux instance,
  list-windows will list all windows in the active session,
  capture-output will return the output for a given window,
  send-keys sends each arg as a separate key input to the given target,
  run-shell opens a new window with the given command,
  run-raw-commands executes raw tmux commands
  """


def session_name_for(cwd: str) -> str:
    """Session name derived from the last path segment of cwd.

    tmux rewrites '.' and ':' in session names, and would then fail to find
    the session by its original name, so they are replaced up front.
    """
    name = Path(cwd).name
    for ch in ".:":
        name = name.replace(ch, "_")
    return name or "default"


class TmuxServer:
    """Isolated tmux server addressed by socket label, started without a config file."""

    def __init__(self, binary: str = "tmux", socket: str = "amp", runner: Runner = run_cmd, cwd: str | None = None):
        self.binary = binary
        self.socket = socket
        self.runner = runner
        self.cwd = cwd

    @property
    def base_argv(self) -> list[str]:
        return [self.binary, "-f", "/dev/null", "-L", self.socket]

    def run(self, *args: str) -> CmdResult:
        argv = self.base_argv + list(args)
        try:
            return self.runner(argv, cwd=self.cwd)
        except SpawnError as e:
            raise ToolExecutionError(f"Failed to execute tmux command: {e}") from e

    def has_session(self, name: str) -> bool:
        # "=" forces an exact match; plain -t also matches session-name prefixes
        return self.run("has-session", "-t", f"={name}").returncode == 0

    def ensure_session(self, name: str, cwd: str) -> bool:
        """Create the session if it is missing. Returns True if it was created."""
        if self.has_session(name):
            logger.debug("reusing tmux session %s", name)
            return False
        logger.debug("creating tmux session %s in %s", name, cwd)
        res = self.run("new-session", "-d", "-s", name, "-c", cwd)
        if res.returncode != 0:
            detail = res.stderr.strip() or f"exit code {res.returncode}"
            raise ToolExecutionError(f"Failed to create tmux session '{name}': {detail}")
        return True


class TmuxTool:
    spec = ToolSpec(
        name="tmux",
        description=DESCRIPTION,
        parameters={
            "type": "object",
            "properties": {
                "action": {
                    "type": "string",
                    "enum": list(ACTIONS),
                    "description": DESCRIBE_ACTION,
                },
                "args": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": "command arguments to pass to the action",
                },
                "target": {
                    "type": "string",
                    "description": (
                        "A tmux target string of the format session_name:window_number.pane_number, "
                        "e.g. amp:1.2"
                    ),
                },
            },
            "required": ["action"],
        },
    )

    def __init__(
        self,
        binary: str = "tmux",
        socket: str = "amp",
        send_keys_delay: float = 0.1,
        runner: Runner = run_cmd,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.binary = binary
        self.socket = socket
        self.send_keys_delay = send_keys_delay
        self.runner = runner
        self.sleep = sleep

    def server(self, ctx: ToolContext) -> TmuxServer:
        return TmuxServer(self.binary, self.socket, runner=self.runner, cwd=ctx.cwd)

    def execute(self, ctx: ToolContext, request: ToolRequest) -> ToolResult:
        action = request.action
        args = request.args
        if action not in ACTIONS:
            raise ToolInputError(f"Unknown action: {action}. Valid actions are: {', '.join(ACTIONS)}")
        if action == "run-shell" and not (args and args[0]):
            raise ToolInputError("run-shell action requires a command in args[0]")
        if action == "send-keys" and not request.target:
            raise ToolInputError("send-keys action requires a target")
        if action == "run-raw-commands" and not args:
            raise ToolInputError("run-raw-commands action requires at least one argument")

        tmux = self.server(ctx)
        session = session_name_for(ctx.cwd)
        if action in _SESSION_ACTIONS or (action == "capture-output" and not request.target):
            tmux.ensure_session(session, ctx.cwd)

        out = OutputBuffer()

        if action == "info":
            out.print(f"Server socket: {self.socket}")
            out.print(f"Connect with: tmux -L {self.socket}")
            res = tmux.run("list-sessions")
        elif action == "list-windows":
            res = tmux.run("list-windows", "-t", session, "-F", "#{window_index}: #{window_name}")
        elif action == "run-shell":
            res = self._run_shell(tmux, session, ctx.cwd, args[0], out)
        elif action == "capture-output":
            res = tmux.run("capture-pane", "-t", request.target or session, "-p")
        elif action == "send-keys":
            res = self._send_keys(tmux, request.target or "", args)
        else:
            res = tmux.run(*args)

        return _relay(out, res)

    def _run_shell(self, tmux: TmuxServer, session: str, cwd: str, command: str, out: OutputBuffer) -> CmdResult:
        win = tmux.run("new-window", "-t", session, "-c", cwd, "-P", "-F", "#{window_index}")
        window_index = win.stdout.strip()
        if win.returncode != 0 or not window_index:
            detail = win.stderr.strip() or f"exit code {win.returncode}"
            raise ToolExecutionError(f"Failed to create tmux window in session '{session}': {detail}")
        res = tmux.run("send-keys", "-t", f"{session}:{window_index}", command, "Enter")
        out.print(f"Started command in window {window_index}")
        return res

    def _send_keys(self, tmux: TmuxServer, target: str, keys: Sequence[str]) -> CmdResult:
        returncode = 0
        stderr = []
        for key in keys:
            res = tmux.run("send-keys", "-t", target, key)
            returncode = res.returncode
            if res.stderr:
                stderr.append(res.stderr)
            # give the receiving program's read loop time to consume each key in order
            self.sleep(self.send_keys_delay)
        return CmdResult(returncode, "", "".join(stderr))


def _relay(out: OutputBuffer, res: CmdResult) -> ToolResult:
    # tmux failures are reported through its stderr, not as adapter errors
    result = out.result()
    result.content += res.stdout
    result.stderr += res.stderr
    return result
