from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Protocol

class ToolInputError(ValueError):
    """Request rejected before any subprocess was spawned."""

class ToolExecutionError(RuntimeError):
    """The external binary could not be run (or a prerequisite call failed)."""

@dataclass(frozen=True)
class ToolSpec:
    name: str
    description: str
    parameters: dict[str, Any]   # JSONSchema

    def to_descriptor(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.parameters,
        }

    @property
    def actions(self) -> list[str]:
        action = self.parameters.get("properties", {}).get("action", {})
        return list(action.get("enum", []))

class Tool(Protocol):
    spec: ToolSpec
    def execute(self, ctx: "ToolContext", request: "ToolRequest") -> "ToolResult": ...

@dataclass
class ToolRequest:
    action: str
    args: list[str] = field(default_factory=list)
    target: str | None = None
    settings_file: str | None = None

    @staticmethod
    def from_obj(obj: Any) -> "ToolRequest":
        if not isinstance(obj, dict):
            raise ToolInputError("Request must be a JSON object.")
        action = obj.get("action")
        if not isinstance(action, str) or not action:
            raise ToolInputError("Missing required field: action")
        args = obj.get("args")
        if args is None:
            args = []
        if not isinstance(args, list) or not all(isinstance(a, str) for a in args):
            raise ToolInputError("Field 'args' must be an array of strings.")
        target = obj.get("target")
        if target is not None and not isinstance(target, str):
            raise ToolInputError("Field 'target' must be a string.")
        settings_file = obj.get("settingsFile")
        if settings_file is not None and not isinstance(settings_file, str):
            raise ToolInputError("Field 'settingsFile' must be a string.")
        return ToolRequest(
            action=action,
            args=list(args),
            target=target or None,
            settings_file=settings_file or None,
        )

@dataclass
class ToolResult:
    content: str = ""
    stderr: str = ""
    exit_code: int = 0

class OutputBuffer:
    """Collects console-style output lines for a ToolResult."""

    def __init__(self) -> None:
        self._out: list[str] = []
        self._err: list[str] = []

    def print(self, text: str = "") -> None:
        self._out.append(text + "\n")

    def eprint(self, text: str) -> None:
        self._err.append(text + "\n")

    def result(self, exit_code: int = 0) -> ToolResult:
        return ToolResult("".join(self._out), "".join(self._err), exit_code)

@dataclass
class ToolContext:
    cwd: str
    # Used for `~` expansion; falls back to $HOME.
    home: str | None = None
