from __future__ import annotations
from dataclasses import dataclass
from typing import Dict

from .base import Tool

@dataclass
class ToolRegistry:
    _tools: Dict[str, Tool] = None  # type: ignore

    def __post_init__(self):
        if self._tools is None:
            self._tools = {}

    def register(self, tool: Tool) -> None:
        name = tool.spec.name
        if name in self._tools:
            raise ValueError(f"Tool already registered: {name}")
        self._tools[name] = tool

    def get(self, name: str) -> Tool:
        if name not in self._tools:
            known = ", ".join(sorted(self._tools)) or "(none)"
            raise KeyError(f"Unknown tool: {name}. Known tools: {known}")
        return self._tools[name]

    def list_specs(self):
        return [t.spec for t in self._tools.values()]
