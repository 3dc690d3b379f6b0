from __future__ import annotations

import json
import logging
from typing import Any

from .base import Tool, ToolContext, ToolExecutionError, ToolInputError, ToolRequest, ToolResult

logger = logging.getLogger(__name__)

MODES = ("describe", "execute")


def describe_tool(tool: Tool) -> dict[str, Any]:
    return tool.spec.to_descriptor()


def parse_request(raw: str) -> ToolRequest:
    try:
        obj = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ToolInputError(f"Could not parse input: {e}") from e
    return ToolRequest.from_obj(obj)


def invoke_tool(tool: Tool, mode: str | None, ctx: ToolContext, stdin_text: str = "") -> ToolResult:
    """Run one describe/execute cycle for a tool.

    Never raises for request-level problems: input errors, spawn failures and
    unknown modes all come back as a ToolResult with exit_code 1 and an
    ``Error: ...`` line on stderr.
    """
    if mode == "describe":
        return ToolResult(content=json.dumps(describe_tool(tool), indent=2, ensure_ascii=False) + "\n")

    if mode != "execute":
        return _error(f"Unknown mode: {mode}. Set TOOLBOX_ACTION to describe or execute, then run again")

    try:
        request = parse_request(stdin_text)
        logger.debug("%s: action=%s args=%s target=%s", tool.spec.name, request.action, request.args, request.target)
        return tool.execute(ctx, request)
    except (ToolInputError, ToolExecutionError) as e:
        logger.debug("%s failed: %s", tool.spec.name, e)
        return _error(str(e))


def _error(message: str) -> ToolResult:
    return ToolResult(stderr=f"Error: {message}\n", exit_code=1)
