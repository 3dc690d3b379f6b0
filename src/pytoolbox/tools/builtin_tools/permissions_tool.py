from __future__ import annotations

from typing import Sequence

from ..base import (
    OutputBuffer,
    ToolContext,
    ToolExecutionError,
    ToolInputError,
    ToolRequest,
    ToolResult,
    ToolSpec,
)
from ...util.fs import expand_home
from ...util.subprocess import CmdResult, Runner, SpawnError, run_cmd


PERMISSION_INSTRUCTIONS = """Permission Rules Reference:
- First matching rule wins
- Arguments are matched exactly unless wildcards (*) are present
- Use /regex/ syntax for regular expression matching
- Available actions: allow, reject, ask, delegate

Examples:
  allow Bash --cmd 'ls*'
  reject Bash --cmd '*rm -rf*'
  allow mcp__atlassian__jira_fetch_issue --issue_key "TEST*"
  ask mcp__atlassian__jira_fetch_issue
  ask '*'
  delegate --to amp-permission-helper '*'

Test examples:
  amp permissions test Bash --cmd 'ls*'
  amp permissions test mcp__atlassian__jira_fetch_issue --issue_key "TEST*"

Full reference: https://ampcode.com/manual/appendix#permissions-reference"""

EXPLANATION_LINES = (
    "",
    "Permission System Explanation:",
    "These permissions control which tools Amp can use and how.",
    "Key points:",
    "- Rules are evaluated in order - FIRST MATCHING RULE WINS",
    "- Arguments are matched exactly unless wildcards (*) are present",
    "- Use /regex/ syntax for regular expression matching",
    "- Available actions: allow, reject, ask, delegate",
    "",
)

ACTIONS = ("explain", "test", "add", "edit")

# What each action needs in `args`; used in the validation message.
_ARG_HINTS = {
    "test": "tool name",
    "add": "permission rule",
    "edit": "permission rule",
}


class PermissionsTool:
    spec = ToolSpec(
        name="permissions",
        description=(
            "Manage Amp tool permissions. ALWAYS use this tool whenever the user wants to ask about, "
            "test, or modify tool permissions. DO NOT use other tools like Bash or edit_file to modify "
            "permissions - editing permissions MUST be done with this tool only. Attempting to edit "
            f"settings files directly to modify permissions WILL FAIL. {PERMISSION_INSTRUCTIONS}\n\n"
            "WARNING: The 'edit' action will OVERWRITE all existing permissions. To preserve existing "
            "rules, list them first before adding new ones."
        ),
        parameters={
            "type": "object",
            "properties": {
                "settingsFile": {
                    "type": "string",
                    "description": (
                        "Optional path to settings file. If not provided, uses default settings file. "
                        "Set this to VS Code settings file when user asks about VS Code settings"
                    ),
                },
                "action": {
                    "type": "string",
                    "enum": list(ACTIONS),
                    "description": (
                        "Action to perform: 'explain' lists and explains current permissions, "
                        "'test' tests a permission rule, 'add' adds a new permission rule, "
                        "'edit' replaces all permissions with provided rules (OVERWRITES existing rules)"
                    ),
                },
                "args": {
                    "type": "array",
                    "items": {"type": "string"},
                    "default": [],
                    "description": (
                        "Arguments for the permission command. For edit action: each arg is a permission "
                        "rule in text format (e.g., \"allow Bash --cmd 'ls*'\"). "
                        "For test/add actions: tool name and parameters."
                    ),
                },
            },
            "required": ["action"],
        },
    )

    def __init__(self, amp_binary: str = "amp", runner: Runner = run_cmd):
        self.amp_binary = amp_binary
        self.runner = runner

    def build_argv(self, ctx: ToolContext, settings_file: str | None, subcommand: str, args: Sequence[str] = ()) -> list[str]:
        argv = [self.amp_binary]
        if settings_file:
            argv += ["--settings-file", expand_home(settings_file, ctx.home)]
        argv += ["permissions", subcommand, *args]
        return argv

    def _run(self, ctx: ToolContext, request: ToolRequest, subcommand: str, args: Sequence[str] = (), input_text: str | None = None) -> CmdResult:
        argv = self.build_argv(ctx, request.settings_file, subcommand, args)
        try:
            # Non-zero exits from amp are not tool errors; callers decide what to report.
            return self.runner(argv, cwd=ctx.cwd, input_text=input_text)
        except SpawnError as e:
            raise ToolExecutionError(f"Failed to execute amp command: {e}") from e

    def execute(self, ctx: ToolContext, request: ToolRequest) -> ToolResult:
        action = request.action
        if action not in ACTIONS:
            raise ToolInputError(f"Unknown action: {action}. Valid actions are: {', '.join(ACTIONS)}")
        if action in _ARG_HINTS and not request.args:
            raise ToolInputError(f"{action} action requires at least one argument ({_ARG_HINTS[action]})")

        out = OutputBuffer()

        if action == "explain":
            res = self._run(ctx, request, "list")
            out.print("Current permissions:")
            out.print(res.stdout)
            if res.stderr:
                out.eprint(res.stderr)
            for line in EXPLANATION_LINES:
                out.print(line)
            out.print(PERMISSION_INSTRUCTIONS)
            return out.result()

        if action == "edit":
            # Replaces, never merges, the whole rule set.
            rules_content = "\n".join(request.args)
            out.print(f"Replacing all permissions with {len(request.args)} rule(s)...")
            res = self._run(ctx, request, "edit", input_text=rules_content)
        else:
            res = self._run(ctx, request, action, request.args)

        out.print(res.stdout)
        if res.stderr:
            out.eprint(res.stderr)
        if action == "test" and res.returncode != 0:
            out.print(f"\nNote: Permission test returned exit code {res.returncode}")
        return out.result()
