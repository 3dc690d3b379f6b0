from __future__ import annotations

import sys
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from .config.loader import load_toolbox_config
from .tools.base import ToolContext
from .tools.builtin import register_builtin_tools
from .tools.invoke import invoke_tool
from .tools.registry import ToolRegistry
from .util.log import setup_logging


app = typer.Typer(add_completion=False, help="pytoolbox: toolbox adapters for the amp permissions CLI and tmux.")
console = Console()


def _resolve_cwd(cwd: Path | None) -> Path:
    cwd = Path(str(cwd or Path.cwd())).expanduser()
    if not cwd.is_absolute():
        cwd = (Path.cwd() / cwd).resolve()
    else:
        cwd = cwd.resolve()
    if not cwd.is_dir():
        raise typer.BadParameter(f"--cwd must be an existing directory, got: {cwd}")
    return cwd


def _build_registry(cwd: Path, config: Path | None) -> ToolRegistry:
    try:
        cfg = load_toolbox_config(cwd=cwd, explicit_path=config)
    except FileNotFoundError as e:
        raise typer.BadParameter(str(e), param_hint="--config")
    registry = ToolRegistry()
    register_builtin_tools(registry, cfg)
    return registry


def _run_tool(name: str, mode: str | None, cwd: Path | None, config: Path | None, verbose: bool) -> None:
    setup_logging(verbose)
    cwd = _resolve_cwd(cwd)
    tool = _build_registry(cwd, config).get(name)
    stdin_text = sys.stdin.read() if mode == "execute" else ""

    result = invoke_tool(tool, mode, ToolContext(cwd=str(cwd)), stdin_text)

    # Relayed verbatim; rich markup would mangle tool output.
    if result.content:
        typer.echo(result.content, nl=False)
    if result.stderr:
        typer.echo(result.stderr, nl=False, err=True)
    raise typer.Exit(code=result.exit_code)


_MODE_HELP = "describe (print JSON schema) or execute (read one JSON request from stdin). Defaults to $TOOLBOX_ACTION."


@app.command()
def permissions(
    mode: str = typer.Option(None, "--mode", envvar="TOOLBOX_ACTION", help=_MODE_HELP),
    cwd: Path = typer.Option(None, "--cwd", help="Working directory. Defaults to current directory."),
    config: Path = typer.Option(None, "--config", help="Optional toolbox config (JSON or YAML) path."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log executed commands to stderr."),
):
    """Manage amp tool permissions (explain/test/add/edit)."""
    _run_tool("permissions", mode, cwd, config, verbose)


@app.command()
def tmux(
    mode: str = typer.Option(None, "--mode", envvar="TOOLBOX_ACTION", help=_MODE_HELP),
    cwd: Path = typer.Option(None, "--cwd", help="Working directory; its name is the tmux session name."),
    config: Path = typer.Option(None, "--config", help="Optional toolbox config (JSON or YAML) path."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log executed commands to stderr."),
):
    """Run background commands in an isolated tmux server."""
    _run_tool("tmux", mode, cwd, config, verbose)


@app.command()
def tools(
    cwd: Path = typer.Option(None, "--cwd", help="Working directory. Defaults to current directory."),
    config: Path = typer.Option(None, "--config", help="Optional toolbox config (JSON or YAML) path."),
):
    """List the available tools and their actions."""
    cwd = _resolve_cwd(cwd)
    registry = _build_registry(cwd, config)

    table = Table(title="Tools")
    table.add_column("name", style="bold")
    table.add_column("actions")
    table.add_column("description")
    for spec in registry.list_specs():
        table.add_row(spec.name, ", ".join(spec.actions), spec.description.splitlines()[0])
    console.print(table)


def permissions_entry() -> None:
    """Console script: `toolbox-permissions`, for dropping into a toolbox directory."""
    app(args=["permissions", *sys.argv[1:]], prog_name="toolbox-permissions")


def tmux_entry() -> None:
    """Console script: `toolbox-tmux`."""
    app(args=["tmux", *sys.argv[1:]], prog_name="toolbox-tmux")
