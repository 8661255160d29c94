from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path

import typer
from rich import box
from rich.panel import Panel
from rich.table import Table

from . import __version__
from .core.config import AppConfig, ConfigLoadResult, load_config, parse_toolset_names
from .core.console import console, setup_logging
from .core.result import ToolsetNotFoundError
from .mcp.server import ServerState, create_server

app = typer.Typer(help="toolbelt: an MCP server whose toolsets can be enabled on demand.")
logger = logging.getLogger(__name__)


@dataclass
class AppState:
    config: AppConfig
    config_meta: ConfigLoadResult
    logger: logging.Logger


def _apply_overrides(config: AppConfig, toolsets: str | None, read_only: bool) -> AppConfig:
    updates: dict[str, object] = {}
    if toolsets is not None:
        updates["toolsets"] = parse_toolset_names(toolsets)
    if read_only:
        updates["read_only"] = True
    if not updates:
        return config
    server = config.server.model_copy(update=updates)
    return config.model_copy(update={"server": server})


def _build(state: AppState, toolsets: str | None, read_only: bool) -> ServerState:
    config = _apply_overrides(state.config, toolsets, read_only)
    try:
        return create_server(config)
    except ToolsetNotFoundError as exc:
        console.print(f"[red]{exc.message}[/red]")
        raise typer.Exit(code=1) from exc


@app.callback()
def main(
    ctx: typer.Context,
    config: Path | None = typer.Option(
        None, "--config", "-c", help="Path to a toolbelt config file (TOML or JSON)."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    loaded_config, meta = load_config(config_path=config)
    app_logger = setup_logging(level=loaded_config.server.log_level, verbose=verbose)
    ctx.obj = AppState(config=loaded_config, config_meta=meta, logger=app_logger)

    if meta.error:
        # stdout belongs to the MCP transport once serving, so warn on stderr
        app_logger.warning(
            "Configuration error, using defaults. Failed to load %s: %s", meta.path, meta.error
        )
    else:
        app_logger.debug(
            "Loaded configuration from %s (env overrides: %s)",
            meta.path,
            sorted(meta.env_overrides),
        )


@app.command("serve")
def serve(
    ctx: typer.Context,
    toolsets: str | None = typer.Option(
        None,
        "--toolsets",
        "-t",
        help="Comma-separated toolsets to enable at startup ('all' enables everything).",
    ),
    read_only: bool = typer.Option(False, "--read-only", help="Expose read tools only."),
) -> None:
    """Serve the MCP tool server over stdio."""
    state: AppState = ctx.obj
    server = _build(state, toolsets, read_only)
    asyncio.run(server.host.run_stdio())


@app.command("toolsets")
def list_toolsets(
    ctx: typer.Context,
    toolsets: str | None = typer.Option(
        None, "--toolsets", "-t", help="Comma-separated toolsets to treat as enabled."
    ),
    read_only: bool = typer.Option(False, "--read-only", help="Apply the read-only policy."),
) -> None:
    """Show every toolset, whether it would be enabled, and what it holds."""
    state: AppState = ctx.obj
    server = _build(state, toolsets, read_only)

    table = Table(title="Toolsets", box=box.SIMPLE_HEAVY, expand=True)
    table.add_column("Toolset", style="cyan", no_wrap=True)
    table.add_column("Enabled", no_wrap=True)
    table.add_column("Read", justify="right")
    table.add_column("Write", justify="right")
    table.add_column("Resources", justify="right")
    table.add_column("Description", style="white")

    for name in server.group.names():
        toolset = server.group.get(name)
        if toolset is None:
            continue
        enabled = server.group.is_enabled(name)
        table.add_row(
            name,
            "[green]yes[/green]" if enabled else "[dim]no[/dim]",
            str(len(toolset.read_tools)),
            str(len(toolset.write_tools)),
            str(len(toolset.resource_templates)),
            toolset.description,
        )

    console.print(table)
    console.print(f"Registered tools: {', '.join(server.host.tool_names()) or '(none)'}")


@app.command("config")
def show_config(ctx: typer.Context) -> None:
    """Show the active configuration and where it came from."""
    state: AppState = ctx.obj
    config = state.config
    meta = state.config_meta

    table = Table(title="Config", box=box.SIMPLE, expand=True)
    table.add_column("Key", style="cyan", no_wrap=True)
    table.add_column("Value", style="white")

    for section, values in config.model_dump().items():
        for key, value in values.items():
            table.add_row(f"{section}.{key}", str(value))

    console.print(table)

    meta_lines = [
        f"Path: {meta.path}",
        "File loaded: yes" if meta.file_loaded else "File loaded: no (using defaults + env)",
    ]

    if meta.env_overrides:
        meta_lines.append("Env overrides: " + ", ".join(sorted(meta.env_overrides)))
    if meta.error:
        meta_lines.append(f"Error: {meta.error}")

    console.print(Panel("\n".join(meta_lines), title="Config source", box=box.SIMPLE))


@app.command("version")
def show_version() -> None:
    """Print the toolbelt version."""
    console.print(__version__)


def cli() -> None:
    app()


if __name__ == "__main__":
    cli()
