"""MCP server assembly.

Creates and configures the MCP server with:
    - Configuration loading
    - Toolset catalog and startup enablement
    - Registration of enabled toolsets on the host
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass

from toolbelt import __version__
from toolbelt.core.config import AppConfig, load_config
from toolbelt.core.console import setup_logging
from toolbelt.mcp import logger
from toolbelt.mcp.tools import init_toolsets
from toolbelt.mcp.tools.workspace import GetClientFn, client_factory
from toolbelt.toolsets.group import ToolsetGroup
from toolbelt.toolsets.host import ToolHost
from toolbelt.toolsets.translations import translation_helper_from


@dataclass
class ServerState:
    """The running host and the toolset group behind it."""

    config: AppConfig
    host: ToolHost
    group: ToolsetGroup


def _load_configuration() -> AppConfig:
    """Load configuration, falling back to defaults on error."""
    cfg, result = load_config()
    if result.error:
        logger.error("Failed to load config from %s: %s", result.path, result.error)
    elif result.file_loaded:
        logger.info("MCP server loaded config from %s", result.path)
    return cfg


def register_toolsets(host: ToolHost, group: ToolsetGroup) -> None:
    """Register every enabled toolset with the host."""
    group.register_tools(host)
    enabled = [toolset.name for toolset in group if toolset.enabled]
    logger.info(
        "Registered %d tools from toolsets: %s",
        len(host.tool_names()),
        ", ".join(enabled) or "(none)",
    )


def create_server(
    config: AppConfig | None = None,
    get_client: GetClientFn | None = None,
) -> ServerState:
    """Build the host, the toolset group and register the enabled toolsets.

    Raises:
        ToolsetNotFoundError: If the configuration enables an unknown toolset.
    """
    cfg = config or _load_configuration()
    host = ToolHost(cfg.server.name, version=__version__)
    group = init_toolsets(
        host,
        cfg.server.toolsets,
        cfg.server.read_only,
        get_client or client_factory(cfg),
        translation_helper_from(cfg.server.description_overrides),
    )
    register_toolsets(host, group)
    return ServerState(config=cfg, host=host, group=group)


def main() -> None:
    cfg = _load_configuration()
    setup_logging(cfg.server.log_level)
    state = create_server(cfg)
    asyncio.run(state.host.run_stdio())


if __name__ == "__main__":
    main()
