"""Host server: the live set of tools and resource templates a client sees.

Toolsets talk to the host through three primitives (register one tool,
register many tools, register one resource template). ``ToolHost`` backs
those primitives with a lock-guarded registry and serves it over MCP using
the low-level ``mcp`` server.

Registering an identifier that is already live replaces the earlier entry in
place. The live set therefore never holds two tools with the same name, no
matter how often a toolset is published.
"""

from __future__ import annotations

import re
import threading
from collections.abc import Iterable
from typing import Any, Protocol

from mcp import types
from mcp.server.lowlevel import NotificationOptions, Server
from mcp.server.lowlevel.helper_types import ReadResourceContents
from mcp.server.stdio import stdio_server
from pydantic import AnyUrl

from toolbelt.core.console import get_logger
from toolbelt.core.result import ToolbeltError
from toolbelt.toolsets.capability import (
    ResourceTemplate,
    ResourceTemplateHandler,
    ServerTool,
    ToolHandler,
    error_result,
    result_text,
)

logger = get_logger("host")


class CapabilityCallError(ToolbeltError):
    """Carries an error result back through the MCP call_tool boundary."""


class ResourceNotFoundError(ToolbeltError):
    """Raised when no registered template matches a resource URI."""


class HostServer(Protocol):
    """What a toolset needs from the server it registers with."""

    def add_tool(self, tool: types.Tool, handler: ToolHandler) -> None: ...

    def add_tools(self, tools: Iterable[ServerTool]) -> None: ...

    def add_resource_template(
        self, template: types.ResourceTemplate, handler: ResourceTemplateHandler
    ) -> None: ...

    async def notify_tools_changed(self) -> None: ...


_TEMPLATE_VAR = re.compile(r"\{(\+?)(\w+)\}")


def compile_uri_template(uri_template: str) -> re.Pattern[str]:
    """Compile a level-1 URI template into a regex.

    ``{name}`` matches one path segment; ``{+name}`` may span slashes.
    """
    parts: list[str] = []
    position = 0
    for match in _TEMPLATE_VAR.finditer(uri_template):
        parts.append(re.escape(uri_template[position : match.start()]))
        reserved, name = match.groups()
        parts.append(f"(?P<{name}>.+)" if reserved else f"(?P<{name}>[^/]+)")
        position = match.end()
    parts.append(re.escape(uri_template[position:]))
    return re.compile("^" + "".join(parts) + "$")


class ToolHost:
    """Thread-safe tool registry served through an MCP low-level server."""

    def __init__(self, name: str, *, version: str | None = None) -> None:
        self._lock = threading.RLock()
        self._tools: dict[str, ServerTool] = {}
        self._templates: dict[str, tuple[ResourceTemplate, re.Pattern[str]]] = {}
        self.server = Server(name, version=version)
        self._install_handlers()

    # ------------------------------------------------------------------
    # Registration primitives
    # ------------------------------------------------------------------

    def add_tool(self, tool: types.Tool, handler: ToolHandler) -> None:
        with self._lock:
            if tool.name in self._tools:
                logger.warning("Replacing already registered tool %s", tool.name)
            else:
                logger.debug("Registered tool %s", tool.name)
            self._tools[tool.name] = ServerTool(tool=tool, handler=handler)

    def add_tools(self, tools: Iterable[ServerTool]) -> None:
        """Register several tools as one step; readers never see half the batch."""
        with self._lock:
            for server_tool in tools:
                self.add_tool(server_tool.tool, server_tool.handler)

    def add_resource_template(
        self, template: types.ResourceTemplate, handler: ResourceTemplateHandler
    ) -> None:
        with self._lock:
            key = template.uriTemplate
            if key in self._templates:
                logger.warning("Replacing already registered resource template %s", key)
            entry = ResourceTemplate(template=template, handler=handler)
            self._templates[key] = (entry, compile_uri_template(key))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def tools(self) -> list[ServerTool]:
        with self._lock:
            return list(self._tools.values())

    def tool_names(self) -> list[str]:
        with self._lock:
            return list(self._tools)

    def resource_templates(self) -> list[ResourceTemplate]:
        with self._lock:
            return [entry for entry, _ in self._templates.values()]

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    async def call_tool(self, name: str, arguments: dict[str, Any] | None) -> types.CallToolResult:
        with self._lock:
            server_tool = self._tools.get(name)
        if server_tool is None:
            return error_result(f"Unknown tool: {name}")
        return await server_tool.handler(dict(arguments or {}))

    def resolve_resource(self, uri: str) -> tuple[ResourceTemplate, dict[str, str]]:
        """Find the first template matching ``uri`` and its extracted variables."""
        with self._lock:
            candidates = list(self._templates.values())
        for entry, pattern in candidates:
            match = pattern.match(uri)
            if match:
                return entry, match.groupdict()
        raise ResourceNotFoundError(f"Resource {uri} not found", context={"uri": uri})

    async def read_resource(self, uri: str) -> ReadResourceContents:
        entry, params = self.resolve_resource(uri)
        text = await entry.handler(uri, params)
        mime_type = entry.template.mimeType or "text/plain"
        return ReadResourceContents(content=text, mime_type=mime_type)

    async def notify_tools_changed(self) -> None:
        """Tell the calling client its tool list changed, when inside a request."""
        try:
            ctx = self.server.request_context
        except LookupError:
            return
        await ctx.session.send_tool_list_changed()

    def _install_handlers(self) -> None:
        server = self.server

        @server.list_tools()
        async def _list_tools() -> list[types.Tool]:
            return [server_tool.tool for server_tool in self.tools()]

        @server.call_tool()
        async def _call_tool(name: str, arguments: dict[str, Any]) -> list[types.ContentBlock]:
            result = await self.call_tool(name, arguments)
            if result.isError:
                # the low-level server turns raised errors into isError results
                raise CapabilityCallError(result_text(result))
            return list(result.content)

        @server.list_resources()
        async def _list_resources() -> list[types.Resource]:
            return []

        @server.list_resource_templates()
        async def _list_resource_templates() -> list[types.ResourceTemplate]:
            return [entry.template for entry in self.resource_templates()]

        @server.read_resource()
        async def _read_resource(uri: AnyUrl) -> list[ReadResourceContents]:
            return [await self.read_resource(str(uri))]

    async def run_stdio(self) -> None:
        """Serve the registry over stdio until the client disconnects."""
        options = self.server.create_initialization_options(
            notification_options=NotificationOptions(tools_changed=True),
        )
        async with stdio_server() as (read_stream, write_stream):
            await self.server.run(read_stream, write_stream, options)


__all__ = [
    "CapabilityCallError",
    "HostServer",
    "ResourceNotFoundError",
    "ToolHost",
    "compile_uri_template",
]
