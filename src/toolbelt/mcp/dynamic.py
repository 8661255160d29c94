"""Dynamic toolset discovery.

Three tools let a client inspect the toolset group and switch more toolsets
on while the session is running:
    - list_available_toolsets: every toolset and whether it is enabled
    - get_toolset_tools: the tools a toolset currently exposes
    - enable_toolset: enable a toolset and publish its tools to the live server

They live in the ``dynamic`` toolset, so a client can only reach them when
that toolset is enabled. Failures come back as error results; the session
carries on.
"""

from __future__ import annotations

from typing import Any

from mcp import types

from toolbelt.core.result import Err, Ok
from toolbelt.mcp import capability_error_handler, logger
from toolbelt.toolsets.capability import (
    ServerTool,
    error_result,
    json_result,
    new_server_tool,
    required_param,
    text_result,
)
from toolbelt.toolsets.group import ToolsetGroup
from toolbelt.toolsets.host import HostServer
from toolbelt.toolsets.translations import TranslationHelper

DYNAMIC_TOOLSET = "dynamic"


def toolset_enum_schema(group: ToolsetGroup, description: str) -> dict[str, Any]:
    """Input schema with one required ``toolset`` string limited to known names."""
    return {
        "type": "object",
        "properties": {
            "toolset": {
                "type": "string",
                "description": description,
                "enum": group.names(),
            }
        },
        "required": ["toolset"],
    }


def list_available_toolsets(group: ToolsetGroup, t: TranslationHelper) -> ServerTool:
    @capability_error_handler
    async def handler(arguments: dict[str, Any]) -> types.CallToolResult:
        enabled = {name: group.is_enabled(name) for name in group.names()}
        return json_result(enabled)

    return new_server_tool(
        "list_available_toolsets",
        t(
            "TOOL_LIST_AVAILABLE_TOOLSETS_DESCRIPTION",
            "List all available toolsets this server can offer, providing the enabled status "
            "of each. Use this when a task could be achieved with a toolset that is not "
            "currently enabled.",
        ),
        handler,
        title=t("TOOL_LIST_AVAILABLE_TOOLSETS_USER_TITLE", "List available toolsets"),
    )


def get_toolset_tools(group: ToolsetGroup, t: TranslationHelper) -> ServerTool:
    @capability_error_handler
    async def handler(arguments: dict[str, Any]) -> types.CallToolResult:
        param = required_param(arguments, "toolset", str)
        if isinstance(param, Err):
            return error_result(param.error.message)
        name = param.value

        toolset = group.get(name)
        if toolset is None:
            return error_result(f"Toolset {name} not found")

        tools = {st.name: st.description for st in toolset.get_active_tools()}
        return json_result(tools)

    return new_server_tool(
        "get_toolset_tools",
        t(
            "TOOL_GET_TOOLSET_TOOLS_DESCRIPTION",
            "Lists all the capabilities that are enabled when you enabled a toolset. Use "
            "this to check whether enabling a toolset would help you complete a task.",
        ),
        handler,
        input_schema=toolset_enum_schema(
            group, "The name of the toolset you want to get the tools for"
        ),
        title=t("TOOL_GET_TOOLSET_TOOLS_USER_TITLE", "List all tools in a toolset"),
    )


def enable_toolset(host: HostServer, group: ToolsetGroup, t: TranslationHelper) -> ServerTool:
    @capability_error_handler
    async def handler(arguments: dict[str, Any]) -> types.CallToolResult:
        param = required_param(arguments, "toolset", str)
        if isinstance(param, Err):
            return error_result(param.error.message)
        name = param.value

        match group.enable_and_publish(name, host):
            case Err(err):
                return error_result(err.message)
            case Ok(False):
                return text_result(f"Toolset {name} is already enabled")
            case Ok(True):
                pass

        # the change is global: every connected session sees the new tools
        await host.notify_tools_changed()
        logger.info("Client enabled toolset %s", name)
        return text_result(f"Toolset {name} enabled")

    return new_server_tool(
        "enable_toolset",
        t(
            "TOOL_ENABLE_TOOLSET_DESCRIPTION",
            "Enable one of the sets of tools this server provides, to access the tools and "
            "accomplish your goals.",
        ),
        handler,
        input_schema=toolset_enum_schema(group, "The name of the toolset to enable"),
        title=t("TOOL_ENABLE_TOOLSET_USER_TITLE", "Enable a toolset"),
    )


__all__ = [
    "DYNAMIC_TOOLSET",
    "enable_toolset",
    "get_toolset_tools",
    "list_available_toolsets",
    "toolset_enum_schema",
]
