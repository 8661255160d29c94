"""Context tools: tell the client where it is operating."""

from __future__ import annotations

import json
from typing import Any

from mcp import types

from toolbelt.mcp import capability_error_handler
from toolbelt.mcp.tools.workspace import GetClientFn
from toolbelt.toolsets.capability import ServerTool, new_server_tool, text_result
from toolbelt.toolsets.translations import TranslationHelper


def get_workspace_info(get_client: GetClientFn, t: TranslationHelper) -> ServerTool:
    @capability_error_handler
    async def handler(arguments: dict[str, Any]) -> types.CallToolResult:
        client = get_client()
        info = {
            "root": str(client.root),
            "max_file_chars": client.max_file_chars,
            "ignore_dirs": sorted(client.ignore_dirs),
        }
        return text_result(json.dumps(info))

    return new_server_tool(
        "get_workspace_info",
        t(
            "TOOL_GET_WORKSPACE_INFO_DESCRIPTION",
            "Describe the workspace the file tools operate in: its root and read limits.",
        ),
        handler,
        title=t("TOOL_GET_WORKSPACE_INFO_USER_TITLE", "Show workspace details"),
    )
