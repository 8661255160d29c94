"""Toolsets package - grouping, enablement and publishing of MCP tools.

This package provides the toolset state model shared by the startup path
and the dynamic discovery tools.
"""

from __future__ import annotations

from toolbelt.toolsets.capability import (
    ResourceTemplate,
    ServerTool,
    error_result,
    json_result,
    new_resource_template,
    new_server_tool,
    required_param,
    text_result,
)
from toolbelt.toolsets.group import ALL_TOOLSETS, ToolsetGroup
from toolbelt.toolsets.host import HostServer, ToolHost
from toolbelt.toolsets.toolset import Toolset, ToolsetSpec
from toolbelt.toolsets.translations import (
    TranslationHelper,
    null_translation_helper,
    translation_helper_from,
)

__all__ = [
    "ALL_TOOLSETS",
    "HostServer",
    "ResourceTemplate",
    "ServerTool",
    "ToolHost",
    "Toolset",
    "ToolsetGroup",
    "ToolsetSpec",
    "TranslationHelper",
    "error_result",
    "json_result",
    "new_resource_template",
    "new_server_tool",
    "null_translation_helper",
    "required_param",
    "text_result",
    "translation_helper_from",
]
