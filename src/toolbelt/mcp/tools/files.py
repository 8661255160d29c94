"""File tools: read, list and write files inside the workspace.

Provides:
    - read_file, list_directory (read)
    - write_file (write)
    - file:///{+path} resource template
"""

from __future__ import annotations

from typing import Any

from mcp import types
from pydantic import BaseModel, Field

from toolbelt.mcp import capability_error_handler
from toolbelt.mcp.tools.workspace import GetClientFn
from toolbelt.toolsets.capability import (
    ResourceTemplate,
    ServerTool,
    new_resource_template,
    new_server_tool,
    parse_arguments,
    text_result,
)
from toolbelt.toolsets.translations import TranslationHelper


class ReadFileArgs(BaseModel):
    path: str = Field(description="File path, relative to the workspace root")


class ListDirectoryArgs(BaseModel):
    path: str = Field(default=".", description="Directory path, relative to the workspace root")


class WriteFileArgs(BaseModel):
    path: str = Field(description="File path, relative to the workspace root")
    content: str = Field(description="Full file content to write")
    overwrite: bool = Field(default=False, description="Replace the file if it already exists")


def read_file(get_client: GetClientFn, t: TranslationHelper) -> ServerTool:
    @capability_error_handler
    async def handler(arguments: dict[str, Any]) -> types.CallToolResult:
        args = parse_arguments(ReadFileArgs, arguments).unwrap()
        content = await get_client().read_text(args.path)
        return text_result(content)

    return new_server_tool(
        "read_file",
        t("TOOL_READ_FILE_DESCRIPTION", "Read the content of a file in the workspace."),
        handler,
        args_model=ReadFileArgs,
        title=t("TOOL_READ_FILE_USER_TITLE", "Read file"),
    )


def list_directory(get_client: GetClientFn, t: TranslationHelper) -> ServerTool:
    @capability_error_handler
    async def handler(arguments: dict[str, Any]) -> types.CallToolResult:
        args = parse_arguments(ListDirectoryArgs, arguments).unwrap()
        entries = await get_client().list_dir(args.path)
        return text_result("\n".join(entries))

    return new_server_tool(
        "list_directory",
        t(
            "TOOL_LIST_DIRECTORY_DESCRIPTION",
            "List a directory in the workspace as 'd: name' and 'f: name' lines.",
        ),
        handler,
        args_model=ListDirectoryArgs,
        title=t("TOOL_LIST_DIRECTORY_USER_TITLE", "List directory"),
    )


def write_file(get_client: GetClientFn, t: TranslationHelper) -> ServerTool:
    @capability_error_handler
    async def handler(arguments: dict[str, Any]) -> types.CallToolResult:
        args = parse_arguments(WriteFileArgs, arguments).unwrap()
        client = get_client()
        target = await client.write_text(args.path, args.content, overwrite=args.overwrite)
        return text_result(f"Wrote {len(args.content)} characters to {client.relative(target)}")

    return new_server_tool(
        "write_file",
        t(
            "TOOL_WRITE_FILE_DESCRIPTION",
            "Create a file in the workspace, or replace one when overwrite is true.",
        ),
        handler,
        args_model=WriteFileArgs,
        read_only=False,
        title=t("TOOL_WRITE_FILE_USER_TITLE", "Write file"),
    )


def file_resource(get_client: GetClientFn, t: TranslationHelper) -> ResourceTemplate:
    async def handler(uri: str, params: dict[str, str]) -> str:
        return await get_client().read_text(params["path"])

    return new_resource_template(
        "file:///{+path}",
        "workspace_file",
        t("RESOURCE_WORKSPACE_FILE_DESCRIPTION", "Contents of a file in the workspace"),
        handler,
        mime_type="text/plain",
    )
