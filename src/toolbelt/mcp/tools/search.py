from __future__ import annotations

import re
from typing import Any

from mcp import types
from pydantic import BaseModel, Field

from toolbelt.core.result import InvalidParameterError
from toolbelt.mcp import capability_error_handler
from toolbelt.mcp.tools.workspace import GetClientFn
from toolbelt.toolsets.capability import (
    ServerTool,
    new_server_tool,
    parse_arguments,
    text_result,
)
from toolbelt.toolsets.translations import TranslationHelper


class SearchFilesArgs(BaseModel):
    pattern: str = Field(min_length=1, description="Regular expression to search for")
    path: str = Field(default=".", description="Directory to search, relative to the root")
    limit: int = Field(default=100, ge=1, le=1000, description="Maximum matches to return")


def search_files(get_client: GetClientFn, t: TranslationHelper) -> ServerTool:
    @capability_error_handler
    async def handler(arguments: dict[str, Any]) -> types.CallToolResult:
        args = parse_arguments(SearchFilesArgs, arguments).unwrap()
        try:
            matches = await get_client().search(args.pattern, args.path, limit=args.limit)
        except re.error as exc:
            raise InvalidParameterError(f"Invalid pattern {args.pattern!r}: {exc}") from exc
        if not matches:
            return text_result("No matches found.")
        return text_result("\n".join(match.format() for match in matches))

    return new_server_tool(
        "search_files",
        t(
            "TOOL_SEARCH_FILES_DESCRIPTION",
            "Search workspace files for a regular expression. Returns path:line: text matches.",
        ),
        handler,
        args_model=SearchFilesArgs,
        title=t("TOOL_SEARCH_FILES_USER_TITLE", "Search files"),
    )
