"""Capability descriptors and result helpers.

A capability is an MCP tool descriptor paired with the coroutine that serves
it. Toolsets and the host server only thread these pairs through; they never
look inside a handler.
"""

from __future__ import annotations

import json
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from typing import Any, TypeVar

from mcp import types
from pydantic import BaseModel, ValidationError

from toolbelt.core.result import (
    Err,
    InvalidParameterError,
    MissingParameterError,
    Ok,
    ParameterError,
    Result,
)

T = TypeVar("T")
M = TypeVar("M", bound=BaseModel)

ToolHandler = Callable[[dict[str, Any]], Awaitable[types.CallToolResult]]
ResourceTemplateHandler = Callable[[str, dict[str, str]], Awaitable[str]]


@dataclass(frozen=True, slots=True)
class ServerTool:
    """An MCP tool descriptor and its handler."""

    tool: types.Tool
    handler: ToolHandler

    @property
    def name(self) -> str:
        return self.tool.name

    @property
    def description(self) -> str:
        return self.tool.description or ""


@dataclass(frozen=True, slots=True)
class ResourceTemplate:
    """An MCP resource template descriptor and the coroutine that reads it."""

    template: types.ResourceTemplate
    handler: ResourceTemplateHandler

    @property
    def uri_template(self) -> str:
        return self.template.uriTemplate


def new_server_tool(
    name: str,
    description: str,
    handler: ToolHandler,
    *,
    args_model: type[BaseModel] | None = None,
    input_schema: dict[str, Any] | None = None,
    read_only: bool = True,
    title: str | None = None,
) -> ServerTool:
    """Build a ServerTool from tool metadata and a handler.

    The input schema comes from ``input_schema`` when given, otherwise from the
    pydantic ``args_model``; a tool with neither takes no arguments.
    """
    if input_schema is None:
        if args_model is not None:
            input_schema = args_model.model_json_schema()
        else:
            input_schema = {"type": "object", "properties": {}}

    tool = types.Tool(
        name=name,
        description=description,
        inputSchema=input_schema,
        annotations=types.ToolAnnotations(title=title or name, readOnlyHint=read_only),
    )
    return ServerTool(tool=tool, handler=handler)


def new_resource_template(
    uri_template: str,
    name: str,
    description: str,
    handler: ResourceTemplateHandler,
    *,
    mime_type: str | None = None,
) -> ResourceTemplate:
    template = types.ResourceTemplate(
        uriTemplate=uri_template,
        name=name,
        description=description,
        mimeType=mime_type,
    )
    return ResourceTemplate(template=template, handler=handler)


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------


def text_result(text: str) -> types.CallToolResult:
    return types.CallToolResult(content=[types.TextContent(type="text", text=text)])


def error_result(message: str) -> types.CallToolResult:
    """Return a user-visible failure; the session carries on."""
    return types.CallToolResult(
        content=[types.TextContent(type="text", text=message)],
        isError=True,
    )


def json_result(payload: Mapping[str, Any]) -> types.CallToolResult:
    return text_result(json.dumps(dict(payload)))


def result_text(result: types.CallToolResult) -> str:
    """Concatenate the text blocks of a tool result."""
    return "".join(
        block.text for block in result.content if isinstance(block, types.TextContent)
    )


# ---------------------------------------------------------------------------
# Argument validation
# ---------------------------------------------------------------------------


def required_param(
    arguments: Mapping[str, Any] | None, name: str, expected: type[T]
) -> Result[T, ParameterError]:
    """Fetch a required argument.

    Absent and zero values (empty string, 0, False) count as missing.
    """
    args = arguments or {}
    if name not in args:
        return Err(MissingParameterError(f"missing required parameter: {name}"))

    value = args[name]
    # bool is an int subclass; keep the two apart
    if not isinstance(value, expected) or (isinstance(value, bool) and expected is not bool):
        return Err(
            InvalidParameterError(f"parameter {name} is not of type {expected.__name__}")
        )
    if not value:
        return Err(MissingParameterError(f"missing required parameter: {name}"))
    return Ok(value)


def parse_arguments(model: type[M], arguments: Mapping[str, Any] | None) -> Result[M, ParameterError]:
    """Validate tool arguments against a pydantic model."""
    try:
        return Ok(model.model_validate(dict(arguments or {})))
    except ValidationError as exc:
        missing = [err for err in exc.errors() if err["type"] == "missing"]
        if missing:
            field = ".".join(str(part) for part in missing[0]["loc"])
            return Err(MissingParameterError(f"missing required parameter: {field}"))
        return Err(InvalidParameterError(str(exc)))


__all__ = [
    "ResourceTemplate",
    "ResourceTemplateHandler",
    "ServerTool",
    "ToolHandler",
    "error_result",
    "json_result",
    "new_resource_template",
    "new_server_tool",
    "parse_arguments",
    "required_param",
    "result_text",
    "text_result",
]
