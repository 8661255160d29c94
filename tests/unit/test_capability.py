from __future__ import annotations

import json

from pydantic import BaseModel

from toolbelt.core.result import Err, InvalidParameterError, MissingParameterError, Ok
from toolbelt.toolsets.capability import (
    error_result,
    json_result,
    new_server_tool,
    parse_arguments,
    required_param,
    result_text,
    text_result,
)
from toolbelt.toolsets.translations import null_translation_helper, translation_helper_from


class _Args(BaseModel):
    path: str
    limit: int = 10


async def _noop(arguments):  # pragma: no cover - never awaited
    return text_result("")


def test_required_param_present() -> None:
    assert required_param({"toolset": "repos"}, "toolset", str) == Ok("repos")


def test_required_param_absent() -> None:
    result = required_param({}, "toolset", str)

    assert isinstance(result, Err)
    assert isinstance(result.error, MissingParameterError)
    assert result.error.message == "missing required parameter: toolset"


def test_required_param_empty_counts_as_missing() -> None:
    result = required_param({"toolset": ""}, "toolset", str)

    assert isinstance(result, Err)
    assert isinstance(result.error, MissingParameterError)


def test_required_param_wrong_type() -> None:
    result = required_param({"count": "3"}, "count", int)

    assert isinstance(result, Err)
    assert isinstance(result.error, InvalidParameterError)
    assert result.error.message == "parameter count is not of type int"


def test_required_param_bool_is_not_int() -> None:
    result = required_param({"count": True}, "count", int)

    assert isinstance(result, Err)
    assert isinstance(result.error, InvalidParameterError)


def test_required_param_none_arguments() -> None:
    assert isinstance(required_param(None, "toolset", str), Err)


def test_parse_arguments_valid() -> None:
    result = parse_arguments(_Args, {"path": "a.txt"})

    assert isinstance(result, Ok)
    assert result.value.path == "a.txt"
    assert result.value.limit == 10


def test_parse_arguments_missing_field() -> None:
    result = parse_arguments(_Args, {})

    assert isinstance(result, Err)
    assert result.error.message == "missing required parameter: path"


def test_parse_arguments_invalid_type() -> None:
    result = parse_arguments(_Args, {"path": "a", "limit": "lots"})

    assert isinstance(result, Err)
    assert isinstance(result.error, InvalidParameterError)


def test_results() -> None:
    assert result_text(text_result("hi")) == "hi"
    assert not text_result("hi").isError
    assert error_result("bad").isError
    assert json.loads(result_text(json_result({}))) == {}


def test_new_server_tool_schema_from_model() -> None:
    server_tool = new_server_tool("read", "Read things", _noop, args_model=_Args, read_only=False)

    assert server_tool.name == "read"
    assert server_tool.description == "Read things"
    assert server_tool.tool.inputSchema["required"] == ["path"]
    assert server_tool.tool.annotations.readOnlyHint is False


def test_new_server_tool_without_arguments() -> None:
    server_tool = new_server_tool("ping", "Ping", _noop)

    assert server_tool.tool.inputSchema == {"type": "object", "properties": {}}
    assert server_tool.tool.annotations.title == "ping"


def test_translation_helpers() -> None:
    helper = translation_helper_from({"TOOL_X_DESCRIPTION": "custom"})

    assert null_translation_helper("TOOL_X_DESCRIPTION", "default") == "default"
    assert helper("tool_x_description", "default") == "custom"
    assert helper("TOOL_Y_DESCRIPTION", "default") == "default"
