"""Tests for the workspace-backed file, search and context tools."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from toolbelt.core.result import Err, Ok, WorkspaceError
from toolbelt.mcp.tools import context, files, search
from toolbelt.mcp.tools.workspace import WorkspaceClient
from toolbelt.toolsets.capability import result_text
from toolbelt.toolsets.translations import null_translation_helper as t


@pytest.fixture
def client(tmp_path: Path) -> WorkspaceClient:
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "app.py").write_text("import os\nprint('hello')\n", encoding="utf-8")
    (tmp_path / "README.md").write_text("# demo\nhello world\n", encoding="utf-8")
    (tmp_path / ".git").mkdir()
    (tmp_path / ".git" / "config").write_text("hello git\n", encoding="utf-8")
    return WorkspaceClient(root=tmp_path.resolve(), max_file_chars=1000, ignore_dirs=frozenset({".git"}))


def test_resolve_rejects_escape(client: WorkspaceClient) -> None:
    result = client.resolve("../outside.txt")

    assert isinstance(result, Err)
    assert isinstance(result.error, WorkspaceError)


def test_resolve_relative_path(client: WorkspaceClient) -> None:
    assert client.resolve("src/app.py") == Ok(client.root / "src" / "app.py")


@pytest.mark.asyncio
async def test_read_file(client: WorkspaceClient) -> None:
    result = await files.read_file(lambda: client, t).handler({"path": "src/app.py"})

    assert not result.isError
    assert "print('hello')" in result_text(result)


@pytest.mark.asyncio
async def test_read_file_truncates(client: WorkspaceClient) -> None:
    client.max_file_chars = 5

    result = await files.read_file(lambda: client, t).handler({"path": "README.md"})

    assert result_text(result).startswith("# dem")
    assert "[truncated at 5 chars]" in result_text(result)


@pytest.mark.asyncio
async def test_read_file_missing_parameter(client: WorkspaceClient) -> None:
    result = await files.read_file(lambda: client, t).handler({})

    assert result.isError
    assert result_text(result) == "missing required parameter: path"


@pytest.mark.asyncio
async def test_read_file_not_found(client: WorkspaceClient) -> None:
    result = await files.read_file(lambda: client, t).handler({"path": "nope.txt"})

    payload = json.loads(result_text(result))
    assert result.isError
    assert payload["error"] == "FileNotFound"
    assert payload["path"].endswith("nope.txt")


@pytest.mark.asyncio
async def test_read_file_outside_workspace(client: WorkspaceClient) -> None:
    result = await files.read_file(lambda: client, t).handler({"path": "../../etc/passwd"})

    payload = json.loads(result_text(result))
    assert result.isError
    assert payload["error"] == "WorkspaceError"


@pytest.mark.asyncio
async def test_list_directory(client: WorkspaceClient) -> None:
    result = await files.list_directory(lambda: client, t).handler({})

    assert result_text(result).splitlines() == ["d: .git", "d: src", "f: README.md"]


@pytest.mark.asyncio
async def test_write_file_refuses_overwrite(client: WorkspaceClient) -> None:
    handler = files.write_file(lambda: client, t).handler

    created = await handler({"path": "notes/new.txt", "content": "abc"})
    refused = await handler({"path": "notes/new.txt", "content": "xyz"})
    replaced = await handler({"path": "notes/new.txt", "content": "xyz", "overwrite": True})

    assert result_text(created) == "Wrote 3 characters to notes/new.txt"
    assert refused.isError
    assert not replaced.isError
    assert (client.root / "notes" / "new.txt").read_text(encoding="utf-8") == "xyz"


def test_write_file_is_not_read_only(client: WorkspaceClient) -> None:
    tool = files.write_file(lambda: client, t).tool

    assert tool.annotations.readOnlyHint is False


@pytest.mark.asyncio
async def test_file_resource(client: WorkspaceClient) -> None:
    resource = files.file_resource(lambda: client, t)

    text = await resource.handler("file:///README.md", {"path": "README.md"})

    assert resource.uri_template == "file:///{+path}"
    assert text.startswith("# demo")


@pytest.mark.asyncio
async def test_search_files_skips_ignored_dirs(client: WorkspaceClient) -> None:
    result = await search.search_files(lambda: client, t).handler({"pattern": "hello"})

    lines = result_text(result).splitlines()
    assert lines == ["README.md:2: hello world", "src/app.py:2: print('hello')"]


@pytest.mark.asyncio
async def test_search_files_no_matches(client: WorkspaceClient) -> None:
    result = await search.search_files(lambda: client, t).handler({"pattern": "zzz"})

    assert result_text(result) == "No matches found."


@pytest.mark.asyncio
async def test_search_files_bad_pattern(client: WorkspaceClient) -> None:
    result = await search.search_files(lambda: client, t).handler({"pattern": "("})

    assert result.isError
    assert "Invalid pattern" in result_text(result)


@pytest.mark.asyncio
async def test_workspace_info(client: WorkspaceClient) -> None:
    result = await context.get_workspace_info(lambda: client, t).handler({})

    info = json.loads(result_text(result))
    assert info["root"] == str(client.root)
    assert info["ignore_dirs"] == [".git"]
