from __future__ import annotations

import os
import sys
from collections.abc import Callable, Iterable
from pathlib import Path
from typing import Any

import pytest
from mcp import types
from rich.console import Console
from typer.testing import CliRunner

# Detect CI environment (GitHub Actions sets CI=true)
IS_CI = os.environ.get("CI", "").lower() == "true"


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "local_only: marks tests that require local environment (skip in CI)",
    )


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Skip local_only tests when running in CI."""
    if not IS_CI:
        return
    skip_ci = pytest.mark.skip(reason="Skipped in CI (requires local environment)")
    for item in items:
        if "local_only" in item.keywords:
            item.add_marker(skip_ci)


ROOT = Path(__file__).resolve().parent.parent
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from toolbelt.toolsets.capability import (  # noqa: E402
    ResourceTemplate,
    ServerTool,
    new_resource_template,
    new_server_tool,
    text_result,
)


class RecordingHost:
    """In-memory host that records every registration call."""

    def __init__(self) -> None:
        self.tools: list[ServerTool] = []
        self.templates: list[ResourceTemplate] = []
        self.bulk_calls: list[list[str]] = []
        self.notifications = 0

    def add_tool(self, tool: types.Tool, handler: Any) -> None:
        self.tools.append(ServerTool(tool=tool, handler=handler))

    def add_tools(self, tools: Iterable[ServerTool]) -> None:
        batch = list(tools)
        self.bulk_calls.append([server_tool.name for server_tool in batch])
        for server_tool in batch:
            self.add_tool(server_tool.tool, server_tool.handler)

    def add_resource_template(self, template: types.ResourceTemplate, handler: Any) -> None:
        self.templates.append(ResourceTemplate(template=template, handler=handler))

    async def notify_tools_changed(self) -> None:
        self.notifications += 1

    def tool_names(self) -> list[str]:
        return [server_tool.name for server_tool in self.tools]


MakeTool = Callable[..., ServerTool]


@pytest.fixture
def host() -> RecordingHost:
    return RecordingHost()


@pytest.fixture
def make_tool() -> MakeTool:
    """Build a tool whose handler echoes its own name."""

    def factory(name: str, description: str = "", read_only: bool = True) -> ServerTool:
        async def handler(arguments: dict[str, Any]) -> types.CallToolResult:
            return text_result(name)

        return new_server_tool(name, description or f"{name} tool", handler, read_only=read_only)

    return factory


@pytest.fixture
def make_template() -> Callable[[str], ResourceTemplate]:
    def factory(uri_template: str) -> ResourceTemplate:
        async def handler(uri: str, params: dict[str, str]) -> str:
            return uri

        return new_resource_template(uri_template, uri_template, "test template", handler)

    return factory


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture(autouse=True)
def isolate_config(tmp_path: Path, monkeypatch: Any) -> Path:
    """Point config to a temp path so tests don't touch user state."""
    cfg_path = tmp_path / "config.toml"
    monkeypatch.setenv("TOOLBELT_CONFIG", str(cfg_path))
    for key in list(os.environ):
        if key.startswith("TOOLBELT_") and key != "TOOLBELT_CONFIG":
            monkeypatch.delenv(key, raising=False)
    return cfg_path


@pytest.fixture(autouse=True)
def capture_console(monkeypatch: Any) -> Console:
    """Use an in-memory Rich console during tests."""
    test_console = Console(record=True, width=200)
    import toolbelt.core.console as core_console
    import toolbelt.main as tb_main

    monkeypatch.setattr(core_console, "console", test_console)
    monkeypatch.setattr(tb_main, "console", test_console)
    return test_console
