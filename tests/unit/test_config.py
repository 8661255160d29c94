from __future__ import annotations

import json
from pathlib import Path

import pytest

from toolbelt.core.config import DEFAULT_TOOLSETS, load_config, parse_toolset_names


def test_defaults_when_no_file(isolate_config: Path) -> None:
    config, meta = load_config()

    assert meta.path == isolate_config
    assert meta.file_loaded is False
    assert meta.error is None
    assert config.server.toolsets == list(DEFAULT_TOOLSETS)
    assert config.server.read_only is False
    assert config.workspace.root == Path.cwd().resolve()


def test_toml_file_is_loaded(isolate_config: Path, tmp_path: Path) -> None:
    isolate_config.write_text(
        "[server]\n"
        'toolsets = ["files", "dynamic"]\n'
        "read_only = true\n"
        "[server.description_overrides]\n"
        'TOOL_READ_FILE_DESCRIPTION = "Read it"\n'
        "[workspace]\n"
        f'root = "{tmp_path.as_posix()}"\n',
        encoding="utf-8",
    )

    config, meta = load_config()

    assert meta.file_loaded is True
    assert meta.error is None
    assert config.server.toolsets == ["files", "dynamic"]
    assert config.server.read_only is True
    assert config.server.description_overrides == {"TOOL_READ_FILE_DESCRIPTION": "Read it"}
    assert config.workspace.root == tmp_path.resolve()


def test_json_file_is_loaded(tmp_path: Path) -> None:
    path = tmp_path / "toolbelt.json"
    path.write_text(json.dumps({"server": {"toolsets": "search, context"}}), encoding="utf-8")

    config, meta = load_config(config_path=path)

    assert meta.file_loaded is True
    assert config.server.toolsets == ["search", "context"]


def test_syntax_error_falls_back_to_defaults(isolate_config: Path) -> None:
    isolate_config.write_text("[server\ntoolsets = ", encoding="utf-8")

    config, meta = load_config()

    assert meta.error is not None
    assert "Syntax error" in meta.error
    assert config.server.toolsets == list(DEFAULT_TOOLSETS)


def test_env_overrides_file(isolate_config: Path) -> None:
    isolate_config.write_text("[server]\nread_only = false\n", encoding="utf-8")

    config, meta = load_config(
        env={"TOOLBELT_SERVER__READ_ONLY": "true", "TOOLBELT_SERVER__TOOLSETS": "files,search"}
    )

    assert config.server.read_only is True
    assert config.server.toolsets == ["files", "search"]
    assert meta.env_overrides == {"server.read_only", "server.toolsets"}


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("files, search ,files", ["files", "search"]),
        (["all", " dynamic "], ["all", "dynamic"]),
        ("", []),
        (None, []),
    ],
)
def test_parse_toolset_names(raw: object, expected: list[str]) -> None:
    assert parse_toolset_names(raw) == expected
