"""Application configuration management.

Handles loading and validating configuration from multiple sources:
    - TOML/JSON config files
    - Environment variables (TOOLBELT_* prefix)
    - Default values

Key components:
    - AppConfig: Main configuration model
    - load_config(): Safe config loading with fallback
    - ConfigLoadResult: Metadata about config source
"""

from __future__ import annotations

import json
import os
import tomllib
from collections.abc import Mapping
from contextlib import nullcontext
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated, Any
from unittest.mock import patch

from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic_settings import (
    BaseSettings,
    NoDecode,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from toolbelt.core.result import ConfigurationError

CONFIG_ENV_VAR = "TOOLBELT_CONFIG"

DEFAULT_TOOLSETS: tuple[str, ...] = ("context", "files", "search", "dynamic")


def parse_toolset_names(value: Any) -> list[str]:
    """Normalize a comma-separated string or sequence into unique toolset names."""
    if value is None:
        return []
    if isinstance(value, str):
        candidates = value.split(",")
    else:
        candidates = [str(item) for item in value]

    names: list[str] = []
    for candidate in candidates:
        name = candidate.strip()
        if name and name not in names:
            names.append(name)
    return names


# -----------------------------------------------------------------------------
# Sub-configuration Models
# -----------------------------------------------------------------------------


class ServerConfig(BaseModel):
    """MCP server and toolset selection."""

    name: str = Field(default="toolbelt", description="Server name reported during initialize.")
    toolsets: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: list(DEFAULT_TOOLSETS),
        description="Toolsets enabled at startup. The name 'all' enables every toolset.",
    )
    read_only: bool = Field(
        default=False, description="Expose only read tools, for every toolset."
    )
    log_level: str = Field(default="INFO", description="Log level for server output.")
    description_overrides: dict[str, str] = Field(
        default_factory=dict,
        description="Replacement text for tool descriptions, keyed by translation key.",
    )

    @field_validator("toolsets", mode="before")
    @classmethod
    def split_toolsets(cls, v: Any) -> list[str]:
        return parse_toolset_names(v)


class WorkspaceConfig(BaseModel):
    """Workspace exposed to the domain tools."""

    root: Path = Field(default_factory=Path.cwd, description="Workspace root directory.")
    max_file_chars: int = Field(
        default=50000, gt=0, description="Maximum characters returned when reading a file."
    )
    ignore_dirs: list[str] = Field(
        default_factory=lambda: [".git", "node_modules", ".venv", "__pycache__"],
        description="Directory names skipped when searching.",
    )


@dataclass
class ConfigLoadResult:
    path: Path
    file_loaded: bool
    env_overrides: set[str]
    error: str | None = None


class AppConfig(BaseSettings):
    """Application-wide configuration with nested sub-configs."""

    model_config = SettingsConfigDict(
        env_prefix="TOOLBELT_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    server: ServerConfig = Field(default_factory=ServerConfig)
    workspace: WorkspaceConfig = Field(default_factory=WorkspaceConfig, validate_default=True)

    @field_validator("workspace", mode="after")
    @classmethod
    def resolve_workspace_root(cls, v: WorkspaceConfig) -> WorkspaceConfig:
        v.root = v.root.expanduser().resolve()
        return v

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[
        PydanticBaseSettingsSource,
        PydanticBaseSettingsSource,
        PydanticBaseSettingsSource,
        PydanticBaseSettingsSource,
    ]:
        # Ensure environment variables override config file entries.
        return (env_settings, init_settings, dotenv_settings, file_secret_settings)


def _resolve_config_path(config_path: Path | None, env_vars: Mapping[str, str]) -> Path:
    candidate = config_path or env_vars.get(CONFIG_ENV_VAR) or (Path.home() / ".toolbelt.toml")
    return Path(candidate).expanduser()


def _read_config_file(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}

    raw = path.read_text(encoding="utf-8")
    suffix = path.suffix.lower()
    parser = json.loads if suffix == ".json" else tomllib.loads

    try:
        data = parser(raw)
    except (json.JSONDecodeError, tomllib.TOMLDecodeError) as exc:
        raise ConfigurationError(f"Syntax error in {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigurationError(f"Config root in {path} must be a mapping.")

    return data


def _detect_env_overrides(env_vars: Mapping[str, str]) -> set[str]:
    """Detect which fields are overridden by environment variables.

    For nested models, detects vars like TOOLBELT_SERVER__READ_ONLY.
    """
    prefix = AppConfig.model_config.get("env_prefix", "")
    delimiter = AppConfig.model_config.get("env_nested_delimiter", "__")
    overrides: set[str] = set()

    nested_models: dict[str, type[BaseModel]] = {
        "server": ServerConfig,
        "workspace": WorkspaceConfig,
    }

    for group_name, model_cls in nested_models.items():
        for field in model_cls.model_fields:
            env_key = f"{prefix}{group_name}{delimiter}{field}".upper()
            if env_key in env_vars:
                overrides.add(f"{group_name}.{field}")

    return overrides


def load_config(
    config_path: Path | None = None,
    env: Mapping[str, str] | None = None,
) -> tuple[AppConfig, ConfigLoadResult]:
    """
    Load configuration with Safe Mode fallback.
    If the file is invalid, returns default config + error message.
    """
    env_vars: Mapping[str, str] = os.environ if env is None else {**os.environ, **env}
    resolved_path = _resolve_config_path(config_path, env_vars)
    env_overrides = _detect_env_overrides(env_vars)

    error: str | None = None
    file_loaded = False
    file_data: dict[str, Any] = {}

    try:
        file_data = _read_config_file(resolved_path)
        file_loaded = resolved_path.exists()
    except ConfigurationError as exc:
        error = str(exc)

    context_manager = (
        patch.dict(os.environ, env_vars, clear=False) if env is not None else nullcontext()
    )

    try:
        with context_manager:
            config = AppConfig(**file_data)
    except ValidationError as exc:
        error = str(exc)
        config = AppConfig()

    load_result = ConfigLoadResult(
        path=resolved_path,
        file_loaded=file_loaded,
        env_overrides=env_overrides,
        error=error,
    )

    return config, load_result
