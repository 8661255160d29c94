"""MCP tools package and the toolset catalog.

Tool modules:
    - context: where the server operates
    - files: read/list/write files, file resource template
    - search: regex search across the workspace

``init_toolsets`` groups these into toolsets, adds the dynamic discovery
toolset last and enables what the operator asked for.
"""

from __future__ import annotations

from collections.abc import Iterable

from toolbelt.core.result import Err
from toolbelt.mcp import dynamic
from toolbelt.mcp.tools import context, files, search
from toolbelt.mcp.tools.workspace import GetClientFn, WorkspaceClient, client_factory
from toolbelt.toolsets.group import ALL_TOOLSETS, ToolsetGroup
from toolbelt.toolsets.host import HostServer
from toolbelt.toolsets.toolset import ToolsetSpec
from toolbelt.toolsets.translations import TranslationHelper


def toolset_specs(get_client: GetClientFn, t: TranslationHelper) -> list[ToolsetSpec]:
    """Every domain toolset the server knows about, all disabled."""
    context_spec = ToolsetSpec(
        name="context",
        description="Tools that provide context about the workspace you are operating in",
    ).with_read_tools([context.get_workspace_info(get_client, t)])

    files_spec = (
        ToolsetSpec(name="files", description="Workspace file tools")
        .with_read_tools(
            [
                files.read_file(get_client, t),
                files.list_directory(get_client, t),
            ]
        )
        .with_write_tools([files.write_file(get_client, t)])
        .with_resource_templates([files.file_resource(get_client, t)])
    )

    search_spec = ToolsetSpec(
        name="search",
        description="Workspace search tools",
    ).with_read_tools([search.search_files(get_client, t)])

    # Placeholder for unstable features; holds no tools yet
    experiments_spec = ToolsetSpec(
        name="experiments",
        description="Experimental features that are not considered stable yet",
    )

    return [context_spec, files_spec, search_spec, experiments_spec]


def init_toolsets(
    host: HostServer,
    enabled: Iterable[str],
    read_only: bool,
    get_client: GetClientFn,
    t: TranslationHelper,
) -> ToolsetGroup:
    """Build the toolset group and enable the requested toolsets.

    Raises:
        ToolsetNotFoundError: If a requested name is not a known toolset.
    """
    group = ToolsetGroup(read_only=read_only)
    for spec in toolset_specs(get_client, t):
        group.add_toolset(spec.build(read_only=read_only))

    # Added last so its enum lists the other toolsets
    discovery = ToolsetSpec(
        name=dynamic.DYNAMIC_TOOLSET,
        description=(
            "Discover tools that can help achieve tasks by enabling additional sets of tools. "
            "You can control the enablement of any toolset to access its tools when this "
            "toolset is enabled."
        ),
        read_tools=(
            dynamic.list_available_toolsets(group, t),
            dynamic.get_toolset_tools(group, t),
            dynamic.enable_toolset(host, group, t),
        ),
    )
    group.add_toolset(discovery.build(read_only=read_only))

    names = list(enabled)
    if ALL_TOOLSETS in names:
        # the override only answers queries; flip each toolset so it gets registered
        names = [*group.names(), *names]

    result = group.enable_toolsets(names)
    if isinstance(result, Err):
        raise result.error
    return group


__all__ = [
    "GetClientFn",
    "WorkspaceClient",
    "client_factory",
    "init_toolsets",
    "toolset_specs",
]
