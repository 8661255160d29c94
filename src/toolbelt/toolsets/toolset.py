"""Toolset: a named bundle of read tools, write tools and resource templates.

A toolset starts disabled and mutable. ``enable`` and ``set_read_only`` are
one-way; nothing flips them back. A read-only toolset never holds write
tools: they are dropped when the policy is set and ignored when added later,
so generic construction code never needs to know the eventual policy.

Every read and mutation goes through the toolset's lock. Enabling and
publishing to a host happen under one hold of that lock, so no reader sees
``enabled`` before the host has the tools.
"""

from __future__ import annotations

import threading
from collections.abc import Iterable
from dataclasses import dataclass, replace

from toolbelt.core.console import get_logger
from toolbelt.toolsets.capability import ResourceTemplate, ServerTool
from toolbelt.toolsets.host import HostServer

logger = get_logger("toolsets")


class Toolset:
    """A named, independently enablable group of MCP tools."""

    def __init__(self, name: str, description: str = "") -> None:
        self.name = name
        self.description = description
        self._enabled = False
        self._read_only = False
        self._read_tools: list[ServerTool] = []
        self._write_tools: list[ServerTool] = []
        self._resource_templates: list[ResourceTemplate] = []
        self._lock = threading.RLock()

    def __repr__(self) -> str:
        return (
            f"Toolset(name={self.name!r}, enabled={self.enabled}, "
            f"read_only={self.read_only})"
        )

    @property
    def enabled(self) -> bool:
        with self._lock:
            return self._enabled

    @property
    def read_only(self) -> bool:
        with self._lock:
            return self._read_only

    @property
    def read_tools(self) -> tuple[ServerTool, ...]:
        with self._lock:
            return tuple(self._read_tools)

    @property
    def write_tools(self) -> tuple[ServerTool, ...]:
        with self._lock:
            return tuple(self._write_tools)

    @property
    def resource_templates(self) -> tuple[ResourceTemplate, ...]:
        with self._lock:
            return tuple(self._resource_templates)

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    def add_read_tools(self, *tools: ServerTool) -> None:
        with self._lock:
            self._read_tools.extend(tools)

    def add_write_tools(self, *tools: ServerTool) -> None:
        """Append write tools unless the toolset is read-only.

        On a read-only toolset this is a silent no-op.
        """
        with self._lock:
            if self._read_only:
                return
            self._write_tools.extend(tools)

    def add_resource_templates(self, *templates: ResourceTemplate) -> None:
        # resource templates are read-only by nature
        with self._lock:
            self._resource_templates.extend(templates)

    def set_read_only(self) -> None:
        with self._lock:
            if self._read_only:
                return
            self._read_only = True
            if self._write_tools:
                logger.debug(
                    "Dropping %d write tools from read-only toolset %s",
                    len(self._write_tools),
                    self.name,
                )
                self._write_tools.clear()

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    def enable(self) -> bool:
        """Mark the toolset enabled. Returns False if it already was."""
        with self._lock:
            if self._enabled:
                return False
            self._enabled = True
            return True

    def _exposable_tools(self) -> list[ServerTool]:
        if self._read_only:
            return list(self._read_tools)
        return [*self._read_tools, *self._write_tools]

    def get_active_tools(self) -> list[ServerTool]:
        """Tools a client can call right now; empty while disabled."""
        with self._lock:
            if not self._enabled:
                return []
            return self._exposable_tools()

    def get_available_tools(self) -> list[ServerTool]:
        """Tools this toolset would expose, regardless of whether it is enabled."""
        with self._lock:
            return self._exposable_tools()

    # ------------------------------------------------------------------
    # Host registration
    # ------------------------------------------------------------------

    def register_tools(self, host: HostServer) -> None:
        """Register every exposable tool and resource template one by one.

        Does nothing while disabled. Calling it twice submits everything twice;
        the host decides what a repeated identifier means.
        """
        with self._lock:
            if not self._enabled:
                return
            for server_tool in self._read_tools:
                host.add_tool(server_tool.tool, server_tool.handler)
            if not self._read_only:
                for server_tool in self._write_tools:
                    host.add_tool(server_tool.tool, server_tool.handler)
            for resource in self._resource_templates:
                host.add_resource_template(resource.template, resource.handler)

    def enable_and_publish(self, host: HostServer) -> bool:
        """Enable the toolset and push its tools to a live host in one step.

        Tools go through the host's bulk primitive; resource templates follow.
        Returns False, touching nothing, when the toolset was already enabled.
        If the host rejects the tools the toolset stays disabled.
        """
        with self._lock:
            if self._enabled:
                return False
            host.add_tools(self._exposable_tools())
            for resource in self._resource_templates:
                host.add_resource_template(resource.template, resource.handler)
            self._enabled = True
            return True


@dataclass(frozen=True)
class ToolsetSpec:
    """Everything a toolset holds, gathered before the toolset exists.

    ``build`` produces a fully populated toolset in one step, so no caller
    observes a half-configured one.
    """

    name: str
    description: str = ""
    read_tools: tuple[ServerTool, ...] = ()
    write_tools: tuple[ServerTool, ...] = ()
    resource_templates: tuple[ResourceTemplate, ...] = ()

    def with_read_tools(self, tools: Iterable[ServerTool]) -> ToolsetSpec:
        return replace(self, read_tools=self.read_tools + tuple(tools))

    def with_write_tools(self, tools: Iterable[ServerTool]) -> ToolsetSpec:
        return replace(self, write_tools=self.write_tools + tuple(tools))

    def with_resource_templates(self, templates: Iterable[ResourceTemplate]) -> ToolsetSpec:
        return replace(self, resource_templates=self.resource_templates + tuple(templates))

    def build(self, *, read_only: bool = False) -> Toolset:
        toolset = Toolset(self.name, self.description)
        if read_only:
            toolset.set_read_only()
        toolset.add_resource_templates(*self.resource_templates)
        toolset.add_read_tools(*self.read_tools)
        toolset.add_write_tools(*self.write_tools)
        return toolset


__all__ = ["Toolset", "ToolsetSpec"]
