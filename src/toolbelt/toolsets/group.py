"""ToolsetGroup: the server's owning collection of toolsets.

The group is built once per process with a fixed read-only policy, filled
during startup, and afterwards only ever enables toolsets. It is passed
explicitly to whatever needs it; there is no module-level instance.
"""

from __future__ import annotations

import threading
import warnings
from collections.abc import Iterable, Iterator

from toolbelt.core.console import get_logger
from toolbelt.core.result import (
    Err,
    Ok,
    ReservedToolsetNameError,
    Result,
    ToolsetNotFoundError,
)
from toolbelt.toolsets.host import HostServer
from toolbelt.toolsets.toolset import Toolset

logger = get_logger("toolsets")

# Enabling this name switches every toolset on, including ones added later.
ALL_TOOLSETS = "all"


class ToolsetGroup:
    """Toolsets keyed by name, with a group-wide read-only policy."""

    def __init__(self, read_only: bool = False) -> None:
        self.read_only = read_only
        self._toolsets: dict[str, Toolset] = {}
        self._everything_on = False
        self._lock = threading.RLock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._toolsets)

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._toolsets

    def __iter__(self) -> Iterator[Toolset]:
        return iter(self.toolsets())

    @property
    def everything_on(self) -> bool:
        with self._lock:
            return self._everything_on

    def add_toolset(self, toolset: Toolset) -> None:
        """Add a toolset, applying the group's read-only policy first.

        A toolset with the same name is replaced.
        """
        if toolset.name == ALL_TOOLSETS:
            raise ReservedToolsetNameError(
                f"Toolset name {ALL_TOOLSETS!r} is reserved",
                context={"toolset": toolset.name},
            )
        if self.read_only:
            toolset.set_read_only()
        with self._lock:
            if toolset.name in self._toolsets:
                warnings.warn(
                    f"Duplicate toolset name '{toolset.name}'; the previous toolset "
                    "will be overwritten.",
                    RuntimeWarning,
                    stacklevel=2,
                )
            self._toolsets[toolset.name] = toolset

    def get(self, name: str) -> Toolset | None:
        with self._lock:
            return self._toolsets.get(name)

    def names(self) -> list[str]:
        with self._lock:
            return sorted(self._toolsets)

    def toolsets(self) -> list[Toolset]:
        with self._lock:
            return list(self._toolsets.values())

    def is_enabled(self, name: str) -> bool:
        """Whether ``name`` counts as enabled; unknown names are simply not enabled."""
        with self._lock:
            if self._everything_on:
                return True
            toolset = self._toolsets.get(name)
        return toolset is not None and toolset.enabled

    def enable_toolset(self, name: str) -> Result[None, ToolsetNotFoundError]:
        if name == ALL_TOOLSETS:
            with self._lock:
                self._everything_on = True
            logger.info("All toolsets enabled")
            return Ok(None)

        toolset = self.get(name)
        if toolset is None:
            return Err(ToolsetNotFoundError.for_name(name))
        if toolset.enable():
            logger.info("Enabled toolset %s", name)
        return Ok(None)

    def enable_toolsets(self, names: Iterable[str]) -> Result[None, ToolsetNotFoundError]:
        """Enable each name in order, stopping at the first unknown one.

        Toolsets enabled before the failure stay enabled.
        """
        for name in names:
            result = self.enable_toolset(name)
            if isinstance(result, Err):
                return result
        return Ok(None)

    def enable_and_publish(
        self, name: str, host: HostServer
    ) -> Result[bool, ToolsetNotFoundError]:
        """Enable a toolset on a running server.

        Returns Ok(True) when newly enabled and published, Ok(False) when it was
        already enabled.
        """
        toolset = self.get(name)
        if toolset is None:
            return Err(ToolsetNotFoundError.for_name(name))
        published = toolset.enable_and_publish(host)
        if published:
            logger.info(
                "Enabled toolset %s and published %d tools",
                name,
                len(toolset.get_active_tools()),
            )
        return Ok(published)

    def register_tools(self, host: HostServer) -> None:
        for toolset in self.toolsets():
            toolset.register_tools(host)


__all__ = ["ALL_TOOLSETS", "ToolsetGroup"]
