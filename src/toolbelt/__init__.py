"""toolbelt - MCP tool server with runtime-discoverable toolsets.

This package groups related MCP tools into toolsets that an operator enables
at startup and that a client can discover and enable mid-session.

Exports:
    __version__: Package version string.
"""

from __future__ import annotations

__all__ = ["__version__"]

__version__ = "0.3.0"
