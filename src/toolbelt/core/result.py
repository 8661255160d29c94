"""
Result types and error hierarchy for toolbelt.

This module provides:
1. Result[T, E] type for operations with an expected failure mode
2. Domain-specific exception hierarchy

Usage:
    from toolbelt.core.result import Ok, Err, Result, ToolsetNotFoundError

    def enable(name: str) -> Result[None, ToolsetNotFoundError]:
        if name not in known:
            return Err(ToolsetNotFoundError.for_name(name))
        return Ok(None)

    match enable("repos"):
        case Ok():
            ...
        case Err(err):
            print(err.message)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")
E = TypeVar("E", bound=Exception)


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Represents a successful result containing a value."""

    value: T

    def unwrap(self) -> T:
        """Return the contained value."""
        return self.value


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """Represents a failed result containing an error."""

    error: E

    def unwrap(self) -> T:
        """Raise the contained error."""
        raise self.error


# Type alias for Result
Result = Ok[T] | Err[E]


# ---------------------------------------------------------------------------
# Domain-specific error hierarchy
# ---------------------------------------------------------------------------


class ToolbeltError(Exception):
    """Base exception for all toolbelt errors.

    All custom exceptions inherit from this class so callers can handle
    toolbelt failures in one place.
    """

    def __init__(self, message: str, *, context: dict | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            ctx_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} [{ctx_str}]"
        return self.message


class ToolsetNotFoundError(ToolbeltError):
    """Raised (or returned) when a referenced toolset name is unknown."""

    @classmethod
    def for_name(cls, name: str) -> ToolsetNotFoundError:
        return cls(f"Toolset {name} not found", context={"toolset": name})

    @property
    def toolset(self) -> str:
        return str(self.context.get("toolset", ""))


class ReservedToolsetNameError(ToolbeltError):
    """Raised when a toolset tries to claim a reserved name such as ``all``."""


class ParameterError(ToolbeltError):
    """Base class for capability input validation failures."""


class MissingParameterError(ParameterError):
    """Raised when a required capability input is absent or empty."""


class InvalidParameterError(ParameterError):
    """Raised when a capability input has the wrong type."""


class ConfigurationError(ToolbeltError):
    """Raised for configuration issues.

    Examples:
    - Config file parse errors
    - Invalid config values
    """


class WorkspaceError(ToolbeltError):
    """Raised when a workspace path escapes the root or cannot be read."""


__all__ = [
    # Result types
    "Ok",
    "Err",
    "Result",
    # Error hierarchy
    "ToolbeltError",
    "ToolsetNotFoundError",
    "ReservedToolsetNameError",
    "ParameterError",
    "MissingParameterError",
    "InvalidParameterError",
    "ConfigurationError",
    "WorkspaceError",
]
