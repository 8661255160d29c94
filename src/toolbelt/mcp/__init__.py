from __future__ import annotations

import asyncio
import functools
import json
from pathlib import Path
from typing import Any

from mcp import types

from toolbelt.core.console import get_logger
from toolbelt.core.result import ParameterError, WorkspaceError
from toolbelt.toolsets.capability import ToolHandler, error_result

logger = get_logger("mcp")


def _extract_error_path(exc: BaseException, arguments: dict[str, Any]) -> str:
    candidate: str | Path | None = None

    if isinstance(exc, OSError):
        filename = getattr(exc, "filename", None) or getattr(exc, "filename2", None)
        if filename:
            candidate = filename

    if candidate is None:
        maybe_path = arguments.get("path")
        if isinstance(maybe_path, (str, Path)):
            candidate = maybe_path

    return str(candidate) if candidate is not None else ""


def _format_error(error_code: str, message: str, path: str) -> types.CallToolResult:
    payload = {"error": error_code, "message": message, "path": path}
    return error_result(json.dumps(payload))


def capability_error_handler(fn: ToolHandler) -> ToolHandler:
    """Decorate a tool handler so failures become error results.

    Args:
        fn: Asynchronous tool handler to wrap.

    Returns:
        Handler that reports errors to the client while logging unexpected failures.
    """

    @functools.wraps(fn)
    async def wrapper(arguments: dict[str, Any]) -> types.CallToolResult:
        try:
            return await fn(arguments)
        except asyncio.CancelledError:
            raise
        except ParameterError as exc:
            return error_result(exc.message)
        except WorkspaceError as exc:
            return _format_error("WorkspaceError", exc.message, _extract_error_path(exc, arguments))
        except FileNotFoundError as exc:
            return _format_error("FileNotFound", str(exc), _extract_error_path(exc, arguments))
        except PermissionError as exc:
            return _format_error(
                "PermissionDenied", str(exc), _extract_error_path(exc, arguments)
            )
        except IsADirectoryError as exc:
            return _format_error("IsADirectory", str(exc), _extract_error_path(exc, arguments))
        except OSError as exc:
            return _format_error(
                type(exc).__name__, exc.strerror or str(exc), _extract_error_path(exc, arguments)
            )
        except Exception as exc:
            logger.exception("Unhandled error in tool %s", fn.__name__)
            return _format_error(
                "UnexpectedError",
                f"Unexpected error: {exc}",
                _extract_error_path(exc, arguments),
            )

    wrapper.__capability_error_handler__ = True  # type: ignore[attr-defined]  # custom marker attr
    return wrapper


__all__ = [
    "capability_error_handler",
    "logger",
]
