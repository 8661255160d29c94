"""Workspace client handed to the domain tools.

The client factory is the only way a tool reaches the filesystem. Every path
is resolved against the workspace root and rejected if it escapes it.
"""

from __future__ import annotations

import asyncio
import os
import re
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from toolbelt.core.config import AppConfig
from toolbelt.core.result import Err, Ok, Result, WorkspaceError


@dataclass(frozen=True)
class SearchMatch:
    path: str
    line_number: int
    line: str

    def format(self) -> str:
        return f"{self.path}:{self.line_number}: {self.line}"


@dataclass
class WorkspaceClient:
    root: Path
    max_file_chars: int = 50000
    ignore_dirs: frozenset[str] = field(default_factory=frozenset)

    def resolve(self, path: str) -> Result[Path, WorkspaceError]:
        base = Path(path).expanduser()
        candidate = base if base.is_absolute() else self.root / base
        resolved = candidate.resolve()
        if not resolved.is_relative_to(self.root):
            return Err(
                WorkspaceError(
                    f"Path {path} escapes workspace {self.root}", context={"path": path}
                )
            )
        return Ok(resolved)

    def relative(self, path: Path) -> str:
        return path.relative_to(self.root).as_posix() or "."

    async def read_text(self, path: str) -> str:
        target = self.resolve(path).unwrap()
        if not target.exists():
            raise FileNotFoundError(2, "No such file", str(target))
        if target.is_dir():
            raise IsADirectoryError(21, "Is a directory", str(target))

        def _read() -> str:
            with target.open("r", encoding="utf-8", errors="replace") as fh:
                return fh.read(self.max_file_chars + 1)

        content = await asyncio.to_thread(_read)
        if len(content) > self.max_file_chars:
            content = content[: self.max_file_chars]
            content += f"\n\n[truncated at {self.max_file_chars} chars]"
        return content

    async def list_dir(self, path: str = ".") -> list[str]:
        target = self.resolve(path).unwrap()
        if not target.is_dir():
            raise NotADirectoryError(20, "Not a directory", str(target))

        def _ls() -> list[str]:
            entries = []
            with os.scandir(target) as it:
                for entry in it:
                    prefix = "d" if entry.is_dir() else "f"
                    entries.append(f"{prefix}: {entry.name}")
            return sorted(entries)

        return await asyncio.to_thread(_ls)

    async def write_text(self, path: str, content: str, overwrite: bool = False) -> Path:
        target = self.resolve(path).unwrap()
        if target.exists() and not overwrite:
            raise FileExistsError(17, "File exists; pass overwrite=true to replace it", str(target))

        def _write() -> None:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding="utf-8")

        await asyncio.to_thread(_write)
        return target

    async def search(self, pattern: str, path: str = ".", limit: int = 100) -> list[SearchMatch]:
        target = self.resolve(path).unwrap()
        regex = re.compile(pattern)

        def _walk() -> list[SearchMatch]:
            matches: list[SearchMatch] = []
            for dirpath, dirnames, filenames in os.walk(target):
                dirnames[:] = sorted(d for d in dirnames if d not in self.ignore_dirs)
                for filename in sorted(filenames):
                    file_path = Path(dirpath) / filename
                    try:
                        lines = file_path.read_text(encoding="utf-8").splitlines()
                    except (UnicodeDecodeError, OSError):
                        continue
                    for number, line in enumerate(lines, start=1):
                        if regex.search(line):
                            matches.append(
                                SearchMatch(self.relative(file_path), number, line.strip())
                            )
                            if len(matches) >= limit:
                                return matches
            return matches

        return await asyncio.to_thread(_walk)


GetClientFn = Callable[[], WorkspaceClient]


def client_factory(config: AppConfig) -> GetClientFn:
    """Return a factory producing clients bound to the configured workspace."""
    client = WorkspaceClient(
        root=config.workspace.root,
        max_file_chars=config.workspace.max_file_chars,
        ignore_dirs=frozenset(config.workspace.ignore_dirs),
    )

    def get_client() -> WorkspaceClient:
        return client

    return get_client
