"""LocalBackend — StorageBackend backed by the real filesystem."""

from __future__ import annotations

import os
import shutil
from pathlib import Path

from clawmemory.sandbox.backend import DirEntry, FileStat


class LocalBackend:
    kind = "local"

    def __init__(self, root: str = "./memories"):
        root_path = Path(root).resolve()
        root_path.mkdir(parents=True, exist_ok=True)
        self._root = str(root_path)

    @property
    def root(self) -> str:
        return self._root

    # ── Path helpers ────────────────────────────────────────────────

    def join(self, *segments: str) -> str:
        return os.path.join(*segments)

    def dirname(self, path: str) -> str:
        return str(Path(path).parent)

    def real_path(self, path: str) -> str:
        return os.path.realpath(path)

    def is_within(self, path: str, root: str) -> bool:
        return Path(path).is_relative_to(root)

    # ── File I/O ────────────────────────────────────────────────────

    async def read_file(self, path: str) -> str:
        # newline="" keeps \r\n and \r as stored
        with open(path, encoding="utf-8", newline="") as f:
            return f.read()

    async def write_file(self, path: str, content: str) -> None:
        Path(path).write_text(content, "utf-8", newline="")

    # ── Directory operations ────────────────────────────────────────

    async def read_dir(self, path: str) -> list[DirEntry]:
        # scandir order, no sorting
        with os.scandir(path) as it:
            return [
                DirEntry(name=e.name, is_directory=e.is_dir(), is_file=e.is_file())
                for e in it
            ]

    async def mkdir(self, path: str, recursive: bool = False) -> None:
        Path(path).mkdir(parents=recursive, exist_ok=True)

    # ── Mutation ────────────────────────────────────────────────────

    async def remove(self, path: str, recursive: bool = False) -> None:
        p = Path(path)
        if p.is_dir():
            if recursive:
                shutil.rmtree(p)
            else:
                p.rmdir()
        else:
            p.unlink()

    async def rename(self, src: str, dst: str) -> None:
        Path(src).rename(dst)

    # ── Metadata ────────────────────────────────────────────────────

    async def exists(self, path: str) -> bool:
        return Path(path).exists()

    async def stat(self, path: str) -> FileStat:
        p = Path(path)
        s = p.stat()
        return FileStat(
            is_file=p.is_file(),
            is_directory=p.is_dir(),
            size=s.st_size,
            mtime_ms=s.st_mtime * 1000,
        )
