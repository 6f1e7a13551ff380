"""StorageBackend — the storage contract the memory executor runs on.

Implementations:
    LocalBackend    — thin wrapper over pathlib/os/shutil   (production)
    InMemoryBackend — pure in-process tree                  (testing)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@dataclass(frozen=True)
class DirEntry:
    name: str
    is_directory: bool
    is_file: bool


@dataclass(frozen=True)
class FileStat:
    is_file: bool
    is_directory: bool
    size: int
    mtime_ms: float


@runtime_checkable
class StorageBackend(Protocol):
    """Minimal contract that all storage backends must implement."""

    @property
    def kind(self) -> str: ...

    @property
    def root(self) -> str: ...

    # ── Path helpers (pure, no I/O) ─────────────────────────────────

    def join(self, *segments: str) -> str: ...
    def dirname(self, path: str) -> str: ...
    def real_path(self, path: str) -> str: ...
    def is_within(self, path: str, root: str) -> bool: ...

    # ── File I/O ────────────────────────────────────────────────────

    async def read_file(self, path: str) -> str: ...
    async def write_file(self, path: str, content: str) -> None: ...

    # ── Directory operations ────────────────────────────────────────

    async def read_dir(self, path: str) -> list[DirEntry]: ...
    async def mkdir(self, path: str, recursive: bool = False) -> None: ...

    # ── Mutation ────────────────────────────────────────────────────

    async def remove(self, path: str, recursive: bool = False) -> None: ...
    async def rename(self, src: str, dst: str) -> None: ...

    # ── Metadata ────────────────────────────────────────────────────

    async def exists(self, path: str) -> bool: ...
    async def stat(self, path: str) -> FileStat: ...
