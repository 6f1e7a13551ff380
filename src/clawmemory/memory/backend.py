"""MemoryBackend — executes memory commands against a sandboxed storage root.

    backend = MemoryBackend("./memories")
    await backend.execute(Create(path="/memories/notes.txt", file_text="hi"))
    await backend.execute(View(path="/memories/notes.txt"))   # "1→hi"

Every command validates its path(s) through ``PathSandbox`` before touching
storage, holds a per-path lock for its whole read-modify-write cycle, and
surfaces any failure as ``MemoryOperationFailed``.
"""

from __future__ import annotations

from typing import Optional, Tuple, assert_never

from clawmemory.logging.diagnostic import log_command, log_command_failed
from clawmemory.memory.commands import (
    Create,
    Delete,
    InsertLine,
    MemoryCommand,
    Rename,
    ReplaceText,
    View,
)
from clawmemory.memory.errors import (
    AlreadyExistsError,
    InvalidLineError,
    InvalidPathError,
    InvalidRangeError,
    MemoryOperationFailed,
    NotFoundError,
    StorageIOError,
    TextNotFoundError,
)
from clawmemory.process.path_locks import PathLockTable
from clawmemory.sandbox.backend import FileStat, StorageBackend
from clawmemory.sandbox.local import LocalBackend
from clawmemory.sandbox.paths import DEFAULT_MOUNT, PathSandbox

LINE_SEPARATOR = "→"


class MemoryBackend:
    def __init__(
        self,
        root: str = "./memories",
        mount: str = DEFAULT_MOUNT,
        storage: Optional[StorageBackend] = None,
        lock_warn_after_ms: int = 2000,
    ):
        self._storage = storage if storage is not None else LocalBackend(root)
        self._sandbox = PathSandbox(self._storage, mount)
        self._locks = PathLockTable(warn_after_ms=lock_warn_after_ms)

    @property
    def root(self) -> str:
        return self._storage.root

    @property
    def mount(self) -> str:
        return self._sandbox.mount

    @property
    def storage(self) -> StorageBackend:
        return self._storage

    async def execute(self, command: MemoryCommand) -> str:
        try:
            return await self._dispatch(command)
        except Exception as err:
            failure = MemoryOperationFailed.wrap(err)
            log_command_failed(getattr(command, "command", "?"), failure.kind.value, failure.reason)
            raise failure from err

    async def _dispatch(self, command: MemoryCommand) -> str:
        if isinstance(command, View):
            return await self._view(command)
        if isinstance(command, Create):
            return await self._create(command)
        if isinstance(command, ReplaceText):
            return await self._replace_text(command)
        if isinstance(command, InsertLine):
            return await self._insert_line(command)
        if isinstance(command, Delete):
            return await self._delete(command)
        if isinstance(command, Rename):
            return await self._rename(command)
        assert_never(command)

    # ── Commands ────────────────────────────────────────────────────

    async def _view(self, cmd: View) -> str:
        full_path = self._sandbox.resolve(cmd.path)
        log_command(cmd.command, cmd.path)
        async with self._locks.hold(full_path):
            stat = await self._stat(full_path, cmd.path)
            if stat.is_directory:
                return await self._list_directory(full_path)
            content = await self._storage.read_file(full_path)
            return self._number_lines(content, cmd.view_range, cmd.path)

    async def _create(self, cmd: Create) -> str:
        full_path = self._sandbox.resolve(cmd.path)
        log_command(cmd.command, cmd.path)
        async with self._locks.hold(full_path):
            try:
                parent = self._storage.dirname(full_path)
                if not await self._storage.exists(parent):
                    await self._storage.mkdir(parent, recursive=True)
                await self._storage.write_file(full_path, cmd.file_text)
            except OSError as err:
                raise StorageIOError(f"Could not write {cmd.path}: {err}", path=cmd.path) from err
        return f"File created: {cmd.path}"

    async def _replace_text(self, cmd: ReplaceText) -> str:
        full_path = self._sandbox.resolve(cmd.path)
        log_command(cmd.command, cmd.path)
        async with self._locks.hold(full_path):
            content = await self._read_existing_file(full_path, cmd.path)
            if not cmd.old_str or cmd.old_str not in content:
                raise TextNotFoundError("String not found in file", path=cmd.path)
            await self._storage.write_file(full_path, content.replace(cmd.old_str, cmd.new_str, 1))
        return f"Text replaced in {cmd.path}"

    async def _insert_line(self, cmd: InsertLine) -> str:
        full_path = self._sandbox.resolve(cmd.path)
        log_command(cmd.command, cmd.path)
        async with self._locks.hold(full_path):
            content = await self._read_existing_file(full_path, cmd.path)
            lines = content.split("\n")
            if not 1 <= cmd.insert_line <= len(lines) + 1:
                raise InvalidLineError(
                    f"Line {cmd.insert_line} is out of range (valid: 1-{len(lines) + 1})",
                    path=cmd.path,
                    detail={"line": cmd.insert_line, "line_count": len(lines)},
                )
            lines.insert(cmd.insert_line - 1, cmd.insert_text.rstrip())
            await self._storage.write_file(full_path, "\n".join(lines))
        return f"Text inserted at line {cmd.insert_line} in {cmd.path}"

    async def _delete(self, cmd: Delete) -> str:
        full_path = self._sandbox.resolve(cmd.path)
        if self._sandbox.is_root(full_path):
            raise InvalidPathError(f"Cannot delete the memory root {self.mount}", path=cmd.path)
        log_command(cmd.command, cmd.path)
        async with self._locks.hold(full_path):
            stat = await self._stat(full_path, cmd.path)
            await self._storage.remove(full_path, recursive=stat.is_directory)
        return f"Deleted: {cmd.path}"

    async def _rename(self, cmd: Rename) -> str:
        old_path = self._sandbox.resolve(cmd.old_path)
        new_path = self._sandbox.resolve(cmd.new_path)
        if self._sandbox.is_root(old_path) or self._sandbox.is_root(new_path):
            raise InvalidPathError(f"Cannot rename the memory root {self.mount}", path=cmd.old_path)
        log_command(cmd.command, f"{cmd.old_path} -> {cmd.new_path}")
        async with self._locks.hold(old_path, new_path):
            if not await self._storage.exists(old_path):
                raise NotFoundError(f"Path not found: {cmd.old_path}", path=cmd.old_path)
            if await self._storage.exists(new_path):
                raise AlreadyExistsError(f"Destination already exists: {cmd.new_path}", path=cmd.new_path)
            try:
                parent = self._storage.dirname(new_path)
                if not await self._storage.exists(parent):
                    await self._storage.mkdir(parent, recursive=True)
                await self._storage.rename(old_path, new_path)
            except OSError as err:
                raise StorageIOError(f"Could not rename {cmd.old_path}: {err}", path=cmd.old_path) from err
        return f"Renamed {cmd.old_path} to {cmd.new_path}"

    # ── Helpers ─────────────────────────────────────────────────────

    async def _stat(self, full_path: str, logical_path: str) -> FileStat:
        try:
            return await self._storage.stat(full_path)
        except FileNotFoundError as err:
            raise NotFoundError(f"Path not found: {logical_path}", path=logical_path) from err

    async def _read_existing_file(self, full_path: str, logical_path: str) -> str:
        stat = await self._stat(full_path, logical_path)
        if not stat.is_file:
            raise NotFoundError(f"Not a file: {logical_path}", path=logical_path)
        return await self._storage.read_file(full_path)

    async def _list_directory(self, full_path: str) -> str:
        entries = await self._storage.read_dir(full_path)
        lines = [f"{'[DIR]' if e.is_directory else '[FILE]'} {e.name}" for e in entries]
        return "\n".join(lines) or "(empty directory)"

    @staticmethod
    def _number_lines(content: str, view_range: Optional[Tuple[int, int]], logical_path: str) -> str:
        lines = content.split("\n")
        start, end = view_range if view_range is not None else (1, len(lines))
        if start < 1 or end < start or end > len(lines):
            raise InvalidRangeError(
                f"Invalid view_range [{start}, {end}] for a file with {len(lines)} lines",
                path=logical_path,
                detail={"view_range": [start, end], "line_count": len(lines)},
            )
        return "\n".join(
            f"{start + idx}{LINE_SEPARATOR}{line}"
            for idx, line in enumerate(lines[start - 1:end])
        )
