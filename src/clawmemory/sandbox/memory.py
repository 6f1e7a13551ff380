"""InMemoryBackend — pure in-process storage tree.

Designed for fast, deterministic tests of the memory executor without
touching the real filesystem. No temp directories, no cleanup.

Usage:
    mem = InMemoryBackend("/sandbox")
    mem.seed({"notes.txt": "hello"})
    backend = MemoryBackend(storage=mem)
"""

from __future__ import annotations

import time
from pathlib import PurePosixPath

from clawmemory.sandbox.backend import DirEntry, FileStat


class _Node:
    __slots__ = ("kind", "content", "mtime_ms")

    def __init__(self, kind: str, content: str | None = None):
        self.kind = kind
        self.content = content
        self.mtime_ms = time.time() * 1000


class InMemoryBackend:
    kind = "memory"

    def __init__(self, root: str = "/sandbox"):
        self._root = self._normalize(root)
        self._nodes: dict[str, _Node] = {}
        self._ensure_dirs(self._root)

    @property
    def root(self) -> str:
        return self._root

    def seed(self, files: dict[str, str]) -> None:
        """Pre-populate the tree. Keys are paths relative to root."""
        for rel_path, content in files.items():
            abs_path = self.join(self._root, rel_path)
            self._ensure_dirs(self.dirname(abs_path))
            self._nodes[abs_path] = _Node(kind="file", content=content)

    def snapshot(self) -> dict[str, str]:
        """Return all files as {path relative to root: content}."""
        prefix = self._root.rstrip("/") + "/"
        return {
            path[len(prefix):]: node.content or ""
            for path, node in self._nodes.items()
            if node.kind == "file" and path.startswith(prefix)
        }

    # ── Path helpers ────────────────────────────────────────────────

    def join(self, *segments: str) -> str:
        return self._normalize("/".join(segments))

    def dirname(self, path: str) -> str:
        n = self._normalize(path)
        idx = n.rfind("/")
        return n[:idx] if idx > 0 else "/"

    def real_path(self, path: str) -> str:
        return self._normalize(path)

    def is_within(self, path: str, root: str) -> bool:
        return PurePosixPath(path).is_relative_to(root)

    # ── File I/O ────────────────────────────────────────────────────

    async def read_file(self, path: str) -> str:
        node = self._nodes.get(self._normalize(path))
        if node is None:
            raise FileNotFoundError(f"No such file: {path}")
        if node.kind != "file":
            raise IsADirectoryError(f"Is a directory: {path}")
        return node.content or ""

    async def write_file(self, path: str, content: str) -> None:
        n = self._normalize(path)
        existing = self._nodes.get(n)
        if existing is not None and existing.kind == "dir":
            raise IsADirectoryError(f"Is a directory: {path}")
        parent = self._nodes.get(self.dirname(n))
        if parent is None or parent.kind != "dir":
            raise FileNotFoundError(f"Parent not found: {self.dirname(n)}")
        self._nodes[n] = _Node(kind="file", content=content)

    # ── Directory operations ────────────────────────────────────────

    async def read_dir(self, path: str) -> list[DirEntry]:
        n = self._normalize(path)
        node = self._nodes.get(n)
        if node is None:
            raise FileNotFoundError(f"No such directory: {path}")
        if node.kind != "dir":
            raise NotADirectoryError(f"Not a directory: {path}")

        entries: list[DirEntry] = []
        for key, child in self._nodes.items():
            if self.dirname(key) == n and key != n:
                name = key[key.rfind("/") + 1:]
                entries.append(DirEntry(
                    name=name,
                    is_directory=child.kind == "dir",
                    is_file=child.kind == "file",
                ))
        return entries

    async def mkdir(self, path: str, recursive: bool = False) -> None:
        n = self._normalize(path)
        existing = self._nodes.get(n)
        if existing is not None:
            if existing.kind != "dir":
                raise FileExistsError(f"File exists: {path}")
            return
        if recursive:
            self._ensure_dirs(n)
            return
        parent = self._nodes.get(self.dirname(n))
        if parent is None or parent.kind != "dir":
            raise FileNotFoundError(f"Parent not found: {self.dirname(n)}")
        self._nodes[n] = _Node(kind="dir")

    # ── Mutation ────────────────────────────────────────────────────

    async def remove(self, path: str, recursive: bool = False) -> None:
        n = self._normalize(path)
        node = self._nodes.get(n)
        if node is None:
            raise FileNotFoundError(f"No such file or directory: {path}")
        descendants = [k for k in self._nodes if k.startswith(n + "/")]
        if descendants and not recursive:
            raise OSError(f"Directory not empty: {path}")
        for key in descendants:
            del self._nodes[key]
        del self._nodes[n]

    async def rename(self, src: str, dst: str) -> None:
        s = self._normalize(src)
        d = self._normalize(dst)
        if s not in self._nodes:
            raise FileNotFoundError(f"No such file or directory: {src}")
        parent = self._nodes.get(self.dirname(d))
        if parent is None or parent.kind != "dir":
            raise FileNotFoundError(f"Parent not found: {self.dirname(d)}")
        if d.startswith(s + "/"):
            raise OSError(f"Cannot move {src} into itself")

        moved: dict[str, _Node] = {}
        for key, node in self._nodes.items():
            if key == s:
                moved[d] = node
            elif key.startswith(s + "/"):
                moved[d + key[len(s):]] = node
            else:
                moved[key] = node
        self._nodes = moved

    # ── Metadata ────────────────────────────────────────────────────

    async def exists(self, path: str) -> bool:
        return self._normalize(path) in self._nodes

    async def stat(self, path: str) -> FileStat:
        node = self._nodes.get(self._normalize(path))
        if node is None:
            raise FileNotFoundError(f"No such file or directory: {path}")
        return FileStat(
            is_file=node.kind == "file",
            is_directory=node.kind == "dir",
            size=len(node.content or ""),
            mtime_ms=node.mtime_ms,
        )

    # ── Internal ────────────────────────────────────────────────────

    def _normalize(self, p: str) -> str:
        parts = p.replace("\\", "/").split("/")
        stack: list[str] = []
        for part in parts:
            if part == "..":
                if stack:
                    stack.pop()
            elif part and part != ".":
                stack.append(part)
        return "/" + "/".join(stack)

    def _ensure_dirs(self, abs_path: str) -> None:
        current = ""
        for part in abs_path.split("/"):
            if not part:
                continue
            current += "/" + part
            node = self._nodes.get(current)
            if node is None:
                self._nodes[current] = _Node(kind="dir")
            elif node.kind != "dir":
                raise NotADirectoryError(f"Not a directory: {current}")
