"""PathSandbox — maps logical ``/memories/...`` paths onto the storage root.

Nothing a caller passes in can address storage outside the root: the mount
prefix is mandatory, any ``..`` segment (literal or percent-encoded) is
rejected outright, and the joined path is re-checked after symlink
resolution.
"""

from __future__ import annotations

import posixpath
from urllib.parse import unquote

from clawmemory.memory.errors import InvalidPathError, PathTraversalError
from clawmemory.sandbox.backend import StorageBackend

DEFAULT_MOUNT = "/memories"

# Enough to unwrap %252e%252e-style nesting without looping forever.
_MAX_DECODE_ROUNDS = 8


def _fully_unquote(value: str) -> str:
    for _ in range(_MAX_DECODE_ROUNDS):
        decoded = unquote(value)
        if decoded == value:
            return decoded
        value = decoded
    return value


class PathSandbox:
    def __init__(self, storage: StorageBackend, mount: str = DEFAULT_MOUNT):
        mount = "/" + mount.strip("/")
        if mount == "/":
            raise ValueError("mount prefix must name a directory, not '/'")
        self._storage = storage
        self._mount = mount
        self._real_root = storage.real_path(storage.root)

    @property
    def mount(self) -> str:
        return self._mount

    @property
    def root(self) -> str:
        return self._storage.root

    def has_mount_prefix(self, logical_path: str) -> bool:
        return logical_path == self._mount or logical_path.startswith(self._mount + "/")

    def is_root(self, storage_path: str) -> bool:
        return self._storage.real_path(storage_path) == self._real_root

    def resolve(self, logical_path: str) -> str:
        """Return the storage path for ``logical_path`` or raise."""
        if not isinstance(logical_path, str) or not self.has_mount_prefix(logical_path):
            raise InvalidPathError(f"Path must start with {self._mount}", path=str(logical_path))
        if "\x00" in logical_path:
            raise InvalidPathError("Path contains a NUL byte", path=logical_path)

        decoded = _fully_unquote(logical_path).replace("\\", "/")
        if "\x00" in decoded:
            raise InvalidPathError("Path contains a NUL byte", path=logical_path)
        if ".." in decoded.split("/"):
            raise PathTraversalError("Path traversal not allowed", path=logical_path)

        # storage names come from the raw path; the decoded form is only checked
        normalized = posixpath.normpath(logical_path)
        if not self.has_mount_prefix(normalized):
            raise InvalidPathError(f"Path must start with {self._mount}", path=logical_path)

        relative = normalized[len(self._mount):].lstrip("/")
        joined = self._storage.join(self._storage.root, relative) if relative else self._storage.root

        real = self._storage.real_path(joined)
        if not self._storage.is_within(real, self._real_root):
            raise PathTraversalError("Path escapes the memory root", path=logical_path)
        return joined
