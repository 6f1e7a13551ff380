from clawmemory.sandbox.backend import StorageBackend, DirEntry, FileStat
from clawmemory.sandbox.local import LocalBackend
from clawmemory.sandbox.memory import InMemoryBackend
from clawmemory.sandbox.paths import PathSandbox, DEFAULT_MOUNT

__all__ = [
    "StorageBackend", "DirEntry", "FileStat",
    "LocalBackend", "InMemoryBackend",
    "PathSandbox", "DEFAULT_MOUNT",
]
