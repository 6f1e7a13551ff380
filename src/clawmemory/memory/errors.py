"""Memory Errors — structured failures raised by the sandbox and executor.

Every lower-level failure is a ``MemoryToolError`` subclass carrying an
``ErrorKind`` plus the offending path and detail. ``MemoryBackend.execute``
re-raises all of them as a single ``MemoryOperationFailed``.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional


class ErrorKind(str, Enum):
    InvalidPath = "invalid_path"
    PathTraversal = "path_traversal"
    NotFound = "not_found"
    TextNotFound = "text_not_found"
    InvalidRange = "invalid_range"
    InvalidLine = "invalid_line"
    AlreadyExists = "already_exists"
    IOError = "io_error"
    UnknownCommand = "unknown_command"


class MemoryToolError(Exception):
    kind: ErrorKind = ErrorKind.IOError

    def __init__(self, message: str, path: Optional[str] = None, detail: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.path = path
        self.detail = detail or {}


class InvalidPathError(MemoryToolError):
    kind = ErrorKind.InvalidPath


class PathTraversalError(MemoryToolError):
    kind = ErrorKind.PathTraversal


class NotFoundError(MemoryToolError):
    kind = ErrorKind.NotFound


class TextNotFoundError(MemoryToolError):
    kind = ErrorKind.TextNotFound


class InvalidRangeError(MemoryToolError):
    kind = ErrorKind.InvalidRange


class InvalidLineError(MemoryToolError):
    kind = ErrorKind.InvalidLine


class AlreadyExistsError(MemoryToolError):
    kind = ErrorKind.AlreadyExists


class StorageIOError(MemoryToolError):
    kind = ErrorKind.IOError


class UnknownCommandError(MemoryToolError):
    kind = ErrorKind.UnknownCommand


class MemoryOperationFailed(Exception):
    """Umbrella failure for any command. The original error is ``__cause__``."""

    def __init__(self, kind: ErrorKind, message: str, path: Optional[str] = None, detail: Optional[Dict[str, Any]] = None):
        super().__init__(f"Memory operation failed: {message}")
        self.kind = kind
        self.reason = message
        self.path = path
        self.detail = detail or {}

    @classmethod
    def wrap(cls, err: BaseException) -> "MemoryOperationFailed":
        if isinstance(err, MemoryToolError):
            return cls(err.kind, err.message, path=err.path, detail=err.detail)
        return cls(ErrorKind.IOError, str(err) or type(err).__name__)
