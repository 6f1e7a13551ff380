"""Memory Commands — the closed set of six operations the executor accepts.

Wire form (what the model sends) is a flat dict tagged by ``command``::

    {"command": "view", "path": "/memories/notes.txt", "view_range": [1, 10]}

``parse_command`` turns that into one of the frozen dataclasses below.
Shape validation is the caller's job; only the tag is checked here.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple, Union

from clawmemory.memory.errors import UnknownCommandError


@dataclass(frozen=True)
class View:
    path: str
    view_range: Optional[Tuple[int, int]] = None
    command = "view"


@dataclass(frozen=True)
class Create:
    path: str
    file_text: str = ""
    command = "create"


@dataclass(frozen=True)
class ReplaceText:
    path: str
    old_str: str
    new_str: str
    command = "str_replace"


@dataclass(frozen=True)
class InsertLine:
    path: str
    insert_line: int
    insert_text: str
    command = "insert"


@dataclass(frozen=True)
class Delete:
    path: str
    command = "delete"


@dataclass(frozen=True)
class Rename:
    old_path: str
    new_path: str
    command = "rename"


MemoryCommand = Union[View, Create, ReplaceText, InsertLine, Delete, Rename]

COMMAND_NAMES = ("view", "create", "str_replace", "insert", "delete", "rename")


def parse_command(args: Dict[str, Any]) -> MemoryCommand:
    """Build a typed command from the wire dict."""
    name = args.get("command")

    if name == "view":
        view_range = args.get("view_range")
        if view_range is not None:
            start, end = view_range
            view_range = (int(start), int(end))
        return View(path=args.get("path"), view_range=view_range)
    if name == "create":
        return Create(path=args.get("path"), file_text=args.get("file_text") or "")
    if name == "str_replace":
        return ReplaceText(path=args.get("path"), old_str=args.get("old_str"), new_str=args.get("new_str") or "")
    if name == "insert":
        return InsertLine(
            path=args.get("path"),
            insert_line=int(args.get("insert_line")),
            insert_text=args.get("insert_text") or "",
        )
    if name == "delete":
        return Delete(path=args.get("path"))
    if name == "rename":
        return Rename(old_path=args.get("old_path"), new_path=args.get("new_path"))

    raise UnknownCommandError(f"Unknown command: {name}")

