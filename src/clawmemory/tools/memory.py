"""Memory Tool — exposes a MemoryBackend to the agent as a single ``memory`` tool.

Failures never raise out of ``execute``: they come back as a failed
``ToolResult`` whose ``error`` is the rendered ``MemoryOperationFailed``.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List

from clawmemory.memory.backend import MemoryBackend
from clawmemory.memory.commands import parse_command
from clawmemory.memory.errors import MemoryOperationFailed, MemoryToolError
from clawmemory.tools.registry import Tool, ToolResult

logger = logging.getLogger(__name__)

MEMORY_TOOL_DESCRIPTION = """Memory management tool for persistent storage.

Command Examples:

1. view - List directory or view file contents
   Required: command, path
   Optional: view_range (array of 2 numbers: [start_line, end_line])
   Example: {{"command": "view", "path": "{mount}/notes.txt", "view_range": [1, 10]}}

2. create - Create or update a file
   Required: command, path, file_text
   Example: {{"command": "create", "path": "{mount}/notes.txt", "file_text": "Hello World"}}

3. str_replace - Replace the first occurrence of text in a file
   Required: command, path, old_str, new_str
   Example: {{"command": "str_replace", "path": "{mount}/notes.txt", "old_str": "old text", "new_str": "new text"}}

4. insert - Insert a line before the given line number (1-indexed)
   Required: command, path, insert_line (number), insert_text
   Example: {{"command": "insert", "path": "{mount}/notes.txt", "insert_line": 5, "insert_text": "New line"}}

5. delete - Delete a file or directory
   Required: command, path
   Example: {{"command": "delete", "path": "{mount}/notes.txt"}}

6. rename - Rename or move a file
   Required: command, old_path, new_path
   Example: {{"command": "rename", "old_path": "{mount}/old.txt", "new_path": "{mount}/new.txt"}}

All paths must start with {mount}"""


class MemoryTool:
    name = "memory"

    def __init__(self, backend: MemoryBackend):
        self._backend = backend
        mount = backend.mount
        self.description = MEMORY_TOOL_DESCRIPTION.format(mount=mount)
        self.parameters = {
            "command": {
                "type": "string",
                "enum": ["view", "create", "str_replace", "insert", "delete", "rename"],
                "description": "The memory operation to perform",
                "required": True,
            },
            "path": {"type": "string", "description": f"File path (must start with {mount}). Used by every command except rename"},
            "view_range": {
                "type": "array",
                "items": {"type": "number"},
                "description": "[start_line, end_line] for view, inclusive. Example: [1, 10]",
            },
            "file_text": {"type": "string", "description": "Complete file content. Only used by create"},
            "old_str": {"type": "string", "description": "Exact text to find. Only used by str_replace"},
            "new_str": {"type": "string", "description": "Replacement for old_str. Only used by str_replace"},
            "insert_line": {"type": "number", "description": "Line number (1-indexed) to insert before. Only used by insert"},
            "insert_text": {"type": "string", "description": "Text to insert. Only used by insert"},
            "old_path": {"type": "string", "description": f"Source path (must start with {mount}). Only used by rename"},
            "new_path": {"type": "string", "description": f"Destination path (must start with {mount}). Only used by rename"},
        }

    async def execute(self, args: Dict[str, Any]) -> ToolResult:
        try:
            command = parse_command(args)
        except MemoryToolError as err:
            failure = MemoryOperationFailed.wrap(err)
            return ToolResult(success=False, output="", error=str(failure))
        except (TypeError, ValueError) as err:
            return ToolResult(success=False, output="", error=f"Memory operation failed: malformed arguments ({err})")

        try:
            result = await self._backend.execute(command)
        except MemoryOperationFailed as err:
            logger.debug("memory tool returned failure: %s", err)
            return ToolResult(success=False, output="", error=str(err))
        return ToolResult(success=True, output=result)


# ─── Public API ──────────────────────────────────────────────────────────────

def create_memory_tools(backend: MemoryBackend) -> List[Tool]:
    """Create the memory tool backed by a specific MemoryBackend."""
    return [MemoryTool(backend)]
