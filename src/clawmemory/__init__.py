# Package Root
from clawmemory.memory.backend import MemoryBackend
from clawmemory.memory.commands import (
    Create, Delete, InsertLine, MemoryCommand, Rename, ReplaceText, View,
    parse_command,
)
from clawmemory.memory.errors import ErrorKind, MemoryOperationFailed, MemoryToolError
from clawmemory.tools.memory import MemoryTool, create_memory_tools
