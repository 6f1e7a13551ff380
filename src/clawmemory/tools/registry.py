"""ClawMemory Tool System

- Tool description caching (invalidated on register)
- Per-execution timeout (120s default, configurable)
- Head+tail truncation of long tool output
"""

import asyncio
from typing import Any, Dict, List, Optional, Protocol


class ToolResult:
    __slots__ = ("success", "output", "error")

    def __init__(self, success: bool, output: str, error: Optional[str] = None):
        self.success = success
        self.output = output
        self.error = error

    def to_dict(self) -> Dict[str, Any]:
        return {"success": self.success, "output": self.output, "error": self.error}


class Tool(Protocol):
    name: str
    description: str
    parameters: Dict[str, Dict[str, Any]]

    async def execute(self, args: Dict[str, Any]) -> ToolResult:
        ...


# ─── Constants ─────────────────────────────────────────────────────────────

MAX_TOOL_OUTPUT_CHARS = 12_000
_TRUNCATION_HEAD = 5_000
_TRUNCATION_TAIL = 2_000
DEFAULT_TOOL_TIMEOUT_S = 120


def truncate_tool_output(output: str, max_chars: int = MAX_TOOL_OUTPUT_CHARS) -> str:
    if len(output) <= max_chars:
        return output
    head_len = min(_TRUNCATION_HEAD, max_chars)
    tail_len = min(_TRUNCATION_TAIL, max(0, max_chars - head_len))
    head = output[:head_len]
    tail = output[-tail_len:] if tail_len else ""
    dropped = len(output) - head_len - tail_len
    return f"{head}\n\n[… truncated {dropped} characters …]\n\n{tail}"


_JSON_TYPES = {"string", "number", "integer", "boolean", "array", "object"}


def _to_json_schema(parameters: Dict[str, Dict[str, Any]]) -> Dict[str, Any]:
    properties: Dict[str, Any] = {}
    required: List[str] = []
    for pname, info in parameters.items():
        prop = {k: v for k, v in info.items() if k != "required"}
        if prop.get("type") not in _JSON_TYPES:
            prop["type"] = "string"
        properties[pname] = prop
        if info.get("required"):
            required.append(pname)
    schema: Dict[str, Any] = {"type": "object", "properties": properties}
    if required:
        schema["required"] = required
    return schema


class ToolRegistry:
    def __init__(
        self,
        tool_timeout_s: float = DEFAULT_TOOL_TIMEOUT_S,
        max_output_chars: int = MAX_TOOL_OUTPUT_CHARS,
    ):
        self.tools: Dict[str, Tool] = {}
        self._description_cache: Optional[str] = None
        self._tool_timeout_s = tool_timeout_s
        self._max_output_chars = max_output_chars

    def register(self, tool: Tool) -> None:
        self.tools[tool.name] = tool
        self._description_cache = None

    def get(self, name: str) -> Optional[Tool]:
        return self.tools.get(name)

    def list(self) -> List[Tool]:
        return list(self.tools.values())

    def describe_for_llm(self) -> str:
        if self._description_cache is not None:
            return self._description_cache

        tools = self.list()
        if not tools:
            self._description_cache = ""
            return ""

        parts = ["## Available Tools\n"]
        for tool in tools:
            parts.append(f"### {tool.name}\n{tool.description}")
            params = tool.parameters
            if params:
                parts.append("Parameters:")
                for pname, info in params.items():
                    req = " (required)" if info.get("required") else ""
                    parts.append(f"- `{pname}` ({info.get('type')}{req}): {info.get('description')}")
            parts.append("")

        self._description_cache = "\n".join(parts)
        return self._description_cache

    def to_json_schemas(self) -> List[Dict[str, Any]]:
        """Function-calling schemas for every registered tool."""
        return [
            {
                "name": tool.name,
                "description": tool.description,
                "parameters": _to_json_schema(tool.parameters),
            }
            for tool in self.list()
        ]

    async def execute_tool(self, tool_name: str, args: Dict[str, Any]) -> ToolResult:
        tool = self.get(tool_name)
        if not tool:
            return ToolResult(success=False, output="", error=f"Unknown tool: {tool_name}")
        try:
            result = await asyncio.wait_for(
                tool.execute(args),
                timeout=self._tool_timeout_s,
            )
            return ToolResult(
                success=result.success,
                output=truncate_tool_output(result.output, self._max_output_chars),
                error=result.error,
            )
        except asyncio.TimeoutError:
            return ToolResult(
                success=False, output="",
                error=f'Tool "{tool_name}" timed out after {self._tool_timeout_s}s.',
            )
        except Exception as err:
            return ToolResult(success=False, output="", error=f"Tool error: {str(err)}")
