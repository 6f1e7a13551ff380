from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict

# Priority: ./.env > parent dir .env
cwd = Path.cwd()
local_env = cwd / ".env"
parent_env = cwd.parent / ".env"

env_file = None
if local_env.exists():
    env_file = local_env
elif parent_env.exists():
    env_file = parent_env

from dotenv import load_dotenv
if env_file:
    load_dotenv(env_file, override=False)


class MemoryConfig(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=env_file,
        env_file_encoding="utf-8",
        extra="ignore"
    )

    memory_root: str = "./memories"
    memory_mount: str = "/memories"
    tool_timeout_s: float = 120
    max_output_chars: int = 12_000
    lock_warn_after_ms: int = 2000
    log_level: str = "INFO"


def load_config() -> MemoryConfig:
    return MemoryConfig()


def create_memory_backend(config: MemoryConfig):
    """Build a MemoryBackend rooted where the config says."""
    from clawmemory.memory.backend import MemoryBackend
    return MemoryBackend(
        root=config.memory_root,
        mount=config.memory_mount,
        lock_warn_after_ms=config.lock_warn_after_ms,
    )


def create_memory_registry(config: MemoryConfig, backend=None):
    """ToolRegistry with the memory tool registered."""
    from clawmemory.tools.memory import create_memory_tools
    from clawmemory.tools.registry import ToolRegistry

    registry = ToolRegistry(
        tool_timeout_s=config.tool_timeout_s,
        max_output_chars=config.max_output_chars,
    )
    for tool in create_memory_tools(backend or create_memory_backend(config)):
        registry.register(tool)
    return registry
