import json
from typing import Optional

from fastapi import FastAPI, Request, Response
import uvicorn

from clawmemory.config.config import MemoryConfig, create_memory_backend, load_config
from clawmemory.memory.backend import MemoryBackend
from clawmemory.memory.commands import parse_command
from clawmemory.memory.errors import MemoryOperationFailed, MemoryToolError


def _json_error(status_code: int, payload: dict) -> Response:
    return Response(
        content=json.dumps(payload),
        status_code=status_code,
        media_type="application/json",
    )


def create_app(config: Optional[MemoryConfig] = None, backend: Optional[MemoryBackend] = None) -> tuple:
    config = config or load_config()
    backend = backend or create_memory_backend(config)

    app = FastAPI(title="ClawMemory Gateway")

    @app.get("/health")
    async def health():
        return {"status": "ok", "root": backend.root, "mount": backend.mount}

    @app.post("/memory")
    async def memory(request: Request):
        try:
            payload = await request.json()
        except Exception:
            return _json_error(400, {
                "success": False,
                "error": 'Invalid JSON. Send { "command": "view", "path": "/memories" }',
            })
        if not isinstance(payload, dict):
            return _json_error(400, {"success": False, "error": "Command must be a JSON object"})

        try:
            command = parse_command(payload)
            result = await backend.execute(command)
        except MemoryToolError as e:
            failure = MemoryOperationFailed.wrap(e)
            return _json_error(400, {"success": False, "kind": failure.kind.value, "error": str(failure)})
        except MemoryOperationFailed as e:
            return _json_error(400, {"success": False, "kind": e.kind.value, "error": str(e)})
        except (TypeError, ValueError) as e:
            return _json_error(400, {"success": False, "error": f"Malformed command: {e}"})

        return {"success": True, "result": result}

    return app, backend


def start_gateway(port: int = 3000, config: Optional[MemoryConfig] = None):
    app, backend = create_app(config)
    print(f"\nClawMemory Gateway running on http://localhost:{port}")
    print(f"   Root: {backend.root}")
    print(f"   Mount: {backend.mount}")
    print("   Endpoints: POST /memory | GET /health\n")

    uvicorn.run(app, host="0.0.0.0", port=port, log_level="warning")
