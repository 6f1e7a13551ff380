import sys
import argparse
import asyncio
import json

from clawmemory.config.config import load_config, create_memory_registry
from clawmemory.logging.diagnostic import configure_logging


async def run_command(raw: str, root: str | None, mount: str | None) -> int:
    config = load_config()
    if root:
        config.memory_root = root
    if mount:
        config.memory_mount = mount

    try:
        args = json.loads(raw)
    except json.JSONDecodeError as e:
        sys.stderr.write(f"Invalid command JSON: {e}\n")
        return 2
    if not isinstance(args, dict):
        sys.stderr.write("Command must be a JSON object\n")
        return 2

    registry = create_memory_registry(config)
    result = await registry.execute_tool("memory", args)
    if not result.success:
        sys.stderr.write(f"{result.error}\n")
        return 1
    sys.stdout.write(f"{result.output}\n")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="ClawMemory sandboxed memory store")
    parser.add_argument("command", nargs="?", help='Command JSON, e.g. \'{"command": "view", "path": "/memories"}\'. Reads stdin when omitted')
    parser.add_argument("--root", type=str, help="Directory backing the memory store")
    parser.add_argument("--mount", type=str, help="Virtual mount prefix (default: /memories)")
    parser.add_argument("--serve", action="store_true", help="Run the HTTP gateway instead of a single command")
    parser.add_argument("--port", type=int, default=3000, help="Port to run the gateway on")
    args = parser.parse_args(argv)

    configure_logging(load_config().log_level)

    if args.serve:
        from clawmemory.gateway.server import start_gateway
        config = load_config()
        if args.root:
            config.memory_root = args.root
        if args.mount:
            config.memory_mount = args.mount
        start_gateway(args.port, config)
        return 0

    raw = args.command if args.command is not None else sys.stdin.read()
    return asyncio.run(run_command(raw, args.root, args.mount))


def cli():
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        sys.stderr.write("\n")
        sys.exit(1)


if __name__ == "__main__":
    cli()
