"""Command-line front end.

Usage:
    python -m stdio_mcp stdio                       # serve MCP over stdin/stdout
    python -m stdio_mcp tools                       # list built-in tools
    python -m stdio_mcp run sample --args '{"text": "hi"}'
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import os
import sys
from typing import Any

from dotenv import load_dotenv

from stdio_mcp import __version__
from stdio_mcp.config import ServerSettings
from stdio_mcp.dispatcher import Dispatcher
from stdio_mcp.exceptions import InvalidArgumentsError
from stdio_mcp.registry import ToolRegistry
from stdio_mcp.results import print_result
from stdio_mcp.schema import validate_arguments
from stdio_mcp.server import StdioServer, run_stdio
from stdio_mcp.tools import register_builtin_tools
from stdio_mcp.writer import OutputWriter

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"


def configure_logging(level: str) -> None:
    """Send all logging to stderr; stdout carries protocol messages only."""
    logging.basicConfig(stream=sys.stderr, level=level.upper(), format=LOG_FORMAT, force=True)


async def _serve(settings: ServerSettings) -> int:
    registry = ToolRegistry()
    try:
        await register_builtin_tools(registry)
    except Exception:
        logger.exception("Failed to register built-in tools")
        return 1

    server = StdioServer(
        Dispatcher(registry, settings),
        OutputWriter(),
        serial=settings.serial_dispatch,
        chunk_size=settings.read_chunk_size,
        shutdown_grace_s=settings.shutdown_grace_s,
    )
    return await run_stdio(server)


def cmd_stdio(args: argparse.Namespace, settings: ServerSettings) -> int:
    """Start the MCP server in stdio mode."""
    logger.info("Starting stdio MCP server... PID: %s", os.getpid())
    try:
        return asyncio.run(_serve(settings))
    except KeyboardInterrupt:
        logger.info("Interrupted, exiting...")
        return 0


async def _list_tools() -> list[dict[str, Any]]:
    registry = ToolRegistry()
    await register_builtin_tools(registry)
    rows = [{**tool.get_meta().to_wire(), "command": tool.command_alias} for tool in registry]
    await registry.shutdown()
    return rows


def cmd_tools(args: argparse.Namespace, settings: ServerSettings) -> int:
    """Print the registered tools."""
    rows = asyncio.run(_list_tools())
    if args.json:
        print(json.dumps(rows, indent=2, ensure_ascii=False))
        return 0
    for row in rows:
        print(f"  {row['command']:16s} {row['name']:16s} {row['title']}")
        if row.get("description"):
            print(f"  {'':16s} {row['description']}")
    return 0


async def _run_tool(command: str, raw_args: Any) -> tuple[int, Any]:
    registry = ToolRegistry()
    await register_builtin_tools(registry)
    try:
        tool = registry.find_by_command(command)
        if tool is None:
            print(f"ERROR: unknown tool command: {command}", file=sys.stderr)
            return 2, None
        try:
            arguments = validate_arguments(tool.name, tool.input_schema, raw_args)
        except InvalidArgumentsError as exc:
            print(f"ERROR: {exc}", file=sys.stderr)
            for err in exc.errors:
                print(f"  {err['path']}: {err['message']}", file=sys.stderr)
            return 2, None
        try:
            return 0, await registry.execute(tool.name, arguments)
        except Exception as exc:
            logger.exception("Tool %r failed", tool.name)
            print(f"ERROR: tool {tool.name!r} failed: {exc}", file=sys.stderr)
            return 1, None
    finally:
        await registry.shutdown()


def cmd_run(args: argparse.Namespace, settings: ServerSettings) -> int:
    """Run one tool in-process by its command alias and print the result."""
    try:
        raw_args = json.loads(args.args)
    except ValueError as exc:
        print(f"ERROR: --args is not valid JSON: {exc}", file=sys.stderr)
        return 2

    code, result = asyncio.run(_run_tool(args.command, raw_args))
    if code == 0:
        print_result(result)
    return code


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="stdio-mcp",
        description="MCP tool server speaking newline-delimited JSON-RPC over stdio.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--log-level",
        default=None,
        help="logging level for stderr output (default: MCP_LOG_LEVEL or INFO)",
    )
    sub = parser.add_subparsers(dest="cmd", required=True)

    p_stdio = sub.add_parser("stdio", help="start the MCP server in stdio mode")
    p_stdio.add_argument(
        "--serial",
        action="store_true",
        default=None,
        help="handle messages one at a time, in arrival order",
    )
    p_stdio.set_defaults(func=cmd_stdio)

    p_tools = sub.add_parser("tools", help="list registered tools")
    p_tools.add_argument("--json", action="store_true", help="print tool metadata as JSON")
    p_tools.set_defaults(func=cmd_tools)

    p_run = sub.add_parser("run", help="run a tool in-process and print its result")
    p_run.add_argument("command", help="tool command alias (or tool name)")
    p_run.add_argument("--args", default="{}", metavar="JSON", help="tool arguments as a JSON object")
    p_run.set_defaults(func=cmd_run)

    return parser


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    args = build_parser().parse_args(argv)

    overrides: dict[str, Any] = {}
    if args.log_level:
        overrides["log_level"] = args.log_level
    if getattr(args, "serial", None):
        overrides["serial_dispatch"] = True
    settings = ServerSettings(**overrides)

    configure_logging(settings.log_level)
    return args.func(args, settings)


if __name__ == "__main__":
    raise SystemExit(main())
