"""Error taxonomy for the stdio MCP server.

All server-side failures inherit from ``McpError`` so the dispatcher can
translate them into JSON-RPC error objects at a single boundary.

JSON-RPC error codes used on the wire:

- ``METHOD_NOT_FOUND`` (-32601): request named a method outside the
  routing table.
- ``INTERNAL_ERROR`` (-32603): anything raised while handling a request,
  including unknown tools and failing tool runs.
"""

from __future__ import annotations

from typing import Any

METHOD_NOT_FOUND = -32601
INTERNAL_ERROR = -32603


class McpError(Exception):
    """Base exception for all server-side failures."""

    code: int = INTERNAL_ERROR


class FramingError(McpError):
    """Raised when a framed line is not a decodable JSON-RPC object."""

    def __init__(self, payload: str, detail: str) -> None:
        self.payload = payload
        self.detail = detail
        super().__init__(f"unparseable message: {detail}")


class MethodNotFoundError(McpError):
    """Raised when a request names a method with no route."""

    code = METHOD_NOT_FOUND

    def __init__(self, method: Any) -> None:
        self.method = method
        super().__init__(f"Method not found: {method}")


class ToolNotFoundError(McpError):
    """Raised when ``tools/call`` names a tool absent from the registry."""

    def __init__(self, tool_name: Any) -> None:
        self.tool_name = tool_name
        super().__init__(f"Tool not found: {tool_name}")


class InvalidArgumentsError(McpError):
    """Raised when CLI-supplied tool arguments violate the input schema."""

    def __init__(self, tool_name: str, errors: list[dict[str, Any]]) -> None:
        self.tool_name = tool_name
        self.errors = errors
        n = len(errors)
        summary = f"{n} violation{'s' if n != 1 else ''}"
        super().__init__(f"invalid arguments for tool {tool_name!r}: {summary}")
