"""stdio MCP server: newline-delimited JSON-RPC over stdin/stdout with pluggable tools.

Components:
- framing: cuts the input byte stream into line payloads
- dispatcher: routes decoded messages to the MCP method surface
- registry: owns the live tool instances
- writer: serializes responses and notifications, one line each
- server: the asyncio loop tying them together
"""

from stdio_mcp.dispatcher import Dispatcher
from stdio_mcp.registry import ToolRegistry
from stdio_mcp.server import StdioServer
from stdio_mcp.tool import Tool, ToolMeta
from stdio_mcp.writer import OutputWriter

__version__ = "0.1.0"

__all__ = [
    "Dispatcher",
    "OutputWriter",
    "StdioServer",
    "Tool",
    "ToolMeta",
    "ToolRegistry",
    "__version__",
]
