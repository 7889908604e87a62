"""Built-in tools, registered at server startup."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from stdio_mcp.tools.echo import EchoTool
from stdio_mcp.tools.sample import SampleTool

if TYPE_CHECKING:
    from stdio_mcp.registry import ToolRegistry
    from stdio_mcp.tool import Tool

logger = logging.getLogger(__name__)

__all__ = ["EchoTool", "SampleTool", "builtin_tools", "register_builtin_tools"]


def builtin_tools() -> list[Tool]:
    return [SampleTool(), EchoTool()]


async def register_builtin_tools(registry: ToolRegistry) -> list[Tool]:
    """Register every built-in tool with ``registry``."""
    registered = [await registry.register(tool) for tool in builtin_tools()]
    logger.info("Built-in tools registered: %s", [t.name for t in registered])
    return registered
