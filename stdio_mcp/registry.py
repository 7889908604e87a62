"""In-process tool registry.

Maps a tool name to exactly one live ``Tool`` instance. One registry is
built by the command-line front end at startup and handed by reference to
the dispatcher; nothing in this module keeps a global instance.

Registering under an existing name replaces the previous entry without
disposing it. Callers that care about cleanup must ``dispose`` the old
instance themselves, or rely on ``shutdown`` for the tools still
registered at exit.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from stdio_mcp.exceptions import ToolNotFoundError

if TYPE_CHECKING:
    from collections.abc import Iterator

    from stdio_mcp.tool import Tool

log = logging.getLogger(__name__)

__all__ = ["ToolRegistry"]


class ToolRegistry:
    """Name-keyed table of live tools.

    No locking is done: mutations are synchronous and the asyncio loop never
    interleaves them. Concurrent ``execute`` calls against the same tool are
    the tool's own responsibility to guard.

    Attributes
    ----------
    _tools : dict[str, Tool]
        Live tools keyed by ``tool.name``, in insertion order.
    """

    def __init__(self) -> None:
        self._tools: dict[str, Tool] = {}

    async def register(self, tool: Tool) -> Tool:
        """Insert ``tool`` under its name and initialise it.

        Parameters
        ----------
        tool : Tool
            Tool instance to own.

        Returns
        -------
        Tool
            The same instance, whether or not ``init`` succeeded.
        """
        if tool.name in self._tools:
            log.warning("tool %r re-registered; previous instance replaced without dispose", tool.name)
        self._tools[tool.name] = tool
        try:
            await tool.init()
        except Exception:
            log.exception("tool.init failed for %r; tool stays registered", tool.name)
        else:
            log.debug("registered tool %r", tool.name)
        return tool

    def unregister(self, name: str) -> bool:
        """Remove the entry for ``name``; return whether one existed."""
        return self._tools.pop(name, None) is not None

    def get(self, name: str) -> Tool | None:
        return self._tools.get(name)

    def list(self) -> list[dict[str, Any]]:
        """Return wire metadata for every registered tool, in insertion order."""
        return [t.get_meta().to_wire() for t in self._tools.values()]

    def names(self) -> list[str]:
        return list(self._tools)

    def find_by_command(self, command: str) -> Tool | None:
        """Resolve a tool by its CLI alias, falling back to its name."""
        for tool in self._tools.values():
            if tool.command_alias == command:
                return tool
        return self._tools.get(command)

    async def execute(self, name: str, args: Any) -> Any:
        """Run the tool registered under ``name``.

        Parameters
        ----------
        name : str
            Tool name.
        args : Any
            Arguments passed to ``Tool.run`` unmodified.

        Returns
        -------
        Any
            Whatever ``run`` returns.

        Raises
        ------
        ToolNotFoundError
            If no tool is registered under ``name``.
        Exception
            Anything raised by ``run`` propagates unchanged.
        """
        tool = self._tools.get(name)
        if tool is None:
            raise ToolNotFoundError(name)
        return await tool.run(args)

    async def shutdown(self) -> None:
        """Dispose every registered tool, then empty the table.

        A failing ``dispose`` is logged and does not stop the others.
        """
        tools = list(self._tools.values())
        self._tools.clear()
        for tool in tools:
            try:
                await tool.dispose()
            except Exception:
                log.exception("tool.dispose failed for %r", tool.name)
        log.debug("registry shut down (%d tools disposed)", len(tools))

    def __len__(self) -> int:
        return len(self._tools)

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __iter__(self) -> Iterator[Tool]:
        return iter(list(self._tools.values()))
