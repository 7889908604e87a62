"""Routes decoded JSON-RPC messages to the fixed MCP method surface.

Every request yields exactly one response dict; every notification yields
``None``. The dispatcher keeps no state between messages: the only
correlation is echoing the inbound ``id``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from stdio_mcp.config import ServerSettings
from stdio_mcp.exceptions import INTERNAL_ERROR, MethodNotFoundError
from stdio_mcp.jsonrpc import Envelope, error_response, is_request, result_response

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from stdio_mcp.registry import ToolRegistry

logger = logging.getLogger(__name__)

__all__ = ["Dispatcher"]


class Dispatcher:
    """Request/notification router bound to one tool registry."""

    def __init__(self, registry: ToolRegistry, settings: ServerSettings | None = None) -> None:
        self.registry = registry
        self.settings = settings or ServerSettings()
        self._routes: dict[str, Callable[[Envelope], Awaitable[Any]]] = {
            "initialize": self._initialize,
            "tools/list": self._tools_list,
            "tools/call": self._tools_call,
            "ping": self._ping,
            "resources/list": self._resources_list,
            "prompts/list": self._prompts_list,
        }

    @property
    def methods(self) -> list[str]:
        return list(self._routes)

    async def handle(self, message: dict[str, Any]) -> dict[str, Any] | None:
        """Handle one decoded message.

        Returns the response for a request, ``None`` for a notification.
        Failures never escape: for requests they become error responses,
        for notifications they are only logged.
        """
        request = is_request(message)
        req_id = message.get("id")
        try:
            envelope = Envelope.model_validate(message)
            logger.info("Received: %s", envelope.method)
            if request:
                return await self._route(req_id, envelope)
            await self._notify(envelope)
            return None
        except Exception as exc:
            # Handler and tool failures are INTERNAL_ERROR whatever their type.
            logger.exception("Error handling message %r", message.get("method"))
            if request:
                return error_response(req_id, INTERNAL_ERROR, str(exc) or type(exc).__name__)
            return None

    async def _route(self, req_id: Any, envelope: Envelope) -> dict[str, Any]:
        handler = self._routes.get(envelope.method) if isinstance(envelope.method, str) else None
        if handler is None:
            err = MethodNotFoundError(envelope.method)
            logger.warning("%s", err)
            return error_response(req_id, err.code, str(err))
        return result_response(req_id, await handler(envelope))

    async def _notify(self, envelope: Envelope) -> None:
        # No per-method notification handling yet; receipt is logged only.
        logger.info("Notification received: %s", envelope.method)

    # ------------------------------------------------------------------
    # Routes
    # ------------------------------------------------------------------

    async def _initialize(self, envelope: Envelope) -> dict[str, Any]:
        return {
            "protocolVersion": self.settings.protocol_version,
            "capabilities": {"tools": {"listChanged": True}},
            "serverInfo": self.settings.server_info(),
        }

    async def _tools_list(self, envelope: Envelope) -> dict[str, Any]:
        return {"tools": self.registry.list()}

    async def _tools_call(self, envelope: Envelope) -> Any:
        params = envelope.params if isinstance(envelope.params, dict) else {}
        arguments = params.get("arguments")
        if arguments is None:
            arguments = {}
        return await self.registry.execute(params.get("name"), arguments)

    async def _ping(self, envelope: Envelope) -> dict[str, Any]:
        return {}

    async def _resources_list(self, envelope: Envelope) -> dict[str, Any]:
        return {"resources": []}

    async def _prompts_list(self, envelope: Envelope) -> dict[str, Any]:
        return {"prompts": []}
