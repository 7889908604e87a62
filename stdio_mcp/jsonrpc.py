"""JSON-RPC 2.0 envelopes: decoding inbound lines, building outbound messages.

A decoded object is a *request* when it carries an ``id`` key (even
``"id": null``) and a *notification* otherwise. Batches (JSON arrays) are
not part of the supported surface and are rejected like any other non-object
payload.
"""

from __future__ import annotations

import json
from typing import Any

from pydantic import BaseModel, ConfigDict

from stdio_mcp.exceptions import FramingError

JSONRPC_VERSION = "2.0"

__all__ = [
    "JSONRPC_VERSION",
    "Envelope",
    "decode",
    "error_response",
    "is_request",
    "notification",
    "result_response",
]


class Envelope(BaseModel):
    """Inbound request or notification.

    ``jsonrpc`` is not checked. A missing or non-string ``method`` is routed
    as not found.
    """

    model_config = ConfigDict(extra="allow")

    jsonrpc: Any = JSONRPC_VERSION
    id: Any = None
    method: Any = None
    params: Any = None


def decode(payload: str) -> dict[str, Any]:
    """Parse one framed line into a JSON object.

    Raises
    ------
    FramingError
        If the line is not JSON, or is JSON but not an object.
    """
    try:
        obj = json.loads(payload)
    except json.JSONDecodeError as exc:
        raise FramingError(payload, str(exc)) from exc
    if not isinstance(obj, dict):
        raise FramingError(payload, f"expected a JSON object, got {type(obj).__name__}")
    return obj


def is_request(message: dict[str, Any]) -> bool:
    return "id" in message


def result_response(req_id: Any, result: Any) -> dict[str, Any]:
    return {"jsonrpc": JSONRPC_VERSION, "id": req_id, "result": result}


def error_response(req_id: Any, code: int, message: str) -> dict[str, Any]:
    return {"jsonrpc": JSONRPC_VERSION, "id": req_id, "error": {"code": code, "message": message}}


def notification(method: str, params: Any = None) -> dict[str, Any]:
    msg: dict[str, Any] = {"jsonrpc": JSONRPC_VERSION, "method": method}
    if params is not None:
        msg["params"] = params
    return msg
