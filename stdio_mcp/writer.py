"""Serializes outbound JSON-RPC messages onto the protocol stream.

Each message becomes one compact JSON line written with a single ``write``
call. JSON escapes control characters inside strings, so a serialized
message never contains a raw newline.
"""

from __future__ import annotations

import json
import logging
import sys
from typing import IO, Any

from stdio_mcp.jsonrpc import notification
from stdio_mcp.results import first_text, parse_json_safely

logger = logging.getLogger(__name__)


def encode(message: dict[str, Any]) -> bytes:
    """Encode ``message`` as one newline-terminated UTF-8 line.

    Strings holding lone surrogates (legal as JSON ``\\ud800`` escapes on
    input) have no UTF-8 form; such messages fall back to ASCII escapes.

    Raises
    ------
    ValueError
        If ``message`` holds values JSON cannot represent (NaN, infinities,
        circular references).
    """
    line = json.dumps(message, separators=(",", ":"), ensure_ascii=False, allow_nan=False, default=str)
    try:
        return (line + "\n").encode("utf-8")
    except UnicodeEncodeError:
        line = json.dumps(message, separators=(",", ":"), allow_nan=False, default=str)
        return (line + "\n").encode("ascii")


class OutputWriter:
    """Writes one message per line to a binary stream (stdout by default)."""

    def __init__(self, stream: IO[bytes] | None = None) -> None:
        self._stream = stream if stream is not None else sys.stdout.buffer

    def send(self, message: dict[str, Any]) -> None:
        data = encode(message)
        if logger.isEnabledFor(logging.DEBUG):
            _log_outbound(message)
        self._stream.write(data)
        self._stream.flush()

    def send_notification(self, method: str, params: Any = None) -> None:
        logger.info("Notification sending: %s", method)
        self.send(notification(method, params))


def _log_outbound(message: dict[str, Any]) -> None:
    text = first_text(message.get("result"))
    if not text:
        logger.debug("Sending: %s", json.dumps(message, indent=2, ensure_ascii=False, default=str))
        return
    ok, value = parse_json_safely(text)
    if ok:
        logger.debug("Response content (parsed): %s", json.dumps(value, indent=2, ensure_ascii=False, default=str))
    else:
        logger.debug("Response content (raw): %s", text)
