"""Line framing for newline-delimited JSON-RPC over a byte stream.

``consume`` is a pure function over ``FramerState`` so framing can be
tested without a stream. ``LineFramer`` wraps it with an incremental UTF-8
decoder for raw byte deliveries.

An unterminated final line is never flushed: when the stream ends, whatever
is still pending is dropped.
"""

from __future__ import annotations

import codecs
from dataclasses import dataclass

__all__ = ["FramerState", "LineFramer", "consume"]

_LINE_BOUNDARY = "\n"


@dataclass(slots=True, frozen=True)
class FramerState:
    """Text received but not yet terminated by a line boundary."""

    pending: str = ""


def consume(state: FramerState, chunk: str) -> tuple[FramerState, list[str]]:
    """Append ``chunk`` to the pending fragment and cut complete lines.

    Parameters
    ----------
    state : FramerState
        Current framer state.
    chunk : str
        Newly delivered text (may be empty, partial, or hold many lines).

    Returns
    -------
    tuple[FramerState, list[str]]
        The new state, and the stripped non-blank complete lines in arrival
        order.
    """
    parts = (state.pending + chunk).split(_LINE_BOUNDARY)
    pending = parts.pop()
    payloads = [line.strip() for line in parts if line.strip()]
    return FramerState(pending), payloads


class LineFramer:
    """Stateful framer fed with bytes or text deliveries."""

    def __init__(self, encoding: str = "utf-8") -> None:
        self._state = FramerState()
        # Multi-byte characters may straddle two deliveries.
        self._decoder = codecs.getincrementaldecoder(encoding)(errors="replace")

    @property
    def pending(self) -> str:
        return self._state.pending

    def feed(self, data: bytes | str) -> list[str]:
        """Consume one delivery and return the complete payloads it closed."""
        text = self._decoder.decode(data) if isinstance(data, bytes) else data
        self._state, payloads = consume(self._state, text)
        return payloads
