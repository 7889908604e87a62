"""stdio event loop: frames stdin, dispatches messages, writes responses.

Two handling policies are available:

- concurrent (default): each framed message is handled in its own task, so
  two ``tools/call`` requests whose tools suspend can be in flight together
  and their responses may be written in either order;
- serial: one worker handles messages strictly in arrival order, writing
  message N's response before starting message N+1.

Shutdown happens on end of input or SIGINT/SIGTERM. Handlers get one
scheduling pass (plus the optional grace period) to finish, then anything
still in flight is cancelled and the registry disposes its tools.
"""

from __future__ import annotations

import asyncio
import logging
import signal
import sys
from typing import IO, TYPE_CHECKING, Any

from stdio_mcp.exceptions import INTERNAL_ERROR, FramingError
from stdio_mcp.framing import LineFramer
from stdio_mcp.jsonrpc import decode, error_response

if TYPE_CHECKING:
    from stdio_mcp.dispatcher import Dispatcher
    from stdio_mcp.writer import OutputWriter

logger = logging.getLogger(__name__)

STARTUP_NOTIFICATIONS = (
    "notifications/tools/list_changed",
    "notifications/initialized",
)


class StdioServer:
    """Drives one dispatcher over a byte stream reader and an output writer."""

    def __init__(
        self,
        dispatcher: Dispatcher,
        writer: OutputWriter,
        *,
        serial: bool = False,
        chunk_size: int = 65536,
        shutdown_grace_s: float = 0.0,
    ) -> None:
        self.dispatcher = dispatcher
        self.writer = writer
        self.serial = serial
        self.chunk_size = chunk_size
        self._shutdown_grace_s = shutdown_grace_s
        self._framer = LineFramer()
        self._tasks: set[asyncio.Task[None]] = set()
        self._queue: asyncio.Queue[str] | None = None
        self._stop: asyncio.Event | None = None

    @property
    def in_flight(self) -> int:
        return len(self._tasks)

    def request_stop(self, sig: signal.Signals | None = None) -> None:
        if sig is not None:
            logger.info("Received %s, exiting...", sig.name)
        if self._stop is not None:
            self._stop.set()

    async def serve(self, reader: asyncio.StreamReader) -> int:
        """Run until end of input or a stop request; return the exit code."""
        self._stop = asyncio.Event()
        for method in STARTUP_NOTIFICATIONS:
            self.writer.send_notification(method)

        if self.serial:
            self._queue = asyncio.Queue()
            self._spawn(self._worker())

        read_task = asyncio.ensure_future(self._read_loop(reader))
        stop_task = asyncio.ensure_future(self._stop.wait())
        try:
            done, _ = await asyncio.wait({read_task, stop_task}, return_when=asyncio.FIRST_COMPLETED)
            if read_task in done:
                read_task.result()
        finally:
            for task in (read_task, stop_task):
                if not task.done():
                    task.cancel()
            await self._shutdown()
        return 0

    async def _read_loop(self, reader: asyncio.StreamReader) -> None:
        while True:
            chunk = await reader.read(self.chunk_size)
            if not chunk:
                logger.info("Stdin ended, exiting...")
                if self._framer.pending:
                    logger.debug("Dropping unterminated input: %r", self._framer.pending)
                return
            for payload in self._framer.feed(chunk):
                self._submit(payload)

    def _submit(self, payload: str) -> None:
        if self._queue is not None:
            self._queue.put_nowait(payload)
        else:
            self._spawn(self._process(payload))

    def _spawn(self, coro: Any) -> None:
        task = asyncio.ensure_future(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _worker(self) -> None:
        assert self._queue is not None
        while True:
            payload = await self._queue.get()
            try:
                await self._process(payload)
            except Exception:
                # One bad message must not stop the worker.
                logger.exception("Unhandled error processing message")
            finally:
                self._queue.task_done()

    async def _process(self, payload: str) -> None:
        try:
            message = decode(payload)
        except FramingError as exc:
            logger.error("Failed to parse message: %s", exc.detail)
            return

        try:
            response = await self.dispatcher.handle(message)
            if response is not None:
                self._write_response(response)
        except Exception:
            logger.exception("Unhandled error processing message %r", message.get("method"))

    def _write_response(self, response: dict[str, Any]) -> None:
        req_id = response.get("id")
        try:
            self.writer.send(response)
        except ValueError as exc:
            # Serialization happens before any byte is written.
            logger.error("Response for id=%r could not be serialized: %s", req_id, exc)
            self.writer.send(error_response(req_id, INTERNAL_ERROR, f"result could not be serialized: {exc}"))
        except OSError:
            logger.exception("Failed to write response for id=%r", req_id)

    async def _shutdown(self) -> None:
        # Let handlers that were just scheduled run to their first suspension.
        await asyncio.sleep(0)
        pending = [t for t in self._tasks if not t.done()]
        if self._queue is not None:
            if self._shutdown_grace_s > 0:
                try:
                    await asyncio.wait_for(self._queue.join(), timeout=self._shutdown_grace_s)
                except asyncio.TimeoutError:
                    pass
        elif pending and self._shutdown_grace_s > 0:
            await asyncio.wait(pending, timeout=self._shutdown_grace_s)

        pending = [t for t in self._tasks if not t.done()]
        if pending:
            logger.info("Cancelling %d in-flight handler(s)", len(pending))
            for task in pending:
                task.cancel()
            await asyncio.gather(*pending, return_exceptions=True)

        await self.dispatcher.registry.shutdown()


async def _pump_blocking(reader: asyncio.StreamReader, stream: IO[bytes], chunk_size: int) -> None:
    """Feed ``reader`` from a stream that cannot be registered as a pipe."""
    loop = asyncio.get_running_loop()
    read = getattr(stream, "read1", stream.read)
    while True:
        data = await loop.run_in_executor(None, read, chunk_size)
        if not data:
            reader.feed_eof()
            return
        reader.feed_data(data)


async def run_stdio(server: StdioServer, stdin: IO[bytes] | None = None) -> int:
    """Serve over the process's standard input until EOF or a signal."""
    loop = asyncio.get_running_loop()
    stream = stdin if stdin is not None else sys.stdin.buffer
    reader = asyncio.StreamReader()
    pump: asyncio.Future[None] | None = None
    try:
        protocol = asyncio.StreamReaderProtocol(reader)
        await loop.connect_read_pipe(lambda: protocol, stream)
    except ValueError:
        # Regular files (``< input.jsonl``) are not pipes.
        pump = asyncio.ensure_future(_pump_blocking(reader, stream, server.chunk_size))

    installed = []
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, server.request_stop, sig)
            installed.append(sig)
        except (NotImplementedError, RuntimeError, ValueError):
            logger.debug("Signal handler for %s unavailable on this platform", sig.name)

    try:
        return await server.serve(reader)
    finally:
        for sig in installed:
            loop.remove_signal_handler(sig)
        if pump is not None and not pump.done():
            pump.cancel()
