"""Shared test fixtures for the stdio MCP server."""

from __future__ import annotations

import asyncio
import io
import json
from typing import Any

import pytest

from stdio_mcp.config import ServerSettings
from stdio_mcp.dispatcher import Dispatcher
from stdio_mcp.registry import ToolRegistry
from stdio_mcp.server import StdioServer
from stdio_mcp.tool import Tool
from stdio_mcp.tools.sample import SampleTool
from stdio_mcp.writer import OutputWriter


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep developer MCP_* variables out of the settings under test."""
    for name in (
        "MCP_SERVER_NAME",
        "MCP_SERVER_TITLE",
        "MCP_SERVER_VERSION",
        "MCP_PROTOCOL_VERSION",
        "MCP_LOG_LEVEL",
        "MCP_SERIAL_DISPATCH",
        "MCP_READ_CHUNK_SIZE",
        "MCP_SHUTDOWN_GRACE_S",
    ):
        monkeypatch.delenv(name, raising=False)


class RecordingTool(Tool):
    """Tool that records lifecycle calls and returns a configurable result."""

    description = "records calls"

    def __init__(
        self,
        name: str = "recorder",
        *,
        result: Any = None,
        error: Exception | None = None,
        init_error: Exception | None = None,
        delay_s: float = 0.0,
        title: str | None = None,
    ) -> None:
        self.name = name
        self.title = title
        self.result = result if result is not None else {"content": [{"type": "text", "text": name}]}
        self.error = error
        self.init_error = init_error
        self.delay_s = delay_s
        self.calls: list[Any] = []
        self.init_calls = 0
        self.dispose_calls = 0

    async def init(self, params: Any = None) -> None:
        self.init_calls += 1
        if self.init_error is not None:
            raise self.init_error

    async def dispose(self, params: Any = None) -> None:
        self.dispose_calls += 1

    async def run(self, params: Any) -> Any:
        self.calls.append(params)
        if self.delay_s:
            await asyncio.sleep(self.delay_s)
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture
def make_tool():
    """Factory for ``RecordingTool`` instances."""
    return RecordingTool


@pytest.fixture
def settings() -> ServerSettings:
    return ServerSettings()


@pytest.fixture
def registry() -> ToolRegistry:
    """Fresh, empty registry for each test."""
    return ToolRegistry()


@pytest.fixture
async def sample_registry(registry) -> ToolRegistry:
    """Registry holding the built-in sample tool."""
    await registry.register(SampleTool())
    return registry


@pytest.fixture
def dispatcher(sample_registry, settings) -> Dispatcher:
    return Dispatcher(sample_registry, settings)


class CapturedOutput:
    """Binary sink that counts writes and decodes the lines written."""

    def __init__(self) -> None:
        self.buffer = io.BytesIO()
        self.writes = 0
        self.flushes = 0

    def write(self, data: bytes) -> int:
        self.writes += 1
        return self.buffer.write(data)

    def flush(self) -> None:
        self.flushes += 1

    @property
    def lines(self) -> list[str]:
        return self.buffer.getvalue().decode("utf-8").splitlines()

    @property
    def messages(self) -> list[dict[str, Any]]:
        return [json.loads(line) for line in self.lines]

    @property
    def responses(self) -> list[dict[str, Any]]:
        return [m for m in self.messages if "id" in m]

    @property
    def notifications(self) -> list[dict[str, Any]]:
        return [m for m in self.messages if "id" not in m]


@pytest.fixture
def output() -> CapturedOutput:
    return CapturedOutput()


@pytest.fixture
def run_server(output):
    """Feed byte chunks to a fresh server over ``dispatcher`` and return the output.

    Usage: ``await run_server(dispatcher, [b'...', b'...'], serial=False)``.
    """

    async def _run(dispatcher: Dispatcher, chunks: list[bytes], **kwargs: Any) -> CapturedOutput:
        reader = asyncio.StreamReader()
        for chunk in chunks:
            reader.feed_data(chunk)
        reader.feed_eof()
        server = StdioServer(dispatcher, OutputWriter(output), **kwargs)
        code = await server.serve(reader)
        assert code == 0
        return output

    return _run
