"""Unit tests for the built-in tools and their registration."""

from __future__ import annotations

import json

import pytest

from stdio_mcp.tools import builtin_tools, register_builtin_tools
from stdio_mcp.tools.echo import EchoTool
from stdio_mcp.tools.sample import SampleTool


@pytest.mark.asyncio
async def test_sample_tool_returns_greeting_regardless_of_params():
    tool = SampleTool()
    for params in ({}, {"text": "anything"}, None):
        result = await tool.run(params)
        assert result["content"][0]["type"] == "text"
        assert json.loads(result["content"][0]["text"]) == {"message": "Hello, MCP!"}


def test_sample_tool_metadata():
    wire = SampleTool().get_meta().to_wire()
    assert wire == {
        "name": "sample",
        "title": "Sample Tool",
        "description": "mcp sample",
        "inputSchema": {
            "type": "object",
            "properties": {"text": {"type": "string", "description": "sampleText"}},
            "required": ["text"],
        },
        "outputSchema": {"type": "object", "properties": {}},
    }


@pytest.mark.asyncio
async def test_echo_tool_returns_text():
    assert await EchoTool().run({"text": "hi"}) == {"content": [{"type": "text", "text": "hi"}]}
    assert await EchoTool().run({}) == {"content": [{"type": "text", "text": ""}]}


def test_echo_title_defaults_to_name():
    assert EchoTool().get_meta().title == "echo"


def test_builtin_tools_are_fresh_instances():
    first, second = builtin_tools(), builtin_tools()
    assert [t.name for t in first] == ["sample", "echo"]
    assert first[0] is not second[0]


@pytest.mark.asyncio
async def test_register_builtin_tools(registry):
    registered = await register_builtin_tools(registry)

    assert [t.name for t in registered] == ["sample", "echo"]
    assert registry.names() == ["sample", "echo"]
