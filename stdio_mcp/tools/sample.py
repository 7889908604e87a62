"""Sample tool: a template to copy when writing a new tool."""

from __future__ import annotations

import json
from typing import Any

from stdio_mcp.tool import Tool


class SampleTool(Tool):
    name = "sample"
    title = "Sample Tool"
    description = "mcp sample"
    command = "sample"
    input_schema = {
        "type": "object",
        "properties": {"text": {"type": "string", "description": "sampleText"}},
        "required": ["text"],
    }
    output_schema = {"type": "object", "properties": {}}

    async def run(self, params: Any) -> dict[str, Any]:
        return {"content": [{"type": "text", "text": json.dumps({"message": "Hello, MCP!"}, indent=2)}]}
