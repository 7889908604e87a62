"""Echo tool: returns the ``text`` argument unchanged."""

from __future__ import annotations

from typing import Any

from stdio_mcp.tool import Tool


class EchoTool(Tool):
    name = "echo"
    description = "Echo back the provided text payload."
    input_schema = {
        "type": "object",
        "properties": {"text": {"type": "string", "description": "Text to echo"}},
        "required": ["text"],
    }

    async def run(self, params: Any) -> dict[str, Any]:
        text = ""
        if isinstance(params, dict):
            text = str(params.get("text", ""))
        return {"content": [{"type": "text", "text": text}]}
