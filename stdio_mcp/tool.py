"""Tool contract: the capability set every pluggable handler implements.

A concrete tool declares its identity and schemas as class attributes and
implements ``run``. ``init`` and ``dispose`` default to no-ops so simple
tools only override what they need.

Example
-------
>>> class Upper(Tool):
...     name = "upper"
...     description = "Upper-case the given text"
...     input_schema = {"type": "object", "properties": {"text": {"type": "string"}}}
...
...     async def run(self, params):
...         return {"content": [{"type": "text", "text": params["text"].upper()}]}
"""

from __future__ import annotations

import abc
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

__all__ = ["Tool", "ToolMeta"]


class ToolMeta(BaseModel):
    """Wire metadata for one tool, as returned by ``tools/list``.

    Attributes
    ----------
    name : str
        Unique, stable identifier.
    title : str
        Display title (defaults to ``name`` when the tool declares none).
    description : str
        Human-readable description.
    input_schema : dict[str, Any]
        JSON schema of the ``arguments`` object (``inputSchema`` on the wire).
    output_schema : dict[str, Any] | None
        Optional JSON schema of the result (``outputSchema`` on the wire).
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    title: str
    description: str = ""
    input_schema: dict[str, Any] = Field(default_factory=dict, alias="inputSchema")
    output_schema: dict[str, Any] | None = Field(default=None, alias="outputSchema")

    def to_wire(self) -> dict[str, Any]:
        """Serialize with camelCase keys, omitting an undeclared output schema."""
        return self.model_dump(by_alias=True, exclude_none=True)


class Tool(abc.ABC):
    """Abstract base for every tool served over ``tools/call``.

    Each instance is owned by exactly one registry entry.
    """

    name: str
    title: str | None = None
    description: str = ""
    # Alias used by the command-line front end; falls back to ``name``.
    command: str | None = None
    input_schema: dict[str, Any] = {"type": "object", "properties": {}}
    output_schema: dict[str, Any] | None = None

    async def init(self, params: Any = None) -> Any:
        """Acquire resources or apply injected configuration.

        Awaited once by the registry right after registration. A failure
        here is logged by the registry and leaves the tool registered.
        """
        return None

    async def dispose(self, params: Any = None) -> Any:
        """Release resources held by the tool.

        Never called by request handling; only ``ToolRegistry.shutdown``
        invokes it.
        """
        return None

    @abc.abstractmethod
    async def run(self, params: Any) -> Any:
        """Execute the tool.

        The returned value becomes the ``result`` of the ``tools/call``
        response unmodified. Conventionally shaped as
        ``{"content": [{"type": "text" | "json" | "error", ...}]}``.
        """

    def get_meta(self) -> ToolMeta:
        """Project the declared fields into wire metadata."""
        return ToolMeta(
            name=self.name,
            title=self.title or self.name,
            description=self.description,
            input_schema=self.input_schema,
            output_schema=self.output_schema,
        )

    @property
    def command_alias(self) -> str:
        return self.command or self.name

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"
