"""Environment-driven server settings."""

from __future__ import annotations

from pydantic_settings import BaseSettings

# Protocol revision advertised in the ``initialize`` result.
PROTOCOL_VERSION = "2025-06-18"


class ServerSettings(BaseSettings):
    """Settings read from ``MCP_*`` environment variables or ``.env``."""

    server_name: str = "StdioMCPServer-template"
    server_title: str = "StdioMCPServer-template"
    server_version: str = "0.1.0.0"
    protocol_version: str = PROTOCOL_VERSION
    log_level: str = "INFO"
    # Handle one message at a time, writing responses in arrival order.
    serial_dispatch: bool = False
    read_chunk_size: int = 65536
    # Extra seconds in-flight handlers get to finish after end of input.
    shutdown_grace_s: float = 0.0

    model_config = {"env_prefix": "MCP_", "env_file": ".env", "extra": "ignore"}

    def server_info(self) -> dict[str, str]:
        return {
            "name": self.server_name,
            "title": self.server_title,
            "version": self.server_version,
        }
