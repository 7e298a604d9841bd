"""Server and client configuration.

Defaults mirror the reference deployment; every field can be overridden
from the environment (``from_env``) or from CLI options.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

SERVER_NAME = "example-mcp-server"
SERVER_VERSION = "1.0.0"
DEFAULT_PORT = 8080
DEFAULT_MCP_PATH = "/mcp"
DEFAULT_CLIENT_PROTOCOL_VERSION = "2024-11-05"


def _env_float(name: str, default: float) -> float:
    value = os.environ.get(name)
    if value is None or value == "":
        return default
    try:
        return float(value)
    except ValueError as e:
        raise ValueError(f"{name} must be a number, got {value!r}") from e


def _env_int(name: str, default: int) -> int:
    value = os.environ.get(name)
    if value is None or value == "":
        return default
    try:
        return int(value)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {value!r}") from e


@dataclass
class ServerConfig:
    """HTTP server configuration."""

    name: str = SERVER_NAME
    version: str = SERVER_VERSION
    description: str = "MCP Server with Product Widget Tool"

    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT
    mcp_path: str = DEFAULT_MCP_PATH

    # Widget HTML directory (None = packaged ui/)
    ui_dir: Path | None = None

    # Reported by GET /mcp; no session state is kept between requests
    stateless: bool = True

    # Expose each tool as a JSON-RPC method of the same name
    direct_tool_methods: bool = False

    # Seconds to drain in-flight requests on SIGINT/SIGTERM
    shutdown_timeout: float = 5.0
    keep_alive_timeout: float = 60.0

    log_level: str = "INFO"

    # Local development origins, any port
    cors_origin_regex: str = r"http://(localhost|127\.0\.0\.1)(:\d+)?"

    @classmethod
    def from_env(cls, **overrides: Any) -> ServerConfig:
        """Build config from MCP_SERVER_* environment variables.

        Keyword overrides that are not None win over the environment.
        """
        ui_dir = os.environ.get("MCP_SERVER_UI_DIR")
        config = cls(
            host=os.environ.get("MCP_SERVER_HOST", cls.host),
            port=_env_int("MCP_SERVER_PORT", DEFAULT_PORT),
            ui_dir=Path(ui_dir) if ui_dir else None,
            shutdown_timeout=_env_float("MCP_SERVER_SHUTDOWN_TIMEOUT", 5.0),
            direct_tool_methods=os.environ.get("MCP_SERVER_DIRECT_TOOL_METHODS", "").lower()
            in ("1", "true", "yes"),
            log_level=os.environ.get("MCP_LOG_LEVEL", "INFO").upper(),
        )
        return replace(config, **{k: v for k, v in overrides.items() if v is not None})

    def endpoint_url(self, path: str | None = None) -> str:
        host = "localhost" if self.host in ("0.0.0.0", "::") else self.host
        return f"http://{host}:{self.port}{path if path is not None else self.mcp_path}"


@dataclass
class ClientConfig:
    """Client transport configuration."""

    base_url: str = f"http://localhost:{DEFAULT_PORT}{DEFAULT_MCP_PATH}"
    timeout: float = 30.0

    client_name: str = "example-client"
    client_version: str = "1.0.0"
    protocol_version: str = DEFAULT_CLIENT_PROTOCOL_VERSION

    headers: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_env(cls, **overrides: Any) -> ClientConfig:
        """Build config from MCP_SERVER_URL / MCP_CLIENT_TIMEOUT."""
        config = cls(
            base_url=os.environ.get("MCP_SERVER_URL", cls.base_url),
            timeout=_env_float("MCP_CLIENT_TIMEOUT", 30.0),
        )
        return replace(config, **{k: v for k, v in overrides.items() if v is not None})
