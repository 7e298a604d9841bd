"""Pytest configuration and shared fixtures."""

from pathlib import Path

import pytest

from example_mcp_server.catalog import WidgetAssets, register_examples
from example_mcp_server.config import ServerConfig
from example_mcp_server.mcp.server import McpServer


@pytest.fixture(scope="module")
def anyio_backend():
    """Configure anyio to use asyncio backend."""
    return "asyncio"


@pytest.fixture
def server_config() -> ServerConfig:
    """Default server config, independent of the environment."""
    return ServerConfig()


@pytest.fixture
def mcp_server() -> McpServer:
    """Frozen server with the example catalog and packaged widgets."""
    server = McpServer("example-mcp-server", "1.0.0", direct_tool_methods=True)
    register_examples(server, WidgetAssets())
    server.freeze()
    return server


@pytest.fixture
def empty_ui_dir(tmp_path: Path) -> Path:
    """A UI directory with no widget files."""
    ui_dir = tmp_path / "ui"
    ui_dir.mkdir()
    return ui_dir
