"""Example MCP Server Application.

Creates the Starlette ASGI application serving the MCP endpoint.

Route organization:
- /mcp    - JSON-RPC (POST) and info payload (GET)
- /health - Health check endpoint

The McpServer is built and frozen here, before the first request, and
handed to the HTTP endpoint by reference.
"""

from __future__ import annotations

import contextlib
import logging
from collections.abc import AsyncIterator

from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.middleware.cors import CORSMiddleware

from .catalog import WidgetAssets, register_examples
from .config import ServerConfig
from .mcp.server import McpServer
from .routes import McpHttpEndpoint

logger = logging.getLogger(__name__)


def build_server(config: ServerConfig) -> McpServer:
    """Create the MCP server with the example catalog registered and frozen."""
    server = McpServer(
        config.name,
        config.version,
        direct_tool_methods=config.direct_tool_methods,
    )
    register_examples(server, WidgetAssets(config.ui_dir))
    server.freeze()
    return server


def create_app(config: ServerConfig | None = None, server: McpServer | None = None) -> Starlette:
    """Create the MCP backend application.

    Args:
        config: Server configuration (default: from environment)
        server: Pre-built server; built from ``config`` when omitted.
            A server that is not yet frozen is frozen here.

    Returns:
        Configured Starlette application
    """
    config = config or ServerConfig.from_env()
    if server is None:
        server = build_server(config)
    elif not server.dispatch.frozen:
        server.freeze()

    endpoint = McpHttpEndpoint(server, config)

    @contextlib.asynccontextmanager
    async def lifespan(app: Starlette) -> AsyncIterator[None]:
        logger.info(f"MCP endpoint: {config.endpoint_url()}")
        logger.info(f"Health check: {config.endpoint_url('/health')}")
        yield
        logger.info("Server exited")

    # CORS middleware for local development
    middleware = [
        Middleware(
            CORSMiddleware,
            allow_origin_regex=config.cors_origin_regex,
            allow_methods=["*"],
            allow_headers=["*"],
        ),
    ]

    app = Starlette(routes=endpoint.routes(), middleware=middleware, lifespan=lifespan)
    app.state.mcp_server = server
    app.state.config = config
    return app
