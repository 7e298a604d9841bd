"""Example MCP Server CLI.

Usage:
    example-mcp-server serve                      # HTTP server on 0.0.0.0:8080
    example-mcp-server serve --port 9000          # Custom port
    example-mcp-server health                     # Check server health
    example-mcp-server info                       # Show the server info payload
    example-mcp-server call echo -a message=hi    # Call one tool
    example-mcp-server call add -a a=2 -a b=3
    example-mcp-server demo                       # Run the example client sequence
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
import sys
from collections.abc import Callable
from typing import Any

import click
import httpx

from . import __version__
from .client import McpClient
from .config import DEFAULT_PORT, ClientConfig, ServerConfig
from .protocol.errors import McpError

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging to stderr."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        stream=sys.stderr,
    )


def parse_arguments(pairs: tuple[str, ...]) -> dict[str, Any]:
    """Parse ``key=value`` pairs; values are decoded as JSON when possible."""
    arguments: dict[str, Any] = {}
    for pair in pairs:
        key, sep, raw = pair.partition("=")
        if not sep or not key:
            raise click.BadParameter(f"expected key=value, got {pair!r}", param_hint="--arg")
        try:
            arguments[key] = json.loads(raw)
        except json.JSONDecodeError:
            arguments[key] = raw
    return arguments


def _dump(data: Any) -> str:
    if hasattr(data, "model_dump"):
        data = data.model_dump(exclude_none=True, by_alias=True)
    elif isinstance(data, list):
        data = [d.model_dump(exclude_none=True, by_alias=True) if hasattr(d, "model_dump") else d for d in data]
    return json.dumps(data, indent=2, ensure_ascii=False)


@click.group()
@click.version_option(__version__, prog_name="example-mcp-server")
@click.option(
    "--log-level",
    default=lambda: os.environ.get("MCP_LOG_LEVEL", "INFO"),
    show_default="INFO",
    help="Logging level",
)
def main(log_level: str) -> None:
    """Example MCP server - JSON-RPC tools, resources and prompts over HTTP."""
    configure_logging(log_level)


# =============================================================================
# Server
# =============================================================================


@main.command()
@click.option("--host", default=None, help="Host to bind to (default: 0.0.0.0)")
@click.option("--port", default=None, type=int, help=f"Port to bind to (default: {DEFAULT_PORT})")
@click.option(
    "--ui-dir",
    default=None,
    type=click.Path(exists=True, file_okay=False),
    help="Directory holding widget HTML",
)
@click.option("--direct-tool-methods", is_flag=True, help="Also expose each tool as a JSON-RPC method")
@click.option("--shutdown-timeout", default=None, type=float, help="Seconds to drain requests on shutdown")
def serve(
    host: str | None,
    port: int | None,
    ui_dir: str | None,
    direct_tool_methods: bool,
    shutdown_timeout: float | None,
) -> None:
    """Run the HTTP server."""
    import uvicorn

    # Pass options via environment variables for the app factory
    if host is not None:
        os.environ["MCP_SERVER_HOST"] = host
    if port is not None:
        os.environ["MCP_SERVER_PORT"] = str(port)
    if ui_dir is not None:
        os.environ["MCP_SERVER_UI_DIR"] = ui_dir
    if direct_tool_methods:
        os.environ["MCP_SERVER_DIRECT_TOOL_METHODS"] = "1"
    if shutdown_timeout is not None:
        os.environ["MCP_SERVER_SHUTDOWN_TIMEOUT"] = str(shutdown_timeout)

    config = ServerConfig.from_env()
    click.echo(f"Starting MCP server on port {config.port}", err=True)
    click.echo("Press Ctrl+C to stop", err=True)

    uvicorn.run(
        "example_mcp_server.app:create_app",
        factory=True,
        host=config.host,
        port=config.port,
        log_level=config.log_level.lower(),
        timeout_keep_alive=int(config.keep_alive_timeout),
        timeout_graceful_shutdown=int(config.shutdown_timeout),
    )


def _server_root(url: str) -> str:
    base = url.rstrip("/")
    if base.endswith("/mcp"):
        base = base[: -len("/mcp")]
    return base


@main.command()
@click.option("--url", default=None, help="MCP endpoint URL (default: $MCP_SERVER_URL)")
def health(url: str | None) -> None:
    """Check server health."""
    config = ClientConfig.from_env(base_url=url)
    health_url = f"{_server_root(config.base_url)}/health"

    async def check() -> None:
        try:
            async with httpx.AsyncClient(timeout=config.timeout) as client:
                response = await client.get(health_url)
                if response.status_code == 200:
                    click.echo(f"Server is healthy: {response.text}")
                else:
                    click.echo(f"Server returned {response.status_code}", err=True)
                    sys.exit(1)
        except httpx.ConnectError:
            click.echo(f"Cannot connect to server at {health_url}", err=True)
            sys.exit(1)

    asyncio.run(check())


@main.command()
@click.option("--url", default=None, help="MCP endpoint URL (default: $MCP_SERVER_URL)")
def info(url: str | None) -> None:
    """Show the server info payload (GET on the MCP endpoint)."""
    config = ClientConfig.from_env(base_url=url)

    async def fetch() -> None:
        try:
            async with httpx.AsyncClient(timeout=config.timeout) as client:
                response = await client.get(config.base_url)
                response.raise_for_status()
                click.echo(json.dumps(response.json(), indent=2))
        except httpx.ConnectError:
            click.echo(f"Cannot connect to server at {config.base_url}", err=True)
            sys.exit(1)
        except httpx.HTTPStatusError as e:
            click.echo(f"Server returned {e.response.status_code}", err=True)
            sys.exit(1)

    asyncio.run(fetch())


# =============================================================================
# Client
# =============================================================================


@main.command()
@click.argument("tool")
@click.option("--arg", "-a", "args", multiple=True, help="Tool argument as key=value (repeatable)")
@click.option("--url", default=None, help="MCP endpoint URL (default: $MCP_SERVER_URL)")
@click.option("--timeout", default=None, type=float, help="Request timeout in seconds")
@click.option("--json", "as_json", is_flag=True, help="Print the full result as JSON")
def call(tool: str, args: tuple[str, ...], url: str | None, timeout: float | None, as_json: bool) -> None:
    """Call one tool and print its result."""
    arguments = parse_arguments(args)
    config = ClientConfig.from_env(base_url=url, timeout=timeout)

    async def run() -> None:
        async with McpClient(config) as client:
            await client.initialize()
            result = await client.call_tool(tool, arguments)
        if as_json:
            click.echo(_dump(result))
        else:
            click.echo(result.first_text() or _dump(result))
        if result.isError:
            sys.exit(1)

    try:
        asyncio.run(run())
    except McpError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


async def run_demo(client: McpClient, echo: Callable[[str], Any] = click.echo) -> None:
    """Run the example sequence: initialize, tools, resources, prompts."""
    echo("=== Initializing Connection ===")
    init = await client.initialize()
    echo(f"Initialized successfully: {_dump(init)}\n")

    echo("=== Listing Tools ===")
    echo(f"Tools: {_dump(await client.list_tools())}\n")

    echo("=== Calling Echo Tool ===")
    result = await client.call_tool("echo", {"message": "Hello, MCP Server!"})
    echo(f"Echo result: {result.first_text()}\n")

    echo("=== Calling Add Tool ===")
    result = await client.call_tool("add", {"a": 42.5, "b": 57.5})
    echo(f"Add result: {result.first_text()}\n")

    echo("=== Calling Get Time Tool ===")
    result = await client.call_tool("get_time")
    echo(f"Time result: {result.first_text()}\n")

    echo("=== Listing Resources ===")
    echo(f"Resources: {_dump(await client.list_resources())}\n")

    echo("=== Reading Server Info Resource ===")
    contents = (await client.read_resource("server://info")).contents
    echo(f"Server info: {contents[0].text if contents else ''}\n")

    echo("=== Listing Prompts ===")
    echo(f"Prompts: {_dump(await client.list_prompts())}\n")

    echo("=== Getting Greeting Prompt ===")
    prompt = await client.get_prompt("greeting", {"name": "Alice"})
    echo(f"Greeting prompt: {prompt.messages[0].content.text if prompt.messages else ''}\n")

    echo("=== All operations completed successfully! ===")


@main.command()
@click.option("--url", default=None, help="MCP endpoint URL (default: $MCP_SERVER_URL)")
def demo(url: str | None) -> None:
    """Run the example client sequence against a running server."""
    config = ClientConfig.from_env(base_url=url)

    async def run() -> None:
        async with McpClient(config) as client:
            await run_demo(client)

    try:
        asyncio.run(run())
    except McpError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
