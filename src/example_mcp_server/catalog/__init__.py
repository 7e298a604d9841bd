"""Example catalog: static tools, resources and prompts."""

from __future__ import annotations

from ..mcp.server import McpServer
from .assets import WidgetAssets
from .prompts import CodeReviewPrompt, GreetingPrompt
from .resources import ServerInfoResource, asset_widget_resource, product_widget_resource
from .tools import AddTool, EchoTool, GenerateAssetTool, GetTimeTool, ListProductsTool


def register_examples(server: McpServer, assets: WidgetAssets | None = None) -> McpServer:
    """Register every example tool, resource and prompt on ``server``."""
    assets = assets or WidgetAssets()

    server.add_tool(EchoTool())
    server.add_tool(AddTool())
    server.add_tool(GetTimeTool())
    server.add_tool(ListProductsTool(assets))
    server.add_tool(GenerateAssetTool(assets))

    server.add_resource(ServerInfoResource(server.info.name, server.info.version))
    server.add_resource(product_widget_resource(assets))
    server.add_resource(asset_widget_resource(assets))

    server.add_prompt(GreetingPrompt())
    server.add_prompt(CodeReviewPrompt())
    return server


__all__ = [
    "WidgetAssets",
    "register_examples",
    "EchoTool",
    "AddTool",
    "GetTimeTool",
    "ListProductsTool",
    "GenerateAssetTool",
    "ServerInfoResource",
    "GreetingPrompt",
    "CodeReviewPrompt",
]
