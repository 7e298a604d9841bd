"""Example tools.

Each tool is its own type implementing the McpTool protocol:
- name / description / input_schema attributes
- call(arguments, context) -> CallToolResult

Arguments reach ``call`` already checked against ``input_schema``.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from typing import Any

from ..mcp.models import CallToolResult, EmbeddedResource, TextContent, TextResourceContents
from ..mcp.schema import object_schema
from ..protocol.dispatch import HandlerContext
from ..protocol.params import get_number, get_string
from .assets import GENERATE_ASSET_WIDGET, LIST_PRODUCTS_WIDGET, WidgetAssets
from .data import ASSETS, PRODUCTS, WIDGET_META, WIDGET_MIME_TYPE


def _local_now() -> datetime:
    return datetime.now().astimezone()


class EchoTool:
    """Echoes back the input text."""

    name = "echo"
    description = "Echoes back the input text"
    input_schema = object_schema(
        {"message": {"type": "string", "description": "The message to echo back"}},
        required=["message"],
    )

    async def call(self, arguments: dict[str, Any], context: HandlerContext) -> CallToolResult:
        message = get_string(arguments, "message")
        return CallToolResult.text(f"Echo: {message}")


class AddTool:
    """Adds two numbers."""

    name = "add"
    description = "Adds two numbers together"
    input_schema = object_schema(
        {
            "a": {"type": "number", "description": "First number"},
            "b": {"type": "number", "description": "Second number"},
        },
        required=["a", "b"],
    )

    async def call(self, arguments: dict[str, Any], context: HandlerContext) -> CallToolResult:
        a = get_number(arguments, "a")
        b = get_number(arguments, "b")
        return CallToolResult.text(f"Result: {a + b:.2f}")


class GetTimeTool:
    """Reports the current server time (RFC 3339)."""

    name = "get_time"
    description = "Returns the current server time"
    input_schema = object_schema()

    def __init__(self, clock: Callable[[], datetime] = _local_now) -> None:
        self._clock = clock

    async def call(self, arguments: dict[str, Any], context: HandlerContext) -> CallToolResult:
        now = self._clock().isoformat(timespec="seconds")
        return CallToolResult.text(f"Current time: {now}")


def _widget_result(
    text: str,
    uri: str,
    html: str | None,
    structured: dict[str, Any],
) -> CallToolResult:
    """Text result, plus the embedded widget and structured content when available."""
    if html is None:
        return CallToolResult.text(text)
    resource = TextResourceContents(uri=uri, mimeType=WIDGET_MIME_TYPE, text=html, meta=WIDGET_META)
    return CallToolResult(
        content=[TextContent(text=text), EmbeddedResource(resource=resource)],
        structuredContent=structured,
    )


class ListProductsTool:
    """Shows the product catalog, with an interactive widget when available."""

    name = "list_products"
    description = "Display an interactive product selection widget"
    input_schema = object_schema()

    widget_uri = "widget://list-products"

    def __init__(self, assets: WidgetAssets) -> None:
        self._assets = assets

    @staticmethod
    def render_text(products: list[dict[str, Any]]) -> str:
        lines = ["🛍️ **Available Products**\n\n"]
        for i, p in enumerate(products, start=1):
            lines.append(f"**{i}. {p['name']}** - ${p['price']}\n")
            lines.append(f"   {p['description']}\n\n")
        lines.append("---\n💡 *Select a product to proceed with your order.*")
        return "".join(lines)

    async def call(self, arguments: dict[str, Any], context: HandlerContext) -> CallToolResult:
        text = self.render_text(PRODUCTS)
        html = await self._assets.load(LIST_PRODUCTS_WIDGET)
        return _widget_result(text, self.widget_uri, html, {"products": PRODUCTS})


class GenerateAssetTool:
    """Generates marketing asset previews (Figma-style)."""

    name = "generate_asset"
    description = (
        "Generates marketing and creative assets in Figma Buzz, including but not limited to "
        "social media posts, banners, digital ads, posters, hiring materials, event materials, "
        "one-pagers, or flyers, greeting cards, invitations, resumes"
    )
    input_schema = object_schema(
        {
            "asset_type": {
                "type": "string",
                "description": (
                    "Type of asset to generate (e.g., 'social_media_post', 'banner', "
                    "'business_card', 'flyer')"
                ),
            },
            "description": {"type": "string", "description": "Description of the asset requirements"},
        },
        required=["asset_type"],
    )

    widget_uri = "ui://widget/generate_asset.html"

    def __init__(self, assets: WidgetAssets) -> None:
        self._assets = assets

    @staticmethod
    def render_text(asset_type: str, description: str, assets: list[dict[str, Any]]) -> str:
        lines = ["🎨 **Asset Generation Complete**\n\n", f"**Type:** {asset_type}\n"]
        if description:
            lines.append(f"**Description:** {description}\n")
        lines.append("\n**Generated Assets:**\n\n")
        for i, a in enumerate(assets, start=1):
            lines.append(f"{a['icon']} **{i}. {a['name']}**\n")
            lines.append(f"   Format: {a['type']}\n\n")
        lines.append("---\n✅ *Assets are ready for download and editing.*")
        return "".join(lines)

    async def call(self, arguments: dict[str, Any], context: HandlerContext) -> CallToolResult:
        asset_type = get_string(arguments, "asset_type")
        if not asset_type:
            return CallToolResult.error("asset_type is required")
        description = get_string(arguments, "description", required=False, default="")

        text = self.render_text(asset_type, description, ASSETS)
        html = await self._assets.load(GENERATE_ASSET_WIDGET)
        structured = {
            "message": f"Figma assets created for: {asset_type}",
            "asset_type": asset_type,
            "description": description,
            "assets": ASSETS,
        }
        return _widget_result(text, self.widget_uri, html, structured)
