"""Example resources."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime

from ..mcp.models import ResourceDescriptor, TextResourceContents
from ..protocol.dispatch import HandlerContext
from .assets import GENERATE_ASSET_WIDGET, LIST_PRODUCTS_WIDGET, WidgetAssets
from .data import WIDGET_META, WIDGET_MIME_TYPE


class ServerInfoResource:
    """Plain-text server name, version and current time."""

    def __init__(
        self,
        server_name: str,
        server_version: str,
        clock: Callable[[], datetime] = lambda: datetime.now().astimezone(),
    ) -> None:
        self._name = server_name
        self._version = server_version
        self._clock = clock
        self.descriptor = ResourceDescriptor(
            uri="server://info",
            name="Server Information",
            description="Information about this MCP server",
            mimeType="text/plain",
        )

    async def read(self, uri: str, context: HandlerContext) -> list[TextResourceContents]:
        now = self._clock().isoformat(timespec="seconds")
        text = f"Server: {self._name}\nVersion: {self._version}\nTime: {now}"
        return [TextResourceContents(uri=uri, mimeType="text/plain", text=text)]


class WidgetResource:
    """Serves a widget HTML file as a skybridge resource."""

    def __init__(self, assets: WidgetAssets, filename: str, descriptor: ResourceDescriptor) -> None:
        self._assets = assets
        self._filename = filename
        self.descriptor = descriptor

    async def read(self, uri: str, context: HandlerContext) -> list[TextResourceContents]:
        html = await self._assets.read(self._filename)
        return [TextResourceContents(uri=uri, mimeType=WIDGET_MIME_TYPE, text=html, meta=WIDGET_META)]


def product_widget_resource(assets: WidgetAssets) -> WidgetResource:
    return WidgetResource(
        assets,
        LIST_PRODUCTS_WIDGET,
        ResourceDescriptor(
            uri="widget://list-products",
            name="Product Selection Widget",
            description="Interactive HTML widget for selecting products",
            mimeType=WIDGET_MIME_TYPE,
        ),
    )


def asset_widget_resource(assets: WidgetAssets) -> WidgetResource:
    return WidgetResource(
        assets,
        GENERATE_ASSET_WIDGET,
        ResourceDescriptor(
            uri="ui://widget/generate_asset.html",
            name="Asset Generation Widget",
            description="Interactive HTML widget for displaying generated assets (Figma-style)",
            mimeType=WIDGET_MIME_TYPE,
        ),
    )
