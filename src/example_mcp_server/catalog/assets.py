"""Widget HTML loading.

Widgets are plain files under the configured UI directory. Tools degrade
to text-only results when a widget is missing; resources report a
handler fault instead.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from ..protocol.errors import HandlerFault

logger = logging.getLogger(__name__)

PACKAGED_UI_DIR = Path(__file__).resolve().parent.parent / "ui"

LIST_PRODUCTS_WIDGET = "list-products.html"
GENERATE_ASSET_WIDGET = "generate_asset.html"


class WidgetAssets:
    """Reads widget HTML from a directory (defaults to the packaged ui/)."""

    def __init__(self, ui_dir: Path | str | None = None) -> None:
        self.ui_dir = Path(ui_dir) if ui_dir else PACKAGED_UI_DIR

    def path(self, filename: str) -> Path:
        return self.ui_dir / filename

    async def load(self, filename: str) -> str | None:
        """Return the widget HTML, or None when it cannot be read."""
        try:
            return await asyncio.to_thread(self.path(filename).read_text, encoding="utf-8")
        except OSError as e:
            logger.warning(f"Widget {filename} unavailable, falling back to text: {e}")
            return None

    async def read(self, filename: str) -> str:
        """Return the widget HTML or raise HandlerFault."""
        html = await self.load(filename)
        if html is None:
            raise HandlerFault(f"failed to read widget HTML: {filename}")
        return html
