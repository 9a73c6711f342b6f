"""HUD overlay sink that topics push their markup into on entry."""

import logging

from topictour.config import PanelConfig
from topictour.render.layout import TextMeasurer, extract_blocks
from topictour.render.raster import RasterHandle, render_page

logger = logging.getLogger(__name__)


class OverlayHud:
    """Holds the markup currently shown in the overlay.

    An empty string hides the overlay. Every ``set`` call is recorded in
    ``history`` so hosts and tests can see what was shown and when.
    """

    def __init__(self) -> None:
        self.markup = ""
        self.history: list[str] = []

    @property
    def visible(self) -> bool:
        return bool(self.markup)

    def set(self, markup: str) -> None:
        self.markup = markup
        self.history.append(markup)
        logger.debug("HUD %s", "updated" if markup else "hidden")

    def text(self) -> str:
        """Plain text of the current markup, one block per line."""
        return "\n".join(block.text for block in extract_blocks(self.markup))

    def render(
        self,
        config: PanelConfig | None = None,
        measurer: TextMeasurer | None = None,
    ) -> RasterHandle | None:
        """Rasterize the overlay, or None when it is hidden.

        The caller owns the returned handle and must release it.
        """
        if not self.visible:
            return None
        return render_page(self.markup, config, measurer)
