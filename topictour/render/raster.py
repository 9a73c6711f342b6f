"""Rasterize laid-out page lines onto a rounded backdrop."""

import logging
from dataclasses import dataclass

from PIL import Image, ImageDraw

from topictour.config import PanelConfig
from topictour.errors import ResourceReleased
from topictour.render.layout import (
    FontSpec,
    Line,
    PillowMeasurer,
    TextMeasurer,
    content_height,
    extract_blocks,
    layout_blocks,
    load_font,
)

logger = logging.getLogger(__name__)

# --- Colors ---

BACKDROP = (12, 12, 20, 217)  # rgba(12, 12, 20, 0.85)
TEXT = (255, 255, 255, 255)


class RasterHandle:
    """Single-owner wrapper around a page image.

    ``release()`` frees the image exactly once; a second release, or reading
    the image afterwards, raises ResourceReleased.
    """

    def __init__(self, image: Image.Image, width: int, height: int) -> None:
        self._image: Image.Image | None = image
        self.width = width
        self.height = height

    @property
    def released(self) -> bool:
        return self._image is None

    @property
    def image(self) -> Image.Image:
        if self._image is None:
            raise ResourceReleased("raster used after release")
        return self._image

    def release(self) -> None:
        if self._image is None:
            raise ResourceReleased("raster released twice")
        self._image.close()
        self._image = None

    def __repr__(self) -> str:
        state = "released" if self.released else "live"
        return f"RasterHandle({self.width}x{self.height}, {state})"


@dataclass(frozen=True)
class PageLayout:
    lines: list[Line]
    width: int
    height: int


def layout_page(
    markup: str,
    config: PanelConfig | None = None,
    measurer: TextMeasurer | None = None,
) -> PageLayout:
    """Compute line breaks and raster size (in CSS-like pixels) for markup."""
    config = config or PanelConfig()
    measurer = measurer or PillowMeasurer()

    blocks = extract_blocks(markup)
    lines = layout_blocks(blocks, config.content_width, measurer)
    height = max(config.padding_y * 2 + content_height(lines), config.min_height)
    return PageLayout(lines=lines, width=config.canvas_width, height=int(round(height)))


def render_page(
    markup: str,
    config: PanelConfig | None = None,
    measurer: TextMeasurer | None = None,
) -> RasterHandle:
    """Render markup into a transparent RGBA image with a rounded backdrop.

    The handle's ``width``/``height`` are logical pixels; the image itself is
    scaled by the configured pixel ratio.
    """
    config = config or PanelConfig()
    layout = layout_page(markup, config, measurer)
    scale = config.effective_pixel_ratio

    img = Image.new(
        "RGBA",
        (round(layout.width * scale), round(layout.height * scale)),
        (0, 0, 0, 0),
    )
    draw = ImageDraw.Draw(img)
    draw.rounded_rectangle(
        [0, 0, img.width - 1, img.height - 1],
        radius=round(config.corner_radius * scale),
        fill=BACKDROP,
    )

    cursor_y = float(config.padding_y)
    for line in layout.lines:
        if line.text:
            font = load_font(FontSpec(round(line.font.size * scale), line.font.bold))
            draw.text(
                (config.padding_x * scale, cursor_y * scale),
                line.text,
                font=font,
                fill=TEXT,
            )
        cursor_y += line.line_height

    logger.debug("Rendered page %dx%d (%d lines)", layout.width, layout.height, len(layout.lines))
    return RasterHandle(img, layout.width, layout.height)
