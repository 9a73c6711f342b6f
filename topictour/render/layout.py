"""Lay out page markup into wrapped, measured lines.

Only a small block-level subset is understood: headings, list items and
body blocks (``p``/``div``/``section`` or bare text). Everything else is
descended into. Output depends only on the markup and the measurer, so
identical input gives identical line breaks and raster height.
"""

import re
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Protocol

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import PreformattedString
from PIL import ImageFont

WHITESPACE = re.compile(r"\s+")
HEADING_TAG = re.compile(r"^h[1-6]$")
SKIPPED_TAGS = ("script", "style", "template")
LIST_BULLET = "• "

# --- Fonts ---

_FONT_BOLD = "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf"
_FONT_REGULAR = "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf"


class BlockVariant(str, Enum):
    HEADING = "heading"
    LIST = "list"
    BODY = "body"


@dataclass(frozen=True)
class FontSpec:
    size: int
    bold: bool = False


@dataclass(frozen=True)
class Block:
    text: str
    variant: BlockVariant


@dataclass(frozen=True)
class Line:
    text: str
    font: FontSpec
    line_height: float


HEADING_FONT = FontSpec(28, bold=True)
BODY_FONT = FontSpec(18)

BLOCK_STYLES: dict[BlockVariant, tuple[FontSpec, float]] = {
    BlockVariant.HEADING: (HEADING_FONT, 36),
    BlockVariant.LIST: (BODY_FONT, 26),
    BlockVariant.BODY: (BODY_FONT, 28),
}


class TextMeasurer(Protocol):
    def measure(self, text: str, font: FontSpec) -> float: ...


@lru_cache(maxsize=32)
def load_font(spec: FontSpec) -> ImageFont.FreeTypeFont:
    path = _FONT_BOLD if spec.bold else _FONT_REGULAR
    try:
        return ImageFont.truetype(path, spec.size)
    except OSError:
        return ImageFont.load_default(size=spec.size)


class PillowMeasurer:
    """Measure advance width with Pillow's font metrics."""

    def measure(self, text: str, font: FontSpec) -> float:
        return load_font(font).getlength(text)


def _clean(text: str) -> str:
    return WHITESPACE.sub(" ", text).strip()


def extract_blocks(markup: str) -> list[Block]:
    """Classify each text-bearing element of ``markup`` into a block."""
    soup = BeautifulSoup(markup, "html5lib")
    for br in soup.find_all("br"):
        br.replace_with("\n")
    blocks: list[Block] = []

    def walk(node) -> None:
        if isinstance(node, PreformattedString):
            # comments, doctypes, CDATA
            return

        if isinstance(node, NavigableString):
            text = _clean(str(node))
            if text:
                blocks.append(Block(text, BlockVariant.BODY))
            return

        if not isinstance(node, Tag):
            return

        tag = node.name.lower()
        if tag in SKIPPED_TAGS:
            return

        if HEADING_TAG.match(tag):
            text = _clean(node.get_text())
            if text:
                blocks.append(Block(text, BlockVariant.HEADING))
            return

        if tag in ("ul", "ol"):
            for item in node.find_all(recursive=False):
                text = _clean(item.get_text())
                if text:
                    blocks.append(Block(LIST_BULLET + text, BlockVariant.LIST))
            return

        if tag in ("p", "div", "section"):
            text = _clean(node.get_text())
            if text:
                blocks.append(Block(text, BlockVariant.BODY))
            return

        for child in node.children:
            walk(child)

    for child in soup.children:
        walk(child)
    return blocks


def wrap_text(
    text: str,
    font: FontSpec,
    line_height: float,
    max_width: float,
    measurer: TextMeasurer,
) -> list[Line]:
    """Greedy word wrap. Breaks only between words; a word wider than
    ``max_width`` is kept whole on its own line."""
    lines: list[Line] = []
    current = ""

    for word in text.split():
        candidate = word if not current else f"{current} {word}"
        if current and measurer.measure(candidate, font) > max_width:
            lines.append(Line(current, font, line_height))
            current = word
        else:
            current = candidate

    if current:
        lines.append(Line(current, font, line_height))

    if not lines:
        lines.append(Line("", font, line_height))

    return lines


def layout_blocks(blocks: list[Block], max_width: float, measurer: TextMeasurer) -> list[Line]:
    """Wrap every block and put a half-line gap between consecutive blocks."""
    lines: list[Line] = []
    for i, block in enumerate(blocks):
        font, line_height = BLOCK_STYLES[block.variant]
        lines.extend(wrap_text(block.text, font, line_height, max_width, measurer))
        if i != len(blocks) - 1:
            lines.append(Line("", font, line_height * 0.5))
    return lines


def content_height(lines: list[Line]) -> float:
    return sum(line.line_height for line in lines)
