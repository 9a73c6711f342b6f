"""Turn parsed topic documents into ordered waypoints and panels."""

import logging
import math
from collections.abc import Sequence
from typing import Any, Protocol

from topictour.content.markup import format_markup
from topictour.errors import DuplicateIdentifier, MalformedDocument
from topictour.models import (
    Panel,
    ParsedDocument,
    TopicBundle,
    TopicFrontmatter,
    Vec3,
    WayPoint,
)

logger = logging.getLogger(__name__)


class RenderTarget(Protocol):
    """Overlay that shows a waypoint's HUD markup. Empty string hides it."""

    def set(self, markup: str) -> None: ...


def _is_number(value: Any) -> bool:
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        # JSON integers beyond float range
        return False


def _vector(data: dict[str, Any], key: str, source_id: str, required: bool) -> Vec3 | None:
    if key not in data:
        if required:
            raise MalformedDocument(source_id, f"must supply numeric {key} [x, y, z]")
        return None

    value = data[key]
    if not isinstance(value, list) or len(value) != 3 or not all(_is_number(v) for v in value):
        if required:
            raise MalformedDocument(source_id, f"must supply numeric {key} [x, y, z]")
        raise MalformedDocument(source_id, f"has invalid {key}; expected numeric [x, y, z]")
    return (value[0], value[1], value[2])


def validate_frontmatter(data: dict[str, Any], source_id: str) -> TopicFrontmatter:
    """Check required keys and value shapes of one frontmatter block.

    Raises:
        MalformedDocument: naming the source and the violated constraint.
    """
    if not isinstance(data.get("id"), str):
        raise MalformedDocument(source_id, "missing a string id")

    if not isinstance(data.get("title"), str):
        raise MalformedDocument(source_id, "missing a string title")

    position = _vector(data, "position", source_id, required=True)
    look_at = _vector(data, "lookAt", source_id, required=False)
    page_position = _vector(data, "pagePosition", source_id, required=False)

    if "anchorId" in data and not isinstance(data["anchorId"], str):
        raise MalformedDocument(source_id, "has invalid anchorId; expected string identifier")

    if "hud" in data and not isinstance(data["hud"], str):
        raise MalformedDocument(source_id, "has invalid hud; expected multiline string")

    if "order" in data and not _is_number(data["order"]):
        raise MalformedDocument(source_id, "has invalid order; expected a number")

    return TopicFrontmatter(
        id=data["id"],
        title=data["title"],
        position=position,
        look_at=look_at,
        page_position=page_position,
        anchor_id=data.get("anchorId"),
        hud=data.get("hud"),
        order=data.get("order"),
    )


def title_sort_key(title: str) -> tuple[str, str]:
    """Case-insensitive primary order, lowercase first on ties."""
    return (title.casefold(), title.swapcase())


def sort_key(meta: TopicFrontmatter) -> tuple[float, tuple[str, str]]:
    order = meta.order if meta.order is not None else math.inf
    return (order, title_sort_key(meta.title))


def _hud_callback(target: RenderTarget, markup: str):
    def on_enter() -> None:
        target.set(markup)
    return on_enter


def build(documents: Sequence[ParsedDocument], render_target: RenderTarget) -> TopicBundle:
    """Validate, order and materialize every parsed document.

    All-or-nothing: the first invalid document or duplicate id aborts the
    whole build and nothing is returned.
    """
    validated: list[tuple[TopicFrontmatter, ParsedDocument]] = []
    seen: dict[str, str] = {}
    for doc in documents:
        meta = validate_frontmatter(doc.frontmatter, doc.source_id)
        if meta.id in seen:
            raise DuplicateIdentifier(meta.id, seen[meta.id], doc.source_id)
        seen[meta.id] = doc.source_id
        validated.append((meta, doc))

    validated.sort(key=lambda pair: sort_key(pair[0]))

    bundle = TopicBundle()
    for meta, doc in validated:
        hud_markup = format_markup(meta.hud) if meta.hud else ""
        bundle.waypoints.append(WayPoint(
            id=meta.id,
            title=meta.title,
            position=meta.position,
            look_at=meta.look_at,
            on_enter=_hud_callback(render_target, hud_markup),
        ))

        body = doc.body.strip()
        if not body:
            continue
        fallback = meta.page_position or meta.look_at or meta.position
        bundle.panels.append(Panel(
            id=meta.id,
            title=meta.title,
            content=format_markup(body),
            fallback_target=fallback,
            anchor_id=meta.anchor_id,
        ))

    logger.info(
        "Built %d waypoints and %d panels from %d documents",
        len(bundle.waypoints), len(bundle.panels), len(documents),
    )
    return bundle
