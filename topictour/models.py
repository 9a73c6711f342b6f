"""Pydantic models for the topic content pipeline."""

from typing import Any, Callable

from pydantic import BaseModel, ConfigDict, Field

Vec3 = tuple[float, float, float]


# --- Input models ---


class RawDocument(BaseModel):
    """One topic file as read from disk."""
    model_config = ConfigDict(frozen=True)

    source_id: str
    text: str


class ParsedDocument(BaseModel):
    """A topic file split into its metadata block and body."""
    source_id: str
    frontmatter: dict[str, Any] = Field(default_factory=dict)
    body: str = ""


class TopicFrontmatter(BaseModel):
    """Validated metadata block of a topic file."""
    id: str
    title: str
    position: Vec3
    look_at: Vec3 | None = None
    page_position: Vec3 | None = None
    anchor_id: str | None = None
    hud: str | None = None
    order: float | None = None


# --- Output models ---


class WayPoint(BaseModel):
    """A camera destination the choreographer can travel to."""
    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    position: Vec3
    look_at: Vec3 | None = None
    on_enter: Callable[[], None] | None = None


class Panel(BaseModel):
    """Content payload for an in-world page."""
    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    content: str
    fallback_target: Vec3
    anchor_id: str | None = None


class TopicBundle(BaseModel):
    """Ordered waypoints plus the panels that have body content."""
    waypoints: list[WayPoint] = Field(default_factory=list)
    panels: list[Panel] = Field(default_factory=list)
