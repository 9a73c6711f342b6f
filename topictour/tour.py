"""Assemble the topic pipeline for a host application."""

import logging
from functools import partial
from typing import Callable

from topictour.camera.camera import Camera
from topictour.camera.choreographer import Choreographer
from topictour.config import Config, load_config
from topictour.content.builder import RenderTarget
from topictour.content.loader import load_documents
from topictour.content.source import BaseSource
from topictour.models import TopicBundle, WayPoint
from topictour.render.layout import TextMeasurer
from topictour.render.pages import AnchorResolver, PanelRenderer, no_anchors
from topictour.scheduler import FrameScheduler

logger = logging.getLogger(__name__)


def _chain(first: Callable[[], None] | None, second: Callable[[], None]) -> Callable[[], None]:
    def on_enter() -> None:
        if first is not None:
            first()
        second()
    return on_enter


class Tour:
    """Waypoints, pages and the scheduler that ticks them, wired together.

    Entering a waypoint runs its HUD callback and then marks the page with
    the same id active (clearing all pages when the topic has none).
    """

    def __init__(
        self,
        bundle: TopicBundle,
        camera: Camera,
        resolve_anchor: AnchorResolver = no_anchors,
        config: Config | None = None,
        measurer: TextMeasurer | None = None,
    ) -> None:
        self.config = config or Config()
        self.camera = camera
        self.bundle = bundle
        self.choreographer = Choreographer(camera, self.config.camera.duration_ms)
        self.renderer = PanelRenderer(camera, resolve_anchor, self.config.panel, measurer)
        self.scheduler = FrameScheduler(self.choreographer, self.renderer)

        for panel in bundle.panels:
            self.renderer.register_page(panel)
        for waypoint in bundle.waypoints:
            self.choreographer.add(self._wire(waypoint))

        logger.info(
            "Tour ready: %d waypoints, %d pages", len(bundle.waypoints), len(self.renderer),
        )

    @classmethod
    def load(
        cls,
        hud: RenderTarget,
        camera: Camera,
        source: BaseSource | None = None,
        resolve_anchor: AnchorResolver = no_anchors,
        config: Config | None = None,
        measurer: TextMeasurer | None = None,
    ) -> "Tour":
        config = config or load_config()
        bundle = load_documents(hud, source=source, config=config)
        return cls(bundle, camera, resolve_anchor, config, measurer)

    def _wire(self, waypoint: WayPoint) -> WayPoint:
        activate = partial(self.renderer.set_active_page, waypoint.id)
        return waypoint.model_copy(update={"on_enter": _chain(waypoint.on_enter, activate)})

    def start(self) -> None:
        """Go to the first waypoint."""
        self.choreographer.go_to(0)

    def settle(self, frame_ms: float = 16.0, max_frames: int = 10_000) -> int:
        """Step frames until the active transition finishes. Returns frame count."""
        frames = 0
        while self.choreographer.is_moving and frames < max_frames:
            self.scheduler.step(frame_ms)
            frames += 1
        return frames

    def close(self) -> None:
        self.renderer.dispose()
