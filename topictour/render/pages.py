"""In-world topic pages: registry, placement and visual emphasis.

Each registered panel owns a raster (the rendered page image) and a surface
(the world-space quad it is mapped onto). The renderer is the only owner of
both; they are released exactly once, either when the same id is registered
again or on ``dispose()``.
"""

import html
import logging
from dataclasses import dataclass, field
from typing import Callable

import numpy as np

from topictour.camera.camera import Camera, as_vec3
from topictour.config import PanelConfig
from topictour.errors import ResourceReleased
from topictour.models import Panel
from topictour.render.layout import TextMeasurer
from topictour.render.raster import RasterHandle, render_page

logger = logging.getLogger(__name__)

AnchorResolver = Callable[[str, np.ndarray], bool]


def no_anchors(anchor_id: str, out: np.ndarray) -> bool:
    return False


def lerp(a: float, b: float, t: float) -> float:
    return a + (b - a) * t


@dataclass(eq=False)
class PanelSurface:
    """World-space quad a page raster is mapped onto."""
    name: str
    width: float
    height: float
    position: np.ndarray = field(default_factory=lambda: np.zeros(3))
    rotation: np.ndarray = field(default_factory=lambda: np.eye(3))
    scale: float = 1.0
    opacity: float = 1.0
    released: bool = False

    def release(self) -> None:
        if self.released:
            raise ResourceReleased(f"surface {self.name} released twice")
        self.released = True


@dataclass(eq=False)
class ManagedPanel:
    id: str
    surface: PanelSurface
    raster: RasterHandle
    fallback_target: np.ndarray
    anchor_id: str | None = None
    is_active: bool = False
    anchor_missing: bool = False

    def release(self) -> None:
        self.raster.release()
        self.surface.release()


class PanelRenderer:
    """Keep topic pages rendered, placed and highlighted in the world.

    Args:
        camera: camera pages turn to face each frame.
        resolve_anchor: scene lookup ``(anchor_id, out) -> bool`` that fills
            ``out`` in place when the anchor exists this frame.
        config: page geometry and easing settings.
        measurer: text measurer used for layout (Pillow fonts by default).
    """

    def __init__(
        self,
        camera: Camera,
        resolve_anchor: AnchorResolver = no_anchors,
        config: PanelConfig | None = None,
        measurer: TextMeasurer | None = None,
    ) -> None:
        self.camera = camera
        self.resolve_anchor = resolve_anchor
        self.config = config or PanelConfig()
        self.measurer = measurer
        self._panels: dict[str, ManagedPanel] = {}
        self._anchor_position = np.zeros(3)

    def __len__(self) -> int:
        return len(self._panels)

    def __contains__(self, panel_id: str) -> bool:
        return panel_id in self._panels

    def get(self, panel_id: str) -> ManagedPanel | None:
        return self._panels.get(panel_id)

    def register_page(self, panel: Panel) -> None:
        content = panel.content.strip()
        if not content:
            return

        markup = f"<h3>{html.escape(panel.title)}</h3>{content}"
        raster = render_page(markup, self.config, self.measurer)
        surface = PanelSurface(
            name=f"topic-page-{panel.id}",
            width=raster.width * self.config.px_to_world,
            height=raster.height * self.config.px_to_world,
        )

        existing = self._panels.get(panel.id)
        if existing is not None:
            existing.release()
            surface.position = existing.surface.position
            surface.rotation = existing.surface.rotation
            surface.scale = existing.surface.scale
            surface.opacity = existing.surface.opacity
            existing.surface = surface
            existing.raster = raster
            existing.fallback_target = as_vec3(panel.fallback_target)
            existing.anchor_id = panel.anchor_id
            existing.anchor_missing = False
            logger.debug("Replaced page %s", panel.id)
            return

        self._panels[panel.id] = ManagedPanel(
            id=panel.id,
            surface=surface,
            raster=raster,
            fallback_target=as_vec3(panel.fallback_target),
            anchor_id=panel.anchor_id,
        )
        logger.debug("Registered page %s (%dx%d px)", panel.id, raster.width, raster.height)

    def set_active_page(self, panel_id: str | None) -> None:
        for panel in self._panels.values():
            panel.is_active = panel_id is not None and panel.id == panel_id

    def update(self) -> None:
        """Place, orient and ease every page. Call once per frame."""
        cfg = self.config
        for panel in self._panels.values():
            surface = panel.surface
            surface.position = self._placement(panel).copy()
            surface.rotation = self.camera.rotation.copy()

            target_opacity = cfg.active_opacity if panel.is_active else cfg.inactive_opacity
            target_scale = cfg.active_scale if panel.is_active else cfg.inactive_scale
            surface.opacity = lerp(surface.opacity, target_opacity, cfg.blend)
            surface.scale = lerp(surface.scale or 1.0, target_scale, cfg.blend)

    def _placement(self, panel: ManagedPanel) -> np.ndarray:
        if panel.anchor_id:
            if self.resolve_anchor(panel.anchor_id, self._anchor_position):
                panel.anchor_missing = False
                return self._anchor_position
            if not panel.anchor_missing:
                logger.debug(
                    "Anchor %s unresolved for page %s, using fallback",
                    panel.anchor_id, panel.id,
                )
                panel.anchor_missing = True
        return panel.fallback_target

    def dispose(self) -> None:
        """Release every page's resources and clear the registry."""
        for panel in self._panels.values():
            panel.release()
        count = len(self._panels)
        self._panels.clear()
        if count:
            logger.debug("Disposed %d pages", count)
