"""Frame scheduler owned by the host application.

The host's render loop calls ``tick(now_ms)`` (or ``step(delta_ms)``) once
per frame. Navigation issued between ticks is picked up by the next tick:
the choreographer is always updated before the page renderer, so a page
activated by ``on_enter`` shows its new emphasis in that same frame.
"""

import logging

from topictour.camera.choreographer import Choreographer
from topictour.render.pages import PanelRenderer

logger = logging.getLogger(__name__)


class FrameScheduler:
    def __init__(self, choreographer: Choreographer, renderer: PanelRenderer) -> None:
        self.choreographer = choreographer
        self.renderer = renderer
        self.frames = 0
        self._last_ms: float | None = None

    def tick(self, now_ms: float) -> float:
        """Advance one frame at timestamp ``now_ms``. Returns the delta used."""
        delta = 0.0 if self._last_ms is None else max(0.0, now_ms - self._last_ms)
        self._last_ms = now_ms
        self.step(delta)
        return delta

    def step(self, delta_ms: float) -> None:
        self.choreographer.update(delta_ms)
        self.renderer.update()
        self.frames += 1

    def reset(self) -> None:
        """Forget the previous timestamp, e.g. after the loop was paused."""
        self._last_ms = None
