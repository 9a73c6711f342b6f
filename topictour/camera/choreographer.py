"""Animate a camera between topic waypoints.

The choreographer is a two-state machine. ``Idle`` carries nothing;
``Transitioning`` carries the interpolation fraction and both endpoints, so a
stale from/to pair can't outlive the transition that owns it.

Example::

    camera = Camera(position=(0, 0, 10))
    router = Choreographer(camera)
    for waypoint in bundle.waypoints:
        router.add(waypoint)
    router.go_to(0)

    # each frame
    router.update(delta_ms)
"""

import logging
from dataclasses import dataclass

import numpy as np

from topictour.camera.camera import FORWARD, Camera, as_vec3
from topictour.models import WayPoint

logger = logging.getLogger(__name__)

DEFAULT_DURATION_MS = 1200.0


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True, eq=False)
class Transitioning:
    t: float
    from_pos: np.ndarray
    to_pos: np.ndarray
    from_look: np.ndarray
    to_look: np.ndarray


ChoreographerState = Idle | Transitioning


def smoothstep(t: float) -> float:
    return t * t * (3 - 2 * t)


def lerp(a: np.ndarray, b: np.ndarray, e: float) -> np.ndarray:
    """Per-component lerp. Exact at both ends: e == 0 gives a, e == 1 gives b."""
    return (1.0 - e) * a + e * b


class Choreographer:
    """Move a camera between an ordered list of waypoints."""

    def __init__(self, camera: Camera, duration_ms: float = DEFAULT_DURATION_MS) -> None:
        self.camera = camera
        self._waypoints: list[WayPoint] = []
        self._index = 0
        self._state: ChoreographerState = Idle()
        self._duration_ms = DEFAULT_DURATION_MS
        self.set_duration(duration_ms)

    def add(self, waypoint: WayPoint) -> None:
        self._waypoints.append(waypoint)

    def set_duration(self, ms: float) -> None:
        if ms <= 0:
            raise ValueError(f"duration must be > 0, got {ms}")
        self._duration_ms = float(ms)

    @property
    def duration_ms(self) -> float:
        return self._duration_ms

    @property
    def waypoints(self) -> tuple[WayPoint, ...]:
        return tuple(self._waypoints)

    @property
    def current(self) -> WayPoint | None:
        if not self._waypoints:
            return None
        return self._waypoints[self._index]

    @property
    def active_index(self) -> int:
        return self._index

    @property
    def state(self) -> ChoreographerState:
        return self._state

    @property
    def is_moving(self) -> bool:
        return isinstance(self._state, Transitioning)

    def go_to(self, index: int) -> None:
        """Start a transition to ``waypoints[index]`` and fire its ``on_enter``.

        Out-of-range indices are ignored. An in-flight transition is dropped
        and the new one starts from the camera's live pose, including when
        ``index`` is already active.
        """
        if index < 0 or index >= len(self._waypoints):
            return

        waypoint = self._waypoints[index]
        self._index = index
        to_look = as_vec3(waypoint.look_at) if waypoint.look_at is not None else FORWARD.copy()
        self._state = Transitioning(
            t=0.0,
            from_pos=self.camera.position.copy(),
            to_pos=as_vec3(waypoint.position),
            from_look=self.camera.look_target(),
            to_look=to_look,
        )
        logger.debug("Transition to %s (%d/%d)", waypoint.id, index + 1, len(self._waypoints))

        if waypoint.on_enter is not None:
            waypoint.on_enter()

    def next(self) -> None:
        if not self._waypoints:
            return
        self.go_to(min(self._index + 1, len(self._waypoints) - 1))

    def prev(self) -> None:
        if not self._waypoints:
            return
        self.go_to(max(self._index - 1, 0))

    def update(self, delta_ms: float) -> None:
        """Advance the active transition. Call once per frame."""
        state = self._state
        if not isinstance(state, Transitioning):
            return

        t = min(1.0, state.t + delta_ms / self._duration_ms)
        e = smoothstep(t)

        self.camera.position = lerp(state.from_pos, state.to_pos, e)
        self.camera.look_at(lerp(state.from_look, state.to_look, e))

        if t >= 1.0:
            self._state = Idle()
        else:
            self._state = Transitioning(
                t=t,
                from_pos=state.from_pos,
                to_pos=state.to_pos,
                from_look=state.from_look,
                to_look=state.to_look,
            )
