"""Minimal perspective camera pose."""

import numpy as np

FORWARD = np.array([0.0, 0.0, -1.0])
WORLD_UP = np.array([0.0, 1.0, 0.0])


def as_vec3(value) -> np.ndarray:
    return np.array(value, dtype=np.float64).reshape(3)


class Camera:
    """Camera position plus orientation.

    ``rotation`` is a 3x3 matrix whose columns are the camera's right, up and
    backward axes in world space, so the camera looks down its local -Z.
    """

    def __init__(self, position=(0.0, 0.0, 0.0), fov: float = 75.0) -> None:
        self.position = as_vec3(position)
        self.rotation = np.eye(3)
        self.fov = float(fov)

    @property
    def forward(self) -> np.ndarray:
        return self.rotation @ FORWARD

    def look_target(self, distance: float = 1.0) -> np.ndarray:
        """Point ``distance`` units in front of the camera."""
        return self.position + self.forward * distance

    def look_at(self, target) -> None:
        """Orient the camera so its -Z axis points at ``target``."""
        back = self.position - as_vec3(target)
        norm = np.linalg.norm(back)
        if norm < 1e-12:
            return
        back = back / norm

        right = np.cross(WORLD_UP, back)
        if np.linalg.norm(right) < 1e-12:
            # Looking straight up or down; pick any perpendicular axis
            right = np.cross(np.array([0.0, 0.0, 1.0]), back)
        right = right / np.linalg.norm(right)
        up = np.cross(back, right)

        self.rotation = np.column_stack((right, up, back))

    def __repr__(self) -> str:
        x, y, z = self.position
        return f"Camera(position=({x:.3f}, {y:.3f}, {z:.3f}))"
