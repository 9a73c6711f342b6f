"""Camera pose and waypoint choreography."""

from topictour.camera.camera import Camera
from topictour.camera.choreographer import Choreographer, Idle, Transitioning

__all__ = ["Camera", "Choreographer", "Idle", "Transitioning"]
