"""Configuration loading for topictour."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator


class ContentConfig(BaseModel):
    topics_dir: str = "topics"
    patterns: list[str] = Field(default_factory=lambda: ["*.html"])
    max_file_size: int = 500_000


class CameraConfig(BaseModel):
    duration_ms: float = 1200.0

    @field_validator("duration_ms")
    @classmethod
    def _positive(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("duration_ms must be > 0")
        return value


class PanelConfig(BaseModel):
    canvas_width: int = 600
    padding_x: int = 32
    padding_y: int = 24
    min_height: int = 128
    px_to_world: float = 0.004
    corner_radius: int = 20
    blend: float = 0.25  # exponential smoothing factor per update() call
    active_opacity: float = 1.0
    inactive_opacity: float = 0.35
    active_scale: float = 1.0
    inactive_scale: float = 0.85
    pixel_ratio: float = 1.0

    @property
    def content_width(self) -> int:
        return self.canvas_width - self.padding_x * 2

    @property
    def effective_pixel_ratio(self) -> float:
        return min(max(self.pixel_ratio, 1.0), 2.0)


class Config(BaseModel):
    content: ContentConfig = Field(default_factory=ContentConfig)
    camera: CameraConfig = Field(default_factory=CameraConfig)
    panel: PanelConfig = Field(default_factory=PanelConfig)

    @property
    def resolved_topics_dir(self) -> Path:
        """Resolve topics_dir relative to project root."""
        p = Path(self.content.topics_dir).expanduser()
        if p.is_absolute():
            return p
        return _project_root() / p


def _project_root() -> Path:
    """Return the topictour project root directory."""
    return Path(__file__).parent.parent


def load_config(config_path: Path | None = None) -> Config:
    """Load config from YAML file. Falls back to defaults if file missing."""
    if config_path is None:
        config_path = _project_root() / "config.yaml"

    if config_path.exists():
        raw: dict[str, Any] = yaml.safe_load(config_path.read_text()) or {}
        return Config(**raw)

    return Config()
