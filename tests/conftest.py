"""Shared test fixtures for topictour tests."""

import textwrap

import pytest

from topictour.camera.camera import Camera
from topictour.hud import OverlayHud


class FixedMeasurer:
    """Every character advances ``advance`` pixels, whatever the font."""

    def __init__(self, advance: float = 10.0) -> None:
        self.advance = advance
        self.calls = 0

    def measure(self, text, font) -> float:
        self.calls += 1
        return len(text) * self.advance


def topic_text(frontmatter: str, body: str = "") -> str:
    """Build a topic file from a dedented frontmatter block and a body."""
    return f"---\n{textwrap.dedent(frontmatter).strip()}\n---\n{body}"


@pytest.fixture()
def make_topic():
    return topic_text


@pytest.fixture()
def measurer():
    return FixedMeasurer()


@pytest.fixture()
def hud():
    return OverlayHud()


@pytest.fixture()
def camera():
    return Camera(position=(0.0, 0.0, 10.0))


@pytest.fixture()
def topic_files():
    """Three valid topics: one with a page, one anchored, one HUD-only."""
    return {
        "intro.html": topic_text(
            """
            id: intro
            title: Introduction
            position: [0, 5, 10]
            lookAt: [0, 0, 0]
            order: 1
            hud: |
              First line
              Second line
            """,
            "<p>Welcome to the tour.</p>",
        ),
        "tower.html": topic_text(
            """
            id: tower
            title: Tower
            position: [10, 5, 10]
            anchorId: tower-top
            order: 2
            """,
            "Thirty beams.\n\nOne full turn.",
        ),
        "outro.html": topic_text(
            """
            id: outro
            title: Outro
            position: [0, 8, 20]
            hud: Goodbye
            """,
        ),
    }


@pytest.fixture()
def topics_dir(tmp_path, topic_files):
    """topic_files written to a temp directory."""
    d = tmp_path / "topics"
    d.mkdir()
    for name, text in topic_files.items():
        (d / name).write_text(text)
    return d
