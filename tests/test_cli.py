"""Tests for configuration loading and the CLI commands."""

import sys

import pytest
from pydantic import ValidationError

from topictour import cli
from topictour.config import Config, load_config


class TestConfig:
    def test_defaults_when_missing(self, tmp_path):
        config = load_config(tmp_path / "missing.yaml")
        assert config.camera.duration_ms == 1200
        assert config.panel.canvas_width == 600
        assert config.content.patterns == ["*.html"]

    def test_loads_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(
            "camera:\n  duration_ms: 800\n"
            "panel:\n  blend: 0.5\n"
            "content:\n  topics_dir: /srv/topics\n"
        )
        config = load_config(path)
        assert config.camera.duration_ms == 800
        assert config.panel.blend == 0.5
        assert str(config.resolved_topics_dir) == "/srv/topics"

    def test_relative_topics_dir_resolves_to_project_root(self):
        assert Config().resolved_topics_dir.name == "topics"
        assert Config().resolved_topics_dir.is_absolute()

    def test_rejects_non_positive_duration(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("camera:\n  duration_ms: 0\n")
        with pytest.raises(ValidationError):
            load_config(path)


def _run(monkeypatch, *argv):
    monkeypatch.setattr(sys, "argv", ["topictour", *argv])
    with pytest.raises(SystemExit) as exc:
        cli.main()
    return exc.value.code


class TestCLI:
    def test_check_lists_topics(self, topics_dir, monkeypatch, capsys):
        assert _run(monkeypatch, "check", str(topics_dir)) == 0
        out = capsys.readouterr().out
        assert "Waypoints (3):" in out
        assert "intro: Introduction" in out
        assert "Pages (2):" in out
        assert "anchor=tower-top" in out

    def test_check_fails_on_duplicate(self, topics_dir, make_topic, monkeypatch):
        (topics_dir / "dup.html").write_text(make_topic("id: intro\ntitle: X\nposition: [0,0,0]"))
        assert _run(monkeypatch, "check", str(topics_dir)) == 1

    def test_render_writes_pngs(self, topics_dir, tmp_path, monkeypatch):
        out_dir = tmp_path / "out"
        assert _run(monkeypatch, "render", str(topics_dir), "--out", str(out_dir)) == 0
        assert sorted(p.name for p in out_dir.iterdir()) == ["intro.png", "tower.png"]

    def test_walk_visits_every_waypoint(self, topics_dir, monkeypatch, capsys):
        assert _run(monkeypatch, "walk", str(topics_dir), "--frames", "100") == 0
        out = capsys.readouterr().out
        assert "[0] intro: camera=(0.000, 5.000, 10.000) (arrived)" in out
        assert "[2] outro" in out
        assert "Goodbye" in out

    def test_no_command_prints_help(self, monkeypatch, capsys):
        monkeypatch.setattr(sys, "argv", ["topictour"])
        cli.main()
        assert "usage" in capsys.readouterr().out
