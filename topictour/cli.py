"""CLI entry point for topictour."""

import argparse
import html
import logging
import sys
from pathlib import Path

from topictour.camera.camera import Camera
from topictour.config import Config, load_config
from topictour.content.loader import load_documents
from topictour.content.source import DirectorySource
from topictour.errors import TopicError
from topictour.hud import OverlayHud
from topictour.render.raster import render_page
from topictour.tour import Tour

logger = logging.getLogger(__name__)


def _fmt(vec) -> str:
    return "(" + ", ".join(f"{float(v):.3f}" for v in vec) + ")"


def _source(args: argparse.Namespace, config: Config) -> DirectorySource:
    topics_dir = Path(args.topics_dir) if args.topics_dir else config.resolved_topics_dir
    return DirectorySource(topics_dir, config.content)


def _cmd_check(args: argparse.Namespace, config: Config) -> int:
    bundle = load_documents(OverlayHud(), source=_source(args, config), config=config)
    print(f"Waypoints ({len(bundle.waypoints)}):")
    for i, wp in enumerate(bundle.waypoints):
        look = _fmt(wp.look_at) if wp.look_at is not None else "-"
        print(f"  {i:>3}  {wp.id}: {wp.title}  pos={_fmt(wp.position)} look={look}")
    print(f"Pages ({len(bundle.panels)}):")
    for panel in bundle.panels:
        anchor = f" anchor={panel.anchor_id}" if panel.anchor_id else ""
        print(f"  {panel.id}: fallback={_fmt(panel.fallback_target)}{anchor}")
    return 0


def _cmd_render(args: argparse.Namespace, config: Config) -> int:
    bundle = load_documents(OverlayHud(), source=_source(args, config), config=config)
    out_dir = Path(args.out)
    out_dir.mkdir(parents=True, exist_ok=True)

    for panel in bundle.panels:
        raster = render_page(f"<h3>{html.escape(panel.title)}</h3>{panel.content}", config.panel)
        try:
            path = out_dir / f"{panel.id}.png"
            raster.image.save(path)
            print(f"  {path} ({raster.width}x{raster.height})")
        finally:
            raster.release()
    print(f"\nRendered {len(bundle.panels)} pages to {out_dir}")
    return 0


def _cmd_walk(args: argparse.Namespace, config: Config) -> int:
    hud = OverlayHud()
    camera = Camera(position=(0.0, 0.0, 10.0))
    tour = Tour.load(hud, camera, source=_source(args, config), config=config)
    try:
        choreographer = tour.choreographer
        for index in range(len(choreographer.waypoints)):
            choreographer.go_to(index)
            for _ in range(args.frames):
                tour.scheduler.step(args.frame_ms)
            current = choreographer.current
            state = "moving" if choreographer.is_moving else "arrived"
            print(f"[{index}] {current.id}: camera={_fmt(camera.position)} ({state})")
            text = hud.text()
            if text:
                for line in text.splitlines():
                    print(f"      {line}")
    finally:
        tour.close()
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(description="Topic tour content pipeline")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument("--config", type=str, default=None, help="Path to config.yaml")
    sub = parser.add_subparsers(dest="command")

    # check command
    check_parser = sub.add_parser("check", help="Validate topic files and list waypoints")
    check_parser.add_argument(
        "topics_dir", nargs="?",
        help="Directory of topic files. Defaults to content.topics_dir from config.",
    )

    # render command
    render_parser = sub.add_parser("render", help="Rasterize every topic page to PNG")
    render_parser.add_argument("topics_dir", nargs="?", help="Directory of topic files")
    render_parser.add_argument("--out", required=True, help="Output directory for PNG files")

    # walk command
    walk_parser = sub.add_parser("walk", help="Step the camera through every waypoint")
    walk_parser.add_argument("topics_dir", nargs="?", help="Directory of topic files")
    walk_parser.add_argument("--frames", type=int, default=90, help="Frames per waypoint")
    walk_parser.add_argument("--frame-ms", type=float, default=16.0, help="Milliseconds per frame")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = load_config(Path(args.config) if args.config else None)

    commands = {
        "check": _cmd_check,
        "render": _cmd_render,
        "walk": _cmd_walk,
    }
    command = commands.get(args.command)
    if command is None:
        parser.print_help()
        return

    try:
        status = command(args, config)
    except TopicError as e:
        logger.error("Failed to load topics: %s", e)
        sys.exit(1)
    sys.exit(status)


if __name__ == "__main__":
    main()
