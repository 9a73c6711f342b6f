"""Loading orchestrator: source -> parser -> builder."""

import logging

from topictour.config import Config, load_config
from topictour.content.builder import RenderTarget, build
from topictour.content.frontmatter import parse_document
from topictour.content.source import BaseSource, DirectorySource
from topictour.models import TopicBundle

logger = logging.getLogger(__name__)


def load_documents(
    hud_sink: RenderTarget,
    source: BaseSource | None = None,
    config: Config | None = None,
) -> TopicBundle:
    """Load every topic document and materialize waypoints and panels.

    Each waypoint's ``on_enter`` pushes its HUD markup to ``hud_sink``
    (an empty string when the topic has none).

    Raises:
        MalformedDocument: any document is invalid. Nothing is loaded.
        DuplicateIdentifier: two documents share an id. Nothing is loaded.
    """
    if source is None:
        config = config or load_config()
        source = DirectorySource(config.resolved_topics_dir, config.content)

    raw_documents = source.documents()
    parsed = [parse_document(doc.source_id, doc.text) for doc in raw_documents]
    bundle = build(parsed, hud_sink)

    logger.info("Loaded %d topics", len(bundle.waypoints))
    return bundle
