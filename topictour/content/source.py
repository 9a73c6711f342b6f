"""Sources that yield raw topic documents."""

import abc
import logging
from collections.abc import Iterable
from pathlib import Path

from topictour.config import ContentConfig
from topictour.models import RawDocument

logger = logging.getLogger(__name__)


class BaseSource(abc.ABC):
    """Base class for all topic document sources."""

    @abc.abstractmethod
    def documents(self) -> list[RawDocument]:
        """Return every raw document this source provides."""
        ...


class StaticSource(BaseSource):
    """Documents held in memory, keyed by source id."""

    def __init__(self, documents: Iterable[RawDocument] | dict[str, str]) -> None:
        if isinstance(documents, dict):
            documents = [RawDocument(source_id=k, text=v) for k, v in documents.items()]
        self._documents = list(documents)

    def documents(self) -> list[RawDocument]:
        return list(self._documents)


class DirectorySource(BaseSource):
    """Read topic files matching the configured patterns from a directory."""

    def __init__(
        self,
        topics_dir: Path,
        config: ContentConfig | None = None,
    ) -> None:
        self.topics_dir = topics_dir
        self.config = config or ContentConfig()

    def documents(self) -> list[RawDocument]:
        if not self.topics_dir.is_dir():
            logger.warning("Topics directory %s does not exist", self.topics_dir)
            return []

        paths: set[Path] = set()
        for pattern in self.config.patterns:
            paths.update(p for p in self.topics_dir.glob(pattern) if p.is_file())

        docs: list[RawDocument] = []
        for path in sorted(paths):
            size = path.stat().st_size
            if size > self.config.max_file_size:
                logger.warning("Skipping large topic file %s (%d bytes)", path, size)
                continue
            docs.append(RawDocument(
                source_id=str(path.relative_to(self.topics_dir)),
                text=path.read_text(encoding="utf-8", errors="replace"),
            ))

        logger.info("Read %d topic files from %s", len(docs), self.topics_dir)
        return docs
