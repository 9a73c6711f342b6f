"""Exceptions raised while loading topics and managing panel resources."""


class TopicError(Exception):
    """Base class for all topictour errors."""


class MalformedDocument(TopicError):
    """A topic file could not be parsed or failed validation."""

    def __init__(self, source_id: str, reason: str) -> None:
        super().__init__(f"{source_id}: {reason}")
        self.source_id = source_id
        self.reason = reason


class DuplicateIdentifier(TopicError):
    """Two topic files declare the same id."""

    def __init__(self, topic_id: str, first_source: str, second_source: str) -> None:
        super().__init__(
            f"Duplicate topic id {topic_id!r} in {second_source} "
            f"(already declared by {first_source})"
        )
        self.topic_id = topic_id
        self.first_source = first_source
        self.second_source = second_source


class ResourceReleased(TopicError):
    """A raster or surface handle was released twice or used after release."""
