"""Normalize HUD and page text into paragraph markup."""

import re

ELEMENT_TAG = re.compile(r"<[a-z][^>]*>", re.IGNORECASE)
PARAGRAPH_BREAK = re.compile(r"\n{2,}")


def has_markup(text: str) -> bool:
    return ELEMENT_TAG.search(text) is not None


def format_markup(value: str) -> str:
    """Wrap plain text into ``<p>`` blocks; existing markup passes through.

    Double newlines separate paragraphs, single newlines become ``<br>``.
    Empty input yields an empty string, never an empty container.
    """
    trimmed = value.strip()
    if not trimmed:
        return ""

    if has_markup(trimmed):
        return trimmed

    paragraphs = []
    for block in PARAGRAPH_BREAK.split(trimmed):
        lines = [line.strip() for line in block.split("\n")]
        joined = "<br>".join(line for line in lines if line)
        if joined:
            paragraphs.append(joined)

    return "".join(f"<p>{block}</p>" for block in paragraphs)
