"""Split topic files into a frontmatter block and a body.

The metadata block is a small YAML-like dialect: one ``key: value`` per line,
``|`` / ``>`` block scalars, and JSON for vectors and objects. Each line shape
is decoded by ``parse_entry``, a pure function over the line sequence, so
scalars, quoted values and blocks can be tested without a whole document.
"""

import json
import logging
import math
import re
from collections.abc import Sequence
from typing import Any

from topictour.errors import MalformedDocument
from topictour.models import ParsedDocument

logger = logging.getLogger(__name__)

DELIMITER = "---"
LINE_SPLIT = re.compile(r"\r?\n")
LEADING_INDENT = re.compile(r"^\s+")
LEADING_SPACE = re.compile(r"^[\s\ufeff]+")
DECIMAL = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)
INTEGER = re.compile(r"[+-]?\d+", re.ASCII)

Entry = tuple[str, Any]


def parse_document(source_id: str, text: str) -> ParsedDocument:
    """Parse one raw topic file.

    Raises:
        MalformedDocument: missing opening/closing delimiter or a bad entry.
    """
    # byte-order marks count as leading whitespace
    trimmed = LEADING_SPACE.sub("", text)
    if not trimmed.startswith(DELIMITER):
        raise MalformedDocument(source_id, "missing frontmatter delimiter")

    lines = LINE_SPLIT.split(trimmed)
    try:
        closing = lines.index(DELIMITER, 1)
    except ValueError:
        raise MalformedDocument(source_id, "missing closing frontmatter delimiter") from None

    frontmatter = parse_frontmatter(tuple(lines[1:closing]), source_id)
    body = "\n".join(lines[closing + 1:]).strip()
    return ParsedDocument(source_id=source_id, frontmatter=frontmatter, body=body)


def parse_frontmatter(lines: Sequence[str], source_id: str = "<frontmatter>") -> dict[str, Any]:
    """Fold ``parse_entry`` over the metadata lines. Later keys win."""
    data: dict[str, Any] = {}
    index = 0
    while index < len(lines):
        entry, index = parse_entry(lines, index, source_id)
        if entry is not None:
            key, value = entry
            data[key] = value
    return data


def parse_entry(
    lines: Sequence[str], index: int, source_id: str = "<frontmatter>",
) -> tuple[Entry | None, int]:
    """Decode the entry starting at ``lines[index]``.

    Returns:
        ``(entry, next_index)``; ``entry`` is None for blank lines.
    """
    raw_line = lines[index]
    if not raw_line.strip():
        return None, index + 1

    separator = raw_line.find(":")
    if separator == -1:
        raise MalformedDocument(source_id, f'invalid frontmatter entry "{raw_line}"')

    key = raw_line[:separator].strip()
    if not key:
        raise MalformedDocument(source_id, f'invalid frontmatter key "{raw_line}"')

    value = raw_line[separator + 1:].strip()
    if value in ("|", ">"):
        block_value, next_index = _read_block(lines, index + 1, folded=value == ">")
        return (key, block_value), next_index

    return (key, coerce_value(value)), index + 1


def _read_block(lines: Sequence[str], index: int, folded: bool) -> tuple[str, int]:
    block: list[str] = []
    while index < len(lines):
        candidate = lines[index]
        if not candidate.rstrip():
            block.append("")
            index += 1
            continue

        indent = LEADING_INDENT.match(candidate)
        if not indent:
            break

        block.append(candidate[indent.end():])
        index += 1

    if folded:
        return re.sub(r"\s+", " ", " ".join(block)).strip(), index
    return "\n".join(block), index


def _reject_constant(name: str) -> Any:
    raise ValueError(f"non-finite constant {name}")


def coerce_value(value: str) -> Any:
    """Coerce a scalar into JSON data, a string, a bool or a number."""
    if value.startswith("[") or value.startswith("{"):
        try:
            return json.loads(value, parse_constant=_reject_constant)
        except ValueError as e:
            logger.warning("Failed to parse JSON frontmatter value %r: %s", value, e)
            return value

    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        return value[1:-1]

    if value in ("true", "false"):
        return value == "true"

    number = _parse_number(value)
    if number is not None:
        return number

    return value


def _parse_number(value: str) -> int | float | None:
    # plain ASCII decimals only; int() would also take "1_000" or other digit scripts
    if INTEGER.fullmatch(value):
        return int(value)
    if not DECIMAL.fullmatch(value):
        return None
    number = float(value)
    return number if math.isfinite(number) else None
