"""Tests for the topic file parser: delimiters, entries, block scalars and coercion."""

import logging

import pytest

from topictour.content.frontmatter import (
    coerce_value,
    parse_document,
    parse_entry,
    parse_frontmatter,
)
from topictour.errors import MalformedDocument


class TestParseEntry:
    def test_scalar_entry(self):
        entry, nxt = parse_entry(("id: intro",), 0)
        assert entry == ("id", "intro")
        assert nxt == 1

    def test_blank_line_is_skipped(self):
        entry, nxt = parse_entry(("   ", "id: x"), 0)
        assert entry is None
        assert nxt == 1

    def test_quoted_value_keeps_colon(self):
        entry, _ = parse_entry(('title: "Hello: World"',), 0)
        assert entry == ("title", "Hello: World")

    def test_single_quotes_no_escape_processing(self):
        entry, _ = parse_entry(("title: 'a\\nb'",), 0)
        assert entry == ("title", "a\\nb")

    def test_literal_block_preserves_newlines(self):
        lines = ("hud: |", "  line one", "", "  line two", "order: 2")
        entry, nxt = parse_entry(lines, 0)
        assert entry == ("hud", "line one\n\nline two")
        assert nxt == 4

    def test_folded_block_collapses_whitespace(self):
        lines = ("hud: >", "  folded   line", "    one", "  two")
        entry, nxt = parse_entry(lines, 0)
        assert entry == ("hud", "folded line one two")
        assert nxt == 4

    def test_block_stops_at_unindented_line(self):
        lines = ("hud: |", "\tTabbed", "title: Next")
        entry, nxt = parse_entry(lines, 0)
        assert entry == ("hud", "Tabbed")
        assert lines[nxt] == "title: Next"

    def test_empty_block_at_end(self):
        entry, nxt = parse_entry(("hud: |",), 0)
        assert entry == ("hud", "")
        assert nxt == 1

    def test_line_without_separator_is_malformed(self):
        with pytest.raises(MalformedDocument, match="invalid frontmatter entry"):
            parse_entry(("just words",), 0, "topics/a.html")

    def test_empty_key_is_malformed(self):
        with pytest.raises(MalformedDocument, match="invalid frontmatter key") as exc:
            parse_entry((": value",), 0, "topics/a.html")
        assert exc.value.source_id == "topics/a.html"


class TestCoerceValue:
    def test_json_array(self):
        assert coerce_value("[1.5, -2, 3e2]") == [1.5, -2, 300.0]

    def test_json_object(self):
        assert coerce_value('{"a": 1}') == {"a": 1}

    def test_invalid_json_falls_back_to_raw(self, caplog):
        with caplog.at_level(logging.WARNING, logger="topictour.content.frontmatter"):
            assert coerce_value("[1, 2,") == "[1, 2,"
        assert "Failed to parse JSON" in caplog.text

    def test_non_finite_json_rejected(self):
        assert coerce_value("[NaN, 1, 2]") == "[NaN, 1, 2]"

    def test_booleans(self):
        assert coerce_value("true") is True
        assert coerce_value("false") is False
        assert coerce_value("True") == "True"

    def test_quoted_number_stays_string(self):
        assert coerce_value('"42"') == "42"

    def test_numbers(self):
        assert coerce_value("42") == 42
        assert isinstance(coerce_value("42"), int)
        assert coerce_value("-0.25") == -0.25

    def test_non_finite_number_stays_string(self):
        assert coerce_value("inf") == "inf"
        assert coerce_value("nan") == "nan"

    def test_python_only_number_literals_stay_strings(self):
        assert coerce_value("1_000") == "1_000"
        assert coerce_value("\u0661\u0662") == "\u0661\u0662"
        assert coerce_value("0x10") == "0x10"
        assert coerce_value(".5") == 0.5
        assert coerce_value("1e3") == 1000.0

    def test_plain_string(self):
        assert coerce_value("hello world") == "hello world"
        assert coerce_value("") == ""


class TestParseDocument:
    def test_splits_frontmatter_and_body(self):
        doc = parse_document("a.html", "---\nid: a\ntitle: A\n---\n\n<p>Body</p>\n\n")
        assert doc.source_id == "a.html"
        assert doc.frontmatter == {"id": "a", "title": "A"}
        assert doc.body == "<p>Body</p>"

    def test_leading_whitespace_allowed(self):
        doc = parse_document("a.html", "\n\n  ---\nid: a\n---\nx")
        assert doc.frontmatter == {"id": "a"}

    def test_byte_order_mark_is_ignored(self):
        doc = parse_document("bom.html", "\ufeff---\nid: a\ntitle: A\n---\nBody")
        assert doc.frontmatter == {"id": "a", "title": "A"}
        assert doc.body == "Body"

    def test_crlf_line_endings(self):
        doc = parse_document("a.html", "---\r\nid: a\r\ntitle: A\r\n---\r\nBody\r\n")
        assert doc.frontmatter == {"id": "a", "title": "A"}
        assert doc.body == "Body"

    def test_missing_opening_delimiter(self):
        with pytest.raises(MalformedDocument, match="missing frontmatter delimiter"):
            parse_document("a.html", "id: a\n---\n")

    def test_missing_closing_delimiter(self):
        with pytest.raises(MalformedDocument, match="missing closing") as exc:
            parse_document("b.html", "---\nid: a\ntitle: A\n")
        assert "b.html" in str(exc.value)

    def test_vector_round_trip_is_exact(self):
        doc = parse_document(
            "a.html", "---\nposition: [0.1, 123456789.123456789, -1e-7]\n---\n",
        )
        assert doc.frontmatter["position"] == [0.1, 123456789.123456789, -1e-7]

    def test_later_keys_overwrite(self):
        assert parse_frontmatter(("id: a", "id: b")) == {"id": "b"}

    def test_empty_body(self):
        doc = parse_document("a.html", "---\nid: a\n---")
        assert doc.body == ""
