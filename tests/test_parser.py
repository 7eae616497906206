"""Tests for YAML front-matter parsing."""

import pytest

from dirban.errors import ParseError
from dirban.parser import has_front_matter, parse_front_matter, serialize_front_matter


def test_parse_front_matter():
    meta, body = parse_front_matter("---\ntitle: Overview\ntags:\n- api\n---\nHello\n")
    assert meta == {"title": "Overview", "tags": ["api"]}
    assert body == "Hello\n"


def test_parse_no_front_matter():
    assert parse_front_matter("Just text") == ({}, "Just text")


def test_parse_unclosed_front_matter_is_body():
    text = "---\ntitle: x\nno closing line"
    assert parse_front_matter(text) == ({}, text)


def test_parse_dashes_inside_line_do_not_close():
    meta, body = parse_front_matter("---\nnote: a---b\n---\nbody")
    assert meta == {"note": "a---b"}
    assert body == "body"


def test_parse_body_keeps_leading_and_trailing_whitespace():
    meta, body = parse_front_matter("---\nid: x\n---\n\n  indented\n\n\n")
    assert meta == {"id": "x"}
    assert body == "\n  indented\n\n\n"


def test_parse_body_with_horizontal_rule():
    meta, body = parse_front_matter("---\nid: x\n---\nabove\n---\nbelow\n")
    assert body == "above\n---\nbelow\n"


def test_parse_invalid_yaml_lenient():
    meta, body = parse_front_matter("---\nkey: [unclosed\n---\nbody")
    assert meta == {}
    assert body == "body"


def test_parse_invalid_yaml_strict():
    with pytest.raises(ParseError):
        parse_front_matter("---\nkey: [unclosed\n---\nbody", strict=True)


def test_parse_non_mapping_strict():
    with pytest.raises(ParseError):
        parse_front_matter("---\n- a\n- b\n---\nbody", strict=True)


def test_serialize_empty_meta_is_body():
    assert serialize_front_matter({}, "body") == "body"


def test_serialize_keeps_key_order():
    text = serialize_front_matter({"id": "a", "title": None, "tags": []}, "x")
    assert text == "---\nid: a\ntitle: null\ntags: []\n---\nx"


@pytest.mark.parametrize(
    "body",
    ["", "plain", "\n\nleading newlines", "trailing\n\n", "---\nlooks like front-matter\n---\n", "ünïcode ✓\n"],
)
def test_round_trip_body_exact(body):
    meta = {"id": "abc", "createdAt": "2026-01-01T00:00:00.000Z"}
    parsed_meta, parsed_body = parse_front_matter(serialize_front_matter(meta, body), strict=True)
    assert parsed_body == body
    assert parsed_meta == meta


def test_has_front_matter():
    assert has_front_matter("---\na: 1\n---\n")
    assert not has_front_matter("# Title")
    assert not has_front_matter("---\nnever closed")
