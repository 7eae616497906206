"""Parse and serialize markdown documents with YAML front-matter."""

import re

import yaml

from dirban.errors import ParseError

_FRONT_MATTER = re.compile(r"\A---\n(.*?)^---[ \t]*(?:\n|\Z)", re.DOTALL | re.MULTILINE)


def has_front_matter(text: str) -> bool:
    """True if text opens with a closed YAML front-matter block."""
    return text.startswith("---") and _FRONT_MATTER.match(text) is not None


def parse_front_matter(text: str, strict: bool = False) -> tuple[dict, str]:
    """Split text into (meta, body).

    The body is returned byte-for-byte as it follows the closing "---"
    line. Text without a closed front-matter block is all body. Invalid
    YAML gives an empty meta, or raises ParseError when strict is set.
    """
    if not text.startswith("---"):
        return {}, text

    match = _FRONT_MATTER.match(text)
    if not match:
        return {}, text

    body = text[match.end() :]
    try:
        meta = yaml.safe_load(match.group(1)) or {}
    except yaml.YAMLError as e:
        if strict:
            raise ParseError(f"Invalid front-matter: {e}") from e
        return {}, body

    if not isinstance(meta, dict):
        if strict:
            raise ParseError("Front-matter is not a mapping")
        return {}, body

    return meta, body


def serialize_front_matter(meta: dict, body: str) -> str:
    """Serialize meta as a YAML block followed by the unmodified body."""
    if not meta:
        return body
    dumped = yaml.safe_dump(meta, default_flow_style=False, sort_keys=False, allow_unicode=True)
    return f"---\n{dumped}---\n{body}"
