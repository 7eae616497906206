"""Description storage: markdown files with YAML front-matter.

Each description lives in descriptions/description_N.md:

    ---
    id: 3f9c2a1b7d4e
    title: Overview
    tags:
    - backend
    createdAt: '2026-01-01T00:00:00.000Z'
    updatedAt: '2026-01-01T00:00:00.000Z'
    ---
    Markdown body, kept byte-for-byte.

descriptions/descriptions.json is the display order, a JSON array of
file names. Lookups and deletes go through the stable id in the
front-matter; N only names the file and is never reused while a higher
number exists.
"""

import logging
from functools import cmp_to_key
from pathlib import PurePosixPath
from typing import Any

from dirban import layout
from dirban.constants import DESCRIPTION_TITLES, DESCRIPTIONS_INDEX
from dirban.errors import NotFound, ParseError, ValidationError
from dirban.ids import compare_ids, description_filename, description_number, max_id, new_description_id, next_id
from dirban.models import Description, Listing, later_than, utc_now
from dirban.parser import parse_front_matter, serialize_front_matter
from dirban.storage import Storage

logger = logging.getLogger(__name__)


def check_title(title: Any) -> str | None:
    """Validate a description title against the preset list."""
    if title is None or title == "":
        return None
    if title not in DESCRIPTION_TITLES:
        raise ValidationError(f"Invalid title {title!r}; expected one of {', '.join(DESCRIPTION_TITLES)}")
    return title


def check_tags(tags: Any) -> list[str]:
    """Validate tags and drop repeats, keeping first occurrences in order."""
    if tags is None:
        return []
    if not isinstance(tags, (list, tuple)) or not all(isinstance(t, str) for t in tags):
        raise ValidationError("tags must be a list of strings")
    seen: list[str] = []
    for tag in tags:
        if tag not in seen:
            seen.append(tag)
    return seen


def check_content(content: Any) -> str:
    if not isinstance(content, str):
        raise ValidationError("content must be a string")
    return content


def _by_number(names: list[str]) -> list[str]:
    return sorted(names, key=cmp_to_key(lambda a, b: compare_ids(description_number(a), description_number(b))))


class DescriptionService:
    """Ordered markdown descriptions of the cards under a Storage."""

    def __init__(self, storage: Storage):
        self.storage = storage

    # --- Index and files ---

    def _dir(self, board_id: str, card_id: str) -> tuple[str, ...]:
        if not self.storage.exists(*layout.card_file_parts(board_id, card_id)):
            raise NotFound(f"Card not found: {board_id}/{card_id}")
        return layout.descriptions_parts(board_id, card_id)

    def _read_index(self, parts: tuple[str, ...]) -> list[str]:
        try:
            data = self.storage.read_json(*parts, DESCRIPTIONS_INDEX)
        except NotFound:
            return []
        except ParseError as e:
            logger.warning("ignoring unreadable %s: %s", "/".join(parts), e)
            return []
        if not isinstance(data, list):
            logger.warning("ignoring %s: not a list", "/".join((*parts, DESCRIPTIONS_INDEX)))
            return []
        return [name for name in data if isinstance(name, str)]

    def _write_index(self, parts: tuple[str, ...], names: list[str]) -> None:
        self.storage.write_json(names, *parts, DESCRIPTIONS_INDEX)

    def _files_on_disk(self, parts: tuple[str, ...]) -> list[str]:
        try:
            entries = self.storage.list_dir(*parts)
        except NotFound:
            return []
        return [e.name for e in entries if e.is_file() and description_number(e.name) is not None]

    def _load(self, parts: tuple[str, ...], filename: str) -> Description:
        text = self.storage.read_text(*parts, layout.check_segment(filename, "description file"))
        meta, body = parse_front_matter(text, strict=True)
        tags = meta.get("tags") or []
        if not isinstance(tags, list):
            tags = [str(tags)]
        return Description(
            id=str(meta.get("id") or PurePosixPath(filename).stem),
            content=body,
            title=meta.get("title") or None,
            tags=[str(t) for t in tags],
            created_at=str(meta.get("createdAt") or ""),
            updated_at=str(meta.get("updatedAt") or ""),
            filename=filename,
        )

    def _save(self, parts: tuple[str, ...], description: Description) -> None:
        text = serialize_front_matter(description.meta(), description.content)
        self.storage.write_text(text, *parts, description.filename)

    def _listing(self, parts: tuple[str, ...]) -> tuple[Listing, list[str]]:
        index = self._read_index(parts)
        adopted = _by_number([name for name in self._files_on_disk(parts) if name not in index])

        listing = Listing()
        for filename in index + adopted:
            try:
                listing.items.append(self._load(parts, filename))
            except (NotFound, ParseError, ValidationError) as e:
                logger.warning("skipping description %s: %s", "/".join((*parts, filename)), e)
                listing.skip("/".join((*parts, filename)), str(e))
        return listing, index

    def _find(self, parts: tuple[str, ...], description_id: str) -> tuple[Description | None, list[str]]:
        listing, index = self._listing(parts)
        for description in listing:
            if description.id == description_id:
                return description, index
        return None, index

    def _remove(self, parts: tuple[str, ...], filename: str, index: list[str]) -> None:
        self.storage.remove(*parts, filename)
        if filename in index:
            self._write_index(parts, [name for name in index if name != filename])

    # --- Operations ---

    def get_descriptions(self, board_id: str, card_id: str) -> Listing:
        """List a card's descriptions in display order.

        Files named in the index but missing or unparseable are skipped
        and reported. Description files on disk that the index doesn't
        mention are appended in file-number order.
        """
        listing, _ = self._listing(self._dir(board_id, card_id))
        return listing

    def get_description(self, board_id: str, card_id: str, description_id: str) -> Description:
        description, _ = self._find(self._dir(board_id, card_id), description_id)
        if description is None:
            raise NotFound(f"Description not found: {description_id}")
        return description

    def add_description(
        self,
        board_id: str,
        card_id: str,
        content: str,
        title: str | None = None,
        tags: list[str] | None = None,
    ) -> Description:
        """Append a new description to a card."""
        parts = self._dir(board_id, card_id)
        content = check_content(content)
        title = check_title(title)
        tags = check_tags(tags)

        index = self._read_index(parts)
        numbers = [n for n in map(description_number, index + self._files_on_disk(parts)) if n is not None]
        filename = description_filename(next_id(max_id(numbers)))

        now = utc_now()
        description = Description(
            id=new_description_id(),
            content=content,
            title=title,
            tags=tags,
            created_at=now,
            updated_at=now,
            filename=filename,
        )
        self._save(parts, description)
        self._write_index(parts, [*index, filename])

        logger.info("added description %s to %s/%s", description.id, board_id, card_id)
        return description

    def update_description(
        self,
        board_id: str,
        card_id: str,
        description_id: str,
        content: str | None = None,
        title: str | None = None,
        tags: list[str] | None = None,
    ) -> Description:
        """Rewrite a description; omitted fields keep their current values."""
        parts = self._dir(board_id, card_id)
        description, _ = self._find(parts, description_id)
        if description is None:
            raise NotFound(f"Description not found: {description_id}")

        if content is not None:
            description.content = check_content(content)
        if title is not None:
            description.title = check_title(title)
        if tags is not None:
            description.tags = check_tags(tags)
        description.updated_at = later_than(description.updated_at or description.created_at)

        self._save(parts, description)
        return description

    def delete_description(self, board_id: str, card_id: str, description_id: str) -> bool:
        """Delete by stable id. Returns False if no such description exists."""
        parts = self._dir(board_id, card_id)
        description, index = self._find(parts, description_id)
        if description is None:
            return False
        self._remove(parts, description.filename, index)
        logger.info("deleted description %s of %s/%s", description_id, board_id, card_id)
        return True

    def delete_description_at(self, board_id: str, card_id: str, position: int) -> Description:
        """Delete the description at a position in the display order."""
        parts = self._dir(board_id, card_id)
        listing, index = self._listing(parts)
        if not isinstance(position, int) or not 0 <= position < len(listing):
            raise NotFound(f"No description at index {position}")
        description = listing.items[position]
        self._remove(parts, description.filename, index)
        logger.info("deleted description %s of %s/%s", description.id, board_id, card_id)
        return description

    def reorder_descriptions(self, board_id: str, card_id: str, ids: list[str]) -> Listing:
        """Move the given descriptions to the front, in the given order."""
        parts = self._dir(board_id, card_id)
        if not isinstance(ids, list):
            raise ValidationError("order must be a list of description ids")
        listing, index = self._listing(parts)
        by_id = {d.id: d.filename for d in listing}
        unknown = [i for i in ids if i not in by_id]
        if unknown:
            raise ValidationError(f"Unknown description ids: {', '.join(map(str, unknown))}")

        front = [by_id[i] for i in dict.fromkeys(ids)]
        rest = [name for name in index + [d.filename for d in listing] if name not in front]
        self._write_index(parts, list(dict.fromkeys(front + rest)))
        return self.get_descriptions(board_id, card_id)
