"""Card storage: one directory per card holding card.json and descriptions/."""

import logging
from functools import cmp_to_key
from typing import Any

from dirban import layout
from dirban.constants import DEFAULT_STATUS, STATUSES
from dirban.errors import NotFound, ParseError, ValidationError
from dirban.ids import compare_ids, is_numeric_id, new_card_id
from dirban.models import Card, CardFolder, Codebase, Listing, later_than, utc_now
from dirban.storage import Storage

logger = logging.getLogger(__name__)

_CARD_KEYS = {"id", "title", "status", "assignee", "codebase", "createdAt", "updatedAt"}

# Fields a caller may never overwrite through an update
_PROTECTED = ("id", "createdAt")


def _check_status(status: Any) -> str:
    if status not in STATUSES:
        raise ValidationError(f"Invalid status {status!r}; expected one of {', '.join(STATUSES)}")
    return status


def _check_assignee(assignee: Any) -> str:
    if not isinstance(assignee, str):
        raise ValidationError("assignee must be a string")
    return assignee


def _check_codebase(codebase: Any) -> dict:
    if codebase is None:
        return {}
    if not isinstance(codebase, dict):
        raise ValidationError("codebase must be an object with repo and commit")
    return codebase


class CardService:
    """Create, read, update and delete cards of the boards under a Storage."""

    def __init__(self, storage: Storage):
        self.storage = storage

    def _require_board(self, board_id: str) -> dict:
        return layout.load_board_config(self.storage, board_id)

    def _set_membership(self, board_id: str, card_id: str, member: bool) -> None:
        """Add or remove card_id in the board's display order."""
        try:
            config = layout.load_board_config(self.storage, board_id)
        except (NotFound, ParseError) as e:
            logger.warning("cannot update card order of %s: %s", board_id, e)
            return
        order = [c["id"] if isinstance(c, dict) else str(c) for c in config.get("cards") or []]
        if member and card_id not in order:
            order.append(card_id)
        elif not member and card_id in order:
            order.remove(card_id)
        else:
            return
        config["cards"] = order
        layout.save_board_config(self.storage, board_id, config)

    def _load(self, board_id: str, card_id: str) -> Card:
        parts = layout.card_file_parts(board_id, card_id)
        try:
            data = self.storage.read_json(*parts)
        except NotFound:
            raise NotFound(f"Card not found: {board_id}/{card_id}")
        if not isinstance(data, dict):
            raise ParseError(f"card.json of {card_id} is not an object")
        # The directory name is the card's id, whatever card.json claims
        data["id"] = card_id
        try:
            return Card.from_dict(data)
        except (TypeError, ValueError, AttributeError) as e:
            raise ParseError(f"Malformed card.json for {card_id}: {e}") from e

    def _folder(self, board_id: str, card: Card) -> CardFolder:
        return CardFolder(id=card.id, card=card, path=layout.card_path(board_id, card.id))

    def card_path(self, board_id: str, card_id: str) -> str:
        return layout.card_path(board_id, card_id)

    def create_card(self, board_id: str, fields: dict) -> CardFolder:
        """Create a card on a board and provision its descriptions directory."""
        self._require_board(board_id)

        title = fields.get("title")
        if not isinstance(title, str) or not title.strip():
            raise ValidationError("title is required")
        title = title.strip()

        status = _check_status(fields.get("status") or DEFAULT_STATUS)
        assignee = _check_assignee(fields.get("assignee") or "")
        codebase = Codebase.from_dict(_check_codebase(fields.get("codebase")))

        card_id = new_card_id(lambda cid: self.storage.exists(*layout.card_parts(board_id, cid)))
        now = utc_now()
        extra = {k: v for k, v in fields.items() if k not in _CARD_KEYS}
        card = Card(
            id=card_id,
            title=title,
            status=status,
            assignee=assignee,
            codebase=codebase,
            created_at=now,
            updated_at=now,
            extra=extra,
        )

        self.storage.write_json(card.to_dict(), *layout.card_file_parts(board_id, card_id))
        self.storage.write_json([], *layout.descriptions_index_parts(board_id, card_id))
        self._set_membership(board_id, card_id, True)

        logger.info("created card %s/%s: %s", board_id, card_id, title)
        return self._folder(board_id, card)

    def get_card(self, board_id: str, card_id: str) -> CardFolder:
        return self._folder(board_id, self._load(board_id, card_id))

    def get_cards(self, board_id: str) -> Listing:
        """List a board's cards, skipping directories that don't hold a card.

        Only numeric-named subdirectories are candidates. Entries whose
        card.json is missing or unparseable are reported in `skipped`.
        Cards come in the board's display order, then by ID.
        """
        config = self._require_board(board_id)
        order = [c["id"] if isinstance(c, dict) else str(c) for c in config.get("cards") or []]

        listing = Listing()
        folders: dict[str, CardFolder] = {}
        for name in self.storage.list_subdirs(*layout.board_parts(board_id)):
            if not is_numeric_id(name):
                continue
            try:
                folders[name] = self.get_card(board_id, name)
            except (NotFound, ParseError, ValidationError) as e:
                logger.warning("skipping card %s/%s: %s", board_id, name, e)
                listing.skip(layout.card_path(board_id, name), str(e))

        position = {card_id: i for i, card_id in enumerate(order)}

        def compare(a: str, b: str) -> int:
            pa, pb = position.get(a), position.get(b)
            if pa is not None and pb is not None:
                return (pa > pb) - (pa < pb)
            if pa is not None:
                return -1
            if pb is not None:
                return 1
            return compare_ids(a, b)

        listing.items = [folders[k] for k in sorted(folders, key=cmp_to_key(compare))]
        return listing

    def update_card(self, board_id: str, card_id: str, updates: dict) -> CardFolder:
        """Merge a partial update over the stored card and rewrite it."""
        if not isinstance(updates, dict):
            raise ValidationError("updates must be an object")
        current = self._load(board_id, card_id).to_dict()

        changes = {k: v for k, v in updates.items() if k not in _PROTECTED and k != "updatedAt"}
        if "status" in changes:
            _check_status(changes["status"])
        if "title" in changes and not (isinstance(changes["title"], str) and changes["title"].strip()):
            raise ValidationError("title cannot be empty")
        if "assignee" in changes:
            _check_assignee(changes["assignee"])
        if "codebase" in changes:
            merged = dict(current.get("codebase") or {})
            merged.update(_check_codebase(changes["codebase"]))
            changes["codebase"] = Codebase.from_dict(merged).to_dict()

        current.update(changes)
        current["updatedAt"] = later_than(current.get("updatedAt"))
        card = Card.from_dict(current)

        self.storage.write_json(card.to_dict(), *layout.card_file_parts(board_id, card_id))
        logger.info("updated card %s/%s", board_id, card_id)
        return self._folder(board_id, card)

    def delete_card(self, board_id: str, card_id: str) -> bool:
        """Remove a card's directory. Returns False if it was already gone."""
        parts = layout.card_parts(board_id, card_id)
        # card.json first: a half-deleted directory is skipped by listings
        self.storage.remove(*layout.card_file_parts(board_id, card_id))
        self.storage.remove(*layout.descriptions_parts(board_id, card_id))
        removed = self.storage.remove(*parts)
        self._set_membership(board_id, card_id, False)
        if removed:
            logger.info("deleted card %s/%s", board_id, card_id)
        return removed
