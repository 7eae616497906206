"""Tests for card storage."""

import json

import pytest

from dirban.errors import NotFound, ValidationError
from dirban.models import parse_timestamp


def test_create_card(services, board, settings):
    folder = services.cards.create_card(board.id, {"title": "Write docs", "assignee": "sam"})
    card = folder.card

    assert folder.id.isdigit()
    assert folder.path == f"my-board/{folder.id}/card.json"
    assert card.title == "Write docs"
    assert card.status == "todo"
    assert card.assignee == "sam"
    assert card.created_at == card.updated_at

    card_dir = settings.boards_root / board.id / folder.id
    assert json.loads((card_dir / "card.json").read_text())["title"] == "Write docs"
    assert json.loads((card_dir / "descriptions" / "descriptions.json").read_text()) == []
    assert json.loads((settings.boards_root / board.id / "board.json").read_text())["cards"] == [folder.id]


def test_create_card_keeps_unknown_fields(services, board):
    folder = services.cards.create_card(board.id, {"title": "x", "priority": "high"})
    assert services.cards.get_card(board.id, folder.id).card.extra == {"priority": "high"}


def test_create_card_requires_title(services, board):
    with pytest.raises(ValidationError):
        services.cards.create_card(board.id, {"status": "todo"})


def test_create_card_rejects_bad_status(services, board):
    with pytest.raises(ValidationError):
        services.cards.create_card(board.id, {"title": "x", "status": "blocked"})


def test_create_card_on_missing_board(services):
    with pytest.raises(NotFound):
        services.cards.create_card("nope", {"title": "x"})


def test_create_cards_get_distinct_ids(services, board):
    ids = {services.cards.create_card(board.id, {"title": f"c{i}"}).id for i in range(5)}
    assert len(ids) == 5


def test_get_cards_lists_created(services, board, card):
    listing = services.cards.get_cards(board.id)
    assert [f.id for f in listing] == [card.id]
    assert listing.skipped == []


def test_get_cards_ignores_non_numeric_dirs(services, board, card, settings):
    board_dir = settings.boards_root / board.id
    (board_dir / "attachments").mkdir()
    (board_dir / "notes.txt").write_text("hi")

    listing = services.cards.get_cards(board.id)
    assert [f.id for f in listing] == [card.id]
    assert listing.skipped == []


def test_get_cards_skips_broken(services, board, card, settings):
    board_dir = settings.boards_root / board.id
    (board_dir / "123").mkdir()
    (board_dir / "456").mkdir()
    (board_dir / "456" / "card.json").write_text("not json")

    listing = services.cards.get_cards(board.id)
    assert [f.id for f in listing] == [card.id]
    assert sorted(s.path for s in listing.skipped) == ["my-board/123/card.json", "my-board/456/card.json"]


def test_get_missing_card(services, board):
    with pytest.raises(NotFound):
        services.cards.get_card(board.id, "999")


def test_update_card_status(services, board):
    """A card moved from todo to doing keeps its id and gets a later updatedAt."""
    created = services.cards.create_card(board.id, {"title": "Task", "status": "todo"})
    services.cards.update_card(board.id, created.id, {"status": "doing"})

    cards = list(services.cards.get_cards(board.id))
    assert len(cards) == 1
    card = cards[0].card
    assert card.status == "doing"
    assert card.created_at == created.card.created_at
    assert parse_timestamp(card.updated_at) > parse_timestamp(card.created_at)


def test_update_card_protects_id_and_created(services, board, card):
    updated = services.cards.update_card(
        board.id, card.id, {"id": "1", "createdAt": "1999-01-01T00:00:00.000Z", "title": "New"}
    )
    assert updated.id == card.id
    assert updated.card.created_at == card.card.created_at
    assert updated.card.title == "New"


def test_update_card_merges_codebase(services, board):
    folder = services.cards.create_card(board.id, {"title": "x", "codebase": {"repo": "r", "commit": "a1"}})
    updated = services.cards.update_card(board.id, folder.id, {"codebase": {"commit": "b2"}})
    assert updated.card.codebase.repo == "r"
    assert updated.card.codebase.commit == "b2"


def test_update_card_rejects_bad_status(services, board, card):
    with pytest.raises(ValidationError):
        services.cards.update_card(board.id, card.id, {"status": "later"})


def test_update_missing_card(services, board):
    with pytest.raises(NotFound):
        services.cards.update_card(board.id, "999", {"title": "x"})


def test_delete_card(services, board, card, settings):
    assert services.cards.delete_card(board.id, card.id) is True
    assert not (settings.boards_root / board.id / card.id).exists()
    assert list(services.cards.get_cards(board.id)) == []
    assert json.loads((settings.boards_root / board.id / "board.json").read_text())["cards"] == []


def test_delete_card_twice(services, board, card):
    assert services.cards.delete_card(board.id, card.id) is True
    assert services.cards.delete_card(board.id, card.id) is False


def test_delete_card_purges_uploads(services, board, card, settings):
    uploads = settings.uploads_root / board.id / card.id
    uploads.mkdir(parents=True)
    (uploads / "pic.png").write_bytes(b"png")

    assert services.delete_card(board.id, card.id) is True
    assert not uploads.exists()


def test_get_cards_uses_directory_name_as_id(services, board, card, settings):
    stray = settings.boards_root / board.id / "123"
    stray.mkdir()
    (stray / "card.json").write_text(json.dumps({"id": "..", "title": "Stray"}))

    listing = services.cards.get_cards(board.id)
    assert sorted(f.id for f in listing) == sorted([card.id, "123"])
    assert listing.skipped == []
    assert services.cards.get_card(board.id, "123").path == "my-board/123/card.json"
    assert services.boards.get_board(board.id).id == board.id


@pytest.mark.parametrize("assignee", [5, None, ["alice"]])
def test_update_card_rejects_bad_assignee(services, board, card, settings, assignee):
    with pytest.raises(ValidationError):
        services.cards.update_card(board.id, card.id, {"assignee": assignee})
    stored = json.loads((settings.boards_root / board.id / card.id / "card.json").read_text())
    assert stored["assignee"] == ""


def test_update_card_assignee(services, board, card):
    updated = services.cards.update_card(board.id, card.id, {"assignee": "alice"})
    assert updated.card.assignee == "alice"
