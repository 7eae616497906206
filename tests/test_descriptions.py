"""Tests for description storage."""

import json

import pytest

from dirban.errors import NotFound, ValidationError
from dirban.parser import parse_front_matter


@pytest.fixture
def descriptions_dir(settings, board, card):
    return settings.boards_root / board.id / card.id / "descriptions"


def _index(descriptions_dir):
    return json.loads((descriptions_dir / "descriptions.json").read_text())


def test_add_and_get_round_trip(services, board, card):
    content = "\n# Heading\n\nBody with trailing space  \n\n"
    added = services.descriptions.add_description(board.id, card.id, content, title="Overview", tags=["api", "db"])

    listing = services.descriptions.get_descriptions(board.id, card.id)
    assert len(listing) == 1
    got = listing.items[0]
    assert got.id == added.id
    assert got.content == content
    assert got.title == "Overview"
    assert got.tags == ["api", "db"]
    assert got.created_at == got.updated_at


def test_add_writes_front_matter_file(services, board, card, descriptions_dir):
    added = services.descriptions.add_description(board.id, card.id, "Body", title="Notes")

    assert added.filename == "description_1.md"
    meta, body = parse_front_matter((descriptions_dir / "description_1.md").read_text())
    assert meta["id"] == added.id
    assert meta["title"] == "Notes"
    assert body == "Body"
    assert _index(descriptions_dir) == ["description_1.md"]


def test_add_numbers_after_highest(services, board, card, descriptions_dir):
    services.descriptions.add_description(board.id, card.id, "one")
    second = services.descriptions.add_description(board.id, card.id, "two")
    services.descriptions.delete_description_at(board.id, card.id, 0)

    third = services.descriptions.add_description(board.id, card.id, "three")
    assert second.filename == "description_2.md"
    assert third.filename == "description_3.md"


def test_add_rejects_unknown_title(services, board, card):
    with pytest.raises(ValidationError):
        services.descriptions.add_description(board.id, card.id, "x", title="Random")


def test_add_rejects_bad_tags(services, board, card):
    with pytest.raises(ValidationError):
        services.descriptions.add_description(board.id, card.id, "x", tags="api")


def test_add_dedupes_tags(services, board, card):
    added = services.descriptions.add_description(board.id, card.id, "x", tags=["a", "b", "a"])
    assert added.tags == ["a", "b"]


def test_add_to_missing_card(services, board):
    with pytest.raises(NotFound):
        services.descriptions.add_description(board.id, "999", "x")


def test_delete_at_index(services, board, card, descriptions_dir):
    """Deleting index 0 of two leaves only the second."""
    services.descriptions.add_description(board.id, card.id, "first")
    second = services.descriptions.add_description(board.id, card.id, "second")

    deleted = services.descriptions.delete_description_at(board.id, card.id, 0)
    assert deleted.content == "first"

    remaining = list(services.descriptions.get_descriptions(board.id, card.id))
    assert [d.id for d in remaining] == [second.id]
    assert _index(descriptions_dir) == ["description_2.md"]
    assert not (descriptions_dir / "description_1.md").exists()


def test_delete_at_out_of_range(services, board, card):
    services.descriptions.add_description(board.id, card.id, "only")
    with pytest.raises(NotFound):
        services.descriptions.delete_description_at(board.id, card.id, 1)
    with pytest.raises(NotFound):
        services.descriptions.delete_description_at(board.id, card.id, -1)


def test_delete_by_id_is_idempotent(services, board, card):
    added = services.descriptions.add_description(board.id, card.id, "x")
    assert services.descriptions.delete_description(board.id, card.id, added.id) is True
    assert services.descriptions.delete_description(board.id, card.id, added.id) is False
    assert list(services.descriptions.get_descriptions(board.id, card.id)) == []


def test_update_description(services, board, card):
    added = services.descriptions.add_description(board.id, card.id, "old", title="Notes", tags=["a"])
    updated = services.descriptions.update_description(board.id, card.id, added.id, content="new")

    assert updated.content == "new"
    assert updated.title == "Notes"
    assert updated.tags == ["a"]
    assert updated.updated_at > added.updated_at
    assert services.descriptions.get_description(board.id, card.id, added.id).content == "new"


def test_update_description_clears_title(services, board, card):
    added = services.descriptions.add_description(board.id, card.id, "x", title="Notes")
    updated = services.descriptions.update_description(board.id, card.id, added.id, title="")
    assert updated.title is None


def test_update_missing_description(services, board, card):
    with pytest.raises(NotFound):
        services.descriptions.update_description(board.id, card.id, "nope", content="x")


def test_reorder(services, board, card):
    a = services.descriptions.add_description(board.id, card.id, "a")
    b = services.descriptions.add_description(board.id, card.id, "b")
    c = services.descriptions.add_description(board.id, card.id, "c")

    listing = services.descriptions.reorder_descriptions(board.id, card.id, [c.id, a.id])
    assert [d.id for d in listing] == [c.id, a.id, b.id]


def test_reorder_unknown_id(services, board, card):
    services.descriptions.add_description(board.id, card.id, "a")
    with pytest.raises(ValidationError):
        services.descriptions.reorder_descriptions(board.id, card.id, ["nope"])


def test_unindexed_files_are_adopted(services, board, card, descriptions_dir):
    added = services.descriptions.add_description(board.id, card.id, "indexed")
    (descriptions_dir / "description_10.md").write_text("---\nid: late\n---\nlate")
    (descriptions_dir / "description_9.md").write_text("no front-matter")

    ids = [d.id for d in services.descriptions.get_descriptions(board.id, card.id)]
    assert ids == [added.id, "description_9", "late"]


def test_broken_description_is_skipped(services, board, card, descriptions_dir):
    added = services.descriptions.add_description(board.id, card.id, "good")
    (descriptions_dir / "description_5.md").write_text("---\nkey: [unclosed\n---\nbad")
    (descriptions_dir / "descriptions.json").write_text(json.dumps(["description_1.md", "description_4.md"]))

    listing = services.descriptions.get_descriptions(board.id, card.id)
    assert [d.id for d in listing] == [added.id]
    assert len(listing.skipped) == 2


def test_corrupt_index_falls_back_to_files(services, board, card, descriptions_dir):
    added = services.descriptions.add_description(board.id, card.id, "x")
    (descriptions_dir / "descriptions.json").write_text("{broken")
    assert [d.id for d in services.descriptions.get_descriptions(board.id, card.id)] == [added.id]
