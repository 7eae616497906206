"""Shared fixtures for CLI tests."""

import pytest

from dirban.config import read_config
from dirban.services import build_services


@pytest.fixture
def data_root(tmp_path):
    """An empty data directory."""
    return tmp_path / "data"


@pytest.fixture
def populated_root(data_root):
    """A data directory with board "my-board" holding two cards, one described."""
    services = build_services(read_config(environ={}, root=data_root))
    services.boards.create_board("My Board", "https://example.com/r.git")
    first = services.cards.create_card("my-board", {"title": "First card", "assignee": "sam"})
    services.cards.create_card("my-board", {"title": "Second card", "status": "done"})
    services.descriptions.add_description("my-board", first.id, "Some detail.\n", title="Overview", tags=["docs"])
    return data_root


@pytest.fixture
def card_ids(populated_root):
    services = build_services(read_config(environ={}, root=populated_root))
    return [folder.id for folder in services.cards.get_cards("my-board")]
