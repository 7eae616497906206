"""Shared fixtures: a data root under tmp_path and services built over it."""

import pytest

from dirban.config import read_config
from dirban.services import build_services
from dirban.web import create_app


@pytest.fixture
def settings(tmp_path):
    return read_config(environ={}, root=tmp_path / "data")


@pytest.fixture
def services(settings):
    return build_services(settings)


@pytest.fixture
def board(services):
    """A board named "My Board" with no cards."""
    return services.boards.create_board("My Board", "https://example.com/repo.git")


@pytest.fixture
def card(services, board):
    """A todo card on the board."""
    return services.cards.create_card(board.id, {"title": "Write docs"})


@pytest.fixture
def app(services):
    app = create_app(services=services)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()
