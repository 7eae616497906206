"""Board registry: one directory per board, described by board.json."""

import logging
import re

from dirban import layout
from dirban.cards import CardService
from dirban.errors import Conflict, NotFound, ParseError, ValidationError
from dirban.models import Board, Listing
from dirban.storage import Storage

logger = logging.getLogger(__name__)


def slugify(text: str) -> str:
    """Convert a board name to a directory-safe id.

    "My Board" -> "my-board", "  Q3 / Roadmap!" -> "q3-roadmap", "Доска задач" -> "доска-задач"
    """
    slug = text.lower()
    slug = re.sub(r"[\W_]+", "-", slug)
    slug = slug.strip("-")
    return slug or "untitled"


class BoardRegistry:
    """Enumerate, create and update boards under a Storage."""

    def __init__(self, storage: Storage, cards: CardService):
        self.storage = storage
        self.cards = cards

    def load_config(self, board_id: str) -> Board:
        """Read board.json without loading cards."""
        return Board.from_config(board_id, layout.load_board_config(self.storage, board_id))

    def save_config(self, board: Board) -> None:
        layout.save_board_config(self.storage, board.id, board.config())

    def list_boards(self) -> Listing:
        """List boards; directories without a readable board.json are skipped."""
        listing = Listing()
        for name in self.storage.list_subdirs():
            try:
                listing.items.append(self.load_config(name))
            except (NotFound, ParseError, ValidationError) as e:
                logger.warning("skipping board %s: %s", name, e)
                listing.skip(name, str(e))
        return listing

    def get_board(self, board_id: str) -> Board:
        """Load a board together with its cards in display order."""
        board = self.load_config(board_id)
        cards = self.cards.get_cards(board_id)
        board.cards = cards.items
        return board

    def create_board(self, name: str, repo_url: str = "") -> Board:
        """Create a board whose id is derived from its name.

        Raises Conflict if a board with the same id already exists.
        """
        if not isinstance(name, str) or not name.strip():
            raise ValidationError("name is required")
        if not isinstance(repo_url, str):
            raise ValidationError("repoUrl must be a string")

        name = name.strip()
        board_id = slugify(name)
        if self.storage.exists(*layout.board_file_parts(board_id)):
            raise Conflict(f"Board already exists: {board_id}")

        board = Board(id=board_id, name=name, repo_url=repo_url.strip())
        self.save_config(board)
        logger.info("created board %s", board_id)
        return board

    def update_board(
        self,
        board_id: str,
        name: str | None = None,
        repo_url: str | None = None,
        cards: list[str] | None = None,
    ) -> Board:
        """Change a board's name, repository URL or card order."""
        board = self.load_config(board_id)

        if name is not None:
            if not isinstance(name, str) or not name.strip():
                raise ValidationError("name cannot be empty")
            board.name = name.strip()
        if repo_url is not None:
            if not isinstance(repo_url, str):
                raise ValidationError("repoUrl must be a string")
            board.repo_url = repo_url.strip()
        if cards is not None:
            if not isinstance(cards, list):
                raise ValidationError("cards must be a list of card ids")
            known = {folder.id for folder in self.cards.get_cards(board_id)}
            unknown = [c for c in cards if c not in known]
            if unknown:
                raise ValidationError(f"Unknown card ids: {', '.join(map(str, unknown))}")
            ordered = list(dict.fromkeys(cards))
            board.card_order = ordered + [c for c in board.card_order if c not in ordered]

        self.save_config(board)
        return self.get_board(board_id)
