"""On-disk layout of boards, cards and descriptions.

    {boardId}/board.json
    {boardId}/{cardId}/card.json
    {boardId}/{cardId}/descriptions/descriptions.json
    {boardId}/{cardId}/descriptions/description_N.md

All paths are relative to the boards root held by a Storage.
"""

from dirban.constants import BOARD_FILE, CARD_FILE, DESCRIPTIONS_DIR, DESCRIPTIONS_INDEX
from dirban.errors import NotFound, ParseError, ValidationError
from dirban.storage import Storage


def check_segment(value: str, what: str) -> str:
    """Reject identifiers that are not a single, plain path segment."""
    if not isinstance(value, str) or not value or value in (".", "..") or "/" in value or "\\" in value:
        raise ValidationError(f"Invalid {what}: {value!r}")
    return value


def board_parts(board_id: str) -> tuple[str, ...]:
    return (check_segment(board_id, "board id"),)


def board_file_parts(board_id: str) -> tuple[str, ...]:
    return (*board_parts(board_id), BOARD_FILE)


def card_parts(board_id: str, card_id: str) -> tuple[str, ...]:
    return (*board_parts(board_id), check_segment(card_id, "card id"))


def card_file_parts(board_id: str, card_id: str) -> tuple[str, ...]:
    return (*card_parts(board_id, card_id), CARD_FILE)


def descriptions_parts(board_id: str, card_id: str) -> tuple[str, ...]:
    return (*card_parts(board_id, card_id), DESCRIPTIONS_DIR)


def descriptions_index_parts(board_id: str, card_id: str) -> tuple[str, ...]:
    return (*descriptions_parts(board_id, card_id), DESCRIPTIONS_INDEX)


def card_path(board_id: str, card_id: str) -> str:
    """Path of a card's card.json relative to the boards root."""
    return "/".join(card_file_parts(board_id, card_id))


def load_board_config(storage: Storage, board_id: str) -> dict:
    """Read a board's board.json. Raises NotFound or ParseError."""
    try:
        data = storage.read_json(*board_file_parts(board_id))
    except NotFound:
        raise NotFound(f"Board not found: {board_id}")
    if not isinstance(data, dict):
        raise ParseError(f"board.json of {board_id} is not an object")
    return data


def save_board_config(storage: Storage, board_id: str, config: dict) -> None:
    storage.write_json(config, *board_file_parts(board_id))
