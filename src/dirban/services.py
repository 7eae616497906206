"""Wire the storage services together from Settings."""

from dataclasses import dataclass

from dirban.boards import BoardRegistry
from dirban.cards import CardService
from dirban.config import Settings
from dirban.descriptions import DescriptionService
from dirban.files import FileService
from dirban.images import ImageStore
from dirban.storage import Storage


@dataclass
class Services:
    """Everything a request handler or CLI command needs, built once."""

    settings: Settings
    boards: BoardRegistry
    cards: CardService
    descriptions: DescriptionService
    files: FileService
    uploads: FileService
    images: ImageStore

    def delete_card(self, board_id: str, card_id: str) -> bool:
        """Delete a card together with its uploaded images."""
        removed = self.cards.delete_card(board_id, card_id)
        self.images.purge(board_id, card_id)
        return removed


def build_services(settings: Settings) -> Services:
    """Create the storage roots if needed and build the services over them."""
    settings.boards_root.mkdir(parents=True, exist_ok=True)
    settings.uploads_root.mkdir(parents=True, exist_ok=True)

    boards_storage = Storage(settings.boards_root)
    uploads_storage = Storage(settings.uploads_root)

    cards = CardService(boards_storage)
    return Services(
        settings=settings,
        boards=BoardRegistry(boards_storage, cards),
        cards=cards,
        descriptions=DescriptionService(boards_storage),
        files=FileService(boards_storage, scoped=True),
        uploads=FileService(uploads_storage, scoped=False),
        images=ImageStore(uploads_storage, settings.max_upload_bytes),
    )
