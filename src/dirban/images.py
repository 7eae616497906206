"""Image attachments of cards, kept in the uploads tree.

    uploads/{boardId}/{cardId}/{name}
    uploads/{boardId}/{cardId}/thumbnails/{name}

A card never names its images; they are found by listing its directory.
Thumbnails are made by the client and uploaded next to the image.
"""

import logging
import mimetypes
from dataclasses import dataclass

from werkzeug.utils import secure_filename

from dirban import layout
from dirban.constants import THUMBNAILS_DIR, UPLOADS_DIR
from dirban.errors import NotFound, ValidationError
from dirban.files import content_type_for
from dirban.storage import Storage

logger = logging.getLogger(__name__)


@dataclass
class Upload:
    """One uploaded file, independent of the web framework it came from."""

    filename: str
    content_type: str
    data: bytes


@dataclass
class ImageAttachment:
    name: str
    url: str
    thumbnail: str | None
    size: int

    def to_dict(self) -> dict:
        return {"name": self.name, "url": self.url, "thumbnail": self.thumbnail, "size": self.size}


def upload_url(*parts: str) -> str:
    return "/" + "/".join((UPLOADS_DIR, *parts))


class ImageStore:
    """Save, list and delete the images attached to cards."""

    def __init__(self, storage: Storage, max_bytes: int):
        self.storage = storage
        self.max_bytes = max_bytes

    def _check(self, upload: Upload, field: str) -> None:
        if not upload.content_type or not upload.content_type.startswith("image/"):
            raise ValidationError(f"{field}: only image files are allowed")
        if len(upload.data) > self.max_bytes:
            raise ValidationError(f"{field}: file exceeds {self.max_bytes} bytes")

    def save_images(self, board_id: str, card_id: str, image: Upload, thumbnail: Upload) -> ImageAttachment:
        """Store an image and its thumbnail under the card's uploads directory."""
        card = layout.card_parts(board_id, card_id)
        self._check(image, "image")
        self._check(thumbnail, "thumbnail")

        name = secure_filename(image.filename or "")
        if not name:
            raise ValidationError("image: a file name is required")
        # Listings only see names with an image extension
        if not content_type_for(name).startswith("image/"):
            extension = mimetypes.guess_extension(image.content_type.split(";")[0].strip())
            if not extension or not content_type_for(name + extension).startswith("image/"):
                raise ValidationError(f"image: unsupported image type {image.content_type}")
            name += extension

        self.storage.write_bytes(image.data, *card, name)
        self.storage.write_bytes(thumbnail.data, *card, THUMBNAILS_DIR, name)
        logger.info("stored image %s for %s/%s (%d bytes)", name, board_id, card_id, len(image.data))
        return ImageAttachment(
            name=name,
            url=upload_url(*card, name),
            thumbnail=upload_url(*card, THUMBNAILS_DIR, name),
            size=len(image.data),
        )

    def list_images(self, board_id: str, card_id: str) -> list[ImageAttachment]:
        """Images of a card in name order; [] if it has none."""
        card = layout.card_parts(board_id, card_id)
        thumbs = set(self._names(*card, THUMBNAILS_DIR))
        images = []
        for entry in self._entries(*card):
            if not entry.is_file() or not content_type_for(entry.name).startswith("image/"):
                continue
            images.append(
                ImageAttachment(
                    name=entry.name,
                    url=upload_url(*card, entry.name),
                    thumbnail=upload_url(*card, THUMBNAILS_DIR, entry.name) if entry.name in thumbs else None,
                    size=entry.stat().st_size,
                )
            )
        return images

    def delete_image(self, board_id: str, card_id: str, name: str) -> bool:
        """Delete an image and its thumbnail. Returns False if neither existed."""
        card = layout.card_parts(board_id, card_id)
        name = layout.check_segment(name, "image name")
        removed = self.storage.remove(*card, name)
        removed_thumb = self.storage.remove(*card, THUMBNAILS_DIR, name)
        return removed or removed_thumb

    def purge(self, board_id: str, card_id: str) -> bool:
        """Delete every upload of a card."""
        return self.storage.remove(*layout.card_parts(board_id, card_id))

    def _entries(self, *parts: str) -> list:
        try:
            return self.storage.list_dir(*parts)
        except NotFound:
            return []

    def _names(self, *parts: str) -> list[str]:
        return [e.name for e in self._entries(*parts) if e.is_file()]
