"""Typed helpers over the dirban HTTP API."""

import logging
from typing import Any
from urllib.parse import quote

import requests

from dirban.errors import error_for_status
from dirban.models import Board, Card, CardFolder, Description, Listing

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10


def _folder(data: dict) -> CardFolder:
    return CardFolder(id=str(data["id"]), card=Card.from_dict(data["card"]), path=data.get("path", ""))


def _description(data: dict) -> Description:
    return Description(
        id=data["id"],
        content=data.get("content", ""),
        title=data.get("title"),
        tags=list(data.get("tags") or []),
        created_at=data.get("createdAt", ""),
        updated_at=data.get("updatedAt", ""),
        filename=data.get("filename", ""),
    )


def _board(data: dict) -> Board:
    folders = [_folder(c) for c in data.get("cards") or [] if isinstance(c, dict)]
    return Board(
        id=data["id"],
        name=data.get("name", ""),
        repo_url=data.get("repoUrl", ""),
        card_order=[f.id for f in folders] or [c for c in data.get("cards") or [] if isinstance(c, str)],
        cards=folders,
    )


def _listing(data: dict, key: str, convert) -> Listing:
    listing = Listing(items=[convert(item) for item in data.get(key) or []])
    for skipped in data.get("skipped") or []:
        listing.skip(skipped.get("path", ""), skipped.get("reason", ""))
    return listing


def _path(*segments: str) -> str:
    return "/".join(quote(s, safe="") for s in segments)


class DirbanClient:
    """Client for a running dirban server.

    Errors come back as the same exceptions the server raised: NotFound,
    ValidationError, PathTraversal, Conflict or DirbanError.
    """

    def __init__(self, base_url: str, session: requests.Session | None = None, timeout: float = DEFAULT_TIMEOUT):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    def _request(self, method: str, path: str, **kwargs) -> requests.Response:
        url = f"{self.base_url}/{path.lstrip('/')}"
        response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        if not response.ok:
            try:
                message = response.json().get("error", response.reason)
            except ValueError:
                message = response.text or response.reason
            logger.debug("%s %s failed: %s %s", method, url, response.status_code, message)
            raise error_for_status(response.status_code, message)
        return response

    def _json(self, method: str, path: str, **kwargs) -> Any:
        return self._request(method, path, **kwargs).json()

    # --- Boards ---

    def list_boards(self) -> Listing:
        data = self._json("GET", "/api/boards")
        return _listing(data, "boards", _board)

    def create_board(self, name: str, repo_url: str = "") -> Board:
        return _board(self._json("POST", "/api/boards", json={"name": name, "repoUrl": repo_url}))

    def get_board(self, board_id: str) -> Board:
        return _board(self._json("GET", f"/api/boards/{_path(board_id)}"))

    def update_board(self, board_id: str, **fields) -> Board:
        body = {"repoUrl" if k == "repo_url" else k: v for k, v in fields.items() if v is not None}
        return _board(self._json("PATCH", f"/api/boards/{_path(board_id)}", json=body))

    # --- Cards ---

    def get_cards(self, board_id: str) -> Listing:
        data = self._json("GET", f"/api/boards/{_path(board_id)}/cards")
        return _listing(data, "cards", _folder)

    def get_card(self, board_id: str, card_id: str) -> CardFolder:
        return _folder(self._json("GET", f"/api/boards/{_path(board_id, 'cards', card_id)}"))

    def create_card(self, board_id: str, fields: dict) -> CardFolder:
        return _folder(self._json("POST", f"/api/boards/{_path(board_id)}/cards", json=fields))

    def update_card(self, board_id: str, card_id: str, updates: dict) -> CardFolder:
        return _folder(self._json("PATCH", f"/api/boards/{_path(board_id, 'cards', card_id)}", json=updates))

    def delete_card(self, board_id: str, card_id: str) -> bool:
        return self._json("DELETE", f"/api/boards/{_path(board_id, 'cards', card_id)}")["deleted"]

    # --- Descriptions ---

    def _descriptions(self, board_id: str, card_id: str) -> str:
        return f"/api/boards/{_path(board_id, 'cards', card_id)}/descriptions"

    def get_descriptions(self, board_id: str, card_id: str) -> Listing:
        data = self._json("GET", self._descriptions(board_id, card_id))
        return _listing(data, "descriptions", _description)

    def add_description(
        self,
        board_id: str,
        card_id: str,
        content: str,
        title: str | None = None,
        tags: list[str] | None = None,
    ) -> Description:
        body = {"content": content, "title": title, "tags": tags or []}
        return _description(self._json("POST", self._descriptions(board_id, card_id), json=body))

    def update_description(self, board_id: str, card_id: str, description_id: str, **fields) -> Description:
        url = f"{self._descriptions(board_id, card_id)}/{_path(description_id)}"
        body = {k: v for k, v in fields.items() if v is not None}
        return _description(self._json("PATCH", url, json=body))

    def delete_description(self, board_id: str, card_id: str, description_id: str) -> bool:
        url = f"{self._descriptions(board_id, card_id)}/{_path(description_id)}"
        return self._json("DELETE", url)["deleted"]

    def delete_description_at(self, board_id: str, card_id: str, index: int) -> Description:
        url = f"{self._descriptions(board_id, card_id)}/at/{int(index)}"
        return _description(self._json("DELETE", url)["deleted"])

    def reorder_descriptions(self, board_id: str, card_id: str, ids: list[str]) -> Listing:
        data = self._json("PUT", f"{self._descriptions(board_id, card_id)}/order", json={"order": ids})
        return _listing(data, "descriptions", _description)

    # --- Images ---

    def upload_images(
        self,
        board_id: str,
        card_id: str,
        filename: str,
        image: bytes,
        thumbnail: bytes,
        content_type: str = "image/png",
    ) -> dict:
        files = {
            "image": (filename, image, content_type),
            "thumbnail": (filename, thumbnail, content_type),
        }
        return self._json("POST", f"/api/boards/{_path(board_id, 'cards', card_id)}/upload-images", files=files)

    def list_images(self, board_id: str, card_id: str) -> list[dict]:
        return self._json("GET", f"/api/boards/{_path(board_id, 'cards', card_id)}/images")["images"]

    def delete_image(self, board_id: str, card_id: str, name: str) -> bool:
        url = f"/api/boards/{_path(board_id, 'cards', card_id, 'images', name)}"
        return self._json("DELETE", url)["deleted"]

    # --- Files ---

    def _fs(self, board_id: str, path: str) -> str:
        url = f"/api/boards/{_path(board_id)}/fs"
        path = path.strip("/")
        return f"{url}/{path}" if path else url

    def list_directory(self, board_id: str, path: str = "") -> list[str]:
        data = self._json("GET", self._fs(board_id, path))
        return [entry["name"] for entry in data.get("files", [])]

    def read_file(self, board_id: str, path: str) -> bytes:
        return self._request("GET", self._fs(board_id, path)).content

    def read_text(self, board_id: str, path: str) -> str:
        return self.read_file(board_id, path).decode("utf-8")

    def write_file(self, board_id: str, path: str, content: str | bytes, content_type: str = "text/plain") -> str:
        data = content.encode("utf-8") if isinstance(content, str) else content
        headers = {"Content-Type": content_type}
        return self._json("PUT", self._fs(board_id, path), data=data, headers=headers)["path"]

    def file_exists(self, board_id: str, path: str) -> bool:
        response = self.session.request("HEAD", f"{self.base_url}{self._fs(board_id, path)}", timeout=self.timeout)
        return response.ok

    def delete_file(self, board_id: str, path: str) -> bool:
        return self._json("DELETE", self._fs(board_id, path))["deleted"]

    def mkdir(self, board_id: str, path: str) -> str:
        return self._json("POST", f"{self._fs(board_id, path)}/mkdir")["path"]

    def upload_binary(self, path: str, data: bytes) -> str:
        headers = {"Content-Type": "application/octet-stream"}
        return self._json("POST", f"/api/uploads/{path.strip('/')}", data=data, headers=headers)["path"]

    def delete_upload(self, path: str) -> bool:
        return self._json("DELETE", f"/api/uploads/{path.strip('/')}")["deleted"]
