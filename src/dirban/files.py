"""Generic file access inside a board tree or the uploads tree.

This is the remote-filesystem half of the API: stat a path and either
list the directory or return the file, write and delete files, create
directories. Every path is checked against its root by Storage before it
is touched.
"""

import json
import logging
import mimetypes
from dataclasses import dataclass
from pathlib import Path

from dirban import layout
from dirban.errors import NotFound, PathTraversal, ValidationError
from dirban.storage import Storage

logger = logging.getLogger(__name__)

CONTENT_TYPES = {
    ".json": "application/json",
    ".md": "text/markdown",
    ".txt": "text/plain",
}


def content_type_for(name: str) -> str:
    """Infer a response content type from a file name."""
    suffix = Path(name).suffix.lower()
    if suffix in CONTENT_TYPES:
        return CONTENT_TYPES[suffix]
    guessed, _ = mimetypes.guess_type(name)
    return guessed or "application/octet-stream"


@dataclass
class FileEntry:
    name: str
    type: str

    def to_dict(self) -> dict[str, str]:
        return {"name": self.name, "type": self.type}


@dataclass
class FileContent:
    name: str
    data: bytes
    content_type: str


class FileService:
    """Path-based access to files below a Storage root.

    With `scoped` set, the first path segment names a board that must
    already exist, and paths may not leave that board's directory. The
    uploads tree is unscoped.
    """

    def __init__(self, storage: Storage, scoped: bool = True):
        self.storage = storage
        self.scoped = scoped

    def _resolve(self, scope: str | None, subpath: str) -> tuple[tuple[str, ...], bool]:
        """Normalise subpath into storage parts.

        Returns (parts, is_base) where is_base is True when the path names
        the board directory (or the uploads root) itself.
        """
        segments = [s for s in (subpath or "").split("/") if s]
        base = self.storage.root
        if self.scoped:
            board = layout.board_parts(scope)
            base = self.storage.path(*board)
            if not base.is_dir():
                raise NotFound(f"Board not found: {scope}")
            segments = [*board, *segments]

        target = self.storage.path(*segments)
        if target != base and not target.is_relative_to(base):
            logger.warning("path traversal rejected: %s/%s", scope, subpath)
            raise PathTraversal(f"Path escapes {scope or 'uploads'}: {subpath}")
        # A symlink stands for itself, so deleting it leaves the target alone
        if segments and segments[-1] not in (".", ".."):
            parent = self.storage.path(*segments[:-1])
            if parent.is_relative_to(base) and (parent / segments[-1]).is_symlink():
                target = parent / segments[-1]
        parts = tuple(target.relative_to(self.storage.root).parts)
        return parts, target == base

    def list_dir(self, scope: str | None, subpath: str = "") -> list[FileEntry]:
        """Visible entries of a directory."""
        parts, _ = self._resolve(scope, subpath)
        entries = self.storage.list_dir(*parts)
        return [FileEntry(e.name, "directory" if e.is_dir() else "file") for e in entries]

    def read(self, scope: str | None, subpath: str) -> list[FileEntry] | FileContent:
        """Stat a path: a directory gives its listing, a file its content."""
        parts, _ = self._resolve(scope, subpath)
        path = self.storage.path(*parts)
        if path.is_dir():
            return self.list_dir(scope, subpath)
        data = self.storage.read_bytes(*parts)
        return FileContent(name=path.name, data=data, content_type=content_type_for(path.name))

    def exists(self, scope: str | None, subpath: str) -> bool:
        parts, _ = self._resolve(scope, subpath)
        return self.storage.path(*parts).exists()

    def write(self, scope: str | None, subpath: str, data: bytes, is_json: bool = False) -> str:
        """Write a file, creating parent directories.

        JSON bodies are validated and stored pretty-printed.
        """
        parts, is_base = self._resolve(scope, subpath)
        if is_base:
            raise ValidationError("A file path is required")
        if self.storage.path(*parts).is_dir():
            raise ValidationError(f"Path is a directory: {subpath}")
        if is_json:
            try:
                document = json.loads(data.decode("utf-8") or "null")
            except (UnicodeDecodeError, json.JSONDecodeError) as e:
                raise ValidationError(f"Malformed JSON body: {e}") from e
            data = (json.dumps(document, indent=2, ensure_ascii=False) + "\n").encode("utf-8")
        path = self.storage.write_bytes(data, *parts)
        logger.info("wrote %s (%d bytes)", self.storage.relative(path), len(data))
        return self.storage.relative(path)

    def mkdir(self, scope: str | None, subpath: str) -> str:
        parts, is_base = self._resolve(scope, subpath)
        if is_base:
            raise ValidationError("A directory path is required")
        path = self.storage.mkdir(*parts)
        logger.info("created directory %s", self.storage.relative(path))
        return self.storage.relative(path)

    def delete(self, scope: str | None, subpath: str) -> bool:
        """Delete a file or directory. Returns False if it was already gone."""
        parts, is_base = self._resolve(scope, subpath)
        if is_base:
            raise ValidationError("Refusing to delete a whole tree")
        removed = self.storage.remove(*parts)
        if removed:
            logger.info("deleted %s", "/".join(parts))
        return removed
