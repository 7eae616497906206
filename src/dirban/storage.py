"""Filesystem access rooted at one directory.

Every path handed out by Storage has been resolved and checked to lie
inside the root, so callers can join user-supplied segments freely.
Single files are written through a temporary file and os.replace; nothing
is atomic across files.
"""

import json
import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import Any

from dirban.constants import IGNORED_PREFIXES
from dirban.errors import NotFound, ParseError, PathTraversal, WriteFailure

logger = logging.getLogger(__name__)


class Storage:
    """Read and write files below a fixed root directory."""

    def __init__(self, root: str | Path):
        self.root = Path(root).resolve()

    def __repr__(self) -> str:
        return f"Storage({str(self.root)!r})"

    # --- Paths ---

    def _join(self, *parts: str) -> Path:
        return self.root.joinpath(*[p.strip("/") for p in parts if p])

    def _contain(self, resolved: Path, parts: tuple[str, ...]) -> Path:
        if resolved != self.root and not resolved.is_relative_to(self.root):
            logger.warning("path traversal rejected: %s", "/".join(parts))
            raise PathTraversal(f"Path escapes storage root: {'/'.join(parts)}")
        return resolved

    def path(self, *parts: str) -> Path:
        """Join parts onto the root, rejecting anything that escapes it."""
        return self._contain(self._join(*parts).resolve(), parts)

    def relative(self, path: Path) -> str:
        """Path relative to the root, with forward slashes."""
        return path.relative_to(self.root).as_posix()

    # --- Reading ---

    def exists(self, *parts: str) -> bool:
        return self.path(*parts).exists()

    def read_bytes(self, *parts: str) -> bytes:
        path = self.path(*parts)
        try:
            return path.read_bytes()
        except (FileNotFoundError, NotADirectoryError, IsADirectoryError):
            raise NotFound(f"File not found: {self.relative(path)}")

    def read_text(self, *parts: str) -> str:
        data = self.read_bytes(*parts)
        try:
            return data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ParseError(f"Not UTF-8 text: {'/'.join(parts)}") from e

    def read_json(self, *parts: str) -> Any:
        """Load a JSON document. Raises NotFound or ParseError."""
        text = self.read_text(*parts)
        try:
            return json.loads(text.strip())
        except json.JSONDecodeError as e:
            raise ParseError(f"Invalid JSON in {'/'.join(parts)}: {e}") from e

    def list_dir(self, *parts: str) -> list[os.DirEntry]:
        """Visible entries of a directory, sorted by name.

        Raises NotFound if the directory does not exist.
        """
        path = self.path(*parts)
        try:
            with os.scandir(path) as it:
                entries = [e for e in it if not e.name.startswith(IGNORED_PREFIXES)]
        except (FileNotFoundError, NotADirectoryError):
            raise NotFound(f"Directory not found: {self.relative(path)}")
        return sorted(entries, key=lambda e: e.name)

    def list_subdirs(self, *parts: str) -> list[str]:
        """Names of visible subdirectories, or [] if the directory is missing."""
        try:
            entries = self.list_dir(*parts)
        except NotFound:
            return []
        return [e.name for e in entries if e.is_dir()]

    # --- Writing ---

    def write_bytes(self, data: bytes, *parts: str) -> Path:
        """Replace a file's contents in one step, creating parent directories."""
        path = self.path(*parts)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
            try:
                with os.fdopen(fd, "wb") as f:
                    f.write(data)
                os.replace(tmp, path)
            except BaseException:
                Path(tmp).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise WriteFailure(f"Failed to write {self.relative(path)}: {e}") from e
        return path

    def write_text(self, text: str, *parts: str) -> Path:
        return self.write_bytes(text.encode("utf-8"), *parts)

    def write_json(self, data: Any, *parts: str) -> Path:
        return self.write_text(json.dumps(data, indent=2, ensure_ascii=False) + "\n", *parts)

    def mkdir(self, *parts: str) -> Path:
        path = self.path(*parts)
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise WriteFailure(f"Failed to create directory {self.relative(path)}: {e}") from e
        return path

    # --- Removing ---

    def remove(self, *parts: str) -> bool:
        """Remove a file or a whole directory tree.

        Returns False if there was nothing to remove. The root itself is
        never removed. A symlink is removed itself, never its target.
        """
        path = self.path(*parts)
        if path == self.root:
            raise PathTraversal("Refusing to remove the storage root")
        candidate = self._join(*parts)
        link = self._contain(candidate.parent.resolve(), parts) / candidate.name
        try:
            if link.is_symlink():
                link.unlink()
            elif path.is_dir():
                shutil.rmtree(path)
            else:
                path.unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            raise WriteFailure(f"Failed to remove {self.relative(path)}: {e}") from e
        return True
