"""Data models for dirban boards.

Dataclass fields are snake_case; the JSON documents on disk and on the
wire use the camelCase keys the board UI has always read.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any

from dirban.constants import DEFAULT_STATUS


def utc_now() -> str:
    """Current UTC time as ISO-8601 with millisecond precision and a Z."""
    return format_timestamp(datetime.now(timezone.utc))


def format_timestamp(moment: datetime) -> str:
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_timestamp(value: str) -> datetime | None:
    """Parse a timestamp written by format_timestamp, or None if unreadable."""
    if not isinstance(value, str) or not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


def later_than(previous: str | None) -> str:
    """Current time, nudged forward so it sorts strictly after previous."""
    now = datetime.now(timezone.utc)
    before = parse_timestamp(previous) if previous else None
    if before is not None and now <= before:
        now = before + timedelta(milliseconds=1)
    return format_timestamp(now)


@dataclass
class Codebase:
    """The repository and commit a card's work refers to."""

    repo: str = ""
    commit: str = ""

    def to_dict(self) -> dict[str, str]:
        return {"repo": self.repo, "commit": self.commit}

    @classmethod
    def from_dict(cls, data: dict | None) -> "Codebase":
        data = data or {}
        return cls(repo=str(data.get("repo") or ""), commit=str(data.get("commit") or ""))


@dataclass
class Card:
    """A unit of work, stored as card.json."""

    id: str
    title: str
    status: str = DEFAULT_STATUS
    assignee: str = ""
    codebase: Codebase = field(default_factory=Codebase)
    created_at: str = ""
    updated_at: str = ""
    extra: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        data = dict(self.extra)
        data.update(
            {
                "id": self.id,
                "title": self.title,
                "status": self.status,
                "assignee": self.assignee,
                "codebase": self.codebase.to_dict(),
                "createdAt": self.created_at,
                "updatedAt": self.updated_at,
            }
        )
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "Card":
        known = {"id", "title", "status", "assignee", "codebase", "createdAt", "updatedAt"}
        return cls(
            id=str(data["id"]),
            title=data.get("title", ""),
            status=data.get("status", DEFAULT_STATUS),
            assignee=data.get("assignee", ""),
            codebase=Codebase.from_dict(data.get("codebase")),
            created_at=data.get("createdAt", ""),
            updated_at=data.get("updatedAt", ""),
            extra={k: v for k, v in data.items() if k not in known},
        )


@dataclass
class CardFolder:
    """A card's identifier, its parsed content and where card.json lives."""

    id: str
    card: Card
    path: str

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "card": self.card.to_dict(), "path": self.path}


@dataclass
class Description:
    """A titled, tagged markdown note attached to a card."""

    id: str
    content: str = ""
    title: str | None = None
    tags: list[str] = field(default_factory=list)
    created_at: str = ""
    updated_at: str = ""
    filename: str = ""

    def meta(self) -> dict[str, Any]:
        """Front-matter for this description, in a stable key order."""
        return {
            "id": self.id,
            "title": self.title,
            "tags": list(self.tags),
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    def to_dict(self) -> dict[str, Any]:
        data = self.meta()
        data["content"] = self.content
        data["filename"] = self.filename
        return data


@dataclass
class Board:
    """A board and, when loaded, its cards in display order."""

    id: str
    name: str
    repo_url: str = ""
    card_order: list[str] = field(default_factory=list)
    cards: list[CardFolder] = field(default_factory=list)

    def config(self) -> dict[str, Any]:
        """The board.json document."""
        return {
            "id": self.id,
            "name": self.name,
            "repoUrl": self.repo_url,
            "cards": list(self.card_order),
        }

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "repoUrl": self.repo_url,
            "cards": [folder.to_dict() for folder in self.cards],
        }

    @classmethod
    def from_config(cls, board_id: str, data: dict) -> "Board":
        order = data.get("cards") or []
        # Older board.json files embedded whole card folders here
        card_order = [c["id"] if isinstance(c, dict) else str(c) for c in order if c]
        return cls(
            id=board_id,
            name=data.get("name", board_id),
            repo_url=data.get("repoUrl", ""),
            card_order=card_order,
        )


@dataclass
class Skipped:
    """An entry a listing could not load."""

    path: str
    reason: str

    def to_dict(self) -> dict[str, str]:
        return {"path": self.path, "reason": self.reason}


@dataclass
class Listing:
    """Result of a tolerant listing: what loaded and what was skipped."""

    items: list = field(default_factory=list)
    skipped: list[Skipped] = field(default_factory=list)

    def __iter__(self):
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def skip(self, path: str, reason: str) -> None:
        self.skipped.append(Skipped(path=path, reason=reason))
