"""Shared helpers for CLI command handlers."""

import json
import sys
from collections.abc import Callable
from typing import Any, TypeVar

from dirban.config import read_config
from dirban.errors import DirbanError
from dirban.models import CardFolder
from dirban.services import Services, build_services

T = TypeVar("T")


def services_or_die(args) -> Services:
    """Build services from --config/--root. Exit 1 with message on bad config."""
    try:
        settings = read_config(getattr(args, "config", None), root=getattr(args, "root", None))
        return build_services(settings)
    except (DirbanError, OSError) as e:
        error(str(e), args.json)


def call_or_die(json_mode: bool, fn: Callable[..., T], *args: Any, **kwargs: Any) -> T:
    """Run a service call. Exit 1 with its message if it raises a dirban error."""
    try:
        return fn(*args, **kwargs)
    except DirbanError as e:
        error(e.message or type(e).__name__, json_mode)


def output_json(data: dict | list) -> None:
    """Write JSON to stdout."""
    print(json.dumps(data, indent=2))


def output_result(data: dict, text: str, json_mode: bool) -> None:
    """Output mutation result as JSON or plain text."""
    if json_mode:
        output_json(data)
    else:
        print(text)


def error(message: str, json_mode: bool) -> None:
    """Print error to stderr and exit 1."""
    if json_mode:
        print(json.dumps({"error": message}), file=sys.stderr)
    else:
        print(f"error: {message}", file=sys.stderr)
    sys.exit(1)


def warn_skipped(listing, json_mode: bool) -> None:
    """Report entries a listing skipped, on stderr."""
    if json_mode:
        return
    for skipped in listing.skipped:
        print(f"warning: skipped {skipped.path}: {skipped.reason}", file=sys.stderr)


def format_card_line(folder: CardFolder, indent: str = "") -> str:
    """Format a card as a one-line summary."""
    card = folder.card
    assignee = f"  @{card.assignee}" if card.assignee else ""
    return f"{indent}{folder.id}  [{card.status:<5}] {card.title}{assignee}"
