"""Identifier generation and comparison for cards and descriptions."""

import re
import time
import uuid
from collections.abc import Callable

from dirban.constants import DESCRIPTION_PREFIX, DESCRIPTION_SUFFIX

_NUMERIC = re.compile(r"^\d+$")
_DESCRIPTION_NAME = re.compile(
    rf"^{re.escape(DESCRIPTION_PREFIX)}(\d+){re.escape(DESCRIPTION_SUFFIX)}$"
)


def is_numeric_id(s: str) -> bool:
    """True if s is a non-empty run of digits, the shape of a card ID."""
    return bool(_NUMERIC.match(s))


def compare_ids(left: str, right: str) -> int:
    """Compare two IDs, padding with leading zeros.

    Returns -1 if left < right, 0 if equal, 1 if left > right.
    """
    max_len = max(len(left), len(right))
    left_padded = left.zfill(max_len)
    right_padded = right.zfill(max_len)

    if left_padded < right_padded:
        return -1
    if left_padded > right_padded:
        return 1
    return 0


def max_id(ids: list[str]) -> str | None:
    """Find the highest ID from a list, or None if empty."""
    if not ids:
        return None

    highest = ids[0]
    for id_ in ids[1:]:
        if compare_ids(id_, highest) > 0:
            highest = id_
    return highest


def next_id(current_max: str | None) -> str:
    """Generate the next ID after current_max.

    - If None, returns "1"
    - If numeric (e.g., "9"), returns str(int + 1) (e.g., "10")
    """
    if current_max is None:
        return "1"
    return str(int(current_max) + 1)


def new_card_id(taken: Callable[[str], bool], now: float | None = None) -> str:
    """Generate a card ID from the current time in milliseconds.

    Bumps by one until `taken` reports the ID free, so two cards created
    within the same millisecond still get distinct directories.
    """
    millis = int((time.time() if now is None else now) * 1000)
    card_id = str(millis)
    while taken(card_id):
        card_id = next_id(card_id)
    return card_id


def new_description_id() -> str:
    """Generate a stable identifier for a description."""
    return uuid.uuid4().hex[:12]


def description_number(filename: str) -> str | None:
    """Extract N from "description_N.md", or None for other names.

    "description_3.md" -> "3", "notes.md" -> None
    """
    match = _DESCRIPTION_NAME.match(filename)
    return match.group(1) if match else None


def description_filename(number: str) -> str:
    """Build the file name for description number N."""
    return f"{DESCRIPTION_PREFIX}{number}{DESCRIPTION_SUFFIX}"
