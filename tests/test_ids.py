"""Tests for card and description ID helpers."""

from dirban.ids import (
    compare_ids,
    description_filename,
    description_number,
    is_numeric_id,
    max_id,
    new_card_id,
    new_description_id,
    next_id,
)


def test_compare_ids_numeric():
    assert compare_ids("9", "10") == -1
    assert compare_ids("10", "9") == 1
    assert compare_ids("001", "1") == 0


def test_compare_ids_timestamps():
    """Millisecond IDs of different lengths still order numerically."""
    assert compare_ids("999999999999", "1700000000000") == -1


def test_max_id():
    assert max_id([]) is None
    assert max_id(["2", "10", "9"]) == "10"


def test_next_id():
    assert next_id(None) == "1"
    assert next_id("9") == "10"


def test_is_numeric_id():
    assert is_numeric_id("1700000000000")
    assert not is_numeric_id("")
    assert not is_numeric_id("board.json")
    assert not is_numeric_id("12a")


def test_new_card_id_uses_milliseconds():
    assert new_card_id(lambda _: False, now=1700000000.123) == "1700000000123"


def test_new_card_id_bumps_past_taken():
    taken = {"1700000000123", "1700000000124"}
    assert new_card_id(taken.__contains__, now=1700000000.123) == "1700000000125"


def test_new_description_id_unique():
    ids = {new_description_id() for _ in range(50)}
    assert len(ids) == 50
    assert all(len(i) == 12 for i in ids)


def test_description_number():
    assert description_number("description_3.md") == "3"
    assert description_number("description_12.md") == "12"
    assert description_number("descriptions.json") is None
    assert description_number("notes.md") is None
    assert description_number("description_x.md") is None


def test_description_filename():
    assert description_filename("4") == "description_4.md"
