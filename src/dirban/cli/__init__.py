"""CLI argument parser and dispatch for dirban."""

import argparse

from dirban.cli.board import board_add, board_get, board_list
from dirban.cli.card import card_add, card_get, card_list, card_rm, card_set
from dirban.cli.description import desc_add, desc_list, desc_rm, desc_set
from dirban.cli.serve import serve
from dirban.constants import STATUSES


def build_parser() -> argparse.ArgumentParser:
    """Build the full CLI argument parser."""
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--root", default=None, help="Data directory holding boards/ and uploads/ (default: ./data)")
    common.add_argument("--config", default=None, help="YAML settings file")
    common.add_argument("--json", action="store_true", help="Machine-readable JSON output")

    # Same flags after a noun or verb; unset ones must not clobber earlier values
    sub_common = argparse.ArgumentParser(add_help=False)
    sub_common.add_argument("--root", default=argparse.SUPPRESS, help="Data directory holding boards/ and uploads/")
    sub_common.add_argument("--config", default=argparse.SUPPRESS, help="YAML settings file")
    sub_common.add_argument("--json", action="store_true", default=argparse.SUPPRESS, help="Machine-readable JSON output")

    parser = argparse.ArgumentParser(
        prog="dirban",
        description="Kanban boards stored as plain directories",
        parents=[common],
    )

    nouns = parser.add_subparsers(dest="noun")

    # --- serve ---
    serve_p = nouns.add_parser("serve", help="Run the HTTP API", parents=[sub_common])
    serve_p.add_argument("--host", default=None, help="Bind address (default: localhost)")
    serve_p.add_argument("--port", type=int, default=None, help="Port to listen on (default: 3456)")
    serve_p.add_argument("--debug", action="store_true", help="Run Flask in debug mode")
    serve_p.set_defaults(func=serve)

    # --- board ---
    board_p = nouns.add_parser("board", help="Board operations", parents=[sub_common])
    board_verbs = board_p.add_subparsers(dest="verb")

    board_list_p = board_verbs.add_parser("list", help="List boards", parents=[sub_common])
    board_list_p.set_defaults(func=board_list)

    board_add_p = board_verbs.add_parser("add", help="Create a board", parents=[sub_common])
    board_add_p.add_argument("name", help="Board name")
    board_add_p.add_argument("--repo-url", dest="repo_url", default="", help="Repository the board tracks")
    board_add_p.set_defaults(func=board_add)

    board_get_p = board_verbs.add_parser("get", help="Show a board and its cards", parents=[sub_common])
    board_get_p.add_argument("id", help="Board ID")
    board_get_p.set_defaults(func=board_get)

    # board with no verb = list
    board_p.set_defaults(func=board_list)

    # --- card ---
    card_p = nouns.add_parser("card", help="Card operations", parents=[sub_common])
    card_verbs = card_p.add_subparsers(dest="verb")

    card_list_p = card_verbs.add_parser("list", help="List cards", parents=[sub_common])
    card_list_p.add_argument("board", help="Board ID")
    card_list_p.add_argument("--status", choices=STATUSES, help="Filter by status")
    card_list_p.set_defaults(func=card_list)

    card_get_p = card_verbs.add_parser("get", help="Show a card and its descriptions", parents=[sub_common])
    card_get_p.add_argument("board", help="Board ID")
    card_get_p.add_argument("id", help="Card ID")
    card_get_p.set_defaults(func=card_get)

    card_add_p = card_verbs.add_parser("add", help="Create a card", parents=[sub_common])
    card_add_p.add_argument("board", help="Board ID")
    card_add_p.add_argument("title", help="Card title")
    card_add_p.add_argument("--status", choices=STATUSES, default=None, help="Initial status (default: todo)")
    card_add_p.add_argument("--assignee", default=None, help="Who is working on it")
    card_add_p.add_argument("--repo", default=None, help="Codebase repository")
    card_add_p.add_argument("--commit", default=None, help="Codebase commit")
    card_add_p.set_defaults(func=card_add)

    card_set_p = card_verbs.add_parser("set", help="Update card fields", parents=[sub_common])
    card_set_p.add_argument("board", help="Board ID")
    card_set_p.add_argument("id", help="Card ID")
    card_set_p.add_argument("--title", default=None, help="New title")
    card_set_p.add_argument("--status", choices=STATUSES, default=None, help="New status")
    card_set_p.add_argument("--assignee", default=None, help="New assignee")
    card_set_p.add_argument("--repo", default=None, help="Codebase repository")
    card_set_p.add_argument("--commit", default=None, help="Codebase commit")
    card_set_p.set_defaults(func=card_set)

    card_rm_p = card_verbs.add_parser("rm", help="Delete a card", parents=[sub_common])
    card_rm_p.add_argument("board", help="Board ID")
    card_rm_p.add_argument("id", help="Card ID")
    card_rm_p.set_defaults(func=card_rm)

    # --- desc ---
    desc_p = nouns.add_parser("desc", help="Card description operations", parents=[sub_common])
    desc_verbs = desc_p.add_subparsers(dest="verb")

    desc_list_p = desc_verbs.add_parser("list", help="List descriptions", parents=[sub_common])
    desc_list_p.add_argument("board", help="Board ID")
    desc_list_p.add_argument("card", help="Card ID")
    desc_list_p.set_defaults(func=desc_list)

    desc_add_p = desc_verbs.add_parser("add", help="Add a description (content from stdin)", parents=[sub_common])
    desc_add_p.add_argument("board", help="Board ID")
    desc_add_p.add_argument("card", help="Card ID")
    desc_add_p.add_argument("--title", default=None, help="Description title")
    desc_add_p.add_argument("--tag", action="append", default=None, help="Tag (repeatable)")
    desc_add_p.add_argument("--content", default=None, help="Markdown content instead of stdin")
    desc_add_p.set_defaults(func=desc_add)

    desc_set_p = desc_verbs.add_parser("set", help="Update a description", parents=[sub_common])
    desc_set_p.add_argument("board", help="Board ID")
    desc_set_p.add_argument("card", help="Card ID")
    desc_set_p.add_argument("id", help="Description ID")
    desc_set_p.add_argument("--title", default=None, help="New title")
    desc_set_p.add_argument("--tag", action="append", default=None, help="Replace tags (repeatable)")
    desc_set_p.add_argument("--content", default=None, help="New markdown content")
    desc_set_p.add_argument("--stdin", action="store_true", help="Read new content from stdin")
    desc_set_p.set_defaults(func=desc_set)

    desc_rm_p = desc_verbs.add_parser("rm", help="Delete a description", parents=[sub_common])
    desc_rm_p.add_argument("board", help="Board ID")
    desc_rm_p.add_argument("card", help="Card ID")
    desc_rm_p.add_argument("id", nargs="?", default=None, help="Description ID")
    desc_rm_p.add_argument("--index", type=int, default=None, help="Delete by position instead")
    desc_rm_p.set_defaults(func=desc_rm)

    return parser
