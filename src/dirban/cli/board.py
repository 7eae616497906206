"""Handlers for 'dirban board' commands."""

from dirban.cli._common import (
    call_or_die,
    format_card_line,
    output_json,
    output_result,
    services_or_die,
    warn_skipped,
)


def board_list(args) -> int:
    """List boards."""
    svc = services_or_die(args)
    listing = call_or_die(args.json, svc.boards.list_boards)

    if args.json:
        output_json([board.config() for board in listing])
    else:
        warn_skipped(listing, args.json)
        for board in listing:
            count = len(board.card_order)
            cards = "card" if count == 1 else "cards"
            print(f"{board.id:<20} {board.name}  ({count} {cards})")

    return 0


def board_add(args) -> int:
    """Create a board."""
    svc = services_or_die(args)
    board = call_or_die(args.json, svc.boards.create_board, args.name, args.repo_url or "")
    output_result(board.to_dict(), f"Created board {board.id}", args.json)
    return 0


def board_get(args) -> int:
    """Show a board with its cards."""
    svc = services_or_die(args)
    board = call_or_die(args.json, svc.boards.get_board, args.id)

    if args.json:
        output_json(board.to_dict())
        return 0

    print(board.name)
    if board.repo_url:
        print(f"repo: {board.repo_url}")
    for folder in board.cards:
        print(format_card_line(folder, indent="  "))
    return 0
