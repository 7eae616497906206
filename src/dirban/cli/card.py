"""Handlers for 'dirban card' commands."""

from dirban.cli._common import (
    call_or_die,
    format_card_line,
    output_json,
    output_result,
    services_or_die,
    warn_skipped,
)


def _codebase(args) -> dict:
    codebase = {}
    if args.repo is not None:
        codebase["repo"] = args.repo
    if args.commit is not None:
        codebase["commit"] = args.commit
    return codebase


def card_list(args) -> int:
    """List cards of a board, optionally filtered by status."""
    svc = services_or_die(args)
    listing = call_or_die(args.json, svc.cards.get_cards, args.board)
    folders = [f for f in listing if not args.status or f.card.status == args.status]

    if args.json:
        output_json([f.to_dict() for f in folders])
    else:
        warn_skipped(listing, args.json)
        for folder in folders:
            print(format_card_line(folder))

    return 0


def card_get(args) -> int:
    """Show one card with its descriptions."""
    svc = services_or_die(args)
    folder = call_or_die(args.json, svc.cards.get_card, args.board, args.id)
    descriptions = call_or_die(args.json, svc.descriptions.get_descriptions, args.board, args.id)

    if args.json:
        data = folder.to_dict()
        data["descriptions"] = [d.to_dict() for d in descriptions]
        output_json(data)
        return 0

    card = folder.card
    print(format_card_line(folder))
    if card.codebase.repo or card.codebase.commit:
        print(f"  codebase: {card.codebase.repo} @ {card.codebase.commit}")
    print(f"  created: {card.created_at}  updated: {card.updated_at}")
    for description in descriptions:
        heading = description.title or description.id
        tags = f"  [{', '.join(description.tags)}]" if description.tags else ""
        print(f"\n## {heading}{tags}\n")
        print(description.content.rstrip())
    return 0


def card_add(args) -> int:
    """Create a card."""
    svc = services_or_die(args)
    fields = {"title": args.title, "status": args.status, "assignee": args.assignee or ""}
    codebase = _codebase(args)
    if codebase:
        fields["codebase"] = codebase

    folder = call_or_die(args.json, svc.cards.create_card, args.board, fields)
    output_result(folder.to_dict(), f"Created card {folder.id} in {args.board}", args.json)
    return 0


def card_set(args) -> int:
    """Update fields of a card."""
    svc = services_or_die(args)
    updates = {k: v for k, v in (("title", args.title), ("status", args.status), ("assignee", args.assignee)) if v is not None}
    codebase = _codebase(args)
    if codebase:
        updates["codebase"] = codebase

    folder = call_or_die(args.json, svc.cards.update_card, args.board, args.id, updates)
    output_result(folder.to_dict(), f"Updated card {folder.id}", args.json)
    return 0


def card_rm(args) -> int:
    """Delete a card. Deleting a missing card is not an error."""
    svc = services_or_die(args)
    removed = call_or_die(args.json, svc.delete_card, args.board, args.id)
    text = f"Deleted card {args.id}" if removed else f"Card {args.id} already gone"
    output_result({"id": args.id, "deleted": removed}, text, args.json)
    return 0
