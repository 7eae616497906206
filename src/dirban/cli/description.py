"""Handlers for 'dirban desc' commands."""

import sys

from dirban.cli._common import call_or_die, error, output_json, output_result, services_or_die, warn_skipped


def _content(args) -> str:
    if args.content is not None:
        return args.content
    return sys.stdin.read()


def desc_list(args) -> int:
    """List the descriptions of a card."""
    svc = services_or_die(args)
    listing = call_or_die(args.json, svc.descriptions.get_descriptions, args.board, args.card)

    if args.json:
        output_json([d.to_dict() for d in listing])
        return 0

    warn_skipped(listing, args.json)
    for i, description in enumerate(listing):
        title = description.title or "(untitled)"
        tags = f"  [{', '.join(description.tags)}]" if description.tags else ""
        first_line = description.content.strip().split("\n", 1)[0]
        print(f"{i}  {description.id}  {title}{tags}  {first_line}")
    return 0


def desc_add(args) -> int:
    """Add a description, reading content from --content or stdin."""
    svc = services_or_die(args)
    description = call_or_die(
        args.json,
        svc.descriptions.add_description,
        args.board,
        args.card,
        _content(args),
        title=args.title,
        tags=args.tag,
    )
    output_result(description.to_dict(), f"Added description {description.id}", args.json)
    return 0


def desc_set(args) -> int:
    """Update a description; omitted options keep their values."""
    svc = services_or_die(args)
    content = args.content
    if content is None and args.stdin:
        content = sys.stdin.read()
    description = call_or_die(
        args.json,
        svc.descriptions.update_description,
        args.board,
        args.card,
        args.id,
        content=content,
        title=args.title,
        tags=args.tag,
    )
    output_result(description.to_dict(), f"Updated description {description.id}", args.json)
    return 0


def desc_rm(args) -> int:
    """Delete a description by id, or by position with --index."""
    svc = services_or_die(args)
    if args.index is not None:
        description = call_or_die(args.json, svc.descriptions.delete_description_at, args.board, args.card, args.index)
        output_result(description.to_dict(), f"Deleted description {description.id}", args.json)
        return 0

    if not args.id:
        error("a description id or --index is required", args.json)

    removed = call_or_die(args.json, svc.descriptions.delete_description, args.board, args.card, args.id)
    text = f"Deleted description {args.id}" if removed else f"Description {args.id} already gone"
    output_result({"id": args.id, "deleted": removed}, text, args.json)
    return 0
