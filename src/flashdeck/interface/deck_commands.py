"""Deck, card and trash command groups."""

from typing import Annotated

import typer

from flashdeck.application.scheduler import is_due, now_ms
from flashdeck.domain.errors import FlashdeckError
from flashdeck.interface._common import (
    _resolve_with_overrides,
    fail,
    format_due,
    open_deck_service,
)

deck_app = typer.Typer(help="Create, edit and inspect decks.", no_args_is_help=True)
card_app = typer.Typer(help="Add, edit, delete and reset cards.", no_args_is_help=True)
trash_app = typer.Typer(help="Restore or purge deleted cards.", no_args_is_help=True)


# ---------------------------------------------------------------------------
# Decks
# ---------------------------------------------------------------------------


@deck_app.command("list")
def deck_list():
    """List decks with their card and due counts."""
    try:
        with open_deck_service(_resolve_with_overrides()) as service:
            summaries = service.deck_summaries()
    except FlashdeckError as e:
        fail(e)

    if not summaries:
        typer.secho("No decks yet. Create one with 'flashdeck deck create'.", fg="yellow")
        return
    for s in summaries:
        due = typer.style(f"{s.due} due", fg="green" if s.due else None)
        typer.echo(f"{s.deck_id}  {s.name}  ({s.total} cards, {due})")


@deck_app.command("create")
def deck_create(
    name: Annotated[str, typer.Argument(help="Deck name.")],
    description: Annotated[str, typer.Option("--description", "-d", help="Description.")] = "",
):
    """Create an empty deck."""
    try:
        with open_deck_service(_resolve_with_overrides()) as service:
            deck = service.create_deck(name, description)
    except FlashdeckError as e:
        fail(e)
    typer.secho(f"Created deck '{deck.name}' ({deck.id}).", fg="green")


@deck_app.command("edit")
def deck_edit(
    deck_id: Annotated[str, typer.Argument(help="Deck id.")],
    name: Annotated[str | None, typer.Option(help="New name.")] = None,
    description: Annotated[str | None, typer.Option(help="New description.")] = None,
):
    """Rename a deck or change its description."""
    try:
        with open_deck_service(_resolve_with_overrides()) as service:
            deck = service.get_deck(deck_id)
            deck = service.edit_deck(
                deck_id,
                name if name is not None else deck.name,
                description if description is not None else deck.description,
            )
    except FlashdeckError as e:
        fail(e)
    typer.secho(f"Updated deck '{deck.name}'.", fg="green")


@deck_app.command("delete")
def deck_delete(
    deck_id: Annotated[str, typer.Argument(help="Deck id.")],
    force: Annotated[bool, typer.Option("--force", "-f", help="Skip confirmation.")] = False,
):
    """Delete a deck and all of its cards."""
    if not force:
        typer.confirm(f"Delete deck {deck_id} and all of its cards?", abort=True)
    try:
        with open_deck_service(_resolve_with_overrides()) as service:
            service.delete_deck(deck_id)
    except FlashdeckError as e:
        fail(e)
    typer.secho(f"Deleted deck {deck_id}.", fg="green")


@deck_app.command("show")
def deck_show(deck_id: Annotated[str, typer.Argument(help="Deck id.")]):
    """Show a deck's cards and their schedule."""
    try:
        with open_deck_service(_resolve_with_overrides()) as service:
            deck = service.get_deck(deck_id)
    except FlashdeckError as e:
        fail(e)

    at = now_ms()
    due = sum(1 for c in deck.cards if is_due(c, at))
    typer.echo(f"{deck.name}  ({len(deck.cards)} cards, {due} due)")
    if deck.description:
        typer.echo(deck.description)
    for card in deck.cards:
        if card.is_done:
            status = "done"
        elif is_due(card, at):
            status = "due"
        else:
            status = f"next {format_due(card.next_review_date)}"
        last = card.last_difficulty.value if card.last_difficulty else "-"
        typer.echo(
            f"  {card.id}  {card.front} -> {card.back}  "
            f"[{status}, {card.interval}d, ease {card.ease_factor:.2f}, last {last}]"
        )


# ---------------------------------------------------------------------------
# Cards
# ---------------------------------------------------------------------------


@card_app.command("add")
def card_add(
    deck_id: Annotated[str, typer.Argument(help="Deck id.")],
    front: Annotated[str, typer.Argument(help="Question or term.")],
    back: Annotated[str, typer.Argument(help="Answer or definition.")],
):
    """Add a card; it is due immediately."""
    try:
        with open_deck_service(_resolve_with_overrides()) as service:
            card = service.add_card(deck_id, front, back)
    except FlashdeckError as e:
        fail(e)
    typer.secho(f"Added card {card.id}.", fg="green")


@card_app.command("edit")
def card_edit(
    deck_id: Annotated[str, typer.Argument(help="Deck id.")],
    card_id: Annotated[str, typer.Argument(help="Card id.")],
    front: Annotated[str | None, typer.Option(help="New front text.")] = None,
    back: Annotated[str | None, typer.Option(help="New back text.")] = None,
):
    """Change a card's text. Its schedule is kept."""
    try:
        with open_deck_service(_resolve_with_overrides()) as service:
            card = service.get_card(deck_id, card_id)
            service.edit_card(
                deck_id,
                card_id,
                front if front is not None else card.front,
                back if back is not None else card.back,
            )
    except FlashdeckError as e:
        fail(e)
    typer.secho(f"Updated card {card_id}.", fg="green")


@card_app.command("delete")
def card_delete(
    deck_id: Annotated[str, typer.Argument(help="Deck id.")],
    card_id: Annotated[str, typer.Argument(help="Card id.")],
):
    """Move a card to the trash."""
    try:
        with open_deck_service(_resolve_with_overrides()) as service:
            service.delete_card(deck_id, card_id)
    except FlashdeckError as e:
        fail(e)
    typer.secho(f"Moved card {card_id} to the trash.", fg="green")


@card_app.command("reset")
def card_reset(
    deck_id: Annotated[str, typer.Argument(help="Deck id.")],
    card_id: Annotated[str, typer.Argument(help="Card id.")],
):
    """Forget a card's progress and bring it back into study (clears 'done')."""
    try:
        with open_deck_service(_resolve_with_overrides()) as service:
            service.reset_card(deck_id, card_id)
    except FlashdeckError as e:
        fail(e)
    typer.secho(f"Reset card {card_id}.", fg="green")


# ---------------------------------------------------------------------------
# Trash
# ---------------------------------------------------------------------------


@trash_app.command("list")
def trash_list(
    deck: Annotated[str | None, typer.Option(help="Only cards deleted from this deck.")] = None,
):
    """List deleted cards, newest first."""
    try:
        with open_deck_service(_resolve_with_overrides()) as service:
            items = service.list_trash(deck)
    except FlashdeckError as e:
        fail(e)

    if not items:
        typer.echo("Trash is empty.")
        return
    for item in items:
        typer.echo(
            f"{item.card.id}  {item.card.front}  "
            f"(from '{item.origin_deck_name}', deleted {format_due(item.deleted_at)})"
        )


@trash_app.command("restore")
def trash_restore(card_id: Annotated[str, typer.Argument(help="Card id.")]):
    """Put a deleted card back into its deck."""
    try:
        with open_deck_service(_resolve_with_overrides()) as service:
            deck = service.restore_card(card_id)
    except FlashdeckError as e:
        fail(e)
    typer.secho(f"Restored card {card_id} to '{deck.name}'.", fg="green")


@trash_app.command("purge")
def trash_purge(
    card_id: Annotated[str, typer.Argument(help="Card id.")],
    force: Annotated[bool, typer.Option("--force", "-f", help="Skip confirmation.")] = False,
):
    """Delete a card from the trash forever."""
    if not force:
        typer.confirm(f"Permanently delete card {card_id}?", abort=True)
    try:
        with open_deck_service(_resolve_with_overrides()) as service:
            service.purge(card_id)
    except FlashdeckError as e:
        fail(e)
    typer.secho(f"Deleted card {card_id} forever.", fg="green")
