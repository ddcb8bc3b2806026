"""Interactive study and card generation commands."""

import asyncio
from pathlib import Path
from typing import Annotated

import typer

from flashdeck.application.generation import GenerationService
from flashdeck.application.session import SessionState, StudySession
from flashdeck.domain.errors import FlashdeckError
from flashdeck.domain.models import Rating
from flashdeck.interface._common import _resolve_with_overrides, fail, open_deck_service

RATING_KEYS = {
    "1": Rating.AGAIN,
    "2": Rating.HARD,
    "3": Rating.GOOD,
    "4": Rating.EASY,
}


def _rating_menu(session: StudySession) -> str:
    labels = session.preview()
    options = [f"{key}) {r.value} ({labels[r]})" for key, r in RATING_KEYS.items()]
    options.append("d) Done (hide)")
    return "  ".join(options)


def run_study_loop(session: StudySession) -> bool:
    """
    Drive a started session from the terminal.

    Returns:
        True when the session reached a terminal state, False if the user quit.
    """
    if session.state is SessionState.EMPTY:
        typer.secho("All caught up!", fg="green", bold=True)
        typer.echo("There are no cards due for review in this deck right now.")
        session.acknowledge()
        return True

    while session.state is SessionState.ACTIVE:
        position, total = session.progress
        card = session.current

        typer.echo("")
        typer.secho(f"[{position + 1}/{total}]", fg="cyan")
        typer.secho(card.front, bold=True)
        answer = typer.prompt("Enter to show answer, q to quit", default="", show_default=False)
        if answer.strip().lower() == "q":
            typer.echo("Session left early; rated cards are saved.")
            return False

        session.reveal()
        typer.echo(card.back)
        typer.echo(_rating_menu(session))

        while True:
            choice = typer.prompt("Rating").strip().lower()
            if choice in RATING_KEYS:
                session.rate(RATING_KEYS[choice])
                break
            if choice == "d":
                session.mark_done()
                break
            if choice == "q":
                typer.echo("Session left early; rated cards are saved.")
                return False
            typer.secho("Choose 1-4, d or q.", fg="yellow")

    typer.secho("Session complete!", fg="green", bold=True)
    typer.echo(f"You studied {len(session.queue)} cards.")
    session.acknowledge()
    return True


def study(deck_id: Annotated[str, typer.Argument(help="Deck id to study.")]):
    """[bold green]Study[/bold green] the cards that are due in a deck."""
    try:
        with open_deck_service(_resolve_with_overrides()) as service:
            session = service.start_session(deck_id)
            run_study_loop(session)
    except FlashdeckError as e:
        fail(e)


def generate(
    deck_id: Annotated[str, typer.Argument(help="Deck receiving the cards.")],
    topic: Annotated[str | None, typer.Option(help="Topic to write cards about.")] = None,
    text: Annotated[str | None, typer.Option(help="Text to extract cards from.")] = None,
    text_file: Annotated[
        Path | None,
        typer.Option(
            help="File whose text to extract cards from.",
            exists=True,
            dir_okay=False,
            readable=True,
        ),
    ] = None,
    words: Annotated[str | None, typer.Option(help="Words to make one card each for.")] = None,
    count: Annotated[int | None, typer.Option(help="How many cards to ask for.")] = None,
    instructions: Annotated[
        str | None, typer.Option(help="Extra guidance for the model.")
    ] = None,
):
    """Generate cards with Gemini from a topic, a text, or a word list."""
    from flashdeck.application.factory import get_card_generator

    sources = {"topic": topic, "text": text, "text-file": text_file, "words": words}
    chosen = [(mode, value) for mode, value in sources.items() if value is not None]
    if len(chosen) != 1:
        typer.secho("Give exactly one of --topic, --text, --text-file or --words.", fg="red")
        raise typer.Exit(2)
    mode, source = chosen[0]
    if mode == "text-file":
        try:
            mode, source = "text", text_file.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise typer.BadParameter(
                f"cannot read {text_file}: {e}", param_hint="--text-file"
            ) from e

    config = _resolve_with_overrides()
    generator = get_card_generator(config)

    async def run():
        try:
            with open_deck_service(config) as service:
                return await GenerationService(generator, service).generate(
                    deck_id,
                    mode,
                    source,
                    count=count if count is not None else config.default_card_count,
                    instructions=instructions,
                )
        finally:
            await generator.aclose()

    try:
        cards = asyncio.run(run())
    except FlashdeckError as e:
        fail(e)

    typer.secho(f"Added {len(cards)} cards to deck {deck_id}.", fg="green")
    for card in cards:
        typer.echo(f"  {card.front} -> {card.back}")
