"""flashdeck CLI: root commands and subgroup registration."""

import json
import logging
import sys
from typing import Annotated

import typer

from flashdeck.application.config import resolve_config

# Re-export for tests
from flashdeck.interface._common import humanize_error  # noqa: F401

app = typer.Typer(
    help="flashdeck: flashcards with spaced repetition.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s:%(name)s:%(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)

# 0 = warnings only, 1 = info, 2+ = debug
LOG_LEVELS = {0: logging.WARNING, 1: logging.INFO, 2: logging.DEBUG}

from flashdeck.interface.deck_commands import card_app, deck_app, trash_app  # noqa: E402
from flashdeck.interface.study_commands import generate, study  # noqa: E402

app.add_typer(deck_app, name="deck")
app.add_typer(card_app, name="card")
app.add_typer(trash_app, name="trash")
app.command()(study)
app.command()(generate)

config_app = typer.Typer(help="Inspect flashdeck configuration.")
app.add_typer(config_app, name="config")


@app.callback()
def main_callback(
    ctx: typer.Context,
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose",
            "-v",
            count=True,
            help="Log more. Repeat for debug output. Defaults to the configured level.",
        ),
    ] = 0,
):
    """Spaced repetition flashcards from the terminal."""
    if not verbose:
        verbose = resolve_config().verbose
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    logging.getLogger().setLevel(LOG_LEVELS[min(max(verbose, 0), 2)])


@app.command()
def serve(
    port: Annotated[int, typer.Option(help="Port for the HTTP API.")] = 8787,
    host: Annotated[str, typer.Option(help="Interface to listen on.")] = "127.0.0.1",
    reload: Annotated[bool, typer.Option(help="Restart on source changes.")] = False,
):
    """Run the HTTP API."""
    import uvicorn

    logger.info(f"Serving flashdeck on http://{host}:{port}")
    uvicorn.run("flashdeck.server:app", host=host, port=port, reload=reload)


@config_app.command("show")
def config_show():
    """Print the merged configuration (defaults, TOML file, environment)."""
    settings = resolve_config().model_dump()
    if settings.get("gemini_api_key"):
        settings["gemini_api_key"] = "***"
    typer.echo(json.dumps(settings, indent=2, default=str))
