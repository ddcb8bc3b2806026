"""Helpers shared by the CLI command groups."""

from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime
from typing import Any, NoReturn

import typer

from flashdeck.application.config import AppConfig, resolve_config
from flashdeck.application.deck_service import DeckService
from flashdeck.application.factory import get_deck_store
from flashdeck.domain.errors import (
    FlashdeckError,
    GenerationError,
    InvalidTransitionError,
    NotFoundError,
    StoreError,
    ValidationError,
)


def _resolve_with_overrides(**overrides: Any) -> AppConfig:
    return resolve_config(overrides)


@contextmanager
def open_deck_service(config: AppConfig) -> Iterator[DeckService]:
    """Open the configured store for the duration of one command."""
    with get_deck_store(config) as store:
        yield DeckService(store)


def humanize_error(e: Exception) -> str:
    if isinstance(e, NotFoundError):
        return f"Not found: {e}"
    if isinstance(e, ValidationError):
        return f"Invalid input: {e}"
    if isinstance(e, StoreError):
        return f"Storage problem: {e}"
    if isinstance(e, GenerationError):
        return f"Generation failed: {e}"
    if isinstance(e, InvalidTransitionError):
        return f"Session error: {e}"
    return str(e)


def fail(e: FlashdeckError) -> NoReturn:
    typer.secho(humanize_error(e), fg="red", err=True)
    raise typer.Exit(1)


def format_due(next_review_ms: int) -> str:
    return datetime.fromtimestamp(next_review_ms / 1000).strftime("%Y-%m-%d %H:%M")
