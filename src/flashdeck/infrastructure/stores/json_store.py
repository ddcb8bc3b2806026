"""
JSON file deck store.

One document ``{"version", "decks", "trash"}`` on disk, loaded on open() and
rewritten atomically after every mutation. Construct it at process start,
open it, and close it on exit (or use it as a context manager).
"""

import copy
import logging
import os
import tempfile
from datetime import datetime
from pathlib import Path

from pydantic import ValidationError as PydanticValidationError

from flashdeck.application.id_service import create_new_card
from flashdeck.application.scheduler import to_epoch_ms
from flashdeck.domain.constants import DEMO_DECK_ID
from flashdeck.domain.errors import StoreError
from flashdeck.domain.models import Deck, DeletedCard

from .memory import MemoryDeckStore
from .records import DeckRecord, DeletedCardRecord, StoreDocument

logger = logging.getLogger(__name__)

DEMO_CARDS = [
    ("Spaced repetition", "Reviewing material at increasing intervals to fight forgetting."),
    ("Ease factor", "Per-card multiplier; Hard lowers it, Easy raises it. Never below 1.3."),
    ("Again", "Rating for a failed recall. The card is due again right away."),
    ("Good", "Rating for a normal recall. The card comes back in 5 days."),
]


def build_demo_deck(now: datetime | None = None) -> Deck:
    now = now or datetime.now()
    return Deck(
        id=DEMO_DECK_ID,
        name="Demo: Spaced Repetition",
        description="A few cards to try a study session with.",
        cards=[create_new_card(front, back, now) for front, back in DEMO_CARDS],
        created_at=to_epoch_ms(now),
    )


class JsonDeckStore(MemoryDeckStore):
    def __init__(self, path: Path, seed_demo: bool = True):
        super().__init__()
        self.path = Path(path)
        self.seed_demo = seed_demo
        self._open = False
        self._snapshot: tuple[dict[str, Deck], list[DeletedCard]] | None = None

    def __enter__(self) -> "JsonDeckStore":
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    @property
    def is_open(self) -> bool:
        return self._open

    def open(self) -> None:
        """
        Load the document, or start a new one when the file does not exist.

        Raises:
            StoreError: If the file exists but cannot be read or parsed.
        """
        if self._open:
            return

        if self.path.exists():
            try:
                doc = StoreDocument.model_validate_json(self.path.read_text(encoding="utf-8"))
            except (OSError, UnicodeDecodeError, PydanticValidationError) as e:
                logger.error(f"Failed to load decks from {self.path}: {e}")
                raise StoreError(f"Could not read deck store at {self.path}: {e}") from e
            self._decks = {r.id: r.to_domain() for r in doc.decks}
            self._trash = [r.to_domain() for r in doc.trash]
            logger.debug(f"Loaded {len(self._decks)} decks from {self.path}")
            self._open = True
        else:
            self._open = True
            if self.seed_demo:
                demo = build_demo_deck()
                self._decks = {demo.id: demo}
                logger.info(f"New store at {self.path}; seeded demo deck")
            self._write()

    def close(self) -> None:
        if self._open:
            self._write()
            self._open = False

    def _before_change(self) -> None:
        if not self._open:
            raise StoreError("Deck store is not open")
        self._snapshot = copy.deepcopy((self._decks, self._trash))

    def _changed(self) -> None:
        # Memory and disk must agree: undo the mutation if it cannot be written.
        snapshot, self._snapshot = self._snapshot, None
        try:
            self._write()
        except StoreError:
            if snapshot is not None:
                self._decks, self._trash = snapshot
            raise

    def _write(self) -> None:
        doc = StoreDocument(
            decks=[DeckRecord.from_domain(d) for d in self._decks.values()],
            trash=[DeletedCardRecord.from_domain(t) for t in self._trash],
        )
        payload = doc.model_dump_json(by_alias=True, indent=2)

        tmp = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(dir=self.path.parent, prefix=".decks-", suffix=".json")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
            os.replace(tmp, self.path)
        except OSError as e:
            if tmp is not None:
                Path(tmp).unlink(missing_ok=True)
            logger.error(f"Failed to write deck store {self.path}: {e}")
            raise StoreError(f"Could not write deck store at {self.path}: {e}") from e
        logger.debug(f"Wrote {len(self._decks)} decks to {self.path}")
