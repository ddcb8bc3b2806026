"""flashdeck: flashcard decks with fixed-bucket spaced repetition."""

from flashdeck.consts import VERSION

__version__ = VERSION
