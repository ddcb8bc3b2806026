"""Exception hierarchy shared by every layer.

Domain and application code raise these; the CLI and server translate them
into exit codes and HTTP statuses.
"""


class FlashdeckError(Exception):
    """Base class for all flashdeck errors."""


class NotFoundError(FlashdeckError):
    """A deck, card or trash entry does not exist."""


class ValidationError(FlashdeckError):
    """User input was rejected (blank names, empty card text, ...)."""


class InvalidTransitionError(FlashdeckError):
    """A study session was asked to do something its current state forbids."""


class StoreError(FlashdeckError):
    """The deck store could not be read or written."""


class GenerationError(FlashdeckError):
    """The card generation service failed or returned nothing usable."""
