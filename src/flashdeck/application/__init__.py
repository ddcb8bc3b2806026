# Application Package
from .deck_service import DeckService, DeckSummary
from .generation import GenerationService
from .scheduler import compute_next_state, interval_label, is_due, preview_intervals
from .session import SessionState, StudySession

__all__ = [
    "DeckService",
    "DeckSummary",
    "GenerationService",
    "SessionState",
    "StudySession",
    "compute_next_state",
    "interval_label",
    "is_due",
    "preview_intervals",
]
