"""Centralized constants for flashdeck.

All magic numbers and configuration defaults live here so every layer
imports from a single source of truth.
"""

# ---------- Scheduler ----------
INITIAL_EASE_FACTOR = 2.5
MIN_EASE_FACTOR = 1.3
EASE_STEP = 0.15

INTERVAL_AGAIN = 0  # days; show again right away
INTERVAL_HARD = 1
INTERVAL_GOOD = 5
INTERVAL_EASY = 14

# ---------- Store ----------
STORE_FORMAT_VERSION = 1
DEMO_DECK_ID = "demo-deck"
RESTORED_DECK_ID = "restored-deck"
RESTORED_DECK_NAME = "Restored Cards"
RESTORED_DECK_DESCRIPTION = "Cards restored from deleted decks"

# ---------- Card generation ----------
DEFAULT_GEMINI_MODEL = "gemini-2.5-flash"
DEFAULT_GEMINI_URL = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_CARD_COUNT = 5
MAX_SOURCE_TEXT_LEN = 5000
REQUEST_TIMEOUT = 30.0
