"""
Store and generator factory.
Centralizes the logic for building infrastructure from configuration.
"""

from flashdeck.application.config import AppConfig
from flashdeck.domain.ports import CardGenerator
from flashdeck.infrastructure.adapters.gemini import GeminiCardGenerator
from flashdeck.infrastructure.stores import JsonDeckStore


def get_deck_store(config: AppConfig) -> JsonDeckStore:
    """
    Returns an unopened JSON store for the configured data path.
    The caller owns its lifecycle (open/close or ``with``).
    """
    return JsonDeckStore(config.data_path, seed_demo=config.seed_demo)


def get_card_generator(config: AppConfig) -> CardGenerator:
    return GeminiCardGenerator(
        api_key=config.gemini_api_key,
        model=config.gemini_model,
        url=config.gemini_url,
        timeout=config.request_timeout,
    )
