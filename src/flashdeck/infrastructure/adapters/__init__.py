# Infrastructure Adapters Package
from .gemini import GeminiCardGenerator

__all__ = ["GeminiCardGenerator"]
