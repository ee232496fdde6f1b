"""AI provider clients used for skill embeddings and candidate suggestions."""

from .base import EmbeddingProvider, SuggestionProvider
from .exceptions import AIProviderError
from .google import GoogleAIClient

__all__ = [
    "EmbeddingProvider",
    "SuggestionProvider",
    "GoogleAIClient",
    "AIProviderError",
]
