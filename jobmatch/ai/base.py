"""Provider interfaces for embeddings and improvement suggestions.

The matching pipeline and the services depend on these abstractions rather than
on a concrete SDK, so tests can pass in deterministic fakes.
"""

from abc import ABC, abstractmethod
from typing import List


class EmbeddingProvider(ABC):
    """Turns text into embedding vectors."""

    @abstractmethod
    def embed(self, texts: List[str]) -> List[List[float]]:
        """Embed each text.

        Args:
            texts: Strings to embed

        Returns:
            One vector per input string, in input order

        Raises:
            AIProviderError: If the provider call fails or returns a malformed body
        """


class SuggestionProvider(ABC):
    """Writes advice for candidates who were not selected for a job."""

    @abstractmethod
    def suggest_improvements(self, job_title: str) -> str:
        """Return one paragraph of improvement advice for the given job title.

        Raises:
            AIProviderError: If the provider call fails or returns no text
        """
