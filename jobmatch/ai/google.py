"""Google Generative Language API client for embeddings and suggestions.

Talks to the REST API directly with requests:
- POST /models/{model}:batchEmbedContents for embeddings
- POST /models/{model}:generateContent for improvement suggestions
"""

import time
from typing import Any, Callable, Dict, List, Optional

import requests

from jobmatch.config.models import AIConfig
from jobmatch.logging import get_logger

from .base import EmbeddingProvider, SuggestionProvider
from .exceptions import AIProviderError

logger = get_logger(__name__, component="ai")

# batchEmbedContents accepts at most 100 requests per call.
MAX_BATCH_SIZE = 100
MAX_RETRY_DELAY = 30.0

SUGGESTION_PROMPT = (
    "A candidate applied for the position of '{job_title}' but was not selected. "
    "Write one short, encouraging paragraph (at most 120 words) suggesting concrete "
    "skills, tools or experience they could build to become a stronger candidate "
    "for this kind of role. Do not use markdown, headings or bullet points."
)


class GoogleAIClient(EmbeddingProvider, SuggestionProvider):
    """Embedding and text generation over the Generative Language REST API.

    Attributes:
        config: AI settings (base URL, model names, timeout, retry policy)
        api_key: API key sent in the x-goog-api-key header
    """

    def __init__(
        self,
        config: AIConfig,
        api_key: str,
        session: Optional[requests.Session] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if not api_key:
            raise AIProviderError("An API key is required for the Google AI client")

        self.config = config
        self.api_key = api_key
        self._sleep = sleep
        self._session = session or requests.Session()
        self._session.headers.update(
            {"x-goog-api-key": api_key, "Content-Type": "application/json"}
        )

    def embed(self, texts: List[str]) -> List[List[float]]:
        """Embed texts with the configured embedding model.

        Inputs are sent in batches of at most MAX_BATCH_SIZE; the returned list
        preserves input order across batches.
        """
        if not texts:
            return []

        model_path = f"models/{self.config.embedding_model}"
        vectors: List[List[float]] = []

        for start in range(0, len(texts), MAX_BATCH_SIZE):
            batch = texts[start:start + MAX_BATCH_SIZE]
            body = {
                "requests": [
                    {"model": model_path, "content": {"parts": [{"text": text}]}}
                    for text in batch
                ]
            }
            data = self._post(f"{model_path}:batchEmbedContents", body, operation="embed")
            vectors.extend(self._parse_embeddings(data, expected=len(batch)))

        logger.debug(
            f"Embedded {len(texts)} texts",
            extra={
                "event": "ai.embed.succeeded",
                "model": self.config.embedding_model,
                "count": len(texts),
                "dimensions": len(vectors[0]) if vectors else 0,
            },
        )
        return vectors

    def suggest_improvements(self, job_title: str) -> str:
        """Ask the generation model for advice to a rejected candidate."""
        model_path = f"models/{self.config.generation_model}"
        body = {
            "contents": [
                {"role": "user", "parts": [{"text": SUGGESTION_PROMPT.format(job_title=job_title)}]}
            ]
        }
        data = self._post(f"{model_path}:generateContent", body, operation="generate")
        text = self._parse_generated_text(data)

        logger.debug(
            f"Generated improvement suggestion for '{job_title}'",
            extra={
                "event": "ai.generate.succeeded",
                "model": self.config.generation_model,
                "chars": len(text),
            },
        )
        return text

    def _post(self, path: str, body: Dict[str, Any], operation: str) -> Dict[str, Any]:
        """POST with retry and exponential backoff on retryable failures."""
        url = f"{self.config.base_url}/{path}"
        max_attempts = self.config.max_retries + 1
        delay = self.config.retry_initial_delay

        for attempt in range(1, max_attempts + 1):
            try:
                return self._post_once(url, body, operation)
            except AIProviderError as e:
                if not e.is_retryable or attempt == max_attempts:
                    raise
                logger.warning(
                    f"Retrying AI provider call (attempt {attempt + 1}/{max_attempts}) "
                    f"after {delay:.1f}s delay: {e}",
                    extra={"event": f"ai.{operation}.retry", "attempt": attempt + 1},
                )
            self._sleep(delay)
            delay = min(delay * self.config.retry_backoff_multiplier, MAX_RETRY_DELAY)

    def _post_once(self, url: str, body: Dict[str, Any], operation: str) -> Dict[str, Any]:
        try:
            response = self._session.post(url, json=body, timeout=self.config.request_timeout)
        except requests.exceptions.Timeout as e:
            logger.warning(
                f"AI provider request timed out after {self.config.request_timeout}s",
                extra={"event": f"ai.{operation}.timeout", "url": url},
            )
            raise AIProviderError(
                f"Request to {url} timed out after {self.config.request_timeout} seconds",
                operation=operation,
                transient=True,
            ) from e
        except requests.exceptions.RequestException as e:
            logger.error(
                f"AI provider request failed: {e}",
                extra={"event": f"ai.{operation}.error", "error_type": type(e).__name__},
            )
            raise AIProviderError(
                f"Request to {url} failed: {e}", operation=operation, transient=True
            ) from e

        if response.status_code >= 400:
            detail = _error_detail(response)
            logger.error(
                f"AI provider returned HTTP {response.status_code}",
                extra={
                    "event": f"ai.{operation}.error",
                    "status_code": response.status_code,
                    "detail": detail,
                },
            )
            raise AIProviderError(
                f"HTTP {response.status_code} from AI provider: {detail}",
                operation=operation,
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise AIProviderError(
                f"AI provider returned invalid JSON: {e}", operation=operation
            ) from e
        if not isinstance(data, dict):
            raise AIProviderError("AI provider returned a non-object response", operation=operation)
        return data

    @staticmethod
    def _parse_embeddings(data: Dict[str, Any], expected: int) -> List[List[float]]:
        items = data.get("embeddings")
        if not isinstance(items, list):
            raise AIProviderError("Embedding response has no 'embeddings' list", operation="embed")
        if len(items) != expected:
            raise AIProviderError(
                f"Embedding response returned {len(items)} vectors for {expected} inputs",
                operation="embed",
            )

        vectors = []
        for index, item in enumerate(items):
            values = item.get("values") if isinstance(item, dict) else None
            if not isinstance(values, list) or not values:
                raise AIProviderError(
                    f"Embedding {index} has no values", operation="embed"
                )
            try:
                vectors.append([float(v) for v in values])
            except (TypeError, ValueError) as e:
                raise AIProviderError(
                    f"Embedding {index} contains non-numeric values", operation="embed"
                ) from e
        return vectors

    @staticmethod
    def _parse_generated_text(data: Dict[str, Any]) -> str:
        try:
            parts = data["candidates"][0]["content"]["parts"]
        except (KeyError, IndexError, TypeError) as e:
            feedback = data.get("promptFeedback", {}).get("blockReason")
            reason = f" (blocked: {feedback})" if feedback else ""
            raise AIProviderError(
                f"Generation response contained no candidates{reason}", operation="generate"
            ) from e

        text = "".join(part.get("text", "") for part in parts if isinstance(part, dict)).strip()
        if not text:
            raise AIProviderError("Generation response contained no text", operation="generate")
        return text


def _error_detail(response: requests.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        return (response.text or response.reason or "").strip()[:200]
    if isinstance(payload, dict) and isinstance(payload.get("error"), dict):
        return str(payload["error"].get("message", ""))[:200]
    return str(payload)[:200]
