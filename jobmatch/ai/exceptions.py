"""Exceptions raised by AI provider clients."""

from typing import Optional

from jobmatch.domain.exceptions import ProviderError


class AIProviderError(ProviderError):
    """An embedding or text generation call failed.

    Attributes:
        status_code: HTTP status returned by the provider (None when no response arrived)
        operation: Which call failed ("embed" or "generate")
        transient: The request never completed (timeout or connection failure)
    """

    def __init__(
        self,
        message: str,
        operation: str = "",
        status_code: Optional[int] = None,
        transient: bool = False,
    ) -> None:
        super().__init__(message)
        self.operation = operation
        self.status_code = status_code
        self.transient = transient

    @property
    def is_retryable(self) -> bool:
        """True for timeouts, connection failures, throttling and 5xx responses."""
        if self.transient:
            return True
        return self.status_code is not None and (self.status_code == 429 or self.status_code >= 500)
