"""Error taxonomy shared across the job matching service.

Every error raised by the service layer, the AI client, the matching engine
and the notification dispatcher derives from JobMatchError so callers (the CLI,
the scheduler) can catch the whole family in one place.
"""


class JobMatchError(Exception):
    """Base exception for all job matching errors."""

    pass


class ValidationError(JobMatchError):
    """Raised when input is rejected before it reaches the matching core.

    Examples:
    - Duplicate job title or user email
    - Payload fields outside their allowed length
    - Malformed email addresses
    """

    def __init__(self, message: str, errors=None):
        super().__init__(message)
        self.errors = list(errors or [])


class NotFoundError(JobMatchError):
    """Raised when a referenced user or job does not exist."""

    def __init__(self, message: str, entity: str = "", entity_id: str = ""):
        super().__init__(message)
        self.entity = entity
        self.entity_id = entity_id


class ProviderError(JobMatchError):
    """Raised when an external provider (AI or mail transport) fails."""

    pass


class ComputationError(JobMatchError):
    """Raised when the similarity function receives degenerate input."""

    pass
