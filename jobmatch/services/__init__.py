"""Application services for users and jobs."""

from .jobs import JobService
from .schemas import (
    CreateJobPayload,
    CreateUserPayload,
    UpdateJobPayload,
    UpdateUserPayload,
)
from .users import UserService

__all__ = [
    "UserService",
    "JobService",
    "CreateUserPayload",
    "UpdateUserPayload",
    "CreateJobPayload",
    "UpdateJobPayload",
]
