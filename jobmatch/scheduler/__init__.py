"""Scheduling module for periodic matching passes."""

from .service import JOB_ID, SchedulerService

__all__ = [
    "SchedulerService",
    "JOB_ID",
]
