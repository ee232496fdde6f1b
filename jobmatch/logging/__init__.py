"""Structured logging helpers for the job matching service."""

import logging
from typing import Optional, Union


class ComponentLoggerAdapter(logging.LoggerAdapter):
    """LoggerAdapter that stamps a component field on every record.

    Extra fields passed at the call site are merged over the adapter's own,
    so a call may still override ``component`` when it needs to.
    """

    def process(self, msg, kwargs):
        kwargs["extra"] = {**self.extra, **(kwargs.get("extra") or {})}
        return msg, kwargs


def get_logger(
    name: str, component: Optional[str] = None
) -> Union[logging.Logger, ComponentLoggerAdapter]:
    """Return a module logger, wrapped to carry a component field if given.

    Example:
        >>> logger = get_logger(__name__, component="matching")
        >>> logger.info("Pass finished", extra={"event": "matching.pass.completed"})
    """
    logger = logging.getLogger(name)
    if component:
        return ComponentLoggerAdapter(logger, {"component": component})
    return logger


__all__ = ["ComponentLoggerAdapter", "get_logger"]
