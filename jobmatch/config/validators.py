"""Soft checks on raw configuration that warn instead of failing."""

import warnings
from typing import Any, Dict, List


def check_for_warnings(config_dict: Dict[str, Any]) -> List[str]:
    """
    Inspect a raw configuration mapping for settings that are legal but risky.

    Args:
        config_dict: Configuration as loaded from YAML, before validation

    Returns:
        List of warning messages (empty when nothing looks suspicious)
    """
    messages = []

    matching = config_dict.get("matching") or {}
    if isinstance(matching, dict):
        threshold = matching.get("threshold")
        if isinstance(threshold, (int, float)) and not isinstance(threshold, bool):
            if threshold < 0.5:
                messages.append(
                    f"Low matching threshold ({threshold}) will notify many weak matches"
                )

    email = config_dict.get("email") or {}
    if isinstance(email, dict):
        interval = email.get("send_interval_seconds")
        if isinstance(interval, (int, float)) and not isinstance(interval, bool) and interval < 1:
            messages.append(
                f"send_interval_seconds={interval} may exceed the mail provider's rate limits"
            )

    known_sections = {"matching", "ai", "email", "logging"}
    for key in config_dict:
        if key not in known_sections:
            messages.append(f"Unknown configuration section '{key}' will be ignored")

    return messages


def emit_warnings(messages: List[str]) -> None:
    """Emit each message as a UserWarning."""
    for message in messages:
        warnings.warn(message, UserWarning, stacklevel=2)
