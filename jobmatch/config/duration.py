"""Duration parsing for the matching schedule interval."""

import re

_ISO_PATTERN = re.compile(
    r"^P(?:(?P<d>\d+)D)?(?:T(?:(?P<h>\d+)H)?(?:(?P<m>\d+)M)?(?:(?P<s>\d+)S)?)?$"
)
_HUMAN_TOKEN = re.compile(r"(\d+)([smhd])")
_UNIT_SECONDS = {"s": 1, "m": 60, "h": 3600, "d": 86400}


class DurationParseError(ValueError):
    """Raised when a duration string cannot be parsed or is out of range."""

    pass


def parse_duration(value: str) -> int:
    """Parse a duration string into seconds.

    Accepts compact human forms ("30s", "15m", "1h30m", "2d") and ISO-8601
    durations ("PT15M", "PT1H30M", "P1D").

    Args:
        value: Duration string

    Returns:
        Total number of seconds (always > 0)

    Raises:
        DurationParseError: If the string is empty, malformed, or zero

    Examples:
        >>> parse_duration("1h30m")
        5400
        >>> parse_duration("PT15M")
        900
    """
    text = (value or "").strip()
    if not text:
        raise DurationParseError("Duration string cannot be empty")

    if text[0] in "pP":
        seconds = _parse_iso(text.upper())
    else:
        seconds = _parse_human(text.lower())

    if seconds <= 0:
        raise DurationParseError(f"Duration cannot be zero: '{value}'")
    return seconds


def _parse_iso(text: str) -> int:
    match = _ISO_PATTERN.match(text)
    if not match or text in ("P", "PT"):
        raise DurationParseError(
            f"Invalid ISO-8601 duration: '{text}'. Expected e.g. 'PT15M' or 'P1D'"
        )
    parts = {key: int(val) for key, val in match.groupdict().items() if val}
    return sum(parts.get(unit, 0) * _UNIT_SECONDS[unit] for unit in ("d", "h", "m", "s"))


def _parse_human(text: str) -> int:
    compact = re.sub(r"\s+", "", text)
    tokens = _HUMAN_TOKEN.findall(compact)
    if not tokens or "".join(num + unit for num, unit in tokens) != compact:
        raise DurationParseError(
            f"Invalid duration: '{text}'. Use digits with s, m, h or d (e.g. '15m', '1h30m')"
        )
    return sum(int(num) * _UNIT_SECONDS[unit] for num, unit in tokens)


def validate_duration_range(
    seconds: int, min_seconds: int = 300, max_seconds: int = 86400
) -> None:
    """Check a parsed duration against inclusive bounds.

    Raises:
        DurationParseError: If seconds falls outside [min_seconds, max_seconds]
    """
    if seconds < min_seconds:
        raise DurationParseError(
            f"Schedule interval too short: {describe_seconds(seconds)}. "
            f"Minimum is {describe_seconds(min_seconds)}."
        )
    if seconds > max_seconds:
        raise DurationParseError(
            f"Schedule interval too long: {describe_seconds(seconds)}. "
            f"Maximum is {describe_seconds(max_seconds)}."
        )


def describe_seconds(seconds: int) -> str:
    """Render a second count using its largest whole unit ("15 minutes")."""
    for unit, size in (("day", 86400), ("hour", 3600), ("minute", 60)):
        if seconds >= size:
            count = seconds // size
            return f"{count} {unit}{'s' if count != 1 else ''}"
    return f"{seconds} second{'s' if seconds != 1 else ''}"
