import re

from procsnitch.exceptions import ConfigError

UNIT_SECONDS = {
    "h": 3600.0,
    "m": 60.0,
    "s": 1.0,
}

_TERM = re.compile(r"(\d+(?:\.\d*)?|\.\d+)([hms])")


def parse_duration(text: str) -> float:
    """
    Parse a duration such as "30s", "1m30s" or "0.5s" into seconds.

    Args:
        text: One or more <number><unit> terms, unit in h, m, s

    Returns:
        Duration in seconds

    Raises:
        ConfigError: If the text does not follow the grammar
    """
    if not isinstance(text, str):
        raise ConfigError(f"Duration must be a string, got {text!r}")
    compact = text.strip()
    if not compact:
        raise ConfigError("Empty duration")

    total = 0.0
    pos = 0
    for match in _TERM.finditer(compact):
        if match.start() != pos:
            break
        total += float(match.group(1)) * UNIT_SECONDS[match.group(2)]
        pos = match.end()

    if pos != len(compact):
        raise ConfigError(f"Invalid duration: {text!r} (expected e.g. '30s', '1m30s', '2h')")
    return total


def format_duration(seconds: float) -> str:
    """Short human form used in chart axis labels, e.g. 1.5s or 2m0s"""
    if seconds < 60:
        return f"{seconds:g}s"
    minutes, secs = divmod(seconds, 60)
    if minutes < 60:
        return f"{int(minutes)}m{secs:g}s"
    hours, minutes = divmod(minutes, 60)
    return f"{int(hours)}h{int(minutes)}m{secs:g}s"
