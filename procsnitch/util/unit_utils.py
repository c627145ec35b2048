"""
Memory unit normalization for values reported by `top`.

`top` prints VIRT/RES/SHR as a number followed by a one letter unit
(`m` for MiB, `g` for GiB, ...), but falls back to a bare number of KiB for
small values. Everything is normalized to megabytes.
"""
from procsnitch.exceptions import MetricParseError

KB = 1 << 10
MB = 1 << 20
GB = 1 << 30
TB = 1 << 40

# Multiplier from the suffixed unit to bytes
UNIT_BYTES = {
    "k": KB,
    "m": MB,
    "g": GB,
    "t": TB,
}


def _parse_float(raw: str, field: str) -> float:
    try:
        return float(raw)
    except ValueError as e:
        raise MetricParseError(f"Malformed memory field: {field!r}") from e


def to_mb(field: str) -> float:
    """
    Convert a raw memory field to megabytes.

    Args:
        field: Raw value such as "512m", "2g", "1024k" or "20480"

    Returns:
        Value in megabytes

    Raises:
        MetricParseError: If the numeric part is not a number
    """
    field = field.strip()
    if not field:
        raise MetricParseError("Empty memory field")

    suffix = field[-1].lower()
    if suffix in UNIT_BYTES:
        value = _parse_float(field[:-1], field)
        return value * UNIT_BYTES[suffix] / MB

    # No unit: top reports plain kilobytes
    value = _parse_float(field, field)
    return value * KB / MB
