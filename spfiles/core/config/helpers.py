"""Helpers for parsing byte-sized configuration values."""

_UNIT_MULTIPLIERS = {
    "b": 1,
    "k": 1024,
    "kb": 1024,
    "m": 1024**2,
    "mb": 1024**2,
    "g": 1024**3,
    "gb": 1024**3,
}


def parse_bytes(value: int | str) -> int:
    """Parse a byte quantity from an integer or unit-suffixed string.

    Supported string units (case-insensitive): b, k, kb, m, mb, g, gb.
    ``"10mb"`` and ``"10"`` are accepted; fractions and negative values are not.

    Args:
        value: Raw byte value as an ``int`` or a string with an optional unit
            suffix.

    Returns:
        The parsed value in bytes.

    Raises:
        ValueError: If the input cannot be parsed or contains an unknown unit.
    """
    if isinstance(value, int):
        return value

    text = str(value).strip().lower()
    if text.isdigit():
        return int(text)

    digits = len(text) - len(text.lstrip("0123456789"))
    numeric_part, unit_suffix = text[:digits], text[digits:]
    if not numeric_part or not unit_suffix:
        raise ValueError(f"Invalid byte value: {value!r}")

    multiplier = _UNIT_MULTIPLIERS.get(unit_suffix)
    if multiplier is None:
        raise ValueError(f"Unknown byte unit in value: {value!r}")
    return int(numeric_part) * multiplier
