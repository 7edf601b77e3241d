from typing import Any

DEFAULT_START_TIME = "18:00"
MINUTES_IN_DAY = 24 * 60


def safe_int_convert(value: Any, default: int = 0) -> int:
    try:
        s = str(value)
        if '.' in s:
            return int(float(value))
        return int(value)
    except (ValueError, TypeError):
        return default


def clamp(value: int, minimum: int, maximum: int) -> int:
    return min(max(value, minimum), maximum)


def normalize_time(value: Any, default: str = DEFAULT_START_TIME) -> str:
    """
    Coerce a loosely formatted "H:M" string into zero-padded "HH:MM".

    Hours are clamped to 0-23 and minutes to 0-59. Anything that is not a
    two-part string falls back to ``default``.
    """
    if not value or not isinstance(value, str):
        return default

    parts = value.split(":")
    if len(parts) != 2:
        return default

    try:
        hour = clamp(int(parts[0]), 0, 23)
        minute = clamp(int(parts[1]), 0, 59)
    except ValueError:
        return default
    return f"{hour:02d}:{minute:02d}"


def add_minutes_to_time(start_time: str, duration_minutes: int) -> str:
    """
    Add minutes to an "HH:MM" time, wrapping around midnight.
    """
    hour, minute = (int(part) for part in start_time.split(":"))
    wrapped = (hour * 60 + minute + duration_minutes) % MINUTES_IN_DAY
    return f"{wrapped // 60:02d}:{wrapped % 60:02d}"


def capitalize(value: str) -> str:
    if not value:
        return value
    return value[0].upper() + value[1:]


def capitalize_words(value: str) -> str:
    return " ".join(capitalize(word) for word in value.split())
