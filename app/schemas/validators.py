"""Custom validators and types."""

import re
from datetime import date, datetime
from typing import Annotated

from pydantic import AfterValidator, BeforeValidator, Field

# 24h time of day, e.g. 09:00 or 18:30
TIME_PATTERN = re.compile(r"^([01][0-9]|2[0-3]):[0-5][0-9]$")

HEX_COLOR_PATTERN = re.compile(r"^#[0-9a-fA-F]{6}$")


def validate_time_of_day(value: str) -> str:
    """
    Validate and normalize a 24h time of day.

    Accepts formats:
    - 09:00
    - 9:00
    - 09:00:00 (seconds are dropped)

    Returns normalized format: HH:MM
    """
    value = value.strip()
    parts = value.split(":")
    if len(parts) in (2, 3) and parts[0].isdigit() and len(parts[0]) == 1:
        parts[0] = f"0{parts[0]}"
    normalized = ":".join(parts[:2])

    if not TIME_PATTERN.match(normalized):
        raise ValueError("Invalid time. Use 24h format HH:MM (e.g., 09:30)")

    return normalized


def validate_hex_color(value: str) -> str:
    """Validate a #rrggbb color and lowercase it."""
    if not HEX_COLOR_PATTERN.match(value):
        raise ValueError("Invalid color. Use hex format #rrggbb (e.g., #3b82f6)")
    return value.lower()


def coerce_lesson_date(value):
    """
    Accept an ISO date or an ISO datetime and keep the date component.

    Older backups store lesson dates as full timestamps
    (``2025-01-10T00:00:00.000Z``).
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, str) and "T" in value:
        return value.split("T", 1)[0]
    return value


def empty_to_none(value):
    """Blank form fields are stored as missing."""
    if isinstance(value, str) and not value.strip():
        return None
    return value


def reject_null(value):
    """Explicit null cannot clear a required field in a partial update."""
    if value is None:
        raise ValueError("Field cannot be null")
    return value


# Annotated type for time-of-day fields
TimeOfDay = Annotated[
    str,
    Field(min_length=4, max_length=8),
    AfterValidator(validate_time_of_day),
]

# Annotated type for display colors
HexColor = Annotated[str, AfterValidator(validate_hex_color)]

# Annotated type for lesson dates
LessonDate = Annotated[date, BeforeValidator(coerce_lesson_date)]
