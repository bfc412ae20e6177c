"""Duration parsing and formatting helpers.

The catalog reports lengths as ISO 8601 durations (``PT4M13S``); the rest of
the application works in whole seconds and shows them as ``H:MM:SS``.
"""

from __future__ import annotations

import math
import re

_ISO8601_DURATION = re.compile(
    r"P(?:(?P<days>\d+)D)?"
    r"(?:T(?:(?P<hours>\d+)H)?(?:(?P<minutes>\d+)M)?(?:(?P<seconds>\d+)S)?)?"
)


def parse_iso8601_duration(text: str | None) -> int:
    """Convert an ISO 8601 duration such as ``PT1H2M3S`` to whole seconds.

    Missing components count as zero. Empty or unparseable input returns 0,
    which callers treat as "unknown length".
    """
    if not text:
        return 0
    match = _ISO8601_DURATION.search(text)
    if match is None:
        return 0
    parts = {name: int(value or 0) for name, value in match.groupdict().items()}
    return (
        parts["days"] * 86400
        + parts["hours"] * 3600
        + parts["minutes"] * 60
        + parts["seconds"]
    )


def format_duration(total_seconds: float | int) -> str:
    """Format seconds as ``H:MM:SS``, or ``MM:SS`` under an hour."""
    try:
        value = float(total_seconds)
    except (TypeError, ValueError):
        return "00:00"
    if math.isnan(value) or math.isinf(value) or value < 0:
        return "00:00"

    whole = int(value)
    hours, rest = divmod(whole, 3600)
    minutes, seconds = divmod(rest, 60)
    if hours > 0:
        return f"{hours}:{minutes:02d}:{seconds:02d}"
    return f"{minutes:02d}:{seconds:02d}"


def format_travel_time(hours: int, minutes: int) -> str:
    """Short label for a trip length, e.g. ``1h 30m`` or ``45m``."""
    if hours > 0:
        return f"{hours}h {minutes}m"
    return f"{minutes}m"
