"""
Codec for the compact interval notation ``XdYhZm``.

Units must appear in day/hour/minute order, each at most once, with at
least one present and a non-zero total.
"""
import re
from datetime import timedelta
from typing import Optional

from harvester.interfaces import IntervalIsZeroError, InvalidIntervalFormatError

INTERVAL_PATTERN = re.compile(r'^(?:(\d+)d)?(?:(\d+)h)?(?:(\d+)m)?$')


def parse_interval(value: Optional[str]) -> timedelta:
    """Parse ``XdYhZm`` into a timedelta.

    Raises:
        InvalidIntervalFormatError: When the string does not match the notation
        IntervalIsZeroError: When all present units are zero
    """
    raw = (value or "").strip()
    match = INTERVAL_PATTERN.match(raw)
    if not raw or match is None:
        raise InvalidIntervalFormatError(raw)

    days, hours, minutes = (int(group) if group else 0 for group in match.groups())
    interval = timedelta(days=days, hours=hours, minutes=minutes)
    if interval == timedelta(0):
        raise IntervalIsZeroError()
    return interval


def format_interval(interval: timedelta) -> str:
    """Render a timedelta in canonical ``XdYhZm`` form (``0m`` for zero)."""
    total_minutes = int(interval.total_seconds()) // 60
    days, remainder = divmod(total_minutes, 24 * 60)
    hours, minutes = divmod(remainder, 60)

    parts = []
    if days > 0:
        parts.append(f"{days}d")
    if hours > 0:
        parts.append(f"{hours}h")
    if minutes > 0:
        parts.append(f"{minutes}m")
    return "".join(parts) or "0m"
