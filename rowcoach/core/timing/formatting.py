"""
Time and pace formatting for split tables and CSV export.

All formatters take seconds as floats and return display strings.
Decimal points are never localised.
"""

from .models import PACE_DISTANCE


def pace_seconds(interval_seconds: float, distance_meters: float) -> float:
    """Normalise a time over a distance to seconds per 500m."""
    return interval_seconds * PACE_DISTANCE / distance_meters


def format_pace(seconds_per_500: float) -> str:
    """
    Format a pace as M:SS.ss.

    Minutes are not padded; the seconds part is zero-padded to five
    characters including two decimals, e.g. 105.3 -> "1:45.30". Rounding to
    hundredths happens first, so 119.999 shows 2:00.00 and never 1:60.00.
    """
    total = round(seconds_per_500, 2)
    minutes = int(total // 60)
    secs = total - minutes * 60
    return f"{minutes}:{secs:05.2f}"


def format_total_time(seconds: float) -> str:
    """
    Format an elapsed time as MM:SS.cc.

    Hundredths are truncated, not rounded, so a stopwatch reading of
    59.999s shows 00:59.99 rather than 01:00.00.
    """
    millis = max(int(round(seconds * 1000)), 0)
    minutes = millis // 60_000
    secs = (millis // 1000) % 60
    hundredths = (millis % 1000) // 10
    return f"{minutes:02d}:{secs:02d}.{hundredths:02d}"


def format_interval_diff(seconds: float) -> str:
    return f"{seconds:.2f}s"


def format_seconds(seconds: float) -> str:
    """Two-decimal seconds, used for split cells and percentages."""
    return f"{seconds:.2f}"
