"""Remaining-time estimation for determinate progress."""

import math

ETA_PLACEHOLDER: str = "Calculating..."


def format_duration(seconds: float) -> str:
    """Format *seconds* as ``1h 2m 3s``, dropping leading zero fields.

    Rounds to the nearest whole second here and nowhere earlier.  Negative
    durations show as ``0s``.
    """
    if not math.isfinite(seconds):
        return ETA_PLACEHOLDER

    total_seconds = max(0, math.floor(seconds + 0.5))
    hours, rest = divmod(total_seconds, 3600)
    minutes, secs = divmod(rest, 60)

    if hours > 0:
        return f"{hours}h {minutes}m {secs}s"
    if minutes > 0:
        return f"{minutes}m {secs}s"
    return f"{secs}s"


def estimate_eta(value: float, total: float, start_time: float, now: float) -> str:
    """Estimate the time left to reach *total* from the average rate so far."""
    if value == 0:
        return ETA_PLACEHOLDER

    avg_per_unit = (now - start_time) / value
    remaining = avg_per_unit * (total - value)
    return format_duration(remaining)
