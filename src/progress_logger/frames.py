"""Bar and bounce-animation frame rendering."""

import math

# Ordered ping-pong animation, forward sweep then reverse sweep.
type FrameSet = tuple[str, ...]


def _frame(position: int, bar_length: int, full_char: str, empty_char: str) -> str:
    return "".join(
        full_char if i == position else empty_char for i in range(bar_length)
    )


def build_frames(bar_length: int, full_char: str, empty_char: str) -> FrameSet:
    """Build the bounce animation for a bar of *bar_length* characters.

    The filled cell sweeps from the first to the last position and back,
    skipping both endpoints on the way back so the turn-around does not
    stutter.  A bar of length 1 has a single frame; a non-positive length
    yields one empty frame so callers can always index ``frame_index % len``.
    """
    if bar_length <= 0:
        return ("",)

    forward = [
        _frame(i, bar_length, full_char, empty_char) for i in range(bar_length)
    ]
    reverse = [
        _frame(i, bar_length, full_char, empty_char)
        for i in range(bar_length - 2, 0, -1)
    ]
    return tuple(forward + reverse)


def progress_ratio(value: float, total: float) -> float:
    """Return ``value / total`` with IEEE semantics for a zero total."""
    if total == 0:
        if value > 0:
            return math.inf
        if value < 0:
            return -math.inf
        return math.nan
    return value / total


def format_percentage(ratio: float) -> str:
    """Percentage text for *ratio*, rounded half up and never clamped."""
    percent = ratio * 100
    if not math.isfinite(percent):
        return str(percent)
    return str(math.floor(percent + 0.5))


def render_bar(
    value: float,
    total: float,
    bar_length: int,
    full_char: str,
    empty_char: str,
) -> str:
    """Render the determinate bar for *value* out of *total*.

    The filled count is not clamped: overshooting *total* overfills the bar
    and the empty part collapses to nothing.
    """
    ratio = progress_ratio(value, total)
    if math.isnan(ratio):
        filled = 0
    elif math.isinf(ratio):
        filled = bar_length if ratio > 0 else 0
    else:
        filled = math.floor(ratio * bar_length)
    return full_char * filled + empty_char * (bar_length - filled)
