"""Render options and their defaults."""

from dataclasses import dataclass

DEFAULT_FULL_CHARACTER: str = "█"
DEFAULT_EMPTY_CHARACTER: str = "░"

# Tick period in milliseconds.
DEFAULT_UPDATE_THROTTLE: int = 50

DEFAULT_BAR_LENGTH: int = 10


@dataclass(frozen=True)
class ProgressOptions:
    """How the live line is drawn.

    Values are taken as given: a non-positive ``bar_length`` or a zero total
    produce degenerate output rather than an error.
    """

    show_progress_bar: bool = True
    show_loading_animation: bool = True
    show_eta: bool = True
    bar_length: int = DEFAULT_BAR_LENGTH
    update_throttle: int = DEFAULT_UPDATE_THROTTLE
    show_avg_time_per_item: bool = False
    full_character: str = DEFAULT_FULL_CHARACTER
    empty_character: str = DEFAULT_EMPTY_CHARACTER
    display_message_first: bool = False

    @property
    def update_interval(self) -> float:
        """Tick period in seconds."""
        return self.update_throttle / 1000
