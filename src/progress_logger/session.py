"""Mutable progress state shared by the public API and the render tick."""

from collections import deque
from dataclasses import dataclass, field

# Intercepted lines remembered per session; older ones are dropped.
SCROLLBACK_LIMIT: int = 1000


@dataclass
class Session:
    """Current progress of one logger.

    ``total is None`` selects indeterminate mode for the whole lifetime of the
    session.  ``value`` is never clamped to ``[0, total]``.
    """

    message: str
    value: float
    total: float | None
    start_time: float
    last_update_time: float
    active: bool = False
    stopped: bool = False
    scrollback: deque[str] = field(
        default_factory=lambda: deque(maxlen=SCROLLBACK_LIMIT)
    )

    @property
    def indeterminate(self) -> bool:
        return self.total is None
