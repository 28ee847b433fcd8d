"""Periodic composition and drawing of the live progress line."""

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass

from . import VERBOSE
from .eta import estimate_eta
from .frames import (
    FrameSet,
    build_frames,
    format_percentage,
    progress_ratio,
    render_bar,
)
from .options import ProgressOptions
from .session import Session
from .terminal import LiveLine

logger = logging.getLogger(__name__)


class RepeatingTask:
    """Call *callback* every *interval* seconds on a daemon thread.

    The first call happens one interval after :meth:`start`.  :meth:`cancel`
    is idempotent and waits for an in-flight call to finish unless it is
    invoked from the callback itself.
    """

    _interval: float
    _callback: Callable[[], None]
    _name: str
    _cancelled: threading.Event
    _thread: threading.Thread | None

    def __init__(
        self, interval: float, callback: Callable[[], None], *, name: str
    ) -> None:
        self._interval = interval
        self._callback = callback
        self._name = name
        self._cancelled = threading.Event()
        self._thread = None

    @property
    def running(self) -> bool:
        return self._thread is not None and not self._cancelled.is_set()

    def start(self) -> None:
        if self._thread is not None:
            return
        self._thread = threading.Thread(
            target=self._run, name=self._name, daemon=True
        )
        self._thread.start()

    def cancel(self, *, wait: bool = True) -> None:
        self._cancelled.set()
        if not wait:
            return
        self.join()

    def join(self) -> None:
        thread = self._thread
        if thread is None or thread is threading.current_thread():
            return
        thread.join()

    def _run(self) -> None:
        while not self._cancelled.wait(self._interval):
            self._callback()


def _format_number(number: float) -> str:
    """Render integral floats without a trailing ``.0``."""
    if isinstance(number, float) and number.is_integer():
        return str(int(number))
    return str(number)


@dataclass
class RenderState:
    frame_index: int = 0
    current_line: str = ""
    last_render_time: float = 0.0


class RenderScheduler:
    """Owns the live line: composes it from a :class:`Session` on every tick.

    All access to the session and the terminal happens under *lock*, which
    the owning logger shares for its own mutations.
    """

    _session: Session
    _options: ProgressOptions
    _live_line: LiveLine
    _clock: Callable[[], float]
    _lock: threading.RLock
    _frames: FrameSet
    _task: RepeatingTask
    state: RenderState

    def __init__(
        self,
        session: Session,
        options: ProgressOptions,
        live_line: LiveLine,
        *,
        clock: Callable[[], float],
        lock: threading.RLock,
    ) -> None:
        self._session = session
        self._options = options
        self._live_line = live_line
        self._clock = clock
        self._lock = lock
        self._frames = build_frames(
            options.bar_length, options.full_character, options.empty_character
        )
        self._task = RepeatingTask(
            options.update_interval, self.tick, name="progress-logger-render"
        )
        self.state = RenderState()

    @property
    def frames(self) -> FrameSet:
        return self._frames

    @property
    def running(self) -> bool:
        return self._task.running

    # -- Line composition ----------------------------------------------

    def _animation_segment(self) -> str:
        if not self._options.show_loading_animation:
            return ""
        return f"{self._frames[self.state.frame_index]} "

    def _determinate_line(self, total: float) -> str:
        session = self._session
        opts = self._options

        if opts.show_progress_bar:
            bar = render_bar(
                session.value,
                total,
                opts.bar_length,
                opts.full_character,
                opts.empty_character,
            )
            lead = f"{bar} "
        else:
            lead = self._animation_segment()

        percentage = format_percentage(progress_ratio(session.value, total))
        counts = f"{_format_number(session.value)}/{_format_number(total)}"
        line = f"{lead}{percentage}% | {counts}"
        if opts.show_eta:
            eta = estimate_eta(session.value, total, session.start_time, self._clock())
            line += f" | ETA: {eta}"

        if opts.display_message_first:
            return f"{session.message} | {line}"
        return f"{line} | {session.message}"

    def compose_line(self) -> str:
        """Build the live line for the current session and frame."""
        total = self._session.total
        if total is None:
            return f"{self._animation_segment()}{self._session.message}"
        return self._determinate_line(total)

    # -- Drawing ---------------------------------------------------------

    def tick(self) -> None:
        """Draw the current line, then advance the animation frame."""
        with self._lock:
            if self._session.stopped:
                return
            self.state.current_line = self.compose_line()
            self._live_line.write(self.state.current_line)
            self.state.last_render_time = self._clock()
            self.state.frame_index = (self.state.frame_index + 1) % len(self._frames)

    def redraw(self) -> None:
        """Draw the line again without advancing the animation.

        Used right after a scrollback line so the live line reappears
        beneath it before the next tick.
        """
        with self._lock:
            if self._session.stopped:
                return
            self.state.current_line = self.compose_line()
            self._live_line.write(self.state.current_line)

    def start(self) -> None:
        logger.log(
            VERBOSE, f"Starting render tick every {self._options.update_throttle}ms"
        )
        self._task.start()

    def stop(self) -> None:
        """Cancel the tick and wait for an in-flight draw to finish.

        Must not be called with the render lock held, since an in-flight
        tick may be waiting for it.
        """
        if self._task.running:
            logger.log(VERBOSE, "Stopping render tick")
        self._task.cancel()
