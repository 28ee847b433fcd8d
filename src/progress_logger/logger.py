"""Live progress logger: a bar or bounce animation pinned to the last line."""

import atexit
import logging
import threading
import time
from collections.abc import Callable
from types import TracebackType
from typing import Self

from rich.console import Console

from . import VERBOSE
from ._console import console as _shared_console
from .intercept import ConsoleInterceptor
from .options import (
    DEFAULT_BAR_LENGTH,
    DEFAULT_EMPTY_CHARACTER,
    DEFAULT_FULL_CHARACTER,
    DEFAULT_UPDATE_THROTTLE,
    ProgressOptions,
)
from .scheduler import RenderScheduler
from .session import Session
from .terminal import LiveLine

logger = logging.getLogger(__name__)


class ProgressLogger:
    """Show progress on one live terminal line while output scrolls above it.

    Passing *total* selects determinate mode (bar, percentage, ETA); leaving
    it out shows a bouncing animation next to the message.  The line is
    redrawn every *update_throttle* milliseconds from construction until
    :meth:`stop`.  Meanwhile ``print()``, ``warnings.warn()`` and records
    reaching the root logger are printed above the live line instead of
    through it.

    Only one logger may run per process at a time; constructing a second one
    while the first is running raises
    :class:`~progress_logger.exceptions.InterceptionActiveError`.

    Example::

        log = ProgressLogger("Uploading", total=len(files))
        for path in files:
            upload(path)
            log.increment()
        log.stop("Upload complete")
    """

    options: ProgressOptions
    _session: Session
    _clock: Callable[[], float]
    _lock: threading.RLock
    _live_line: LiveLine
    _scheduler: RenderScheduler
    _interceptor: ConsoleInterceptor

    def __init__(
        self,
        message: str = "",
        total: float | None = None,
        value: float = 0,
        *,
        show_progress_bar: bool = True,
        show_loading_animation: bool = True,
        show_eta: bool = True,
        bar_length: int = DEFAULT_BAR_LENGTH,
        update_throttle: int = DEFAULT_UPDATE_THROTTLE,
        show_avg_time_per_item: bool = False,
        full_character: str = DEFAULT_FULL_CHARACTER,
        empty_character: str = DEFAULT_EMPTY_CHARACTER,
        display_message_first: bool = False,
        console: Console | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.options = ProgressOptions(
            show_progress_bar=show_progress_bar,
            show_loading_animation=show_loading_animation,
            show_eta=show_eta,
            bar_length=bar_length,
            update_throttle=update_throttle,
            show_avg_time_per_item=show_avg_time_per_item,
            full_character=full_character,
            empty_character=empty_character,
            display_message_first=display_message_first,
        )
        self._clock = clock
        self._lock = threading.RLock()

        now = clock()
        self._session = Session(
            message=message,
            value=value,
            total=total,
            start_time=now,
            last_update_time=now,
        )
        self._live_line = LiveLine(console if console is not None else _shared_console)
        self._scheduler = RenderScheduler(
            self._session,
            self.options,
            self._live_line,
            clock=clock,
            lock=self._lock,
        )
        self._interceptor = ConsoleInterceptor(self._write_scrollback)

        # Determinate progress is gated active from the start; indeterminate
        # animates without it.
        if not self._session.indeterminate:
            self._session.active = True

        self._interceptor.acquire()
        try:
            self._scheduler.start()
        except BaseException:
            self._interceptor.release()
            raise
        atexit.register(self.stop)

        logger.log(
            VERBOSE,
            f"Started {'indeterminate' if self.indeterminate else 'determinate'} "
            f"progress logger: {message!r}",
        )

    # -- Context manager -----------------------------------------------

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.stop()

    # -- State -----------------------------------------------------------

    @property
    def message(self) -> str:
        return self._session.message

    @property
    def value(self) -> float:
        return self._session.value

    @property
    def total(self) -> float | None:
        return self._session.total

    @property
    def indeterminate(self) -> bool:
        return self._session.indeterminate

    @property
    def active(self) -> bool:
        return self._session.active

    @property
    def stopped(self) -> bool:
        return self._session.stopped

    @property
    def scrollback(self) -> tuple[str, ...]:
        """Lines printed above the live line, oldest first.

        Only the last :data:`~progress_logger.session.SCROLLBACK_LIMIT` lines
        are kept.
        """
        with self._lock:
            return tuple(self._session.scrollback)

    @property
    def elapsed(self) -> float:
        """Seconds since construction."""
        return self._clock() - self._session.start_time

    @property
    def scheduler(self) -> RenderScheduler:
        return self._scheduler

    # -- Public API ------------------------------------------------------

    def update(self, message: str | None = None, value: float | None = None) -> Self:
        """Set a new message and/or value; either may be left out.

        An empty message keeps the current one.  ``value=0`` is a real value.
        """
        with self._lock:
            if value is not None:
                self._session.value = value
            if message:
                self._session.message = message
            self._session.last_update_time = self._clock()
        return self

    def increment(self) -> Self:
        """Add one to the value; does nothing in indeterminate mode."""
        with self._lock:
            if not self.indeterminate and not self._session.stopped:
                self._session.value += 1
                self._session.last_update_time = self._clock()
        return self

    def stop(self, end_message: str | None = None) -> None:
        """Stop rendering, print the final line and restore output.

        Determinate loggers print a summary with the elapsed time (and the
        average time per item when enabled); indeterminate loggers print
        *end_message*, or an empty line.  Calling it again does nothing.
        """
        with self._lock:
            if self._session.stopped:
                return
            self._session.stopped = True
            self._session.active = False

        atexit.unregister(self.stop)
        try:
            self._scheduler.stop()
            self._interceptor.flush()
            with self._lock:
                self._live_line.write_line(self._final_line(end_message))
        finally:
            self._interceptor.release()

        logger.log(VERBOSE, f"Stopped progress logger after {self.elapsed:.1f}s")

    # -- Internals -------------------------------------------------------

    def _final_line(self, end_message: str | None) -> str:
        session = self._session
        if session.indeterminate:
            return end_message or ""

        if end_message:
            session.message = end_message
        elapsed = self._clock() - session.start_time
        line = f"{session.message} | {elapsed:.1f}s total"
        if self.options.show_avg_time_per_item:
            avg_per_item = elapsed / session.value if session.value > 0 else 0
            line += f" | {avg_per_item:.2f}s avg per item"
        return line

    def _write_scrollback(self, text: str) -> None:
        """Sink for intercepted output: print *text* above the live line."""
        with self._lock:
            self._session.scrollback.append(text)
            self._live_line.write_line(text)
            if self._session.active:
                self._scheduler.redraw()
