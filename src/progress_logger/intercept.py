"""Scoped interception of process-wide output entry points.

While a :class:`ConsoleInterceptor` is held, three entry points are replaced:

* ``builtins.print`` for writes to the current ``sys.stdout``/``sys.stderr``
* ``warnings.showwarning``, prefixed with a warning glyph
* the root logger's ``handlers`` list, swapped for a :class:`LiveLineHandler`
  that prefixes WARNING records with a warning glyph and ERROR (and above)
  records with an error glyph

Each warning and log record becomes one line of text for the interceptor's
sink.  Printed text is buffered until a newline, so
``print("Downloading...", end="")`` followed by ``print(" done")`` gives one
line.  :meth:`ConsoleInterceptor.release` puts the original objects back and
flushes any unterminated printed text.
"""

import builtins
import logging
import sys
import threading
import warnings
from collections.abc import Callable
from dataclasses import dataclass
from types import TracebackType
from typing import Any, ClassVar, Self, TextIO

from . import VERBOSE
from .exceptions import InterceptionActiveError

logger = logging.getLogger(__name__)

WARN_GLYPH: str = "⚠️  "
ERROR_GLYPH: str = "❌ "

type Sink = Callable[[str], None]

# Fallbacks for replacements called before any acquire().
_BUILTIN_PRINT = builtins.print
_DEFAULT_SHOWWARNING = warnings.showwarning


class LiveLineHandler(logging.Handler):
    """Logging handler that hands each formatted record to a sink."""

    _sink: Sink

    def __init__(self, sink: Sink, level: int = logging.NOTSET) -> None:
        super().__init__(level)
        self._sink = sink

    def emit(self, record: logging.LogRecord) -> None:
        try:
            text = self.format(record)
        except Exception:
            self.handleError(record)
            return

        if record.levelno >= logging.ERROR:
            text = ERROR_GLYPH + text
        elif record.levelno >= logging.WARNING:
            text = WARN_GLYPH + text
        self._sink(text)


@dataclass(frozen=True)
class _SavedEntryPoints:
    print: Callable[..., None]
    showwarning: Callable[..., None]
    root_handlers: list[logging.Handler]


class ConsoleInterceptor:
    """Handle on the process-wide output entry points.

    Only one interceptor can be held at a time; acquiring a second one raises
    :class:`InterceptionActiveError` so the first holder's saved originals are
    never overwritten.  :meth:`release` is safe to call when nothing was
    acquired and when already released.
    """

    _holder: ClassVar["ConsoleInterceptor | None"] = None
    _guard: ClassVar[threading.Lock] = threading.Lock()

    _sink: Sink
    _handler: LiveLineHandler
    _saved: _SavedEntryPoints | None
    # Kept after release() so stale references still reach the originals.
    _originals: _SavedEntryPoints | None
    _pending: str
    _pending_lock: threading.Lock

    def __init__(self, sink: Sink) -> None:
        self._sink = sink
        self._handler = LiveLineHandler(sink)
        self._saved = None
        self._originals = None
        self._pending = ""
        self._pending_lock = threading.Lock()

    @property
    def held(self) -> bool:
        return self._saved is not None

    # -- Context manager -----------------------------------------------

    def __enter__(self) -> Self:
        return self.acquire()

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.release()

    # -- Acquire / release ---------------------------------------------

    def acquire(self) -> Self:
        """Install the replacements, remembering the current originals."""
        with ConsoleInterceptor._guard:
            holder = ConsoleInterceptor._holder
            if holder is self:
                return self
            if holder is not None:
                raise InterceptionActiveError(
                    "Output is already intercepted by another progress logger; "
                    "stop it before starting a new one"
                )

            root = logging.getLogger()
            saved = _SavedEntryPoints(
                print=builtins.print,
                showwarning=warnings.showwarning,
                root_handlers=root.handlers,
            )
            # Keep the application's message format, e.g. from basicConfig(),
            # and show no record that every original handler would have hidden.
            for handler in saved.root_handlers:
                if handler.formatter is not None:
                    self._handler.setFormatter(handler.formatter)
                    break
            if saved.root_handlers:
                self._handler.setLevel(
                    min(handler.level for handler in saved.root_handlers)
                )

            self._saved = saved
            self._originals = saved
            builtins.print = self._print
            warnings.showwarning = self._showwarning
            root.handlers = [self._handler]
            ConsoleInterceptor._holder = self

        logger.log(VERBOSE, "Intercepting print, warnings and root logging")
        return self

    def release(self) -> None:
        """Restore the original entry points; no-op unless currently held."""
        with ConsoleInterceptor._guard:
            saved = self._saved
            if saved is None or ConsoleInterceptor._holder is not self:
                return

            builtins.print = saved.print
            warnings.showwarning = saved.showwarning
            logging.getLogger().handlers = saved.root_handlers
            self._saved = None
            ConsoleInterceptor._holder = None

        self.flush()
        logger.log(VERBOSE, "Restored print, warnings and root logging")

    def flush(self) -> None:
        """Hand printed text still waiting for a newline to the sink."""
        with self._pending_lock:
            pending, self._pending = self._pending, ""
        if pending:
            self._sink(pending)

    # -- Replacements ----------------------------------------------------

    def _original_print(self) -> Callable[..., None]:
        originals = self._originals
        return originals.print if originals is not None else _BUILTIN_PRINT

    def _original_showwarning(self) -> Callable[..., None]:
        originals = self._originals
        if originals is not None:
            return originals.showwarning
        return _DEFAULT_SHOWWARNING

    def _print(
        self,
        *args: Any,
        sep: str | None = " ",
        end: str | None = "\n",
        file: TextIO | None = None,
        flush: bool = False,
    ) -> None:
        # A stale reference kept past release(), or a write to a real file.
        if self._saved is None or file not in (None, sys.stdout, sys.stderr):
            self._original_print()(*args, sep=sep, end=end, file=file, flush=flush)
            return

        separator = " " if sep is None else sep
        text = separator.join(str(arg) for arg in args)
        text += "\n" if end is None else end
        with self._pending_lock:
            *lines, self._pending = (self._pending + text).split("\n")
        for line in lines:
            self._sink(line)

    def _showwarning(
        self,
        message: Warning | str,
        category: type[Warning],
        filename: str,
        lineno: int,
        file: TextIO | None = None,
        line: str | None = None,
    ) -> None:
        if self._saved is None or file is not None:
            self._original_showwarning()(
                message, category, filename, lineno, file, line
            )
            return

        self._sink(f"{WARN_GLYPH}{category.__name__}: {message}")
