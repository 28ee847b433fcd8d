"""Single-line terminal writes on top of a Rich console."""

from rich.console import Console
from rich.control import Control, ControlType

# Erase the whole current line, then put the cursor back in column 0.
_CLEAR_LINE = (
    Control((ControlType.ERASE_IN_LINE, 2)),
    Control.move_to_column(0),
)


class LiveLine:
    """The one terminal line that is overwritten in place.

    Control codes are only emitted when *console* is a terminal; otherwise
    Rich drops them and the text is written as-is.
    """

    _console: Console

    def __init__(self, console: Console) -> None:
        self._console = console

    def clear(self) -> None:
        """Erase the current line and return to column 0."""
        self._console.control(*_CLEAR_LINE)

    def write(self, text: str) -> None:
        """Replace the live line with *text*, leaving the cursor on it."""
        self.clear()
        self._console.out(text, end="", highlight=False)

    def write_line(self, text: str) -> None:
        """Replace the live line with *text* and terminate it.

        The line becomes scrollback; the next :meth:`write` starts a fresh
        live line beneath it.
        """
        self.clear()
        self._console.out(text, highlight=False)
