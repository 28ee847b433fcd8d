"""Shared Rich Console instance for the live progress line and log output."""

from rich.console import Console

# Single console on stdout. The live line, intercepted print/warnings output
# and the CLI's RichHandler all write through it so that scrollback lines and
# the in-place render coordinate and don't garble each other.
console = Console()
