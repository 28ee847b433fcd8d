import logging
import os
import sys
import time
import warnings
from argparse import ArgumentParser, BooleanOptionalAction, Namespace
from collections.abc import Callable
from typing import NoReturn

from rich.logging import RichHandler

from . import VERBOSE, __version__
from ._console import console
from .logger import ProgressLogger
from .options import DEFAULT_BAR_LENGTH, DEFAULT_UPDATE_THROTTLE

logger = logging.getLogger("progress_logger.demo")

_DEFAULT_STEPS: int = 30
_DEFAULT_DELAY_S: float = 0.12


class MyArgParser(ArgumentParser):
    """Argument parser that prints help on error instead of just usage."""

    def error(self, message: str) -> NoReturn:
        """Print the error message followed by full help, then exit."""
        _ = sys.stderr.write(f"{self.prog}: {message}\n\n")
        self.print_help()
        sys.exit(2)


def _parse_bool_env(value: str | None, *, env_var: str) -> bool | None:
    """Parse an environment variable string into a boolean, or ``None`` if unset."""
    if value is None:
        return None

    normalized = value.strip().lower()
    true_values = {"1", "true", "yes", "y", "on"}
    false_values = {"0", "false", "no", "n", "off"}

    if normalized in true_values:
        return True
    if normalized in false_values:
        return False

    raise ValueError(
        f"Invalid boolean value for {env_var}: {value!r}. "
        "Use one of 1/0, true/false, yes/no, on/off."
    )


def _parse_number_env[T](
    value: str | None, convert: Callable[[str], T], *, env_var: str
) -> T | None:
    """Parse a numeric environment variable, or ``None`` if unset."""
    if value is None:
        return None
    try:
        return convert(value.strip())
    except ValueError:
        raise ValueError(
            f"Invalid {convert.__name__} value for {env_var}: {value!r}"
        ) from None


def _with_env[T](arg_value: T | None, env_var: str) -> T | str | None:
    """Return *arg_value* if set, otherwise fall back to the named environment variable."""
    if arg_value is not None:
        return arg_value
    return os.environ.get(env_var)


def _bool_option(arg_value: bool | None, env_var: str, default: bool) -> bool:
    """Resolve a flag as CLI > env > code default."""
    if arg_value is not None:
        return arg_value
    parsed = _parse_bool_env(os.environ.get(env_var), env_var=env_var)
    return default if parsed is None else parsed


def _number_option[T](
    arg_value: T | None, convert: Callable[[str], T], env_var: str, default: T
) -> T:
    """Resolve a numeric option as CLI > env > code default."""
    if arg_value is not None:
        return arg_value
    parsed = _parse_number_env(os.environ.get(env_var), convert, env_var=env_var)
    return default if parsed is None else parsed


def _argparser() -> MyArgParser:
    """Build and return the CLI argument parser with all flags and env-var support."""
    parser = MyArgParser(
        description="Run a simulated workload behind a live progress line"
    )

    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    parser.add_argument(
        "-m",
        "--message",
        dest="message",
        metavar="TEXT",
        help="Message shown next to the bar (env: PROGRESS_LOGGER_MESSAGE)",
        default=None,
    )
    parser.add_argument(
        "-t",
        "--total",
        dest="total",
        metavar="N",
        help="Number of items; omit for an indeterminate animation (env: PROGRESS_LOGGER_TOTAL)",
        type=float,
        default=None,
    )
    parser.add_argument(
        "-s",
        "--steps",
        dest="steps",
        metavar="N",
        help=f"Steps to run in indeterminate mode (default: {_DEFAULT_STEPS}, env: PROGRESS_LOGGER_STEPS)",
        type=int,
        default=None,
    )
    parser.add_argument(
        "--delay",
        dest="delay",
        metavar="SECONDS",
        help=f"Simulated work per step (default: {_DEFAULT_DELAY_S}, env: PROGRESS_LOGGER_DELAY)",
        type=float,
        default=None,
    )
    parser.add_argument(
        "--bar-length",
        dest="bar_length",
        metavar="N",
        help=f"Width of the bar or animation (default: {DEFAULT_BAR_LENGTH}, env: PROGRESS_LOGGER_BAR_LENGTH)",
        type=int,
        default=None,
    )
    parser.add_argument(
        "--throttle",
        dest="update_throttle",
        metavar="MS",
        help=f"Redraw period in milliseconds (default: {DEFAULT_UPDATE_THROTTLE}, env: PROGRESS_LOGGER_THROTTLE)",
        type=int,
        default=None,
    )
    parser.add_argument(
        "--bar",
        dest="show_progress_bar",
        help="Show the progress bar (env: PROGRESS_LOGGER_BAR)",
        action=BooleanOptionalAction,
        default=None,
    )
    parser.add_argument(
        "--animation",
        dest="show_loading_animation",
        help="Show the bounce animation (env: PROGRESS_LOGGER_ANIMATION)",
        action=BooleanOptionalAction,
        default=None,
    )
    parser.add_argument(
        "--eta",
        dest="show_eta",
        help="Show the estimated time remaining (env: PROGRESS_LOGGER_ETA)",
        action=BooleanOptionalAction,
        default=None,
    )
    parser.add_argument(
        "--avg",
        dest="show_avg_time_per_item",
        help="Add the average time per item to the summary (env: PROGRESS_LOGGER_AVG)",
        action=BooleanOptionalAction,
        default=None,
    )
    parser.add_argument(
        "--message-first",
        dest="display_message_first",
        help="Put the message before the bar (env: PROGRESS_LOGGER_MESSAGE_FIRST)",
        action=BooleanOptionalAction,
        default=None,
    )
    parser.add_argument(
        "-e",
        "--end-message",
        dest="end_message",
        metavar="TEXT",
        help="Message for the final line (env: PROGRESS_LOGGER_END_MESSAGE)",
        default=None,
    )
    parser.add_argument(
        "-v",
        "--verbose",
        dest="verbose",
        help="Verbose output (env: PROGRESS_LOGGER_VERBOSE)",
        action="store_true",
        default=None,
    )
    parser.add_argument(
        "-d",
        "--debug",
        dest="debug",
        help="Debug output with raw log format (env: PROGRESS_LOGGER_DEBUG)",
        action="store_true",
        default=None,
    )

    return parser


def _configure_logging(*, verbose: bool, debug: bool) -> None:
    # logging
    #   default : INFO via RichHandler
    #   -v      : VERBOSE for progress_logger, lifecycle events shown
    #   -d      : DEBUG for everything, raw format
    if debug:
        logging.basicConfig(
            format="%(levelname)s: %(name)s: %(message)s", level=logging.DEBUG
        )
        return

    logging.basicConfig(
        level=logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False, markup=False)],
    )
    if verbose:
        logging.getLogger("progress_logger").setLevel(VERBOSE)


def run_demo(
    progress: ProgressLogger,
    *,
    steps: int,
    delay: float,
    end_message: str | None,
    sleep: Callable[[float], None] = time.sleep,
) -> None:
    """Drive *progress* through *steps* steps, emitting some output on the way."""
    with progress:
        for step in range(steps + 1):
            if progress.indeterminate:
                progress.update(f"Working... step {step}/{steps}")
            else:
                progress.update(value=step)
            sleep(delay)

            if step == steps // 5:
                print("Halfway-ish message")
            if step == (3 * steps) // 10:
                warnings.warn("Heads up: throttled", stacklevel=1)
            if step == (2 * steps) // 5:
                logger.error("Transient error recovered")
        progress.stop(end_message)


def main() -> None:
    """Entry point: parse arguments, resolve env vars, and run the demo."""
    args: Namespace = _argparser().parse_args()

    # string options: CLI > env > None/default
    message = _with_env(args.message, "PROGRESS_LOGGER_MESSAGE")
    end_message = _with_env(args.end_message, "PROGRESS_LOGGER_END_MESSAGE")

    # bool/number options: CLI > env > code default
    try:
        total = (
            args.total
            if args.total is not None
            else _parse_number_env(
                os.environ.get("PROGRESS_LOGGER_TOTAL"),
                float,
                env_var="PROGRESS_LOGGER_TOTAL",
            )
        )
        steps = _number_option(args.steps, int, "PROGRESS_LOGGER_STEPS", _DEFAULT_STEPS)
        delay = _number_option(
            args.delay, float, "PROGRESS_LOGGER_DELAY", _DEFAULT_DELAY_S
        )
        bar_length = _number_option(
            args.bar_length, int, "PROGRESS_LOGGER_BAR_LENGTH", DEFAULT_BAR_LENGTH
        )
        update_throttle = _number_option(
            args.update_throttle,
            int,
            "PROGRESS_LOGGER_THROTTLE",
            DEFAULT_UPDATE_THROTTLE,
        )
        show_progress_bar = _bool_option(
            args.show_progress_bar, "PROGRESS_LOGGER_BAR", True
        )
        show_loading_animation = _bool_option(
            args.show_loading_animation, "PROGRESS_LOGGER_ANIMATION", True
        )
        show_eta = _bool_option(args.show_eta, "PROGRESS_LOGGER_ETA", True)
        show_avg_time_per_item = _bool_option(
            args.show_avg_time_per_item, "PROGRESS_LOGGER_AVG", False
        )
        display_message_first = _bool_option(
            args.display_message_first, "PROGRESS_LOGGER_MESSAGE_FIRST", False
        )
        verbose = _bool_option(args.verbose, "PROGRESS_LOGGER_VERBOSE", False)
        debug = _bool_option(args.debug, "PROGRESS_LOGGER_DEBUG", False)
    except ValueError as exc:
        _ = sys.stderr.write(f"ERROR: {exc}\n\n")
        _argparser().print_help()
        sys.exit(2)

    _configure_logging(verbose=verbose, debug=debug)

    if total is not None:
        steps = int(total)
        default_message = "Processing"
    else:
        default_message = "Working..."

    progress = ProgressLogger(
        message or default_message,
        total=total,
        show_progress_bar=show_progress_bar,
        show_loading_animation=show_loading_animation,
        show_eta=show_eta,
        bar_length=bar_length,
        update_throttle=update_throttle,
        show_avg_time_per_item=show_avg_time_per_item,
        display_message_first=display_message_first,
        console=console,
    )
    run_demo(progress, steps=steps, delay=delay, end_message=end_message or "Done")


if __name__ == "__main__":
    main()
