import logging
from importlib.metadata import version

__version__ = version("progress-logger")

VERBOSE = 15
logging.addLevelName(VERBOSE, "VERBOSE")

from .logger import ProgressLogger  # noqa: E402

__all__ = ["VERBOSE", "ProgressLogger", "__version__"]
