class ProgressLoggerError(Exception):
    """Base class for progress-logger errors."""


class InterceptionActiveError(ProgressLoggerError):
    """Raised when output interception is acquired while another session holds it."""
