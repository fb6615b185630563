"""Shared enumerations for helper-cache."""

from enum import Enum


class LogLevel(str, Enum):
    """Log verbosity level."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARN = "WARN"
    ERROR = "ERROR"


class LogFormat(str, Enum):
    """Log output format."""

    COLORED = "colored"
    JSON = "json"


class HelperKind(str, Enum):
    """How a helper produces its value."""

    SYNC = "sync"
    ASYNC = "async"


class CallStyle(str, Enum):
    """Calling convention of a real async helper implementation."""

    CALLBACK = "callback"  # last parameter is callback(error, result)
    COROUTINE = "coroutine"  # async def, awaited for its result


class InvocationStatus(str, Enum):
    """Outcome of a pending invocation during resolution."""

    PENDING = "pending"
    SKIPPED = "skipped"
    COMPLETED = "completed"
    FAILED = "failed"
