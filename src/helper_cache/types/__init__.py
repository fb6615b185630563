"""Shared types for helper-cache.

Import from here rather than submodules:
    from helper_cache.types import HelperKind, LogLevel
"""

from .enums import CallStyle, HelperKind, InvocationStatus, LogFormat, LogLevel
from .validation import ValidationIssue, ValidationResult

__all__ = [
    # Enums
    "LogLevel",
    "LogFormat",
    "HelperKind",
    "CallStyle",
    "InvocationStatus",
    # Validation
    "ValidationIssue",
    "ValidationResult",
]
