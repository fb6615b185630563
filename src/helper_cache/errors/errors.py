"""helper-cache error types."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Error source categories."""

    REGISTRATION = "REGISTRATION"
    HELPER = "HELPER"
    TEMPLATE = "TEMPLATE"
    SYSTEM = "SYSTEM"


@dataclass
class HelperCacheError(Exception):
    """Structured error with context. Base exception for all helper-cache errors."""

    # Identity
    code: str  # e.g., "INVALID_ARGUMENT"
    category: ErrorCategory

    # Messages
    message: str  # Human-readable summary
    detail: str | None = None  # Extended explanation
    suggestion: str | None = None  # Actionable fix

    # Context
    helper_name: str | None = None  # Which helper was involved
    template: str | None = None  # Offending template expression

    # Error chain
    cause: "HelperCacheError | None" = None

    # Metadata
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    def __post_init__(self) -> None:
        """Set Exception message."""
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.detail:
            return f"{self.message}: {self.detail}"
        return self.message

    def to_dict(self) -> dict[str, Any]:
        """Serialize for logs and callers that report errors as data.

        Returns:
            Dictionary representation of the error
        """
        return {
            "code": self.code,
            "category": self.category.value,
            "message": self.message,
            "detail": self.detail,
            "suggestion": self.suggestion,
            "helper_name": self.helper_name,
            "template": self.template,
            "timestamp": self.timestamp.isoformat(),
            "cause": self.cause.to_dict() if self.cause else None,
        }


@dataclass
class ErrorTemplate:
    """Template for creating errors."""

    code: str
    category: ErrorCategory
    message_template: str  # "Helper '{helper_name}' is not registered"
    detail_template: str | None = None
    suggestion_template: str | None = None
