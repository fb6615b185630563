"""Shared validation types for helper-cache."""

from dataclasses import dataclass, field


@dataclass
class ValidationIssue:
    """Single config validation issue (error or warning)."""

    path: str  # e.g., "tokens.length"
    message: str  # Human-readable description
    severity: str = "error"  # "error" | "warning"


@dataclass
class ValidationResult:
    """Result of config validation."""

    valid: bool
    errors: list[ValidationIssue] = field(default_factory=list)
    warnings: list[ValidationIssue] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Ensure valid is False if there are errors."""
        if self.errors:
            self.valid = False
