"""Error factory for creating HelperCacheErrors."""

from typing import Any

from .errors import HelperCacheError
from .registry import ErrorRegistry


class ErrorFactory:
    """Creates HelperCacheErrors from codes and from arbitrary error values."""

    def __init__(self, registry: ErrorRegistry | None = None):
        """Initialize error factory.

        Args:
            registry: Error registry (defaults to new ErrorRegistry())
        """
        self.registry = registry or ErrorRegistry()

    def from_error_value(self, error: Any, helper_name: str | None = None) -> BaseException:
        """Turn whatever an async helper reported as its error into something raisable.

        Exceptions pass through untouched so callers can inspect the original
        cause. Any other non-None value (a message string, an error dict) is
        wrapped in a HELPER_FAILED error.

        Args:
            error: Error value given to the completion callback
            helper_name: Name of the helper that reported it

        Returns:
            Exception instance
        """
        if isinstance(error, BaseException):
            return error

        return self.registry.create(
            code="HELPER_FAILED",
            context={"helper_name": helper_name, "error": str(error)},
        )

    def create(
        self,
        code: str,
        context: dict[str, Any] | None = None,
        **kwargs: Any,
    ) -> HelperCacheError:
        """Create an error from code, merging keyword context into ``context``.

        Args:
            code: Error code
            context: Context variables for template interpolation
            **kwargs: Additional context variables

        Returns:
            HelperCacheError instance
        """
        merged_context = dict(context or {})
        merged_context.update(kwargs)

        return self.registry.create(code=code, context=merged_context)


# Convenience singleton
_default_factory: ErrorFactory | None = None


def get_error_factory() -> ErrorFactory:
    """Get default error factory singleton."""
    global _default_factory  # noqa: PLW0603
    if _default_factory is None:
        _default_factory = ErrorFactory()
    return _default_factory


def create_error(code: str, **context: Any) -> HelperCacheError:
    """Create an error from the default registry.

    Args:
        code: Error code
        **context: Context variables for template interpolation

    Returns:
        HelperCacheError instance
    """
    return get_error_factory().create(code, context)
