"""Error codes and the templates their messages are built from."""

from typing import Any

from .errors import ErrorCategory, ErrorTemplate, HelperCacheError

BUILTIN_TEMPLATES: tuple[ErrorTemplate, ...] = (
    # Registration
    ErrorTemplate(
        code="INVALID_ARGUMENT",
        category=ErrorCategory.REGISTRATION,
        message_template="Invalid helper registration",
        detail_template="{reason}",
        suggestion_template="Use a non-empty identifier-like name and a callable helper function",
    ),
    # Helpers
    ErrorTemplate(
        code="HELPER_NOT_FOUND",
        category=ErrorCategory.HELPER,
        message_template="Helper '{helper_name}' is not registered",
        detail_template="The template called a helper that is missing from the helper set",
        suggestion_template="Register the helper before rendering or fix the template",
    ),
    ErrorTemplate(
        code="HELPER_FAILED",
        category=ErrorCategory.HELPER,
        message_template="Async helper '{helper_name}' reported an error",
        detail_template="{error}",
        suggestion_template="Check the helper implementation and its arguments",
    ),
    # Templates
    ErrorTemplate(
        code="TEMPLATE_ERROR",
        category=ErrorCategory.TEMPLATE,
        message_template="Template expression could not be rendered",
        detail_template="Expression: {template}",
        suggestion_template="Check the expression syntax and the data passed to render",
    ),
    # System
    ErrorTemplate(
        code="CONFIG_INVALID",
        category=ErrorCategory.SYSTEM,
        message_template="Configuration is invalid",
        detail_template="{detail}",
        suggestion_template="Check the configuration file and environment variables",
    ),
)


class ErrorRegistry:
    """Error templates by code."""

    def __init__(self) -> None:
        self._templates = {template.code: template for template in BUILTIN_TEMPLATES}

    def get_template(self, code: str) -> ErrorTemplate | None:
        return self._templates.get(code)

    def list_codes(self) -> list[str]:
        return list(self._templates)

    def register(self, template: ErrorTemplate) -> None:
        """Add or replace the template for ``template.code``."""
        self._templates[template.code] = template

    def create(
        self,
        code: str,
        context: dict[str, Any] | None = None,
        cause: HelperCacheError | None = None,
    ) -> HelperCacheError:
        """Build an error from the template for ``code``.

        ``detail`` and ``suggestion`` given in ``context`` replace the
        template text; ``helper_name`` and ``template`` are copied onto the
        error.

        Raises:
            ValueError: If no template exists for ``code``
        """
        template = self._templates.get(code)
        if template is None:
            raise ValueError(f"Unknown error code: {code}")

        context = context or {}
        return HelperCacheError(
            code=template.code,
            category=template.category,
            message=_fill(template.message_template, context) or f"Error {code}",
            detail=context.get("detail") or _fill(template.detail_template, context),
            suggestion=context.get("suggestion") or _fill(template.suggestion_template, context),
            helper_name=context.get("helper_name"),
            template=context.get("template"),
            cause=cause,
        )


def _fill(text: str | None, context: dict[str, Any]) -> str | None:
    """Format ``text`` with context, leaving it unformatted if a key is missing."""
    if text is None:
        return None
    try:
        return text.format(**context)
    except KeyError:
        return text
