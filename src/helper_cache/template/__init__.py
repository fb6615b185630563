"""Template Engine - {{ }} expressions with helper calls and filters."""

from .engine import TemplateEngine
from .filters import FILTERS
from .parser import (
    extract_helper_calls,
    extract_templates,
    has_templates,
    parse_expression,
    validate_syntax,
)
from .types import RenderResult, TemplateContext

__all__ = [
    # Engine
    "TemplateEngine",
    # Types
    "RenderResult",
    "TemplateContext",
    # Parser
    "extract_templates",
    "extract_helper_calls",
    "has_templates",
    "parse_expression",
    "validate_syntax",
    # Filters
    "FILTERS",
]
