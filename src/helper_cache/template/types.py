"""Template engine type definitions."""

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any


@dataclass
class TemplateContext:
    """Names visible to template expressions.

    Access patterns:
    - {{ name }} → self.data["name"]
    - {{ user.email }} → self.data["user"]["email"] (or attribute)
    - {{ upper(name) }} → self.helpers["upper"](self.data["name"])
    """

    data: Mapping[str, Any] = field(default_factory=dict)
    helpers: Mapping[str, Callable[..., Any]] = field(default_factory=dict)


@dataclass
class RenderResult:
    """Result of template rendering."""

    text: str  # Rendered text, possibly holding async placeholder tokens
    had_templates: bool  # Whether any {{ }} expressions were found
    expressions: list[str] = field(default_factory=list)  # Expressions rendered
