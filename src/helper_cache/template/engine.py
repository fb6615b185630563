"""Template Engine implementation."""

import ast
import re
from collections.abc import Callable, Mapping
from typing import Any

from helper_cache.errors import HelperCacheError, create_error

from .filters import FILTERS
from .parser import (
    TEMPLATE_PATTERN,
    call_name,
    extract_helper_calls,
    parse_expression,
    validate_syntax,
)
from .types import RenderResult, TemplateContext

# Literal aliases accepted alongside True/False/None
_ALIASES = {"true": True, "false": False, "null": None}


class TemplateEngine:
    """Render {{ }} expressions in text, calling registered helpers.

    Supports:
    - Variable access: {{ name }}, {{ user.email }}, {{ items[0] }}
    - Helper calls: {{ upper(name) }}, {{ mdu.heading(title, level=2) }}
    - Filters: {{ items | length }}, {{ x | default(0) }}, {{ data | json }}
    - Literals: strings, numbers, lists, dicts, true/false/null

    Does NOT support:
    - Arithmetic or comparisons
    - Control flow (if/for)
    - Private attribute access

    Helpers are plain synchronous callables. Async helpers arrive already
    wrapped, so calling one only returns a placeholder token that the
    resolution engine replaces after rendering.
    """

    def __init__(
        self,
        filters: Mapping[str, Callable[..., Any]] | None = None,
        strict_undefined: bool = False,
    ) -> None:
        """Initialize template engine.

        Args:
            filters: Filter functions (defaults to the built-in set)
            strict_undefined: Raise TEMPLATE_ERROR on undefined variables
                instead of rendering them as empty
        """
        self._filters = dict(FILTERS if filters is None else filters)
        self._strict_undefined = strict_undefined

    def render(
        self,
        template: str,
        data: Mapping[str, Any] | None = None,
        helpers: Mapping[str, Callable[..., Any]] | None = None,
    ) -> RenderResult:
        """Render every {{ }} expression in a template.

        Args:
            template: Text that may contain {{ }} expressions
            data: Variables visible to expressions
            helpers: Helper callables by (possibly dotted) name

        Returns:
            RenderResult with rendered text

        Raises:
            HelperCacheError(TEMPLATE_ERROR): On invalid expressions
            HelperCacheError(HELPER_NOT_FOUND): On calls to unknown helpers
            Exception: Whatever a sync helper raises, unchanged
        """
        if not isinstance(template, str):
            raise create_error(
                "INVALID_ARGUMENT",
                reason=f"template must be a string, got {type(template).__name__}",
            )

        context = TemplateContext(data=data or {}, helpers=helpers or {})
        rendered: list[str] = []

        def substitute(match: re.Match[str]) -> str:
            expression = match.group(1).strip()
            rendered.append(expression)
            value = self.evaluate(expression, context)
            return "" if value is None else str(value)

        text = TEMPLATE_PATTERN.sub(substitute, template)
        return RenderResult(text=text, had_templates=bool(rendered), expressions=rendered)

    def render_string(
        self,
        template: str,
        data: Mapping[str, Any] | None = None,
        helpers: Mapping[str, Callable[..., Any]] | None = None,
    ) -> str:
        """Render a template and return only the text."""
        return self.render(template, data, helpers).text

    def evaluate(self, expression: str, context: TemplateContext) -> Any:
        """Evaluate one expression (without {{ }}) against a context.

        Returns the raw value, not its string form.
        """
        tree = parse_expression(expression)
        try:
            return self._eval(tree.body, context, expression)
        except HelperCacheError as e:
            if e.template is None:
                e.template = expression
            raise

    def validate(self, template: str) -> list[str]:
        """Validate template syntax without rendering.

        Returns:
            List of error messages (empty if valid)
        """
        return validate_syntax(template)

    def extract_helper_calls(self, template: str) -> list[str]:
        """List the helper names a template calls."""
        return extract_helper_calls(template)

    def add_filter(self, name: str, fn: Callable[..., Any]) -> None:
        self._filters[name] = fn

    def _eval(self, node: ast.AST, context: TemplateContext, expression: str) -> Any:
        if isinstance(node, ast.Constant):
            return node.value

        if isinstance(node, ast.Name):
            return self._lookup_name(node.id, context, expression)

        if isinstance(node, ast.Attribute):
            base = self._eval(node.value, context, expression)
            return self._access(base, node.attr, expression)

        if isinstance(node, ast.Subscript):
            base = self._eval(node.value, context, expression)
            key = self._eval(node.slice, context, expression)
            return self._access(base, key, expression)

        if isinstance(node, ast.Call):
            return self._call(node, context, expression)

        if isinstance(node, ast.BinOp) and isinstance(node.op, ast.BitOr):
            return self._apply_filter(node, context, expression)

        if isinstance(node, ast.UnaryOp):
            operand = self._eval(node.operand, context, expression)
            return -operand if isinstance(node.op, ast.USub) else +operand

        if isinstance(node, ast.List):
            return [self._eval(item, context, expression) for item in node.elts]

        if isinstance(node, ast.Tuple):
            return tuple(self._eval(item, context, expression) for item in node.elts)

        if isinstance(node, ast.Dict):
            return {
                self._eval(k, context, expression): self._eval(v, context, expression)
                for k, v in zip(node.keys, node.values)
                if k is not None
            }

        raise create_error(
            "TEMPLATE_ERROR",
            template=expression,
            detail=f"{type(node).__name__} is not supported in templates",
        )

    def _lookup_name(self, name: str, context: TemplateContext, expression: str) -> Any:
        if name in context.data:
            return context.data[name]
        if name in _ALIASES:
            return _ALIASES[name]
        return self._undefined(name, expression)

    def _access(self, base: Any, key: Any, expression: str) -> Any:
        if base is None:
            return self._undefined(str(key), expression)
        if isinstance(base, Mapping):
            if key in base:
                return base[key]
            return self._undefined(str(key), expression)
        if isinstance(key, int) and isinstance(base, (list, tuple, str)):
            try:
                return base[key]
            except IndexError:
                return self._undefined(str(key), expression)
        if isinstance(key, str) and not key.startswith("_") and hasattr(base, key):
            return getattr(base, key)
        return self._undefined(str(key), expression)

    def _undefined(self, name: str, expression: str) -> None:
        if self._strict_undefined:
            raise create_error(
                "TEMPLATE_ERROR",
                template=expression,
                detail=f"Undefined variable '{name}' in '{expression}'",
            )
        return None

    def _call(self, node: ast.Call, context: TemplateContext, expression: str) -> Any:
        name = call_name(node.func)
        fn = context.helpers.get(name) if name is not None else None
        if fn is None:
            raise create_error("HELPER_NOT_FOUND", helper_name=name, template=expression)

        args = [self._eval(arg, context, expression) for arg in node.args]
        kwargs = {
            kw.arg: self._eval(kw.value, context, expression)
            for kw in node.keywords
            if kw.arg is not None
        }
        return fn(*args, **kwargs)

    def _apply_filter(self, node: ast.BinOp, context: TemplateContext, expression: str) -> Any:
        """Apply ``value | name`` or ``value | name(args)``.

        Filters are looked up before helpers of the same name.
        """
        value = self._eval(node.left, context, expression)
        target = node.right

        if isinstance(target, ast.Call):
            name = call_name(target.func)
            args = [self._eval(arg, context, expression) for arg in target.args]
            kwargs = {
                kw.arg: self._eval(kw.value, context, expression)
                for kw in target.keywords
                if kw.arg is not None
            }
        else:
            name = call_name(target)
            args, kwargs = [], {}

        fn = self._filters.get(name) if name else None
        if fn is None and name:
            fn = context.helpers.get(name)
        if fn is None:
            raise create_error(
                "TEMPLATE_ERROR",
                template=expression,
                detail=f"Unknown filter '{name}'",
            )

        try:
            return fn(value, *args, **kwargs)
        except HelperCacheError:
            raise
        except (TypeError, ValueError) as e:
            if name not in self._filters:
                raise
            raise create_error(
                "TEMPLATE_ERROR",
                template=expression,
                detail=f"Filter '{name}' failed: {e}",
            ) from e
