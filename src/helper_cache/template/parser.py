"""Template parsing utilities."""

import ast
import re

from helper_cache.errors import create_error

# Regex to find {{ }} expressions
TEMPLATE_PATTERN = re.compile(r"\{\{(.+?)\}\}", re.DOTALL)

# Node types an expression may contain
ALLOWED_NODES: tuple[type[ast.AST], ...] = (
    ast.Expression,
    ast.Constant,
    ast.Name,
    ast.Load,
    ast.Attribute,
    ast.Subscript,
    ast.Call,
    ast.keyword,
    ast.Dict,
    ast.List,
    ast.Tuple,
    ast.BinOp,
    ast.BitOr,
    ast.UnaryOp,
    ast.USub,
    ast.UAdd,
)


def extract_templates(text: str) -> list[str]:
    """Extract all {{ }} template expressions from text.

    Args:
        text: Text to search

    Returns:
        List of template expressions (without {{ }})
    """
    return [match.group(1).strip() for match in TEMPLATE_PATTERN.finditer(text)]


def has_templates(text: str) -> bool:
    """Check if text contains any {{ }} templates."""
    return bool(TEMPLATE_PATTERN.search(text))


def parse_expression(expression: str) -> ast.Expression:
    """Parse one template expression into an AST.

    Args:
        expression: Expression text (without {{ }})

    Returns:
        Parsed expression tree

    Raises:
        HelperCacheError(TEMPLATE_ERROR): On syntax errors or disallowed constructs
    """
    try:
        tree = ast.parse(expression.strip(), mode="eval")
    except SyntaxError as e:
        raise create_error(
            "TEMPLATE_ERROR",
            template=expression,
            detail=f"Invalid expression '{expression}': {e.msg}",
        ) from e

    problems = _check_nodes(tree)
    if problems:
        raise create_error(
            "TEMPLATE_ERROR",
            template=expression,
            detail="; ".join(problems),
        )
    return tree


def call_name(node: ast.AST) -> str | None:
    """Dotted helper name for a call target, e.g. ``mdu.heading``.

    Returns None if the target is not a plain name or attribute chain.
    """
    parts: list[str] = []
    while isinstance(node, ast.Attribute):
        parts.append(node.attr)
        node = node.value
    if not isinstance(node, ast.Name):
        return None
    parts.append(node.id)
    return ".".join(reversed(parts))


def extract_helper_calls(text: str) -> list[str]:
    """List helper names called by the expressions in text, outer calls first.

    Filters written as ``value | name`` are not included. Expressions
    that fail to parse are ignored.
    """
    names: list[str] = []
    for expression in extract_templates(text):
        try:
            tree = ast.parse(expression, mode="eval")
        except SyntaxError:
            continue
        for node in ast.walk(tree):
            if isinstance(node, ast.Call) and not _is_filter_call(node, tree):
                name = call_name(node.func)
                if name is not None:
                    names.append(name)
    return names


def validate_syntax(text: str) -> list[str]:
    """Validate template syntax without rendering.

    Args:
        text: Text to validate

    Returns:
        List of error messages (empty if valid)
    """
    errors: list[str] = []

    for expression in extract_templates(text):
        if not expression:
            errors.append("Empty expression: {{ }}")
            continue
        try:
            tree = ast.parse(expression, mode="eval")
        except SyntaxError as e:
            errors.append(f"Invalid expression '{expression}': {e.msg}")
            continue
        errors.extend(_check_nodes(tree))

    return errors


def _check_nodes(tree: ast.AST) -> list[str]:
    problems: list[str] = []
    for node in ast.walk(tree):
        if not isinstance(node, ALLOWED_NODES):
            problems.append(f"{type(node).__name__} is not supported in templates")
        elif isinstance(node, ast.BinOp) and not isinstance(node.op, ast.BitOr):
            problems.append("Arithmetic expressions not supported")
        elif isinstance(node, ast.Attribute) and node.attr.startswith("_"):
            problems.append(f"Access to private attribute '{node.attr}' not allowed")
        elif isinstance(node, ast.Call) and call_name(node.func) is None:
            problems.append("Only named helpers can be called")
        elif isinstance(node, ast.keyword) and node.arg is None:
            problems.append("Keyword argument unpacking (**) not supported")
    return problems


def _is_filter_call(node: ast.Call, tree: ast.AST) -> bool:
    return any(
        isinstance(parent, ast.BinOp) and parent.right is node for parent in ast.walk(tree)
    )
