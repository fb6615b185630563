"""Template filter implementations."""

import json
from typing import Any


def filter_length(value: Any) -> int:
    """Return length of string, list, or dict.

    Raises:
        TypeError: If value doesn't support len()
    """
    return len(value)


def filter_default(value: Any, default: Any) -> Any:
    """Return default if value is None (undefined variables render as None)."""
    return value if value is not None else default


def filter_json(value: Any) -> str:
    """Serialize value to JSON string."""
    return json.dumps(value)


def filter_upper(value: Any) -> str:
    return str(value).upper()


def filter_lower(value: Any) -> str:
    return str(value).lower()


def filter_trim(value: Any) -> str:
    return str(value).strip()


# Registry of available filters
FILTERS: dict[str, Any] = {
    "length": filter_length,
    "default": filter_default,
    "json": filter_json,
    "upper": filter_upper,
    "lower": filter_lower,
    "trim": filter_trim,
}
