"""Helper Registry - name to callable mapping for templates."""

from .registry import HelperRegistry, HelperSource, is_valid_name
from .types import HelperEntry

__all__ = [
    # Registry
    "HelperRegistry",
    "HelperSource",
    "is_valid_name",
    # Types
    "HelperEntry",
]
