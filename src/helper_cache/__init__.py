"""helper-cache - Sync and async template helpers.

Async helpers return placeholder tokens while a template renders; the
resolver runs them afterwards, in call order, and substitutes the results.
"""

from helper_cache.cache import HelperCache
from helper_cache.errors import HelperCacheError

__version__ = "0.1.0"
__all__ = ["__version__", "HelperCache", "HelperCacheError"]
