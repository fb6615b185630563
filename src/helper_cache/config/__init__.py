"""helper-cache configuration - Config loading and models."""

from .loader import (
    ConfigLoader,
    deep_merge,
    load_config,
    resolve_env_vars,
)
from .models import (
    DEFAULT_TOKEN_PREFIX,
    DEFAULT_TOKEN_SUFFIX,
    MIN_TOKEN_LENGTH,
    HelperCacheConfig,
    LoggingComponentsConfig,
    LoggingConfig,
    LoggingOptionsConfig,
    RegistryConfig,
    TemplateConfig,
    TokenConfig,
)

__all__ = [
    # Config models
    "HelperCacheConfig",
    "TokenConfig",
    "RegistryConfig",
    "TemplateConfig",
    "LoggingConfig",
    "LoggingComponentsConfig",
    "LoggingOptionsConfig",
    "DEFAULT_TOKEN_PREFIX",
    "DEFAULT_TOKEN_SUFFIX",
    "MIN_TOKEN_LENGTH",
    # Loader
    "ConfigLoader",
    "load_config",
    "resolve_env_vars",
    "deep_merge",
]
