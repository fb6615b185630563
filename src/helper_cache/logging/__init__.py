"""helper-cache logging - Component-scoped colored logging."""

from .colors import (
    CYAN,
    GREEN,
    LIGHT_BLUE,
    MAGENTA,
    ORANGE,
    RED,
    RESET,
    YELLOW,
)
from .logger import (
    HelperLogger,
    LogConfig,
    RegistryLogger,
    RenderLogger,
    ResolveLogger,
)

__all__ = [
    # Logger classes
    "HelperLogger",
    "RegistryLogger",
    "RenderLogger",
    "ResolveLogger",
    "LogConfig",
    # Colors
    "RESET",
    "GREEN",
    "RED",
    "YELLOW",
    "ORANGE",
    "LIGHT_BLUE",
    "CYAN",
    "MAGENTA",
]
