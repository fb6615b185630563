"""helper-cache configuration data models."""

from dataclasses import dataclass, field

from helper_cache.types import LogFormat, LogLevel

DEFAULT_TOKEN_PREFIX = "__async_helper_id__"
DEFAULT_TOKEN_SUFFIX = "__"
MIN_TOKEN_LENGTH = 20


@dataclass
class TokenConfig:
    """Placeholder token format."""

    prefix: str = DEFAULT_TOKEN_PREFIX
    suffix: str = DEFAULT_TOKEN_SUFFIX
    length: int = 24  # random alphanumeric characters, at least MIN_TOKEN_LENGTH


@dataclass
class RegistryConfig:
    """Helper registry configuration."""

    warn_on_override: bool = False


@dataclass
class TemplateConfig:
    """Template engine configuration."""

    strict_undefined: bool = False


@dataclass
class LoggingComponentsConfig:
    """Logging components configuration."""

    registry: bool = True
    render: bool = True
    resolve: bool = True


@dataclass
class LoggingOptionsConfig:
    """Logging options configuration."""

    show_args: bool = True
    truncate_at: int = 200


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: LogLevel = LogLevel.INFO
    format: LogFormat = LogFormat.COLORED
    components: LoggingComponentsConfig = field(default_factory=LoggingComponentsConfig)
    options: LoggingOptionsConfig = field(default_factory=LoggingOptionsConfig)


@dataclass
class HelperCacheConfig:
    """Complete helper-cache configuration."""

    tokens: TokenConfig = field(default_factory=TokenConfig)
    registry: RegistryConfig = field(default_factory=RegistryConfig)
    template: TemplateConfig = field(default_factory=TemplateConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
