"""helper-cache configuration loader."""

import enum
import os
import re
from collections.abc import Iterator
from dataclasses import fields, is_dataclass
from pathlib import Path
from typing import Any

import yaml

from helper_cache.errors import create_error
from helper_cache.types import LogFormat, LogLevel, ValidationIssue, ValidationResult

from .models import MIN_TOKEN_LENGTH, HelperCacheConfig

CONFIG_PATH_ENV = "HELPER_CACHE_CONFIG_PATH"
LOCAL_CONFIG_NAME = "helper-cache.yaml"
USER_CONFIG_PATH = Path("~/.helper-cache/config.yaml")

# ${NAME}, ${NAME:-default}, ${NAME:?message}
_ENV_REF = re.compile(r"\$\{(?P<name>[^}:]+)(?::(?P<op>[-?])(?P<arg>[^}]*))?\}")


def resolve_env_vars(value: str) -> str:
    """Expand environment variable references in a config string.

    ``${NAME}`` and ``${NAME:?message}`` must be set; ``${NAME:-default}``
    falls back to ``default``.

    Raises:
        HelperCacheError(CONFIG_INVALID): If a required variable is unset
    """

    def expand(match: re.Match[str]) -> str:
        name, op, arg = match.group("name", "op", "arg")
        current = os.environ.get(name)
        if current is not None:
            return current
        if op == "-":
            return arg or ""
        message = (op == "?" and arg) or f"Required environment variable {name} not set"
        raise create_error("CONFIG_INVALID", detail=message)

    return _ENV_REF.sub(expand, value)


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Merge ``override`` into a copy of ``base``, recursing into nested dicts."""
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = value
    return merged


def _expand_all(data: Any) -> Any:
    if isinstance(data, str):
        return resolve_env_vars(data)
    if isinstance(data, dict):
        return {key: _expand_all(value) for key, value in data.items()}
    if isinstance(data, list):
        return [_expand_all(item) for item in data]
    return data


def _candidate_paths() -> Iterator[Path]:
    env_path = os.environ.get(CONFIG_PATH_ENV)
    if env_path:
        yield Path(env_path)
        return
    yield Path(LOCAL_CONFIG_NAME)
    yield USER_CONFIG_PATH.expanduser()


class ConfigLoader:
    """Load and validate helper-cache configuration."""

    def __init__(self) -> None:
        self._config: HelperCacheConfig | None = None
        self._config_path: Path | None = None

    @property
    def config_path(self) -> Path | None:
        """File the current configuration came from, if any."""
        return self._config_path

    def load(
        self,
        path: str | Path | None = None,
        use_defaults: bool = True,
        overrides: dict[str, Any] | None = None,
    ) -> HelperCacheConfig:
        """Load configuration from a YAML file.

        Search order when ``path`` is not given:
        1. HELPER_CACHE_CONFIG_PATH environment variable
        2. ./helper-cache.yaml
        3. ~/.helper-cache/config.yaml

        Args:
            path: Explicit config file
            use_defaults: Fall back to defaults when no file exists
            overrides: Values deep-merged over the file contents

        Returns:
            Loaded HelperCacheConfig

        Raises:
            HelperCacheError(CONFIG_INVALID): On a missing file (without
                defaults), bad YAML, unset required variables or failed validation
        """
        config_path = Path(path) if path is not None else self.find_config_file()

        if config_path is None or not config_path.exists():
            if not use_defaults:
                raise create_error(
                    "CONFIG_INVALID",
                    detail=f"Configuration file not found: {config_path or LOCAL_CONFIG_NAME}",
                )
            return self.load_from_dict(overrides or {})

        data = self._read_yaml(config_path)
        if overrides:
            data = deep_merge(data, overrides)
        return self.load_from_dict(data, config_path)

    def find_config_file(self) -> Path | None:
        """First existing file in the search order, or None."""
        for candidate in _candidate_paths():
            if candidate.exists():
                return candidate
        return None

    def load_defaults(self) -> HelperCacheConfig:
        return self.load_from_dict({})

    def load_from_dict(
        self, data: dict[str, Any], config_path: Path | None = None
    ) -> HelperCacheConfig:
        """Validate a config mapping and convert it to HelperCacheConfig.

        Raises:
            HelperCacheError(CONFIG_INVALID): If validation fails
        """
        result = self.validate(data)
        if not result.valid:
            lines = "\n".join(f"- {issue.path}: {issue.message}" for issue in result.errors)
            raise create_error(
                "CONFIG_INVALID", detail=f"Configuration validation failed:\n{lines}"
            )

        try:
            config = _build(HelperCacheConfig, data)
        except (TypeError, ValueError) as e:
            raise create_error(
                "CONFIG_INVALID", detail=f"Failed to parse configuration: {e}"
            ) from e

        self._config = config
        self._config_path = config_path
        return config

    def validate(self, data: dict[str, Any]) -> ValidationResult:
        """Check config data without loading it.

        Unknown keys are warnings; wrong shapes and out-of-range values are errors.
        """
        errors: list[ValidationIssue] = []
        warnings: list[ValidationIssue] = []
        sections = {f.name for f in fields(HelperCacheConfig)}

        for key, section in data.items():
            if key not in sections:
                warnings.append(
                    ValidationIssue(key, f"Unknown configuration key: {key}", "warning")
                )
            elif not isinstance(section, dict):
                errors.append(ValidationIssue(key, f"{key} must be a dictionary"))

        tokens = data.get("tokens")
        if isinstance(tokens, dict):
            errors.extend(self._validate_tokens(tokens))

        logging_section = data.get("logging")
        if isinstance(logging_section, dict):
            errors.extend(self._validate_logging(logging_section))

        return ValidationResult(valid=True, errors=errors, warnings=warnings)

    def get(self) -> HelperCacheConfig:
        """Most recently loaded configuration.

        Raises:
            HelperCacheError(CONFIG_INVALID): If nothing has been loaded
        """
        if self._config is None:
            raise create_error("CONFIG_INVALID", detail="Configuration not loaded")
        return self._config

    def _read_yaml(self, config_path: Path) -> dict[str, Any]:
        try:
            data = yaml.safe_load(config_path.read_text()) or {}
        except yaml.YAMLError as e:
            raise create_error(
                "CONFIG_INVALID", detail=f"Invalid YAML in {config_path}: {e}"
            ) from e

        if not isinstance(data, dict):
            raise create_error(
                "CONFIG_INVALID", detail=f"Top level of {config_path} must be a mapping"
            )
        return _expand_all(data)

    def _validate_tokens(self, tokens: dict[str, Any]) -> list[ValidationIssue]:
        issues: list[ValidationIssue] = []
        length = tokens.get("length")
        if length is not None:
            # bool is an int subclass
            if type(length) is not int or length < MIN_TOKEN_LENGTH:
                issues.append(
                    ValidationIssue(
                        "tokens.length", f"length must be an integer >= {MIN_TOKEN_LENGTH}"
                    )
                )
        for key in ("prefix", "suffix"):
            if key in tokens and not isinstance(tokens[key], str):
                issues.append(ValidationIssue(f"tokens.{key}", f"{key} must be a string"))
        if tokens.get("prefix") == "":
            issues.append(ValidationIssue("tokens.prefix", "prefix must not be empty"))
        return issues

    def _validate_logging(self, section: dict[str, Any]) -> list[ValidationIssue]:
        issues: list[ValidationIssue] = []
        allowed = {
            "level": [lvl.value for lvl in LogLevel],
            "format": [fmt.value for fmt in LogFormat],
        }
        for key, values in allowed.items():
            if key in section and section[key] not in values:
                issues.append(
                    ValidationIssue(f"logging.{key}", f"{key} must be one of {', '.join(values)}")
                )
        return issues


def _build(cls: Any, value: Any) -> Any:
    """Convert plain YAML data to the dataclass or enum ``cls`` describes."""
    if value is None:
        return None
    if is_dataclass(cls):
        if not isinstance(value, dict):
            raise TypeError(f"{cls.__name__} expects a mapping, got {type(value).__name__}")
        known = {f.name: f.type for f in fields(cls)}
        return cls(**{key: _build(known[key], item) for key, item in value.items() if key in known})
    if isinstance(cls, type) and issubclass(cls, enum.Enum):
        return cls(value)
    return value


def load_config(path: str | Path | None = None) -> HelperCacheConfig:
    """Load configuration with a fresh ConfigLoader."""
    return ConfigLoader().load(path)
