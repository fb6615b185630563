"""Placeholder tokens standing in for not-yet-computed async helper results."""

import re
import secrets
import string

from helper_cache.config.models import (
    DEFAULT_TOKEN_PREFIX,
    DEFAULT_TOKEN_SUFFIX,
    MIN_TOKEN_LENGTH,
    TokenConfig,
)

_ALPHABET = string.ascii_letters + string.digits


class TokenFactory:
    """Generate and recognize placeholder tokens of one configured shape.

    Format: ``<prefix><random alphanumerics><suffix>``, e.g.
    ``__async_helper_id__Xb31...__``.
    """

    def __init__(self, config: TokenConfig | None = None):
        config = config or TokenConfig()
        if config.length < MIN_TOKEN_LENGTH:
            msg = f"Token length must be at least {MIN_TOKEN_LENGTH}, got {config.length}"
            raise ValueError(msg)
        if not config.prefix:
            raise ValueError("Token prefix must not be empty")

        self.prefix = config.prefix
        self.suffix = config.suffix
        self.length = config.length
        self.pattern = re.compile(
            re.escape(self.prefix) + f"[A-Za-z0-9]{{{self.length}}}" + re.escape(self.suffix)
        )

    def generate(self) -> str:
        """Generate a fresh token."""
        body = "".join(secrets.choice(_ALPHABET) for _ in range(self.length))
        return f"{self.prefix}{body}{self.suffix}"

    def is_token(self, value: object) -> bool:
        """Check whether value is exactly one token."""
        return isinstance(value, str) and self.pattern.fullmatch(value) is not None

    def find_tokens(self, text: str) -> list[str]:
        """Return every token embedded in text, in order of appearance."""
        return self.pattern.findall(text)


_default_factory = TokenFactory(
    TokenConfig(prefix=DEFAULT_TOKEN_PREFIX, suffix=DEFAULT_TOKEN_SUFFIX)
)


def generate_token() -> str:
    """Generate a token in the default format."""
    return _default_factory.generate()


def find_tokens(text: str) -> list[str]:
    """Find default-format tokens in text."""
    return _default_factory.find_tokens(text)
