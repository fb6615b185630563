"""Unit tests for placeholder tokens."""

import pytest

from helper_cache.config import TokenConfig
from helper_cache.resolver import TokenFactory, find_tokens, generate_token


class TestTokenFactory:
    def test_default_format(self):
        token = generate_token()
        assert token.startswith("__async_helper_id__")
        assert token.endswith("__")
        body = token[len("__async_helper_id__") : -2]
        assert len(body) == 24
        assert body.isalnum()

    def test_tokens_are_unique(self):
        tokens = {generate_token() for _ in range(1000)}
        assert len(tokens) == 1000

    def test_custom_shape(self):
        factory = TokenFactory(TokenConfig(prefix="<<", suffix=">>", length=32))
        token = factory.generate()
        assert token.startswith("<<") and token.endswith(">>")
        assert len(token) == 36
        assert factory.is_token(token)

    def test_length_below_minimum(self):
        with pytest.raises(ValueError):
            TokenFactory(TokenConfig(length=8))

    def test_empty_prefix(self):
        with pytest.raises(ValueError):
            TokenFactory(TokenConfig(prefix=""))

    def test_is_token(self):
        factory = TokenFactory()
        assert factory.is_token(factory.generate())
        assert not factory.is_token("__async_helper_id__short__")
        assert not factory.is_token(None)
        assert not factory.is_token("x" + factory.generate())


class TestFindTokens:
    def test_in_order_of_appearance(self):
        a, b = generate_token(), generate_token()
        assert find_tokens(f"first {b} then {a}.") == [b, a]

    def test_no_tokens(self):
        assert find_tokens("plain text __async_helper_id__ only") == []
