"""Unit tests for structured errors."""

import pytest

from helper_cache.errors import (
    ErrorCategory,
    ErrorFactory,
    ErrorRegistry,
    ErrorTemplate,
    HelperCacheError,
    create_error,
)


class TestErrorRegistry:
    def test_builtin_codes(self):
        codes = ErrorRegistry().list_codes()
        for code in (
            "INVALID_ARGUMENT",
            "HELPER_NOT_FOUND",
            "HELPER_FAILED",
            "TEMPLATE_ERROR",
            "CONFIG_INVALID",
        ):
            assert code in codes

    def test_unknown_code(self):
        with pytest.raises(ValueError):
            ErrorRegistry().create("NOPE")

    def test_interpolation(self):
        error = create_error("HELPER_NOT_FOUND", helper_name="upper")
        assert error.message == "Helper 'upper' is not registered"
        assert error.category == ErrorCategory.HELPER
        assert error.helper_name == "upper"

    def test_detail_override(self):
        error = create_error("TEMPLATE_ERROR", detail="bad thing", template="x +")
        assert str(error) == "Template expression could not be rendered: bad thing"
        assert error.template == "x +"


class TestErrorFactory:
    def test_exception_passes_through(self):
        original = OSError("disk")
        assert ErrorFactory().from_error_value(original, "read") is original

    def test_value_is_wrapped(self):
        error = ErrorFactory().from_error_value({"status": 500}, "fetch")
        assert isinstance(error, HelperCacheError)
        assert error.code == "HELPER_FAILED"
        assert error.detail == "{'status': 500}"


class TestHelperCacheError:
    def test_is_exception(self):
        with pytest.raises(HelperCacheError):
            raise create_error("INVALID_ARGUMENT", reason="bad name")

    def test_to_dict(self):
        cause = create_error("CONFIG_INVALID", detail="missing")
        error = ErrorRegistry().create("HELPER_FAILED", {"helper_name": "f", "error": "x"}, cause)
        data = error.to_dict()
        assert data["code"] == "HELPER_FAILED"
        assert data["category"] == "HELPER"
        assert data["detail"] == "x"
        assert data["cause"]["code"] == "CONFIG_INVALID"
        assert data["timestamp"]

    def test_register_custom_template(self):
        registry = ErrorRegistry()
        registry.register(
            ErrorTemplate(
                code="RATE_LIMITED",
                category=ErrorCategory.HELPER,
                message_template="Helper '{helper_name}' was rate limited",
            )
        )
        error = registry.create("RATE_LIMITED", {"helper_name": "fetch"})
        assert error.message == "Helper 'fetch' was rate limited"
        assert error.detail is None
