"""Tests for error types and codes."""

import pytest

from masmnav.core.errors import (
    ConfigError,
    ErrorCode,
    InternalError,
    MasmNavError,
    RequestError,
)


class TestErrorCode:
    """Error code value tests."""

    @pytest.mark.parametrize(
        ("code", "expected_range"),
        [
            (ErrorCode.CONFIG_PARSE_ERROR, 2000),
            (ErrorCode.CONFIG_INVALID_VALUE, 2000),
            (ErrorCode.CONFIG_FILE_NOT_FOUND, 2000),
            (ErrorCode.REQUEST_MALFORMED, 3000),
            (ErrorCode.REQUEST_UNKNOWN_METHOD, 3000),
            (ErrorCode.INTERNAL_ERROR, 9000),
        ],
    )
    def test_given_error_code_when_checked_then_in_correct_range(
        self, code: ErrorCode, expected_range: int
    ) -> None:
        """Error codes fall within their designated numeric range."""
        # Given
        error_code = code

        # When
        value = error_code.value

        # Then
        assert expected_range <= value < expected_range + 1000


class TestMasmNavError:
    """Base error behavior tests."""

    def test_given_error_when_to_dict_then_serializes_all_fields(self) -> None:
        """Error serializes to dict with all required fields."""
        # Given
        error = MasmNavError(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message="Test message",
            retryable=True,
            details={"key": "value"},
        )

        # When
        result = error.to_dict()

        # Then
        assert result == {
            "code": 2001,
            "error": "CONFIG_PARSE_ERROR",
            "message": "Test message",
            "retryable": True,
            "details": {"key": "value"},
        }

    def test_given_error_when_str_then_includes_code_and_name(self) -> None:
        """String form carries code, name and message."""
        # Given
        error = MasmNavError(code=ErrorCode.INTERNAL_ERROR, message="boom")

        # When
        text = str(error)

        # Then
        assert text == "[9001] INTERNAL_ERROR: boom"

    def test_given_error_when_raised_then_is_exception(self) -> None:
        """Errors can be raised and caught as MasmNavError."""
        with pytest.raises(MasmNavError) as exc_info:
            raise RequestError.unknown_method("rename")

        assert exc_info.value.code is ErrorCode.REQUEST_UNKNOWN_METHOD


class TestConfigError:
    """ConfigError factory tests."""

    def test_given_parse_failure_when_created_then_has_path(self) -> None:
        """parse_error records path and reason."""
        # Given / When
        error = ConfigError.parse_error("/etc/x.yaml", "bad indent")

        # Then
        assert error.code is ErrorCode.CONFIG_PARSE_ERROR
        assert error.details == {"path": "/etc/x.yaml", "reason": "bad indent"}
        assert "/etc/x.yaml" in error.message

    def test_given_invalid_value_when_created_then_value_stringified(self) -> None:
        """invalid_value stores the offending value as a string."""
        # Given / When
        error = ConfigError.invalid_value("layout.max_root_depth", 0, "too small")

        # Then
        assert error.code is ErrorCode.CONFIG_INVALID_VALUE
        assert error.details["value"] == "0"
        assert "layout.max_root_depth" in error.message

    def test_given_missing_file_when_created_then_not_retryable(self) -> None:
        """file_not_found is not retryable."""
        error = ConfigError.file_not_found("/nope.yaml")
        assert error.code is ErrorCode.CONFIG_FILE_NOT_FOUND
        assert error.retryable is False


class TestRequestError:
    """RequestError factory tests."""

    def test_given_malformed_request_when_created_then_details_kept(self) -> None:
        """Extra keyword details are carried through."""
        # Given / When
        error = RequestError.malformed("missing 'path'", method="hover")

        # Then
        assert error.code is ErrorCode.REQUEST_MALFORMED
        assert error.message == "Malformed request: missing 'path'"
        assert error.details == {"method": "hover"}

    def test_given_unknown_method_when_created_then_names_method(self) -> None:
        """unknown_method names the method."""
        error = RequestError.unknown_method("rename")
        assert error.details == {"method": "rename"}
        assert error.error_name == "REQUEST_UNKNOWN_METHOD"


class TestInternalError:
    """InternalError factory tests."""

    def test_given_unexpected_when_created_then_internal_code(self) -> None:
        """unexpected uses the internal error code."""
        error = InternalError.unexpected("state lost", where="serve")
        assert error.code is ErrorCode.INTERNAL_ERROR
        assert error.details == {"where": "serve"}
