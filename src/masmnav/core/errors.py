"""masmnav error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 3xxx: Request (serve protocol)
- 9xxx: Internal

Resolution itself never raises: missing files, unmatched symbols and
cyclic re-exports all surface as ``None``. These errors belong to the
layers around it (configuration loading, the ``serve`` loop, the CLI).
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002
    CONFIG_FILE_NOT_FOUND = 2004

    # Request (3xxx)
    REQUEST_MALFORMED = 3001
    REQUEST_UNKNOWN_METHOD = 3002

    # Internal (9xxx)
    INTERNAL_ERROR = 9001


@dataclass(frozen=True, slots=True)
class MasmNavError(Exception):
    """Base error with structured context for JSON responses."""

    code: ErrorCode
    message: str
    retryable: bool = False
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'CONFIG_PARSE_ERROR')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON responses."""
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "retryable": self.retryable,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(MasmNavError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )

    @classmethod
    def file_not_found(cls, path: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_FILE_NOT_FOUND,
            message=f"Config path not found: {path}",
            details={"path": path},
        )


class RequestError(MasmNavError):
    """Errors in requests received by the serve loop."""

    @classmethod
    def malformed(cls, reason: str, **details: Any) -> "RequestError":
        return cls(
            code=ErrorCode.REQUEST_MALFORMED,
            message=f"Malformed request: {reason}",
            details=details,
        )

    @classmethod
    def unknown_method(cls, method: str) -> "RequestError":
        return cls(
            code=ErrorCode.REQUEST_UNKNOWN_METHOD,
            message=f"Unknown method: {method}",
            details={"method": method},
        )


class InternalError(MasmNavError):
    """Internal/unexpected errors."""

    @classmethod
    def unexpected(cls, reason: str, **details: Any) -> "InternalError":
        return cls(
            code=ErrorCode.INTERNAL_ERROR,
            message=f"Internal error: {reason}",
            details=details,
        )
