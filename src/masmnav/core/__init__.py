"""Core module exports."""

from masmnav.core.errors import (
    ConfigError,
    ErrorCode,
    InternalError,
    MasmNavError,
    RequestError,
)
from masmnav.core.logging import (
    clear_request_id,
    configure_logging,
    get_logger,
    get_request_id,
    set_request_id,
)

__all__ = [
    # Errors
    "ConfigError",
    "ErrorCode",
    "InternalError",
    "MasmNavError",
    "RequestError",
    # Logging
    "clear_request_id",
    "configure_logging",
    "get_logger",
    "get_request_id",
    "set_request_id",
]
