"""Config module exports."""

from masmnav.config.loader import load_config
from masmnav.config.models import (
    LayoutConfig,
    LoggingConfig,
    MasmNavConfig,
    RegistryConfig,
)

__all__ = [
    "load_config",
    "LayoutConfig",
    "LoggingConfig",
    "MasmNavConfig",
    "RegistryConfig",
]
