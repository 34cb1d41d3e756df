"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (MASMNAV__SECTION__KEY)
3. Project YAML (.masmnav/config.yaml)
4. Global YAML (~/.config/masmnav/config.yaml)
5. Built-in defaults (this file)

Environment Variable Format:
    MASMNAV__<SECTION>__<KEY>=<VALUE>

Examples:
    MASMNAV__LOGGING__LEVEL=DEBUG
    MASMNAV__REGISTRY__ROOT=/opt/cargo
    MASMNAV__LAYOUT__MAX_ALIAS_DEPTH=8
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration.

    Env vars: Not directly configurable via env (use YAML for multi-output).
    """

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        MASMNAV__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="WARNING",
        description="Root log level. DEBUG traces every resolution decision.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class LayoutConfig(BaseModel):
    """On-disk layout conventions of Miden projects.

    Env vars:
        MASMNAV__LAYOUT__MAX_ROOT_DEPTH: Levels walked up looking for roots
        MASMNAV__LAYOUT__MAX_ALIAS_DEPTH: Levels walked up for $alias imports
    """

    module_extension: str = Field(
        default=".masm",
        description="File extension of assembly modules.",
    )
    module_index_file: str = Field(
        default="mod.masm",
        description="Index file of a directory-form module.",
    )
    library_dir: str = Field(
        default="asm",
        description="Directory holding a crate's assembly library sources.",
    )
    kernel_lib_dir: str = Field(
        default="lib",
        description="Sibling directory searched for $alias and bare imports.",
    )
    shared_modules_dir: str = Field(
        default="shared_modules",
        description="Directory copied into lib/ at build time, searched for $alias imports.",
    )
    crates_dir: str = Field(default="crates", description="Workspace directory holding crates.")
    build_script: str = Field(
        default="build.rs",
        description="Per-crate build script scanned for namespace declarations.",
    )
    workspace_manifest: str = Field(
        default="Cargo.toml",
        description="Manifest whose [workspace] table marks the workspace root.",
    )
    max_root_depth: int = Field(
        default=15,
        description="Maximum directory levels walked up looking for workspace/project roots.",
    )
    max_alias_depth: int = Field(
        default=5,
        description="Maximum directory levels walked up resolving $alias imports.",
    )

    @field_validator("module_extension")
    @classmethod
    def validate_extension(cls, v: str) -> str:
        if not v.startswith("."):
            raise ValueError(f"Extension must start with '.': {v}")
        return v

    @field_validator("max_root_depth", "max_alias_depth")
    @classmethod
    def validate_depth(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"Depth must be at least 1, got {v}")
        return v


class RegistryConfig(BaseModel):
    """External package registry configuration.

    Env vars:
        MASMNAV__REGISTRY__ROOT: Registry root, overrides $CARGO_HOME
        MASMNAV__REGISTRY__STDLIB_PACKAGE: Package that serves std:: imports
    """

    root: str | None = Field(
        default=None,
        description="Registry root. Default: $CARGO_HOME, else ~/.cargo.",
    )
    stdlib_package: str = Field(
        default="miden-stdlib",
        description="Package that serves std:: imports.",
    )
    external_namespaces: dict[str, str] = Field(
        default_factory=lambda: {"core": "miden-core-lib"},
        description="miden:: namespaces served only from the registry, mapped to their package.",
    )
    excluded_dir_keywords: list[str] = Field(
        default_factory=lambda: ["NOTE_SCRIPT", "ACCOUNT_COMPONENT"],
        description="ASM_*_DIR constants containing these denote executables, not libraries.",
    )


class MasmNavConfig(BaseModel):
    """Root configuration for masmnav.

    All settings can be configured via:
    1. Environment variables: MASMNAV__SECTION__KEY
    2. YAML config files (project or global)
    3. Direct kwargs to load_config()
    """

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    layout: LayoutConfig = Field(default_factory=LayoutConfig)
    registry: RegistryConfig = Field(default_factory=RegistryConfig)
