"""Public package entrypoint for the zedpack extension build pipeline."""

from .config import BuildConfig, default_extensions_dir, load_config
from .errors import (
    CleanError,
    CompileError,
    ConfigError,
    ErrorCode,
    InstallError,
    RelocateError,
    ToolchainError,
    ZedpackError,
)
from .observability import StructuredLogger
from .pipeline import Pipeline
from .report import BuildReport

__all__ = [
    "BuildConfig",
    "BuildReport",
    "CleanError",
    "CompileError",
    "ConfigError",
    "ErrorCode",
    "InstallError",
    "Pipeline",
    "RelocateError",
    "StructuredLogger",
    "ToolchainError",
    "ZedpackError",
    "default_extensions_dir",
    "load_config",
]
