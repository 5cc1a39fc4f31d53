"""Build configuration: defaults, environment overrides, and validation."""

from __future__ import annotations

import os
import sys
from collections.abc import Mapping
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

from zedpack.errors import ConfigError

DEFAULT_TARGET = "wasm32-wasip1"
DEFAULT_CRATE_NAME = "lx_zed"
DEFAULT_OUTPUT_FILENAME = "extension.wasm"
DEFAULT_EXTENSION_ID = "lx"
DEFAULT_MANIFEST_FILENAME = "extension.toml"
DEFAULT_ARTIFACT_EXTENSION = "wasm"

ENV_PREFIX = "ZEDPACK_"

_ENV_FIELDS = {
    "TARGET": "target",
    "CRATE_NAME": "crate_name",
    "OUTPUT": "output_filename",
    "EXTENSION_ID": "extension_id",
    "MANIFEST": "manifest_filename",
    "PROJECT_DIR": "project_dir",
    "BUILD_ROOT": "build_root",
    "EXTENSIONS_DIR": "extensions_dir",
    "ARTIFACT_EXTENSION": "artifact_extension",
    "CARGO": "cargo",
    "RUSTUP": "rustup",
    "LOCKED": "locked",
}
_PATH_FIELDS = frozenset({"project_dir", "build_root", "extensions_dir"})
_TRUE = frozenset({"1", "true", "yes", "on"})
_FALSE = frozenset({"0", "false", "no", "off", ""})


@dataclass(frozen=True, slots=True)
class BuildConfig:
    target: str = DEFAULT_TARGET
    crate_name: str = DEFAULT_CRATE_NAME
    output_filename: str = DEFAULT_OUTPUT_FILENAME
    extension_id: str = DEFAULT_EXTENSION_ID
    manifest_filename: str = DEFAULT_MANIFEST_FILENAME
    project_dir: Path = Path(".")
    build_root: Path | None = None
    extensions_dir: Path | None = None
    artifact_extension: str = DEFAULT_ARTIFACT_EXTENSION
    cargo: str = "cargo"
    rustup: str = "rustup"
    locked: bool = False

    def __post_init__(self) -> None:
        # cargo writes library artifacts with underscores regardless of the
        # package name, so `lx-zed` would never match on disk.
        object.__setattr__(self, "crate_name", self.crate_name.replace("-", "_"))
        object.__setattr__(self, "project_dir", Path(self.project_dir))
        if self.build_root is not None:
            # cargo runs inside project_dir, so a relative build root means
            # project_dir/build_root; keep it absolute for --target-dir.
            build_root = (self.project_dir / self.build_root).absolute()
            object.__setattr__(self, "build_root", build_root)
        if self.extensions_dir is not None:
            object.__setattr__(self, "extensions_dir", Path(self.extensions_dir))
        self._validate()

    @property
    def cargo_target_dir(self) -> Path:
        if self.build_root is not None:
            return self.build_root
        return self.project_dir / "target"

    @property
    def uses_default_target_dir(self) -> bool:
        return self.build_root is None

    @property
    def build_artifact(self) -> Path:
        """Where cargo leaves the raw module for this target and crate."""
        return (
            self.cargo_target_dir
            / self.target
            / "release"
            / f"{self.crate_name}.{self.artifact_extension}"
        )

    @property
    def output_artifact(self) -> Path:
        return self.project_dir / self.output_filename

    @property
    def manifest_path(self) -> Path:
        return self.project_dir / self.manifest_filename

    @property
    def install_dir(self) -> Path:
        base = self.extensions_dir or default_extensions_dir()
        return base / self.extension_id

    def to_dict(self) -> dict[str, str]:
        payload: dict[str, str] = {}
        for item in fields(self):
            value = getattr(self, item.name)
            payload[item.name] = "" if value is None else str(value)
        return payload

    def _validate(self) -> None:
        _require_token("target", self.target, hint="Use a rustup target such as wasm32-wasip1.")
        _require_token("crate_name", self.crate_name, hint="Use the crate's [lib] name.")
        _require_token(
            "artifact_extension",
            self.artifact_extension,
            hint="Use the bare extension, for example `wasm`.",
        )
        if self.artifact_extension.startswith("."):
            raise ConfigError(
                "artifact_extension must not start with a dot.",
                hint="Use `wasm`, not `.wasm`.",
                context={"field": "artifact_extension", "value": self.artifact_extension},
            )
        for name in ("output_filename", "manifest_filename", "extension_id"):
            _require_filename(name, getattr(self, name))
        for name in ("cargo", "rustup"):
            if not getattr(self, name):
                raise ConfigError(
                    f"{name} executable must not be empty.",
                    context={"field": name},
                )


def default_extensions_dir(
    *,
    platform: str | None = None,
    env: Mapping[str, str] | None = None,
    home: Path | None = None,
) -> Path:
    """Return the host editor's installed-extensions directory for this platform."""
    platform = platform or sys.platform
    env = os.environ if env is None else env
    home = home or Path.home()
    if platform == "darwin":
        return home / "Library" / "Application Support" / "Zed" / "extensions" / "installed"
    if platform.startswith("win"):
        local = env.get("LOCALAPPDATA")
        base = Path(local) if local else home / "AppData" / "Local"
        return base / "Zed" / "extensions" / "installed"
    data_home = env.get("XDG_DATA_HOME")
    base = Path(data_home) if data_home else home / ".local" / "share"
    return base / "zed" / "extensions" / "installed"


def load_config(
    overrides: Mapping[str, Any] | None = None,
    *,
    env: Mapping[str, str] | None = None,
) -> BuildConfig:
    """Build the one configuration for a run: defaults < environment < overrides."""
    env = os.environ if env is None else env
    values: dict[str, Any] = {}
    for suffix, name in _ENV_FIELDS.items():
        raw = env.get(ENV_PREFIX + suffix)
        if raw is None:
            continue
        values[name] = _coerce(name, raw, source=ENV_PREFIX + suffix)
    for name, value in (overrides or {}).items():
        if value is None:
            continue
        if name not in _ENV_FIELDS.values():
            raise ConfigError(
                f"Unknown configuration field `{name}`.",
                context={"field": name},
            )
        values[name] = value
    return BuildConfig(**values)


def _coerce(name: str, raw: str, *, source: str) -> Any:
    if name == "locked":
        lowered = raw.strip().lower()
        if lowered in _TRUE:
            return True
        if lowered in _FALSE:
            return False
        raise ConfigError(
            f"Invalid boolean value for {source}.",
            hint="Use one of 1/0, true/false, yes/no, on/off.",
            context={"variable": source, "value": raw},
        )
    if name in _PATH_FIELDS:
        return Path(raw).expanduser()
    return raw


def _require_token(name: str, value: str, *, hint: str) -> None:
    if not value or any(ch.isspace() for ch in value):
        raise ConfigError(
            f"{name} must be a non-empty string without whitespace.",
            hint=hint,
            context={"field": name, "value": value},
        )


def _require_filename(name: str, value: str) -> None:
    if not value or value in {".", ".."} or "/" in value or "\\" in value:
        raise ConfigError(
            f"{name} must be a plain file or directory name.",
            hint="Path separators are not allowed here.",
            context={"field": name, "value": value},
        )


__all__ = [
    "BuildConfig",
    "DEFAULT_CRATE_NAME",
    "DEFAULT_EXTENSION_ID",
    "DEFAULT_MANIFEST_FILENAME",
    "DEFAULT_OUTPUT_FILENAME",
    "DEFAULT_TARGET",
    "default_extensions_dir",
    "load_config",
]
