"""Typed values handed from one pipeline stage to the next."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from zedpack.config import BuildConfig


@dataclass(frozen=True, slots=True)
class BuildArtifact:
    """Raw compiler output; its path depends on target and crate name."""

    target: str
    path: Path


@dataclass(frozen=True, slots=True)
class OutputArtifact:
    """Stable-named copy of the build artifact, independent of the target."""

    path: Path


@dataclass(frozen=True, slots=True)
class InstalledExtension:
    directory: Path
    artifact_path: Path
    manifest_path: Path


class Compiler(Protocol):
    def compile(self, config: BuildConfig) -> BuildArtifact:
        """Compile the crate and return where the raw artifact is expected."""


class Provisioner(Protocol):
    def ensure(self, target: str, *, cwd: Path | None = None) -> bool:
        """Make *target* available; return True when something was installed."""
