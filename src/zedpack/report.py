"""Build report model and export."""

from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass, field, replace
from pathlib import Path

import cbor2

from zedpack.config import BuildConfig
from zedpack.stages.base import BuildArtifact, InstalledExtension, OutputArtifact


@dataclass(frozen=True, slots=True)
class BuildReport:
    config: dict[str, str]
    build_artifact: Path
    output_artifact: Path
    sha256: str
    size: int
    installed: dict[str, str] = field(default_factory=dict)
    schema_version: int = 1

    @classmethod
    def from_build(
        cls,
        config: BuildConfig,
        build_artifact: BuildArtifact,
        output: OutputArtifact,
    ) -> BuildReport:
        payload = output.path.read_bytes()
        return cls(
            config=config.to_dict(),
            build_artifact=build_artifact.path,
            output_artifact=output.path,
            sha256=hashlib.sha256(payload).hexdigest(),
            size=len(payload),
        )

    def with_install(self, installed: InstalledExtension) -> BuildReport:
        return replace(
            self,
            installed={
                "directory": str(installed.directory),
                "artifact": str(installed.artifact_path),
                "manifest": str(installed.manifest_path),
            },
        )

    def to_json(self, path: str | Path | None = None) -> str:
        encoded = json.dumps(self._payload(), indent=2, sort_keys=True) + "\n"
        if path is not None:
            _write(Path(path), encoded.encode("utf-8"))
        return encoded

    def to_cbor(self, path: str | Path | None = None) -> bytes:
        encoded = cbor2.dumps(self._payload(), canonical=True)
        if path is not None:
            _write(Path(path), encoded)
        return encoded

    def write(self, path: str | Path) -> Path:
        """Write JSON, or canonical CBOR when *path* ends in ``.cbor``."""
        report_path = Path(path)
        if report_path.suffix == ".cbor":
            self.to_cbor(report_path)
        else:
            self.to_json(report_path)
        return report_path

    def _payload(self) -> dict[str, object]:
        return {
            "schema_version": self.schema_version,
            "config": dict(sorted(self.config.items())),
            "build_artifact": str(self.build_artifact),
            "output_artifact": str(self.output_artifact),
            "sha256": self.sha256,
            "size": self.size,
            "installed": dict(sorted(self.installed.items())),
        }


def _write(path: Path, data: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)
