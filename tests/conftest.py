"""Shared test fixtures: a fake rustup/cargo pair and a throwaway crate."""

from __future__ import annotations

import shutil
import subprocess
from dataclasses import dataclass, field
from pathlib import Path

import pytest

from zedpack.config import BuildConfig


@dataclass
class FakeToolchain:
    """Stands in for ``subprocess.run`` when zedpack invokes rustup or cargo."""

    installed: set[str] = field(default_factory=lambda: {"x86_64-unknown-linux-gnu"})
    artifact_bytes: bytes = b"\x00asm\x01\x00\x00\x00fake-module"
    emitted_name: str | None = None
    failures: dict[str, tuple[int, str]] = field(default_factory=dict)
    missing: set[str] = field(default_factory=set)
    calls: list[tuple[str, ...]] = field(default_factory=list)
    cwds: list[str | None] = field(default_factory=list)

    def __call__(self, argv: list[str], *, cwd: str | None = None, **_: object):
        command = tuple(argv)
        self.calls.append(command)
        self.cwds.append(cwd)
        tool = Path(command[0]).name
        if tool in self.missing:
            raise FileNotFoundError(2, "No such file or directory", command[0])
        line = " ".join((tool, *command[1:]))
        for prefix, (returncode, stderr) in self.failures.items():
            if line.startswith(prefix):
                return subprocess.CompletedProcess(command, returncode, "", stderr)
        if tool == "rustup":
            return self._rustup(command)
        if tool == "cargo":
            return self._cargo(command, Path(cwd or "."))
        raise AssertionError(f"unexpected command: {command}")

    def commands(self, prefix: tuple[str, ...]) -> list[tuple[str, ...]]:
        return [call for call in self.calls if call[: len(prefix)] == prefix]

    def _rustup(self, command: tuple[str, ...]):
        if command[1:] == ("target", "list", "--installed"):
            stdout = "".join(f"{target}\n" for target in sorted(self.installed))
            return subprocess.CompletedProcess(command, 0, stdout, "")
        if command[1:3] == ("target", "add"):
            self.installed.add(command[3])
            return subprocess.CompletedProcess(command, 0, "", f"info: installing {command[3]}\n")
        raise AssertionError(f"unexpected rustup command: {command}")

    def _cargo(self, command: tuple[str, ...], cwd: Path):
        target_dir = cwd / "target"
        if "--target-dir" in command:
            target_dir = cwd / command[command.index("--target-dir") + 1]
        if command[1] == "build":
            target = command[command.index("--target") + 1]
            release = target_dir / target / "release"
            release.mkdir(parents=True, exist_ok=True)
            name = self.emitted_name or _crate_name(cwd)
            (release / f"{name}.wasm").write_bytes(self.artifact_bytes)
            return subprocess.CompletedProcess(command, 0, "", "    Finished release\n")
        if command[1] == "clean":
            shutil.rmtree(target_dir, ignore_errors=True)
            return subprocess.CompletedProcess(command, 0, "", "")
        raise AssertionError(f"unexpected cargo command: {command}")


def _crate_name(cwd: Path) -> str:
    for line in (cwd / "Cargo.toml").read_text(encoding="utf-8").splitlines():
        if line.startswith("name"):
            return line.split("=", 1)[1].strip().strip('"').replace("-", "_")
    raise AssertionError("Cargo.toml without a name")


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "TARGET",
        "CRATE_NAME",
        "OUTPUT",
        "EXTENSION_ID",
        "MANIFEST",
        "PROJECT_DIR",
        "BUILD_ROOT",
        "EXTENSIONS_DIR",
        "ARTIFACT_EXTENSION",
        "CARGO",
        "RUSTUP",
        "LOCKED",
    ):
        monkeypatch.delenv(f"ZEDPACK_{name}", raising=False)


@pytest.fixture
def toolchain(monkeypatch: pytest.MonkeyPatch) -> FakeToolchain:
    fake = FakeToolchain()
    monkeypatch.setattr("zedpack.process.subprocess.run", fake)
    return fake


@pytest.fixture
def project(tmp_path: Path) -> Path:
    crate = tmp_path / "lx-zed"
    (crate / "src").mkdir(parents=True)
    (crate / "Cargo.toml").write_text(
        '[package]\nname = "lx-zed"\nversion = "0.1.0"\n\n[lib]\ncrate-type = ["cdylib"]\n',
        encoding="utf-8",
    )
    (crate / "src" / "lib.rs").write_text("// extension\n", encoding="utf-8")
    (crate / "extension.toml").write_text(
        'id = "lx"\nname = "LX"\nversion = "0.1.0"\nschema_version = 1\n',
        encoding="utf-8",
    )
    return crate


@pytest.fixture
def extensions_dir(tmp_path: Path) -> Path:
    return tmp_path / "home" / "Library" / "Application Support" / "Zed" / "extensions" / "installed"


@pytest.fixture
def config(project: Path, extensions_dir: Path) -> BuildConfig:
    return BuildConfig(project_dir=project, extensions_dir=extensions_dir)
