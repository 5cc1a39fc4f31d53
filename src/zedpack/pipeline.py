"""Pipeline driver: setup, build, install and clean as explicit call chains.

``install`` calls ``build``, which calls ``setup``; the first stage error
propagates and no later stage runs. ``clean`` stands alone. Nothing here
retries: every failure cause is deterministic for unchanged inputs.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field

from zedpack.config import BuildConfig
from zedpack.errors import ZedpackError
from zedpack.observability import StructuredLogger
from zedpack.report import BuildReport
from zedpack.stages import (
    CargoCleaner,
    CargoCompiler,
    Compiler,
    Provisioner,
    RustupProvisioner,
    install,
    relocate,
)


@dataclass(slots=True)
class Pipeline:
    config: BuildConfig
    logger: StructuredLogger = field(default_factory=StructuredLogger)
    provisioner: Provisioner | None = None
    compiler: Compiler | None = None
    cleaner: CargoCleaner | None = None

    def __post_init__(self) -> None:
        if self.provisioner is None:
            self.provisioner = RustupProvisioner(tool=self.config.rustup)
        if self.compiler is None:
            self.compiler = CargoCompiler(tool=self.config.cargo)
        if self.cleaner is None:
            self.cleaner = CargoCleaner(tool=self.config.cargo)

    def setup(self) -> None:
        target = self.config.target
        self._log("setup", "setup", f"Installing Rust target {target}...")
        with self._stage("setup", "setup"):
            added = self.provisioner.ensure(target, cwd=self.config.project_dir)
        message = f"Added target {target}." if added else f"Target {target} already installed."
        self._log("setup", "setup", message)

    def build(self) -> BuildReport:
        self.setup()

        self._log("build", "compile", "Building extension...")
        with self._stage("build", "compile"):
            build_artifact = self.compiler.compile(self.config)

        destination = self.config.output_artifact
        self._log("build", "relocate", f"Copying binary to {destination}...")
        with self._stage("build", "relocate"):
            output = relocate(build_artifact, destination)
            report = BuildReport.from_build(self.config, build_artifact, output)

        self._log(
            "build",
            "relocate",
            f"Build complete: {output.path}",
            extra={"sha256": report.sha256, "size": report.size},
        )
        return report

    def install(self) -> BuildReport:
        report = self.build()

        target_dir = self.config.install_dir
        self._log("install", "install", f"Installing to {target_dir}...")
        with self._stage("install", "install"):
            installed = install(
                report.output_artifact,
                self.config.manifest_path,
                target_dir,
            )
        self._log("install", "install", "Installed! Restart the editor to reload.")
        return report.with_install(installed)

    def clean(self) -> None:
        self._log("clean", "clean", "Cleaning...")
        with self._stage("clean", "clean"):
            removed = self.cleaner.clean(self.config)
        if removed:
            self._log("clean", "clean", f"Removed {self.config.output_artifact}.")

    @contextmanager
    def _stage(self, operation: str, stage: str) -> Iterator[None]:
        """Record a failing stage in the log, then let the error propagate."""
        try:
            yield
        except ZedpackError as exc:
            self.logger.log(
                operation=operation,
                stage=stage,
                message=exc.message,
                level="error",
                extra={"code": exc.code, "context": dict(exc.context)},
            )
            raise

    def _log(
        self,
        operation: str,
        stage: str,
        message: str,
        *,
        extra: dict[str, object] | None = None,
    ) -> None:
        self.logger.log(operation=operation, stage=stage, message=message, extra=extra)
