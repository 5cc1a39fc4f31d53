"""Cargo compiler stage."""

from __future__ import annotations

from dataclasses import dataclass

from zedpack.config import BuildConfig
from zedpack.errors import CompileError
from zedpack.process import run_tool
from zedpack.stages.base import BuildArtifact


@dataclass(slots=True)
class CargoCompiler:
    tool: str = "cargo"

    def command(self, config: BuildConfig) -> tuple[str, ...]:
        flags: list[str] = []
        if config.locked:
            flags.append("--locked")
        if not config.uses_default_target_dir:
            flags.extend(["--target-dir", str(config.cargo_target_dir)])
        return (self.tool, "build", "--release", "--target", config.target, *flags)

    def compile(self, config: BuildConfig) -> BuildArtifact:
        """Run a release build for the configured target.

        The returned path is computed, not checked; the relocation stage owns
        the existence check.
        """
        result = run_tool(self.command(config), cwd=config.project_dir)
        if not result.ok:
            hint = "Fix the compiler errors above and rebuild."
            if result.not_found:
                hint = "Install the Rust toolchain (https://rustup.rs) and make sure cargo is on PATH."
            raise CompileError(
                f"cargo build failed for target `{config.target}`.",
                returncode=result.returncode,
                diagnostics=result.diagnostics,
                hint=hint,
                context={
                    "target": config.target,
                    "project_dir": str(config.project_dir),
                    "command": result.command,
                },
            )
        return BuildArtifact(target=config.target, path=config.build_artifact)
