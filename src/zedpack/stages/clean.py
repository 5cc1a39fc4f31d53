"""Cleaner: drop the cargo build cache and the output artifact."""

from __future__ import annotations

from dataclasses import dataclass

from zedpack.config import BuildConfig
from zedpack.errors import CleanError
from zedpack.process import run_tool


@dataclass(slots=True)
class CargoCleaner:
    tool: str = "cargo"

    def clean(self, config: BuildConfig) -> bool:
        """Return True if an output artifact was removed."""
        argv: list[str] = [self.tool, "clean"]
        if not config.uses_default_target_dir:
            argv.extend(["--target-dir", str(config.cargo_target_dir)])
        result = run_tool(argv, cwd=config.project_dir)
        if not result.ok:
            raise CleanError(
                "cargo clean failed.",
                returncode=result.returncode,
                diagnostics=result.diagnostics,
                hint="Remove the build directory by hand if cargo cannot.",
                context={
                    "project_dir": str(config.project_dir),
                    "command": result.command,
                },
            )
        output = config.output_artifact
        existed = output.exists()
        try:
            output.unlink(missing_ok=True)
        except OSError as exc:
            raise CleanError(
                f"Failed to remove {output}.",
                returncode=1,
                diagnostics=exc.strerror or str(exc),
                context={"path": str(output)},
            ) from exc
        return existed
