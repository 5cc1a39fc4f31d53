"""Toolchain target provisioning through rustup."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from zedpack.errors import ToolchainError
from zedpack.process import ToolResult, run_tool


@dataclass(slots=True)
class RustupProvisioner:
    tool: str = "rustup"

    def ensure(self, target: str, *, cwd: Path | None = None) -> bool:
        """Add *target* unless rustup already lists it as installed.

        *cwd* should be the crate directory so a `rust-toolchain.toml` there
        selects the toolchain that cargo will later build with. Returns True
        when the target was added by this call.
        """
        if target in self.installed_targets(cwd=cwd):
            return False
        result = run_tool((self.tool, "target", "add", target), cwd=cwd)
        if not result.ok:
            raise _toolchain_error(
                f"Failed to add toolchain target `{target}`.",
                result,
                target=target,
                hint="Check the target name and network access, then rerun setup.",
            )
        return True

    def installed_targets(self, *, cwd: Path | None = None) -> frozenset[str]:
        result = run_tool((self.tool, "target", "list", "--installed"), cwd=cwd)
        if not result.ok:
            raise _toolchain_error(
                "Failed to list installed toolchain targets.",
                result,
                target="",
                hint="Ensure rustup is installed and a default toolchain is configured.",
            )
        return frozenset(line.strip() for line in result.stdout.splitlines() if line.strip())


def _toolchain_error(message: str, result: ToolResult, *, target: str, hint: str) -> ToolchainError:
    if result.not_found:
        hint = "Install rustup (https://rustup.rs) and make sure it is on PATH."
    return ToolchainError(
        message,
        returncode=result.returncode,
        diagnostics=result.diagnostics,
        hint=hint,
        context={"target": target, "command": result.command},
    )
