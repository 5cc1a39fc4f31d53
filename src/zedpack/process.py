"""Blocking execution of the external toolchain commands."""

from __future__ import annotations

import shlex
import subprocess
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

COMMAND_NOT_FOUND = 127


@dataclass(frozen=True, slots=True)
class ToolResult:
    argv: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def command(self) -> str:
        return shlex.join(self.argv)

    @property
    def diagnostics(self) -> str:
        """Captured output to show on failure: stderr, then any stdout."""
        streams = (self.stderr.rstrip("\n"), self.stdout.rstrip("\n"))
        return "\n".join(stream for stream in streams if stream)

    @property
    def not_found(self) -> bool:
        return self.returncode == COMMAND_NOT_FOUND and not self.stdout


def run_tool(argv: Sequence[str], *, cwd: Path | None = None) -> ToolResult:
    """Run *argv* to completion, capturing output; never raises on exit status.

    There is no timeout: a hung tool blocks the caller indefinitely.
    """
    command = tuple(argv)
    try:
        completed = subprocess.run(
            list(command),
            cwd=str(cwd) if cwd is not None else None,
            capture_output=True,
            text=True,
            check=False,
        )
    except FileNotFoundError as exc:
        return ToolResult(
            argv=command,
            returncode=COMMAND_NOT_FOUND,
            stdout="",
            stderr=f"{exc.filename or command[0]}: {exc.strerror or 'not found'}",
        )
    return ToolResult(
        argv=command,
        returncode=completed.returncode,
        stdout=completed.stdout or "",
        stderr=completed.stderr or "",
    )
