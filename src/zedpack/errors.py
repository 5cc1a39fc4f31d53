"""Typed pipeline error model with stable, machine-readable error codes."""

from __future__ import annotations

from collections.abc import Mapping
from enum import StrEnum
from typing import Literal

RelocateReason = Literal["missing_source", "copy_failed"]
InstallStep = Literal["mkdir", "copy_artifact", "copy_manifest"]


class ErrorCode(StrEnum):
    """Stable error identifiers used across API and CLI surfaces."""

    CONFIG = "E_CONFIG"
    TOOLCHAIN = "E_TOOLCHAIN"
    COMPILE = "E_COMPILE"
    RELOCATE = "E_RELOCATE"
    INSTALL = "E_INSTALL"
    CLEAN = "E_CLEAN"


class ZedpackError(Exception):
    """Base error class that carries code, stage, optional hint, and context."""

    code: str
    stage: str
    hint: str | None
    context: Mapping[str, str]

    def __init__(
        self,
        message: str,
        *,
        code: ErrorCode,
        stage: str,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code.value
        self.stage = stage
        self.hint = hint
        self.context = dict(context or {})

    @property
    def exit_code(self) -> int:
        return 1

    def __str__(self) -> str:
        parts = [super().__str__()]
        if self.hint:
            parts.append(f"Hint: {self.hint}")
        if self.context:
            for k, v in self.context.items():
                if v:
                    parts.append(f"  {k}: {v}")
        return "\n".join(parts)

    def to_dict(self) -> dict[str, object]:
        payload: dict[str, object] = {
            "code": self.code,
            "stage": self.stage,
            "message": self.message,
            "context": dict(self.context),
        }
        if self.hint is not None:
            payload["hint"] = self.hint
        return payload


class ConfigError(ZedpackError):
    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(
            message, code=ErrorCode.CONFIG, stage="config", hint=hint, context=context
        )

    @property
    def exit_code(self) -> int:
        return 2


class ExternalCommandError(ZedpackError):
    """Failure of an external tool; keeps its return code and captured output."""

    returncode: int
    diagnostics: str

    def __init__(
        self,
        message: str,
        *,
        code: ErrorCode,
        stage: str,
        returncode: int,
        diagnostics: str = "",
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        merged = {"returncode": str(returncode), **dict(context or {})}
        super().__init__(message, code=code, stage=stage, hint=hint, context=merged)
        self.returncode = returncode
        self.diagnostics = diagnostics

    @property
    def exit_code(self) -> int:
        return self.returncode if self.returncode > 0 else 1


class ToolchainError(ExternalCommandError):
    def __init__(
        self,
        message: str,
        *,
        returncode: int,
        diagnostics: str = "",
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(
            message,
            code=ErrorCode.TOOLCHAIN,
            stage="setup",
            returncode=returncode,
            diagnostics=diagnostics,
            hint=hint,
            context=context,
        )


class CompileError(ExternalCommandError):
    def __init__(
        self,
        message: str,
        *,
        returncode: int,
        diagnostics: str = "",
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(
            message,
            code=ErrorCode.COMPILE,
            stage="compile",
            returncode=returncode,
            diagnostics=diagnostics,
            hint=hint,
            context=context,
        )


class CleanError(ExternalCommandError):
    def __init__(
        self,
        message: str,
        *,
        returncode: int,
        diagnostics: str = "",
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(
            message,
            code=ErrorCode.CLEAN,
            stage="clean",
            returncode=returncode,
            diagnostics=diagnostics,
            hint=hint,
            context=context,
        )


class RelocateError(ZedpackError):
    reason: RelocateReason

    def __init__(
        self,
        message: str,
        *,
        reason: RelocateReason,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(
            message,
            code=ErrorCode.RELOCATE,
            stage="relocate",
            hint=hint,
            context={"reason": reason, **dict(context or {})},
        )
        self.reason = reason


class InstallError(ZedpackError):
    step: InstallStep

    def __init__(
        self,
        message: str,
        *,
        step: InstallStep,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(
            message,
            code=ErrorCode.INSTALL,
            stage="install",
            hint=hint,
            context={"step": step, **dict(context or {})},
        )
        self.step = step


__all__ = [
    "CleanError",
    "CompileError",
    "ConfigError",
    "ErrorCode",
    "ExternalCommandError",
    "InstallError",
    "InstallStep",
    "RelocateError",
    "RelocateReason",
    "ToolchainError",
    "ZedpackError",
]
