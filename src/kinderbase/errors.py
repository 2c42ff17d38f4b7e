"""Typed build error model with stable, machine-readable error codes."""

from __future__ import annotations

from collections.abc import Mapping
from enum import StrEnum


class ErrorCode(StrEnum):
    """Stable error identifiers used across API surfaces."""

    ENVIRONMENT = "E_ENVIRONMENT"
    SOURCE_LOCATION = "E_SOURCE_LOCATION"
    COPY = "E_COPY"
    COMPILE = "E_COMPILE"
    IMAGE_BUILD = "E_IMAGE_BUILD"
    COMMAND = "E_COMMAND"


class BuildStep(StrEnum):
    """Pipeline step that produced a failure."""

    STAGING = "staging"
    COMPILE = "compile"
    IMAGE_BUILD = "image-build"


class KinderBaseError(Exception):
    """Base error class that carries code, failing step, optional hint, and context."""

    code: str
    step: BuildStep | None
    hint: str | None
    context: Mapping[str, str]

    def __init__(
        self,
        message: str,
        *,
        code: ErrorCode,
        step: BuildStep | None = None,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code.value
        self.step = step
        self.hint = hint
        self.context = dict(context or {})

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
            "message": str(self),
            "context": dict(self.context),
        }
        if self.step is not None:
            payload["step"] = self.step.value
        if self.hint is not None:
            payload["hint"] = self.hint
        return payload


class BuildEnvironmentError(KinderBaseError):
    """The working directory could not be allocated."""

    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(
            message,
            code=ErrorCode.ENVIRONMENT,
            step=BuildStep.STAGING,
            hint=hint,
            context=context,
        )


class SourceLocationError(KinderBaseError):
    """The image sources could not be auto-detected."""

    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(
            message,
            code=ErrorCode.SOURCE_LOCATION,
            step=BuildStep.STAGING,
            hint=hint,
            context=context,
        )


class CopyError(KinderBaseError):
    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(
            message,
            code=ErrorCode.COPY,
            step=BuildStep.STAGING,
            hint=hint,
            context=context,
        )


class CommandError(KinderBaseError):
    """An external program could not be started or exited non-zero.

    ``returncode`` is ``None`` when the program never started.
    """

    argv: tuple[str, ...]
    returncode: int | None
    output: str

    def __init__(
        self,
        message: str,
        *,
        argv: tuple[str, ...],
        returncode: int | None,
        output: str = "",
        hint: str | None = None,
    ) -> None:
        super().__init__(
            message,
            code=ErrorCode.COMMAND,
            hint=hint,
            context={
                "command": " ".join(argv),
                "returncode": "" if returncode is None else str(returncode),
            },
        )
        self.argv = argv
        self.returncode = returncode
        self.output = output


class _ToolStepError(KinderBaseError):
    returncode: int | None
    output: str

    def __init__(
        self,
        message: str,
        *,
        code: ErrorCode,
        step: BuildStep,
        returncode: int | None,
        output: str = "",
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message, code=code, step=step, hint=hint, context=context)
        self.returncode = returncode
        self.output = output


class CompileError(_ToolStepError):
    def __init__(
        self,
        message: str,
        *,
        returncode: int | None,
        output: str = "",
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(
            message,
            code=ErrorCode.COMPILE,
            step=BuildStep.COMPILE,
            returncode=returncode,
            output=output,
            hint=hint,
            context=context,
        )


class ImageBuildError(_ToolStepError):
    def __init__(
        self,
        message: str,
        *,
        returncode: int | None,
        output: str = "",
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(
            message,
            code=ErrorCode.IMAGE_BUILD,
            step=BuildStep.IMAGE_BUILD,
            returncode=returncode,
            output=output,
            hint=hint,
            context=context,
        )


__all__ = [
    "BuildEnvironmentError",
    "BuildStep",
    "CommandError",
    "CompileError",
    "CopyError",
    "ErrorCode",
    "ImageBuildError",
    "KinderBaseError",
    "SourceLocationError",
]
