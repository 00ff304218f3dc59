"""Error taxonomy for the verification pipeline.

Every failure carries the pipeline ``stage`` it came from and a stable
``code`` so the CLI can report them uniformly:

    fetch failed [NOT_FOUND]: no verified source for 0x1234...
"""

from __future__ import annotations

from enum import Enum


# ── Error Codes ──────────────────────────────────────────────────────────────


class ErrorCode(str, Enum):
    """Stable identifiers for each failure kind."""

    # Metadata fetcher
    NOT_FOUND = "NOT_FOUND"
    TRANSPORT_ERROR = "TRANSPORT_ERROR"
    PROVIDER_ERROR = "PROVIDER_ERROR"

    # Version resolver
    MALFORMED_VERSION = "MALFORMED_VERSION"

    # Source normalizer
    MALFORMED_STANDARD_INPUT = "MALFORMED_STANDARD_INPUT"
    UNKNOWN_EVM_VERSION = "UNKNOWN_EVM_VERSION"

    # Toolchain
    TOOLCHAIN_ACQUISITION_ERROR = "TOOLCHAIN_ACQUISITION_ERROR"
    COMPILATION_FAILURE = "COMPILATION_FAILURE"


class Stage(str, Enum):
    """Pipeline stage an error originated in."""

    FETCH = "fetch"
    RESOLVE = "resolve"
    NORMALIZE = "normalize"
    ACQUIRE = "acquire"
    COMPILE = "compile"


# ── Exceptions ───────────────────────────────────────────────────────────────


class VerificationError(Exception):
    """Base class for every error raised by the pipeline."""

    stage: Stage
    code: ErrorCode

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def describe(self) -> str:
        return f"{self.stage.value} failed [{self.code.value}]: {self.message}"


class NotFound(VerificationError):
    """The explorer has no verified source for the address."""

    stage = Stage.FETCH
    code = ErrorCode.NOT_FOUND


class TransportError(VerificationError):
    """The HTTP call failed or its body could not be decoded."""

    stage = Stage.FETCH
    code = ErrorCode.TRANSPORT_ERROR


class ProviderError(VerificationError):
    """The explorer answered, but its status fields report a failure."""

    stage = Stage.FETCH
    code = ErrorCode.PROVIDER_ERROR


class MalformedVersion(VerificationError):
    stage = Stage.RESOLVE
    code = ErrorCode.MALFORMED_VERSION


class MalformedStandardInput(VerificationError):
    stage = Stage.NORMALIZE
    code = ErrorCode.MALFORMED_STANDARD_INPUT


class UnknownEvmVersion(VerificationError):
    stage = Stage.NORMALIZE
    code = ErrorCode.UNKNOWN_EVM_VERSION


class ToolchainAcquisitionError(VerificationError):
    stage = Stage.ACQUIRE
    code = ErrorCode.TOOLCHAIN_ACQUISITION_ERROR


class CompilationFailure(VerificationError):
    """solc ran but reported errors for the input."""

    stage = Stage.COMPILE
    code = ErrorCode.COMPILATION_FAILURE

    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or []
