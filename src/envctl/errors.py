"""Error taxonomy for envctl.

Every failure the engine can hit is an EnvctlError carrying the exit code the
CLI should use. Library code raises; only the CLI turns these into a process
exit.
"""

from __future__ import annotations


class EnvctlError(Exception):
    """Base class for fatal envctl errors."""

    exit_code = 1

    def __init__(self, message: str, exit_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if exit_code is not None:
            self.exit_code = exit_code


class EnvFileNotFoundError(EnvctlError):
    """The env file does not exist and neither --init nor --write was given."""


class EnvFileEmptyError(EnvctlError):
    """The env file exists but has no content."""


class EnvFileAccessError(EnvctlError):
    """The env file could not be read (permission, directory, I/O)."""


class EnvFileWriteError(EnvctlError):
    """Writing the env file or one of its exports failed."""


class ProductionProtectedError(EnvctlError):
    """A write was attempted against a protected production file."""


class FormatConflictError(EnvctlError):
    """More than one non-plain export format was requested."""


class SanityError(EnvctlError):
    """The engine was handed a missing options or settings value."""


class MissingVariableError(EnvctlError):
    """A required environment variable is not set."""
